"""Customer account request and response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class CustomerRegisterRequest(BaseModel):
    """Registration payload; field checks are done by the endpoint so they surface as 400."""

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    password: str | None = None
    ward: str | None = None
    district: str | None = None
    street: str | None = None
    house_number: str | None = None
    building_name: str | None = None
    block: str | None = None
    floor: str | None = None
    room_number: str | None = None


class CustomerSignInRequest(BaseModel):
    email: str
    password: str


class AddressUpdateRequest(BaseModel):
    ward: str | None = None
    district: str | None = None
    street: str | None = None
    house_number: str | None = None
    building_name: str | None = None
    block: str | None = None
    floor: str | None = None
    room_number: str | None = None


class InformationUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str


class CustomerResponse(BaseModel):
    """Public view of a customer account."""

    id: int
    name: str
    first_name: str
    last_name: str
    phone: str
    email: str
    loyalty_points: int
    address: dict[str, Any] | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CustomerTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    customer: CustomerResponse


class MessageResponse(BaseModel):
    message: str
