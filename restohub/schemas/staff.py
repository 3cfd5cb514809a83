"""Staff and payroll schemas."""

from pydantic import BaseModel, ConfigDict


class StaffLoginRequest(BaseModel):
    email: str
    password: str


class StaffCreate(BaseModel):
    name: str
    email: str
    password: str
    role: str
    phone: str | None = None
    pay_rate: int | None = None


class StaffUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None
    phone: str | None = None
    pay_rate: int | None = None


class StaffResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    phone: str | None = None
    pay_rate: int | None = None

    model_config = ConfigDict(from_attributes=True)


class StaffTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    staff: StaffResponse


class SalaryResponse(BaseModel):
    """Monthly pay: working shifts x 8 hours x hourly rate."""

    staff_id: int
    name: str
    role: str
    month: int
    year: int
    pay_rate: int
    working_shifts: int
    working_hours: int
    total_pay: int
