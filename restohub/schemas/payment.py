"""Payment request and response schemas."""

from pydantic import BaseModel


class PaymentCreate(BaseModel):
    order_id: int
    payment_method: str


class PaymentCreateResponse(BaseModel):
    order_id: int
    payment_method: str
    payment_url: str
