"""Order API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class OrderLinePayload(BaseModel):
    """Single order line."""

    recipe_id: int
    quantity: int = Field(default=1, ge=1)


class GuestOrderCreate(BaseModel):
    """Order placed without an account, identified by phone number."""

    guest_contact: str
    items: list[OrderLinePayload] = Field(min_length=1)
    delivery_address: str
    delivery_distance: float = 0
    delivery_charge: int = Field(default=0, ge=0)
    payment_method: str | None = None


class CustomerOrderCreate(BaseModel):
    """Order placed by a signed-in customer."""

    items: list[OrderLinePayload] = Field(min_length=1)
    delivery_address: str
    delivery_distance: float = 0
    delivery_charge: int = Field(default=0, ge=0)
    payment_method: str | None = None
    loyalty_points_used: int = Field(default=0, ge=0)


class OrderIdPayload(BaseModel):
    order_id: int


class OrderItemResponse(BaseModel):
    recipe_id: int
    recipe_name: str | None = None
    quantity: int
    price: int | None = None
    image_url: str | None = None


class OrderResponse(BaseModel):
    """Serialized order with its line items."""

    id: int
    customer_id: int
    customer_name: str | None = None
    total_amount: int
    status: str
    payment_method: str
    payment_status: str
    payment_transaction_id: str | None = None
    delivery_address: str | None = None
    delivery_distance: float | None = None
    delivery_charge: int = 0
    loyalty_points_used: int = 0
    sale_time: datetime
    completion_time: datetime | None = None
    items: list[OrderItemResponse] = []


class OrderStatusResponse(BaseModel):
    order_id: int
    status: str
    changed: bool = True
    message: str


class OrderCompletionResponse(BaseModel):
    order_id: int
    status: str
    loyalty_points_earned: int
    loyalty_points: int | None = None


class RevenueEntry(BaseModel):
    date_recorded: date
    total_revenue: int
    order_count: int


class FavoriteMealResponse(BaseModel):
    recipe_id: int
    recipe_name: str
    price: int
    image_url: str | None = None
    total_ordered: int
    times_ordered: int


class DailyOrderCount(BaseModel):
    day: int
    count: int


class DailySalesResponse(BaseModel):
    year: int
    month: int
    days: list[DailyOrderCount]
