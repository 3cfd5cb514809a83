"""Order endpoints: guest checkout, customer orders and the staff workflow."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from restohub.core.security import (
    CustomerPrincipal,
    Principal,
    get_current_customer,
    get_current_principal,
    get_current_staff,
)
from restohub.db.session import get_db
from restohub.models import Customer, Sale, Staff
from restohub.schemas.order import (
    CustomerOrderCreate,
    FavoriteMealResponse,
    GuestOrderCreate,
    OrderCompletionResponse,
    OrderIdPayload,
    OrderItemResponse,
    OrderResponse,
    OrderStatusResponse,
    RevenueEntry,
)
from restohub.services import order_service, order_status
from restohub.services.customer_service import CustomerValidationError, validate_phone
from restohub.services.order_service import (
    LoyaltyRedemptionError,
    OrderLine,
    RecipeNotFoundError,
    RecipeUnavailableError,
)
from restohub.services.order_status import (
    OrderNotFoundError,
    OrderStateConflictError,
    UnadvanceableStatusError,
)

router: APIRouter = APIRouter()


def _serialize_order(order: Sale) -> OrderResponse:
    items: list[OrderItemResponse] = [
        OrderItemResponse(
            recipe_id=item.recipe_id,
            recipe_name=item.recipe.name if item.recipe else None,
            quantity=item.quantity,
            price=item.recipe.price if item.recipe else None,
            image_url=item.recipe.image_url if item.recipe else None,
        )
        for item in order.items
    ]
    return OrderResponse(
        id=order.id,
        customer_id=order.customer_id,
        customer_name=order.customer.name if order.customer else None,
        total_amount=order.total_amount,
        status=order.status,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        payment_transaction_id=order.payment_transaction_id,
        delivery_address=order.delivery_address,
        delivery_distance=order.delivery_distance,
        delivery_charge=order.delivery_charge or 0,
        loyalty_points_used=order.loyalty_points_used or 0,
        sale_time=order.sale_time,
        completion_time=order.completion_time,
        items=items,
    )


def _order_lines(payload: GuestOrderCreate | CustomerOrderCreate) -> list[OrderLine]:
    return [OrderLine(recipe_id=item.recipe_id, quantity=item.quantity) for item in payload.items]


def _raise_for_line_error(exc: Exception) -> None:
    if isinstance(exc, RecipeNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_guest_order(payload: GuestOrderCreate, db: Session = Depends(get_db)) -> OrderResponse:
    """Guest checkout; the order completes on its own unless staff move it first."""
    try:
        validate_phone(payload.guest_contact)
    except CustomerValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    try:
        order = order_service.create_guest_order(
            db,
            guest_contact=payload.guest_contact,
            lines=_order_lines(payload),
            delivery_address=payload.delivery_address,
            delivery_distance=payload.delivery_distance,
            delivery_charge=payload.delivery_charge,
            payment_method=payload.payment_method,
        )
    except (RecipeNotFoundError, RecipeUnavailableError) as exc:
        db.rollback()
        _raise_for_line_error(exc)
    return _serialize_order(order_service.get_order(db, order.id))


@router.get("", response_model=list[OrderResponse])
def list_orders(
    sort_by: str = Query(default="time", alias="sortBy", pattern="^(time|total_price)$"),
    sort_order: str = Query(default="desc", alias="sortOrder", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> list[OrderResponse]:
    return [_serialize_order(order) for order in order_service.list_orders(db, sort_by, sort_order)]


@router.post("/create", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_customer_order(
    payload: CustomerOrderCreate,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
) -> OrderResponse:
    try:
        order = order_service.create_customer_order(
            db,
            customer,
            lines=_order_lines(payload),
            delivery_address=payload.delivery_address,
            delivery_distance=payload.delivery_distance,
            delivery_charge=payload.delivery_charge,
            payment_method=payload.payment_method,
            loyalty_points_used=payload.loyalty_points_used,
        )
    except (RecipeNotFoundError, RecipeUnavailableError, LoyaltyRedemptionError) as exc:
        db.rollback()
        _raise_for_line_error(exc)
    return _serialize_order(order_service.get_order(db, order.id))


@router.post("/update", response_model=OrderStatusResponse)
def advance_order(
    payload: OrderIdPayload,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> OrderStatusResponse:
    """Move an order one step along the progression."""
    try:
        order, changed = order_status.advance(db, payload.order_id, staff)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    except UnadvanceableStatusError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    message = f"Order status updated to {order.status}" if changed else "Order is already completed"
    return OrderStatusResponse(order_id=order.id, status=order.status, changed=changed, message=message)


@router.post("/cancel", response_model=OrderStatusResponse)
def cancel_order(
    payload: OrderIdPayload,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
) -> OrderStatusResponse:
    try:
        order = order_status.cancel(db, payload.order_id, customer)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    except OrderStateConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return OrderStatusResponse(order_id=order.id, status=order.status, message="Order cancelled successfully")


@router.get("/revenue", response_model=list[RevenueEntry])
def revenue(db: Session = Depends(get_db), _: Staff = Depends(get_current_staff)) -> list[RevenueEntry]:
    return [RevenueEntry(**entry) for entry in order_service.daily_revenue(db)]


@router.get("/user/orders", response_model=list[OrderResponse])
def my_orders(
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
) -> list[OrderResponse]:
    return [_serialize_order(order) for order in order_service.orders_for_customer(db, customer.id)]


@router.get("/user/favorite-meals", response_model=list[FavoriteMealResponse])
def my_favorite_meals(
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
) -> list[FavoriteMealResponse]:
    return [FavoriteMealResponse(**entry) for entry in order_service.favorite_meals(db, customer.id)]


@router.get("/guest/orders/{phone}", response_model=list[OrderResponse])
def guest_orders(phone: str, db: Session = Depends(get_db)) -> list[OrderResponse]:
    return [_serialize_order(order) for order in order_service.guest_orders_for_phone(db, phone)]


@router.put("/guest/complete/{order_id}", response_model=OrderStatusResponse)
def complete_guest_order(order_id: int, db: Session = Depends(get_db)) -> OrderStatusResponse:
    try:
        order = order_status.complete_guest_order(db, order_id)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except OrderStateConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return OrderStatusResponse(order_id=order.id, status=order.status, message="Order completed")


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> OrderResponse:
    """Staff may read any order, customers only their own."""
    order: Sale | None = order_service.get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    if isinstance(principal, CustomerPrincipal) and order.customer_id != principal.customer_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return _serialize_order(order)


@router.put("/{order_id}/complete", response_model=OrderCompletionResponse)
def complete_order(
    order_id: int,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
) -> OrderCompletionResponse:
    try:
        order, points = order_status.complete_for_customer(db, order_id, customer)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    except OrderStateConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    db.refresh(customer)
    return OrderCompletionResponse(
        order_id=order.id,
        status=order.status,
        loyalty_points_earned=points,
        loyalty_points=customer.loyalty_points,
    )
