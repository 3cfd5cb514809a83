"""Payment creation and provider callback endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from restohub.core.security import CustomerPrincipal, Principal, get_current_principal
from restohub.db.session import get_db
from restohub.models import Customer, Sale, Staff
from restohub.schemas.payment import PaymentCreate, PaymentCreateResponse
from restohub.services import payment_gateway
from restohub.services.order_service import normalize_payment_method
from restohub.services.order_status import (
    OrderNotFoundError,
    OrderStateConflictError,
    apply_payment_result,
    ensure_payable,
    mark_payment_pending,
)
from restohub.services.payment_gateway import MOMO, VIETCOMBANK, PaymentGatewayError, UnknownProviderError

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)

CALLBACK_REPLIES: dict[str, dict[str, dict[str, Any]]] = {
    MOMO: {
        "invalid": {"resultCode": 97, "message": "Invalid signature"},
        "ok": {"resultCode": 0, "message": "Success"},
    },
    VIETCOMBANK: {
        "invalid": {"status": "error", "message": "Invalid signature"},
        "ok": {"status": "success", "message": "Callback processed"},
    },
}


def _resolve_actor(db: Session, principal: Principal) -> Staff | Customer | None:
    if isinstance(principal, CustomerPrincipal):
        return db.get(Customer, principal.customer_id)
    return db.get(Staff, principal.staff_id)


@router.post("/create", response_model=PaymentCreateResponse)
def create_payment(
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PaymentCreateResponse:
    """Open a provider payment for an order; customers may only pay their own orders."""
    provider = normalize_payment_method(payload.payment_method)
    if provider not in payment_gateway.PROVIDERS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid payment method: {payload.payment_method}")

    actor = _resolve_actor(db, principal)
    if actor is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    order: Sale | None = db.get(Sale, payload.order_id)
    if order is None or (isinstance(principal, CustomerPrincipal) and order.customer_id != principal.customer_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    try:
        ensure_payable(order)
    except OrderStateConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    try:
        payment_url = payment_gateway.create_payment(provider, order.id, order.total_amount, f"Payment for order {order.id}")
    except UnknownProviderError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PaymentGatewayError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    try:
        mark_payment_pending(db, order.id, provider, actor)
    except OrderStateConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return PaymentCreateResponse(order_id=order.id, payment_method=provider, payment_url=payment_url)


def _handle_callback(provider: str, payload: dict[str, Any], db: Session) -> JSONResponse:
    replies = CALLBACK_REPLIES[provider]
    if not payment_gateway.verify_callback(provider, payload):
        logger.warning("[PAYMENTS] Rejected %s callback with invalid signature (orderId=%s)", provider, payload.get("orderId"))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=replies["invalid"])

    result = payment_gateway.parse_callback(provider, payload)
    try:
        sale_id = int(result.order_id or "")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    try:
        apply_payment_result(db, sale_id, paid=result.paid, transaction_id=result.transaction_id, provider=provider)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    return JSONResponse(status_code=status.HTTP_200_OK, content=replies["ok"])


@router.post("/momo/callback")
def momo_callback(payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)) -> JSONResponse:
    return _handle_callback(MOMO, payload, db)


@router.post("/vietcombank/callback")
def vietcombank_callback(payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)) -> JSONResponse:
    return _handle_callback(VIETCOMBANK, payload, db)
