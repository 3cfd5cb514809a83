"""Order status workflow: forward progression, cancellation and completion paths."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from restohub.models import Customer, Sale, Staff
from restohub.services.audit_service import log_action

logger = logging.getLogger(__name__)

PENDING = "Pending"
CONFIRMED = "Confirmed"
DELIVERING = "Delivering"
COMPLETED = "Completed"
CANCELLED = "Cancel"

ORDER_PROGRESSION: tuple[str, ...] = ("Confirmed", "Preparing", "Ready", "Delivering", "Completed")
ORDER_STATUSES: tuple[str, ...] = (PENDING, *ORDER_PROGRESSION, CANCELLED)
TERMINAL_STATUSES: frozenset[str] = frozenset({COMPLETED, CANCELLED})

PAYMENT_UNPAID = "Unpaid"
PAYMENT_PENDING = "Pending"
PAYMENT_PAID = "Paid"
PAYMENT_FAILED = "Failed"

POINTS_PER_CURRENCY_UNIT = 1000


class OrderNotFoundError(Exception):
    """Raised when an order does not exist or is not visible to the caller."""


class UnadvanceableStatusError(Exception):
    """Raised when the current status is outside the forward progression."""

    def __init__(self, status: str) -> None:
        super().__init__(f'Order status "{status}" cannot be advanced automatically')
        self.status = status


class OrderStateConflictError(Exception):
    """Raised when a transition is not allowed from the current status."""

    def __init__(self, message: str, status: str) -> None:
        super().__init__(message)
        self.status = status


def next_status(current: str) -> str:
    """Return the status following ``current`` in the progression."""
    if current not in ORDER_PROGRESSION:
        raise UnadvanceableStatusError(current)
    index = ORDER_PROGRESSION.index(current)
    if index + 1 < len(ORDER_PROGRESSION):
        return ORDER_PROGRESSION[index + 1]
    return COMPLETED


def loyalty_points_for(total_amount: int) -> int:
    """One point per full 1000 currency units, floored."""
    if total_amount <= 0:
        return 0
    return int(total_amount) // POINTS_PER_CURRENCY_UNIT


def _snapshot(sale: Sale) -> dict[str, Any]:
    return {
        "status": sale.status,
        "payment_status": sale.payment_status,
        "completion_time": sale.completion_time.isoformat() if sale.completion_time else None,
    }


def _get_sale(db: Session, sale_id: int) -> Sale:
    sale: Sale | None = db.get(Sale, sale_id)
    if sale is None:
        raise OrderNotFoundError(f"Order {sale_id} not found")
    return sale


def _utcnow(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def advance(db: Session, sale_id: int, actor: Staff, now: datetime | None = None) -> tuple[Sale, bool]:
    """Move an order one step forward.

    Returns the order and whether its status changed. A completed order is
    returned unchanged. Entering ``Completed`` from ``Delivering`` stamps the
    completion time and marks the order paid.
    """
    sale = _get_sale(db, sale_id)
    current = sale.status
    if current == COMPLETED:
        return sale, False

    new_status = next_status(current)
    before = _snapshot(sale)
    sale.status = new_status
    if current == DELIVERING and new_status == COMPLETED:
        sale.completion_time = _utcnow(now)
        sale.payment_status = PAYMENT_PAID

    log_action(db, actor=actor, action_type="ORDER_ADVANCED", sale_id=sale.id, before_snapshot=before, after_snapshot=_snapshot(sale))
    db.commit()
    db.refresh(sale)
    logger.info("[ORDERS] Order %s advanced %s -> %s by staff_id=%s", sale.id, current, new_status, actor.id)
    return sale, True


def cancel(db: Session, sale_id: int, customer: Customer) -> Sale:
    """Cancel a customer's own order while it is still ``Confirmed``."""
    sale = _get_sale(db, sale_id)
    if sale.customer_id != customer.id:
        raise OrderNotFoundError(f"Order {sale_id} not found")
    if sale.status != CONFIRMED:
        raise OrderStateConflictError(
            f'Order cannot be cancelled when status is "{sale.status}"',
            status=sale.status,
        )

    before = _snapshot(sale)
    sale.status = CANCELLED
    log_action(db, actor=customer, action_type="ORDER_CANCELLED", sale_id=sale.id, before_snapshot=before, after_snapshot=_snapshot(sale))
    db.commit()
    db.refresh(sale)
    logger.info("[ORDERS] Order %s cancelled by customer_id=%s", sale.id, customer.id)
    return sale


def complete_for_customer(
    db: Session,
    sale_id: int,
    customer: Customer,
    now: datetime | None = None,
) -> tuple[Sale, int]:
    """Mark a customer's order completed and award loyalty points once.

    Returns the order and the number of points earned by this call.
    """
    sale = _get_sale(db, sale_id)
    if sale.customer_id != customer.id:
        raise OrderNotFoundError(f"Order {sale_id} not found")
    if sale.status == COMPLETED:
        return sale, 0
    if sale.status == CANCELLED:
        raise OrderStateConflictError("Cancelled orders cannot be completed", status=sale.status)

    before = _snapshot(sale)
    points = loyalty_points_for(sale.total_amount)
    sale.status = COMPLETED
    sale.completion_time = _utcnow(now)
    customer.loyalty_points = (customer.loyalty_points or 0) + points

    log_action(
        db,
        actor=customer,
        action_type="ORDER_COMPLETED",
        sale_id=sale.id,
        before_snapshot=before,
        after_snapshot={**_snapshot(sale), "loyalty_points_earned": points},
    )
    db.commit()
    db.refresh(sale)
    logger.info("[ORDERS] Order %s completed by customer_id=%s (+%s points)", sale.id, customer.id, points)
    return sale, points


def complete_guest_order(db: Session, sale_id: int, now: datetime | None = None) -> Sale:
    """Complete an order placed through the guest checkout."""
    sale = _get_sale(db, sale_id)
    if sale.customer is None or not sale.customer.is_guest:
        raise OrderNotFoundError("Order not found or not a guest order")
    if sale.status == COMPLETED:
        return sale
    if sale.status == CANCELLED:
        raise OrderStateConflictError("Cancelled orders cannot be completed", status=sale.status)

    before = _snapshot(sale)
    sale.status = COMPLETED
    sale.completion_time = _utcnow(now)
    log_action(db, actor=None, action_type="GUEST_ORDER_COMPLETED", sale_id=sale.id, before_snapshot=before, after_snapshot=_snapshot(sale))
    db.commit()
    db.refresh(sale)
    return sale


def auto_complete_pending(db: Session, sale_id: int, now: datetime | None = None) -> bool:
    """Flip ``Pending`` to ``Completed``; any other status is left alone.

    Does not commit, the job runner owns the transaction.
    """
    sale: Sale | None = db.get(Sale, sale_id)
    if sale is None or sale.status != PENDING:
        return False
    before = _snapshot(sale)
    sale.status = COMPLETED
    sale.completion_time = _utcnow(now)
    log_action(db, actor=None, action_type="ORDER_AUTO_COMPLETED", sale_id=sale.id, before_snapshot=before, after_snapshot=_snapshot(sale))
    return True


def apply_payment_result(
    db: Session,
    sale_id: int,
    *,
    paid: bool,
    transaction_id: str | None,
    provider: str,
    now: datetime | None = None,
) -> Sale:
    """Record a verified gateway result.

    A successful payment forces the order to ``Completed`` regardless of its
    position in the progression.
    """
    sale = _get_sale(db, sale_id)
    before = _snapshot(sale)
    sale.payment_status = PAYMENT_PAID if paid else PAYMENT_FAILED
    if transaction_id is not None:
        sale.payment_transaction_id = str(transaction_id)
    if paid:
        sale.status = COMPLETED
        sale.completion_time = _utcnow(now)

    log_action(
        db,
        actor=provider,
        action_type="PAYMENT_CALLBACK",
        sale_id=sale.id,
        before_snapshot=before,
        after_snapshot={**_snapshot(sale), "transaction_id": sale.payment_transaction_id},
    )
    db.commit()
    db.refresh(sale)
    logger.info("[PAYMENTS] %s callback for order %s: %s", provider, sale.id, sale.payment_status)
    return sale


def ensure_payable(sale: Sale) -> None:
    """Refuse to open a payment for cancelled or already paid orders."""
    if sale.status == CANCELLED:
        raise OrderStateConflictError("Cancelled orders cannot be paid", status=sale.status)
    if sale.payment_status == PAYMENT_PAID:
        raise OrderStateConflictError("Order is already paid", status=sale.status)


def mark_payment_pending(db: Session, sale_id: int, provider: str, actor: Staff | Customer) -> Sale:
    """Record that the payer was sent to ``provider``; settled by the callback."""
    sale = _get_sale(db, sale_id)
    ensure_payable(sale)
    before = _snapshot(sale)
    sale.payment_method = provider
    sale.payment_status = PAYMENT_PENDING
    log_action(db, actor=actor, action_type="PAYMENT_STARTED", sale_id=sale.id, before_snapshot=before, after_snapshot=_snapshot(sale))
    db.commit()
    db.refresh(sale)
    return sale
