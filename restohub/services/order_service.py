"""Order placement and order history queries."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from restohub.core.config import settings
from restohub.models import Customer, OrderDetail, Recipe, Sale
from restohub.models.customer import GUEST_NAME_PREFIX
from restohub.services.customer_service import get_or_create_guest
from restohub.services.deferred_jobs import schedule_auto_complete
from restohub.services.order_status import COMPLETED, CONFIRMED, PENDING
from restohub.utils.time import as_utc, month_window_utc

logger = logging.getLogger(__name__)

PAYMENT_METHOD_ALIASES: dict[str, str] = {"momo wallet": "momo"}


class RecipeNotFoundError(LookupError):
    """Raised when an order line references an unknown recipe."""


class RecipeUnavailableError(ValueError):
    """Raised when an order line references a recipe that is switched off."""


class LoyaltyRedemptionError(ValueError):
    """Raised when a customer redeems more points than they hold."""


@dataclass(frozen=True)
class OrderLine:
    recipe_id: int
    quantity: int


def normalize_payment_method(payment_method: str | None) -> str:
    if not payment_method:
        return "cash"
    method = payment_method.strip().lower()
    return PAYMENT_METHOD_ALIASES.get(method, method)


def _build_details(db: Session, lines: list[OrderLine]) -> tuple[list[OrderDetail], int]:
    details: list[OrderDetail] = []
    total = 0
    for line in lines:
        recipe: Recipe | None = db.get(Recipe, line.recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(f"Recipe {line.recipe_id} not found")
        if recipe.status != "available":
            raise RecipeUnavailableError(f"Recipe {line.recipe_id} is not available")
        total += recipe.price * line.quantity
        details.append(OrderDetail(recipe_id=recipe.id, quantity=line.quantity))
    return details, total


def create_guest_order(
    db: Session,
    *,
    guest_contact: str,
    lines: list[OrderLine],
    delivery_address: str,
    delivery_distance: float,
    delivery_charge: int,
    payment_method: str | None,
) -> Sale:
    """Place an order without an account; it auto-completes unless moved on."""
    guest = get_or_create_guest(db, guest_contact, delivery_address)
    details, total = _build_details(db, lines)
    sale = Sale(
        customer_id=guest.id,
        total_amount=total,
        status=PENDING,
        payment_method=normalize_payment_method(payment_method),
        delivery_address=delivery_address,
        delivery_distance=delivery_distance,
        delivery_charge=delivery_charge,
        items=details,
    )
    db.add(sale)
    db.flush()
    schedule_auto_complete(db, sale.id, settings.guest_auto_complete_seconds)
    db.commit()
    db.refresh(sale)
    logger.info("[ORDERS] Guest order %s created for customer_id=%s", sale.id, guest.id)
    return sale


def create_customer_order(
    db: Session,
    customer: Customer,
    *,
    lines: list[OrderLine],
    delivery_address: str,
    delivery_distance: float,
    delivery_charge: int,
    payment_method: str | None,
    loyalty_points_used: int = 0,
) -> Sale:
    """Place an order for a signed-in customer, redeeming loyalty points if asked."""
    if loyalty_points_used < 0 or loyalty_points_used > (customer.loyalty_points or 0):
        raise LoyaltyRedemptionError("Not enough loyalty points")

    details, total = _build_details(db, lines)
    sale = Sale(
        customer_id=customer.id,
        total_amount=total,
        status=CONFIRMED,
        payment_method=normalize_payment_method(payment_method),
        delivery_address=delivery_address,
        delivery_distance=delivery_distance,
        delivery_charge=delivery_charge,
        loyalty_points_used=loyalty_points_used,
        items=details,
    )
    db.add(sale)
    if loyalty_points_used:
        customer.loyalty_points = (customer.loyalty_points or 0) - loyalty_points_used
    db.commit()
    db.refresh(sale)
    logger.info("[ORDERS] Order %s created for customer_id=%s", sale.id, customer.id)
    return sale


def _with_items(query):
    return query.options(selectinload(Sale.items).joinedload(OrderDetail.recipe))


def get_order(db: Session, sale_id: int) -> Sale | None:
    return db.scalar(_with_items(select(Sale)).where(Sale.id == sale_id))


def list_orders(db: Session, sort_by: str = "time", sort_order: str = "desc") -> list[Sale]:
    column = Sale.total_amount if sort_by == "total_price" else Sale.sale_time
    ordering = column.asc() if sort_order == "asc" else column.desc()
    query = _with_items(select(Sale)).options(joinedload(Sale.customer)).order_by(ordering, Sale.id.asc())
    return list(db.scalars(query).unique().all())


def orders_for_customer(db: Session, customer_id: int) -> list[Sale]:
    query = _with_items(select(Sale)).where(Sale.customer_id == customer_id).order_by(Sale.sale_time.desc(), Sale.id.desc())
    return list(db.scalars(query).all())


def guest_orders_for_phone(db: Session, phone: str) -> list[Sale]:
    guest_id = db.scalar(
        select(Customer.id)
        .where(Customer.phone == phone, Customer.name.like(f"{GUEST_NAME_PREFIX}%"))
        .order_by(Customer.id.asc())
        .limit(1)
    )
    if guest_id is None:
        return []
    return orders_for_customer(db, guest_id)


def favorite_meals(db: Session, customer_id: int) -> list[dict]:
    """Aggregate the recipes a customer has ordered, most ordered first."""
    rows = db.execute(
        select(OrderDetail.quantity, Recipe)
        .join(Sale, Sale.id == OrderDetail.sale_id)
        .join(Recipe, Recipe.id == OrderDetail.recipe_id)
        .where(Sale.customer_id == customer_id)
    ).all()

    favorites: dict[int, dict] = {}
    for quantity, recipe in rows:
        entry = favorites.setdefault(
            recipe.id,
            {
                "recipe_id": recipe.id,
                "recipe_name": recipe.name,
                "price": recipe.price,
                "image_url": recipe.image_url,
                "total_ordered": 0,
                "times_ordered": 0,
            },
        )
        entry["total_ordered"] += quantity
        entry["times_ordered"] += 1
    return sorted(favorites.values(), key=lambda item: item["total_ordered"], reverse=True)


def daily_revenue(db: Session) -> list[dict]:
    """Sum completed order totals per completion day, newest first."""
    sales = db.scalars(select(Sale).where(Sale.status == COMPLETED)).all()
    totals: dict[date, dict] = {}
    for sale in sales:
        recorded = as_utc(sale.completion_time or sale.sale_time).date()
        entry = totals.setdefault(recorded, {"date_recorded": recorded, "total_revenue": 0, "order_count": 0})
        entry["total_revenue"] += sale.total_amount
        entry["order_count"] += 1
    return sorted(totals.values(), key=lambda item: item["date_recorded"], reverse=True)


def daily_order_counts(db: Session, year: int, month: int) -> list[dict[str, int]]:
    start, end = month_window_utc(year, month)
    sale_times = db.scalars(select(Sale.sale_time).where(Sale.sale_time >= start, Sale.sale_time < end)).all()
    counts: dict[int, int] = defaultdict(int)
    for sale_time in sale_times:
        counts[as_utc(sale_time).day] += 1
    return [{"day": day, "count": counts[day]} for day in sorted(counts)]
