"""Ingredients, suppliers, restock and waste bookkeeping.

Restock batches add their quantities to ingredient stock and waste batches
subtract theirs, both inside the transaction that writes the batch.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from restohub.models import Ingredient, Restock, RestockDetail, Supplier, SupplierProduct, Waste, WasteDetail
from restohub.utils.time import month_bounds

logger = logging.getLogger(__name__)


class IngredientConflictError(Exception):
    """Raised for duplicate ingredient names or deletes blocked by references."""


class UnknownReferenceError(LookupError):
    """Raised when a batch references a missing supplier or ingredient."""


@dataclass(frozen=True)
class RestockLine:
    ingredient_id: int
    import_quantity: float
    import_price: int


@dataclass(frozen=True)
class WasteLine:
    ingredient_id: int
    quantity: float
    reason: str | None = None


def _supplier_name(ingredient: Ingredient) -> str | None:
    if not ingredient.supplier_links:
        return None
    return ingredient.supplier_links[0].supplier.name


def list_ingredients(db: Session) -> list[dict]:
    ingredients = db.scalars(
        select(Ingredient)
        .options(selectinload(Ingredient.supplier_links).selectinload(SupplierProduct.supplier))
        .order_by(Ingredient.name.asc())
    ).all()
    return [
        {
            "ingredient_id": ingredient.id,
            "ingredient_name": ingredient.name,
            "unit": ingredient.unit,
            "quantity": ingredient.quantity,
            "minimum_threshold": ingredient.minimum_threshold,
            "good_for": ingredient.good_for,
            "supplier_name": _supplier_name(ingredient),
        }
        for ingredient in ingredients
    ]


def _require_supplier(db: Session, supplier_id: int) -> Supplier:
    supplier = db.get(Supplier, supplier_id)
    if supplier is None:
        raise UnknownReferenceError(f"Supplier {supplier_id} not found")
    return supplier


def create_ingredient(
    db: Session,
    *,
    name: str,
    unit: str,
    quantity: float,
    minimum_threshold: float | None = None,
    good_for: int | None = None,
    supplier_id: int | None = None,
) -> Ingredient:
    if db.scalar(select(Ingredient.id).where(Ingredient.name == name).limit(1)) is not None:
        raise IngredientConflictError("Ingredient already exists")
    ingredient = Ingredient(
        name=name,
        unit=unit,
        quantity=quantity,
        minimum_threshold=minimum_threshold,
        good_for=good_for,
    )
    db.add(ingredient)
    db.flush()
    if supplier_id is not None:
        _require_supplier(db, supplier_id)
        db.add(SupplierProduct(supplier_id=supplier_id, ingredient_id=ingredient.id))
    db.commit()
    db.refresh(ingredient)
    return ingredient


def update_ingredient(db: Session, ingredient: Ingredient, *, fields: dict, supplier_id: int | None = None) -> Ingredient:
    """Apply changed fields; a given supplier replaces the existing supplier link."""
    new_name = fields.get("name")
    if new_name and new_name != ingredient.name:
        taken = db.scalar(select(Ingredient.id).where(Ingredient.name == new_name, Ingredient.id != ingredient.id).limit(1))
        if taken is not None:
            raise IngredientConflictError("Ingredient already exists")
    for key, value in fields.items():
        setattr(ingredient, key, value)
    if supplier_id is not None:
        _require_supplier(db, supplier_id)
        db.execute(delete(SupplierProduct).where(SupplierProduct.ingredient_id == ingredient.id))
        db.add(SupplierProduct(supplier_id=supplier_id, ingredient_id=ingredient.id))
    db.commit()
    db.refresh(ingredient)
    return ingredient


def delete_ingredient(db: Session, ingredient: Ingredient) -> None:
    db.execute(delete(SupplierProduct).where(SupplierProduct.ingredient_id == ingredient.id))
    db.delete(ingredient)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Ingredient %s delete blocked by references", ingredient.id)
        raise IngredientConflictError(
            "Cannot delete ingredient because it is referenced by recipes, restock orders, or waste records."
        ) from exc


def restocks_for_ingredient(db: Session, ingredient_id: int) -> list[dict]:
    rows = db.execute(
        select(RestockDetail, Restock.restock_date, Ingredient.unit)
        .join(Restock, Restock.id == RestockDetail.restock_id)
        .join(Ingredient, Ingredient.id == RestockDetail.ingredient_id)
        .where(RestockDetail.ingredient_id == ingredient_id)
        .order_by(Restock.restock_date.desc(), Restock.id.desc())
    ).all()
    return [
        {
            "restock_id": detail.restock_id,
            "restock_date": restock_date,
            "import_quantity": detail.import_quantity,
            "import_price": detail.import_price,
            "unit": unit,
        }
        for detail, restock_date, unit in rows
    ]


def _require_ingredient(db: Session, ingredient_id: int) -> Ingredient:
    ingredient = db.get(Ingredient, ingredient_id)
    if ingredient is None:
        raise UnknownReferenceError(f"Ingredient {ingredient_id} not found")
    return ingredient


def list_waste(db: Session) -> list[dict]:
    wastes = db.scalars(
        select(Waste)
        .options(selectinload(Waste.details).selectinload(WasteDetail.ingredient))
        .order_by(Waste.waste_date.desc(), Waste.id.desc())
    ).all()
    return [
        {
            "waste_id": waste.id,
            "waste_date": waste.waste_date,
            "ingredient_name": detail.ingredient.name,
            "wasted_quantity": detail.quantity,
            "unit": detail.ingredient.unit,
            "reason": detail.reason,
        }
        for waste in wastes
        for detail in waste.details
    ]


def record_waste(db: Session, lines: list[WasteLine], waste_date: date | None = None) -> Waste:
    waste = Waste(waste_date=waste_date or date.today())
    for line in lines:
        ingredient = _require_ingredient(db, line.ingredient_id)
        ingredient.quantity = max((ingredient.quantity or 0) - line.quantity, 0)
        waste.details.append(WasteDetail(ingredient_id=line.ingredient_id, quantity=line.quantity, reason=line.reason))
    db.add(waste)
    db.commit()
    db.refresh(waste)
    return waste


def create_restock(db: Session, *, supplier_id: int, lines: list[RestockLine], restock_date: date | None = None) -> Restock:
    _require_supplier(db, supplier_id)
    restock = Restock(supplier_id=supplier_id, restock_date=restock_date or date.today())
    for line in lines:
        ingredient = _require_ingredient(db, line.ingredient_id)
        ingredient.quantity = (ingredient.quantity or 0) + line.import_quantity
        restock.details.append(
            RestockDetail(
                ingredient_id=line.ingredient_id,
                import_quantity=line.import_quantity,
                import_price=line.import_price,
            )
        )
    db.add(restock)
    db.commit()
    db.refresh(restock)
    return restock


def restock_summary(db: Session) -> list[dict]:
    restocks = db.scalars(
        select(Restock).options(selectinload(Restock.supplier)).order_by(Restock.restock_date.desc(), Restock.id.desc())
    ).all()
    return [
        {"restock_id": restock.id, "restock_date": restock.restock_date, "supplier_name": restock.supplier.name}
        for restock in restocks
    ]


def get_restock(db: Session, restock_id: int) -> Restock | None:
    return db.scalar(
        select(Restock)
        .options(
            selectinload(Restock.supplier),
            selectinload(Restock.details).selectinload(RestockDetail.ingredient),
        )
        .where(Restock.id == restock_id)
    )


def daily_import_totals(db: Session, year: int, month: int) -> list[dict]:
    """Sum ``import_quantity * import_price`` per day of the month."""
    start, end = month_bounds(year, month)
    rows = db.execute(
        select(Restock.restock_date, RestockDetail.import_quantity, RestockDetail.import_price)
        .join(Restock, Restock.id == RestockDetail.restock_id)
        .where(Restock.restock_date >= start, Restock.restock_date < end)
    ).all()
    totals: dict[int, float] = defaultdict(float)
    for restock_date, quantity, price in rows:
        totals[restock_date.day] += quantity * price
    return [{"day": day, "total_import_price": totals[day]} for day in sorted(totals)]


def list_suppliers(db: Session) -> list[Supplier]:
    return list(db.scalars(select(Supplier).order_by(Supplier.name.asc())).all())


def create_supplier(db: Session, *, name: str, phone: str | None = None, address: str | None = None) -> Supplier:
    supplier = Supplier(name=name, phone=phone, address=address)
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier
