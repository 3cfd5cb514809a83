"""Restock batch endpoints (staff only)."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from restohub.core.security import get_current_staff
from restohub.db.session import get_db
from restohub.models import Staff
from restohub.schemas.inventory import (
    CreatedResponse,
    DailyImportTotal,
    RestockCreate,
    RestockDetailResponse,
    RestockResponse,
    RestockSummaryResponse,
)
from restohub.services import inventory_service
from restohub.services.inventory_service import RestockLine, UnknownReferenceError

router: APIRouter = APIRouter()


@router.get("", response_model=list[RestockSummaryResponse] | list[DailyImportTotal])
def list_restocks(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> list[RestockSummaryResponse] | list[DailyImportTotal]:
    """Restock summary, or daily import totals when ``month`` and ``year`` are given."""
    if month is not None and year is not None:
        return [DailyImportTotal(**row) for row in inventory_service.daily_import_totals(db, year, month)]
    return [RestockSummaryResponse(**row) for row in inventory_service.restock_summary(db)]


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_restock(
    payload: RestockCreate,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> CreatedResponse:
    lines = [
        RestockLine(ingredient_id=item.ingredient_id, import_quantity=item.import_quantity, import_price=item.import_price)
        for item in payload.items
    ]
    try:
        restock = inventory_service.create_restock(
            db,
            supplier_id=payload.supplier_id,
            lines=lines,
            restock_date=payload.restock_date,
        )
    except UnknownReferenceError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CreatedResponse(id=restock.id, message="Restock order created successfully")


@router.get("/{restock_id}", response_model=RestockResponse)
def get_restock(
    restock_id: int,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> RestockResponse:
    restock = inventory_service.get_restock(db, restock_id)
    if restock is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restock order not found")
    details = [
        RestockDetailResponse(
            ingredient_id=detail.ingredient_id,
            ingredient_name=detail.ingredient.name,
            unit=detail.ingredient.unit,
            import_quantity=detail.import_quantity,
            import_price=detail.import_price,
        )
        for detail in restock.details
    ]
    return RestockResponse(
        restock_id=restock.id,
        restock_date=restock.restock_date,
        supplier_id=restock.supplier_id,
        supplier_name=restock.supplier.name,
        total_import_price=sum(detail.import_quantity * detail.import_price for detail in details),
        details=details,
    )
