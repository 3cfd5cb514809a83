"""Sales statistics endpoints (staff only)."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from restohub.core.security import get_current_staff
from restohub.db.session import get_db
from restohub.models import Staff
from restohub.schemas.order import DailyOrderCount, DailySalesResponse
from restohub.services.order_service import daily_order_counts

router: APIRouter = APIRouter()


def _daily_sales(db: Session, year: int, month: int) -> DailySalesResponse:
    days = [DailyOrderCount(**row) for row in daily_order_counts(db, year, month)]
    return DailySalesResponse(year=year, month=month, days=days)


@router.get("", response_model=DailySalesResponse)
def monthly_sales(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> DailySalesResponse:
    return _daily_sales(db, year, month)


@router.get("/daily/{year}/{month}", response_model=DailySalesResponse)
def daily_sales(
    year: int,
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> DailySalesResponse:
    return _daily_sales(db, year, month)
