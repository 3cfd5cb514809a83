"""Shift schedule endpoints (staff only)."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from restohub.core.security import get_current_staff
from restohub.db.session import get_db
from restohub.models import Staff
from restohub.schemas.schedule import (
    MonthRequest,
    MonthScheduleResponse,
    ScheduleBlockDelete,
    ScheduleCreate,
    ScheduleDayResponse,
    ScheduleEntryResponse,
)
from restohub.services import schedule_service
from restohub.services.schedule_service import ScheduleConflictError, ScheduleValidationError, StaffNotFoundError

router: APIRouter = APIRouter()


def _week(db: Session, start_date: date) -> list[ScheduleDayResponse]:
    return [ScheduleDayResponse(**day) for day in schedule_service.week_view(db, start_date)]


@router.get("", response_model=list[ScheduleDayResponse])
def list_week(
    start_date: date = Query(..., alias="startDate"),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> list[ScheduleDayResponse]:
    return _week(db, start_date)


@router.get("/week", response_model=list[ScheduleDayResponse])
def week(
    start_date: date = Query(..., alias="startDate"),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> list[ScheduleDayResponse]:
    """Seven days from ``startDate``, grouped by day and shift."""
    return _week(db, start_date)


@router.post("", response_model=ScheduleEntryResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreate,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> ScheduleEntryResponse:
    try:
        entry = schedule_service.create_entry(
            db,
            shift_date=payload.shift_date,
            shift=payload.shift,
            staff_id=payload.staff_id,
        )
    except ScheduleValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StaffNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ScheduleConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ScheduleEntryResponse.model_validate(entry)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_block(
    payload: ScheduleBlockDelete,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> Response:
    """Delete the open block and every assignment of a date and shift."""
    try:
        removed = schedule_service.delete_block(db, payload.shift_date, payload.shift)
    except ScheduleValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if removed == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No shift found for this date and type.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/employee", response_model=list[ScheduleEntryResponse])
def employee_schedule(
    employee_id: int = Query(..., alias="employeeId"),
    month: int = Query(..., ge=1, le=12),
    year: int = Query(...),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> list[ScheduleEntryResponse]:
    entries = schedule_service.entries_for_staff(db, employee_id, year, month)
    return [ScheduleEntryResponse.model_validate(entry) for entry in entries]


@router.post("/month", response_model=MonthScheduleResponse)
def month_schedule(
    payload: MonthRequest,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> MonthScheduleResponse:
    days = [ScheduleDayResponse(**day) for day in schedule_service.month_view(db, payload.year, payload.month)]
    return MonthScheduleResponse(month=payload.month, year=payload.year, schedule=days)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> Response:
    if not schedule_service.delete_entry(db, schedule_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule entry not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
