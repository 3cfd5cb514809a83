"""Staff account and payroll endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from restohub.core.security import create_staff_token, get_current_staff, require_manager
from restohub.db.session import get_db
from restohub.models import Staff
from restohub.schemas.staff import (
    SalaryResponse,
    StaffCreate,
    StaffLoginRequest,
    StaffResponse,
    StaffTokenResponse,
    StaffUpdate,
)
from restohub.services import staff_service
from restohub.services.staff_service import PayrollLine, StaffConflictError

router: APIRouter = APIRouter()


def _serialize_payroll(line: PayrollLine, year: int, month: int) -> SalaryResponse:
    return SalaryResponse(
        staff_id=line.staff.id,
        name=line.staff.name,
        role=line.staff.role,
        month=month,
        year=year,
        pay_rate=line.staff.pay_rate or 0,
        working_shifts=line.working_shifts,
        working_hours=line.working_hours,
        total_pay=line.total_pay,
    )


def _period(month: int | None, year: int | None) -> tuple[int, int]:
    today = date.today()
    return year or today.year, month or today.month


@router.post("/login", response_model=StaffTokenResponse)
def login(payload: StaffLoginRequest, db: Session = Depends(get_db)) -> StaffTokenResponse:
    staff: Staff | None = staff_service.authenticate_staff(db, payload.email, payload.password)
    if staff is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    return StaffTokenResponse(access_token=create_staff_token(staff), staff=StaffResponse.model_validate(staff))


@router.get("/me", response_model=StaffResponse)
def me(staff: Staff = Depends(get_current_staff)) -> StaffResponse:
    return StaffResponse.model_validate(staff)


@router.get("/all", response_model=list[StaffResponse])
def list_staff(db: Session = Depends(get_db), _: Staff = Depends(get_current_staff)) -> list[StaffResponse]:
    members = db.query(Staff).order_by(Staff.id.asc()).all()
    return [StaffResponse.model_validate(member) for member in members]


@router.post("", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
def create_staff(
    payload: StaffCreate,
    db: Session = Depends(get_db),
    _: Staff = Depends(require_manager),
) -> StaffResponse:
    try:
        staff = staff_service.create_staff(db, **payload.model_dump())
    except StaffConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return StaffResponse.model_validate(staff)


@router.get("/salary", response_model=SalaryResponse)
def my_salary(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None),
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
) -> SalaryResponse:
    """Own pay for a month: shifts x 8 hours x hourly rate."""
    year, month = _period(month, year)
    return _serialize_payroll(staff_service.payroll_for(db, staff, year, month), year, month)


@router.get("/salaries", response_model=list[SalaryResponse])
def all_salaries(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None),
    db: Session = Depends(get_db),
    _: Staff = Depends(require_manager),
) -> list[SalaryResponse]:
    year, month = _period(month, year)
    return [_serialize_payroll(line, year, month) for line in staff_service.payroll_for_all(db, year, month)]


@router.put("/{staff_id}", response_model=StaffResponse)
def update_staff(
    staff_id: int,
    payload: StaffUpdate,
    db: Session = Depends(get_db),
    _: Staff = Depends(require_manager),
) -> StaffResponse:
    staff: Staff | None = db.get(Staff, staff_id)
    if staff is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")
    try:
        staff = staff_service.update_staff(db, staff, **payload.model_dump(exclude_unset=True))
    except StaffConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return StaffResponse.model_validate(staff)


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    manager: Staff = Depends(require_manager),
) -> Response:
    staff: Staff | None = db.get(Staff, staff_id)
    if staff is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")
    if staff.id == manager.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Managers cannot delete their own account")
    staff_service.delete_staff(db, staff)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
