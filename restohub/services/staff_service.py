"""Staff account and payroll operations."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from restohub.core.security import get_password_hash, is_password_hash, verify_password
from restohub.models import Schedule, Staff
from restohub.utils.time import month_bounds

logger = logging.getLogger(__name__)

HOURS_PER_SHIFT = 8


class StaffConflictError(Exception):
    """Raised when a staff email is already taken."""


@dataclass(frozen=True)
class PayrollLine:
    staff: Staff
    working_shifts: int

    @property
    def working_hours(self) -> int:
        return self.working_shifts * HOURS_PER_SHIFT

    @property
    def total_pay(self) -> int:
        return self.working_hours * (self.staff.pay_rate or 0)


def get_staff_by_email(db: Session, email: str) -> Staff | None:
    return db.scalar(select(Staff).where(Staff.email == email).limit(1))


def authenticate_staff(db: Session, email: str, password: str) -> Staff | None:
    staff = get_staff_by_email(db, email)
    if staff is None:
        return None
    if is_password_hash(staff.password_hash):
        return staff if verify_password(password, staff.password_hash) else None

    if not secrets.compare_digest(password.encode("utf-8"), (staff.password_hash or "").encode("utf-8")):
        return None
    staff.password_hash = get_password_hash(password)
    db.commit()
    db.refresh(staff)
    logger.info("[AUTH] Upgraded plaintext password for staff_id=%s", staff.id)
    return staff


def create_staff(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str,
    phone: str | None = None,
    pay_rate: int | None = None,
) -> Staff:
    if get_staff_by_email(db, email) is not None:
        raise StaffConflictError("Staff email already registered")
    staff = Staff(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role=role,
        phone=phone,
        pay_rate=pay_rate,
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


def update_staff(
    db: Session,
    staff: Staff,
    *,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
    role: str | None = None,
    phone: str | None = None,
    pay_rate: int | None = None,
) -> Staff:
    if email and email != staff.email and get_staff_by_email(db, email) is not None:
        raise StaffConflictError("Staff email already registered")
    if name:
        staff.name = name
    if email:
        staff.email = email
    if password:
        staff.password_hash = get_password_hash(password)
    if role:
        staff.role = role
    if phone is not None:
        staff.phone = phone
    if pay_rate is not None:
        staff.pay_rate = pay_rate
    db.commit()
    db.refresh(staff)
    return staff


def delete_staff(db: Session, staff: Staff) -> None:
    """Remove a staff member together with their shift assignments."""
    db.execute(delete(Schedule).where(Schedule.staff_id == staff.id))
    db.delete(staff)
    db.commit()


def _shift_counts(db: Session, year: int, month: int, staff_id: int | None = None) -> dict[int, int]:
    start, end = month_bounds(year, month)
    query = (
        select(Schedule.staff_id, func.count(Schedule.id))
        .where(Schedule.staff_id.is_not(None), Schedule.shift_date >= start, Schedule.shift_date < end)
        .group_by(Schedule.staff_id)
    )
    if staff_id is not None:
        query = query.where(Schedule.staff_id == staff_id)
    return {int(row[0]): int(row[1]) for row in db.execute(query).all()}


def payroll_for(db: Session, staff: Staff, year: int, month: int) -> PayrollLine:
    counts = _shift_counts(db, year, month, staff_id=staff.id)
    return PayrollLine(staff=staff, working_shifts=counts.get(staff.id, 0))


def payroll_for_all(db: Session, year: int, month: int) -> list[PayrollLine]:
    counts = _shift_counts(db, year, month)
    staff_members = db.scalars(select(Staff).order_by(Staff.id.asc())).all()
    return [PayrollLine(staff=member, working_shifts=counts.get(member.id, 0)) for member in staff_members]
