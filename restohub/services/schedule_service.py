"""Shift scheduling: open shift blocks, staff assignments and calendar views."""

from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload

from restohub.models import Schedule, Staff
from restohub.models.schedule import SHIFT_HOURS, SHIFT_TYPES
from restohub.utils.time import month_bounds


class ScheduleValidationError(ValueError):
    """Raised for an unknown shift type or a date in the past."""


class ScheduleConflictError(Exception):
    """Raised when the block or assignment already exists."""


class StaffNotFoundError(LookupError):
    pass


def normalize_shift(shift: str) -> str:
    """Accept any casing of a shift name, e.g. ``morning`` -> ``Morning``."""
    normalized = shift.strip().capitalize()
    if normalized not in SHIFT_TYPES:
        raise ScheduleValidationError("Invalid shift type. Must be 'Morning' or 'Evening'")
    return normalized


def _entries_between(db: Session, start: date, end: date, staff_id: int | None = None) -> list[Schedule]:
    query = (
        select(Schedule)
        .options(joinedload(Schedule.staff))
        .where(Schedule.shift_date >= start, Schedule.shift_date < end)
        .order_by(Schedule.shift_date.asc(), Schedule.shift.asc(), Schedule.id.asc())
    )
    if staff_id is not None:
        query = query.where(Schedule.staff_id == staff_id)
    return list(db.scalars(query).all())


def group_by_day(entries: list[Schedule]) -> list[dict]:
    """Group schedule rows into ``[{date, shift_date, shifts: [...]}, ...]`` by day and shift."""
    days: dict[date, dict[str, dict]] = {}
    for entry in entries:
        shifts = days.setdefault(entry.shift_date, {})
        block = shifts.setdefault(
            entry.shift,
            {
                "id": f"{entry.shift_date.day}-{entry.shift}",
                "time": SHIFT_HOURS.get(entry.shift, ""),
                "shift": entry.shift,
                "staff": [],
            },
        )
        if entry.staff is not None:
            block["staff"].append(
                {
                    "id": entry.staff.id,
                    "name": entry.staff.name,
                    "role": entry.staff.role,
                    "schedule_id": entry.id,
                }
            )
    return [
        {"date": day.day, "shift_date": day, "shifts": list(shifts.values())}
        for day, shifts in sorted(days.items())
    ]


def week_view(db: Session, start_date: date) -> list[dict]:
    return group_by_day(_entries_between(db, start_date, start_date + timedelta(days=7)))


def month_view(db: Session, year: int, month: int) -> list[dict]:
    start, end = month_bounds(year, month)
    return group_by_day(_entries_between(db, start, end))


def entries_for_staff(db: Session, staff_id: int, year: int, month: int) -> list[Schedule]:
    start, end = month_bounds(year, month)
    return _entries_between(db, start, end, staff_id=staff_id)


def create_entry(
    db: Session,
    *,
    shift_date: date,
    shift: str,
    staff_id: int | None = None,
    today: date | None = None,
) -> Schedule:
    """Create an open shift block, or assign ``staff_id`` to the shift."""
    normalized = normalize_shift(shift)
    if shift_date < (today or date.today()):
        raise ScheduleValidationError("Cannot create a shift before today.")

    if staff_id is not None:
        if db.get(Staff, staff_id) is None:
            raise StaffNotFoundError("Staff member not found")
        duplicate = select(Schedule.id).where(
            Schedule.shift_date == shift_date, Schedule.shift == normalized, Schedule.staff_id == staff_id
        )
        conflict_message = "Staff member already assigned to this shift on this date."
    else:
        duplicate = select(Schedule.id).where(
            Schedule.shift_date == shift_date, Schedule.shift == normalized, Schedule.staff_id.is_(None)
        )
        conflict_message = "Shift already exists for this date and type."
    if db.scalar(duplicate.limit(1)) is not None:
        raise ScheduleConflictError(conflict_message)

    entry = Schedule(shift_date=shift_date, shift=normalized, staff_id=staff_id)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def delete_block(db: Session, shift_date: date, shift: str) -> int:
    """Delete every entry of a date and shift; returns the number removed."""
    normalized = normalize_shift(shift)
    result = db.execute(delete(Schedule).where(Schedule.shift_date == shift_date, Schedule.shift == normalized))
    db.commit()
    return result.rowcount or 0


def delete_entry(db: Session, schedule_id: int) -> bool:
    entry = db.get(Schedule, schedule_id)
    if entry is None:
        return False
    db.delete(entry)
    db.commit()
    return True
