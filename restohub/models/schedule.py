"""Staff schedule ORM model."""

from datetime import date

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restohub.db.base import Base

SHIFT_TYPES = ("Morning", "Evening")
SHIFT_HOURS: dict[str, str] = {"Morning": "08:00 - 15:00", "Evening": "15:00 - 22:00"}


class Schedule(Base):
    """Shift slot; a null staff reference marks an open shift block."""

    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(primary_key=True)
    shift_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    shift: Mapped[str] = mapped_column(String(16), nullable=False)
    staff_id: Mapped[int | None] = mapped_column(ForeignKey("staff.id"), nullable=True)

    staff: Mapped["Staff | None"] = relationship(back_populates="schedules")
