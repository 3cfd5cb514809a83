"""Staff ORM model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restohub.db.base import Base

MANAGER_ROLE = "Manager"


class Staff(Base):
    """Restaurant employee with login credentials and an hourly pay rate."""

    __tablename__ = "staff"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(64), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    pay_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)

    schedules: Mapped[list["Schedule"]] = relationship(back_populates="staff")
