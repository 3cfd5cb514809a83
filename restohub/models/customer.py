"""Customer ORM model."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restohub.db.base import Base

GUEST_NAME_PREFIX = "Guest_"


class Customer(Base):
    """Registered or guest customer placing orders."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    loyalty_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    address: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    sales: Mapped[list["Sale"]] = relationship(back_populates="customer")

    @property
    def is_guest(self) -> bool:
        return self.name.startswith(GUEST_NAME_PREFIX)
