"""Sale (customer order) ORM models."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restohub.db.base import Base


class Sale(Base):
    """Customer order with delivery and payment metadata."""

    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Pending")
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False, default="cash")
    payment_status: Mapped[str] = mapped_column(String(32), nullable=False, default="Unpaid")
    payment_transaction_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    delivery_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_distance: Mapped[float | None] = mapped_column(Float, nullable=True)
    delivery_charge: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    loyalty_points_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sale_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    completion_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    customer: Mapped["Customer"] = relationship(back_populates="sales")
    items: Mapped[list["OrderDetail"]] = relationship(back_populates="sale", cascade="all, delete-orphan")


class OrderDetail(Base):
    """Line item of a sale."""

    __tablename__ = "order_details"

    id: Mapped[int] = mapped_column(primary_key=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sales.id"), nullable=False)
    recipe_id: Mapped[int] = mapped_column(ForeignKey("recipes.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    sale: Mapped[Sale] = relationship(back_populates="items")
    recipe: Mapped["Recipe"] = relationship()
