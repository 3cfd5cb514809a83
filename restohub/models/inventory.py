"""Inventory ORM models: ingredients, suppliers, restock and waste batches."""

from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restohub.db.base import Base


class Supplier(Base):
    """Vendor that ingredients are restocked from."""

    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)


class Ingredient(Base):
    """Stock-keeping unit tracked in the kitchen inventory."""

    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    unit: Mapped[str] = mapped_column(String(32), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    minimum_threshold: Mapped[float | None] = mapped_column(Float, nullable=True)
    good_for: Mapped[int | None] = mapped_column(Integer, nullable=True)

    supplier_links: Mapped[list["SupplierProduct"]] = relationship(back_populates="ingredient")


class SupplierProduct(Base):
    """Link between a supplier and an ingredient it provides."""

    __tablename__ = "supplier_products"

    id: Mapped[int] = mapped_column(primary_key=True)
    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id"), nullable=False)
    ingredient_id: Mapped[int] = mapped_column(ForeignKey("ingredients.id"), nullable=False)

    supplier: Mapped[Supplier] = relationship()
    ingredient: Mapped[Ingredient] = relationship(back_populates="supplier_links")


class Restock(Base):
    """Restock batch header."""

    __tablename__ = "restocks"

    id: Mapped[int] = mapped_column(primary_key=True)
    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id"), nullable=False)
    restock_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    supplier: Mapped[Supplier] = relationship()
    details: Mapped[list["RestockDetail"]] = relationship(back_populates="restock", cascade="all, delete-orphan")


class RestockDetail(Base):
    __tablename__ = "restock_details"

    id: Mapped[int] = mapped_column(primary_key=True)
    restock_id: Mapped[int] = mapped_column(ForeignKey("restocks.id"), nullable=False)
    ingredient_id: Mapped[int] = mapped_column(ForeignKey("ingredients.id"), nullable=False)
    import_quantity: Mapped[float] = mapped_column(Float, nullable=False)
    import_price: Mapped[int] = mapped_column(Integer, nullable=False)

    restock: Mapped[Restock] = relationship(back_populates="details")
    ingredient: Mapped[Ingredient] = relationship()


class Waste(Base):
    """Waste batch header."""

    __tablename__ = "wastes"

    id: Mapped[int] = mapped_column(primary_key=True)
    waste_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    details: Mapped[list["WasteDetail"]] = relationship(back_populates="waste", cascade="all, delete-orphan")


class WasteDetail(Base):
    __tablename__ = "waste_details"

    id: Mapped[int] = mapped_column(primary_key=True)
    waste_id: Mapped[int] = mapped_column(ForeignKey("wastes.id"), nullable=False)
    ingredient_id: Mapped[int] = mapped_column(ForeignKey("ingredients.id"), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    waste: Mapped[Waste] = relationship(back_populates="details")
    ingredient: Mapped[Ingredient] = relationship()
