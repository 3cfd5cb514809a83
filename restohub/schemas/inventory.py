"""Inventory schemas: ingredients, suppliers, restock and waste."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class IngredientCreate(BaseModel):
    ingredient_name: str = Field(min_length=1)
    unit: str
    quantity: float = Field(ge=0)
    minimum_threshold: float | None = None
    good_for: int | None = None
    supplier_id: int | None = None


class IngredientUpdate(BaseModel):
    ingredient_name: str | None = None
    unit: str | None = None
    quantity: float | None = Field(default=None, ge=0)
    minimum_threshold: float | None = None
    good_for: int | None = None
    supplier_id: int | None = None


class IngredientResponse(BaseModel):
    ingredient_id: int
    ingredient_name: str
    unit: str
    quantity: float
    minimum_threshold: float | None = None
    good_for: int | None = None
    supplier_name: str | None = None


class IngredientRestockResponse(BaseModel):
    restock_id: int
    restock_date: date
    import_quantity: float
    import_price: int
    unit: str


class WasteItemPayload(BaseModel):
    ingredient_id: int
    quantity: float = Field(gt=0)
    reason: str | None = None


class WasteCreate(BaseModel):
    waste_date: date | None = None
    items: list[WasteItemPayload] = Field(min_length=1)


class WasteResponse(BaseModel):
    waste_id: int
    waste_date: date
    ingredient_name: str
    wasted_quantity: float
    unit: str
    reason: str | None = None


class RestockItemPayload(BaseModel):
    ingredient_id: int
    import_quantity: float = Field(gt=0)
    import_price: int = Field(ge=0)


class RestockCreate(BaseModel):
    supplier_id: int
    restock_date: date | None = None
    items: list[RestockItemPayload] = Field(min_length=1)


class RestockSummaryResponse(BaseModel):
    restock_id: int
    restock_date: date
    supplier_name: str


class RestockDetailResponse(BaseModel):
    ingredient_id: int
    ingredient_name: str
    unit: str
    import_quantity: float
    import_price: int


class RestockResponse(BaseModel):
    restock_id: int
    restock_date: date
    supplier_id: int
    supplier_name: str
    total_import_price: float
    details: list[RestockDetailResponse]


class DailyImportTotal(BaseModel):
    day: int
    total_import_price: float


class CreatedResponse(BaseModel):
    id: int
    message: str


class SupplierCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str | None = None
    address: str | None = None


class SupplierResponse(BaseModel):
    id: int
    name: str
    phone: str | None = None
    address: str | None = None

    model_config = ConfigDict(from_attributes=True)
