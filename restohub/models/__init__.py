"""Application models package."""

from restohub.models.audit_log import AuditLog
from restohub.models.customer import Customer
from restohub.models.deferred_job import DeferredJob
from restohub.models.inventory import (
    Ingredient,
    Restock,
    RestockDetail,
    Supplier,
    SupplierProduct,
    Waste,
    WasteDetail,
)
from restohub.models.recipe import Recipe, RecipeIngredient
from restohub.models.sale import OrderDetail, Sale
from restohub.models.schedule import Schedule
from restohub.models.staff import Staff

__all__ = [
    "AuditLog", "Customer", "DeferredJob", "Ingredient", "Restock", "RestockDetail", "Supplier", "SupplierProduct",
    "Waste", "WasteDetail", "Recipe", "RecipeIngredient", "OrderDetail", "Sale", "Schedule", "Staff",
]
