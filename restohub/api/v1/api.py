"""API v1 router composition."""

from fastapi import APIRouter

from restohub.api.v1.endpoints import (
    customers,
    ingredients,
    orders,
    payments,
    recipes,
    restock,
    sales,
    schedules,
    staff,
    suppliers,
)

api_router: APIRouter = APIRouter()
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(recipes.router, prefix="/recipes", tags=["recipes"])
api_router.include_router(ingredients.router, prefix="/ingredients", tags=["ingredients"])
api_router.include_router(restock.router, prefix="/restock", tags=["restock"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["suppliers"])
