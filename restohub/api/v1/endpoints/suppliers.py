"""Supplier endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from restohub.core.security import get_current_staff
from restohub.db.session import get_db
from restohub.models import Staff
from restohub.schemas.inventory import SupplierCreate, SupplierResponse
from restohub.services import inventory_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[SupplierResponse])
def list_suppliers(db: Session = Depends(get_db)) -> list[SupplierResponse]:
    return [SupplierResponse.model_validate(supplier) for supplier in inventory_service.list_suppliers(db)]


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    payload: SupplierCreate,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> SupplierResponse:
    supplier = inventory_service.create_supplier(db, name=payload.name, phone=payload.phone, address=payload.address)
    return SupplierResponse.model_validate(supplier)
