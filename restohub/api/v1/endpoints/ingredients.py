"""Ingredient stock endpoints (staff only)."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from restohub.core.security import get_current_staff
from restohub.db.session import get_db
from restohub.models import Ingredient, Staff
from restohub.schemas.inventory import (
    CreatedResponse,
    IngredientCreate,
    IngredientResponse,
    IngredientRestockResponse,
    IngredientUpdate,
    WasteCreate,
    WasteResponse,
)
from restohub.services import inventory_service
from restohub.services.inventory_service import IngredientConflictError, UnknownReferenceError, WasteLine

router: APIRouter = APIRouter()


def _load_ingredient(db: Session, ingredient_id: int) -> Ingredient:
    ingredient: Ingredient | None = db.get(Ingredient, ingredient_id)
    if ingredient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")
    return ingredient


@router.get("", response_model=list[IngredientResponse])
def list_ingredients(db: Session = Depends(get_db), _: Staff = Depends(get_current_staff)) -> list[IngredientResponse]:
    return [IngredientResponse(**row) for row in inventory_service.list_ingredients(db)]


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    payload: IngredientCreate,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> CreatedResponse:
    try:
        ingredient = inventory_service.create_ingredient(
            db,
            name=payload.ingredient_name,
            unit=payload.unit,
            quantity=payload.quantity,
            minimum_threshold=payload.minimum_threshold,
            good_for=payload.good_for,
            supplier_id=payload.supplier_id,
        )
    except IngredientConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except UnknownReferenceError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CreatedResponse(id=ingredient.id, message="Ingredient added successfully")


@router.get("/waste", response_model=list[WasteResponse])
def list_waste(db: Session = Depends(get_db), _: Staff = Depends(get_current_staff)) -> list[WasteResponse]:
    return [WasteResponse(**row) for row in inventory_service.list_waste(db)]


@router.post("/waste", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def record_waste(
    payload: WasteCreate,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> CreatedResponse:
    """Record wasted stock; each line is subtracted from the ingredient quantity."""
    lines = [WasteLine(ingredient_id=item.ingredient_id, quantity=item.quantity, reason=item.reason) for item in payload.items]
    try:
        waste = inventory_service.record_waste(db, lines, waste_date=payload.waste_date)
    except UnknownReferenceError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CreatedResponse(id=waste.id, message="Waste recorded successfully")


@router.put("/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    ingredient_id: int,
    payload: IngredientUpdate,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> IngredientResponse:
    ingredient = _load_ingredient(db, ingredient_id)
    changes = payload.model_dump(exclude_unset=True, exclude={"supplier_id"})
    if "ingredient_name" in changes:
        changes["name"] = changes.pop("ingredient_name")
    try:
        inventory_service.update_ingredient(db, ingredient, fields=changes, supplier_id=payload.supplier_id)
    except IngredientConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except UnknownReferenceError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    row = next(item for item in inventory_service.list_ingredients(db) if item["ingredient_id"] == ingredient_id)
    return IngredientResponse(**row)


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(
    ingredient_id: int,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> Response:
    ingredient = _load_ingredient(db, ingredient_id)
    try:
        inventory_service.delete_ingredient(db, ingredient)
    except IngredientConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{ingredient_id}/restocks", response_model=list[IngredientRestockResponse])
def ingredient_restocks(
    ingredient_id: int,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> list[IngredientRestockResponse]:
    _load_ingredient(db, ingredient_id)
    return [IngredientRestockResponse(**row) for row in inventory_service.restocks_for_ingredient(db, ingredient_id)]
