"""Recipe catalogue endpoints."""

import json

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from restohub.core.security import get_current_staff
from restohub.db.session import get_db
from restohub.models import Recipe, Staff
from restohub.schemas.recipe import (
    MenuCategoryResponse,
    RecipeIngredientPayload,
    RecipeIngredientResponse,
    RecipeResponse,
    RecipeStatusPayload,
    RecipeUpdate,
)
from restohub.services import recipe_service
from restohub.services.image_store import remove_recipe_image, save_recipe_image
from restohub.services.recipe_service import IngredientAmount, RecipeInUseError, UnknownIngredientError

router: APIRouter = APIRouter()


def _serialize_recipe(recipe: Recipe) -> RecipeResponse:
    return RecipeResponse(
        id=recipe.id,
        name=recipe.name,
        category=recipe.category,
        calories=recipe.calories,
        protein=recipe.protein,
        fat=recipe.fat,
        carbohydrate=recipe.carbohydrate,
        fiber=recipe.fiber,
        price=recipe.price,
        image_url=recipe.image_url,
        status=recipe.status,
        is_available=recipe_service.is_available(recipe),
        ingredients=[
            RecipeIngredientResponse(
                ingredient_id=line.ingredient_id,
                ingredient_name=line.ingredient.name,
                unit=line.ingredient.unit,
                weight=line.weight,
            )
            for line in recipe.ingredients
        ],
    )


def _parse_ingredients(raw: str | None) -> list[IngredientAmount]:
    if not raw:
        return []
    try:
        items = [RecipeIngredientPayload.model_validate(item) for item in json.loads(raw)]
    except (ValueError, TypeError, ValidationError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid ingredients payload") from exc
    return [IngredientAmount(ingredient_id=item.ingredient_id, weight=item.weight) for item in items]


def _load_recipe(db: Session, recipe_id: int) -> Recipe:
    recipe: Recipe | None = recipe_service.get_recipe(db, recipe_id)
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return recipe


@router.get("", response_model=list[MenuCategoryResponse])
def list_menu(
    calories: str | None = Query(default=None),
    protein: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[MenuCategoryResponse]:
    """Public menu grouped by category with optional calorie and protein filters."""
    if calories is not None and calories not in recipe_service.CALORIE_FILTERS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid calories filter")
    recipes = recipe_service.list_menu(db, calories=calories, protein=protein)
    return [
        MenuCategoryResponse(category=category, recipes=[_serialize_recipe(recipe) for recipe in group])
        for category, group in recipe_service.group_by_category(recipes)
    ]


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    name: str = Form(...),
    category: str | None = Form(default=None),
    calories: float = Form(default=0),
    protein: float = Form(default=0),
    fat: float = Form(default=0),
    carbohydrate: float = Form(default=0),
    fiber: float = Form(default=0),
    price: int = Form(..., ge=0),
    ingredients: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> RecipeResponse:
    """Create a recipe from a multipart form; ``ingredients`` is a JSON list."""
    amounts = _parse_ingredients(ingredients)
    fields = {
        "name": name,
        "category": category,
        "calories": calories,
        "protein": protein,
        "fat": fat,
        "carbohydrate": carbohydrate,
        "fiber": fiber,
        "price": price,
    }
    try:
        recipe = recipe_service.create_recipe(db, fields=fields, ingredients=amounts)
    except UnknownIngredientError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    if image is not None and image.filename:
        image_url = save_recipe_image(recipe.id, image.filename, image.file.read())
        recipe = recipe_service.update_recipe(db, recipe, fields={"image_url": image_url}, ingredients=None)
    return _serialize_recipe(_load_recipe(db, recipe.id))


@router.post("/active", response_model=RecipeResponse)
def activate_recipe(
    payload: RecipeStatusPayload,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> RecipeResponse:
    recipe = recipe_service.set_status(db, _load_recipe(db, payload.recipe_id), "available")
    return _serialize_recipe(recipe)


@router.post("/inactive", response_model=RecipeResponse)
def deactivate_recipe(
    payload: RecipeStatusPayload,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> RecipeResponse:
    recipe = recipe_service.set_status(db, _load_recipe(db, payload.recipe_id), "unavailable")
    return _serialize_recipe(recipe)


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: int, db: Session = Depends(get_db)) -> RecipeResponse:
    return _serialize_recipe(_load_recipe(db, recipe_id))


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: int,
    payload: RecipeUpdate,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> RecipeResponse:
    recipe = _load_recipe(db, recipe_id)
    fields = payload.model_dump(exclude_unset=True, exclude={"ingredients"})
    amounts: list[IngredientAmount] | None = None
    if payload.ingredients is not None:
        amounts = [IngredientAmount(ingredient_id=item.ingredient_id, weight=item.weight) for item in payload.ingredients]
    try:
        recipe = recipe_service.update_recipe(db, recipe, fields=fields, ingredients=amounts)
    except UnknownIngredientError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _serialize_recipe(_load_recipe(db, recipe.id))


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: int,
    db: Session = Depends(get_db),
    _: Staff = Depends(get_current_staff),
) -> Response:
    recipe = _load_recipe(db, recipe_id)
    image_url = recipe.image_url
    try:
        recipe_service.delete_recipe(db, recipe)
    except RecipeInUseError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    remove_recipe_image(image_url)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
