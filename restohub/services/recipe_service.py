"""Recipe catalogue operations."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from restohub.models import Ingredient, OrderDetail, Recipe, RecipeIngredient

CALORIE_FILTERS: tuple[str, ...] = ("< 300", "300 - 500", "> 500")
PROTEIN_INGREDIENTS: dict[str, list[str]] = {
    "Salmon": ["Salmon Fillet"],
    "Tuna": ["Cans tuna"],
    "Chicken": ["Chicken Breast Fillet", "Chicken Thigh"],
    "Shrimp": ["Shrimp"],
    "Scallop": ["Scallop"],
    "Tofu": ["Tofu"],
}


class RecipeInUseError(Exception):
    """Raised when deleting a recipe that existing orders reference."""


class UnknownIngredientError(LookupError):
    """Raised when a recipe references an ingredient that does not exist."""


@dataclass(frozen=True)
class IngredientAmount:
    ingredient_id: int
    weight: float


def is_available(recipe: Recipe) -> bool:
    """A recipe can be cooked when every ingredient has enough stock for one portion."""
    return all((line.ingredient.quantity or 0) >= (line.weight or 0) for line in recipe.ingredients)


def list_menu(db: Session, calories: str | None = None, protein: str | None = None) -> list[Recipe]:
    query = select(Recipe).options(selectinload(Recipe.ingredients).selectinload(RecipeIngredient.ingredient))
    if calories == "< 300":
        query = query.where(Recipe.calories < 300)
    elif calories == "300 - 500":
        query = query.where(Recipe.calories >= 300, Recipe.calories <= 500)
    elif calories == "> 500":
        query = query.where(Recipe.calories > 500)
    if protein:
        names = PROTEIN_INGREDIENTS.get(protein, [])
        query = query.where(
            Recipe.id.in_(
                select(RecipeIngredient.recipe_id)
                .join(Ingredient, Ingredient.id == RecipeIngredient.ingredient_id)
                .where(Ingredient.name.in_(names))
            )
        )
    return list(db.scalars(query.order_by(Recipe.category.asc(), Recipe.name.asc())).all())


def group_by_category(recipes: list[Recipe]) -> list[tuple[str | None, list[Recipe]]]:
    groups: dict[str | None, list[Recipe]] = {}
    for recipe in recipes:
        groups.setdefault(recipe.category, []).append(recipe)
    return list(groups.items())


def get_recipe(db: Session, recipe_id: int) -> Recipe | None:
    return db.scalar(
        select(Recipe)
        .options(selectinload(Recipe.ingredients).selectinload(RecipeIngredient.ingredient))
        .where(Recipe.id == recipe_id)
    )


def _ingredient_lines(db: Session, ingredients: list[IngredientAmount]) -> list[RecipeIngredient]:
    lines: list[RecipeIngredient] = []
    for item in ingredients:
        if db.get(Ingredient, item.ingredient_id) is None:
            raise UnknownIngredientError(f"Ingredient {item.ingredient_id} not found")
        lines.append(RecipeIngredient(ingredient_id=item.ingredient_id, weight=item.weight))
    return lines


def create_recipe(db: Session, *, fields: dict, ingredients: list[IngredientAmount]) -> Recipe:
    recipe = Recipe(**fields)
    recipe.ingredients = _ingredient_lines(db, ingredients)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe


def update_recipe(db: Session, recipe: Recipe, *, fields: dict, ingredients: list[IngredientAmount] | None) -> Recipe:
    """Apply changed fields; a given ingredient list replaces the current one."""
    for key, value in fields.items():
        setattr(recipe, key, value)
    if ingredients is not None:
        lines = _ingredient_lines(db, ingredients)
        recipe.ingredients.clear()
        db.flush()
        recipe.ingredients = lines
    db.commit()
    db.refresh(recipe)
    return recipe


def delete_recipe(db: Session, recipe: Recipe) -> None:
    referenced = db.scalar(select(OrderDetail.id).where(OrderDetail.recipe_id == recipe.id).limit(1))
    if referenced is not None:
        raise RecipeInUseError("Recipe is referenced by existing orders; mark it unavailable instead")
    db.delete(recipe)
    db.commit()


def set_status(db: Session, recipe: Recipe, status: str) -> Recipe:
    recipe.status = status
    db.commit()
    db.refresh(recipe)
    return recipe
