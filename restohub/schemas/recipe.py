"""Recipe API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RecipeIngredientPayload(BaseModel):
    ingredient_id: int
    weight: float = Field(ge=0)


class RecipeUpdate(BaseModel):
    """Partial update; ``ingredients`` replaces the whole list when given."""

    name: str | None = None
    category: str | None = None
    calories: float | None = None
    protein: float | None = None
    fat: float | None = None
    carbohydrate: float | None = None
    fiber: float | None = None
    price: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    ingredients: list[RecipeIngredientPayload] | None = None


class RecipeStatusPayload(BaseModel):
    recipe_id: int


class RecipeIngredientResponse(BaseModel):
    ingredient_id: int
    ingredient_name: str
    unit: str
    weight: float


class RecipeResponse(BaseModel):
    id: int
    name: str
    category: str | None = None
    calories: float
    protein: float
    fat: float
    carbohydrate: float
    fiber: float
    price: int
    image_url: str | None = None
    status: str
    is_available: bool
    ingredients: list[RecipeIngredientResponse] = []

    model_config = ConfigDict(from_attributes=True)


class MenuCategoryResponse(BaseModel):
    category: str | None = None
    recipes: list[RecipeResponse]
