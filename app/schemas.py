# schemas.py
# Defines the Pydantic models (schemas) for data validation and serialization.

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

# --- Ingredient Catalog Schemas ---
class Ingredient(BaseModel):
    ing_id: int
    ingr_name: str
    unit: str

    model_config = ConfigDict(from_attributes=True)

# --- Step Ingredient Line Schemas ---
class IngredientLineCreate(BaseModel):
    ingredient_id: int = Field(..., gt=0)
    # Stored as NUMERIC(10, 2); finer quantities are rejected rather than rounded away
    quantity: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)

class IngredientLine(BaseModel):
    ingredient_id: int
    ingredient_name: str
    quantity: float
    unit: str

# --- Step Schemas ---
class StepCreate(BaseModel):
    # Optional id of an existing step; lets an update renumber that step in place
    step_id: Optional[int] = None
    step_number: int = Field(..., ge=1)
    step_instructions: str = Field(..., min_length=10, max_length=200)
    ingredients: Optional[List[IngredientLineCreate]] = None

    @field_validator("step_instructions", mode="before")
    @classmethod
    def strip_instructions(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("ingredients")
    @classmethod
    def unique_ingredients(cls, value):
        if value:
            ids = [line.ingredient_id for line in value]
            if len(ids) != len(set(ids)):
                raise ValueError("an ingredient can only be listed once per step")
        return value

class Step(BaseModel):
    step_id: int
    step_number: int
    step_instructions: str
    # Left unset (and dropped from responses) when the step has no ingredient lines
    ingredients: Optional[List[IngredientLine]] = None

# --- Recipe Schemas ---
class RecipeCreate(BaseModel):
    recipe_name: str = Field(..., min_length=3, max_length=100)
    steps: List[StepCreate]

    @field_validator("recipe_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("steps")
    @classmethod
    def unique_step_numbers(cls, value):
        numbers = [step.step_number for step in value]
        if len(numbers) != len(set(numbers)):
            raise ValueError("step numbers must be unique")
        return value

class RecipeSummary(BaseModel):
    recipe_id: str
    recipe_name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class Recipe(RecipeSummary):
    steps: List[Step]

class RecipePage(BaseModel):
    recipes: List[RecipeSummary]
    total: int
    page: int
    page_size: int = Field(..., serialization_alias="pageSize")

# --- Response Envelopes ---
class Message(BaseModel):
    message: str

class RecipeCreated(BaseModel):
    createdRecipe: Recipe
    message: str = "Recipe created successfully"

class RecipeUpdated(BaseModel):
    updatedRecipe: Recipe
    message: str = "Recipe updated successfully"

class NameAvailability(BaseModel):
    available: bool
    message: Optional[str] = None
