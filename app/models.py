# models.py
# Defines the SQLAlchemy ORM models for the database tables.

from sqlalchemy import (
    Column, ForeignKey, Integer, String, Numeric, DateTime, Index, func
)
from sqlalchemy.orm import relationship
from app.db.session import Base, RECIPE_NAME_INDEX


class Ingredient(Base):
    """
    Catalog of ingredients. Not owned by any recipe.
    """
    __tablename__ = "ingredients"

    ing_id = Column(Integer, primary_key=True, autoincrement=True)
    ingr_name = Column(String, nullable=False)
    unit = Column(String, nullable=False)


class Recipe(Base):
    """
    Recipe model for the 'recipes' table.
    """
    __tablename__ = "recipes"

    recipe_id = Column(String(21), primary_key=True)
    recipe_name = Column(String(128), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    steps = relationship(
        "Step",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Step.step_number",
    )

    def __str__(self):
        return f"{self.recipe_id}: {self.recipe_name}"


# Names are unique regardless of case
Index(RECIPE_NAME_INDEX, func.lower(Recipe.recipe_name), unique=True)


class Step(Base):
    """
    An ordered step of a recipe.
    """
    __tablename__ = "steps"

    step_id = Column(Integer, primary_key=True, autoincrement=True)
    step_number = Column(Integer, nullable=False)
    step_instructions = Column(String, nullable=False)
    recipe_id = Column(
        String(21), ForeignKey("recipes.recipe_id", ondelete="CASCADE"), nullable=False, index=True
    )

    recipe = relationship("Recipe", back_populates="steps")
    ingredients = relationship(
        "StepIngredient",
        back_populates="step",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class StepIngredient(Base):
    """
    Association object between Step and Ingredient: how much of an
    ingredient a step uses.
    """
    __tablename__ = "step_ingredients"

    step_id = Column(Integer, ForeignKey("steps.step_id", ondelete="CASCADE"), primary_key=True)
    ing_id = Column(Integer, ForeignKey("ingredients.ing_id", ondelete="CASCADE"), primary_key=True, index=True)
    quantity = Column(Numeric(10, 2), nullable=False)

    step = relationship("Step", back_populates="ingredients")
    ingredient = relationship("Ingredient")
