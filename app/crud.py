# crud.py
# Contains the functions for Create, Read, Update, Delete (CRUD) operations.

import logging
import re
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy import func, insert
from sqlalchemy.orm import Session

from app import models
from app import schemas
from app.core.config import settings
from app.core.exceptions import DuplicateName, InvalidInput
from app.core.identifiers import generate_unique_recipe_id
from app.core.validation import format_validation_errors
from app.db.session import transaction
from app.reconcile import reconcile

# Get a logger instance
logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Largest OFFSET the database driver can bind (signed 64-bit)
MAX_OFFSET = 2 ** 63 - 1


# --- Helpers ---

def normalize_page(value: Any, default: int) -> int:
    """
    Parse a paging parameter the lenient way: take the leading integer,
    fall back to `default` when there is none or it is zero, floor at 1.
    """
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        number = int(match.group(1)) if match else None
    else:
        number = None

    if not number:
        return default
    return max(1, number)


def _as_recipe_create(recipe: Union[schemas.RecipeCreate, Dict[str, Any], None]) -> schemas.RecipeCreate:
    if isinstance(recipe, schemas.RecipeCreate):
        return recipe
    if not isinstance(recipe, dict):
        raise InvalidInput(message="Invalid recipe data")
    try:
        return schemas.RecipeCreate.model_validate(recipe)
    except ValidationError as e:
        raise InvalidInput(format_validation_errors(e.errors()))


def _check_ingredients_exist(db: Session, steps: List[schemas.StepCreate]):
    wanted = {line.ingredient_id for step in steps for line in (step.ingredients or [])}
    if not wanted:
        return
    found = {
        row.ing_id
        for row in db.query(models.Ingredient.ing_id).filter(models.Ingredient.ing_id.in_(wanted))
    }
    missing = sorted(wanted - found)
    if missing:
        raise InvalidInput([f"ingredient {ing_id} does not exist" for ing_id in missing])


def _add_ingredient_lines(db: Session, step_id: int, step: schemas.StepCreate):
    # Core insert: rows deleted by bulk statements may still sit in the identity map
    if not step.ingredients:
        return
    db.execute(
        insert(models.StepIngredient),
        [
            {"step_id": step_id, "ing_id": line.ingredient_id, "quantity": line.quantity}
            for line in step.ingredients
        ],
    )


# --- Ingredient Catalog ---

def get_ingredients(db: Session):
    """
    Retrieve the full ingredient catalog.
    """
    return db.query(models.Ingredient).order_by(models.Ingredient.ing_id).all()


# --- Recipe CRUD Functions ---

def recipe_name_exists(db: Session, name: str, exclude_id: Optional[str] = None) -> bool:
    """
    Case-insensitive check for a recipe called `name`.
    Both sides are folded by the database, the same way the unique name index folds them.
    `exclude_id` skips one recipe, so a recipe does not collide with itself on rename.
    """
    query = db.query(models.Recipe.recipe_id).filter(
        func.lower(models.Recipe.recipe_name) == func.lower(name.strip())
    )
    if exclude_id is not None:
        query = query.filter(models.Recipe.recipe_id != exclude_id)
    return query.first() is not None


def get_recipe(db: Session, recipe_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieve a single recipe with its steps and each step's ingredient lines.
    Steps without ingredient lines have no 'ingredients' key at all.
    """
    logger.debug(f"Retrieving recipe with id {recipe_id}")
    recipe = db.query(models.Recipe).filter(models.Recipe.recipe_id == recipe_id).first()
    if recipe is None:
        return None

    steps = (
        db.query(models.Step)
        .filter(models.Step.recipe_id == recipe_id)
        .order_by(models.Step.step_number, models.Step.step_id)
        .all()
    )

    lines = (
        db.query(
            models.StepIngredient.step_id,
            models.Ingredient.ing_id,
            models.Ingredient.ingr_name,
            models.StepIngredient.quantity,
            models.Ingredient.unit,
        )
        .join(models.Ingredient, models.StepIngredient.ing_id == models.Ingredient.ing_id)
        .join(models.Step, models.StepIngredient.step_id == models.Step.step_id)
        .filter(models.Step.recipe_id == recipe_id)
        .order_by(models.StepIngredient.step_id, models.Ingredient.ing_id)
        .all()
    )

    lines_by_step: Dict[int, List[Dict[str, Any]]] = {}
    for line in lines:
        lines_by_step.setdefault(line.step_id, []).append({
            "ingredient_id": line.ing_id,
            "ingredient_name": line.ingr_name,
            "quantity": float(line.quantity),
            "unit": line.unit,
        })

    assembled_steps = []
    for step in steps:
        item = {
            "step_id": step.step_id,
            "step_number": step.step_number,
            "step_instructions": step.step_instructions,
        }
        if lines_by_step.get(step.step_id):
            item["ingredients"] = lines_by_step[step.step_id]
        assembled_steps.append(item)

    return {
        "recipe_id": recipe.recipe_id,
        "recipe_name": recipe.recipe_name,
        "created_at": recipe.created_at,
        "steps": assembled_steps,
    }


def get_recipes(db: Session, page: Any = 1, page_size: Any = None) -> Dict[str, Any]:
    """
    Retrieve one page of recipes (flat rows, no steps) with the total count.
    The page size is capped at MAX_PAGE_SIZE and the capped value is the one
    returned under "page_size" (serialized as pageSize). Pages too far out to
    address are empty.
    """
    page = normalize_page(page, 1)
    page_size = min(normalize_page(page_size, settings.DEFAULT_PAGE_SIZE), settings.MAX_PAGE_SIZE)
    offset = (page - 1) * page_size

    logger.debug(f"Retrieving recipes page {page} with page size {page_size}")
    total = db.query(func.count(models.Recipe.recipe_id)).scalar()
    if offset > MAX_OFFSET:
        recipes = []
    else:
        recipes = (
            db.query(models.Recipe)
            .order_by(models.Recipe.created_at, models.Recipe.recipe_id)
            .offset(offset)
            .limit(page_size)
            .all()
        )
    return {
        "recipes": recipes,
        "total": total,
        "page": page,
        "page_size": page_size,
    }


def create_recipe(db: Session, recipe: Union[schemas.RecipeCreate, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Create a new recipe with its steps and their ingredient lines in one transaction.
    """
    recipe = _as_recipe_create(recipe)
    logger.debug(f"Creating recipe: {recipe}")

    if recipe_name_exists(db, recipe.recipe_name):
        logger.warning(f"Recipe name '{recipe.recipe_name}' is already taken")
        raise DuplicateName()

    with transaction(db):
        _check_ingredients_exist(db, recipe.steps)

        recipe_id = generate_unique_recipe_id(db)
        db.add(models.Recipe(recipe_id=recipe_id, recipe_name=recipe.recipe_name))
        db.flush()

        for step in recipe.steps:
            db_step = models.Step(
                recipe_id=recipe_id,
                step_number=step.step_number,
                step_instructions=step.step_instructions,
            )
            db.add(db_step)
            db.flush()  # Need step_id
            _add_ingredient_lines(db, db_step.step_id, step)

        db.flush()
        created = get_recipe(db, recipe_id)

    logger.debug(f"Created recipe {recipe_id}")
    return created


def update_recipe(
        db: Session, recipe_id: str, recipe_update: Union[schemas.RecipeCreate, Dict[str, Any]]
) -> Optional[Dict[str, Any]]:
    """
    Update an existing recipe to match the submitted state.
    Steps are upserted (by step_id, else by step_number), each upserted step's
    ingredient lines are replaced wholesale, and leftover steps are removed.
    Returns None if the recipe does not exist.
    """
    recipe_update = _as_recipe_create(recipe_update)
    logger.debug(f"Updating recipe {recipe_id} with: {recipe_update}")

    with transaction(db):
        db_recipe = db.query(models.Recipe).filter(models.Recipe.recipe_id == recipe_id).first()
        if db_recipe is None:
            logger.debug(f"Recipe {recipe_id} not found - nothing to update")
            return None

        if recipe_name_exists(db, recipe_update.recipe_name, exclude_id=recipe_id):
            logger.warning(f"Cannot rename recipe {recipe_id}: '{recipe_update.recipe_name}' is taken")
            raise DuplicateName()

        _check_ingredients_exist(db, recipe_update.steps)

        db_recipe.recipe_name = recipe_update.recipe_name

        current = (
            db.query(models.Step.step_id, models.Step.step_number)
            .filter(models.Step.recipe_id == recipe_id)
            .all()
        )
        plan = reconcile([(row.step_id, row.step_number) for row in current], recipe_update.steps)
        logger.debug(f"Step plan for recipe {recipe_id}: {plan}")

        upserted = []
        for step_id, step in plan.to_update:
            db.query(models.Step).filter(models.Step.step_id == step_id).update(
                {
                    models.Step.step_number: step.step_number,
                    models.Step.step_instructions: step.step_instructions,
                },
                synchronize_session=False,
            )
            upserted.append((step_id, step))

        for step in plan.to_insert:
            db_step = models.Step(
                recipe_id=recipe_id,
                step_number=step.step_number,
                step_instructions=step.step_instructions,
            )
            db.add(db_step)
            db.flush()  # Need step_id
            upserted.append((db_step.step_id, step))

        # Full replace of ingredient lines for every step that was kept or added
        for step_id, step in upserted:
            db.query(models.StepIngredient).filter(
                models.StepIngredient.step_id == step_id
            ).delete(synchronize_session=False)
            _add_ingredient_lines(db, step_id, step)

        if plan.to_delete:
            db.query(models.StepIngredient).filter(
                models.StepIngredient.step_id.in_(plan.to_delete)
            ).delete(synchronize_session=False)
            db.query(models.Step).filter(
                models.Step.step_id.in_(plan.to_delete)
            ).delete(synchronize_session=False)

        db.flush()
        # Bulk statements above bypass the identity map; reload from the rows
        db.expire_all()
        updated = get_recipe(db, recipe_id)

    return updated


def delete_recipe(db: Session, recipe_id: str) -> bool:
    """
    Delete a recipe together with its steps and their ingredient lines.
    Returns False when there was no such recipe.
    """
    with transaction(db):
        step_ids = [
            row.step_id
            for row in db.query(models.Step.step_id).filter(models.Step.recipe_id == recipe_id)
        ]
        if step_ids:
            db.query(models.StepIngredient).filter(
                models.StepIngredient.step_id.in_(step_ids)
            ).delete(synchronize_session=False)

        db.query(models.Step).filter(models.Step.recipe_id == recipe_id).delete(synchronize_session=False)
        deleted = (
            db.query(models.Recipe)
            .filter(models.Recipe.recipe_id == recipe_id)
            .delete(synchronize_session=False)
        )

    if deleted:
        logger.debug(f"Deleted recipe {recipe_id}")
    else:
        logger.debug(f"Recipe {recipe_id} not found - nothing to delete")
    return deleted > 0
