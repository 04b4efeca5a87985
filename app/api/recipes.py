# api/recipes.py
# Handles all API endpoints related to recipes.

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional

# Import local modules
from app import crud
from app import schemas
from app.core.config import settings
from app.core.exceptions import DuplicateName
from app.core.limiter import limiter
from app.db.session import get_db

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


@router.get("", response_model=schemas.RecipePage)
def read_recipes(
        response: Response,
        page: Optional[str] = None,
        page_size: Optional[str] = Query(None, alias="pageSize"),
        db: Session = Depends(get_db),
):
    """
    Retrieve one page of recipes. Invalid paging values fall back to the defaults.
    """
    logger.debug(f"Fetching recipes with page={page}, pageSize={page_size}.")
    result = crud.get_recipes(db, page=page, page_size=page_size)
    response.headers["X-Total-Count"] = str(result["total"])
    return result


@router.get("/ingredients", response_model=List[schemas.Ingredient])
def read_ingredients(db: Session = Depends(get_db)):
    """
    Retrieve the ingredient catalog.
    """
    return crud.get_ingredients(db)


# Must stay above /{recipe_id} so "check-name" is not taken for an id
@router.get(
    "/check-name",
    response_model=schemas.NameAvailability,
    response_model_exclude_none=True,
    responses={400: {"model": schemas.NameAvailability}},
)
def check_recipe_name(name: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Report whether a recipe name is still free (case-insensitive).
    """
    if not name or not name.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"available": False, "message": "No name provided"},
        )
    if crud.recipe_name_exists(db, name):
        return {"available": False, "message": "Recipe name is already taken"}
    return {"available": True}


@router.get("/{recipe_id}", response_model=schemas.Recipe, response_model_exclude_none=True)
def read_recipe(recipe_id: str, db: Session = Depends(get_db)):
    """
    Retrieve a single recipe with its steps and ingredient lines.
    """
    logger.debug(f"Fetching recipe with ID: {recipe_id}")
    recipe = crud.get_recipe(db, recipe_id=recipe_id)
    if recipe is None:
        logger.warning(f"Recipe with ID {recipe_id} not found.")
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


@router.post(
    "",
    response_model=schemas.RecipeCreated,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def create_recipe(
        request: Request,
        recipe: schemas.RecipeCreate,
        db: Session = Depends(get_db),
):
    """
    Create a new recipe with its steps.
    """
    logger.debug(f"Creating recipe '{recipe.recipe_name}'.")
    created = crud.create_recipe(db=db, recipe=recipe)
    return {"createdRecipe": created, "message": "Recipe created successfully"}


@router.put("/{recipe_id}", response_model=schemas.RecipeUpdated, response_model_exclude_none=True)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def update_recipe(
        request: Request,
        recipe_id: str,
        recipe: schemas.RecipeCreate,
        db: Session = Depends(get_db),
):
    """
    Replace a recipe's name and steps with the submitted state.
    """
    logger.debug(f"Updating recipe with ID: {recipe_id}")
    try:
        updated = crud.update_recipe(db=db, recipe_id=recipe_id, recipe_update=recipe)
    except DuplicateName as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": e.message, "code": e.code},
        )
    if updated is None:
        logger.warning(f"Recipe with ID {recipe_id} not found for update.")
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"updatedRecipe": updated, "message": "Recipe updated successfully"}


@router.delete("/{recipe_id}", response_model=schemas.Message)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def delete_recipe(request: Request, recipe_id: str, db: Session = Depends(get_db)):
    """
    Delete a recipe and everything that belongs to it.
    """
    logger.debug(f"Deleting recipe with ID: {recipe_id}")
    if not crud.delete_recipe(db=db, recipe_id=recipe_id):
        logger.warning(f"Recipe with ID: {recipe_id} not found for deletion.")
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"message": "Recipe deleted successfully"}
