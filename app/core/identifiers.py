import logging
import secrets
from typing import Callable

from sqlalchemy.orm import Session

from app import models
from app.core.config import settings

logger = logging.getLogger(__name__)

# URL-safe alphabet, 64 symbols
ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"


def generate_recipe_id(size: int = settings.RECIPE_ID_LENGTH) -> str:
    """
    Returns a random URL-safe token of the given length.
    """
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))


def generate_unique_id(exists: Callable[[str], bool], size: int = settings.RECIPE_ID_LENGTH) -> str:
    """
    Keeps generating tokens until `exists` reports one as unused.
    """
    candidate = generate_recipe_id(size)
    while exists(candidate):
        logger.debug(f"Generated id {candidate} is already taken, retrying")
        candidate = generate_recipe_id(size)
    return candidate


def generate_unique_recipe_id(db: Session) -> str:
    """
    Generate a recipe id not present in the recipes table.
    The lookup runs on the caller's session, so rows added earlier in the
    same transaction are taken into account.
    """
    def recipe_id_exists(candidate: str) -> bool:
        return (
            db.query(models.Recipe.recipe_id)
            .filter(models.Recipe.recipe_id == candidate)
            .first()
        ) is not None

    return generate_unique_id(recipe_id_exists)
