from typing import List, Optional


class RecipeError(Exception):
    """Base exception for recipe operations."""
    status_code = 500
    code: Optional[str] = None
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(RecipeError):
    """Payload is malformed or references unknown data."""
    status_code = 400
    message = "Invalid recipe data"

    def __init__(self, errors: Optional[List[str]] = None, message: Optional[str] = None):
        self.errors = list(errors) if errors else [message or self.message]
        super().__init__(message or self.errors[0])


class DuplicateName(RecipeError):
    """Another recipe already uses this name (case-insensitive)."""
    status_code = 400
    code = "RECIPE_NAME_EXISTS"
    message = "Recipe name already exists"


class StorageFailure(RecipeError):
    """The database rejected or failed an operation."""
    status_code = 500
