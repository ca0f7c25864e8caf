"""Pydantic models."""

from masterchef.models.recipe import (
    ErrorResponse,
    FavoriteUpdate,
    GenerateRecipeRequest,
    GenerateRecipeResponse,
    NotesUpdate,
    SavedRecipe,
    SaveRecipeRequest,
    SaveRecipeResponse,
    UserProfile,
)

__all__ = [
    "ErrorResponse",
    "FavoriteUpdate",
    "GenerateRecipeRequest",
    "GenerateRecipeResponse",
    "NotesUpdate",
    "SavedRecipe",
    "SaveRecipeRequest",
    "SaveRecipeResponse",
    "UserProfile",
]
