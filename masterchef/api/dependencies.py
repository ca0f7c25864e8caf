"""Shared API dependencies."""

from functools import lru_cache

from masterchef.middleware.auth import AuthenticatedUser, get_current_user
from masterchef.services.recipe_generator import RecipeGenerator
from masterchef.services.recipe_store import RecipeStore
from masterchef.services.user_profiles import UserProfileStore

__all__ = [
    "AuthenticatedUser",
    "get_current_user",
    "get_profile_store",
    "get_recipe_generator",
    "get_recipe_store",
]


def get_recipe_generator() -> RecipeGenerator:
    """Get recipe generator service instance."""
    return RecipeGenerator()


@lru_cache(maxsize=1)
def get_recipe_store() -> RecipeStore:
    """Saved-recipe store; the Firestore client is created on first use."""
    return RecipeStore()


@lru_cache(maxsize=1)
def get_profile_store() -> UserProfileStore:
    return UserProfileStore()
