"""Input validation utilities."""

import re
from typing import List, Optional, Union

from masterchef.utils.exceptions import InvalidRequest, NotAuthenticated

MAX_INGREDIENTS = 50
MAX_INGREDIENT_LENGTH = 500
MAX_PREFERENCES = 20

INGREDIENT_NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-]+$")


def validate_ingredients(ingredients: Union[str, List[str], None]) -> List[str]:
    """
    Validate the ingredient list of a generation request.

    A single string is treated as a comma-separated list.

    Args:
        ingredients: List of ingredient strings, or one comma-joined string

    Returns:
        Trimmed, non-blank ingredients in their original order

    Raises:
        InvalidRequest: If the list is missing, empty or oversized
    """
    if ingredients is None:
        raise InvalidRequest("Valid list of ingredients is required")

    if isinstance(ingredients, str):
        ingredients = ingredients.split(",")

    if not isinstance(ingredients, list):
        raise InvalidRequest("Ingredients must be a list of strings")

    if len(ingredients) > MAX_INGREDIENTS:
        raise InvalidRequest(f"Ingredients list cannot exceed {MAX_INGREDIENTS} items")

    validated = []
    for ingredient in ingredients:
        if not isinstance(ingredient, str):
            raise InvalidRequest("All ingredients must be strings")
        ingredient = ingredient.strip()
        if not ingredient:
            continue
        if len(ingredient) > MAX_INGREDIENT_LENGTH:
            raise InvalidRequest(f"Ingredient text cannot exceed {MAX_INGREDIENT_LENGTH} characters")
        validated.append(ingredient)

    if not validated:
        raise InvalidRequest("Valid list of ingredients is required")

    return validated


def validate_dietary_preferences(preferences: Optional[List[str]]) -> List[str]:
    """Trim dietary preference tags and drop blanks; ``None`` means none."""
    if not preferences:
        return []

    if len(preferences) > MAX_PREFERENCES:
        raise InvalidRequest(f"Dietary preferences cannot exceed {MAX_PREFERENCES} items")

    return [tag.strip() for tag in preferences if tag and tag.strip()]


def validate_ingredient_name(name: str) -> Optional[str]:
    """
    Check a single ingredient typed into the entry form.

    Returns:
        None when the name is acceptable, otherwise the message to show
    """
    if not name:
        return "Please enter an ingredient"
    if not INGREDIENT_NAME_PATTERN.match(name):
        return "Please enter a valid ingredient (letters, spaces, and hyphens only)"
    return None


def validate_owner_id(owner_id: Optional[str]) -> str:
    """Persistence calls need an authenticated owner id."""
    if not owner_id or not owner_id.strip():
        raise NotAuthenticated("User must be logged in to save recipes")
    return owner_id
