"""Saved recipe endpoints.

Every route acts on behalf of the user in the verified Firebase ID token;
there is no way to name another owner.
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from masterchef.api.dependencies import AuthenticatedUser, get_current_user, get_recipe_store
from masterchef.models.recipe import (
    FavoriteUpdate,
    NotesUpdate,
    SavedRecipe,
    SaveRecipeRequest,
    SaveRecipeResponse,
)
from masterchef.services.recipe_store import RecipeStore
from masterchef.utils.exceptions import InvalidRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/recipes/saved", tags=["saved-recipes"])


@router.get("", response_model=List[SavedRecipe])
async def list_saved_recipes(
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
) -> List[SavedRecipe]:
    """The caller's saved recipes, newest first."""
    return await asyncio.to_thread(store.list_by_owner, user.uid)


@router.post("", response_model=SaveRecipeResponse, status_code=status.HTTP_201_CREATED)
async def save_recipe(
    body: SaveRecipeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
) -> SaveRecipeResponse:
    """
    Save a generated recipe.

    The title is taken from the first `# ` heading of the markdown at this
    point and never recomputed.
    """
    if not body.recipe.strip():
        raise InvalidRequest("Recipe content is required")

    recipe_id = await asyncio.to_thread(store.create, user.uid, body.recipe, body.ingredients)
    saved = await asyncio.to_thread(store.get, user.uid, recipe_id)
    return SaveRecipeResponse(id=recipe_id, title=saved.recipeTitle)


@router.get("/{recipe_id}", response_model=SavedRecipe)
async def get_saved_recipe(
    recipe_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
) -> SavedRecipe:
    return await asyncio.to_thread(store.get, user.uid, recipe_id)


@router.put("/{recipe_id}/favorite", status_code=status.HTTP_204_NO_CONTENT)
async def set_favorite(
    recipe_id: str,
    body: FavoriteUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
) -> Response:
    await asyncio.to_thread(store.set_favorite, user.uid, recipe_id, body.isFavorite)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{recipe_id}/notes", status_code=status.HTTP_204_NO_CONTENT)
async def set_notes(
    recipe_id: str,
    body: NotesUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
) -> Response:
    await asyncio.to_thread(store.set_notes, user.uid, recipe_id, body.notes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
) -> Response:
    """Delete permanently; deleting something already gone still returns 204."""
    await asyncio.to_thread(store.delete, user.uid, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
