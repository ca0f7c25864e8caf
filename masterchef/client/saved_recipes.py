"""Saved-recipes list state with optimistic favorite/notes/delete.

Each action is applied locally first, then sent. On failure the local change
is rolled back and ``error`` holds the message; the next ``refresh()``
reconciles with whatever the server has.
"""

import logging
from typing import Callable, List, Optional, Set

from masterchef.client.api_client import MasterChefClient
from masterchef.models.recipe import SavedRecipe
from masterchef.utils.exceptions import MasterChefException, NotAuthenticated

logger = logging.getLogger(__name__)


def filter_recipes(recipes: List[SavedRecipe], query: Optional[str]) -> List[SavedRecipe]:
    """Case-insensitive substring match on the title or any ingredient tag."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(recipes)
    return [
        recipe
        for recipe in recipes
        if needle in recipe.recipeTitle.lower()
        or any(needle in tag.lower() for tag in recipe.ingredientsList)
    ]


class SavedRecipesView:
    """The signed-in user's saved recipes."""

    def __init__(self, api: MasterChefClient):
        self.api = api
        self.recipes: List[SavedRecipe] = []
        self.search_query = ""
        self.expanded: Set[str] = set()
        self.error: Optional[str] = None
        self.loading = False
        self.sign_in_required = False
        self._pending: Set[str] = set()

    @property
    def visible(self) -> List[SavedRecipe]:
        return filter_recipes(self.recipes, self.search_query)

    def is_pending(self, recipe_id: str) -> bool:
        return recipe_id in self._pending

    def toggle_expanded(self, recipe_id: str) -> None:
        self.expanded ^= {recipe_id}

    async def refresh(self) -> bool:
        self.loading = True
        self.error = None
        try:
            self.recipes = await self.api.list_recipes()
            self.sign_in_required = False
            return True
        except NotAuthenticated as e:
            self.recipes = []
            self.sign_in_required = True
            self.error = e.message
            return False
        except MasterChefException as e:
            self.error = e.message
            return False
        finally:
            self.loading = False

    async def toggle_favorite(self, recipe_id: str) -> bool:
        recipe = self._find(recipe_id)
        if recipe is None:
            return False
        value = not recipe.isFavorite
        return await self._apply(
            recipe_id,
            recipe.model_copy(update={"isFavorite": value}),
            lambda: self.api.set_favorite(recipe_id, value),
            "Error updating favorite status",
        )

    async def save_notes(self, recipe_id: str, notes: str) -> bool:
        recipe = self._find(recipe_id)
        if recipe is None:
            return False
        return await self._apply(
            recipe_id,
            recipe.model_copy(update={"userNotes": notes}),
            lambda: self.api.set_notes(recipe_id, notes),
            "Error saving notes",
        )

    async def delete(self, recipe_id: str, confirm: Optional[Callable[[], bool]] = None) -> bool:
        """Remove a recipe; ``confirm`` returning False aborts before anything changes."""
        if recipe_id in self._pending:
            return False
        if confirm is not None and not confirm():
            return False

        index = self._index(recipe_id)
        if index is None:
            return False

        removed = self.recipes.pop(index)
        self._pending.add(recipe_id)
        self.error = None
        try:
            await self.api.delete_recipe(recipe_id)
        except MasterChefException as e:
            logger.warning(f"Delete of {recipe_id} failed, restoring: {e.message}")
            self.recipes.insert(min(index, len(self.recipes)), removed)
            self.error = f"Error deleting recipe: {e.message}"
            return False
        finally:
            self._pending.discard(recipe_id)

        self.expanded.discard(recipe_id)
        return True

    # ------------------------------------------------------------------

    def _find(self, recipe_id: str) -> Optional[SavedRecipe]:
        index = self._index(recipe_id)
        return None if index is None else self.recipes[index]

    def _index(self, recipe_id: str) -> Optional[int]:
        for index, recipe in enumerate(self.recipes):
            if recipe.id == recipe_id:
                return index
        return None

    async def _apply(self, recipe_id: str, updated: SavedRecipe, send, failure_prefix: str) -> bool:
        if recipe_id in self._pending:
            return False

        index = self._index(recipe_id)
        previous = self.recipes[index]
        self.recipes[index] = updated
        self._pending.add(recipe_id)
        self.error = None
        try:
            await send()
        except MasterChefException as e:
            logger.warning(f"{failure_prefix} for {recipe_id}: {e.message}")
            current = self._index(recipe_id)
            if current is not None:
                self.recipes[current] = previous
            self.error = f"{failure_prefix}: {e.message}"
            return False
        finally:
            self._pending.discard(recipe_id)
        return True
