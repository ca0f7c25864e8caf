"""State behind the ingredient form: generate a recipe, then optionally save it."""

import asyncio
import logging
from typing import List, Optional

from masterchef.client.api_client import MasterChefClient
from masterchef.client.ingredients import IngredientList
from masterchef.models.recipe import SaveRecipeResponse
from masterchef.utils.exceptions import MasterChefException, NotAuthenticated
from masterchef.utils.markdown import extract_title

logger = logging.getLogger(__name__)


class RecipeComposer:
    """One generation in flight at a time; a cancelled one never lands in state."""

    def __init__(self, api: MasterChefClient, ingredients: Optional[IngredientList] = None):
        self.api = api
        self.ingredients = ingredients or IngredientList()
        self.dietary_preferences: List[str] = []

        self.recipe: Optional[str] = None
        self.recipe_ingredients: List[str] = []
        self.error: Optional[str] = None
        self.is_loading = False
        self.is_saving = False
        self.saved_id: Optional[str] = None
        self.sign_in_required = False

        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def can_generate(self) -> bool:
        return self.ingredients.gate.enabled and not self.is_loading

    @property
    def can_save(self) -> bool:
        return self.recipe is not None and not self.is_saving and self.saved_id is None

    @property
    def title(self) -> Optional[str]:
        return extract_title(self.recipe) if self.recipe is not None else None

    async def generate(self) -> Optional[str]:
        """
        Request a recipe for the current ingredients.

        Returns:
            The markdown, or None if refused, failed (see ``error``) or cancelled
        """
        if not self.can_generate:
            return None

        self._generation += 1
        generation = self._generation
        snapshot = self.ingredients.items

        self.is_loading = True
        self.error = None
        self._task = asyncio.ensure_future(self.api.generate_recipe(snapshot, self.dietary_preferences))
        task = self._task

        try:
            recipe = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                # cancel() was called; the caller itself is still running
                return None
            raise
        except MasterChefException as e:
            if generation == self._generation:
                self.error = e.message
            return None
        finally:
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            logger.debug("Dropping stale recipe response")
            return None

        self.recipe = recipe
        self.recipe_ingredients = snapshot
        self.saved_id = None
        return recipe

    def cancel(self) -> None:
        """Abandon the pending generation, if any."""
        if self._task is not None and not self._task.done():
            self._generation += 1
            self._task.cancel()
        self.is_loading = False

    async def save(self) -> Optional[SaveRecipeResponse]:
        """Save the last generated recipe with the ingredients it came from."""
        if not self.can_save:
            return None

        self.is_saving = True
        self.error = None
        self.sign_in_required = False
        try:
            saved = await self.api.save_recipe(self.recipe, self.recipe_ingredients)
        except NotAuthenticated as e:
            self.sign_in_required = True
            self.error = e.message
            return None
        except MasterChefException as e:
            self.error = f"Failed to save recipe. {e.message}"
            return None
        finally:
            self.is_saving = False

        self.saved_id = saved.id
        return saved
