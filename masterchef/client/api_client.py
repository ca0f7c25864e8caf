"""HTTP client for the MasterChef API.

Serializes requests into the shapes the server expects and unwraps the
responses. Error bodies come back as the same exception classes the server
raised, so callers branch on type (and ``retryable``) rather than on status codes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from masterchef.config import ClientSettings
from masterchef.models.recipe import SavedRecipe, SaveRecipeResponse, UserProfile
from masterchef.utils.exceptions import (
    MasterChefException,
    NotAuthenticated,
    UpstreamFailure,
    exception_for_kind,
)

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]
ModelT = TypeVar("ModelT", bound=BaseModel)

MALFORMED_RESPONSE = "The server returned a malformed response. Please try again."

_SAVED_RECIPE_LIST = TypeAdapter(List[SavedRecipe])


class MasterChefClient:
    """Async client for generation, saved recipes and profiles."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client_settings: Optional[ClientSettings] = None,
    ) -> None:
        client_settings = client_settings or ClientSettings()
        self.token_provider = token_provider or (lambda: None)
        self._http = httpx.AsyncClient(
            base_url=(base_url or client_settings.backend_url).rstrip("/"),
            timeout=httpx.Timeout(timeout or client_settings.request_timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "MasterChefClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_recipe(
        self,
        ingredients: List[str],
        dietary_preferences: Optional[List[str]] = None,
    ) -> str:
        """Ask the gateway for a recipe; returns the markdown text."""
        payload = {"ingredients": list(ingredients)}
        if dietary_preferences:
            payload["dietaryPreferences"] = list(dietary_preferences)

        data = await self._request("POST", "/api/recipes/generate", json=payload)

        recipe = data.get("recipe") if isinstance(data, dict) else None
        if not isinstance(recipe, str) or not recipe.strip():
            raise UpstreamFailure("The server returned an empty recipe. Please try again.")
        return recipe

    # ------------------------------------------------------------------
    # Saved recipes
    # ------------------------------------------------------------------

    async def save_recipe(self, recipe: str, ingredients: List[str]) -> SaveRecipeResponse:
        data = await self._request(
            "POST",
            "/api/recipes/saved",
            json={"recipe": recipe, "ingredients": list(ingredients)},
            authenticated=True,
        )
        return self._parse(SaveRecipeResponse, data)

    async def list_recipes(self) -> List[SavedRecipe]:
        data = await self._request("GET", "/api/recipes/saved", authenticated=True)
        try:
            return _SAVED_RECIPE_LIST.validate_python(data)
        except ValidationError as e:
            logger.warning(f"Unreadable saved recipe list: {e}")
            raise UpstreamFailure(MALFORMED_RESPONSE) from e

    async def get_recipe(self, recipe_id: str) -> SavedRecipe:
        data = await self._request("GET", f"/api/recipes/saved/{recipe_id}", authenticated=True)
        return self._parse(SavedRecipe, data)

    async def set_favorite(self, recipe_id: str, value: bool) -> None:
        await self._request(
            "PUT", f"/api/recipes/saved/{recipe_id}/favorite", json={"isFavorite": value}, authenticated=True
        )

    async def set_notes(self, recipe_id: str, notes: str) -> None:
        await self._request(
            "PUT", f"/api/recipes/saved/{recipe_id}/notes", json={"notes": notes}, authenticated=True
        )

    async def delete_recipe(self, recipe_id: str) -> None:
        await self._request("DELETE", f"/api/recipes/saved/{recipe_id}", authenticated=True)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def create_profile(self) -> UserProfile:
        data = await self._request("POST", "/api/users/profile", authenticated=True)
        return self._parse(UserProfile, data)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, *, json=None, authenticated: bool = False):
        headers = {}
        if authenticated:
            token = self.token_provider()
            if not token:
                raise NotAuthenticated("Please sign in to manage your saved recipes")
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise UpstreamFailure("The server took too long to respond. Please try again.") from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise UpstreamFailure("Could not reach the server. Please try again.") from e

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                # e.g. an HTML page from a proxy in front of the API
                logger.warning(f"{method} {path} returned a non-JSON {response.status_code} body")
                raise UpstreamFailure(MALFORMED_RESPONSE) from e

        raise self._error_from_response(response)

    @staticmethod
    def _parse(model: Type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Unreadable {model.__name__} in response: {e}")
            raise UpstreamFailure(MALFORMED_RESPONSE) from e

    @staticmethod
    def _error_from_response(response: httpx.Response) -> MasterChefException:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and "message" in body:
            exc = exception_for_kind(body.get("error", ""), str(body["message"]))
        else:
            exc = MasterChefException(f"Request failed: {response.status_code} {response.reason_phrase}")

        logger.info(f"API error {response.status_code}: {exc.message}")
        return exc
