"""Application-wide client objects: settings, theme, auth session and API client."""

import logging
from functools import lru_cache
from typing import Optional

import httpx

from masterchef.client.api_client import MasterChefClient
from masterchef.client.auth_session import AuthSession, AuthUser
from masterchef.client.theme import ThemeStore
from masterchef.config import ClientSettings

logger = logging.getLogger(__name__)


class AppContext:
    """
    Holds the objects every screen shares.

    The API client takes its bearer token from the session, and a fresh
    sign-up writes the user's profile through the API client.
    """

    def __init__(
        self,
        client_settings: Optional[ClientSettings] = None,
        *,
        api_transport: Optional[httpx.AsyncBaseTransport] = None,
        auth_http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = client_settings or ClientSettings()
        self.theme = ThemeStore(self.settings.theme_file)
        self.session = AuthSession(
            profile_creator=self._create_profile,
            http_client=auth_http_client,
            client_settings=self.settings,
        )
        self.api = MasterChefClient(
            token_provider=lambda: self.session.id_token,
            transport=api_transport,
            client_settings=self.settings,
        )

    async def _create_profile(self, user: AuthUser):
        logger.info(f"Creating profile for {user.uid}")
        return await self.api.create_profile()

    async def aclose(self) -> None:
        await self.api.aclose()
        await self.session.aclose()


@lru_cache()
def get_app_context() -> AppContext:
    return AppContext()
