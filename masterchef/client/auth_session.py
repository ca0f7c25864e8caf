"""Email/password session against Firebase Authentication's REST API.

Every public operation returns an AuthResult instead of raising; the ``error``
string is meant to be shown to the user verbatim.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel

from masterchef.config import ClientSettings

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"

PROVIDER_ERROR_MESSAGES: Dict[str, str] = {
    "EMAIL_EXISTS": "The email address is already in use by another account.",
    "EMAIL_NOT_FOUND": "There is no account with this email address.",
    "INVALID_PASSWORD": "The password is incorrect.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "MISSING_PASSWORD": "Please enter a password.",
    "MISSING_EMAIL": "Please enter an email address.",
    "WEAK_PASSWORD": "Password should be at least 6 characters.",
    "USER_DISABLED": "This account has been disabled.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
    "OPERATION_NOT_ALLOWED": "Email/password sign-in is not enabled for this project.",
    "TOKEN_EXPIRED": "Your session has expired. Please sign in again.",
    "INVALID_REFRESH_TOKEN": "Your session has expired. Please sign in again.",
    "USER_NOT_FOUND": "This account no longer exists.",
}

# Refresh failures after which the stored session is useless
SESSION_ENDING_CODES = {"TOKEN_EXPIRED", "INVALID_REFRESH_TOKEN", "USER_NOT_FOUND", "USER_DISABLED"}

UNEXPECTED_REPLY = "Unexpected reply from the sign-in service. Please try again."


class AuthUser(BaseModel):
    """The signed-in identity."""

    uid: str
    email: Optional[str] = None
    id_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None


class AuthResult(BaseModel):
    success: bool
    user: Optional[AuthUser] = None
    error: Optional[str] = None


AuthListener = Callable[[Optional[AuthUser]], None]
ProfileCreator = Callable[[AuthUser], Awaitable[object]]


class AuthProviderError(Exception):
    """Error reply from the auth provider, already turned into a readable message."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


def provider_error_message(code: str) -> str:
    """Map a provider code such as ``WEAK_PASSWORD : Password should...`` to a sentence."""
    key = code.split(":", 1)[0].strip()
    return PROVIDER_ERROR_MESSAGES.get(key, code)


class AuthSession:
    """Sign-up, sign-in, sign-out and identity change notifications."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        profile_creator: Optional[ProfileCreator] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        client_settings: Optional[ClientSettings] = None,
    ) -> None:
        client_settings = client_settings or ClientSettings()
        self.api_key = api_key if api_key is not None else client_settings.firebase_api_key
        self.profile_creator = profile_creator
        self._http = http_client or httpx.AsyncClient(timeout=client_settings.request_timeout)
        self._user: Optional[AuthUser] = None
        self._listeners: List[AuthListener] = []
        self.busy = False

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._user

    @property
    def id_token(self) -> Optional[str]:
        return self._user.id_token if self._user else None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Call ``listener`` now with the current identity and again on every change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        self._notify_one(listener, self._user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_up(self, email: str, password: str, confirm_password: Optional[str] = None) -> AuthResult:
        """Create the account, sign in, then write the companion profile once.

        If the profile write fails the account and session remain; the result
        reports the failure.
        """
        if confirm_password is not None and password != confirm_password:
            return AuthResult(success=False, error="Passwords do not match")

        result = await self._password_auth("accounts:signUp", email, password)
        if not result.success or self.profile_creator is None:
            return result

        try:
            await self.profile_creator(result.user)
        except Exception as e:
            logger.error(f"Profile creation failed for user {result.user.uid}: {e}")
            message = getattr(e, "message", None) or str(e) or "Could not create your profile"
            return AuthResult(success=False, user=result.user, error=message)

        return result

    async def sign_in(self, email: str, password: str) -> AuthResult:
        return await self._password_auth("accounts:signInWithPassword", email, password)

    async def sign_out(self) -> AuthResult:
        """Forget the local tokens. Firebase ID tokens simply expire on their own."""
        self._set_user(None)
        return AuthResult(success=True)

    async def refresh(self) -> AuthResult:
        """Exchange the refresh token for a new ID token."""
        user = self._user
        if user is None or not user.refresh_token:
            return AuthResult(success=False, error="Not signed in")

        try:
            data = await self._post(
                SECURE_TOKEN_URL,
                data={"grant_type": "refresh_token", "refresh_token": user.refresh_token},
            )
        except AuthProviderError as e:
            if e.code in SESSION_ENDING_CODES:
                self._set_user(None)
            return AuthResult(success=False, user=self._user, error=str(e))

        if not data.get("id_token"):
            logger.warning("Token refresh reply carried no id_token")
            return AuthResult(success=False, user=user, error=UNEXPECTED_REPLY)

        refreshed = user.model_copy(
            update={
                "id_token": data["id_token"],
                "refresh_token": data.get("refresh_token", user.refresh_token),
                "expires_at": _expiry(data.get("expires_in")),
            }
        )
        self._set_user(refreshed)
        return AuthResult(success=True, user=refreshed)

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------

    async def _password_auth(self, endpoint: str, email: str, password: str) -> AuthResult:
        if not email or not email.strip():
            return AuthResult(success=False, error=PROVIDER_ERROR_MESSAGES["MISSING_EMAIL"])
        if not password:
            return AuthResult(success=False, error=PROVIDER_ERROR_MESSAGES["MISSING_PASSWORD"])

        self.busy = True
        try:
            data = await self._post(
                f"{IDENTITY_TOOLKIT_URL}/{endpoint}",
                json={"email": email.strip(), "password": password, "returnSecureToken": True},
            )
        except AuthProviderError as e:
            return AuthResult(success=False, error=str(e))
        finally:
            self.busy = False

        if not data.get("localId") or not data.get("idToken"):
            logger.warning(f"{endpoint} reply is missing localId or idToken")
            return AuthResult(success=False, error=UNEXPECTED_REPLY)

        user = AuthUser(
            uid=data["localId"],
            email=data.get("email", email.strip()),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken"),
            expires_at=_expiry(data.get("expiresIn")),
        )
        self._set_user(user)
        logger.info(f"Signed in as {user.uid}")
        return AuthResult(success=True, user=user)

    async def _post(self, url: str, *, json=None, data=None) -> dict:
        if not self.api_key:
            raise AuthProviderError("Sign-in is not configured for this app.")

        try:
            response = await self._http.post(url, params={"key": self.api_key}, json=json, data=data)
        except httpx.HTTPError as e:
            logger.warning(f"Auth provider unreachable: {e}")
            raise AuthProviderError("Could not reach the sign-in service. Please try again.") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            if not isinstance(body, dict):
                raise AuthProviderError(UNEXPECTED_REPLY)
            return body

        # Identity Toolkit: {"error": {"message": "EMAIL_EXISTS"}}; Secure Token: {"error": {"message": ...}} too
        error = body.get("error") if isinstance(body, dict) else None
        code = error.get("message") if isinstance(error, dict) else None
        if not code and isinstance(error, str):
            code = error
        if not code:
            raise AuthProviderError(f"Sign-in failed ({response.status_code})")
        raise AuthProviderError(provider_error_message(code), code=code.split(":", 1)[0].strip())

    def _set_user(self, user: Optional[AuthUser]) -> None:
        self._user = user
        for listener in list(self._listeners):
            self._notify_one(listener, user)

    @staticmethod
    def _notify_one(listener: AuthListener, user: Optional[AuthUser]) -> None:
        try:
            listener(user)
        except Exception:
            logger.exception("Auth state listener raised")


def _expiry(expires_in) -> Optional[datetime]:
    try:
        seconds = int(expires_in)
    except (TypeError, ValueError):
        return None
    return datetime.now(timezone.utc) + timedelta(seconds=seconds)
