"""Firebase ID token authentication."""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Header
from firebase_admin import auth as firebase_auth
from pydantic import BaseModel

from masterchef.services.firebase_admin_init import init_firebase
from masterchef.utils.exceptions import NotAuthenticated

logger = logging.getLogger(__name__)

TokenVerifier = Callable[[str], Dict[str, Any]]


class AuthenticatedUser(BaseModel):
    """Identity taken from a verified ID token."""

    uid: str
    email: Optional[str] = None


def verify_firebase_id_token(token: str) -> Dict[str, Any]:
    """Verify a Firebase ID token with the Admin SDK and return its claims."""
    init_firebase()
    return firebase_auth.verify_id_token(token)


def get_token_verifier() -> TokenVerifier:
    """Token verifier dependency (overridden in tests)."""
    return verify_firebase_id_token


async def get_current_user(
    authorization: Optional[str] = Header(None),
    verify: TokenVerifier = Depends(get_token_verifier),
) -> AuthenticatedUser:
    """
    Resolve the caller from ``Authorization: Bearer <ID token>``.

    Raises:
        NotAuthenticated: If the header is missing, malformed, or the token is rejected
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise NotAuthenticated("Missing or invalid Authorization header. Please sign in.")

    token = authorization[7:].strip()
    if not token:
        raise NotAuthenticated("Missing or invalid Authorization header. Please sign in.")

    try:
        claims = verify(token)
    except Exception as e:
        logger.warning(f"Firebase token verification failed: {e}")
        raise NotAuthenticated("Your session has expired or is invalid. Please sign in again.") from e

    uid = claims.get("uid") or claims.get("user_id") or claims.get("sub")
    if not uid:
        raise NotAuthenticated("Token does not identify a user. Please sign in again.")

    return AuthenticatedUser(uid=uid, email=claims.get("email"))
