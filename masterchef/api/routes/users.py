"""User profile endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Response, status

from masterchef.api.dependencies import AuthenticatedUser, get_current_user, get_profile_store
from masterchef.models.recipe import UserProfile
from masterchef.services.user_profiles import UserProfileStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/profile", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def create_profile(
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    store: UserProfileStore = Depends(get_profile_store),
) -> UserProfile:
    """Create the caller's profile once; later calls return it unchanged with 200."""
    profile, created = await asyncio.to_thread(store.create, user.uid, user.email)
    if not created:
        response.status_code = status.HTTP_200_OK
    return profile


@router.get("/profile", response_model=UserProfile)
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    store: UserProfileStore = Depends(get_profile_store),
) -> UserProfile:
    return await asyncio.to_thread(store.get, user.uid)
