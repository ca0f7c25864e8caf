"""User profile documents, written once right after sign-up.

Document ID: the Firebase Auth uid.
"""

import logging
from typing import Optional, Tuple

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from masterchef.config import settings
from masterchef.models.recipe import SCHEMA_VERSION, UserProfile
from masterchef.services.firebase_admin_init import get_firestore_client
from masterchef.utils.exceptions import NotFound
from masterchef.utils.validators import validate_owner_id

logger = logging.getLogger(__name__)


def username_from_email(email: Optional[str]) -> str:
    """Local part of the address: ``chef@example.com`` -> ``chef``."""
    if not email:
        return ""
    return email.split("@", 1)[0]


class UserProfileStore:
    """Create-once profile storage."""

    def __init__(self, db=None, collection: Optional[str] = None):
        self._db = db
        self.collection_name = collection or settings.users_collection

    @property
    def db(self):
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    def create(self, user_id: Optional[str], email: Optional[str]) -> Tuple[UserProfile, bool]:
        """Write the profile unless it already exists.

        Returns:
            (profile, created) where ``created`` is False if a profile was already there
        """
        user_id = validate_owner_id(user_id)
        doc_ref = self.db.collection(self.collection_name).document(user_id)

        existing = doc_ref.get()
        if existing.exists:
            logger.info(f"Profile for user {user_id} already exists; left unchanged")
            return UserProfile(userId=user_id, **existing.to_dict()), False

        doc_ref.set({
            "userEmail": email,
            "username": username_from_email(email),
            "createdAt": SERVER_TIMESTAMP,
            "schemaVersion": SCHEMA_VERSION,
        })
        logger.info(f"Created profile for user {user_id}")
        return UserProfile(userId=user_id, **doc_ref.get().to_dict()), True

    def get(self, user_id: Optional[str]) -> UserProfile:
        user_id = validate_owner_id(user_id)
        doc = self.db.collection(self.collection_name).document(user_id).get()
        if not doc.exists:
            raise NotFound(f"Profile for user {user_id} not found")
        return UserProfile(userId=user_id, **doc.to_dict())
