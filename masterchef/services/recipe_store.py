"""Saved-recipe persistence on Firestore.

Collection: ``recipes`` (configurable). Document ID is generated by Firestore.
Every document carries ``userId``; all reads and writes go through that owner
check, so a document belonging to someone else looks exactly like a missing one.

Field updates are independent last-write-wins writes; nothing here spans a
transaction.
"""

import logging
from typing import List, Optional

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from masterchef.config import settings
from masterchef.models.recipe import SCHEMA_VERSION, SavedRecipe
from masterchef.services.firebase_admin_init import get_firestore_client
from masterchef.utils.exceptions import NotFound
from masterchef.utils.markdown import extract_title
from masterchef.utils.validators import validate_owner_id

logger = logging.getLogger(__name__)


class RecipeStore:
    """Owner-scoped CRUD over saved recipe documents."""

    def __init__(self, db=None, collection: Optional[str] = None):
        self._db = db
        self.collection_name = collection or settings.recipes_collection

    @property
    def db(self):
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    @property
    def collection(self):
        return self.db.collection(self.collection_name)

    def create(self, owner_id: Optional[str], recipe_markdown: str, ingredients: Optional[List[str]] = None) -> str:
        """Persist a generated recipe and return the new document id.

        Raises NotAuthenticated if there is no owner.
        """
        owner_id = validate_owner_id(owner_id)
        title = extract_title(recipe_markdown)

        _, doc_ref = self.collection.add({
            "userId": owner_id,
            "createdAt": SERVER_TIMESTAMP,
            "recipeContent": recipe_markdown or "",
            "recipeTitle": title,
            "ingredientsList": list(ingredients or []),
            "isFavorite": False,
            "userNotes": "",
            "schemaVersion": SCHEMA_VERSION,
        })
        logger.info(f"Saved recipe {doc_ref.id} for user {owner_id}", extra={"recipe_title": title})
        return doc_ref.id

    def list_by_owner(self, owner_id: Optional[str]) -> List[SavedRecipe]:
        """All of one owner's recipes, newest first."""
        owner_id = validate_owner_id(owner_id)
        query = (
            self.collection
            .where(filter=FieldFilter("userId", "==", owner_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        recipes = [SavedRecipe.from_document(doc.id, doc.to_dict()) for doc in query.stream()]
        logger.debug(f"Fetched {len(recipes)} recipes for user {owner_id}")
        return recipes

    def get(self, owner_id: Optional[str], recipe_id: str) -> SavedRecipe:
        owner_id = validate_owner_id(owner_id)
        snapshot = self._owned_snapshot(owner_id, recipe_id)
        if snapshot is None:
            raise NotFound(f"Recipe {recipe_id} not found")
        return SavedRecipe.from_document(snapshot.id, snapshot.to_dict())

    def set_favorite(self, owner_id: Optional[str], recipe_id: str, value: bool) -> None:
        """Overwrite the favorite flag; the write happens even if unchanged."""
        self._update_field(owner_id, recipe_id, {"isFavorite": bool(value)})

    def set_notes(self, owner_id: Optional[str], recipe_id: str, text: str) -> None:
        """Overwrite the notes; an empty string clears them."""
        self._update_field(owner_id, recipe_id, {"userNotes": text or ""})

    def delete(self, owner_id: Optional[str], recipe_id: str) -> None:
        """Remove permanently. A missing id is not an error."""
        owner_id = validate_owner_id(owner_id)
        snapshot = self._owned_snapshot(owner_id, recipe_id)
        if snapshot is None:
            logger.info(f"Delete of absent recipe {recipe_id} for user {owner_id} ignored")
            return
        snapshot.reference.delete()
        logger.info(f"Deleted recipe {recipe_id} for user {owner_id}")

    def _owned_snapshot(self, owner_id: str, recipe_id: str):
        if not recipe_id:
            return None
        try:
            snapshot = self.collection.document(recipe_id).get()
        except (ValueError, google_exceptions.InvalidArgument) as e:
            # Ids Firestore refuses (slashes, reserved __name__ forms) cannot exist
            logger.info(f"Rejected recipe id {recipe_id!r}: {e}")
            return None
        if not snapshot.exists:
            return None
        if (snapshot.to_dict() or {}).get("userId") != owner_id:
            logger.warning(f"User {owner_id} addressed recipe {recipe_id} owned by someone else")
            return None
        return snapshot

    def _update_field(self, owner_id: Optional[str], recipe_id: str, data: dict) -> None:
        owner_id = validate_owner_id(owner_id)
        snapshot = self._owned_snapshot(owner_id, recipe_id)
        if snapshot is None:
            raise NotFound(f"Recipe {recipe_id} not found")
        try:
            snapshot.reference.update(data)
        except google_exceptions.NotFound as e:
            # Deleted between the ownership read and the write
            raise NotFound(f"Recipe {recipe_id} not found") from e
        logger.info(f"Updated recipe {recipe_id} for user {owner_id}: {sorted(data)}")
