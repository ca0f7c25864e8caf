"""Firebase Admin SDK initialization (singleton)."""

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

from masterchef.config import settings

logger = logging.getLogger(__name__)

_db = None


def init_firebase() -> None:
    """Initialize Firebase Admin SDK if not already initialized."""
    if firebase_admin._apps:
        return

    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    try:
        # A service account key file, or default credentials on Cloud Run / GCE.
        cred_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        if cred_path:
            firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
        else:
            firebase_admin.initialize_app(options=options)
        logger.info("Firebase Admin SDK initialized")
    except Exception as e:
        logger.error(f"Firebase Admin SDK init failed: {e}")
        raise


def get_firestore_client():
    """Return a Firestore client, initializing Firebase if needed."""
    global _db
    if _db is None:
        init_firebase()
        _db = firestore.client()
    return _db
