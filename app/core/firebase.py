"""
Firebase admin initialization and helpers.

The frontend signs users in with Firebase Authentication and sends the
Firebase ID token with every request. The backend verifies those tokens
with the Admin SDK and keeps doctors, patients and appointments in
Firestore.
"""

import os
import firebase_admin
from firebase_admin import credentials, firestore

from app.core.config import settings

# Global references to avoid re-initialization
_firebase_app = None
db = None


def init_firebase():
    """
    Initialize Firebase Admin SDK if not already initialized.

    The credentials path comes from FIREBASE_CREDENTIALS (env or .env),
    falling back to app/core/firebase_key.json for local dev.
    """

    global _firebase_app, db

    # Prevent re-initialization (important for Uvicorn reload)
    if firebase_admin._apps:
        db = firestore.client()
        return

    cred_path = settings.FIREBASE_CREDENTIALS

    if not os.path.exists(cred_path):
        raise RuntimeError(
            f"Firebase credentials not found at: {cred_path}\n"
            "Set FIREBASE_CREDENTIALS env var or place firebase_key.json correctly."
        )

    cred = credentials.Certificate(cred_path)
    _firebase_app = firebase_admin.initialize_app(cred)

    db = firestore.client()

    print("Firebase Admin initialized successfully.")


def get_db():
    """FastAPI dependency returning the Firestore client."""
    if db is None:
        raise RuntimeError("Firestore client not initialized")
    return db


def run_in_transaction(client, fn, *args, **kwargs):
    """
    Run fn(transaction, *args, **kwargs) inside a Firestore transaction.

    Firestore retries the whole function when a document read inside it
    changed before commit, so fn must do all reads before any writes.
    """
    transaction = client.transaction()
    return firestore.transactional(fn)(transaction, *args, **kwargs)
