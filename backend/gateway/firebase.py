"""
Firebase Admin initialization.

The initialized app is wrapped in a ``FirebaseHandle`` that is created once
at bootstrap and handed to whatever needs it (the FastAPI app state, the
diagnostic reporter) instead of being looked up globally.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore, firestore_async

from gateway.config import Settings
from gateway.credentials import (
    CredentialLoadError,
    ServiceCredential,
    load_service_credential,
)

logger = logging.getLogger(__name__)

AppFactory = Callable[[ServiceCredential, Optional[str]], firebase_admin.App]


class FirebaseInitError(Exception):
    pass


@dataclass
class FirebaseHandle:
    """An initialized Firebase Admin app plus the credential it was built from."""

    app: firebase_admin.App
    credential: Optional[ServiceCredential] = None

    @property
    def project_id(self) -> Optional[str]:
        if self.credential is not None:
            return self.credential.project_id
        return self.app.project_id

    def firestore(self):
        return firestore.client(app=self.app)

    def firestore_async(self):
        return firestore_async.client(app=self.app)

    def verify_id_token(self, id_token: str, check_revoked: bool = False) -> dict:
        return auth.verify_id_token(
            id_token, app=self.app, check_revoked=check_revoked
        )


def create_default_app(
    credential: ServiceCredential, database_url: Optional[str]
) -> firebase_admin.App:
    """Build the default Firebase app, reusing one that already exists."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    options = {"databaseURL": database_url} if database_url else None
    return firebase_admin.initialize_app(
        credentials.Certificate(credential.info), options
    )


class FirebaseInitializer:
    """Creates the Firebase app at most once.

    The first caller constructs the app through ``app_factory``; every later
    caller gets the cached handle back.
    """

    def __init__(self, app_factory: Optional[AppFactory] = None):
        self._app_factory = app_factory or create_default_app
        self._lock = threading.Lock()
        self._handle: Optional[FirebaseHandle] = None

    @property
    def initialized(self) -> bool:
        return self._handle is not None

    @property
    def handle(self) -> Optional[FirebaseHandle]:
        return self._handle

    def initialize(
        self, credential: ServiceCredential, database_url: Optional[str] = None
    ) -> FirebaseHandle:
        with self._lock:
            if self._handle is not None:
                return self._handle
            try:
                app = self._app_factory(credential, database_url)
            except Exception as exc:
                raise FirebaseInitError(
                    f"Failed to initialize Firebase Admin SDK: {exc}"
                ) from exc
            self._handle = FirebaseHandle(app=app, credential=credential)
            logger.debug("Firebase app created for project %s", credential.project_id)
            return self._handle


def bootstrap_firebase(
    settings: Settings, initializer: Optional[FirebaseInitializer] = None
) -> Optional[FirebaseHandle]:
    """
    Initialize Firebase for the API process.

    Returns None when Firebase is disabled or cannot be configured; the
    service then runs in unauthenticated mode instead of refusing to start.
    """
    if not settings.firebase_enabled:
        logger.info("Running in development mode without Firebase authentication")
        return None

    initializer = initializer or FirebaseInitializer()
    try:
        credential = load_service_credential(settings.firebase_service_account_path)
        handle = initializer.initialize(credential, settings.firebase_db_url)
    except (CredentialLoadError, FirebaseInitError) as exc:
        logger.warning(
            "Firebase service account not configured. "
            "Running in development mode without Firebase. (%s)",
            exc,
        )
        logger.warning(
            "To enable Firebase, update %s with your credentials.",
            settings.firebase_service_account_path,
        )
        return None

    logger.info("Firebase Admin SDK initialized successfully")
    return handle
