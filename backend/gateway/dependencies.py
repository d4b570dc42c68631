"""
Dependency wiring for the FastAPI app.

Collaborators are created once in ``create_app`` and stored on
``app.state``; these accessors hand them to route handlers.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from gateway.config import Settings
from gateway.firebase import FirebaseHandle
from gateway.store import DocumentStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_firebase(request: Request) -> Optional[FirebaseHandle]:
    """Return the Firebase handle, or None in unauthenticated mode."""
    return request.app.state.firebase


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store
