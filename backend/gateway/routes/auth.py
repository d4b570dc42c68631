"""
Authentication routes and the ``get_current_user`` dependency.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from firebase_admin import auth as firebase_auth

from gateway.config import Settings
from gateway.dependencies import get_app_settings, get_firebase
from gateway.firebase import FirebaseHandle
from gateway.schemas import PrincipalResponse, VerifyTokenRequest

logger = logging.getLogger(__name__)

router = APIRouter()

DEV_PRINCIPAL_UID = "dev-user"

# Token errors that mean "the caller is not authenticated".
TOKEN_ERRORS = (
    firebase_auth.InvalidIdTokenError,
    firebase_auth.ExpiredIdTokenError,
    firebase_auth.RevokedIdTokenError,
    firebase_auth.UserDisabledError,
)


def _principal_from_claims(claims: dict) -> PrincipalResponse:
    return PrincipalResponse(
        uid=claims.get("uid") or claims.get("sub", ""),
        email=claims.get("email"),
        claims=claims,
    )


def _verify(firebase: FirebaseHandle, id_token: str) -> PrincipalResponse:
    try:
        claims = firebase.verify_id_token(id_token)
    except TOKEN_ERRORS as exc:
        logger.info("Rejected ID token: %s", exc)
        raise HTTPException(status_code=401, detail="Invalid authentication token")
    except ValueError as exc:
        # Malformed token strings.
        logger.info("Rejected ID token: %s", exc)
        raise HTTPException(status_code=401, detail="Invalid authentication token")
    return _principal_from_claims(claims)


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    firebase: Optional[FirebaseHandle] = Depends(get_firebase),
    settings: Settings = Depends(get_app_settings),
) -> PrincipalResponse:
    """
    Resolve the caller from a ``Bearer`` ID token.

    Without Firebase the gateway only admits callers in development, as a
    fixed development principal; other environments answer 503.
    """
    if firebase is None:
        if settings.is_development:
            return PrincipalResponse(uid=DEV_PRINCIPAL_UID, dev_mode=True)
        raise HTTPException(status_code=503, detail="Authentication unavailable")

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    id_token = authorization[len("Bearer "):].strip()
    if not id_token:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return _verify(firebase, id_token)


@router.get("/me", response_model=PrincipalResponse)
def me(user: PrincipalResponse = Depends(get_current_user)):
    return user


@router.post("/verify", response_model=PrincipalResponse)
def verify_token(
    payload: VerifyTokenRequest,
    firebase: Optional[FirebaseHandle] = Depends(get_firebase),
):
    if firebase is None:
        raise HTTPException(status_code=503, detail="Authentication unavailable")
    return _verify(firebase, payload.id_token)
