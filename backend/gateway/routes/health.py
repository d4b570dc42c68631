"""
Health routes: service status and an on-demand Firestore probe.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from gateway.config import Settings
from gateway.dependencies import get_app_settings, get_firebase, get_store
from gateway.diagnostics import probe_connectivity
from gateway.firebase import FirebaseHandle
from gateway.schemas import FirestoreHealthResponse, HealthResponse
from gateway.store import DocumentStore, FirestoreDocumentStore

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health(
    settings: Settings = Depends(get_app_settings),
    firebase: Optional[FirebaseHandle] = Depends(get_firebase),
    store: DocumentStore = Depends(get_store),
):
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.node_env,
        auth_mode="firebase" if firebase else "unauthenticated",
        store="firestore" if isinstance(store, FirestoreDocumentStore) else "memory",
        project_id=firebase.project_id if firebase else None,
    )


@router.get("/firestore", response_model=FirestoreHealthResponse)
async def firestore_health(
    settings: Settings = Depends(get_app_settings),
    firebase: Optional[FirebaseHandle] = Depends(get_firebase),
):
    if firebase is None:
        body = FirestoreHealthResponse(ok=False, cause="Firebase is not configured")
        return JSONResponse(status_code=503, content=body.model_dump())

    result = await probe_connectivity(
        firebase.firestore_async(),
        collection=settings.firebase_probe_collection,
        timeout=settings.firebase_probe_timeout,
    )
    body = FirestoreHealthResponse(
        ok=result.ok,
        count=result.count,
        kind=result.kind.value if result.kind else None,
        cause=result.cause,
    )
    if not result.ok:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
