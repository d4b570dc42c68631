"""
CRUD router factory shared by the school resource modules.
"""

import logging
from typing import Type

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from gateway.dependencies import get_store
from gateway.routes.auth import get_current_user
from gateway.schemas import DocumentListResponse, DocumentResponse, ResourcePayload
from gateway.store import DocumentStore, StoredDocument

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50


def _to_response(doc: StoredDocument) -> DocumentResponse:
    return DocumentResponse(**doc.as_dict())


def build_resource_router(
    collection: str, payload_model: Type[ResourcePayload], label: str
) -> APIRouter:
    """Return a router exposing list/get/create/update/delete for ``collection``."""
    router = APIRouter(dependencies=[Depends(get_current_user)])

    @router.get("", response_model=DocumentListResponse)
    def list_documents(
        limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
        store: DocumentStore = Depends(get_store),
    ):
        docs = store.list(collection, limit=limit)
        return DocumentListResponse(
            items=[_to_response(doc) for doc in docs], count=len(docs)
        )

    @router.get("/{doc_id}", response_model=DocumentResponse)
    def get_document(doc_id: str, store: DocumentStore = Depends(get_store)):
        doc = store.get(collection, doc_id)
        if doc is None:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return _to_response(doc)

    @router.post("", response_model=DocumentResponse, status_code=201)
    def create_document(
        payload: payload_model = Body(...),
        store: DocumentStore = Depends(get_store),
    ):
        doc = store.create(collection, payload.model_dump(mode="json"))
        logger.info("Created %s/%s", collection, doc.id)
        return _to_response(doc)

    @router.put("/{doc_id}", response_model=DocumentResponse)
    def update_document(
        doc_id: str,
        payload: payload_model = Body(...),
        store: DocumentStore = Depends(get_store),
    ):
        doc = store.update(collection, doc_id, payload.model_dump(mode="json"))
        if doc is None:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return _to_response(doc)

    @router.delete("/{doc_id}", status_code=204)
    def delete_document(doc_id: str, store: DocumentStore = Depends(get_store)):
        if not store.delete(collection, doc_id):
            raise HTTPException(status_code=404, detail=f"{label} not found")
        logger.info("Deleted %s/%s", collection, doc_id)
        return Response(status_code=204)

    return router
