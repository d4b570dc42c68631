"""
Document store abstraction for Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol


@dataclass
class StoredDocument:
    id: str
    data: dict
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "data": self.data,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class DocumentStore(Protocol):
    """Operations the resource routes need from the document store."""

    def list(self, collection: str, limit: int = 50) -> list[StoredDocument]:
        ...

    def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        ...

    def create(self, collection: str, data: dict) -> StoredDocument:
        ...

    def update(
        self, collection: str, doc_id: str, data: dict
    ) -> Optional[StoredDocument]:
        ...

    def delete(self, collection: str, doc_id: str) -> bool:
        ...


class InMemoryDocumentStore:
    """Simple in-memory store for development and tests."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, StoredDocument]] = {}

    def reset(self) -> None:
        self.collections.clear()

    def list(self, collection: str, limit: int = 50) -> list[StoredDocument]:
        docs = self.collections.get(collection, {})
        return list(docs.values())[:limit]

    def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        return self.collections.get(collection, {}).get(doc_id)

    def create(self, collection: str, data: dict) -> StoredDocument:
        doc = StoredDocument(id=uuid.uuid4().hex, data=dict(data))
        self.collections.setdefault(collection, {})[doc.id] = doc
        return doc

    def update(
        self, collection: str, doc_id: str, data: dict
    ) -> Optional[StoredDocument]:
        doc = self.get(collection, doc_id)
        if doc is None:
            return None
        doc.data.update(data)
        doc.updated_at = time.time()
        return doc

    def delete(self, collection: str, doc_id: str) -> bool:
        return self.collections.get(collection, {}).pop(doc_id, None) is not None


class FirestoreDocumentStore:
    """
    Firestore-backed store. Documents keep their payload at the top level
    with ``created_at``/``updated_at`` timestamps alongside.
    """

    def __init__(self, client):
        self.client = client

    @staticmethod
    def _to_document(snapshot) -> StoredDocument:
        payload = dict(snapshot.to_dict() or {})
        created_at = payload.pop("created_at", None) or 0.0
        updated_at = payload.pop("updated_at", None) or created_at
        return StoredDocument(
            id=snapshot.id,
            data=payload,
            created_at=created_at,
            updated_at=updated_at,
        )

    def list(self, collection: str, limit: int = 50) -> list[StoredDocument]:
        query = self.client.collection(collection).limit(limit)
        return [self._to_document(snapshot) for snapshot in query.stream()]

    def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        snapshot = self.client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return self._to_document(snapshot)

    def create(self, collection: str, data: dict) -> StoredDocument:
        now = time.time()
        ref = self.client.collection(collection).document()
        ref.set({**data, "created_at": now, "updated_at": now})
        return StoredDocument(id=ref.id, data=dict(data), created_at=now, updated_at=now)

    def update(
        self, collection: str, doc_id: str, data: dict
    ) -> Optional[StoredDocument]:
        ref = self.client.collection(collection).document(doc_id)
        if not ref.get().exists:
            return None
        ref.update({**data, "updated_at": time.time()})
        return self._to_document(ref.get())

    def delete(self, collection: str, doc_id: str) -> bool:
        ref = self.client.collection(collection).document(doc_id)
        if not ref.get().exists:
            return False
        ref.delete()
        return True
