"""
Document store used by the services: ``get``, ``query``, ``put`` with merge
semantics and ``watch``. Records are plain dicts; every returned record
carries its document id under ``"id"``.
"""
from __future__ import annotations

import asyncio
import copy
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models.document import Document

Record = Dict[str, Any]
Predicate = Callable[[Record], bool]


def merge_fields(current: Record, partial: Record) -> Record:
    """
    Return ``current`` with the fields of ``partial`` written over it.

    Keys are overwritten wholesale; a dotted key such as
    ``"platforms.codeforces"`` addresses a nested field and leaves its
    siblings untouched.
    """
    merged = copy.deepcopy(current)
    for key, value in partial.items():
        path = key.split(".")
        target = merged
        for part in path[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        target[path[-1]] = copy.deepcopy(value)
    return merged


def _with_id(doc_id: str, data: Record) -> Record:
    record = copy.deepcopy(data)
    record["id"] = doc_id
    return record


class DocumentStore(ABC):
    def __init__(self):
        self._watchers: Dict[str, List[asyncio.Queue]] = defaultdict(list)

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        pass

    @abstractmethod
    def _all(self, collection: str) -> List[Record]:
        pass

    @abstractmethod
    def _write(self, collection: str, doc_id: str, partial: Record) -> None:
        pass

    def query(self, collection: str, predicate: Optional[Predicate] = None) -> List[Record]:
        records = self._all(collection)
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    def put(self, collection: str, doc_id: str, partial: Record) -> None:
        self._write(collection, doc_id, partial)
        for queue in self._watchers.get(collection, []):
            queue.put_nowait(None)

    async def watch(self, collection: str, predicate: Optional[Predicate] = None) -> AsyncIterator[List[Record]]:
        """Yield the current snapshot, then a fresh one after each batch of writes."""
        queue: asyncio.Queue = asyncio.Queue()
        self._watchers[collection].append(queue)
        try:
            yield self.query(collection, predicate)
            while True:
                await queue.get()
                while not queue.empty():
                    queue.get_nowait()
                yield self.query(collection, predicate)
        finally:
            self._watchers[collection].remove(queue)


class InMemoryDocumentStore(DocumentStore):
    def __init__(self, initial: Optional[Dict[str, Dict[str, Record]]] = None):
        super().__init__()
        self._collections: Dict[str, Dict[str, Record]] = defaultdict(dict)
        for collection, docs in (initial or {}).items():
            for doc_id, data in docs.items():
                self._collections[collection][doc_id] = copy.deepcopy(data)

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        data = self._collections.get(collection, {}).get(doc_id)
        return _with_id(doc_id, data) if data is not None else None

    def _all(self, collection: str) -> List[Record]:
        return [_with_id(doc_id, data) for doc_id, data in self._collections.get(collection, {}).items()]

    def _write(self, collection: str, doc_id: str, partial: Record) -> None:
        current = self._collections[collection].get(doc_id, {})
        self._collections[collection][doc_id] = merge_fields(current, partial)


class SqlDocumentStore(DocumentStore):
    """Documents kept as JSON rows in the ``documents`` table."""

    def __init__(self, session_factory: Callable[[], Session]):
        super().__init__()
        self.session_factory = session_factory

    def _find(self, db: Session, collection: str, doc_id: str) -> Optional[Document]:
        return db.query(Document).filter(
            Document.collection == collection,
            Document.doc_id == doc_id,
        ).first()

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        db = self.session_factory()
        try:
            doc = self._find(db, collection, doc_id)
            return _with_id(doc.doc_id, doc.data or {}) if doc else None
        finally:
            db.close()

    def _all(self, collection: str) -> List[Record]:
        db = self.session_factory()
        try:
            docs = db.query(Document).filter(Document.collection == collection).order_by(Document.id).all()
            return [_with_id(doc.doc_id, doc.data or {}) for doc in docs]
        finally:
            db.close()

    def _write(self, collection: str, doc_id: str, partial: Record) -> None:
        db = self.session_factory()
        try:
            doc = self._find(db, collection, doc_id)
            if doc is None:
                doc = Document(collection=collection, doc_id=doc_id, data={})
                db.add(doc)
            # Reassign so the JSON column registers the change
            doc.data = merge_fields(doc.data or {}, partial)
            db.commit()
        finally:
            db.close()
