"""
Document store interface.

The engine talks to a document-oriented store through this narrow
surface: keyed documents grouped in collections, single-document
atomic writes, equality filters and a single sort key. No transactions,
no optimistic concurrency tokens.
"""

import asyncio
import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

Where = Sequence[Tuple[str, Any]]


class DocumentNotFound(KeyError):
    """Raised by update() when the target document does not exist."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id}")


class DocumentStore(ABC):
    """
    Async document store.

    Documents are plain dicts. Returned dicts always carry their key
    under "id" and are copies the caller may freely modify.
    """

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert under a store-generated key and return it."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one document or None."""

    @abstractmethod
    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False
    ) -> None:
        """Write a document under a caller-chosen key."""

    @abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Atomically merge fields into an existing document.

        Raises DocumentNotFound if the document is missing. Returns the
        document as written.
        """

    @abstractmethod
    async def query(
        self,
        collection: str,
        where: Where = (),
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[Dict[str, Any]]:
        """Equality-filtered, optionally ordered listing."""


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local backend.

    Every call yields to the event loop once before touching data, the
    way a remote round trip would, so concurrent callers interleave.
    Writes to a single document are applied in one step.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    @staticmethod
    def _snapshot(doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        doc = copy.deepcopy(data)
        doc["id"] = doc_id
        return doc

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        await asyncio.sleep(0)
        doc_id = uuid4().hex
        stored = copy.deepcopy(data)
        stored.pop("id", None)
        self._collection(collection)[doc_id] = stored
        return doc_id

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        await asyncio.sleep(0)
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return self._snapshot(doc_id, data)

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False
    ) -> None:
        await asyncio.sleep(0)
        docs = self._collection(collection)
        stored = copy.deepcopy(data)
        stored.pop("id", None)
        if merge and doc_id in docs:
            docs[doc_id] = {**docs[doc_id], **stored}
        else:
            docs[doc_id] = stored

    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any]
    ) -> Dict[str, Any]:
        await asyncio.sleep(0)
        docs = self._collection(collection)
        if doc_id not in docs:
            raise DocumentNotFound(collection, doc_id)
        changes = copy.deepcopy(fields)
        changes.pop("id", None)
        docs[doc_id] = {**docs[doc_id], **changes}
        return self._snapshot(doc_id, docs[doc_id])

    async def query(
        self,
        collection: str,
        where: Where = (),
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[Dict[str, Any]]:
        await asyncio.sleep(0)
        results = [
            self._snapshot(doc_id, data)
            for doc_id, data in self._collection(collection).items()
            if all(data.get(field) == value for field, value in where)
        ]
        if order_by:
            # Documents lacking the sort key are dropped, as ordered
            # queries in document stores do.
            results = [doc for doc in results if doc.get(order_by) is not None]
            results.sort(key=lambda doc: doc[order_by], reverse=descending)
        return results
