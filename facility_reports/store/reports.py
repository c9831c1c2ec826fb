"""
Report Store

Persistence and queries over the "reports" collection. Owns every
persisted report; callers only ever receive frozen Report snapshots.
"""

from typing import Any, Dict, List

from ..errors import NotFoundError
from ..models.report import Report
from ..services.visibility import newest_first, visible_to_admin
from .base import store_operation
from .documents import DocumentNotFound, DocumentStore

REPORTS_COLLECTION = "reports"


class ReportStore:
    """
    Thin typed layer over the document store.

    Holds no cache: every read goes to the backend, so a query always
    reflects the latest write.
    """

    def __init__(self, documents: DocumentStore):
        self.documents = documents

    @staticmethod
    def _to_report(doc: Dict[str, Any]) -> Report:
        return Report.model_validate(doc)

    @store_operation
    async def create(self, data: Dict[str, Any]) -> Report:
        """Insert a new report document and return its snapshot."""
        report_id = await self.documents.add(REPORTS_COLLECTION, data)
        return self._to_report({**data, "id": report_id})

    @store_operation
    async def get(self, report_id: str) -> Report:
        doc = await self.documents.get(REPORTS_COLLECTION, report_id)
        if doc is None:
            raise NotFoundError("Report", report_id)
        return self._to_report(doc)

    @store_operation
    async def update(self, report_id: str, fields: Dict[str, Any]) -> Report:
        """Apply all fields in one atomic single-document write."""
        try:
            doc = await self.documents.update(REPORTS_COLLECTION, report_id, fields)
        except DocumentNotFound:
            raise NotFoundError("Report", report_id)
        return self._to_report(doc)

    async def _query(self, **where) -> List[Report]:
        docs = await self.documents.query(
            REPORTS_COLLECTION, where=list(where.items())
        )
        return newest_first(self._to_report(doc) for doc in docs)

    @store_operation
    async def list_visible(self) -> List[Report]:
        """Reports not hidden from admins, newest first."""
        return visible_to_admin(await self._query())

    @store_operation
    async def list_by_reporter(self, user_id: str) -> List[Report]:
        """
        A reporter's full history, newest first.

        Never filtered by hiddenFromAdmin: soft delete only hides from the
        administrative listing.
        """
        return await self._query(reporterId=user_id)

    @store_operation
    async def list_by_assignee(self, technician_id: str) -> List[Report]:
        return await self._query(assignedTo=technician_id)
