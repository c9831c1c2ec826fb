"""
Facility Reports Persistence

Document-store abstraction plus the typed report and user stores.
"""

from .documents import DocumentStore, InMemoryDocumentStore, DocumentNotFound
from .reports import ReportStore, REPORTS_COLLECTION
from .users import UserStore, USERS_COLLECTION

__all__ = [
    "DocumentStore", "InMemoryDocumentStore", "DocumentNotFound",
    "ReportStore", "REPORTS_COLLECTION",
    "UserStore", "USERS_COLLECTION",
]
