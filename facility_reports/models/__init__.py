"""
Facility Reports Models
"""

from .report import (
    # Enums
    Role,
    ReportStatus,

    # Core models
    Principal,
    User,
    Report,
    NewReport,
    AuthSession,

    # Helpers
    normalize_timestamp,
    utcnow,
)

__all__ = [
    "Role", "ReportStatus",
    "Principal", "User", "Report", "NewReport", "AuthSession",
    "normalize_timestamp", "utcnow",
]
