"""
Facility Reports Services

Core business logic for the report lifecycle and access control.
"""

from .roles import RoleRegistry
from .identity import IdentityResolver
from .policy import Operation, CAPABILITIES, can_perform, authorize
from .visibility import matching, newest_first, visible_to_admin
from .lifecycle import ReportLifecycleService
from .queries import ReportQueryService
from .users import UserAdminService
from .stats import ReportStatsService

__all__ = [
    # Identity
    "RoleRegistry", "IdentityResolver",

    # Capability matrix
    "Operation", "CAPABILITIES", "can_perform", "authorize",

    # Visibility filter
    "matching", "newest_first", "visible_to_admin",

    # Lifecycle and reads
    "ReportLifecycleService", "ReportQueryService", "ReportStatsService",

    # Role management
    "UserAdminService",
]
