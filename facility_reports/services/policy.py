"""
Authorization Policy

Capability matrix keyed by role. Checked before any store mutation;
the store is never called speculatively and rolled back.

              user  technician  admin
create         ✓        ✓         ✓
read_own       ✓        ✓         ✓
read_all       ✗        ✓         ✓
change_status  ✗        ✓         ✓
assign         ✗        ✗         ✓
delete         ✗        ✗         ✓   (hide, never physical)
change_role    ✗        ✗         ✓   (never one's own)
list_users     ✗        ✗         ✓
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..errors import AuthorizationError
from ..models.report import AuthSession, Report, Role

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    CREATE = "create"
    READ_OWN = "read_own"
    READ_ALL = "read_all"
    CHANGE_STATUS = "change_status"
    ASSIGN = "assign"
    DELETE = "delete"
    CHANGE_ROLE = "change_role"
    LIST_USERS = "list_users"


_EVERYONE = frozenset({Operation.CREATE, Operation.READ_OWN})
_OPERATORS = _EVERYONE | {Operation.READ_ALL, Operation.CHANGE_STATUS}

CAPABILITIES: Dict[Role, FrozenSet[Operation]] = {
    Role.USER: _EVERYONE,
    Role.TECHNICIAN: _OPERATORS,
    Role.ADMIN: frozenset(Operation),
}


def can_perform(role: Role, operation: Operation) -> bool:
    """Pure matrix lookup. Unknown roles get nothing."""
    return operation in CAPABILITIES.get(role, frozenset())


def authorize(
    session: AuthSession,
    operation: Operation,
    report: Optional[Report] = None,
    target_user_id: Optional[str] = None
) -> None:
    """
    Raise AuthorizationError unless the session may perform operation.

    - read_own with a report: only that report's reporter
    - change_role: never on the acting user's own record
    """
    allowed = can_perform(session.role, operation)

    if allowed and operation == Operation.READ_OWN and report is not None:
        allowed = report.reporter_id == session.user_id

    if allowed and operation == Operation.CHANGE_ROLE:
        allowed = target_user_id is not None and target_user_id != session.user_id

    if not allowed:
        logger.warning(
            "Denied %s for user %s (role %s)",
            operation.value, session.user_id, session.role.value,
        )
        raise AuthorizationError()
