"""
User Administration

Role management for admins. The only way to change a persisted role:
the registry is not re-read once a user record exists.
"""

import logging
from typing import List, Optional

from ..errors import ValidationError
from ..models.report import AuthSession, Role, User, utcnow
from .policy import Operation, authorize

logger = logging.getLogger(__name__)


class UserAdminService:

    def __init__(self, user_repo):
        self.user_repo = user_repo

    async def change_role(
        self,
        session: AuthSession,
        user_id: str,
        new_role: str
    ) -> User:
        """
        Change another user's role.

        Denied for non-admins and for an admin targeting their own record.
        """
        authorize(session, Operation.CHANGE_ROLE, target_user_id=user_id)

        try:
            role = Role(new_role)
        except ValueError:
            raise ValidationError(["role"], f"Unknown role: {new_role!r}")

        user = await self.user_repo.get(user_id)
        updated = await self.user_repo.update(user.id, {
            "role": role.value,
            "updatedAt": utcnow(),
        })

        logger.info(
            "User %s role %s -> %s by %s",
            user_id, user.role.value, role.value, session.user_id,
        )
        return updated

    async def list_users(
        self,
        session: AuthSession,
        role: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[User]:
        """Newest first, optionally filtered by role and name/email substring."""
        authorize(session, Operation.LIST_USERS)

        if role is not None:
            try:
                role = Role(role)
            except ValueError:
                raise ValidationError(["role"], f"Unknown role: {role!r}")

        users = await self.user_repo.list_all()
        if role is not None:
            users = [u for u in users if u.role == role]
        if search:
            term = search.strip().lower()
            users = [
                u for u in users
                if term in (u.display_name or "").lower()
                or term in (u.email or "").lower()
            ]
        return users

    async def list_technicians(self, session: AuthSession) -> List[User]:
        """Candidates for assignment."""
        authorize(session, Operation.ASSIGN)
        return await self.user_repo.list_by_role(Role.TECHNICIAN)
