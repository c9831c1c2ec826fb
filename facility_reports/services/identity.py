"""
Identity & Role Resolver

Turns an authenticated principal into an AuthSession.

The persisted role is authoritative: the registry is read only when a
principal has no user record yet. Editing the registry therefore affects
first-time sign-ins only; promoting an existing user goes through
UserAdminService.change_role.
"""

import logging

from ..models.report import AuthSession, Principal, Role, User, utcnow
from .roles import RoleRegistry

logger = logging.getLogger(__name__)


class IdentityResolver:

    def __init__(self, user_repo, registry: RoleRegistry):
        self.user_repo = user_repo
        self.registry = registry

    async def resolve_session(self, principal: Principal) -> AuthSession:
        """
        Resolve (user, role) for a principal.

        Fail-safe: any error while looking up or creating the record
        yields a session with role "user", so a reporter can always reach
        their own reports.
        """
        try:
            user = await self.user_repo.find(principal.id)
            if user is None:
                user = await self._create_user(principal)
        except Exception:
            logger.exception(
                "Role resolution failed for %s, falling back to user role",
                principal.id,
            )
            user = self._build_user(principal, Role.USER)

        return AuthSession(principal=principal, user=user, role=user.role)

    async def _create_user(self, principal: Principal) -> User:
        role = self.registry.role_for(principal.email)
        user = await self.user_repo.create(self._build_user(principal, role))
        logger.info("Created user record %s with role %s", user.id, role.value)
        return user

    @staticmethod
    def _build_user(principal: Principal, role: Role) -> User:
        now = utcnow()
        return User(
            id=principal.id,
            email=principal.email,
            display_name=principal.display_name or principal.email,
            photo_url=principal.photo_url,
            role=role,
            created_at=now,
            updated_at=now,
        )
