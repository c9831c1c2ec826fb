"""
Role registry.

Static email lists mapping to elevated roles. Consulted only when a
principal signs in for the first time; see IdentityResolver.
"""

from typing import Iterable, Optional

from ..models.report import Role


def _normalize(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class RoleRegistry:
    """Case-insensitive email -> role lookup. Admin wins over technician."""

    def __init__(
        self,
        admin_emails: Iterable[str] = (),
        technician_emails: Iterable[str] = ()
    ):
        self.admin_emails = frozenset(_normalize(e) for e in admin_emails if e)
        self.technician_emails = frozenset(
            _normalize(e) for e in technician_emails if e
        )

    @classmethod
    def from_settings(cls, settings) -> "RoleRegistry":
        return cls(settings.admin_emails, settings.technician_emails)

    def role_for(self, email: Optional[str]) -> Role:
        key = _normalize(email)
        if not key:
            return Role.USER
        if key in self.admin_emails:
            return Role.ADMIN
        if key in self.technician_emails:
            return Role.TECHNICIAN
        return Role.USER
