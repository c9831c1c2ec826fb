"""Tests for the email role registry."""

import pytest

from facility_reports.config import Settings
from facility_reports.models import Role
from facility_reports.services import RoleRegistry


@pytest.mark.unit
class TestRoleRegistry:
    """Test email -> role lookup."""

    def test_admin_email(self, registry):
        assert registry.role_for("a@org.com") == Role.ADMIN

    def test_technician_email(self, registry):
        assert registry.role_for("tech1@org.com") == Role.TECHNICIAN

    def test_unknown_email_is_user(self, registry):
        assert registry.role_for("someone@org.com") == Role.USER

    def test_case_insensitive(self, registry):
        assert registry.role_for("A@ORG.com") == Role.ADMIN
        assert registry.role_for("  Tech1@Org.Com ") == Role.TECHNICIAN

    def test_configured_emails_are_case_insensitive_too(self):
        registry = RoleRegistry(admin_emails=["Boss@Org.COM"])
        assert registry.role_for("boss@org.com") == Role.ADMIN

    def test_admin_wins_over_technician(self):
        registry = RoleRegistry(
            admin_emails=["both@org.com"],
            technician_emails=["both@org.com"],
        )
        assert registry.role_for("both@org.com") == Role.ADMIN

    @pytest.mark.parametrize("email", [None, "", "   "])
    def test_missing_email_is_user(self, registry, email):
        assert registry.role_for(email) == Role.USER

    def test_from_settings(self):
        registry = RoleRegistry.from_settings(
            Settings(admin_emails=["x@org.com"], technician_emails=["y@org.com"])
        )
        assert registry.role_for("x@org.com") == Role.ADMIN
        assert registry.role_for("y@org.com") == Role.TECHNICIAN
