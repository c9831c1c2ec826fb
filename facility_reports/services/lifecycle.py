"""
Report Lifecycle Manager

Create, status change, technician assignment and soft delete.

Every mutating call:
1. Checks the capability matrix (no store access before this)
2. Reads the current document
3. Writes all changed fields in ONE update

Status transitions are deliberately free-form: any status may follow any
other, including pending -> completed and completed -> pending.
"""

import logging
from typing import List

from ..errors import AlreadyAssignedError, ValidationError
from ..models.report import (
    AuthSession,
    NewReport,
    Report,
    ReportStatus,
    Role,
    utcnow,
)
from .policy import Operation, authorize

logger = logging.getLogger(__name__)


class ReportLifecycleService:
    """
    Orchestrates report mutations under the authorization policy.

    Concurrency: no locking. Two assign() calls racing on the same report
    may both pass the repeat guard; the later write wins.
    """

    def __init__(self, report_repo, user_repo):
        self.report_repo = report_repo
        self.user_repo = user_repo

    async def create_report(self, session: AuthSession, data: NewReport) -> Report:
        """
        File a new report as the session's user.

        Every required field is checked before anything is written; the
        ValidationError lists all of the missing ones at once.
        """
        authorize(session, Operation.CREATE)

        location = (data.location or "").strip()
        problem_type = (data.problem_type or "").strip()
        problem_details = (data.problem_details or "").strip()

        missing: List[str] = []
        if not location:
            missing.append("location")
        if not problem_type:
            missing.append("problemType")
        if not problem_details:
            missing.append("problemDetails")
        if not data.images:
            missing.append("images")
        if missing:
            raise ValidationError(missing)

        reporter_name = (
            (data.reporter_name or "").strip()
            or session.user.display_name
            or session.user.email
        )
        now = utcnow()
        report = await self.report_repo.create({
            "reporterId": session.user_id,
            "reporterEmail": session.user.email,
            "reporterName": reporter_name,
            "location": location,
            "problemType": problem_type,
            "problemDetails": problem_details,
            "images": list(data.images),
            "status": ReportStatus.PENDING.value,
            "assignedTo": None,
            "assignedToName": None,
            "assignedBy": None,
            "assignedAt": None,
            "hiddenFromAdmin": False,
            "createdAt": now,
            "updatedAt": now,
        })

        logger.info("Report %s filed by %s", report.id, session.user_id)
        return report

    async def set_status(
        self,
        session: AuthSession,
        report_id: str,
        new_status: str
    ) -> Report:
        """Apply any status; only unknown values are rejected."""
        authorize(session, Operation.CHANGE_STATUS)

        try:
            status = ReportStatus(new_status)
        except ValueError:
            raise ValidationError(["status"], f"Unknown status: {new_status!r}")

        report = await self.report_repo.get(report_id)
        updated = await self.report_repo.update(report.id, {
            "status": status.value,
            "updatedAt": utcnow(),
        })

        logger.info(
            "Report %s status %s -> %s by %s",
            report_id, report.status.value, status.value, session.user_id,
        )
        return updated

    async def assign(
        self,
        session: AuthSession,
        report_id: str,
        technician_id: str,
        technician_name: str = ""
    ) -> Report:
        """
        Assign a report to a technician.

        Re-assigning to the current assignee fails with
        AlreadyAssignedError and leaves the report (assignedAt included)
        untouched.
        """
        authorize(session, Operation.ASSIGN)

        report = await self.report_repo.get(report_id)
        if report.assigned_to == technician_id:
            raise AlreadyAssignedError(report_id, technician_id)

        technician = await self.user_repo.get(technician_id)
        if technician.role != Role.TECHNICIAN:
            raise ValidationError(
                ["assignedTo"], f"User {technician_id} is not a technician"
            )

        now = utcnow()
        updated = await self.report_repo.update(report.id, {
            "assignedTo": technician.id,
            "assignedToName": (technician_name or "").strip() or technician.display_name,
            "assignedBy": session.user_id,
            "assignedAt": now,
            "updatedAt": now,
        })

        logger.info(
            "Report %s assigned to %s by %s",
            report_id, technician_id, session.user_id,
        )
        return updated

    async def hide(self, session: AuthSession, report_id: str) -> Report:
        """
        Soft delete: hide from the admin listing.

        The reporter's own history still shows the report. Hiding twice
        is a no-op that returns the report unchanged.
        """
        authorize(session, Operation.DELETE)

        report = await self.report_repo.get(report_id)
        if report.hidden_from_admin:
            return report

        now = utcnow()
        updated = await self.report_repo.update(report.id, {
            "hiddenFromAdmin": True,
            "hiddenAt": now,
            "updatedAt": now,
        })

        logger.info("Report %s hidden by %s", report_id, session.user_id)
        return updated
