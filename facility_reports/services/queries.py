"""
Report query surface.

Session-aware wrappers over the ReportStore listings. Every call
re-reads the store.
"""

from typing import List, Optional

from ..errors import NotFoundError, ValidationError
from ..models.report import AuthSession, Report, ReportStatus
from .policy import Operation, authorize
from .visibility import matching


class ReportQueryService:

    def __init__(self, report_repo):
        self.report_repo = report_repo

    async def list_visible(
        self,
        session: AuthSession,
        status: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[Report]:
        """
        Administrative listing: everything not hidden, newest first.

        Optionally narrowed to one status and to reports whose reporter
        name, location or problem type contains search (any case).
        """
        authorize(session, Operation.READ_ALL)

        if status is not None:
            try:
                status = ReportStatus(status)
            except ValueError:
                raise ValidationError(["status"], f"Unknown status: {status!r}")

        reports = await self.report_repo.list_visible()
        return matching(reports, status=status, search=search)

    async def list_mine(self, session: AuthSession) -> List[Report]:
        """The session user's own history, hidden reports included."""
        authorize(session, Operation.READ_OWN)
        return await self.report_repo.list_by_reporter(session.user_id)

    async def list_assigned(
        self,
        session: AuthSession,
        technician_id: str
    ) -> List[Report]:
        """A technician's queue. Readable by that technician or read_all roles."""
        if technician_id != session.user_id:
            authorize(session, Operation.READ_ALL)
        return await self.report_repo.list_by_assignee(technician_id)

    async def get_report(self, session: AuthSession, report_id: str) -> Report:
        """
        Fetch one report.

        The reporter always sees it. read_all roles see it unless it is
        hidden, in which case it is reported as missing.
        """
        report = await self.report_repo.get(report_id)
        if report.reporter_id == session.user_id:
            authorize(session, Operation.READ_OWN, report=report)
            return report

        authorize(session, Operation.READ_ALL)
        if report.hidden_from_admin:
            raise NotFoundError("Report", report_id)
        return report
