from typing import Dict

from ..models.report import AuthSession, ReportStatus
from .policy import Operation, authorize


class ReportStatsService:
    """Dashboard counters over the admin-visible reports."""

    def __init__(self, report_repo):
        self.report_repo = report_repo

    async def report_stats(self, session: AuthSession) -> Dict[str, int]:
        authorize(session, Operation.READ_ALL)
        reports = await self.report_repo.list_visible()

        stats = {"total": len(reports)}
        for status in ReportStatus:
            stats[status.value] = sum(1 for r in reports if r.status == status)
        return stats
