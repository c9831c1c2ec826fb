"""
Visibility filter.

Pure functions over report snapshots. No caching: callers re-run them on
every fresh fetch.
"""

from typing import Iterable, List, Optional

from ..models.report import Report, ReportStatus


def newest_first(reports: Iterable[Report]) -> List[Report]:
    return sorted(reports, key=lambda r: r.created_at, reverse=True)


def visible_to_admin(reports: Iterable[Report]) -> List[Report]:
    """Drop reports an admin has hidden. Order is preserved."""
    return [r for r in reports if not r.hidden_from_admin]


def matching(
    reports: Iterable[Report],
    status: Optional[ReportStatus] = None,
    search: Optional[str] = None
) -> List[Report]:
    """
    Status filter plus case-insensitive search over reporter name,
    location and problem type. Order is preserved.
    """
    term = (search or "").strip().lower()
    return [
        r for r in reports
        if (status is None or r.status == status)
        and (
            not term
            or term in r.reporter_name.lower()
            or term in r.location.lower()
            or term in r.problem_type.lower()
        )
    ]
