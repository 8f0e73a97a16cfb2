"""
Report routing for Rescue365
Selects which reports each role gets to see.
"""

import logging
import threading
from typing import Optional, List, Iterable, Set

from rescue365.core.constants import (
    DEFAULT_RESCUE_RADIUS_METERS,
    STATUS_IN_PROGRESS,
)
from rescue365.core.geo_utils import Coordinate, is_within_range
from rescue365.reports.models import RescueReport, Role

logger = logging.getLogger(__name__)


def visible_reports(
    all_reports: Iterable[RescueReport],
    role: Optional[str],
    current_location: Optional[Coordinate],
    radius_meters: float = DEFAULT_RESCUE_RADIUS_METERS
) -> List[RescueReport]:
    """
    Select the reports visible to a role.

    Rescuers see unfinished reports within radius_meters of their
    position and nothing at all without a position. Vets see reports
    whose rescue is in progress, wherever they are. Bystanders only
    submit, so they get an empty list.

    Args:
        all_reports: Every report, in store order
        role: Current role (Role or its string value)
        current_location: Current device position, if known
        radius_meters: Rescuer range

    Returns:
        Visible reports in store order
    """
    if role == Role.RESCUER:
        if current_location is None:
            logger.debug("Rescuer has no location, no reports visible")
            return []
        return [
            r for r in all_reports
            if not r.is_complete
            and is_within_range(current_location, r.location, radius_meters)
        ]

    if role == Role.VET:
        return [r for r in all_reports if r.status == STATUS_IN_PROGRESS]

    return []


class ReportView:
    """
    Reports as last fetched plus the derived visible set.

    The fetched list is the single source of truth. The visible set is
    recomputed from it whenever role, location or the reports change;
    the only local edits are status updates and discards after a
    successful transition.

    Fetches are tagged with increasing tokens and a result is applied
    only if no newer fetch has been applied before it.
    """

    def __init__(
        self,
        role: Optional[str] = None,
        location: Optional[Coordinate] = None,
        radius_meters: float = DEFAULT_RESCUE_RADIUS_METERS
    ):
        self._role = role
        self._location = location
        self.radius_meters = radius_meters

        self._reports: List[RescueReport] = []
        self._discarded: Set[str] = set()

        self._lock = threading.Lock()
        self._issued_token = 0
        self._applied_token = 0

        self._version = 0
        self._cached_version = -1
        self._cached_visible: List[RescueReport] = []

    def _invalidate(self) -> None:
        self._version += 1

    @property
    def role(self) -> Optional[str]:
        return self._role

    @role.setter
    def role(self, value: Optional[str]) -> None:
        self._role = value
        self._invalidate()

    @property
    def location(self) -> Optional[Coordinate]:
        return self._location

    @location.setter
    def location(self, value: Optional[Coordinate]) -> None:
        self._location = value
        self._invalidate()

    @property
    def reports(self) -> List[RescueReport]:
        """All reports from the last applied fetch."""
        return list(self._reports)

    @property
    def visible(self) -> List[RescueReport]:
        """Reports visible for the current role and location."""
        if self._cached_version != self._version:
            routed = visible_reports(
                self._reports, self._role, self._location, self.radius_meters
            )
            self._cached_visible = [r for r in routed if r.id not in self._discarded]
            self._cached_version = self._version
        return list(self._cached_visible)

    def begin_fetch(self) -> int:
        """Issue a token for a new fetch."""
        with self._lock:
            self._issued_token += 1
            return self._issued_token

    def load(self, token: int, reports: Iterable[RescueReport]) -> bool:
        """
        Apply a fetch result.

        Args:
            token: Token from begin_fetch
            reports: Fetched reports

        Returns:
            False if a newer fetch was already applied
        """
        with self._lock:
            if token <= self._applied_token:
                logger.info(f"Discarding stale report fetch {token} (applied {self._applied_token})")
                return False
            self._applied_token = token
            self._reports = list(reports)
            self._discarded.clear()
            self._invalidate()
        return True

    def get(self, report_id: str) -> Optional[RescueReport]:
        for report in self._reports:
            if report.id == str(report_id):
                return report
        return None

    def apply_status(self, report_id: str, status: str) -> None:
        """Mirror a stored status change in the local reports."""
        self._reports = [
            r.with_status(status) if r.id == str(report_id) else r
            for r in self._reports
        ]
        self._invalidate()

    def discard(self, report_id: str) -> None:
        """Drop a report from the visible set until the next fetch."""
        self._discarded.add(str(report_id))
        self._invalidate()

    def clear(self) -> None:
        self._reports = []
        self._discarded.clear()
        self._invalidate()
