"""
Navigation to a rescue location
A rescuer confirms before being handed off to the map application.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from rescue365.core.constants import MAP_URL_TEMPLATES
from rescue365.alerts.messages import CONFIRM_NAVIGATION
from rescue365.reports.models import RescueReport

logger = logging.getLogger(__name__)


def build_map_url(latitude: float, longitude: float, platform: str = "android") -> str:
    """
    Build the URL that opens the platform map application.

    Args:
        latitude: Destination latitude
        longitude: Destination longitude
        platform: "ios", "android" or anything else for the web map

    Returns:
        Map URL
    """
    template = MAP_URL_TEMPLATES.get(platform.lower(), MAP_URL_TEMPLATES["web"])
    return template.format(lat=latitude, lng=longitude)


@dataclass
class PendingNavigation:
    """A navigation waiting for the rescuer's yes or no."""
    report: RescueReport
    url: str
    title: str = "Confirm Rescue"
    message: str = CONFIRM_NAVIGATION


class NavigationFlow:
    """
    Confirm-then-navigate interaction.

    Holds at most one pending confirmation. A new request replaces the
    previous one; cancel drops it without side effects.
    """

    def __init__(
        self,
        launcher: Optional[Callable[[str], None]] = None,
        platform: str = "android"
    ):
        self.launcher = launcher
        self.platform = platform
        self.pending: Optional[PendingNavigation] = None

    def request(self, report: RescueReport) -> PendingNavigation:
        """Ask for confirmation before navigating to a report."""
        url = build_map_url(
            report.location.latitude,
            report.location.longitude,
            self.platform
        )
        self.pending = PendingNavigation(report=report, url=url)
        return self.pending

    def accept(self) -> Optional[str]:
        """
        Confirm the pending navigation and open the map application.

        Returns:
            The opened URL, or None if nothing was pending
        """
        pending, self.pending = self.pending, None
        if pending is None:
            return None

        if self.launcher is None:
            logger.warning(f"No map launcher configured. Would open: {pending.url}")
            return pending.url

        try:
            self.launcher(pending.url)
        except Exception as e:
            logger.error(f"Failed to open map application: {e}")

        return pending.url

    def cancel(self) -> None:
        """Discard the pending navigation."""
        self.pending = None
