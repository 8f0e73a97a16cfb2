"""
Report lifecycle for Rescue365
Applies status changes and their side effects.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Any, Dict

from rescue365.core.constants import STATUS_ORDER, TERMINAL_STATUSES
from rescue365.core.exceptions import TransitionError, ConfigurationError
from rescue365.alerts.notifier import (
    BystanderNotification,
    build_rescue_complete_notification,
    get_notifier,
)
from rescue365.reports.models import status_value
from rescue365.reports.router import ReportView

logger = logging.getLogger(__name__)


class AnyTransitionPolicy:
    """Allows every status change, including unknown statuses."""

    name = "any"

    def allows(self, current_status: Optional[str], new_status: str) -> bool:
        return True


class ForwardOnlyPolicy:
    """
    Allows only known statuses, never moving backward.

    Repeating the current status is allowed. An unknown current
    status (report not in the local view) is treated as Pending.
    """

    name = "forward_only"

    def allows(self, current_status: Optional[str], new_status: str) -> bool:
        if new_status not in STATUS_ORDER:
            return False
        if current_status not in STATUS_ORDER:
            current_status = STATUS_ORDER[0]
        return STATUS_ORDER.index(new_status) >= STATUS_ORDER.index(current_status)


TRANSITION_POLICIES = {
    AnyTransitionPolicy.name: AnyTransitionPolicy,
    ForwardOnlyPolicy.name: ForwardOnlyPolicy,
}


def get_transition_policy(name: str = "any"):
    """Get a transition policy by name."""
    try:
        return TRANSITION_POLICIES[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown transition policy {name!r}, expected one of {sorted(TRANSITION_POLICIES)}"
        )


@dataclass
class TransitionResult:
    """Outcome of a successful status change."""
    report_id: str
    status: str
    previous_status: Optional[str] = None
    removed_from_view: bool = False
    notification: Optional[BystanderNotification] = None

    @property
    def bystander_notified(self) -> bool:
        return self.notification is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "status": self.status,
            "previous_status": self.previous_status,
            "removed_from_view": self.removed_from_view,
            "bystander_notified": self.bystander_notified,
        }


class LifecycleController:
    """
    Moves reports through their lifecycle.

    The store is written first; local state and side effects follow only
    when the write succeeded. A failed write leaves the view untouched
    and the StoreError propagates to the caller.
    """

    def __init__(
        self,
        store: Any,
        notifier: Optional[Any] = None,
        policy: Optional[Any] = None
    ):
        """
        Initialize lifecycle controller.

        Args:
            store: Report store gateway
            notifier: Bystander notifier (defaults to the logging stub)
            policy: Transition policy (defaults to any-to-any)
        """
        self.store = store
        self.notifier = notifier or get_notifier()
        self.policy = policy or AnyTransitionPolicy()

    def transition(
        self,
        report_id: str,
        new_status: str,
        view: Optional[ReportView] = None
    ) -> TransitionResult:
        """
        Change the status of a report.

        Args:
            report_id: Report to update
            new_status: Target status, any string under the default policy
            view: Caller's local report view to keep in sync

        Returns:
            TransitionResult

        Raises:
            TransitionError: The policy rejected the change
            StoreError: The store update failed
        """
        report_id = str(report_id)
        new_status = status_value(new_status)

        report = view.get(report_id) if view is not None else None
        previous_status = report.status if report else None

        if not self.policy.allows(previous_status, new_status):
            raise TransitionError(previous_status, new_status)

        self.store.update_status(report_id, new_status)

        result = TransitionResult(
            report_id=report_id,
            status=new_status,
            previous_status=previous_status,
        )

        if view is not None:
            view.apply_status(report_id, new_status)

        if new_status in TERMINAL_STATUSES:
            if view is not None:
                view.discard(report_id)
                result.removed_from_view = True

            notification = build_rescue_complete_notification(
                report_id,
                recipient=report.reported_by if report else None,
                animal_type=report.animal_type if report else None,
            )
            result.notification = self.notifier.notify(notification)

        logger.info(f"Report {report_id} status: {previous_status} -> {new_status}")

        return result
