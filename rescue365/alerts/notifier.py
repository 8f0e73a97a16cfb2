"""
Bystander notification for Rescue365
Tells the original reporter that their rescue is complete.

Delivery is a stub: the default notifier only records and logs the
notification. There is no push or message channel behind it yet.
"""

import logging
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass
class BystanderNotification:
    """Notification addressed to the reporter of a rescue."""
    report_id: str
    title: str
    body: str
    recipient: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    sent_at: Optional[datetime] = None
    status: str = "pending"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "recipient": self.recipient,
            "title": self.title,
            "body": self.body,
            "data": self.data,
            "status": self.status,
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
        }


def build_rescue_complete_notification(
    report_id: str,
    recipient: Optional[str] = None,
    animal_type: Optional[str] = None
) -> BystanderNotification:
    """
    Build the notification sent when a rescue is completed.

    Args:
        report_id: Completed report
        recipient: Reporter identifier, if known
        animal_type: Animal described in the report

    Returns:
        Unsent BystanderNotification
    """
    subject = f"The {animal_type.lower()}" if animal_type else "The animal"
    return BystanderNotification(
        report_id=str(report_id),
        recipient=recipient,
        title="Rescue Complete",
        body=f"{subject} you reported has been rescued. Thank you for reporting!",
        data={"type": "rescue_complete", "report_id": str(report_id)},
    )


class LogNotifier:
    """Notifier that only logs notifications."""

    def notify(self, notification: BystanderNotification) -> BystanderNotification:
        notification.status = "logged"
        notification.sent_at = datetime.utcnow()
        logger.info(
            f"[BYSTANDER] report={notification.report_id} "
            f"recipient={notification.recipient or 'unknown'}: {notification.body}"
        )
        return notification


class MockNotifier:
    """Mock notifier for testing."""

    def __init__(self):
        self.sent_notifications: List[BystanderNotification] = []

    def notify(self, notification: BystanderNotification) -> BystanderNotification:
        """Mock send."""
        notification.status = "mock_sent"
        notification.sent_at = datetime.utcnow()
        self.sent_notifications.append(notification)
        logger.info(f"[MOCK BYSTANDER] {notification.title}: {notification.body}")
        return notification


def get_notifier() -> LogNotifier:
    """Get bystander notifier instance."""
    return LogNotifier()
