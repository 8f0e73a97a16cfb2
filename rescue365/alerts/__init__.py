"""
Rescue365 - Alerts
Bystander notifications and user-facing alert messages.
"""

from rescue365.alerts.notifier import (
    BystanderNotification,
    LogNotifier,
    MockNotifier,
    build_rescue_complete_notification,
    get_notifier,
)
from rescue365.alerts.messages import UserAlert

__all__ = [
    "BystanderNotification",
    "LogNotifier",
    "MockNotifier",
    "build_rescue_complete_notification",
    "get_notifier",
    "UserAlert",
]
