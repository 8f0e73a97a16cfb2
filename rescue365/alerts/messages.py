"""
User-facing alert messages for Rescue365.
Every action outcome and failure is reported to the user as one of these.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any
from enum import Enum


class AlertKind(str, Enum):
    """How an alert should be presented."""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class UserAlert:
    """Modal-style message shown to the user."""
    title: str
    message: str = ""
    kind: AlertKind = AlertKind.INFO
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "message": self.message,
            "kind": self.kind.value,
            "created_at": self.created_at.isoformat(),
        }


# Messages
LOCATION_DENIED = "Permission to access location was denied"
CAMERA_REQUIRED = "Camera permission is required."
MISSING_INFORMATION = "Please fill in all fields, add a photo, and get your location."
SUBMIT_FAILED = "There was an issue submitting the rescue report."
SUBMIT_SUCCEEDED = "Your rescue report has been successfully submitted!"
FETCH_FAILED = "Unable to fetch rescue reports."
UPDATE_FAILED = "Unable to update rescue status."
BYSTANDER_NOTIFIED = "The original reporter has been notified."
PHOTO_TAKEN = "Your photo has been successfully taken."
IMAGE_SELECTED = "Your photo has been successfully selected."
CONFIRM_NAVIGATION = "Are you sure you want to navigate to this location?"


def status_updated_message(status: str) -> str:
    return f'Rescue status set to "{status}".'
