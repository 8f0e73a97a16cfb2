"""
Rescue report data structures
Reports, statuses and roles shared by the store, router and lifecycle.
"""

from datetime import datetime
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, replace
from enum import Enum

from rescue365.core.constants import (
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETE,
)
from rescue365.core.geo_utils import Coordinate


class ReportStatus(str, Enum):
    """Lifecycle status of a rescue report."""
    PENDING = STATUS_PENDING
    IN_PROGRESS = STATUS_IN_PROGRESS
    COMPLETE = STATUS_COMPLETE


class Role(str, Enum):
    """Role picked by a signed-in user."""
    BYSTANDER = "bystander"
    RESCUER = "rescuer"
    VET = "vet"


def status_value(status: Any) -> str:
    """Normalize a ReportStatus or free-form status to its string value."""
    if isinstance(status, ReportStatus):
        return status.value
    return str(status)


@dataclass
class ReportInput:
    """Fields submitted by a bystander for a new report."""
    animal_type: str
    description: str
    location: Coordinate
    image_url: str
    address: Optional[str] = None
    reported_by: Optional[str] = None
    status: str = STATUS_PENDING

    def to_row(self) -> Dict[str, Any]:
        """Convert to a rescue_reports table row."""
        row = {
            "animal_type": self.animal_type,
            "description": self.description,
            "location_lat": self.location.latitude,
            "location_lng": self.location.longitude,
            "address": self.address,
            "image_url": self.image_url,
            "status": self.status,
        }
        if self.reported_by is not None:
            row["reported_by"] = self.reported_by
        return row


@dataclass
class RescueReport:
    """
    Rescue report as stored in the rescue_reports table.

    Status is kept as a plain string so that statuses outside the
    three known states survive a round trip through the store.
    """
    id: str
    animal_type: str
    description: str
    location: Coordinate
    image_url: str
    address: Optional[str] = None
    status: str = STATUS_PENDING
    reported_by: Optional[str] = None
    created_at: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE

    def with_status(self, status: str) -> "RescueReport":
        """Copy of this report with a different status."""
        return replace(self, status=status)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "RescueReport":
        """Create a report from a table row."""
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            try:
                created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
            except ValueError:
                created_at = None

        known = {
            "id", "animal_type", "description", "location_lat", "location_lng",
            "address", "image_url", "status", "reported_by", "created_at",
        }

        return cls(
            id=str(row["id"]),
            animal_type=row.get("animal_type") or "",
            description=row.get("description") or "",
            location=Coordinate(
                latitude=float(row["location_lat"]),
                longitude=float(row["location_lng"]),
            ),
            image_url=row.get("image_url") or "",
            address=row.get("address"),
            status=row.get("status") or STATUS_PENDING,
            reported_by=row.get("reported_by"),
            created_at=created_at,
            extra={k: v for k, v in row.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "animal_type": self.animal_type,
            "description": self.description,
            "location_lat": self.location.latitude,
            "location_lng": self.location.longitude,
            "address": self.address,
            "image_url": self.image_url,
            "status": self.status,
            "reported_by": self.reported_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
