"""
Rescue report submission
Checks a bystander's draft before anything is written to the store.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Any, List

from rescue365.core.exceptions import ValidationError
from rescue365.core.geo_utils import Coordinate
from rescue365.reports.models import ReportInput

logger = logging.getLogger(__name__)


@dataclass
class ReportDraft:
    """Report form as filled in so far."""
    animal_type: str = ""
    description: str = ""
    location: Optional[Coordinate] = None
    address: Optional[str] = None
    image_url: Optional[str] = None
    reported_by: Optional[str] = None

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.animal_type or not self.animal_type.strip():
            missing.append("animal_type")
        if not self.description or not self.description.strip():
            missing.append("description")
        if self.location is None:
            missing.append("location")
        if not self.image_url:
            missing.append("image_url")
        return missing


def validate_draft(draft: ReportDraft) -> ReportInput:
    """
    Turn a complete draft into a ReportInput.

    Raises:
        ValidationError: animal type, description, location or image is missing
    """
    missing = draft.missing_fields()
    if missing:
        raise ValidationError(missing)

    return ReportInput(
        animal_type=draft.animal_type.strip(),
        description=draft.description.strip(),
        location=draft.location,
        image_url=draft.image_url,
        address=draft.address,
        reported_by=draft.reported_by,
    )


def submit_report(store: Any, draft: ReportDraft) -> str:
    """
    Validate a draft and create the report.

    Args:
        store: Report store gateway
        draft: Bystander's report form

    Returns:
        Id of the created report

    Raises:
        ValidationError: Draft incomplete, nothing written
        StoreError: Store insert failed
    """
    report = validate_draft(draft)
    report_id = store.create(report)
    logger.info(
        f"Rescue report {report_id} submitted at "
        f"({report.location.latitude}, {report.location.longitude})"
    )
    return report_id
