"""
Tests for report submission and navigation
"""
import pytest
from unittest.mock import MagicMock

import sys
sys.path.insert(0, '.')

from rescue365.core.exceptions import ValidationError, StoreError
from rescue365.core.geo_utils import Coordinate
from rescue365.reports.navigation import NavigationFlow, build_map_url
from rescue365.reports.store import MockReportStore
from rescue365.reports.submission import ReportDraft, validate_draft, submit_report


def _complete_draft(**overrides):
    fields = dict(
        animal_type=" Dog ",
        description="Limping near the park",
        location=Coordinate(40.7, -74.0),
        image_url="file:///photos/dog.jpg",
        address="Park Ave, New York, NY",
    )
    fields.update(overrides)
    return ReportDraft(**fields)


class TestSubmission:
    """Test suite for report submission."""

    def setup_method(self):
        self.store = MockReportStore()

    def test_submit_complete_draft(self):
        report_id = submit_report(self.store, _complete_draft())

        assert report_id == "1"
        report = self.store.list_all()[0]
        assert report.animal_type == "Dog"
        assert report.status == "Pending"
        assert report.address == "Park Ave, New York, NY"

    def test_missing_image_writes_nothing(self):
        with pytest.raises(ValidationError) as exc_info:
            submit_report(self.store, _complete_draft(image_url=None))

        assert exc_info.value.missing_fields == ["image_url"]
        assert self.store.calls == []

    def test_missing_fields_reported_in_order(self):
        draft = ReportDraft(animal_type="  ", description="")
        with pytest.raises(ValidationError) as exc_info:
            validate_draft(draft)
        assert exc_info.value.missing_fields == [
            "animal_type", "description", "location", "image_url",
        ]

    def test_address_optional(self):
        report = validate_draft(_complete_draft(address=None))
        assert report.address is None

    def test_store_failure_propagates(self):
        self.store.fail_with = "insert failed"
        with pytest.raises(StoreError):
            submit_report(self.store, _complete_draft())


class TestNavigation:
    """Test suite for the confirm-then-navigate flow."""

    def setup_method(self):
        self.launcher = MagicMock()
        self.flow = NavigationFlow(launcher=self.launcher, platform="ios")

    def test_map_urls(self):
        assert build_map_url(1.5, 2.5, "ios") == "maps://?q=1.5,2.5"
        assert build_map_url(1.5, 2.5, "android") == "geo:1.5,2.5"
        assert build_map_url(1.5, 2.5, "web") == (
            "https://www.google.com/maps/search/?api=1&query=1.5,2.5"
        )
        assert build_map_url(1.5, 2.5, "windows").startswith("https://")

    def test_accept_opens_map(self, sample_reports):
        pending = self.flow.request(sample_reports[0])
        assert pending.title == "Confirm Rescue"
        assert pending.url == "maps://?q=0.0,0.1"

        url = self.flow.accept()

        assert url == "maps://?q=0.0,0.1"
        self.launcher.assert_called_once_with("maps://?q=0.0,0.1")
        assert self.flow.pending is None

    def test_cancel_has_no_side_effects(self, sample_reports):
        self.flow.request(sample_reports[0])
        self.flow.cancel()

        assert self.flow.accept() is None
        self.launcher.assert_not_called()

    def test_new_request_replaces_pending(self, sample_reports):
        self.flow.request(sample_reports[0])
        self.flow.request(sample_reports[1])
        self.flow.accept()
        self.launcher.assert_called_once_with("maps://?q=0.05,0.05")

    def test_launcher_failure_is_logged(self, sample_reports):
        self.launcher.side_effect = RuntimeError("no map app")
        self.flow.request(sample_reports[0])
        assert self.flow.accept() == "maps://?q=0.0,0.1"

    def test_without_launcher(self, sample_reports):
        flow = NavigationFlow()
        flow.request(sample_reports[0])
        assert flow.accept() == "geo:0.0,0.1"
