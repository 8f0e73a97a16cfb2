"""
Tests for report routing
"""
import pytest

import sys
sys.path.insert(0, '.')

from rescue365.core.geo_utils import Coordinate
from rescue365.reports.models import RescueReport, Role
from rescue365.reports.router import visible_reports, ReportView


def _report(report_id, lat, lng, status="Pending"):
    return RescueReport(
        id=str(report_id),
        animal_type="Dog",
        description="test",
        location=Coordinate(lat, lng),
        image_url="file:///x.jpg",
        status=status,
    )


class TestVisibleReports:
    """Test suite for visible_reports."""

    def test_rescuer_sees_nearby_unfinished(self, sample_reports, origin):
        visible = visible_reports(sample_reports, Role.RESCUER, origin)
        assert [r.id for r in visible] == ["1", "2"]

    def test_rescuer_never_sees_complete(self, sample_reports, origin):
        for role in (Role.RESCUER, "rescuer"):
            visible = visible_reports(sample_reports, role, origin)
            assert all(r.status != "Rescue Complete" for r in visible)

    def test_rescuer_without_location_sees_nothing(self, sample_reports):
        assert visible_reports(sample_reports, Role.RESCUER, None) == []

    def test_vet_sees_in_progress_anywhere(self, sample_reports):
        visible = visible_reports(sample_reports, Role.VET, None)
        assert [r.id for r in visible] == ["2", "5"]

    def test_vet_includes_iff_in_progress(self, sample_reports, origin):
        visible_ids = {r.id for r in visible_reports(sample_reports, "vet", origin)}
        for report in sample_reports:
            assert (report.id in visible_ids) == (report.status == "Rescue In Progress")

    def test_bystander_and_no_role_see_nothing(self, sample_reports, origin):
        assert visible_reports(sample_reports, Role.BYSTANDER, origin) == []
        assert visible_reports(sample_reports, None, origin) == []

    def test_report_at_tenth_degree_is_visible(self):
        report = _report(1, 0, 0)
        assert visible_reports([report], Role.RESCUER, Coordinate(0, 0.1)) == [report]

    def test_report_far_away_is_not_visible(self):
        report = _report(1, 0, 0)
        assert visible_reports([report], Role.RESCUER, Coordinate(1, 1)) == []

    def test_custom_radius(self, sample_reports, origin):
        visible = visible_reports(sample_reports, Role.RESCUER, origin, radius_meters=10_000)
        assert [r.id for r in visible] == ["2"]

    def test_store_order_preserved(self, origin):
        reports = [_report(i, 0.001 * i, 0) for i in (5, 3, 9, 1)]
        visible = visible_reports(reports, Role.RESCUER, origin)
        assert [r.id for r in visible] == ["5", "3", "9", "1"]

    def test_unknown_status_visible_to_rescuer(self, origin):
        report = _report(1, 0, 0, status="Awaiting Transport")
        assert visible_reports([report], Role.RESCUER, origin) == [report]
        assert visible_reports([report], Role.VET, origin) == []


class TestReportView:
    """Test suite for the derived report view."""

    def setup_method(self):
        self.view = ReportView(role=Role.RESCUER, location=Coordinate(0, 0))

    def test_visible_follows_role_and_location(self, sample_reports):
        self.view.load(self.view.begin_fetch(), sample_reports)
        assert [r.id for r in self.view.visible] == ["1", "2"]

        self.view.role = Role.VET
        assert [r.id for r in self.view.visible] == ["2", "5"]

        self.view.role = Role.RESCUER
        self.view.location = Coordinate(1, 1)
        assert [r.id for r in self.view.visible] == ["4", "5"]

        self.view.location = None
        assert self.view.visible == []

    def test_discard_removes_one_report(self, sample_reports):
        self.view.load(self.view.begin_fetch(), sample_reports)
        self.view.discard("1")
        assert [r.id for r in self.view.visible] == ["2"]
        assert len(self.view.reports) == len(sample_reports)

    def test_apply_status_updates_local_copy(self, sample_reports):
        self.view.load(self.view.begin_fetch(), sample_reports)
        self.view.apply_status("1", "Rescue Complete")
        assert self.view.get("1").status == "Rescue Complete"
        assert [r.id for r in self.view.visible] == ["2"]

    def test_stale_fetch_is_discarded(self, sample_reports):
        older = self.view.begin_fetch()
        newer = self.view.begin_fetch()

        assert self.view.load(newer, sample_reports[:2]) is True
        assert self.view.load(older, sample_reports) is False
        assert [r.id for r in self.view.reports] == ["1", "2"]

    def test_fetches_applied_in_order(self, sample_reports):
        first = self.view.begin_fetch()
        assert self.view.load(first, sample_reports[:1]) is True
        second = self.view.begin_fetch()
        assert self.view.load(second, sample_reports) is True
        assert len(self.view.reports) == len(sample_reports)

    def test_new_fetch_clears_discards(self, sample_reports):
        self.view.load(self.view.begin_fetch(), sample_reports)
        self.view.discard("1")
        self.view.load(self.view.begin_fetch(), sample_reports)
        assert [r.id for r in self.view.visible] == ["1", "2"]

    def test_visible_returns_copy(self, sample_reports):
        self.view.load(self.view.begin_fetch(), sample_reports)
        self.view.visible.clear()
        assert len(self.view.visible) == 2
