"""Unit tests for dashboard ordering and aggregation."""

import pytest

from guild_hall.models.commission import CommissionMeta
from guild_hall.models.meeting import MeetingMeta
from guild_hall.models.project import ProjectConfig
from guild_hall.services.dashboard import (
    DashboardAggregator,
    commission_priority,
    sort_commissions,
    sort_meeting_requests,
)


def _commission(commission_id: str, status: str, date: str) -> CommissionMeta:
    return CommissionMeta(commissionId=commission_id, projectName="atlas", status=status, date=date)


def _meeting(meeting_id: str, date: str, deferred_until: str = "") -> MeetingMeta:
    return MeetingMeta(
        meetingId=meeting_id,
        projectName="atlas",
        status="requested",
        date=date,
        deferred_until=deferred_until,
    )


class TestCommissionPriority:
    """Tests for status tiers."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("in_progress", 0),
            ("dispatched", 0),
            ("pending", 1),
            ("blocked", 1),
            ("completed", 2),
            ("failed", 2),
            ("cancelled", 2),
            ("something-new", 2),
            ("", 2),
            ("  In_Progress ", 0),
        ],
    )
    def test_tiers(self, status, expected):
        assert commission_priority(status) == expected


class TestSortCommissions:
    """Tests for commission ordering."""

    def test_running_then_pending_then_terminal(self):
        commissions = [
            _commission("done", "completed", "2025-03-10"),
            _commission("working", "in_progress", "2025-03-01"),
            _commission("queued", "pending", "2025-03-12"),
            _commission("sent", "dispatched", "2025-03-05"),
        ]

        ordered = [c.commissionId for c in sort_commissions(commissions)]

        assert ordered == ["sent", "working", "queued", "done"]

    def test_date_descending_within_tier(self):
        commissions = [
            _commission("old", "completed", "2025-01-01"),
            _commission("new", "failed", "2025-02-01"),
            _commission("mid", "mystery", "2025-01-15"),
        ]

        ordered = [c.commissionId for c in sort_commissions(commissions)]

        assert ordered == ["new", "mid", "old"]

    def test_equal_dates_keep_input_order(self):
        commissions = [
            _commission("first", "pending", "2025-03-01"),
            _commission("second", "blocked", "2025-03-01"),
        ]

        assert [c.commissionId for c in sort_commissions(commissions)] == ["first", "second"]
        assert [c.commissionId for c in sort_commissions(reversed(commissions))] == ["second", "first"]

    def test_does_not_mutate_input(self):
        commissions = [_commission("b", "completed", "2025-01-01"), _commission("a", "pending", "2025-01-01")]

        sort_commissions(commissions)

        assert [c.commissionId for c in commissions] == ["b", "a"]


class TestSortMeetingRequests:
    """Tests for meeting request ordering."""

    def test_active_before_deferred_regardless_of_date(self):
        meetings = [
            _meeting("snoozed", "2025-12-31", deferred_until="2099-01-01"),
            _meeting("active", "2020-01-01"),
        ]

        assert [m.meetingId for m in sort_meeting_requests(meetings)] == ["active", "snoozed"]

    def test_deferred_by_deferred_until_ascending(self):
        meetings = [
            _meeting("later", "2025-03-01", deferred_until="2025-04-10"),
            _meeting("sooner", "2025-01-01", deferred_until="2025-04-01"),
        ]

        assert [m.meetingId for m in sort_meeting_requests(meetings)] == ["sooner", "later"]

    def test_ties_broken_by_date_descending(self):
        meetings = [
            _meeting("a-old", "2025-01-01"),
            _meeting("a-new", "2025-03-01"),
            _meeting("d-old", "2025-01-01", deferred_until="2025-05-01"),
            _meeting("d-new", "2025-03-01", deferred_until="2025-05-01"),
        ]

        ordered = [m.meetingId for m in sort_meeting_requests(meetings)]

        assert ordered == ["a-new", "a-old", "d-new", "d-old"]


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestDashboardAggregator:
    """Tests for the cross-project view."""

    def test_merges_and_sorts_across_projects(self, tmp_path):
        atlas = tmp_path / "atlas"
        borealis = tmp_path / "borealis"
        _write(atlas / ".lore/commissions/c-done.md", "---\nstatus: completed\ndate: 2025-03-10\n---\n")
        _write(borealis / ".lore/commissions/c-run.md", "---\nstatus: in_progress\ndate: 2025-03-01\n---\n")
        _write(atlas / ".lore/meetings/m-req.md", "---\nstatus: requested\ndate: 2025-03-02\n---\n")
        _write(borealis / ".lore/meetings/m-open.md", "---\nstatus: open\ndate: 2025-03-03\n---\n")
        _write(
            borealis / ".lore/meetings/m-later.md",
            "---\nstatus: requested\ndate: 2025-03-04\ndeferred_until: 2025-06-01\n---\n",
        )

        aggregator = DashboardAggregator(
            projects=[
                ProjectConfig(name="atlas", path=str(atlas)),
                ProjectConfig(name="borealis", path=str(borealis)),
            ]
        )
        view = aggregator.build()

        assert [(c["commissionId"], c["projectName"]) for c in view["commissions"]] == [
            ("c-run", "borealis"),
            ("c-done", "atlas"),
        ]
        assert [m["meetingId"] for m in view["meetingRequests"]] == ["m-req", "m-later"]

    def test_reads_projects_from_config_file(self, tmp_path):
        project = tmp_path / "atlas"
        _write(project / ".lore/commissions/c-1.md", "---\ntitle: First\nstatus: pending\n---\n")
        config_path = tmp_path / "config.yaml"
        config_path.write_text(f"projects:\n  - name: atlas\n    path: {project}\n")

        view = DashboardAggregator(config_path=config_path).build()

        assert [c["title"] for c in view["commissions"]] == ["First"]
        assert view["meetingRequests"] == []

    def test_missing_config_is_empty_dashboard(self, tmp_path):
        view = DashboardAggregator(config_path=tmp_path / "absent.yaml").build()

        assert view == {"commissions": [], "meetingRequests": []}

    def test_requires_a_source(self):
        with pytest.raises(ValueError):
            DashboardAggregator()

    def test_same_day_deferrals_sort_by_time(self, tmp_path):
        atlas = tmp_path / "atlas"
        _write(
            atlas / ".lore/meetings/m-evening.md",
            "---\nstatus: requested\ndate: 2025-03-01\ndeferred_until: 2025-04-01 18:00:00\n---\n",
        )
        _write(
            atlas / ".lore/meetings/m-morning.md",
            "---\nstatus: requested\ndate: 2025-02-01\ndeferred_until: 2025-04-01 09:30:00\n---\n",
        )

        view = DashboardAggregator(projects=[ProjectConfig(name="atlas", path=str(atlas))]).build()

        assert [(m["meetingId"], m["deferred_until"]) for m in view["meetingRequests"]] == [
            ("m-morning", "2025-04-01T09:30:00"),
            ("m-evening", "2025-04-01T18:00:00"),
        ]
