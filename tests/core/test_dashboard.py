"""Unit tests for dashboard view shaping - pure functions, no mocks needed."""

from nutriledger.core.dashboard import build_dashboard_view, order_entries
from nutriledger.core.macros import calculate_totals
from nutriledger.core.models import EntryOrder, GoalTargets, LogEntry


GOALS = GoalTargets(calories_kcal=2000, protein_g=150, carbs_g=200, fat_g=67)


def entry(name: str, calories: float, logged_at: str) -> LogEntry:
    return LogEntry(
        id=name.lower(),
        name=name,
        calories_kcal=calories,
        protein_g=10,
        carbs_g=10,
        fat_g=5,
        logged_at=logged_at,
    )


class TestOrderEntries:
    """Tests for order_entries."""

    def test_chronological_keeps_order(self):
        """Chronological order is insertion order."""
        entries = [entry("A", 1, "08:00"), entry("B", 1, "09:00")]
        assert [e.name for e in order_entries(entries, EntryOrder.CHRONOLOGICAL)] == ["A", "B"]

    def test_most_recent_first_reverses_copy(self):
        """Reversal does not touch the input list."""
        entries = [entry("A", 1, "08:00"), entry("B", 1, "09:00")]
        result = order_entries(entries, EntryOrder.MOST_RECENT_FIRST)
        assert [e.name for e in result] == ["B", "A"]
        assert [e.name for e in entries] == ["A", "B"]


class TestBuildDashboardView:
    """Tests for build_dashboard_view."""

    def test_empty_day(self):
        """Empty day shows the whole goal remaining."""
        view = build_dashboard_view(calculate_totals([]), GOALS, [])
        assert view.remaining_calories == 2000
        assert view.progress_percent == 0
        assert view.exceeded_goal is False
        assert view.recent_entries == []

    def test_recent_entries_bounded_and_newest_first(self):
        """Only the three newest entries are previewed."""
        entries = [entry(n, 100, f"0{i}:00") for i, n in enumerate("ABCDE")]
        view = build_dashboard_view(calculate_totals(entries), GOALS, entries)
        assert [e.name for e in view.recent_entries] == ["E", "D", "C"]
        assert view.totals.calories_kcal == 500

    def test_custom_preview_count(self):
        """Preview count is configurable."""
        entries = [entry(n, 100, "08:00") for n in "AB"]
        view = build_dashboard_view(calculate_totals(entries), GOALS, entries, preview_count=1)
        assert [e.name for e in view.recent_entries] == ["B"]

    def test_over_goal(self):
        """Over goal clamps progress, floors remaining and flags the overage."""
        entries = [entry("Feast", 2500, "20:00")]
        view = build_dashboard_view(calculate_totals(entries), GOALS, entries)
        assert view.remaining_calories == 0
        assert view.progress_percent == 100
        assert view.exceeded_goal is True
        assert view.goals == GOALS
