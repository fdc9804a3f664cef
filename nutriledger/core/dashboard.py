"""Dashboard Views - Pure functions shaping ledger state for display.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Sequence

from .models import DashboardView, EntryOrder, GoalTargets, LogEntry, NutrientTotals
from .macros import calculate_progress, calculate_remaining_calories


# Entries shown in the dashboard's "recent" list
DEFAULT_PREVIEW_COUNT = 3


def order_entries(entries: Sequence[LogEntry], order: EntryOrder) -> list[LogEntry]:
    """Return a new list of entries in the requested order.

    Args:
        entries: Entries in insertion (chronological) order
        order: Requested ordering

    Returns:
        A copy; the input sequence is never reordered
    """
    if order == EntryOrder.MOST_RECENT_FIRST:
        return list(reversed(entries))
    return list(entries)


def build_dashboard_view(
    totals: NutrientTotals,
    goals: GoalTargets,
    entries: Sequence[LogEntry],
    preview_count: int = DEFAULT_PREVIEW_COUNT,
) -> DashboardView:
    """Build the dashboard read model.

    Args:
        totals: Current day totals
        goals: Daily targets
        entries: Entries in chronological order
        preview_count: Maximum number of recent entries to include

    Returns:
        DashboardView with recent entries most recent first
    """
    progress = calculate_progress(totals, goals)
    recent = order_entries(entries, EntryOrder.MOST_RECENT_FIRST)[: max(preview_count, 0)]

    return DashboardView(
        remaining_calories=calculate_remaining_calories(totals, goals),
        progress_percent=progress.percent,
        exceeded_goal=progress.exceeded,
        totals=totals,
        goals=goals,
        recent_entries=recent,
    )
