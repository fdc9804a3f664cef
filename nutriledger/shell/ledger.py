"""Nutrition Ledger - Stateful owner of the profile and the daily log.

The ledger applies the day-rollover rule, delegates math to the pure core
functions, and writes a snapshot through its store after every mutation.
"""

import logging
import threading
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Union

from ..core.catalog import parse_food_item
from ..core.dashboard import DEFAULT_PREVIEW_COUNT, build_dashboard_view, order_entries
from ..core.errors import InvalidFoodItem, PersistenceError
from ..core.goals import derive_goals, parse_profile
from ..core.macros import calculate_progress, calculate_remaining_calories, calculate_totals
from ..core.models import (
    DEFAULT_GOALS,
    CalorieProgress,
    DashboardView,
    EntryOrder,
    FoodItem,
    GoalTargets,
    LedgerSnapshot,
    LogEntry,
    NutrientTotals,
    UserProfile,
)
from .storage import SnapshotStore


logger = logging.getLogger(__name__)

NUTRIENT_FIELDS = ("calories_kcal", "protein_g", "carbs_g", "fat_g")


def local_day_key() -> str:
    """Today's date in the process's local timezone, as YYYY-MM-DD."""
    return date.today().isoformat()


def local_time_label(now: datetime) -> str:
    """Format a log timestamp the way the log list shows it."""
    return now.strftime("%H:%M")


class NutritionLedger:
    """Single-user daily nutrition ledger.

    Every public operation runs under one lock, so a rollover check and the
    mutation that follows it are never interleaved with another caller.
    The injected ``today`` provider is the only source of the current day.
    """

    def __init__(
        self,
        store: SnapshotStore,
        today: Callable[[], str] = local_day_key,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Create an empty ledger bound to the current day.

        Use :meth:`open` to hydrate from the store.

        Args:
            store: Persistence adapter written after every mutation
            today: Returns the current DayKey
            now: Returns the current local time, used to label entries
        """
        self._store = store
        self._today = today
        self._now = now
        self._lock = threading.RLock()
        self._profile: Optional[UserProfile] = None
        self._goals: Optional[GoalTargets] = None
        self._entries: list[LogEntry] = []
        self._day_key = today()
        self._needs_flush = False

    @classmethod
    def open(
        cls,
        store: SnapshotStore,
        today: Callable[[], str] = local_day_key,
        now: Callable[[], datetime] = datetime.now,
    ) -> "NutritionLedger":
        """Construct a ledger and hydrate it from the store.

        The store is read exactly once. A snapshot from an earlier day has
        its entries dropped and the cleared state is saved. If that write
        fails the ledger is still returned, with ``needs_flush`` set.

        Raises:
            PersistenceError: If the store cannot be read
        """
        ledger = cls(store, today=today, now=now)
        ledger._hydrate(store.load())
        return ledger

    def _hydrate(self, snapshot: Optional[LedgerSnapshot]) -> None:
        with self._lock:
            if snapshot is None:
                logger.info("No stored ledger, starting fresh for %s", self._day_key)
                return
            self._profile = snapshot.profile
            self._goals = derive_goals(snapshot.profile) if snapshot.profile else None
            self._entries = list(snapshot.entries)
            self._day_key = snapshot.day_key
            logger.info(
                "Loaded ledger for %s with %d entries", self._day_key, len(self._entries)
            )
            self._sync_day()

    # ==================== Persistence ====================

    def snapshot(self) -> LedgerSnapshot:
        """Capture the full persisted state."""
        with self._lock:
            return LedgerSnapshot(
                profile=self._profile,
                day_key=self._day_key,
                entries=list(self._entries),
            )

    def _persist(self) -> None:
        try:
            self._store.save(self.snapshot())
        except PersistenceError:
            self._needs_flush = True
            logger.error("Ledger state for %s was not persisted", self._day_key)
            raise
        self._needs_flush = False

    @property
    def needs_flush(self) -> bool:
        """True when the last write failed and state is only in memory."""
        return self._needs_flush

    def flush(self) -> None:
        """Write the current state again, e.g. after a failed save.

        Raises:
            PersistenceError: If the write fails again
        """
        with self._lock:
            self._persist()

    # ==================== Day rollover ====================

    @property
    def day_key(self) -> str:
        return self._day_key

    def _roll_over(self) -> bool:
        """Clear the log in memory if the day has changed. Caller holds the lock."""
        current = self._today()
        if current == self._day_key:
            return False
        logger.info(
            "New day %s (was %s), dropping %d entries",
            current,
            self._day_key,
            len(self._entries),
        )
        self._entries = []
        self._day_key = current
        return True

    def _sync_day(self) -> None:
        """Roll over for reads; a failed write is recorded in ``needs_flush``."""
        if self._roll_over():
            try:
                self._persist()
            except PersistenceError:
                logger.warning("Rollover to %s kept in memory until the next flush", self._day_key)

    def check_rollover(self) -> bool:
        """Clear the log if the day has changed.

        Returns:
            True if the log was reset for a new day

        Raises:
            PersistenceError: If the reset state was applied but could not be saved
        """
        with self._lock:
            if not self._roll_over():
                return False
            self._persist()
            return True

    # ==================== Profile ====================

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile

    @property
    def goals(self) -> GoalTargets:
        """Current targets; defaults apply until a profile is set."""
        return self._goals or DEFAULT_GOALS

    def set_profile(self, profile: Union[UserProfile, Mapping[str, Any]]) -> GoalTargets:
        """Store a profile and derive its goals.

        Args:
            profile: UserProfile or raw onboarding mapping

        Returns:
            The new GoalTargets

        Raises:
            InvalidProfile: If the profile is malformed; the ledger is unchanged
            PersistenceError: If the state was updated but could not be saved
        """
        if not isinstance(profile, UserProfile):
            profile = parse_profile(profile)
        goals = derive_goals(profile)

        with self._lock:
            self._profile = profile
            self._goals = goals
            logger.info("Profile set, daily goal %d kcal", goals.calories_kcal)
            self._persist()
        return goals

    def update_profile(self, **changes: Any) -> GoalTargets:
        """Edit profile fields; goals are always re-derived.

        Before onboarding, all four fields must be passed.

        Raises:
            InvalidProfile: If the edited profile is incomplete or invalid
        """
        with self._lock:
            if self._profile is None:
                data: dict[str, Any] = {}
            else:
                data = self._profile.model_dump()
            data.update(changes)
            return self.set_profile(parse_profile(data))

    # ==================== Log ====================

    def log_food(
        self,
        item: Union[FoodItem, Mapping[str, Any]],
        timestamp: Optional[str] = None,
    ) -> LogEntry:
        """Append a copy of a food to today's log.

        A pending rollover and the append are applied together, then saved once.

        Args:
            item: Any well-formed FoodItem; it need not come from the catalog
            timestamp: Local time label for the entry (defaults to now, "HH:MM")

        Returns:
            The new LogEntry

        Raises:
            InvalidFoodItem: If a nutrient value is negative or the item is malformed
            PersistenceError: If the entry was appended but could not be saved
        """
        if not isinstance(item, FoodItem):
            item = parse_food_item(item)
        for field in NUTRIENT_FIELDS:
            value = getattr(item, field)
            if value is None or value < 0:
                raise InvalidFoodItem(f"{field} must be non-negative, got {value!r}")

        with self._lock:
            self._roll_over()
            entry = LogEntry(
                **item.model_dump(include=set(FoodItem.model_fields)),
                logged_at=timestamp if timestamp is not None else local_time_label(self._now()),
            )
            self._entries.append(entry)
            logger.info(
                "Logged %s (%s kcal) as entry %s", entry.name, entry.calories_kcal, entry.entry_id[:8]
            )
            self._persist()
        return entry

    def clear_log(self) -> None:
        """Empty the current day's entries, keeping the DayKey.

        Raises:
            PersistenceError: If the cleared state could not be saved
        """
        with self._lock:
            logger.info("Clearing %d entries for %s", len(self._entries), self._day_key)
            self._entries = []
            self._persist()

    def reset(self) -> None:
        """Drop the profile, goals and all entries.

        Raises:
            PersistenceError: If the reset state could not be saved
        """
        with self._lock:
            logger.info("Resetting ledger")
            self._profile = None
            self._goals = None
            self._entries = []
            self._day_key = self._today()
            self._persist()

    def list_entries(self, order: EntryOrder = EntryOrder.CHRONOLOGICAL) -> list[LogEntry]:
        """Today's entries as a new list; stored order is never changed."""
        with self._lock:
            self._sync_day()
            return order_entries(self._entries, order)

    # ==================== Totals & progress ====================

    def get_totals(self) -> NutrientTotals:
        """Exact sum of today's entries."""
        with self._lock:
            self._sync_day()
            logger.debug("Totalling %d entries", len(self._entries))
            return calculate_totals(self._entries)

    def get_remaining_calories(self) -> float:
        """Calories left for today, never negative."""
        with self._lock:
            return calculate_remaining_calories(self.get_totals(), self.goals)

    def get_progress(self) -> CalorieProgress:
        """Clamped percentage plus the raw ratio and an exceeded flag."""
        with self._lock:
            return calculate_progress(self.get_totals(), self.goals)

    def get_progress_percent(self) -> float:
        """Calorie progress clamped to 0..100."""
        return self.get_progress().percent

    def is_goal_exceeded(self) -> bool:
        return self.get_progress().exceeded

    # ==================== Presentation ====================

    def get_dashboard_view(self, preview_count: int = DEFAULT_PREVIEW_COUNT) -> DashboardView:
        """Everything the dashboard renders, in one consistent read."""
        with self._lock:
            totals = self.get_totals()
            return build_dashboard_view(totals, self.goals, self._entries, preview_count)

    def get_full_log(self) -> list[LogEntry]:
        """All of today's entries, most recent first."""
        return self.list_entries(EntryOrder.MOST_RECENT_FIRST)
