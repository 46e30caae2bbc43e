from __future__ import annotations

from datetime import datetime, timedelta, timezone

from run_tasks.domain.entities import HistoryEntry, StreakCounters, Task
from run_tasks.domain.enums import StreakMode, Timezone
from run_tasks.services.streaks import (
    compute_streaks,
    select_displayed_streak,
    start_of_month,
    start_of_week,
)

NOW = datetime(2024, 6, 10, 10, 0)  # Monday


def _completed(task_id: str, completed_at: datetime) -> Task:
    return Task(
        id=task_id,
        text=f"task {task_id}",
        completed=True,
        is_cleared=False,
        created_at=completed_at - timedelta(hours=1),
        completed_at=completed_at,
    )


def _entry(task_id: str, completed_at: datetime) -> HistoryEntry:
    return HistoryEntry(
        task_id=task_id,
        text=f"task {task_id}",
        created_at=completed_at - timedelta(hours=1),
        completed_at=completed_at,
    )


def test_week_starts_on_sunday() -> None:
    assert start_of_week(NOW) == datetime(2024, 6, 9)
    assert start_of_week(datetime(2024, 6, 9, 23, 59)) == datetime(2024, 6, 9)
    assert start_of_week(datetime(2024, 6, 15, 12, 0)) == datetime(2024, 6, 9)
    assert start_of_month(NOW) == datetime(2024, 6, 1)


def test_counts_by_window() -> None:
    tasks = [
        _completed("today", datetime(2024, 6, 10, 8, 0)),
        _completed("sunday", datetime(2024, 6, 9, 0, 0)),
        _completed("saturday", datetime(2024, 6, 8, 23, 59)),
        _completed("last-month", datetime(2024, 5, 31, 12, 0)),
    ]

    assert compute_streaks(tasks, [], NOW) == StreakCounters(daily=1, weekly=2, monthly=3)


def test_incomplete_tasks_are_ignored() -> None:
    open_task = Task(
        id="open",
        text="open",
        completed=False,
        is_cleared=False,
        created_at=datetime(2024, 6, 10, 8, 0),
    )

    assert compute_streaks([open_task], [], NOW) == StreakCounters()


def test_history_entries_are_counted() -> None:
    history = [_entry("a", datetime(2024, 6, 10, 9, 0)), _entry("b", datetime(2024, 6, 2, 9, 0))]

    assert compute_streaks([], history, NOW) == StreakCounters(daily=1, weekly=1, monthly=2)


def test_task_and_its_own_history_entry_count_once() -> None:
    moment = datetime(2024, 6, 10, 9, 0)

    counters = compute_streaks([_completed("a", moment)], [_entry("a", moment)], NOW)

    assert counters == StreakCounters(daily=1, weekly=1, monthly=1)


def test_week_may_reach_into_previous_month() -> None:
    now = datetime(2024, 6, 1, 12, 0)  # Saturday; week began Sunday May 26
    tasks = [_completed("friday", datetime(2024, 5, 31, 18, 0))]

    assert compute_streaks(tasks, [], now) == StreakCounters(daily=0, weekly=1, monthly=0)


def test_daily_completions_are_within_week_and_month() -> None:
    start = NOW - timedelta(days=40)
    for hours in range(0, 42 * 24, 5):
        counters = compute_streaks([_completed("x", start + timedelta(hours=hours))], [], NOW)
        assert counters.daily >= 0
        if counters.daily:
            assert counters.weekly == 1
            assert counters.monthly == 1


def test_compute_streaks_is_pure() -> None:
    tasks = [_completed("a", datetime(2024, 6, 10, 8, 0))]
    history = [_entry("b", datetime(2024, 6, 4, 8, 0))]

    assert compute_streaks(tasks, history, NOW) == compute_streaks(tasks, history, NOW)


def test_windows_use_timezone_of_now() -> None:
    jst = Timezone.JST.tzinfo
    now = datetime(2024, 6, 11, 1, 0, tzinfo=jst)
    late = _completed("late", datetime(2024, 6, 10, 14, 0, tzinfo=timezone.utc))

    assert compute_streaks([late], [], now).daily == 0
    assert compute_streaks([late], [], now.astimezone(timezone.utc)).daily == 1


def test_naive_completion_read_in_timezone_of_now() -> None:
    now = datetime(2024, 6, 10, 10, 0, tzinfo=Timezone.IST.tzinfo)
    task = _completed("a", datetime(2024, 6, 10, 0, 30))

    assert compute_streaks([task], [], now).daily == 1


def test_select_displayed_streak() -> None:
    counters = StreakCounters(daily=1, weekly=2, monthly=3)

    assert select_displayed_streak(counters, StreakMode.DAILY) == 1
    assert select_displayed_streak(counters, "weekly") == 2
    assert select_displayed_streak(counters, StreakMode.MONTHLY) == 3
    assert select_displayed_streak(counters, "yearly") == 3
