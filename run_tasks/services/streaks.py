from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable

from run_tasks.domain.entities import HistoryEntry, StreakCounters, Task
from run_tasks.domain.enums import StreakMode

logger = logging.getLogger(__name__)


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    # Weeks start on Sunday; weekday() is 0 for Monday.
    day = start_of_day(now)
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


def _in_frame_of(moment: datetime, now: datetime) -> datetime:
    """Express ``moment`` on the same clock as ``now`` so they compare."""
    if now.tzinfo is None:
        if moment.tzinfo is None:
            return moment
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=now.tzinfo)
    return moment.astimezone(now.tzinfo)


def _completion_moments(
    tasks: Iterable[Task], history: Iterable[HistoryEntry]
) -> list[datetime]:
    seen: set[tuple[str, datetime]] = set()
    moments: list[datetime] = []
    completed = (
        (task.id, task.completed_at)
        for task in tasks
        if task.completed and task.completed_at is not None
    )
    archived = ((entry.task_id, entry.completed_at) for entry in history)
    for key in [*completed, *archived]:
        if key in seen:
            continue
        seen.add(key)
        moments.append(key[1])
    return moments


def compute_streaks(
    tasks: Iterable[Task],
    history: Iterable[HistoryEntry],
    now: datetime,
) -> StreakCounters:
    """Count completions falling in the day, week and month containing ``now``.

    Active completed tasks and history entries are both counted, so the
    counters survive clearing. An active task and its own history snapshot
    share ``(task_id, completed_at)`` and count once. Windows close at ``now``,
    so a completion counted for the day is always counted for the week and
    month too.
    """
    day_start = start_of_day(now)
    week_start = start_of_week(now)
    month_start = start_of_month(now)

    daily = weekly = monthly = 0
    moments = _completion_moments(tasks, history)
    for moment in moments:
        completed_at = _in_frame_of(moment, now)
        if completed_at > now:
            continue
        if completed_at >= day_start:
            daily += 1
        if completed_at >= week_start:
            weekly += 1
        if completed_at >= month_start:
            monthly += 1

    logger.debug(
        "Computed streaks from %d completions: daily=%d weekly=%d monthly=%d",
        len(moments),
        daily,
        weekly,
        monthly,
    )
    return StreakCounters(daily=daily, weekly=weekly, monthly=monthly)


def select_displayed_streak(counters: StreakCounters, mode: StreakMode | str) -> int:
    try:
        return counters[StreakMode(mode)]
    except ValueError:
        return counters.monthly
