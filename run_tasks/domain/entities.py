from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .enums import StreakMode, Theme, Timezone

DEFAULT_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    completed: bool
    is_cleared: bool
    created_at: datetime
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class HistoryEntry:
    task_id: str
    text: str
    created_at: datetime
    completed_at: datetime


@dataclass(frozen=True)
class StreakCounters:
    daily: int = 0
    weekly: int = 0
    monthly: int = 0

    def __getitem__(self, mode: StreakMode) -> int:
        return getattr(self, StreakMode(mode).value)


@dataclass(frozen=True)
class UserSettings:
    streak_mode: StreakMode = StreakMode.MONTHLY
    timezone: Timezone = Timezone.IST
    show_history: bool = True
    max_history_items: int = DEFAULT_HISTORY_LIMIT
    theme: Theme = Theme.DARK


@dataclass(frozen=True)
class UserProfile:
    name: str = ""
    email: str = ""
    phone: str = ""
    bio: str = ""


@dataclass(frozen=True)
class AppState:
    tasks: tuple[Task, ...]
    history: tuple[HistoryEntry, ...]
    streaks: StreakCounters
    last_reset_date: date
    settings: UserSettings = field(default_factory=UserSettings)

    @classmethod
    def initial(cls, today: date, settings: UserSettings | None = None) -> AppState:
        return cls(
            tasks=(),
            history=(),
            streaks=StreakCounters(),
            last_reset_date=today,
            settings=settings or UserSettings(),
        )

    def find_task(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)
