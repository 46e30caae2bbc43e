"""
Task store port used by the task service.

``SqlTaskStore`` and ``UnconfiguredTaskStore`` implement it; tests pass a fake.
Every call returns a ``Result``; callers check ``ok`` before reading ``data``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .entities import HistoryEntry, StreakCounters, Task, UserProfile, UserSettings
from .results import Result


@runtime_checkable
class TaskStore(Protocol):
    def save_task(self, task: Task, user_id: str) -> Result[Task]: ...

    def update_task(self, task: Task, user_id: str) -> Result[Task]: ...

    def delete_task(self, task_id: str, user_id: str) -> Result[None]: ...

    def load_tasks(self, user_id: str) -> Result[list[Task]]: ...

    def clear_completed_tasks(self, user_id: str) -> Result[int]: ...

    def load_task_history(self, user_id: str, limit: int = ...) -> Result[list[HistoryEntry]]: ...

    def save_user_streaks(
        self, user_id: str, counters: StreakCounters
    ) -> Result[StreakCounters]: ...

    def load_user_streaks(self, user_id: str) -> Result[StreakCounters]: ...

    def load_user_settings(self, user_id: str) -> Result[UserSettings]: ...

    def save_user_settings(self, settings: UserSettings, user_id: str) -> Result[UserSettings]: ...

    def load_user_profile(self, user_id: str) -> Result[UserProfile]: ...

    def save_user_profile(self, user_id: str, profile: UserProfile) -> Result[UserProfile]: ...

    def initialize_user_data(self, user_id: str) -> Result[bool]: ...
