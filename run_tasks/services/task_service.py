from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Callable, Iterable

from run_tasks.domain.entities import AppState, HistoryEntry, Task, UserProfile, UserSettings
from run_tasks.domain.errors import (
    NotAuthenticatedError,
    RunTasksError,
    TaskNotFoundError,
    ValidationError,
)
from run_tasks.domain.ports import TaskStore
from run_tasks.domain.results import Result
from run_tasks.infra.local_storage import LocalStateStorage

from .history import append_completion, history_entry_from_task
from .streaks import compute_streaks, select_displayed_streak

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _has_entry_for(history: Iterable[HistoryEntry], task: Task) -> bool:
    return any(
        entry.task_id == task.id and entry.completed_at == task.completed_at
        for entry in history
    )


class TaskService:
    """Write-through task lifecycle over a task store.

    Every mutation hits the store first. A new ``AppState`` snapshot is built
    only from a successful store result; on failure the current snapshot is
    left as it was and the error comes back in the ``Result``.
    """

    def __init__(
        self,
        store: TaskStore,
        user_id: str | None = None,
        clock: Callable[[], datetime] | None = None,
        local_storage: LocalStateStorage | None = None,
    ) -> None:
        self._store = store
        self._user_id = user_id
        self._clock = clock or _utcnow
        self._local_storage = local_storage
        today = self._now(UserSettings()).date()
        if local_storage is not None and user_id is None:
            self._state = local_storage.load(today)
        else:
            self._state = AppState.initial(today)

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def displayed_streak(self) -> int:
        return select_displayed_streak(self._state.streaks, self._state.settings.streak_mode)

    @property
    def has_completed_tasks(self) -> bool:
        return any(task.completed and not task.is_cleared for task in self._state.tasks)

    def sign_in(self, user_id: str) -> Result[AppState]:
        previous = self._user_id
        self._user_id = user_id
        loaded = self.load_user_data()
        if not loaded.ok:
            self._user_id = previous
            return loaded
        if self._local_storage is not None:
            self._local_storage.clear()
        return loaded

    def sign_out(self) -> None:
        self._user_id = None
        self._state = AppState.initial(self._today())

    def load_user_data(self) -> Result[AppState]:
        if self._user_id is None:
            return self._unauthenticated("load_user_data")
        user_id = self._user_id

        seeded = self._store.initialize_user_data(user_id)
        if not seeded.ok:
            return self._failed("initialize user data", seeded.error)
        settings = self._store.load_user_settings(user_id)
        if not settings.ok:
            return self._failed("load settings", settings.error)
        tasks = self._store.load_tasks(user_id)
        if not tasks.ok:
            return self._failed("load tasks", tasks.error)
        history = self._store.load_task_history(user_id, settings.data.max_history_items)
        if not history.ok:
            return self._failed("load history", history.error)

        now = self._now(settings.data)
        loaded_tasks = tuple(tasks.data)
        loaded_history = tuple(history.data)
        self._commit(
            AppState(
                tasks=loaded_tasks,
                history=loaded_history,
                streaks=compute_streaks(loaded_tasks, loaded_history, now),
                last_reset_date=now.date(),
                settings=settings.data,
            )
        )
        logger.info(
            "Loaded %d tasks and %d history entries for %s",
            len(loaded_tasks),
            len(loaded_history),
            user_id,
        )
        return Result.success(self._state)

    def add_task(self, text: str) -> Result[Task]:
        if self._user_id is None:
            return self._unauthenticated("add_task")
        text = (text or "").strip()
        if not text:
            return Result.failure(ValidationError("Task text must not be empty"))

        task = Task(
            id=str(uuid.uuid4()),
            text=text,
            completed=False,
            is_cleared=False,
            created_at=self._now(),
        )
        saved = self._store.save_task(task, self._user_id)
        if not saved.ok:
            return self._failed("save task", saved.error)

        self._commit(replace(self._state, tasks=(*self._state.tasks, task)))
        return Result.success(task)

    def toggle_complete(self, task_id: str) -> Result[Task]:
        if self._user_id is None:
            return self._unauthenticated("toggle_complete")
        state = self._state
        task = state.find_task(task_id)
        if task is None or task.is_cleared:
            return Result.failure(TaskNotFoundError(task_id))

        now = self._now()
        completed = not task.completed
        toggled = replace(task, completed=completed, completed_at=now if completed else None)
        written = self._store.update_task(toggled, self._user_id)
        if not written.ok:
            return self._failed("update task", written.error)

        tasks = tuple(toggled if item.id == task_id else item for item in state.tasks)
        if not completed:
            # Streaks are lifetime: a completion only the active task carried
            # (e.g. loaded from the store) moves into history before it is undone.
            history = state.history
            if task.completed_at is not None and not _has_entry_for(history, task):
                history = append_completion(
                    history_entry_from_task(task),
                    history,
                    state.settings.max_history_items,
                )
            self._commit(replace(state, tasks=tasks, history=history))
            return Result.success(toggled)

        history = append_completion(
            history_entry_from_task(toggled),
            state.history,
            state.settings.max_history_items,
        )
        streaks = compute_streaks(tasks, history, now)
        persisted = self._store.save_user_streaks(self._user_id, streaks)
        if not persisted.ok:
            logger.warning("Streaks not persisted for %s: %s", self._user_id, persisted.error)

        self._commit(replace(state, tasks=tasks, history=history, streaks=streaks))
        return Result.success(toggled)

    def delete_task(self, task_id: str) -> Result[None]:
        if self._user_id is None:
            return self._unauthenticated("delete_task")
        if self._state.find_task(task_id) is None:
            return Result.failure(TaskNotFoundError(task_id))

        deleted = self._store.delete_task(task_id, self._user_id)
        if not deleted.ok:
            return self._failed("delete task", deleted.error)

        self._commit(
            replace(
                self._state,
                tasks=tuple(task for task in self._state.tasks if task.id != task_id),
            )
        )
        return Result.success()

    def clear_completed(self) -> Result[AppState]:
        if self._user_id is None:
            return self._unauthenticated("clear_completed")
        if not self.has_completed_tasks:
            return Result.success(self._state)
        user_id = self._user_id

        cleared = self._store.clear_completed_tasks(user_id)
        if not cleared.ok:
            return self._failed("clear completed tasks", cleared.error)
        # The store is authoritative from here on; local history was provisional.
        tasks = self._store.load_tasks(user_id)
        if not tasks.ok:
            return self._failed("reload tasks", tasks.error)
        history = self._store.load_task_history(user_id, self._state.settings.max_history_items)
        if not history.ok:
            return self._failed("reload history", history.error)

        self._commit(replace(self._state, tasks=tuple(tasks.data), history=tuple(history.data)))
        return Result.success(self._state)

    def reset_daily_on_rollover(self) -> Result[bool]:
        """Un-complete every task once per day. Returns whether a reset ran."""
        today = self._today()
        if self._state.last_reset_date == today:
            return Result.success(False)

        tasks = tuple(
            replace(task, completed=False, completed_at=None) for task in self._state.tasks
        )
        self._commit(replace(self._state, tasks=tasks, last_reset_date=today))
        logger.info("Daily reset applied to %d tasks", len(tasks))
        return Result.success(True)

    def save_settings(self, settings: UserSettings) -> Result[UserSettings]:
        if self._user_id is None:
            return self._unauthenticated("save_settings")
        if settings.max_history_items < 1:
            return Result.failure(ValidationError("History size must be at least 1"))

        saved = self._store.save_user_settings(settings, self._user_id)
        if not saved.ok:
            return self._failed("save settings", saved.error)

        self._commit(
            replace(
                self._state,
                settings=settings,
                history=self._state.history[: settings.max_history_items],
            )
        )
        return Result.success(settings)

    def load_profile(self) -> Result[UserProfile]:
        if self._user_id is None:
            return self._unauthenticated("load_profile")
        loaded = self._store.load_user_profile(self._user_id)
        if not loaded.ok:
            return self._failed("load profile", loaded.error)
        return loaded

    def save_profile(self, profile: UserProfile) -> Result[UserProfile]:
        if self._user_id is None:
            return self._unauthenticated("save_profile")
        email = profile.email.strip()
        if email and "@" not in email:
            return Result.failure(ValidationError(f"Invalid email address: {email}"))

        profile = replace(profile, name=profile.name.strip(), email=email)
        saved = self._store.save_user_profile(self._user_id, profile)
        if not saved.ok:
            return self._failed("save profile", saved.error)
        return Result.success(profile)

    def _now(self, settings: UserSettings | None = None) -> datetime:
        moment = self._clock()
        if moment.tzinfo is None:
            return moment
        settings = settings or self._state.settings
        return moment.astimezone(settings.timezone.tzinfo)

    def _today(self) -> date:
        return self._now().date()

    def _commit(self, state: AppState) -> None:
        self._state = state
        if self._user_id is None and self._local_storage is not None:
            self._local_storage.save(state)

    def _failed(self, action: str, error: RunTasksError) -> Result:
        logger.error("Failed to %s for %s: %s", action, self._user_id, error)
        return Result.failure(error)

    @staticmethod
    def _unauthenticated(operation: str) -> Result:
        logger.debug("Ignoring %s without an authenticated user", operation)
        return Result.failure(NotAuthenticatedError())
