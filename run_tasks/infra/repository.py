from __future__ import annotations

import functools
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from run_tasks.domain.entities import (
    DEFAULT_HISTORY_LIMIT,
    HistoryEntry,
    StreakCounters,
    Task,
    UserProfile,
    UserSettings,
)
from run_tasks.domain.enums import StreakMode, Theme, Timezone
from run_tasks.domain.errors import ConfigurationError, TaskNotFoundError, TaskStoreError
from run_tasks.domain.results import Result
from run_tasks.services.history import history_entry_from_task, sweep_completed

from .models import (
    TaskHistoryModel,
    TaskModel,
    UserProfileModel,
    UserSettingsModel,
    UserStreaksModel,
    utcnow,
)

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops offsets, so everything is written and read as UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_task(model: TaskModel) -> Task:
    return Task(
        id=model.id,
        text=model.text,
        completed=model.completed,
        is_cleared=model.is_cleared,
        created_at=_as_utc(model.created_at),
        completed_at=_as_utc(model.completed_at),
    )


def _to_history_entry(model: TaskHistoryModel) -> HistoryEntry:
    return HistoryEntry(
        task_id=model.task_id,
        text=model.text,
        created_at=_as_utc(model.created_at),
        completed_at=_as_utc(model.completed_at),
    )


def _to_settings(model: UserSettingsModel) -> UserSettings:
    return UserSettings(
        streak_mode=StreakMode.parse(model.streak_duration),
        timezone=Timezone.parse(model.timezone),
        show_history=model.show_history,
        max_history_items=model.max_history_items,
        theme=Theme.parse(model.theme),
    )


def _to_profile(model: UserProfileModel) -> UserProfile:
    return UserProfile(
        name=model.name or "",
        email=model.email or "",
        phone=model.phone or "",
        bio=model.bio or "",
    )


def _store_call(operation: str) -> Callable:
    """Run a store method and wrap its outcome in a ``Result``."""

    def decorator(method: Callable) -> Callable:
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs) -> Result:
            try:
                return Result.success(method(self, *args, **kwargs))
            except TaskNotFoundError as exc:
                logger.warning("%s: %s", operation, exc)
                return Result.failure(exc)
            except SQLAlchemyError as exc:
                logger.exception("Error during %s", operation)
                return Result.failure(TaskStoreError(operation, exc))

        return wrapper

    return decorator


class SqlTaskStore:
    """Relational task store. Every public method returns a ``Result``."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._sessions = session_factory

    @_store_call("save_task")
    def save_task(self, task: Task, user_id: str) -> Task:
        with self._sessions() as session:
            session.add(
                TaskModel(
                    id=task.id,
                    user_id=user_id,
                    text=task.text,
                    completed=task.completed,
                    is_cleared=task.is_cleared,
                    created_at=_as_utc(task.created_at),
                    completed_at=_as_utc(task.completed_at),
                )
            )
            session.commit()
        return task

    @_store_call("update_task")
    def update_task(self, task: Task, user_id: str) -> Task:
        with self._sessions() as session:
            model = self._owned_task(session, task.id, user_id)
            model.text = task.text
            model.completed = task.completed
            model.completed_at = _as_utc(task.completed_at)
            session.commit()
        return task

    @_store_call("delete_task")
    def delete_task(self, task_id: str, user_id: str) -> None:
        with self._sessions() as session:
            session.delete(self._owned_task(session, task_id, user_id))
            session.commit()

    @_store_call("load_tasks")
    def load_tasks(self, user_id: str) -> list[Task]:
        with self._sessions() as session:
            stmt = (
                select(TaskModel)
                .where(TaskModel.user_id == user_id, TaskModel.is_cleared.is_(False))
                .order_by(TaskModel.created_at.asc())
            )
            return [_to_task(model) for model in session.scalars(stmt)]

    @_store_call("clear_completed_tasks")
    def clear_completed_tasks(self, user_id: str) -> int:
        with self._sessions() as session:
            models = {
                model.id: model
                for model in session.scalars(
                    select(TaskModel).where(
                        TaskModel.user_id == user_id, TaskModel.is_cleared.is_(False)
                    )
                )
            }
            sweep = sweep_completed(_to_task(model) for model in models.values())
            for task in sweep.to_archive:
                if task.completed_at is None:
                    task = replace(task, completed_at=utcnow())
                entry = history_entry_from_task(task)
                models[task.id].is_cleared = True
                session.add(
                    TaskHistoryModel(
                        user_id=user_id,
                        task_id=entry.task_id,
                        text=entry.text,
                        created_at=entry.created_at,
                        completed_at=entry.completed_at,
                    )
                )
            session.commit()
        logger.info("Cleared %d completed tasks for %s", len(sweep.to_archive), user_id)
        return len(sweep.to_archive)

    @_store_call("load_task_history")
    def load_task_history(
        self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> list[HistoryEntry]:
        with self._sessions() as session:
            stmt = (
                select(TaskHistoryModel)
                .where(TaskHistoryModel.user_id == user_id)
                .order_by(TaskHistoryModel.completed_at.desc(), TaskHistoryModel.id.desc())
                .limit(limit)
            )
            return [_to_history_entry(model) for model in session.scalars(stmt)]

    @_store_call("save_user_streaks")
    def save_user_streaks(self, user_id: str, counters: StreakCounters) -> StreakCounters:
        with self._sessions() as session:
            model = session.get(UserStreaksModel, user_id)
            if model is None:
                model = UserStreaksModel(user_id=user_id)
                session.add(model)
            model.daily_streak = counters.daily
            model.weekly_streak = counters.weekly
            model.monthly_streak = counters.monthly
            model.updated_at = utcnow()
            session.commit()
        return counters

    @_store_call("load_user_streaks")
    def load_user_streaks(self, user_id: str) -> StreakCounters:
        with self._sessions() as session:
            model = session.get(UserStreaksModel, user_id)
            if model is None:
                return StreakCounters()
            return StreakCounters(
                daily=model.daily_streak or 0,
                weekly=model.weekly_streak or 0,
                monthly=model.monthly_streak or 0,
            )

    @_store_call("load_user_settings")
    def load_user_settings(self, user_id: str) -> UserSettings:
        with self._sessions() as session:
            model = session.get(UserSettingsModel, user_id)
            return _to_settings(model) if model else UserSettings()

    @_store_call("save_user_settings")
    def save_user_settings(self, settings: UserSettings, user_id: str) -> UserSettings:
        with self._sessions() as session:
            model = session.get(UserSettingsModel, user_id)
            if model is None:
                model = UserSettingsModel(user_id=user_id)
                session.add(model)
            model.streak_duration = settings.streak_mode.value
            model.timezone = settings.timezone.value
            model.theme = settings.theme.value
            model.show_history = settings.show_history
            model.max_history_items = settings.max_history_items
            model.updated_at = utcnow()
            session.commit()
        return settings

    @_store_call("load_user_profile")
    def load_user_profile(self, user_id: str) -> UserProfile:
        with self._sessions() as session:
            model = session.get(UserProfileModel, user_id)
            return _to_profile(model) if model else UserProfile()

    @_store_call("save_user_profile")
    def save_user_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        with self._sessions() as session:
            model = session.get(UserProfileModel, user_id)
            if model is None:
                model = UserProfileModel(user_id=user_id)
                session.add(model)
            model.name = profile.name
            model.email = profile.email
            model.phone = profile.phone
            model.bio = profile.bio
            model.updated_at = utcnow()
            session.commit()
        return profile

    @_store_call("initialize_user_data")
    def initialize_user_data(self, user_id: str) -> bool:
        """Seed default settings on first login. Returns True if seeded."""
        with self._sessions() as session:
            if session.get(UserSettingsModel, user_id) is not None:
                return False
            defaults = UserSettings()
            session.add(
                UserSettingsModel(
                    user_id=user_id,
                    streak_duration=defaults.streak_mode.value,
                    timezone=defaults.timezone.value,
                    theme=defaults.theme.value,
                    show_history=defaults.show_history,
                    max_history_items=defaults.max_history_items,
                )
            )
            session.commit()
        logger.info("Seeded default settings for %s", user_id)
        return True

    @staticmethod
    def _owned_task(session, task_id: str, user_id: str) -> TaskModel:
        model = session.get(TaskModel, task_id)
        if model is None or model.user_id != user_id:
            raise TaskNotFoundError(task_id)
        return model


class UnconfiguredTaskStore:
    """Stand-in used when no database is configured; every call fails."""

    def __init__(self, reason: str = "Task store not configured") -> None:
        self._reason = reason
        logger.warning("%s; remote calls will return a configuration error", reason)

    def _fail(self, *args, **kwargs) -> Result:
        return Result.failure(ConfigurationError(self._reason))

    save_task = _fail
    update_task = _fail
    delete_task = _fail
    load_tasks = _fail
    clear_completed_tasks = _fail
    load_task_history = _fail
    save_user_streaks = _fail
    load_user_streaks = _fail
    load_user_settings = _fail
    save_user_settings = _fail
    load_user_profile = _fail
    save_user_profile = _fail
    initialize_user_data = _fail
