from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from run_tasks.domain.entities import (
    AppState,
    HistoryEntry,
    StreakCounters,
    Task,
    UserSettings,
)
from run_tasks.domain.enums import StreakMode, Theme, Timezone

STORAGE_KEY = "run-task-manager-data"

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: str | None) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _state_to_dict(state: AppState) -> dict[str, Any]:
    return {
        "tasks": [
            {
                "id": task.id,
                "text": task.text,
                "completed": task.completed,
                "is_cleared": task.is_cleared,
                "created_at": _iso(task.created_at),
                "completed_at": _iso(task.completed_at),
            }
            for task in state.tasks
        ],
        "history": [
            {
                "task_id": entry.task_id,
                "text": entry.text,
                "created_at": _iso(entry.created_at),
                "completed_at": _iso(entry.completed_at),
            }
            for entry in state.history
        ],
        "streaks": {
            "daily": state.streaks.daily,
            "weekly": state.streaks.weekly,
            "monthly": state.streaks.monthly,
        },
        "last_reset_date": state.last_reset_date.isoformat(),
        "settings": {
            "streak_mode": state.settings.streak_mode.value,
            "timezone": state.settings.timezone.value,
            "show_history": state.settings.show_history,
            "max_history_items": state.settings.max_history_items,
            "theme": state.settings.theme.value,
        },
    }


def _state_from_dict(data: dict[str, Any], today: date) -> AppState:
    raw_settings = data.get("settings") or {}
    defaults = UserSettings()
    settings = UserSettings(
        streak_mode=StreakMode.parse(raw_settings.get("streak_mode")),
        timezone=Timezone.parse(raw_settings.get("timezone")),
        show_history=bool(raw_settings.get("show_history", defaults.show_history)),
        max_history_items=int(
            raw_settings.get("max_history_items", defaults.max_history_items)
        ),
        theme=Theme.parse(raw_settings.get("theme")),
    )
    tasks = tuple(
        Task(
            id=item["id"],
            text=item["text"],
            completed=bool(item.get("completed", False)),
            is_cleared=bool(item.get("is_cleared", False)),
            created_at=_parse_dt(item["created_at"]),
            completed_at=_parse_dt(item.get("completed_at")),
        )
        for item in data.get("tasks") or []
    )
    history = tuple(
        HistoryEntry(
            task_id=item["task_id"],
            text=item["text"],
            created_at=_parse_dt(item["created_at"]),
            completed_at=_parse_dt(item["completed_at"]),
        )
        for item in data.get("history") or []
    )
    raw_streaks = data.get("streaks") or {}
    streaks = StreakCounters(
        daily=int(raw_streaks.get("daily") or 0),
        weekly=int(raw_streaks.get("weekly") or 0),
        monthly=int(raw_streaks.get("monthly") or 0),
    )
    last_reset = data.get("last_reset_date")
    return AppState(
        tasks=tasks,
        history=history,
        streaks=streaks,
        last_reset_date=date.fromisoformat(last_reset) if last_reset else today,
        settings=settings,
    )


class LocalStateStorage:
    """Pre-authentication copy of the app state, kept in one JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self, today: date) -> AppState:
        if not self.path.exists():
            return AppState.initial(today)
        try:
            blob = json.loads(self.path.read_text(encoding="utf-8"))
            return _state_from_dict(blob[STORAGE_KEY], today)
        except (OSError, ValueError, KeyError, TypeError):
            logger.exception("Failed to load local state from %s", self.path)
            return AppState.initial(today)

    def save(self, state: AppState) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = {STORAGE_KEY: _state_to_dict(state)}
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Failed to save local state to %s", self.path)
            return False
        return True

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
