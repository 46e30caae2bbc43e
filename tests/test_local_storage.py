from __future__ import annotations

import json
from datetime import date, datetime, timezone

from run_tasks.domain.entities import AppState, HistoryEntry, StreakCounters, Task, UserSettings
from run_tasks.domain.enums import StreakMode, Theme, Timezone
from run_tasks.infra.local_storage import STORAGE_KEY, LocalStateStorage

TODAY = date(2024, 6, 10)


def _state() -> AppState:
    completed_at = datetime(2024, 6, 10, 9, 0, tzinfo=timezone.utc)
    return AppState(
        tasks=(
            Task(
                id="a",
                text="Buy milk",
                completed=True,
                is_cleared=False,
                created_at=datetime(2024, 6, 10, 8, 0, tzinfo=timezone.utc),
                completed_at=completed_at,
            ),
        ),
        history=(
            HistoryEntry(
                task_id="a",
                text="Buy milk",
                created_at=datetime(2024, 6, 10, 8, 0, tzinfo=timezone.utc),
                completed_at=completed_at,
            ),
        ),
        streaks=StreakCounters(daily=1, weekly=1, monthly=1),
        last_reset_date=TODAY,
        settings=UserSettings(streak_mode=StreakMode.DAILY, timezone=Timezone.GMT),
    )


def test_save_and_load(tmp_path) -> None:
    storage = LocalStateStorage(tmp_path / "nested" / "state.json")
    state = _state()

    assert storage.save(state)

    blob = json.loads(storage.path.read_text(encoding="utf-8"))
    assert blob[STORAGE_KEY]["tasks"][0]["created_at"] == "2024-06-10T08:00:00+00:00"
    assert storage.load(date(2024, 6, 11)) == state


def test_missing_file_gives_initial_state(tmp_path) -> None:
    storage = LocalStateStorage(tmp_path / "state.json")

    assert storage.load(TODAY) == AppState.initial(TODAY)


def test_corrupt_file_gives_initial_state(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    assert LocalStateStorage(path).load(TODAY) == AppState.initial(TODAY)


def test_missing_fields_fall_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text(json.dumps({STORAGE_KEY: {"tasks": []}}), encoding="utf-8")

    state = LocalStateStorage(path).load(TODAY)

    assert state.settings == UserSettings()
    assert state.streaks == StreakCounters()
    assert state.last_reset_date == TODAY


def test_clear(tmp_path) -> None:
    storage = LocalStateStorage(tmp_path / "state.json")
    storage.save(_state())

    storage.clear()
    storage.clear()

    assert not storage.path.exists()


def test_unknown_settings_values_fall_back_to_defaults(tmp_path) -> None:
    storage = LocalStateStorage(tmp_path / "state.json")
    storage.save(_state())
    blob = json.loads(storage.path.read_text(encoding="utf-8"))
    blob[STORAGE_KEY]["settings"].update(streak_mode="yearly", theme="neon")
    storage.path.write_text(json.dumps(blob), encoding="utf-8")

    state = storage.load(TODAY)

    assert state.settings.streak_mode == StreakMode.MONTHLY
    assert state.settings.theme == Theme.DARK
    assert state.settings.timezone == Timezone.GMT
    assert [task.id for task in state.tasks] == ["a"]
