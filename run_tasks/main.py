from __future__ import annotations

import logging
import sys
from pathlib import Path

from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from run_tasks.config import PROJECT_ROOT, SETTINGS, Settings
from run_tasks.infra.db import build_engine, build_session_factory, init_db
from run_tasks.infra.local_storage import LocalStateStorage
from run_tasks.infra.logging import setup_logging
from run_tasks.infra.repository import SqlTaskStore, UnconfiguredTaskStore
from run_tasks.services.task_service import TaskService

logger = logging.getLogger(__name__)


def create_store(settings: Settings = SETTINGS):
    if not settings.store_configured:
        return UnconfiguredTaskStore("DATABASE_URL is not set")
    try:
        engine = build_engine(settings.database_url)
        init_db(engine)
    except ArgumentError as exc:
        return UnconfiguredTaskStore(f"DATABASE_URL is invalid: {exc}")
    except SQLAlchemyError as exc:
        return UnconfiguredTaskStore(f"Database unreachable: {exc}")
    return SqlTaskStore(build_session_factory(engine))


def create_service(settings: Settings = SETTINGS, user_id: str | None = None) -> TaskService:
    storage_path = Path(settings.local_storage_path)
    if not storage_path.is_absolute():
        storage_path = PROJECT_ROOT / storage_path
    service = TaskService(create_store(settings), local_storage=LocalStateStorage(storage_path))
    service.reset_daily_on_rollover()
    if user_id:
        result = service.sign_in(user_id)
        if not result.ok:
            logger.error("Could not load data for %s: %s", user_id, result.error)
    return service


def main() -> None:
    setup_logging()
    user_id = sys.argv[1] if len(sys.argv) > 1 else None
    service = create_service(user_id=user_id)
    state = service.state

    print(f"Streak ({state.settings.streak_mode.value}): {service.displayed_streak}")
    for task in state.tasks:
        mark = "x" if task.completed else " "
        print(f"[{mark}] {task.text}")
    if state.settings.show_history and state.history:
        print("History:")
        for entry in state.history:
            print(f"  {entry.completed_at:%Y-%m-%d %H:%M} {entry.text}")


if __name__ == "__main__":
    main()
