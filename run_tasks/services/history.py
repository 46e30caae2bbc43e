from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from run_tasks.domain.entities import DEFAULT_HISTORY_LIMIT, HistoryEntry, Task


@dataclass(frozen=True)
class SweepResult:
    to_archive: tuple[Task, ...]
    remaining: tuple[Task, ...]


def history_entry_from_task(task: Task) -> HistoryEntry:
    if not task.completed or task.completed_at is None:
        raise ValueError(f"Task {task.id} is not completed")
    return HistoryEntry(
        task_id=task.id,
        text=task.text,
        created_at=task.created_at,
        completed_at=task.completed_at,
    )


def append_completion(
    entry: HistoryEntry,
    history: Iterable[HistoryEntry],
    cap: int = DEFAULT_HISTORY_LIMIT,
) -> tuple[HistoryEntry, ...]:
    """Newest first; anything past ``cap`` drops off the end."""
    return (entry, *history)[: max(cap, 0)]


def sweep_completed(tasks: Iterable[Task]) -> SweepResult:
    """Split tasks for a clear-completed pass.

    Completed tasks come back in ``to_archive`` already marked cleared; they
    stay in the store for auditing. Tasks cleared by an earlier sweep are in
    neither group.
    """
    to_archive: list[Task] = []
    remaining: list[Task] = []
    for task in tasks:
        if task.is_cleared:
            continue
        if task.completed:
            to_archive.append(replace(task, is_cleared=True))
        else:
            remaining.append(task)
    return SweepResult(to_archive=tuple(to_archive), remaining=tuple(remaining))
