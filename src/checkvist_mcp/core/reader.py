"""Parse Checkvist task JSON into domain models."""

from typing import Any

from loguru import logger

from checkvist_mcp.models.task import Note, TaskRecord, TaskStatus
from checkvist_mcp.protocols import ApiProtocol


def parse_task(raw: dict[str, Any]) -> TaskRecord:
    """Parse one task dict from the tasks endpoint into a TaskRecord.

    Args:
        raw: Task object as returned by ``/checklists/{id}/tasks.json``.

    Returns:
        The normalized TaskRecord. Child ids come from the ``tasks`` field.
    """
    notes = tuple(Note(comment=n.get("comment") or "") for n in raw.get("notes") or [])
    priority = raw.get("priority")
    return TaskRecord(
        id=int(raw["id"]),
        parent_id=int(raw.get("parent_id") or 0),
        content=raw.get("content") or "",
        status=TaskStatus(int(raw.get("status") or 0)),
        children=tuple(int(c) for c in raw.get("tasks") or []),
        due=raw.get("due") or None,
        priority=int(priority) if priority is not None else None,
        tags_as_text=raw.get("tags_as_text") or None,
        notes=notes,
    )


def fetch_tasks(
    api: ApiProtocol,
    checklist_id: int,
    *,
    with_notes: bool = False,
) -> list[TaskRecord]:
    """Fetch all tasks of a checklist.

    RemoteError from the API client propagates unchanged.
    """
    params = {"with_notes": "true"} if with_notes else None
    raw_tasks = api.call(f"/checklists/{checklist_id}/tasks.json", params=params)
    tasks = [parse_task(raw) for raw in raw_tasks]
    logger.debug("Fetched {} tasks from checklist {}", len(tasks), checklist_id)
    return tasks
