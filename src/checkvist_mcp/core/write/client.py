"""Checklist, task and note operations forwarded to the Checkvist API."""

from typing import Any

from loguru import logger

from checkvist_mcp.protocols import ApiProtocol


def _flags(**flags: bool | None) -> dict[str, str] | None:
    """Turn truthy boolean flags into ``name=true`` query parameters."""
    params = {name: "true" for name, value in flags.items() if value}
    return params or None


def _task_fields(
    *,
    content: str | None = None,
    parent_id: int | None = None,
    tags: str | None = None,
    due_date: str | None = None,
    position: int | None = None,
    priority: int | None = None,
    assignee_ids: list[int] | None = None,
) -> dict[str, Any]:
    task: dict[str, Any] = {}
    if content:
        task["content"] = content
    if parent_id:
        task["parent_id"] = parent_id
    if tags:
        task["tags"] = tags
    if due_date:
        task["due_date"] = due_date
    if position:
        task["position"] = position
    if priority is not None:
        task["priority"] = priority
    if assignee_ids:
        task["assignee_ids"] = assignee_ids
    return task


# --- Checklists ---


def list_checklists(
    api: ApiProtocol, *, archived: bool = False, skip_stats: bool = False
) -> Any:
    """List the user's checklists (archived ones when ``archived``)."""
    return api.call("/checklists.json", params=_flags(archived=archived, skip_stats=skip_stats))


def get_checklist(api: ApiProtocol, *, checklist_id: int) -> Any:
    return api.call(f"/checklists/{checklist_id}.json")


def create_checklist(
    api: ApiProtocol,
    *,
    name: str,
    public: bool | None = None,
    tags: str | None = None,
) -> Any:
    checklist: dict[str, Any] = {"name": name}
    if public is not None:
        checklist["public"] = public
    if tags:
        checklist["tags"] = tags
    return api.call("/checklists.json", method="POST", body={"checklist": checklist})


def update_checklist(
    api: ApiProtocol,
    *,
    checklist_id: int,
    name: str | None = None,
    public: bool | None = None,
) -> Any:
    checklist: dict[str, Any] = {}
    if name:
        checklist["name"] = name
    if public is not None:
        checklist["public"] = public
    return api.call(
        f"/checklists/{checklist_id}.json", method="PUT", body={"checklist": checklist}
    )


def delete_checklist(api: ApiProtocol, *, checklist_id: int) -> Any:
    logger.info("Deleting checklist {}", checklist_id)
    return api.call(f"/checklists/{checklist_id}.json", method="DELETE")


# --- Tasks ---


def get_tasks(api: ApiProtocol, *, checklist_id: int, with_notes: bool = False) -> Any:
    """Return the raw task list of a checklist."""
    return api.call(
        f"/checklists/{checklist_id}/tasks.json", params=_flags(with_notes=with_notes)
    )


def get_task(
    api: ApiProtocol, *, checklist_id: int, task_id: int, with_notes: bool = False
) -> Any:
    """Return a task together with its parent hierarchy."""
    return api.call(
        f"/checklists/{checklist_id}/tasks/{task_id}.json",
        params=_flags(with_notes=with_notes),
    )


def create_task(
    api: ApiProtocol,
    *,
    checklist_id: int,
    content: str,
    parent_id: int | None = None,
    tags: str | None = None,
    due_date: str | None = None,
    position: int | None = None,
    priority: int | None = None,
    assignee_ids: list[int] | None = None,
) -> Any:
    task = {
        "content": content,
        **_task_fields(
            parent_id=parent_id,
            tags=tags,
            due_date=due_date,
            position=position,
            priority=priority,
            assignee_ids=assignee_ids,
        ),
    }
    return api.call(f"/checklists/{checklist_id}/tasks.json", method="POST", body={"task": task})


def update_task(
    api: ApiProtocol,
    *,
    checklist_id: int,
    task_id: int,
    content: str | None = None,
    parent_id: int | None = None,
    tags: str | None = None,
    due_date: str | None = None,
    position: int | None = None,
    priority: int | None = None,
    assignee_ids: list[int] | None = None,
    parse: bool = False,
    with_notes: bool = False,
) -> Any:
    """Update task fields; only the fields given are sent.

    Args:
        parse: Let Checkvist parse smart syntax (^due, #tags) in content.
        with_notes: Include notes in the returned task.
    """
    task = _task_fields(
        content=content,
        parent_id=parent_id,
        tags=tags,
        due_date=due_date,
        position=position,
        priority=priority,
        assignee_ids=assignee_ids,
    )
    return api.call(
        f"/checklists/{checklist_id}/tasks/{task_id}.json",
        method="PUT",
        params=_flags(parse=parse, with_notes=with_notes),
        body={"task": task},
    )


def _task_action(api: ApiProtocol, checklist_id: int, task_id: int, action: str) -> Any:
    return api.call(f"/checklists/{checklist_id}/tasks/{task_id}/{action}.json", method="POST")


def close_task(api: ApiProtocol, *, checklist_id: int, task_id: int) -> Any:
    return _task_action(api, checklist_id, task_id, "close")


def reopen_task(api: ApiProtocol, *, checklist_id: int, task_id: int) -> Any:
    return _task_action(api, checklist_id, task_id, "reopen")


def invalidate_task(api: ApiProtocol, *, checklist_id: int, task_id: int) -> Any:
    return _task_action(api, checklist_id, task_id, "invalidate")


def delete_task(api: ApiProtocol, *, checklist_id: int, task_id: int) -> Any:
    logger.info("Deleting task {} from checklist {}", task_id, checklist_id)
    return api.call(f"/checklists/{checklist_id}/tasks/{task_id}.json", method="DELETE")


def set_repeating_task(
    api: ApiProtocol,
    *,
    checklist_id: int,
    task_id: int,
    period: str,
    period_number: int | None = None,
    since: str | None = None,
    until: str | None = None,
) -> Any:
    repeat: dict[str, Any] = {"period": period}
    if period_number:
        repeat["period_number"] = period_number
    if since:
        repeat["since"] = since
    if until:
        repeat["until"] = until
    return api.call(
        f"/checklists/{checklist_id}/tasks/{task_id}/repeat.json", method="POST", body=repeat
    )


def import_tasks(
    api: ApiProtocol,
    *,
    checklist_id: int,
    import_content: str,
    parent_id: int | None = None,
    parse_tasks: bool = False,
) -> Any:
    """Import indented text as tasks, optionally below a parent task."""
    data: dict[str, Any] = {"import_content": import_content}
    if parent_id:
        data["parent_id"] = parent_id
    if parse_tasks:
        data["parse_tasks"] = "true"
    return api.call(f"/checklists/{checklist_id}/import.json", method="POST", body=data)


# --- Notes ---


def _notes_path(checklist_id: int, task_id: int, note_id: int | None = None) -> str:
    path = f"/checklists/{checklist_id}/tasks/{task_id}/comments"
    if note_id is not None:
        path += f"/{note_id}"
    return path + ".json"


def get_notes(api: ApiProtocol, *, checklist_id: int, task_id: int) -> Any:
    return api.call(_notes_path(checklist_id, task_id))


def create_note(api: ApiProtocol, *, checklist_id: int, task_id: int, comment: str) -> Any:
    return api.call(
        _notes_path(checklist_id, task_id),
        method="POST",
        body={"comment": {"comment": comment}},
    )


def update_note(
    api: ApiProtocol, *, checklist_id: int, task_id: int, note_id: int, comment: str
) -> Any:
    return api.call(
        _notes_path(checklist_id, task_id, note_id),
        method="PUT",
        body={"comment": {"comment": comment}},
    )


def delete_note(api: ApiProtocol, *, checklist_id: int, task_id: int, note_id: int) -> Any:
    return api.call(_notes_path(checklist_id, task_id, note_id), method="DELETE")


# --- Account ---


def get_current_user(api: ApiProtocol) -> Any:
    return api.call("/auth/curr_user.json")
