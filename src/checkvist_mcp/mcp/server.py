"""MCP server exposing Checkvist checklists and size-bounded task views."""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Literal

from mcp.server.fastmcp import Context, FastMCP

from checkvist_mcp.api import CheckvistApi
from checkvist_mcp.core.reader import fetch_tasks
from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.core.views import (
    ChecklistViews,
    paginated_policy,
    subtree_policy,
    summary_policy,
)
from checkvist_mcp.core.write import client
from checkvist_mcp.protocols import ApiProtocol


def _load_views(
    api: ApiProtocol, checklist_id: int, *, with_notes: bool = False
) -> ChecklistViews:
    tasks = fetch_tasks(api, checklist_id, with_notes=with_notes)
    return ChecklistViews(checklist_id, TreeIndex.build(tasks))


def _json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


# --- Core functions (testable without MCP context) ---


def checkvist_get_tasks_summary(
    api: ApiProtocol,
    *,
    checklist_id: int,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = False,
    ultra_compact: bool = False,
    preview: bool = False,
    with_notes: bool = False,
) -> str:
    """Render the whole checklist as an indented task tree.

    Args:
        checklist_id: The checklist to read.
        max_depth: Levels of subtasks to include (default 99 = all).
        include_closed: Include closed tasks and their subtrees.
        compact: Only status, title and ID per task.
        ultra_compact: Only shortened title and ID per task.
        preview: Top-level tasks only (forces max_depth=1 and compact).
        with_notes: Fetch and show task notes (full mode only).
    """
    views = _load_views(api, checklist_id, with_notes=with_notes and not preview)
    policy = summary_policy(
        max_depth=max_depth,
        include_closed=include_closed,
        compact=compact,
        ultra_compact=ultra_compact,
        preview=preview,
        with_notes=with_notes,
    )
    return views.summary(policy, preview=preview)


def checkvist_get_task_tree(
    api: ApiProtocol,
    *,
    checklist_id: int,
    task_id: int,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = False,
    ultra_compact: bool = False,
    with_notes: bool = False,
) -> str:
    """Render one task and its subtasks.

    Raises:
        TaskNotFoundError: If the task is not in the checklist.
    """
    views = _load_views(api, checklist_id, with_notes=with_notes)
    policy = subtree_policy(
        max_depth=max_depth,
        include_closed=include_closed,
        compact=compact,
        ultra_compact=ultra_compact,
        with_notes=with_notes,
    )
    return views.subtree(task_id, policy)


def checkvist_get_checklist_stats(api: ApiProtocol, *, checklist_id: int) -> str:
    """Describe checklist size and depth, with a reading recommendation."""
    return _load_views(api, checklist_id, with_notes=True).stats()


def checkvist_list_top_level_tasks(api: ApiProtocol, *, checklist_id: int) -> str:
    return _load_views(api, checklist_id).top_level()


def checkvist_get_tasks_paginated(
    api: ApiProtocol,
    *,
    checklist_id: int,
    page: int,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = True,
    ultra_compact: bool = False,
) -> str:
    """Render one top-level task (one page) with its subtasks.

    Raises:
        InvalidPageError: If the page is out of range.
    """
    views = _load_views(api, checklist_id)
    policy = paginated_policy(
        max_depth=max_depth,
        include_closed=include_closed,
        compact=compact,
        ultra_compact=ultra_compact,
    )
    return views.paginated(page, policy)


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    api: ApiProtocol


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Create the API client on startup; login happens on the first call."""
    yield ServerContext(api=CheckvistApi())


mcp_server = FastMCP(
    "checkvist-mcp",
    instructions="""\
Checkvist is a hierarchical checklist service. Checklists can hold thousands of
nested tasks, so read them with the size-bounded text views.

## Reading a checklist

1. Call checkvist_get_checklist_stats_tool first to see how big the checklist is.
2. Small checklists: checkvist_get_tasks_summary_tool with default settings.
3. Medium checklists: checkvist_get_tasks_summary_tool with compact=true,
   or preview=true for top-level tasks only.
4. Large checklists: checkvist_get_tasks_paginated_tool, one top-level task
   per page, or checkvist_list_top_level_tasks_tool followed by
   checkvist_get_task_tree_tool for each interesting task.

## Tips
- Closed tasks (and everything below them) are hidden unless include_closed=true.
- Lines like "... (3 more subtasks, use max_depth=4)" mean the tree was cut off.
- Task IDs are shown in brackets, e.g. [12345].
""",
    lifespan=server_lifespan,
)


def _api(mcp_ctx: Context) -> ApiProtocol:
    return mcp_ctx.request_context.lifespan_context.api  # type: ignore[no-any-return]


# --- MCP Tool Wrappers: views ---


@mcp_server.tool()
async def checkvist_get_tasks_summary_tool(
    ctx: Context,
    checklist_id: int,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = False,
    ultra_compact: bool = False,
    preview: bool = False,
    with_notes: bool = False,
) -> str:
    """Get tasks from a checklist in a readable text format (RECOMMENDED).

    For VERY LARGE checklists use preview=true to see only top-level tasks.
    For large checklists use compact=true to show all tasks with titles and
    IDs only. For small checklists use the defaults to see full details.

    Args:
        checklist_id: The ID of the checklist.
        max_depth: Maximum depth of subtasks to include (default 99 = all).
        include_closed: Include closed tasks (default false).
        compact: Only status, title and ID per task (default false).
        ultra_compact: Only ID and first 40 chars of the title (default false).
        preview: Only top-level tasks; sets max_depth=1 and compact (default false).
        with_notes: Include notes; can be very large (default false).
    """
    return checkvist_get_tasks_summary(
        _api(ctx),
        checklist_id=checklist_id,
        max_depth=max_depth,
        include_closed=include_closed,
        compact=compact,
        ultra_compact=ultra_compact,
        preview=preview,
        with_notes=with_notes,
    )


@mcp_server.tool()
async def checkvist_get_task_tree_tool(
    ctx: Context,
    checklist_id: int,
    task_id: int,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = False,
    ultra_compact: bool = False,
    with_notes: bool = False,
) -> str:
    """Get a specific task and its subtasks in readable text format.

    Use max_depth to limit size if needed.

    Args:
        checklist_id: The ID of the checklist.
        task_id: The ID of the task to start from.
        max_depth: Maximum depth to show (default 3).
        include_closed: Include closed tasks (default false).
        compact: Shorter output (default false).
        ultra_compact: Only ID and first 40 chars of the title (default false).
        with_notes: Include up to 2 notes per task; can be large (default false).
    """
    return checkvist_get_task_tree(
        _api(ctx),
        checklist_id=checklist_id,
        task_id=task_id,
        max_depth=max_depth,
        include_closed=include_closed,
        compact=compact,
        ultra_compact=ultra_compact,
        with_notes=with_notes,
    )


@mcp_server.tool()
async def checkvist_get_checklist_stats_tool(ctx: Context, checklist_id: int) -> str:
    """Get statistics about a checklist: task counts, depth, and a reading strategy.

    Use this first to understand checklist size.
    """
    return checkvist_get_checklist_stats(_api(ctx), checklist_id=checklist_id)


@mcp_server.tool()
async def checkvist_list_top_level_tasks_tool(ctx: Context, checklist_id: int) -> str:
    """Get ONLY the IDs of the top-level tasks (no subtasks).

    Use this for an overview, then read each one with checkvist_get_task_tree_tool.
    """
    return checkvist_list_top_level_tasks(_api(ctx), checklist_id=checklist_id)


@mcp_server.tool()
async def checkvist_get_tasks_paginated_tool(
    ctx: Context,
    checklist_id: int,
    page: int,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = True,
    ultra_compact: bool = False,
) -> str:
    """Read a checklist in chunks, one top-level task with its subtasks per page.

    Call repeatedly with increasing page numbers to read the entire checklist.

    Args:
        checklist_id: The ID of the checklist.
        page: Page number (1-based).
        max_depth: Subtask depth to include; 2-3 for big branches, 99 for all (default 2).
        include_closed: Include closed tasks (default false).
        compact: Compact mode (default true).
        ultra_compact: Only ID and first 40 chars of the title (default false).
    """
    return checkvist_get_tasks_paginated(
        _api(ctx),
        checklist_id=checklist_id,
        page=page,
        max_depth=max_depth,
        include_closed=include_closed,
        compact=compact,
        ultra_compact=ultra_compact,
    )


# --- MCP Tool Wrappers: checklists ---


@mcp_server.tool()
async def checkvist_list_checklists_tool(
    ctx: Context, archived: bool = False, skip_stats: bool = False
) -> str:
    """Get all checklists of the authenticated user.

    Args:
        archived: Return archived lists instead.
        skip_stats: Faster, but without task statistics.
    """
    return _json(client.list_checklists(_api(ctx), archived=archived, skip_stats=skip_stats))


@mcp_server.tool()
async def checkvist_get_checklist_tool(ctx: Context, checklist_id: int) -> str:
    """Get information about a specific checklist by ID."""
    return _json(client.get_checklist(_api(ctx), checklist_id=checklist_id))


@mcp_server.tool()
async def checkvist_create_checklist_tool(
    ctx: Context, name: str, public: bool | None = None, tags: str | None = None
) -> str:
    """Create a new checklist.

    Args:
        name: Checklist name.
        public: Make the checklist public.
        tags: Comma-separated list of tags.
    """
    return _json(client.create_checklist(_api(ctx), name=name, public=public, tags=tags))


@mcp_server.tool()
async def checkvist_update_checklist_tool(
    ctx: Context, checklist_id: int, name: str | None = None, public: bool | None = None
) -> str:
    """Rename a checklist or change its visibility."""
    return _json(
        client.update_checklist(_api(ctx), checklist_id=checklist_id, name=name, public=public)
    )


@mcp_server.tool()
async def checkvist_delete_checklist_tool(ctx: Context, checklist_id: int) -> str:
    """Delete a checklist (marks it for deletion)."""
    return _json(client.delete_checklist(_api(ctx), checklist_id=checklist_id))


# --- MCP Tool Wrappers: tasks ---


@mcp_server.tool()
async def checkvist_get_tasks_tool(
    ctx: Context, checklist_id: int, with_notes: bool = False
) -> str:
    """Get all tasks of a checklist as raw JSON.

    Prefer checkvist_get_tasks_summary_tool; use this only when the complete
    JSON structure is needed.
    """
    return _json(client.get_tasks(_api(ctx), checklist_id=checklist_id, with_notes=with_notes))


@mcp_server.tool()
async def checkvist_get_task_tool(
    ctx: Context, checklist_id: int, task_id: int, with_notes: bool = False
) -> str:
    """Get a specific task by ID, including its parent hierarchy (JSON)."""
    return _json(
        client.get_task(
            _api(ctx), checklist_id=checklist_id, task_id=task_id, with_notes=with_notes
        )
    )


@mcp_server.tool()
async def checkvist_create_task_tool(
    ctx: Context,
    checklist_id: int,
    content: str,
    parent_id: int | None = None,
    tags: str | None = None,
    due_date: str | None = None,
    position: int | None = None,
    priority: int | None = None,
    assignee_ids: list[int] | None = None,
) -> str:
    """Create a new task in a checklist.

    Args:
        checklist_id: The ID of the checklist.
        content: Task text.
        parent_id: Parent task ID (top-level when omitted).
        tags: Comma-separated list of tags.
        due_date: Due date in Checkvist smart syntax.
        position: 1-based position among siblings.
        priority: Priority 0-9.
        assignee_ids: User IDs to assign the task to.
    """
    return _json(
        client.create_task(
            _api(ctx),
            checklist_id=checklist_id,
            content=content,
            parent_id=parent_id,
            tags=tags,
            due_date=due_date,
            position=position,
            priority=priority,
            assignee_ids=assignee_ids,
        )
    )


@mcp_server.tool()
async def checkvist_update_task_tool(
    ctx: Context,
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
) -> str:
    """Update an existing task. Only the given fields change.

    Args:
        parse: Parse smart syntax for ^due and #tags in content.
    """
    return _json(
        client.update_task(
            _api(ctx),
            checklist_id=checklist_id,
            task_id=task_id,
            content=content,
            parent_id=parent_id,
            tags=tags,
            due_date=due_date,
            position=position,
            priority=priority,
            assignee_ids=assignee_ids,
            parse=parse,
        )
    )


TaskAction = Literal["close", "reopen", "invalidate"]

_TASK_ACTIONS = {
    "close": client.close_task,
    "reopen": client.reopen_task,
    "invalidate": client.invalidate_task,
}


@mcp_server.tool()
async def checkvist_set_task_status_tool(
    ctx: Context, checklist_id: int, task_id: int, action: TaskAction
) -> str:
    """Close, reopen or invalidate a task.

    Invalidated tasks are struck out but, unlike closed ones, stay visible
    in the text views.
    """
    return _json(_TASK_ACTIONS[action](_api(ctx), checklist_id=checklist_id, task_id=task_id))


@mcp_server.tool()
async def checkvist_delete_task_tool(ctx: Context, checklist_id: int, task_id: int) -> str:
    """Delete a task and its children."""
    return _json(client.delete_task(_api(ctx), checklist_id=checklist_id, task_id=task_id))


@mcp_server.tool()
async def checkvist_set_repeating_task_tool(
    ctx: Context,
    checklist_id: int,
    task_id: int,
    period: str,
    period_number: int | None = None,
    since: str | None = None,
    until: str | None = None,
) -> str:
    """Configure a task to repeat on a schedule.

    Args:
        period: Repeat period (e.g. "daily", "weekly").
        period_number: Repeat every N periods.
        since: Start date.
        until: End date.
    """
    return _json(
        client.set_repeating_task(
            _api(ctx),
            checklist_id=checklist_id,
            task_id=task_id,
            period=period,
            period_number=period_number,
            since=since,
            until=until,
        )
    )


@mcp_server.tool()
async def checkvist_import_tasks_tool(
    ctx: Context,
    checklist_id: int,
    import_content: str,
    parent_id: int | None = None,
    parse_tasks: bool = False,
) -> str:
    """Import multiple tasks at once from indented text.

    Args:
        import_content: One task per line, nesting by indentation.
        parent_id: Import below this task.
        parse_tasks: Parse smart syntax (^due, #tags, !priority).
    """
    return _json(
        client.import_tasks(
            _api(ctx),
            checklist_id=checklist_id,
            import_content=import_content,
            parent_id=parent_id,
            parse_tasks=parse_tasks,
        )
    )


# --- MCP Tool Wrappers: notes ---


@mcp_server.tool()
async def checkvist_get_notes_tool(ctx: Context, checklist_id: int, task_id: int) -> str:
    """Get all notes (comments) of a task."""
    return _json(client.get_notes(_api(ctx), checklist_id=checklist_id, task_id=task_id))


@mcp_server.tool()
async def checkvist_create_note_tool(
    ctx: Context, checklist_id: int, task_id: int, comment: str
) -> str:
    """Add a note (comment) to a task."""
    return _json(
        client.create_note(
            _api(ctx), checklist_id=checklist_id, task_id=task_id, comment=comment
        )
    )


@mcp_server.tool()
async def checkvist_update_note_tool(
    ctx: Context, checklist_id: int, task_id: int, note_id: int, comment: str
) -> str:
    """Replace the text of an existing note."""
    return _json(
        client.update_note(
            _api(ctx),
            checklist_id=checklist_id,
            task_id=task_id,
            note_id=note_id,
            comment=comment,
        )
    )


@mcp_server.tool()
async def checkvist_delete_note_tool(
    ctx: Context, checklist_id: int, task_id: int, note_id: int
) -> str:
    """Delete a note from a task."""
    return _json(
        client.delete_note(
            _api(ctx), checklist_id=checklist_id, task_id=task_id, note_id=note_id
        )
    )


@mcp_server.tool()
async def checkvist_get_current_user_tool(ctx: Context) -> str:
    """Get the profile of the authenticated user."""
    return _json(client.get_current_user(_api(ctx)))


def run_mcp_server(*, verbose: bool = False) -> None:
    """Run the MCP server with stdio transport."""
    from checkvist_mcp.logging_config import configure_logging

    configure_logging(verbose=verbose)
    mcp_server.run(transport="stdio")
