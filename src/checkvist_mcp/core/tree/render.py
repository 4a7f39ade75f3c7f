"""Render task subtrees as indented text."""

import io
from collections.abc import Callable, Iterable

from checkvist_mcp.config import NOTE_TRUNCATE_LENGTH, ULTRA_COMPACT_CONTENT_LENGTH
from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.models.task import RenderMode, RenderPolicy, TaskRecord, TaskStatus

INDENT = "  "

_STATUS_GLYPHS = {
    TaskStatus.OPEN: "[ ]",
    TaskStatus.CLOSED: "[✓]",
    TaskStatus.INVALIDATED: "[✗]",
}


def truncate(text: str, limit: int | None) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    if limit is None or len(text) <= limit:
        return text
    return text[:limit] + "..."


def _write_full(out: io.StringIO, task: TaskRecord, indent: str, policy: RenderPolicy) -> None:
    content = truncate(task.content, policy.content_truncate_length)
    due = f" 📅 {task.due}" if task.due else ""
    priority = f" ⚠️ P{task.priority}" if task.priority else ""
    tags = f" 🏷️ {task.tags_as_text}" if task.tags_as_text else ""
    out.write(f"{indent}{_STATUS_GLYPHS[task.status]} {content}{due}{priority}{tags} [{task.id}]\n")

    if not policy.include_notes or not task.notes:
        return
    shown = task.notes if policy.note_limit is None else task.notes[: policy.note_limit]
    for note in shown:
        out.write(f"{indent}  💬 {truncate(note.comment, NOTE_TRUNCATE_LENGTH)}\n")
    hidden = len(task.notes) - len(shown)
    if hidden > 0:
        noun = "note" if hidden == 1 else "notes"
        out.write(f"{indent}  ... ({hidden} more {noun})\n")


def _write_compact(out: io.StringIO, task: TaskRecord, indent: str, policy: RenderPolicy) -> None:
    out.write(f"{indent}{_STATUS_GLYPHS[task.status]} {task.content} [{task.id}]\n")


def _write_ultra_compact(
    out: io.StringIO, task: TaskRecord, indent: str, policy: RenderPolicy
) -> None:
    limit = policy.content_truncate_length
    if limit is None:
        limit = ULTRA_COMPACT_CONTENT_LENGTH
    out.write(f"{indent}{truncate(task.content, limit)} [{task.id}]\n")


_FORMATTERS: dict[RenderMode, Callable[[io.StringIO, TaskRecord, str, RenderPolicy], None]] = {
    RenderMode.FULL: _write_full,
    RenderMode.COMPACT: _write_compact,
    RenderMode.ULTRA_COMPACT: _write_ultra_compact,
}


def render_tree(
    index: TreeIndex,
    root_ids: Iterable[int],
    *,
    policy: RenderPolicy,
    start_depth: int = 0,
) -> str:
    """Render tasks and their descendants depth-first.

    Args:
        index: Lookup structure of the checklist.
        root_ids: Tasks to start from, rendered in the given order.
        policy: Depth limit, closed-task filter, and line format.
        start_depth: Depth assigned to the roots (affects indentation and
            the depth limit).

    Returns:
        One line per rendered task (plus note and elision lines), or an
        empty string when nothing is rendered.
    """
    out = io.StringIO()
    for root_id in root_ids:
        _render_node(out, index, root_id, start_depth, policy, frozenset())
    return out.getvalue()


def _render_node(
    out: io.StringIO,
    index: TreeIndex,
    task_id: int,
    depth: int,
    policy: RenderPolicy,
    path: frozenset[int],
) -> None:
    task = index.lookup(task_id)
    if task is None or task_id in path:
        return
    # Closed tasks are pruned together with their whole subtree.
    if not policy.include_closed and task.status == TaskStatus.CLOSED:
        return

    indent = INDENT * depth
    _FORMATTERS[policy.mode](out, task, indent, policy)

    if not task.children:
        return
    if depth < policy.max_depth:
        path = path | {task_id}
        for child_id in task.children:
            _render_node(out, index, child_id, depth + 1, policy, path)
    else:
        count = len(task.children)
        noun = "subtask" if count == 1 else "subtasks"
        out.write(f"{indent}  ... ({count} more {noun}, use max_depth={policy.max_depth + 1})\n")
