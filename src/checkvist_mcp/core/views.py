"""Text views over a checklist: summary, subtree, stats, listing, pages."""

from checkvist_mcp.config import (
    LARGE_CHECKLIST_SUGGESTED_DEPTH,
    MEDIUM_CHECKLIST_LIMIT,
    PAGE_SIZE,
    PAGINATED_MAX_DEPTH,
    PREVIEW_MAX_DEPTH,
    SMALL_CHECKLIST_LIMIT,
    SUBTREE_MAX_DEPTH,
    SUBTREE_NOTE_LIMIT,
    SUMMARY_MAX_DEPTH,
    UNLIMITED_DEPTH,
)
from checkvist_mcp.core.tree.depth import analyze_depth, round_half_up
from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.core.tree.pagination import paginate
from checkvist_mcp.core.tree.render import render_tree
from checkvist_mcp.errors import TaskNotFoundError
from checkvist_mcp.models.task import RenderMode, RenderPolicy


def _select_mode(*, compact: bool, ultra_compact: bool) -> RenderMode:
    if ultra_compact:
        return RenderMode.ULTRA_COMPACT
    if compact:
        return RenderMode.COMPACT
    return RenderMode.FULL


def summary_policy(
    *,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = False,
    ultra_compact: bool = False,
    preview: bool = False,
    with_notes: bool = False,
) -> RenderPolicy:
    """Build the policy for the whole-checklist summary.

    ``preview`` forces a depth of 1 and compact lines regardless of the
    other flags.
    """
    if preview:
        return RenderPolicy(
            max_depth=PREVIEW_MAX_DEPTH,
            include_closed=include_closed,
            mode=RenderMode.COMPACT,
        )
    return RenderPolicy(
        max_depth=SUMMARY_MAX_DEPTH if max_depth is None else max_depth,
        include_closed=include_closed,
        mode=_select_mode(compact=compact, ultra_compact=ultra_compact),
        include_notes=with_notes,
    )


def subtree_policy(
    *,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = False,
    ultra_compact: bool = False,
    with_notes: bool = False,
) -> RenderPolicy:
    return RenderPolicy(
        max_depth=SUBTREE_MAX_DEPTH if max_depth is None else max_depth,
        include_closed=include_closed,
        mode=_select_mode(compact=compact, ultra_compact=ultra_compact),
        include_notes=with_notes,
        note_limit=SUBTREE_NOTE_LIMIT,
    )


def paginated_policy(
    *,
    max_depth: int | None = None,
    include_closed: bool = False,
    compact: bool = True,
    ultra_compact: bool = False,
) -> RenderPolicy:
    # Notes are never shown on pages; they make single pages too large.
    return RenderPolicy(
        max_depth=PAGINATED_MAX_DEPTH if max_depth is None else max_depth,
        include_closed=include_closed,
        mode=_select_mode(compact=compact, ultra_compact=ultra_compact),
    )


def _levels_text(max_depth: int) -> str:
    return "all levels" if max_depth >= UNLIMITED_DEPTH else f"up to {max_depth} levels"


def _closed_text(include_closed: bool) -> str:
    return "including closed tasks" if include_closed else "excluding closed tasks"


class ChecklistViews:
    """Builds the text views of one fetched checklist.

    All methods are pure functions of the index they were given; fetching
    the tasks is the caller's job.
    """

    def __init__(self, checklist_id: int, index: TreeIndex) -> None:
        self.checklist_id = checklist_id
        self.index = index

    def summary(self, policy: RenderPolicy, *, preview: bool = False) -> str:
        """Render every top-level task with its subtree."""
        index = self.index
        out = (
            f"📋 Checklist Summary ({len(index.top_level_ids)} top-level tasks, "
            f"{index.total} total)\n"
        )
        if preview:
            out += "⚡ PREVIEW MODE: Showing only top-level tasks\n"
        else:
            out += f"{policy.mode.description}\n"
        out += (
            f"Showing {_levels_text(policy.max_depth)}, "
            f"{_closed_text(policy.include_closed)}\n\n"
        )

        out += render_tree(index, index.top_level_ids, policy=policy)

        if preview:
            out += (
                "\n💡 TIP: Use checkvist_get_task_tree with a specific task ID "
                "to explore subtasks\n"
            )
            out += "     Or use max_depth=2 to see one more level\n"
        elif policy.mode is not RenderMode.FULL:
            out += "\n💡 Use checkvist_get_task_tree with a specific task ID to see full details\n"
        return out

    def subtree(self, task_id: int, policy: RenderPolicy) -> str:
        """Render a single task and its descendants.

        Raises:
            TaskNotFoundError: If the task is not in the checklist.
        """
        root = self.index.lookup(task_id)
        if root is None:
            raise TaskNotFoundError(self.checklist_id, task_id)

        out = f"🌳 Task: {root.content}\n"
        out += (
            f"Depth: {policy.max_depth}, {policy.mode.label} mode, "
            f"{_closed_text(policy.include_closed)}\n\n"
        )
        out += render_tree(self.index, [task_id], policy=policy)
        return out

    def stats(self) -> str:
        """Describe the checklist's size and shape and suggest how to read it."""
        stats = analyze_depth(self.index)

        out = "📊 Checklist Statistics\n"
        out += f"Checklist ID: {self.checklist_id}\n\n"
        out += f"📝 Total tasks: {stats.total}\n"
        out += f"📌 Top-level tasks: {stats.top_level_count}\n"
        closed_percent = round_half_up(stats.closed_percent)
        out += f"✓ Closed tasks: {stats.closed_count} ({closed_percent:.1f}%)\n"
        out += f"💬 Tasks with notes: {stats.noted_count}\n\n"
        out += "📏 Depth statistics:\n"
        out += f"   Maximum depth: {stats.max_depth} levels\n"
        out += f"   Average depth: {stats.avg_depth:.1f} levels\n\n"
        out += "💡 Recommendation:\n"
        if stats.total < SMALL_CHECKLIST_LIMIT:
            out += "   Small checklist - use checkvist_get_tasks_summary with default settings\n"
        elif stats.total < MEDIUM_CHECKLIST_LIMIT:
            out += "   Medium checklist - use checkvist_get_tasks_summary with compact=true\n"
        else:
            out += (
                "   Large checklist - use checkvist_get_tasks_paginated with "
                f"max_depth={LARGE_CHECKLIST_SUGGESTED_DEPTH}\n"
            )
            out += (
                f"   This will show {stats.top_level_count} pages "
                f"({PAGE_SIZE} top-level task per page)\n"
            )
        return out

    def top_level(self) -> str:
        """List the ids of all top-level tasks."""
        ids = self.index.top_level_ids
        out = f"Top-level task IDs ({len(ids)} total):\n"
        out += ", ".join(str(task_id) for task_id in ids) + "\n\n"
        out += (
            f"Use checkvist_get_task_tree(checklist_id: {self.checklist_id}, task_id: X) "
            "to read each one.\n"
        )
        return out

    def paginated(self, page: int, policy: RenderPolicy) -> str:
        """Render one page (one top-level task per page).

        Raises:
            InvalidPageError: If the page is out of range.
        """
        result = paginate(self.index, page_size=PAGE_SIZE, page_number=page, policy=policy)

        out = f"📄 Page {result.page_number}/{result.total_pages}\n"
        out += f"Total: {len(self.index.top_level_ids)} top-level, {self.index.total} overall\n"
        out += f"Mode: {policy.mode.label}, Depth: {policy.max_depth}\n\n"
        out += result.text
        return out
