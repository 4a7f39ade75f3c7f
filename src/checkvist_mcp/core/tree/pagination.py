"""Split a checklist into pages of top-level tasks."""

import math

from checkvist_mcp.config import UNLIMITED_DEPTH
from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.core.tree.render import render_tree
from checkvist_mcp.errors import InvalidPageError
from checkvist_mcp.models.task import PageResult, RenderPolicy


def count_pages(index: TreeIndex, page_size: int) -> int:
    return math.ceil(len(index.top_level_ids) / page_size)


def paginate(
    index: TreeIndex,
    *,
    page_size: int,
    page_number: int,
    policy: RenderPolicy,
) -> PageResult:
    """Render one page of top-level tasks with their subtrees.

    Args:
        index: Lookup structure of the checklist.
        page_size: Top-level tasks per page.
        page_number: 1-based page to render.
        policy: Render policy applied to every task on the page.

    Raises:
        InvalidPageError: If page_number is outside 1..total_pages.
    """
    if page_size < 1:
        msg = f"page_size must be positive, got {page_size}"
        raise ValueError(msg)

    total_pages = count_pages(index, page_size)
    if page_number < 1 or page_number > total_pages:
        raise InvalidPageError(page_number, total_pages)

    start = (page_number - 1) * page_size
    page_ids = index.top_level_ids[start : start + page_size]

    entries = [render_tree(index, [task_id], policy=policy) for task_id in page_ids]
    text = "".join(f"{entry}\n" for entry in entries)

    depth_limited = policy.max_depth < UNLIMITED_DEPTH
    if page_number < total_pages:
        text += f"\n📌 More pages available. Use page={page_number + 1} to continue reading.\n"
        if depth_limited:
            text += "   (If tasks are cut off, you can increase max_depth to see more subtasks)\n"
    else:
        text += (
            f"\n✅ End of checklist. You have read all {len(index.top_level_ids)} "
            "top-level tasks.\n"
        )
        if depth_limited:
            text += (
                f"   (Some deep subtasks may have been hidden due to "
                f"max_depth={policy.max_depth})\n"
            )

    return PageResult(text=text, page_number=page_number, total_pages=total_pages)
