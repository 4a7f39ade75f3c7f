"""Structural statistics over a task tree."""

from decimal import ROUND_HALF_UP, Decimal

from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.models.task import Stats, TaskStatus


def round_half_up(value: float) -> float:
    """Round to one decimal place, with ties going away from zero (0.25 -> 0.3)."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def subtree_depth(index: TreeIndex, task_id: int) -> int:
    """Return how many levels of descendants lie below a task.

    A task without children has depth 0. Closed and invalidated children
    count like open ones. A child id that does not resolve counts as a leaf,
    and an id already on the current path counts as 0 so cyclic data cannot
    recurse forever.
    """
    return _depth(index, task_id, frozenset())


def _depth(index: TreeIndex, task_id: int, path: frozenset[int]) -> int:
    if task_id in path:
        return 0
    task = index.lookup(task_id)
    if task is None or not task.children:
        return 0
    path = path | {task_id}
    return 1 + max(_depth(index, child_id, path) for child_id in task.children)


def analyze_depth(index: TreeIndex) -> Stats:
    """Compute counts and depth statistics for the whole checklist."""
    records = list(index.records())
    depths = [subtree_depth(index, task_id) for task_id in index.top_level_ids]

    avg_depth = round_half_up(sum(depths) / len(depths)) if depths else 0.0

    return Stats(
        total=len(records),
        top_level_count=len(index.top_level_ids),
        closed_count=sum(1 for t in records if t.status == TaskStatus.CLOSED),
        noted_count=sum(1 for t in records if t.notes),
        max_depth=max(depths, default=0),
        avg_depth=avg_depth,
    )
