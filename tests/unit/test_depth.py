"""Tests for checklist depth statistics."""

from checkvist_mcp.core.tree.depth import analyze_depth, round_half_up, subtree_depth
from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.models.task import TaskStatus
from tests.unit.fakes import make_task


def test_analyze_sample_checklist(sample_index: TreeIndex) -> None:
    stats = analyze_depth(sample_index)
    assert stats.total == 8
    assert stats.top_level_count == 3
    assert stats.closed_count == 1
    assert stats.noted_count == 1
    assert stats.max_depth == 2
    assert stats.avg_depth == 1.0


def test_max_and_average_over_roots_with_depths_0_2_4() -> None:
    index = TreeIndex.build(
        [
            make_task(1),
            make_task(2, children=(21,)),
            make_task(21, parent_id=2, children=(211,)),
            make_task(211, parent_id=21),
            make_task(3, children=(31,)),
            make_task(31, parent_id=3, children=(311,)),
            make_task(311, parent_id=31, children=(3111,)),
            make_task(3111, parent_id=311, children=(31111,)),
            make_task(31111, parent_id=3111),
        ]
    )
    stats = analyze_depth(index)
    assert stats.max_depth == 4
    assert stats.avg_depth == 2.0


def test_depth_counts_closed_children() -> None:
    index = TreeIndex.build(
        [
            make_task(1, children=(2,)),
            make_task(2, parent_id=1, status=TaskStatus.CLOSED, children=(3,)),
            make_task(3, parent_id=2),
        ]
    )
    assert subtree_depth(index, 1) == 2


def test_missing_child_counts_as_leaf() -> None:
    index = TreeIndex.build([make_task(1, children=(404,))])
    assert subtree_depth(index, 1) == 1
    assert subtree_depth(index, 404) == 0


def test_cycle_terminates() -> None:
    index = TreeIndex.build(
        [
            make_task(1, children=(2,)),
            make_task(2, parent_id=1, children=(1,)),
        ]
    )
    assert subtree_depth(index, 1) == 2
    assert analyze_depth(index).max_depth == 2


def test_empty_checklist_has_zero_stats() -> None:
    stats = analyze_depth(TreeIndex.build([]))
    assert stats.total == 0
    assert stats.max_depth == 0
    assert stats.avg_depth == 0.0
    assert stats.closed_percent == 0.0


def test_average_depth_rounds_ties_up() -> None:
    index = TreeIndex.build(
        [
            make_task(1),
            make_task(2),
            make_task(3),
            make_task(4, children=(41,)),
            make_task(41, parent_id=4),
        ]
    )
    assert analyze_depth(index).avg_depth == 0.3


def test_round_half_up() -> None:
    assert round_half_up(0.25) == 0.3
    assert round_half_up(0.24) == 0.2
    assert round_half_up(2.0) == 2.0
