"""Tests for paging through top-level tasks."""

import re

import pytest

from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.core.tree.pagination import count_pages, paginate
from checkvist_mcp.core.tree.render import render_tree
from checkvist_mcp.errors import InvalidPageError
from checkvist_mcp.models.task import RenderMode, RenderPolicy
from tests.unit.fakes import make_task

ID_AT_END = re.compile(r"\[(\d+)\]$")


def _ids(text: str) -> set[int]:
    return {int(m.group(1)) for line in text.splitlines() if (m := ID_AT_END.search(line))}


def test_first_page_renders_one_top_level_task_with_footer(sample_index: TreeIndex) -> None:
    policy = RenderPolicy(max_depth=2, mode=RenderMode.COMPACT)
    result = paginate(sample_index, page_size=1, page_number=1, policy=policy)
    assert result.page_number == 1
    assert result.total_pages == 3
    assert result.text == (
        "[ ] Plan release [1]\n"
        "  [ ] Write changelog [11]\n"
        "    [ ] Collect merged PRs [111]\n"
        "\n"
        "\n"
        "📌 More pages available. Use page=2 to continue reading.\n"
        "   (If tasks are cut off, you can increase max_depth to see more subtasks)\n"
    )


def test_last_page_reports_end_of_checklist(sample_index: TreeIndex) -> None:
    policy = RenderPolicy(max_depth=2, mode=RenderMode.COMPACT)
    result = paginate(sample_index, page_size=1, page_number=3, policy=policy)
    assert result.is_last
    assert "✅ End of checklist. You have read all 3 top-level tasks." in result.text
    assert "hidden due to max_depth=2" in result.text


def test_unlimited_depth_omits_depth_hints(sample_index: TreeIndex) -> None:
    policy = RenderPolicy(max_depth=99, mode=RenderMode.COMPACT)
    first = paginate(sample_index, page_size=1, page_number=1, policy=policy)
    last = paginate(sample_index, page_size=1, page_number=3, policy=policy)
    assert "increase max_depth" not in first.text
    assert "max_depth=" not in last.text


def test_entries_are_separated_by_blank_line_and_footer_by_two(sample_index: TreeIndex) -> None:
    policy = RenderPolicy(max_depth=0, mode=RenderMode.ULTRA_COMPACT)
    result = paginate(sample_index, page_size=2, page_number=2, policy=policy)
    assert result.total_pages == 2
    assert result.text.startswith("Someday [3]\n\n\n✅ End of checklist.")

    first = paginate(sample_index, page_size=2, page_number=1, policy=policy)
    assert first.text.startswith(
        "Plan release [1]\n"
        "  ... (2 more subtasks, use max_depth=1)\n"
        "\n"
        "Groceries [2]\n"
    )


@pytest.mark.parametrize("page_number", [0, 4, -1])
def test_out_of_range_page_raises(sample_index: TreeIndex, page_number: int) -> None:
    policy = RenderPolicy(max_depth=2)
    with pytest.raises(InvalidPageError, match="Valid pages: 1-3"):
        paginate(sample_index, page_size=1, page_number=page_number, policy=policy)


def test_empty_checklist_has_no_valid_page() -> None:
    with pytest.raises(InvalidPageError, match="no top-level tasks"):
        paginate(TreeIndex.build([]), page_size=1, page_number=1, policy=RenderPolicy(max_depth=2))


def test_count_pages_rounds_up() -> None:
    index = TreeIndex.build([make_task(i) for i in range(1, 6)])
    assert count_pages(index, 1) == 5
    assert count_pages(index, 2) == 3
    assert count_pages(index, 5) == 1


def test_all_pages_together_cover_the_full_summary(sample_index: TreeIndex) -> None:
    ultra = RenderPolicy(max_depth=99, include_closed=True, mode=RenderMode.ULTRA_COMPACT)
    first = paginate(sample_index, page_size=1, page_number=1, policy=ultra)
    paged_ids: set[int] = set()
    for page_number in range(1, first.total_pages + 1):
        page = paginate(sample_index, page_size=1, page_number=page_number, policy=ultra)
        paged_ids |= _ids(page.text)

    full = RenderPolicy(max_depth=99, include_closed=True)
    assert paged_ids == _ids(render_tree(sample_index, sample_index.top_level_ids, policy=full))
