"""Shared test fixtures."""

import pytest

from checkvist_mcp.core.reader import parse_task
from checkvist_mcp.core.tree.index import TreeIndex
from tests.unit.fakes import CHECKLIST_ID, SAMPLE_TASKS, FakeApi


@pytest.fixture
def sample_index() -> TreeIndex:
    """Return an index over the sample checklist."""
    return TreeIndex.build(parse_task(raw) for raw in SAMPLE_TASKS)


@pytest.fixture
def fake_api() -> FakeApi:
    """Return a FakeApi serving the sample checklist."""
    api = FakeApi()
    api.add_response(f"/checklists/{CHECKLIST_ID}/tasks.json", SAMPLE_TASKS)
    return api
