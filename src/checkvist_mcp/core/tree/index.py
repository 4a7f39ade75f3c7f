"""Lookup structure over a flat list of tasks."""

from collections.abc import Iterable, Iterator

from checkvist_mcp.models.task import TaskRecord


class TreeIndex:
    """Id-keyed view of one checklist response.

    Parent/child relationships are resolved through ``lookup`` at walk time;
    records never point at each other. Child ids that do not resolve are
    treated as absent.
    """

    def __init__(self, tasks: dict[int, TaskRecord], top_level_ids: tuple[int, ...]) -> None:
        self._tasks = tasks
        self.top_level_ids = top_level_ids

    @classmethod
    def build(cls, records: Iterable[TaskRecord]) -> "TreeIndex":
        """Index records by id; a later duplicate id replaces the earlier record."""
        tasks: dict[int, TaskRecord] = {}
        order: list[int] = []
        for record in records:
            if record.id not in tasks:
                order.append(record.id)
            tasks[record.id] = record

        top_level_ids = tuple(task_id for task_id in order if tasks[task_id].is_top_level)
        return cls(tasks, top_level_ids)

    def lookup(self, task_id: int) -> TaskRecord | None:
        return self._tasks.get(task_id)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def total(self) -> int:
        return len(self._tasks)

    def records(self) -> Iterator[TaskRecord]:
        return iter(self._tasks.values())
