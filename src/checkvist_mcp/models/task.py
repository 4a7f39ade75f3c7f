"""Domain models for Checkvist checklists and task views."""

from dataclasses import dataclass
from enum import Enum, IntEnum


class TaskStatus(IntEnum):
    """Task status as encoded by the Checkvist API."""

    OPEN = 0
    CLOSED = 1
    INVALIDATED = 2


class RenderMode(Enum):
    """Formatting strategy for one rendered task line."""

    FULL = "full"
    COMPACT = "compact"
    ULTRA_COMPACT = "ultra_compact"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()

    @property
    def description(self) -> str:
        return _MODE_DESCRIPTIONS[self]


_MODE_DESCRIPTIONS = {
    RenderMode.FULL: "FULL MODE: Showing status, metadata and IDs",
    RenderMode.COMPACT: "COMPACT MODE: Showing only task titles and IDs",
    RenderMode.ULTRA_COMPACT: "ULTRA COMPACT MODE: Showing IDs and shortened titles",
}


@dataclass(frozen=True)
class Note:
    """A comment attached to a task."""

    comment: str


@dataclass(frozen=True)
class TaskRecord:
    """A single task as returned by the checklist tasks endpoint."""

    id: int
    parent_id: int
    content: str
    status: TaskStatus = TaskStatus.OPEN
    children: tuple[int, ...] = ()
    due: str | None = None
    priority: int | None = None
    tags_as_text: str | None = None
    notes: tuple[Note, ...] = ()

    @property
    def is_top_level(self) -> bool:
        return self.parent_id == 0


@dataclass(frozen=True)
class RenderPolicy:
    """Options governing a single render call."""

    max_depth: int
    include_closed: bool = False
    mode: RenderMode = RenderMode.FULL
    include_notes: bool = False
    note_limit: int | None = None
    content_truncate_length: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            msg = f"max_depth must be non-negative, got {self.max_depth}"
            raise ValueError(msg)


@dataclass(frozen=True)
class Stats:
    """Structural statistics of a checklist."""

    total: int
    top_level_count: int
    closed_count: int
    noted_count: int
    max_depth: int
    avg_depth: float

    @property
    def closed_percent(self) -> float:
        if self.total == 0:
            return 0.0
        return self.closed_count / self.total * 100


@dataclass(frozen=True)
class PageResult:
    """One rendered page of top-level tasks."""

    text: str
    page_number: int
    total_pages: int

    @property
    def is_last(self) -> bool:
        return self.page_number >= self.total_pages
