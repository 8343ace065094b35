"""Derived board view: filter, sort and split tasks into status columns."""

import logging
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from taskboard.models import Task, TaskStatus

logger = logging.getLogger(__name__)


class StatusFilter(str, Enum):
    """Status filter choices, including every column."""

    ALL = "all"
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class SortOrder(str, Enum):
    """Sort choices offered on the board."""

    NEWEST = "newest"
    OLDEST = "oldest"
    A_Z = "a-z"
    Z_A = "z-a"


@dataclass(frozen=True)
class FilterSortConfig:
    """Client-held filter and sort settings. Never persisted."""

    search: str = ""
    status: StatusFilter = StatusFilter.ALL
    sort_by: SortOrder = SortOrder.NEWEST

    def __post_init__(self) -> None:
        # accept plain strings such as "in-progress" or "z-a"
        object.__setattr__(self, "status", StatusFilter(self.status))
        object.__setattr__(self, "sort_by", SortOrder(self.sort_by))


@dataclass
class BoardBuckets:
    """Tasks to render, one list per column, each in sort order."""

    todo: list[Task] = field(default_factory=list)
    in_progress: list[Task] = field(default_factory=list)
    completed: list[Task] = field(default_factory=list)

    def column(self, status: TaskStatus) -> list[Task]:
        """The list backing the ``status`` column."""
        return {
            TaskStatus.TODO: self.todo,
            TaskStatus.IN_PROGRESS: self.in_progress,
            TaskStatus.COMPLETED: self.completed,
        }[status]

    def __len__(self) -> int:
        return len(self.todo) + len(self.in_progress) + len(self.completed)


def collation_key(text: str) -> tuple[str, str, tuple[bool, ...]]:
    """Sort key ordering base letters, then accents, then lowercase before uppercase."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base, decomposed, tuple(ch.isupper() for ch in text))


def title_key(task: Task) -> tuple[str, str, tuple[bool, ...]]:
    """Collation key for a task title."""
    return collation_key(task.title)


def matches_search(task: Task, search: str) -> bool:
    """Case-insensitive substring match on title or description."""
    needle = search.casefold()
    return needle in task.title.casefold() or needle in task.description.casefold()


def filter_tasks(tasks: Iterable[Task], config: FilterSortConfig) -> list[Task]:
    """Apply the search and status filters, keeping order."""
    result = list(tasks)
    if config.search:
        result = [task for task in result if matches_search(task, config.search)]
    if config.status is not StatusFilter.ALL:
        result = [task for task in result if task.status == config.status.value]
    return result


def sort_tasks(tasks: Iterable[Task], sort_by: SortOrder) -> list[Task]:
    """Stable sort by the chosen order."""
    if sort_by is SortOrder.NEWEST:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if sort_by is SortOrder.OLDEST:
        return sorted(tasks, key=lambda t: t.created_at)
    if sort_by is SortOrder.A_Z:
        return sorted(tasks, key=title_key)
    return sorted(tasks, key=title_key, reverse=True)


def derive(tasks: Sequence[Task], config: FilterSortConfig | None = None) -> BoardBuckets:
    """Filter, sort and partition ``tasks`` for rendering. Pure."""
    config = config or FilterSortConfig()
    buckets = BoardBuckets()
    for task in sort_tasks(filter_tasks(tasks, config), config.sort_by):
        try:
            buckets.column(TaskStatus(task.status)).append(task)
        except ValueError:
            logger.warning("Task %s has unknown status %r, not shown", task.id, task.status)
    return buckets
