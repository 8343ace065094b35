"""Board controller: the state a board screen renders, and the drop handler.

Local task entries are only ever replaced wholesale, and only after the
server has confirmed the change.
"""

import logging
from dataclasses import dataclass, field

from taskboard.errors import NetworkFailure
from taskboard.gateway import TaskGateway
from taskboard.models import Task, TaskCreate, TaskStatus, TaskUpdate
from taskboard.view_model import BoardBuckets, FilterSortConfig, derive

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load tasks. Please try again."
CREATE_FAILED = "Failed to create task. Please try again."
UPDATE_FAILED = "Failed to update task. Please try again."
DELETE_FAILED = "Failed to delete task. Please try again."


@dataclass(frozen=True)
class UpdateCommand:
    """Move task ``id`` to ``status``."""

    id: str
    status: TaskStatus


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of sending an UpdateCommand."""

    command: UpdateCommand
    task: Task | None = None
    error: NetworkFailure | None = None

    @property
    def ok(self) -> bool:
        """True when the server confirmed the update."""
        return self.error is None


def on_drop(
    task_id: str, target_status: TaskStatus | str, current_tasks: list[Task]
) -> UpdateCommand | None:
    """Turn a drag release into an update command, or None when nothing changes."""
    target = TaskStatus(target_status)
    task = next((t for t in current_tasks if t.id == task_id), None)
    if task is None:
        logger.debug("Dropped unknown task %s", task_id)
        return None
    if task.status == target:
        return None
    return UpdateCommand(id=task_id, status=target)


@dataclass
class Board:
    """Tasks, filters and user-facing error for one signed-in session."""

    gateway: TaskGateway
    tasks: list[Task] = field(default_factory=list)
    filters: FilterSortConfig = field(default_factory=FilterSortConfig)
    error: str | None = None
    is_loading: bool = False

    def load(self) -> None:
        """Fetch the full task list, raising the loading flag meanwhile."""
        self.is_loading = True
        self.error = None
        try:
            self.tasks = self.gateway.fetch_tasks()
        except NetworkFailure:
            self.error = LOAD_FAILED
            logger.exception("Loading tasks failed")
        finally:
            self.is_loading = False

    def buckets(self) -> BoardBuckets:
        """Columns to render under the current filters."""
        return derive(self.tasks, self.filters)

    def set_filters(self, filters: FilterSortConfig) -> None:
        """Replace the filter and sort settings."""
        self.filters = filters

    def reset_filters(self) -> None:
        """Go back to all tasks, newest first, no search."""
        self.filters = FilterSortConfig()

    def create_task(self, new_task: TaskCreate) -> Task | None:
        """Create a task and append it once the server returns it."""
        try:
            created = self.gateway.create_task(new_task)
        except NetworkFailure:
            self.error = CREATE_FAILED
            logger.exception("Creating task failed")
            return None
        self.tasks = [*self.tasks, created]
        return created

    def update_task(self, task_id: str, changes: TaskUpdate) -> Task | None:
        """Apply an edit and swap in the server's copy of the task."""
        try:
            updated = self.gateway.update_task(task_id, changes)
        except NetworkFailure:
            self.error = UPDATE_FAILED
            logger.exception("Updating task %s failed", task_id)
            return None
        self._replace(updated)
        return updated

    def delete_task(self, task_id: str) -> bool:
        """Delete a task and drop it from the local list."""
        try:
            self.gateway.delete_task(task_id)
        except NetworkFailure:
            self.error = DELETE_FAILED
            logger.exception("Deleting task %s failed", task_id)
            return False
        self.tasks = [task for task in self.tasks if task.id != task_id]
        return True

    def execute(self, command: UpdateCommand) -> UpdateResult:
        """Send ``command`` and reconcile local state only if it succeeded."""
        try:
            updated = self.gateway.update_task(command.id, TaskUpdate(status=command.status))
        except NetworkFailure as exc:
            self.error = UPDATE_FAILED
            logger.exception("Moving task %s to %s failed", command.id, command.status.value)
            return UpdateResult(command=command, error=exc)
        self._replace(updated)
        return UpdateResult(command=command, task=updated)

    def drop(self, task_id: str, target_status: TaskStatus | str) -> UpdateResult | None:
        """Handle a card released over the ``target_status`` column."""
        command = on_drop(task_id, target_status, self.tasks)
        if command is None:
            return None
        return self.execute(command)

    def _replace(self, updated: Task) -> None:
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]
