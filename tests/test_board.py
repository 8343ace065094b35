"""Tests for the drop handler and the board controller."""

import httpx
import pytest
from fastapi.testclient import TestClient

from taskboard.board import (
    DELETE_FAILED,
    LOAD_FAILED,
    UPDATE_FAILED,
    Board,
    UpdateCommand,
    on_drop,
)
from taskboard.gateway import TaskGateway
from taskboard.models import TaskCreate, TaskStatus, TaskUpdate
from taskboard.store import InMemoryTaskStore
from taskboard.view_model import FilterSortConfig


class RecordingGateway(TaskGateway):
    """Counts update calls so tests can assert on network traffic."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.updates: list[tuple[str, TaskUpdate]] = []

    def update_task(self, task_id, changes):
        self.updates.append((task_id, changes))
        return super().update_task(task_id, changes)


def failing_gateway(status_code: int = 500) -> TaskGateway:
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code))
    return TaskGateway(client=httpx.Client(transport=transport, base_url="http://board"))


@pytest.fixture
def seeded_store(task_store: InMemoryTaskStore, task_factory) -> InMemoryTaskStore:
    task_store.add(task_factory("1", TaskStatus.TODO, "2024-01-01T00:00:00Z", "Write docs"))
    task_store.add(task_factory("2", TaskStatus.TODO, "2024-01-02T00:00:00Z", "Fix bug"))
    task_store.add(task_factory("3", TaskStatus.COMPLETED, "2024-01-03T00:00:00Z", "Ship"))
    return task_store


@pytest.fixture
def board(client: TestClient, seeded_store: InMemoryTaskStore) -> Board:
    board = Board(gateway=RecordingGateway(client=client, token="test-token"))
    board.load()
    return board


def test_on_drop_emits_command(task_factory) -> None:
    tasks = [task_factory("1", TaskStatus.TODO)]
    assert on_drop("1", "completed", tasks) == UpdateCommand(id="1", status=TaskStatus.COMPLETED)


def test_on_drop_same_column_is_noop(task_factory) -> None:
    tasks = [task_factory("1", TaskStatus.IN_PROGRESS)]
    assert on_drop("1", TaskStatus.IN_PROGRESS, tasks) is None


def test_on_drop_unknown_task_is_noop(task_factory) -> None:
    assert on_drop("missing", TaskStatus.TODO, [task_factory("1")]) is None


def test_any_column_reaches_any_other(task_factory) -> None:
    for source in TaskStatus:
        for target in TaskStatus:
            command = on_drop("1", target, [task_factory("1", source)])
            if source is target:
                assert command is None
            else:
                assert command.status is target


def test_load(board: Board) -> None:
    assert [t.id for t in board.tasks] == ["1", "2", "3"]
    assert board.error is None
    assert board.is_loading is False


def test_load_failure_keeps_tasks() -> None:
    board = Board(gateway=failing_gateway())
    board.load()
    assert board.tasks == []
    assert board.error == LOAD_FAILED
    assert board.is_loading is False


def test_drop_moves_task_after_server_confirms(
    board: Board, seeded_store: InMemoryTaskStore
) -> None:
    before = board.tasks[0]

    result = board.drop("1", "in-progress")

    assert result.ok
    assert result.task.status is TaskStatus.IN_PROGRESS
    moved = board.tasks[0]
    assert moved.status is TaskStatus.IN_PROGRESS
    assert moved.updated_at >= before.updated_at
    assert moved.updated_at == seeded_store.get("1").updated_at
    assert [t.id for t in board.buckets().in_progress] == ["1"]
    assert [t.id for t in board.buckets().todo] == ["2"]


def test_drop_is_idempotent(board: Board) -> None:
    assert board.drop("1", TaskStatus.COMPLETED) is not None
    assert board.drop("1", TaskStatus.COMPLETED) is None
    assert len(board.gateway.updates) == 1


def test_drop_on_same_column_sends_nothing(board: Board) -> None:
    assert board.drop("3", TaskStatus.COMPLETED) is None
    assert board.gateway.updates == []


def test_drop_failure_leaves_local_state(board: Board) -> None:
    before = list(board.tasks)
    board.gateway = failing_gateway(503)

    result = board.drop("1", TaskStatus.COMPLETED)

    assert not result.ok
    assert result.error.response_status == 503
    assert board.tasks == before
    assert board.error == UPDATE_FAILED


def test_drop_on_task_deleted_elsewhere(board: Board, seeded_store: InMemoryTaskStore) -> None:
    seeded_store.delete("2")

    result = board.drop("2", TaskStatus.COMPLETED)

    assert not result.ok
    assert result.error.response_status == 404
    assert board.tasks[1].status is TaskStatus.TODO


def test_create_task_appends(board: Board) -> None:
    created = board.create_task(TaskCreate(title="New", status=TaskStatus.IN_PROGRESS))
    assert created is not None
    assert board.tasks[-1] == created
    assert len(board.tasks) == 4


def test_update_task_replaces_entry(board: Board) -> None:
    updated = board.update_task("2", TaskUpdate(title="Fix the bug"))
    assert updated.title == "Fix the bug"
    assert board.tasks[1] is updated
    assert [t.id for t in board.tasks] == ["1", "2", "3"]


def test_delete_task_removes_entry(board: Board) -> None:
    assert board.delete_task("2") is True
    assert [t.id for t in board.tasks] == ["1", "3"]


def test_delete_unknown_task_reports_error(board: Board) -> None:
    assert board.delete_task("missing") is False
    assert board.error == DELETE_FAILED
    assert len(board.tasks) == 3


def test_filters(board: Board) -> None:
    board.set_filters(FilterSortConfig(search="bug"))
    assert [t.id for t in board.buckets().todo] == ["2"]
    assert board.buckets().completed == []

    board.reset_filters()
    assert len(board.buckets()) == 3
