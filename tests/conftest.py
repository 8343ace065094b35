"""Pytest fixtures for the Taskboard tests."""

from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskboard.config import Settings
from taskboard.gateway import TaskGateway
from taskboard.main import create_app
from taskboard.models import Task, TaskStatus
from taskboard.store import InMemoryTaskStore, InMemoryUserStore

AUTH_HEADERS = {"Authorization": "Bearer test-token"}


@pytest.fixture
def task_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def app(task_store: InMemoryTaskStore, user_store: InMemoryUserStore) -> FastAPI:
    """An API with empty stores and the placeholder auth strategy."""
    return create_app(
        Settings(seed_demo_data=False),
        task_store=task_store,
        user_store=user_store,
    )


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return dict(AUTH_HEADERS)


@pytest.fixture
def gateway(client: TestClient) -> TaskGateway:
    """A gateway talking to the in-process API."""
    return TaskGateway(client=client, token="test-token")


def make_task(
    task_id: str,
    status: TaskStatus = TaskStatus.TODO,
    created_at: str = "2024-01-01T00:00:00Z",
    title: str | None = None,
    description: str = "",
) -> Task:
    created = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        description=description,
        status=status,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def task_factory():
    """Build Task objects directly, bypassing the API."""
    return make_task
