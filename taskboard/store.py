"""Task and user storage.

The handlers only see the ``TaskStore`` and ``UserStore`` interfaces; the
in-memory implementations below lose everything on restart and would be
swapped for a database-backed store in a real deployment.
"""

import hashlib
import hmac
import logging
import secrets
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from uuid import uuid4

from taskboard.models import Task, TaskCreate, TaskStatus, TaskUpdate, User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password for storage."""
    salt = secrets.token_hex(16)
    digest = hashlib.sha256((password + salt).encode()).hexdigest()
    return f"{salt}:{digest}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    salt, stored = password_hash.split(":", 1)
    digest = hashlib.sha256((password + salt).encode()).hexdigest()
    return hmac.compare_digest(digest, stored)


class TaskStore(ABC):
    """Authoritative list of tasks."""

    @abstractmethod
    def list_all(self) -> list[Task]:
        """Return all tasks in insertion order."""

    @abstractmethod
    def get(self, task_id: str) -> Task | None:
        """Get a task by its ID, or None if not found."""

    @abstractmethod
    def create(self, data: TaskCreate) -> Task:
        """Create a new task and return it."""

    @abstractmethod
    def update(self, task_id: str, data: TaskUpdate) -> Task | None:
        """Update an existing task. Returns None if not found."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns True if deleted, False if not found."""


class UserStore(ABC):
    """Registered users keyed by email."""

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        """Get a user by email, or None if not registered."""

    @abstractmethod
    def create(self, name: str, email: str, password: str) -> User:
        """Register a user, hashing the password."""


class InMemoryTaskStore(TaskStore):
    """Simple in-memory task storage."""

    def __init__(self) -> None:
        """Initialize an empty task store."""
        self._tasks: dict[str, Task] = {}

    def list_all(self) -> list[Task]:
        """Return all tasks in insertion order."""
        return list(self._tasks.values())

    def get(self, task_id: str) -> Task | None:
        """Get a task by its ID, or None if not found."""
        return self._tasks.get(task_id)

    def create(self, data: TaskCreate) -> Task:
        """Create a new task and return it."""
        now = datetime.now(UTC)
        task = Task(
            id=str(uuid4()),
            title=data.title,
            description=data.description,
            status=data.status,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    def add(self, task: Task) -> Task:
        """Insert a fully-formed task, keeping its id and timestamps."""
        if task.id in self._tasks:
            raise ValueError(f"Duplicate task id: {task.id}")
        self._tasks[task.id] = task
        return task

    def update(self, task_id: str, data: TaskUpdate) -> Task | None:
        """Update an existing task. Returns None if not found."""
        task = self._tasks.get(task_id)
        if task is None:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return task

        # updatedAt never precedes createdAt, even with a skewed clock
        update_data["updated_at"] = max(datetime.now(UTC), task.created_at)
        updated_task = task.model_copy(update=update_data)
        self._tasks[task_id] = updated_task
        return updated_task

    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns True if deleted, False if not found."""
        if task_id in self._tasks:
            del self._tasks[task_id]
            return True
        return False

    def clear(self) -> None:
        """Clear all tasks. Useful for testing."""
        self._tasks.clear()


class InMemoryUserStore(UserStore):
    """Simple in-memory user storage."""

    def __init__(self) -> None:
        """Initialize an empty user store."""
        self._users: dict[str, User] = {}

    def get_by_email(self, email: str) -> User | None:
        """Get a user by email, or None if not registered."""
        return self._users.get(email)

    def create(self, name: str, email: str, password: str) -> User:
        """Register a user. Raises ValueError on a duplicate email."""
        if email in self._users:
            raise ValueError(f"Email already registered: {email}")
        user = User(
            id=str(uuid4()),
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
        self._users[email] = user
        return user

    def add(self, user: User) -> User:
        """Insert a fully-formed user, replacing any with the same email."""
        self._users[user.email] = user
        return user

    def __len__(self) -> int:
        """Number of registered users."""
        return len(self._users)


DEMO_TASKS = (
    ("1", "Complete project proposal",
     "Draft the initial project proposal for the client meeting", TaskStatus.TODO),
    ("2", "Review design mockups",
     "Review the design mockups from the design team", TaskStatus.IN_PROGRESS),
    ("3", "Set up development environment",
     "Install and configure all necessary tools for development", TaskStatus.COMPLETED),
)


def seed_demo_data(tasks: InMemoryTaskStore, users: InMemoryUserStore) -> None:
    """Load the demo user and the three starter tasks."""
    now = datetime.now(UTC)
    for task_id, title, description, task_status in DEMO_TASKS:
        tasks.add(
            Task(
                id=task_id,
                title=title,
                description=description,
                status=task_status,
                created_at=now,
                updated_at=now,
            )
        )
    users.add(
        User(
            id="1",
            name="Demo User",
            email="demo@example.com",
            password_hash=hash_password("password"),
        )
    )
    logger.info("Seeded %d demo tasks and the demo user", len(DEMO_TASKS))
