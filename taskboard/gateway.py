"""HTTP client for the Taskboard API.

Every failure, whether the request never completed or the server answered
with a non-2xx status, surfaces as ``NetworkFailure`` with a generic message.
"""

import logging
from typing import Any

import httpx

from taskboard.config import Settings
from taskboard.errors import NetworkFailure
from taskboard.models import AuthResponse, Task, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


class TaskGateway:
    """Thin wrapper over the task and auth endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        if client is None:
            settings = Settings.from_env()
            client = httpx.Client(
                base_url=base_url or settings.api_url,
                timeout=timeout or settings.request_timeout,
            )
        self._client = client
        self.token = token

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "TaskGateway":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, failure: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkFailure(failure) from exc

        if not response.is_success:
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise NetworkFailure(failure, response_status=response.status_code)
        return response.json()

    def fetch_tasks(self) -> list[Task]:
        """List every task on the server."""
        data = self._request("GET", "/tasks", "Failed to fetch tasks")
        return [Task.model_validate(item) for item in data]

    def get_task(self, task_id: str) -> Task:
        """Fetch a single task by ID."""
        data = self._request("GET", f"/tasks/{task_id}", "Failed to fetch task")
        return Task.model_validate(data)

    def create_task(self, task: TaskCreate) -> Task:
        """Create a task and return the server's copy."""
        data = self._request(
            "POST",
            "/tasks",
            "Failed to create task",
            json=task.model_dump(mode="json", by_alias=True),
        )
        return Task.model_validate(data)

    def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        """Send only the fields set on ``changes``."""
        data = self._request(
            "PATCH",
            f"/tasks/{task_id}",
            "Failed to update task",
            json=changes.model_dump(mode="json", by_alias=True, exclude_unset=True),
        )
        return Task.model_validate(data)

    def delete_task(self, task_id: str) -> None:
        """Delete a task by ID."""
        self._request("DELETE", f"/tasks/{task_id}", "Failed to delete task")

    def login(self, email: str, password: str) -> AuthResponse:
        """Log in and keep the returned token for later calls."""
        data = self._request(
            "POST", "/login", "Failed to log in", json={"email": email, "password": password}
        )
        result = AuthResponse.model_validate(data)
        self.token = result.token
        return result

    def register(self, name: str, email: str, password: str) -> AuthResponse:
        """Register and keep the returned token for later calls."""
        data = self._request(
            "POST",
            "/register",
            "Failed to register",
            json={"name": name, "email": email, "password": password},
        )
        result = AuthResponse.model_validate(data)
        self.token = result.token
        return result

    def logout(self) -> None:
        """Revoke the current token on the server and forget it locally."""
        if not self.token:
            return
        try:
            self._request("POST", "/logout", "Failed to log out")
        finally:
            self.token = None
