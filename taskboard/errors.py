"""Error taxonomy shared by the API handlers and the task gateway."""

from fastapi import status


class TaskboardError(Exception):
    """Base error carrying the HTTP status it is rendered with."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


class NotFound(TaskboardError):
    """Unknown task id on read, update or delete."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Task not found"


class Unauthorized(TaskboardError):
    """Missing or malformed bearer header, or rejected credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class Conflict(TaskboardError):
    """Duplicate email on register."""

    status_code = status.HTTP_409_CONFLICT
    message = "Email already in use"


class ValidationError(TaskboardError):
    """Missing or invalid request fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Missing required fields"


class NetworkFailure(TaskboardError):
    """Client-side transport failure or non-2xx response."""

    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Request failed"

    def __init__(self, message: str | None = None, response_status: int | None = None) -> None:
        super().__init__(message)
        self.response_status = response_status
