"""Pydantic models for the Taskboard API.

Wire keys are camelCase (``createdAt``); Python attributes stay snake_case.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    """Board column a task sits in."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class WireModel(BaseModel):
    """Base for models exchanged over HTTP."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TaskCreate(WireModel):
    """Request body for creating a new task."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="The task title (required, 1-200 characters)",
    )
    description: str = Field(default="", description="Free-text details, may be empty")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Initial column")


class TaskUpdate(WireModel):
    """Request body for updating an existing task. Unknown keys are ignored."""

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=200,
        description="New title for the task",
    )
    description: str | None = Field(default=None, description="New description")
    status: TaskStatus | None = Field(default=None, description="New column")


class Task(WireModel):
    """A task on the board."""

    id: str = Field(..., description="Opaque unique identifier")
    title: str = Field(..., description="The task title")
    description: str = Field(default="", description="Free-text details")
    status: TaskStatus = Field(..., description="Current column")
    created_at: datetime = Field(..., description="When the task was created")
    updated_at: datetime = Field(..., description="When the task was last updated")


class User(BaseModel):
    """A registered user as held by the user store."""

    id: str
    name: str
    email: str
    password_hash: str


class UserPublic(WireModel):
    """User fields safe to return to clients."""

    id: str
    name: str
    email: str


class LoginRequest(WireModel):
    """Login credentials. Missing values fall through to a credential mismatch."""

    email: str = ""
    password: str = ""


class RegisterRequest(WireModel):
    """Request body for creating an account."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(WireModel):
    """Successful login or register."""

    user: UserPublic
    token: str


class DeleteResponse(WireModel):
    """Response from a successful delete."""

    success: bool = True


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    version: str = "1.0.0"
