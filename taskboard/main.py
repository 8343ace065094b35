"""FastAPI application entry point."""

import logging

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard.auth import AuthStrategy, Identity, build_strategy, require_identity
from taskboard.config import Settings, configure_logging
from taskboard.errors import Conflict, NotFound, TaskboardError, Unauthorized
from taskboard.models import (
    AuthResponse,
    DeleteResponse,
    HealthResponse,
    LoginRequest,
    RegisterRequest,
    Task,
    TaskCreate,
    TaskUpdate,
    User,
    UserPublic,
)
from taskboard.store import (
    InMemoryTaskStore,
    InMemoryUserStore,
    TaskStore,
    UserStore,
    seed_demo_data,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Validation error types that mean "the client left a field out"
MISSING_FIELD_ERRORS = {"missing", "string_too_short"}


def get_task_store(request: Request) -> TaskStore:
    """Task store the app was built with."""
    return request.app.state.tasks


def get_user_store(request: Request) -> UserStore:
    """User store the app was built with."""
    return request.app.state.users


def get_auth(request: Request) -> AuthStrategy:
    """Auth strategy the app was built with."""
    return request.app.state.auth


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(version=request.app.version)


@router.get("/tasks", response_model=list[Task], tags=["Tasks"])
async def list_tasks(
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
) -> list[Task]:
    """List all tasks."""
    return store.list_all()


@router.post(
    "/tasks",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    tags=["Tasks"],
)
async def create_task(
    data: TaskCreate,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
) -> Task:
    """Create a new task."""
    task = store.create(data)
    logger.info("Created task %s in %s", task.id, task.status.value)
    return task


@router.get("/tasks/{task_id}", response_model=Task, tags=["Tasks"])
async def get_task(
    task_id: str,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
) -> Task:
    """Get a specific task by ID."""
    task = store.get(task_id)
    if task is None:
        raise NotFound()
    return task


@router.patch("/tasks/{task_id}", response_model=Task, tags=["Tasks"])
async def update_task(
    task_id: str,
    data: TaskUpdate,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
) -> Task:
    """Update an existing task."""
    task = store.update(task_id, data)
    if task is None:
        raise NotFound()
    logger.info("Updated task %s", task_id)
    return task


@router.delete("/tasks/{task_id}", response_model=DeleteResponse, tags=["Tasks"])
async def delete_task(
    task_id: str,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
) -> DeleteResponse:
    """Delete a task."""
    if not store.delete(task_id):
        raise NotFound()
    logger.info("Deleted task %s", task_id)
    return DeleteResponse()


@router.post("/login", response_model=AuthResponse, tags=["Auth"])
async def login(
    data: LoginRequest,
    users: UserStore = Depends(get_user_store),
    auth: AuthStrategy = Depends(get_auth),
) -> AuthResponse:
    """Exchange email and password for a token."""
    user = users.get_by_email(data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    return _auth_response(user, auth)


@router.post("/register", response_model=AuthResponse, tags=["Auth"])
async def register(
    data: RegisterRequest,
    users: UserStore = Depends(get_user_store),
    auth: AuthStrategy = Depends(get_auth),
) -> AuthResponse:
    """Create an account and log it in."""
    if users.get_by_email(data.email) is not None:
        raise Conflict("Email already in use")
    user = users.create(data.name, data.email, data.password)
    logger.info("Registered user %s", user.id)
    return _auth_response(user, auth)


@router.post("/logout", response_model=DeleteResponse, tags=["Auth"])
async def logout(
    identity: Identity = Depends(require_identity),
    auth: AuthStrategy = Depends(get_auth),
) -> DeleteResponse:
    """Revoke the bearer token used for this request."""
    auth.revoke(identity.token)
    return DeleteResponse()


def _auth_response(user: User, auth: AuthStrategy) -> AuthResponse:
    """Public user fields plus a freshly issued token."""
    public = UserPublic(id=user.id, name=user.name, email=user.email)
    return AuthResponse(user=public, token=auth.issue(user))


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    """Render a taskboard error as its status and an ``error`` body."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 instead of 422."""
    errors = exc.errors()
    if any(err.get("type") in MISSING_FIELD_ERRORS for err in errors):
        message = "Missing required fields"
    else:
        message = "Invalid request body"
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "details": jsonable_encoder(errors)},
    )


def create_app(
    settings: Settings | None = None,
    task_store: TaskStore | None = None,
    user_store: UserStore | None = None,
    auth: AuthStrategy | None = None,
) -> FastAPI:
    """Build the API around the given stores and auth strategy.

    Stores left as None get fresh in-memory instances, seeded with the demo
    data when ``settings.seed_demo_data`` is set.
    """
    settings = settings or Settings.from_env()

    if task_store is None or user_store is None:
        memory_tasks = InMemoryTaskStore()
        memory_users = InMemoryUserStore()
        if settings.seed_demo_data:
            seed_demo_data(memory_tasks, memory_users)
        if task_store is None:
            task_store = memory_tasks
        if user_store is None:
            user_store = memory_users

    app = FastAPI(
        title=settings.title,
        description="A small task board API with Kanban-style status columns.",
        version=settings.version,
    )
    app.state.settings = settings
    app.state.tasks = task_store
    app.state.users = user_store
    app.state.auth = auth or build_strategy(settings.auth_mode)

    # Configure CORS for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router)
    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("Starting Taskboard API on %s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
