"""REST API for Taskpad.

Routes:
    POST   /api/auth/signup   - Register and receive a token
    POST   /api/auth/login    - Exchange credentials for a token
    GET    /api/tasks         - List the caller's tasks
    POST   /api/tasks         - Create a task
    GET    /api/tasks/{id}    - Fetch one task
    PUT    /api/tasks/{id}    - Partially update a task
    DELETE /api/tasks/{id}    - Delete a task
    GET    /api/health        - Liveness check

Every ``/api/tasks`` route requires ``Authorization: Bearer <token>``. The
owner of every task operation is taken from the verified token, never from
the request.
"""

import time
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskpad import __version__
from taskpad.models import (
    AuthPayload,
    LoginRequest,
    ServerConfig,
    SignupRequest,
    Task,
    TaskCreate,
    TaskUpdate,
    TokenClaims,
)
from taskpad.server.credentials import CredentialStore, TokenIssuer
from taskpad.server.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    TaskNotFoundError,
)
from taskpad.server.task_store import TaskStore
from taskpad.utils.logger import get_logger

ENDPOINTS = [
    "POST /api/auth/signup",
    "POST /api/auth/login",
    "GET /api/tasks",
    "POST /api/tasks",
    "GET /api/tasks/:id",
    "PUT /api/tasks/:id",
    "DELETE /api/tasks/:id",
]

bearer = HTTPBearer(auto_error=False)


# =============================================================================
# Dependencies
# =============================================================================


async def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials


async def get_task_store(request: Request) -> TaskStore:
    return request.app.state.tasks


async def current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> TokenClaims:
    """Resolve the caller from the bearer token."""
    return store.verify(credentials.credentials if credentials else None)


CurrentUser = Annotated[TokenClaims, Depends(current_user)]
Credentials = Annotated[CredentialStore, Depends(get_credential_store)]
Tasks = Annotated[TaskStore, Depends(get_task_store)]


# =============================================================================
# Routes
# =============================================================================

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
tasks_router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@auth_router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, store: Credentials) -> AuthPayload:
    result = await store.register(body.email, body.password, body.name)
    return AuthPayload(
        message="User created successfully", token=result.token, user=result.user
    )


@auth_router.post("/login")
async def login(body: LoginRequest, store: Credentials) -> AuthPayload:
    result = await store.authenticate(body.email, body.password)
    return AuthPayload(message="Login successful", token=result.token, user=result.user)


@tasks_router.get("", response_model=list[Task])
async def list_tasks(user: CurrentUser, store: Tasks) -> list[Task]:
    return store.list(user.user_id)


@tasks_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Task,
)
async def create_task(body: TaskCreate, user: CurrentUser, store: Tasks) -> Task:
    task = store.create(user.user_id, body)
    get_logger().info("task created: id=%s user=%s", task.id, user.user_id)
    return task


@tasks_router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int, user: CurrentUser, store: Tasks) -> Task:
    return store.get(user.user_id, task_id)


@tasks_router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: int, body: TaskUpdate, user: CurrentUser, store: Tasks
) -> Task:
    return store.update(user.user_id, task_id, body)


@tasks_router.delete("/{task_id}")
async def delete_task(task_id: int, user: CurrentUser, store: Tasks) -> dict:
    store.delete(user.user_id, task_id)
    get_logger().info("task deleted: id=%s user=%s", task_id, user.user_id)
    return {"message": "Task deleted successfully"}


# =============================================================================
# Error handling
# =============================================================================


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MissingTokenError)
    async def missing_token(request: Request, exc: MissingTokenError):
        return _error(status.HTTP_401_UNAUTHORIZED, "Access token required")

    @app.exception_handler(InvalidTokenError)
    async def invalid_token(request: Request, exc: InvalidTokenError):
        return _error(status.HTTP_403_FORBIDDEN, "Invalid token")

    @app.exception_handler(DuplicateUserError)
    async def duplicate_user(request: Request, exc: DuplicateUserError):
        return _error(status.HTTP_400_BAD_REQUEST, "User already exists")

    @app.exception_handler(InvalidCredentialsError)
    async def invalid_credentials(request: Request, exc: InvalidCredentialsError):
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid credentials")

    @app.exception_handler(TaskNotFoundError)
    async def task_not_found(request: Request, exc: TaskNotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, "Task not found")

    @app.exception_handler(RequestValidationError)
    async def validation_failed(request: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # Unknown routes and wrong methods
        return _error(exc.status_code, str(exc.detail), exc.headers)

    @app.middleware("http")
    async def log_and_guard(request: Request, call_next):
        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            get_logger().exception("unhandled error: %s %s", request.method, request.url.path)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")
        get_logger().debug(
            "%s %s -> %s (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            time.monotonic() - start,
        )
        return response


# =============================================================================
# Application factory
# =============================================================================


def create_app(settings: ServerConfig | None = None) -> FastAPI:
    """Build the API with fresh, empty user and task stores."""
    settings = settings or ServerConfig()

    app = FastAPI(title="Task Manager API", version=__version__)
    issuer = TokenIssuer(settings.jwt_secret, timedelta(hours=settings.token_ttl_hours))
    app.state.credentials = CredentialStore(issuer, bcrypt_rounds=settings.bcrypt_rounds)
    app.state.tasks = TaskStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(tasks_router)

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "OK", "message": "Task Manager API is running"}

    @app.get("/")
    async def root() -> dict:
        return {"message": "Task Manager API", "version": __version__, "endpoints": ENDPOINTS}

    return app
