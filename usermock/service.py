"""HTTP API exposing the mock user store."""

from __future__ import annotations

import logging
import random
import secrets
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends, FastAPI, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from .config import ServiceSettings
from .models import User, UserStatus
from .stats import MockDataStats
from .store import UserNotFoundError, UserStore

logger = logging.getLogger("usermock.service")

API_PREFIX = "/api/mock/users"


class UserPayload(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    full_name: Optional[str] = Field(default=None, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=32)
    status: UserStatus = UserStatus.ACTIVE
    id: Optional[int] = Field(default=None, ge=1)
    created_at: Optional[datetime] = None


class UserView(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    status: UserStatus
    created_at: datetime
    updated_at: datetime


class StatsResponse(BaseModel):
    total: int
    active: int
    inactive: int
    suspended: int


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    valid: bool


class ExistsResponse(BaseModel):
    exists: bool


class DeleteResponse(BaseModel):
    deleted: bool


class MessageResponse(BaseModel):
    message: str


def _user_to_view(user: User) -> UserView:
    return UserView(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        status=user.status,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _payload_to_user(payload: UserPayload, *, user_id: Optional[int]) -> User:
    return User(
        id=user_id,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        phone=payload.phone,
        status=payload.status,
        created_at=payload.created_at,
    )


def _stats_to_response(stats: MockDataStats) -> StatsResponse:
    return StatsResponse(
        total=stats.total,
        active=stats.active,
        inactive=stats.inactive,
        suspended=stats.suspended,
    )


def _build_token_dependency(tokens: Sequence[str]) -> Callable[..., None]:
    bearer_security = HTTPBearer(auto_error=False)
    accepted = [token.encode("utf-8") for token in tokens]

    def dependency(
        bearer: HTTPAuthorizationCredentials | None = Depends(bearer_security),
    ) -> None:
        if bearer is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="A bearer token is required for the mock user API",
                headers={"WWW-Authenticate": "Bearer"},
            )

        provided = bearer.credentials.encode("utf-8")
        # Check every configured token so the response time does not depend
        # on which one matched.
        matches = [secrets.compare_digest(provided, token) for token in accepted]
        if not any(matches):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unknown mock API token",
            )

    return dependency


def register_user_routes(
    app: FastAPI,
    store: UserStore,
    *,
    max_generate: int,
    dependencies: Sequence[Any] = (),
) -> None:
    """Expose the mock user endpoints on the provided FastAPI application."""

    router = APIRouter(prefix=API_PREFIX, dependencies=list(dependencies))

    @router.get("", response_model=List[UserView])
    def list_users() -> List[UserView]:
        return [_user_to_view(user) for user in store.list_users()]

    @router.get("/stats", response_model=StatsResponse)
    def get_stats() -> StatsResponse:
        return _stats_to_response(store.stats())

    @router.get("/username/{username}", response_model=UserView)
    def get_user_by_username(username: str) -> UserView:
        user = store.get_by_username(username)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return _user_to_view(user)

    @router.get("/status/{user_status}", response_model=List[UserView])
    def list_users_by_status(user_status: UserStatus) -> List[UserView]:
        return [_user_to_view(user) for user in store.list_by_status(user_status)]

    @router.get("/check/username/{username}", response_model=ExistsResponse)
    def check_username(username: str) -> ExistsResponse:
        return ExistsResponse(exists=store.username_exists(username))

    @router.get("/check/email/{email}", response_model=ExistsResponse)
    def check_email(email: str) -> ExistsResponse:
        return ExistsResponse(exists=store.email_exists(email))

    @router.post("/validate-login", response_model=LoginResponse)
    def validate_login(request: LoginRequest) -> LoginResponse:
        return LoginResponse(valid=store.validate_login(request.username, request.password))

    @router.post("/generate", response_model=UserView)
    def generate_user() -> UserView:
        return _user_to_view(store.create(store.generate_user()))

    @router.post("/generate/{count}", response_model=List[UserView])
    def generate_users(count: int) -> List[UserView]:
        if count <= 0 or count > max_generate:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"count must be between 1 and {max_generate}",
            )
        created = [store.create(user) for user in store.generate_users(count)]
        logger.info("Generated %s mock users", len(created))
        return [_user_to_view(user) for user in created]

    @router.post("/reset", response_model=MessageResponse)
    def reset_data() -> MessageResponse:
        store.reset()
        return MessageResponse(message="Mock data has been reset successfully")

    @router.delete("/clear", response_model=MessageResponse)
    def clear_data() -> MessageResponse:
        store.clear()
        return MessageResponse(message="All mock data has been cleared")

    @router.post("", response_model=UserView)
    def create_user(payload: UserPayload) -> UserView:
        user = store.create(_payload_to_user(payload, user_id=payload.id))
        return _user_to_view(user)

    @router.get("/{user_id}", response_model=UserView)
    def get_user(user_id: int) -> UserView:
        user = store.get_by_id(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return _user_to_view(user)

    @router.put("/{user_id}", response_model=UserView)
    def update_user(user_id: int, payload: UserPayload) -> UserView:
        try:
            user = store.update(_payload_to_user(payload, user_id=user_id))
        except UserNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return _user_to_view(user)

    @router.delete("/{user_id}", response_model=DeleteResponse)
    def delete_user(user_id: int) -> DeleteResponse:
        if not store.delete(user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return DeleteResponse(deleted=True)

    app.include_router(router)


def _build_store(settings: ServiceSettings) -> UserStore:
    rng = random.Random(settings.random_seed) if settings.random_seed is not None else None
    return UserStore(rng=rng, seed_defaults=settings.seed_defaults)


def create_app(
    *,
    store: UserStore | None = None,
    settings: ServiceSettings | None = None,
) -> FastAPI:
    """Instantiate the FastAPI application around ``store``."""

    app_settings = settings or ServiceSettings()
    app_store = store if store is not None else _build_store(app_settings)

    app = FastAPI(
        title="Mock User Service",
        version="0.1.0",
        description="In-memory user data simulator for demos and tests.",
    )
    app.state.store = app_store
    app.state.settings = app_settings

    dependencies = []
    if app_settings.api_tokens:
        dependencies.append(Depends(_build_token_dependency(app_settings.api_tokens)))
    else:
        logger.warning(
            "API token authentication is disabled. Configure api_tokens to protect"
            " the mock user endpoints."
        )

    @app.get("/healthz")
    def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    register_user_routes(
        app,
        app_store,
        max_generate=app_settings.max_generate,
        dependencies=dependencies,
    )

    return app


__all__ = ["API_PREFIX", "create_app", "register_user_routes"]
