from __future__ import annotations

from collections.abc import AsyncIterator
from uuid import UUID

from fastapi import Request

from src.application.errors import AuthError
from src.application.reproduction.constants import ReproductionConstants
from src.config.settings import Settings, get_settings
from src.domain.value_objects.user_id import parse_user_id
from src.infrastructure.db.session import SQLAlchemyUnitOfWork


async def get_current_user_id(request: Request) -> UUID:
    """User id forwarded by the upstream auth gateway."""
    settings: Settings = getattr(request.app.state, "settings", None) or get_settings()
    raw = request.headers.get(settings.user_header)
    if not raw:
        raise AuthError("Authentication required")
    try:
        return parse_user_id(raw)
    except ValueError as exc:
        raise AuthError(f"Invalid {settings.user_header} header") from exc


async def get_uow(request: Request) -> AsyncIterator[SQLAlchemyUnitOfWork]:
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Session factory not configured")
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        yield uow


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_constants(request: Request) -> ReproductionConstants:
    constants = getattr(request.app.state, "reproduction_constants", None)
    if constants is None:
        raise RuntimeError("Reproduction constants not configured")
    return constants
