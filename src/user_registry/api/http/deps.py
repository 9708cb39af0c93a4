"""FastAPI dependency implementations."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from src.user_registry.api.http.app_data import ApplicationDependencies
from src.user_registry.core.services import UserService
from src.user_registry.entities.core.user import UserRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the composition root built at startup."""
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Open a database session for the duration of one request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_user_repository(db: Session = Depends(get_db_session)) -> UserRepository:
    return UserRepository(db)


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(repository)


async def get_json_body(request: Request) -> Any:
    """Decode the request body as JSON, answering 400 when it is not."""
    raw = await request.body()
    if not raw:
        raise HTTPException(
            status_code=400,
            detail=[{"field": "body", "message": "Request body is required"}],
        )
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise HTTPException(
            status_code=400,
            detail=[{"field": "body", "message": "Request body is not valid JSON"}],
        ) from e
