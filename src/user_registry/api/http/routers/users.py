"""User API router with CRUD operations."""

from typing import Any, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger

from src.user_registry.api.http.deps import get_json_body, get_user_service
from src.user_registry.core.results import DuplicateEmail, NotFound, Ok, StorageFailure
from src.user_registry.core.services import UserService
from src.user_registry.entities.core.user import (
    UserPatch,
    UserRead,
    parse_user_payload,
    validate_user_payload,
)

T = TypeVar("T")

router = APIRouter(prefix="/users", tags=["users"])


def _unwrap(result: Ok[T] | NotFound | DuplicateEmail | StorageFailure) -> T:
    """Return the value of ``Ok`` or raise the HTTP error for any other variant."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail=f"User {result.user_id} not found")
    if isinstance(result, DuplicateEmail):
        raise HTTPException(
            status_code=409, detail=f"Email {result.email} is already registered"
        )
    if isinstance(result, StorageFailure):
        logger.error("Storage failure: {}", result.reason)
        raise HTTPException(status_code=500, detail="Storage unavailable")
    raise TypeError(f"Unexpected service result: {result!r}")


def _validated_patch(body: Any) -> UserPatch:
    violations = validate_user_payload(body)
    if violations:
        raise HTTPException(
            status_code=400, detail=[violation.model_dump() for violation in violations]
        )
    return parse_user_payload(body)


@router.get("", response_model=list[UserRead])
def list_users(
    service: UserService = Depends(get_user_service),
) -> list[UserRead]:
    """List all users ordered by id."""
    users = _unwrap(service.find_all())
    return [UserRead.from_entity(user) for user in users]


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Get a user by ID."""
    return UserRead.from_entity(_unwrap(service.find_by_id(user_id)))


@router.post("", response_model=UserRead, status_code=201)
def create_user(
    body: Any = Depends(get_json_body),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Create a new user."""
    patch = _validated_patch(body)
    return UserRead.from_entity(_unwrap(service.create(patch.to_user())))


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    body: Any = Depends(get_json_body),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Replace the name and email of a user."""
    patch = _validated_patch(body)
    return UserRead.from_entity(_unwrap(service.update(user_id, patch)))


@router.delete("/{user_id}", status_code=204, response_class=Response)
def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user."""
    if not _unwrap(service.delete(user_id)):
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return Response(status_code=204)
