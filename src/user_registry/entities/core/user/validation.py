"""Request-body validation for users.

Validation is a pure function of the decoded JSON body. It never touches
storage and it reports every problem it finds rather than stopping at the
first one.
"""

from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel

from src.user_registry.entities.core.user.entity import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    UserPatch,
)


class FieldViolation(BaseModel):
    """A single constraint a request body failed."""

    field: str
    message: str


def _is_encodable(value: str) -> bool:
    # Lone surrogates decode from JSON escapes but cannot be stored
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _validate_name(value: Any) -> list[FieldViolation]:
    if value is None:
        return [FieldViolation(field="name", message="Field is required")]
    if not isinstance(value, str):
        return [FieldViolation(field="name", message="Must be a string")]
    if not _is_encodable(value):
        return [FieldViolation(field="name", message="Must be valid Unicode text")]
    if not value.strip():
        return [FieldViolation(field="name", message="Must not be blank")]
    if len(value) > NAME_MAX_LENGTH:
        return [
            FieldViolation(
                field="name",
                message=f"Must be at most {NAME_MAX_LENGTH} characters",
            )
        ]
    return []


def _validate_email(value: Any) -> list[FieldViolation]:
    if value is None:
        return [FieldViolation(field="email", message="Field is required")]
    if not isinstance(value, str):
        return [FieldViolation(field="email", message="Must be a string")]
    if not _is_encodable(value):
        return [FieldViolation(field="email", message="Must be valid Unicode text")]
    if len(value) > EMAIL_MAX_LENGTH:
        return [
            FieldViolation(
                field="email",
                message=f"Must be at most {EMAIL_MAX_LENGTH} characters",
            )
        ]
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        return [FieldViolation(field="email", message=f"Invalid email address: {e}")]
    return []


def validate_user_payload(body: Any) -> list[FieldViolation]:
    """Return the constraint violations of a user request body.

    An empty list means the body can be turned into a ``UserPatch`` with
    ``parse_user_payload``. An ``id`` key, if present, is ignored.
    """
    if not isinstance(body, dict):
        return [FieldViolation(field="body", message="Must be a JSON object")]

    return _validate_name(body.get("name")) + _validate_email(body.get("email"))


def parse_user_payload(body: dict[str, Any]) -> UserPatch:
    """Build a patch from a body that ``validate_user_payload`` accepted."""
    return UserPatch(name=body["name"], email=body["email"])
