"""User entity package.

This package contains all User-related classes organized by responsibility:
- User: Domain entity
- UserTable: Database persistence model with explicit row mapping
- UserRepository: Data access layer
- validate_user_payload: Request-body validation
"""

from .entity import User, UserPatch, UserRead
from .repository import UserRepository
from .table import UserTable
from .validation import FieldViolation, parse_user_payload, validate_user_payload

__all__ = [
    "User",
    "UserPatch",
    "UserRead",
    "UserTable",
    "UserRepository",
    "FieldViolation",
    "parse_user_payload",
    "validate_user_payload",
]
