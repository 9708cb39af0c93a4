"""Result values returned by business services.

A service call returns exactly one of these variants and callers are
expected to branch on the variant type:

- ``Ok``: the operation succeeded and carries its value
- ``NotFound``: the targeted id is absent (never existed or was deleted)
- ``DuplicateEmail``: the email uniqueness invariant would be violated
- ``StorageFailure``: the storage backend failed; nothing is retried
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    user_id: int


@dataclass(frozen=True)
class DuplicateEmail:
    email: str


@dataclass(frozen=True)
class StorageFailure:
    reason: str

