"""User repository: the storage port for users."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from src.user_registry.core.exceptions import (
    DuplicateKeyError,
    MissingRecordError,
    StorageError,
)
from src.user_registry.entities.core.user.entity import User
from src.user_registry.entities.core.user.table import UserTable

# Largest value the INTEGER primary key holds on every supported backend
ID_MAX = 2**31 - 1


def _addressable(user_id: int) -> bool:
    return 1 <= user_id <= ID_MAX


class UserRepository:
    """Data-access layer for users.

    Every write commits its own unit of work. SQLAlchemy errors never leave
    this class: they are rolled back and re-raised as ``StorageError`` (or
    ``DuplicateKeyError`` for a unique-constraint violation) with the
    original exception chained.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self._session.rollback()
            message = str(e.orig).lower()
            if "unique" in message or "duplicate" in message:
                raise DuplicateKeyError("email") from e
            raise StorageError(
                f"Integrity error during {operation}",
                details={"operation": operation},
            ) from e
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.warning("Storage failure during {}: {}", operation, type(e).__name__)
            raise StorageError(
                f"Storage failure during {operation}",
                details={"operation": operation, "error_type": type(e).__name__},
            ) from e

    def find_all(self) -> list[User]:
        statement = select(UserTable).order_by(col(UserTable.id))
        with self._storage_errors("find_all"):
            rows = self._session.exec(statement).all()
        return [row.to_entity() for row in rows]

    def find_by_id(self, user_id: int) -> User | None:
        if not _addressable(user_id):
            return None
        with self._storage_errors("find_by_id"):
            row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return row.to_entity()

    def exists_by_email(self, email: str) -> bool:
        statement = select(UserTable.id).where(UserTable.email == email).limit(1)
        with self._storage_errors("exists_by_email"):
            return self._session.exec(statement).first() is not None

    def exists_by_id(self, user_id: int) -> bool:
        if not _addressable(user_id):
            return False
        with self._storage_errors("exists_by_id"):
            return self._session.get(UserTable, user_id) is not None

    def count(self) -> int:
        statement = select(func.count()).select_from(UserTable)
        with self._storage_errors("count"):
            return self._session.exec(statement).one()

    def save(self, user: User) -> User:
        """Insert a transient user or update a persisted one.

        Returns the persisted form, including the assigned id.

        Raises:
            DuplicateKeyError: the email is already stored for another row.
            MissingRecordError: ``user`` has an id but its row is gone.
            StorageError: any other storage failure.
        """
        with self._storage_errors("save"):
            if user.id is None:
                row = UserTable.from_entity(user)
                self._session.add(row)
            else:
                if not _addressable(user.id):
                    raise MissingRecordError(user.id)
                row = self._session.get(UserTable, user.id)
                if row is None:
                    raise MissingRecordError(user.id)
                row.apply(user)
                self._session.add(row)
            self._session.commit()
            self._session.refresh(row)

        logger.debug("Saved user {}", row.id)
        return row.to_entity()

    def delete_by_id(self, user_id: int) -> bool:
        """Delete the user with ``user_id``; returns False when there was none."""
        if not _addressable(user_id):
            return False
        with self._storage_errors("delete_by_id"):
            row = self._session.get(UserTable, user_id)
            if row is None:
                return False
            self._session.delete(row)
            self._session.commit()

        logger.debug("Deleted user {}", user_id)
        return True
