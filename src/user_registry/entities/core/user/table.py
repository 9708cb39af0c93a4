"""User database table model."""

from datetime import UTC, datetime

from sqlmodel import Field

from src.user_registry.entities.core._base import EntityTable
from src.user_registry.entities.core.user.entity import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    User,
)


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database. Rows
    and entities are converted by the explicit helpers below so that the
    column layout and the domain model can evolve separately.
    """

    __tablename__ = "users"
    # Keep SQLite from reusing the id of a deleted row
    __table_args__ = {"sqlite_autoincrement": True}

    name: str = Field(max_length=NAME_MAX_LENGTH, nullable=False)
    email: str = Field(
        max_length=EMAIL_MAX_LENGTH, nullable=False, unique=True, index=True
    )

    @classmethod
    def from_entity(cls, user: User) -> "UserTable":
        """Build a new row for a transient user."""
        row = cls(name=user.name, email=user.email)
        if user.created_at is not None:
            row.created_at = user.created_at
        return row

    def apply(self, user: User) -> None:
        """Copy the mutable fields of ``user`` onto this row."""
        self.name = user.name
        self.email = user.email
        self.updated_at = datetime.now(UTC)

    def to_entity(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
