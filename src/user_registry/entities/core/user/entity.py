"""User domain entity."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.user_registry.entities.core._base import Entity

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 254


class User(Entity):
    """User entity representing a registered person.

    This is the domain model handed between the repository, the service and
    the HTTP layer. Field constraints are checked at the request boundary by
    ``validate_user_payload``, not by this model.
    """

    name: str = Field(description="Display name")
    email: str = Field(description="Email address, unique across users")

    def merged_with(self, patch: "UserPatch") -> "User":
        """Return a copy with ``name`` and ``email`` taken from ``patch``.

        The id and every other persisted field are carried over unchanged.
        """
        return self.model_copy(update={"name": patch.name, "email": patch.email})

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.email,
        ))


class UserPatch(BaseModel):
    """Validated ``name``/``email`` pair taken from a request body."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str

    def to_user(self) -> User:
        """Build a transient user from this patch."""
        return User(name=self.name, email=self.email)


class UserRead(BaseModel):
    """Public representation of a persisted user."""

    id: int
    name: str
    email: str

    @classmethod
    def from_entity(cls, user: User) -> "UserRead":
        if user.id is None:
            raise ValueError("Cannot represent a transient user")
        return cls(id=user.id, name=user.name, email=user.email)
