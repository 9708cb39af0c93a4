from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


class Entity(BaseModel):
    """Base entity with a storage-assigned integer identifier.

    A transient entity has ``id=None``; the repository assigns the id on the
    first save and it never changes afterwards. Entities are immutable, so
    every change produces a new instance.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = PydanticField(
        default=None,
        description="Identifier assigned by storage on first save",
    )

    created_at: datetime | None = PydanticField(default=None)
    updated_at: datetime | None = PydanticField(default=None)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


def _utcnow() -> datetime:
    return datetime.now(UTC)


class EntityTable(SQLModel, table=False):
    """Base table with a backend-generated integer primary key."""

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Backend-generated identifier",
    )

    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
