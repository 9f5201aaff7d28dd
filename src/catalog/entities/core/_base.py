from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


class Entity(BaseModel):
    """Base entity class for records identified by a database-assigned integer."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int = PydanticField(description="Unique identifier for the entity")

    created_at: datetime = PydanticField(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = PydanticField(default_factory=lambda: datetime.now(UTC))


class EntityTable(SQLModel, table=False):
    """Base table with an auto-incrementing integer primary key and timestamps."""

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )


def touch(row: EntityTable) -> None:
    """Refresh ``updated_at`` on a row being modified through the ORM."""
    row.updated_at = datetime.now(UTC)
