"""Database metadata model — one record per logical database."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_serializer, field_validator


class DatabaseMeta(BaseModel):
    """Control-collection record describing a logical database.

    Stored with its aliases, so the persisted document reads
    ``{"_id", "name", "type", "createdAt"}``.
    """

    model_config = {"populate_by_name": True}

    id: str = Field(alias="_id", description="Primary key, equal to the database name")
    name: str = Field(description="Logical database name")
    type: Literal["database"] = Field(default="database", description="Record kind")
    created_at: datetime = Field(
        alias="createdAt",
        default_factory=lambda: datetime.now(UTC),
        description="Creation time; stored as an ISO-8601 string",
    )

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # BSON dates decode as naive UTC
        return value if value.tzinfo else value.replace(tzinfo=UTC)

    @field_serializer("created_at")
    def _iso(self, value: datetime) -> str:
        return value.isoformat()

    @classmethod
    def for_name(cls, name: str) -> DatabaseMeta:
        return cls(_id=name, name=name)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
