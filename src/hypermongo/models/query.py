"""Port request models for the query, list, index and bulk operations."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

SortDirection = Literal["ASC", "DESC"]
SortItem = str | dict[str, SortDirection]


class QueryArgs(BaseModel):
    """Arguments of ``query_documents``."""

    selector: dict[str, Any] = Field(default_factory=dict, description="Native filter document")
    fields: list[str] | None = Field(default=None, description="Fields to project; others are excluded")
    limit: int | None = Field(default=None, description="Maximum number of documents to return")
    sort: list[SortItem] | None = Field(default=None, description="Field names or {field: ASC|DESC} pairs")
    use_index: str | None = Field(default=None, description="Index hint (accepted, not forwarded)")


class ListArgs(BaseModel):
    """Arguments of ``list_documents``; all bounds apply to ``_id``."""

    limit: int | None = Field(default=None, description="Maximum number of documents to return")
    startkey: str | None = Field(default=None, description="Inclusive lower bound")
    endkey: str | None = Field(default=None, description="Inclusive upper bound")
    keys: str | list[str] | None = Field(default=None, description="Explicit ids, list or comma separated")
    descending: bool = Field(default=False, description="Reverse the id ordering")


class IndexArgs(BaseModel):
    """Arguments of ``index_documents``."""

    name: str = Field(min_length=1, description="Index name")
    fields: list[SortItem] = Field(min_length=1, description="Field names or {field: ASC|DESC} pairs")
    partial_filter: dict[str, Any] | None = Field(default=None, description="Partial filter expression")

    def field_names(self) -> list[str]:
        return [f if isinstance(f, str) else next(iter(f), "") for f in self.fields]


class BulkArgs(BaseModel):
    """Arguments of ``bulk_documents``: each document carries its own ``_id``."""

    docs: list[dict[str, Any]] = Field(min_length=1, description="Documents to upsert, insert or delete")

    @field_validator("docs")
    @classmethod
    def _require_ids(cls, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        for position, doc in enumerate(docs):
            if not isinstance(doc.get("_id"), str) or not doc["_id"]:
                raise ValueError(f"document at position {position} has no _id")
        return docs

    def ids(self) -> list[str]:
        return [d["_id"] for d in self.docs]
