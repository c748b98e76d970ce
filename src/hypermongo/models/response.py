"""Port response models — success payloads and the normalized error value.

Every public data-port operation resolves to one of these shapes. Callers
tell success from failure by the ``ok`` flag; failures always carry an
HTTP-style ``status`` and a human readable ``msg``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field


class HyperErr(BaseModel):
    """Normalized error returned by every failing port operation."""

    model_config = {"frozen": True}

    ok: Literal[False] = Field(default=False, description="Always false for errors")
    status: int = Field(default=500, description="HTTP-style status code")
    msg: str = Field(default="an error occurred", description="Human readable error message")


class OkResponse(BaseModel):
    """Bare success acknowledgement."""

    ok: Literal[True] = True


class IdResponse(BaseModel):
    """Success acknowledgement for a single document."""

    ok: Literal[True] = True
    id: str = Field(description="Identifier of the affected document")


class DocsResponse(BaseModel):
    """Documents returned by a query or list operation."""

    ok: Literal[True] = True
    docs: list[dict[str, Any]] = Field(default_factory=list, description="Matching documents")


class BulkResponse(BaseModel):
    """Per-document results of a bulk write."""

    ok: Literal[True] = True
    results: list[IdResponse] = Field(default_factory=list, description="One result per submitted document")


def is_hyper_err(value: Any) -> bool:
    """Return True if *value* is already a normalized error.

    Accepts ``HyperErr`` instances as well as plain mappings shaped like one
    (``ok`` is ``False`` and ``status`` is an integer).
    """
    if isinstance(value, HyperErr):
        return True
    if isinstance(value, Mapping):
        return value.get("ok") is False and isinstance(value.get("status"), int) and "msg" in value
    return False
