"""Translate hyper query, sort, list and bulk vocabulary into MongoDB shapes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from hypermongo.models.query import ListArgs, QueryArgs

DEFAULT_QUERY_LIMIT = 25

_BULK_MARKERS = ("_deleted", "_update")


def map_sort(items: Iterable[Any]) -> dict[str, int]:
    """Map hyper sort items to a MongoDB sort/index spec.

    A bare field name sorts ascending; ``{field: "ASC" | "DESC"}`` maps to
    ``1`` / ``-1``. Anything else is skipped.

    Example:
        >>> map_sort(["foo", {"bar": "DESC"}])
        {'foo': 1, 'bar': -1}
    """
    spec: dict[str, int] = {}
    for item in items:
        if isinstance(item, str):
            spec[item] = 1
        elif isinstance(item, Mapping) and item:
            field, direction = next(iter(item.items()))
            spec[field] = -1 if direction == "DESC" else 1
    return spec


def query_options(query: QueryArgs) -> dict[str, Any]:
    """Build ``find`` options (limit, projection, sort) from query args."""
    options: dict[str, Any] = {"limit": query.limit or DEFAULT_QUERY_LIMIT}

    if query.fields:
        # Mongo returns _id unless it is explicitly excluded
        projection: dict[str, int] = {"_id": 0}
        projection.update({field: 1 for field in query.fields})
        options["projection"] = projection

    if query.sort:
        options["sort"] = map_sort(query.sort)

    return options


def to_bulk_operations(docs: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Turn hyper bulk documents into MongoDB bulk-write descriptors.

    Documents flagged ``_deleted`` become ``deleteOne``; every other
    document becomes an upserting ``replaceOne`` with the markers removed.
    """
    operations: list[dict[str, Any]] = []
    for doc in docs:
        doc_id = doc.get("_id")
        if doc.get("_deleted"):
            operations.append({"deleteOne": {"filter": {"_id": doc_id}}})
        else:
            replacement = {k: v for k, v in doc.items() if k not in _BULK_MARKERS}
            operations.append(
                {
                    "replaceOne": {
                        "filter": {"_id": doc_id},
                        "replacement": replacement,
                        "upsert": True,
                    }
                }
            )
    return operations


def list_filter(args: ListArgs) -> dict[str, Any]:
    """Build the ``_id`` range / membership filter for ``list_documents``."""
    id_filter: dict[str, Any] = {}
    if args.startkey:
        id_filter["$gte"] = args.startkey
    if args.endkey:
        id_filter["$lte"] = args.endkey
    if args.keys:
        keys = args.keys.split(",") if isinstance(args.keys, str) else list(args.keys)
        id_filter["$in"] = keys
    return {"_id": id_filter} if id_filter else {}


def list_options(args: ListArgs) -> dict[str, Any]:
    """Build ``find`` options for ``list_documents``; always ordered by ``_id``."""
    options: dict[str, Any] = {"sort": map_sort([{"_id": "DESC" if args.descending else "ASC"}])}
    if args.limit:
        options["limit"] = int(args.limit)
    return options
