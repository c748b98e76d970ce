"""MongoDB data adapter — hyper data port over a MongoDB store client.

Each operation first confirms the logical database through ``MetaDb``,
then issues the native call on the collection that shares the
database's name. Any failure, whether a business rule or a store error,
is mapped to a ``HyperErr`` and returned rather than raised.

Usage::

    client = NativeClient("mongodb://127.0.0.1:27017")
    await client.initialize()
    adapter = MongoDataAdapter(client=client, meta=MetaDb(client))

    await adapter.create_database("movies")
    res = await adapter.create_document("movies", "1-ghostbusters", {"title": "Ghostbusters"})
    if not res.ok:
        print(res.status, res.msg)
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from hypermongo.adapters.base.adapter import DataAdapter
from hypermongo.adapters.base.exceptions import HyperError
from hypermongo.adapters.mongodb.errors import handle_hyper_err, mongo_err_to_hyper_err
from hypermongo.adapters.mongodb.meta import MetaDb
from hypermongo.adapters.mongodb.translation import (
    list_filter,
    list_options,
    map_sort,
    query_options,
    to_bulk_operations,
)
from hypermongo.clients.base.client import StoreClient, StoreCollection
from hypermongo.models.query import BulkArgs, IndexArgs, ListArgs, QueryArgs
from hypermongo.models.response import (
    BulkResponse,
    DocsResponse,
    HyperErr,
    IdResponse,
    OkResponse,
)

logger = logging.getLogger(__name__)

_ArgsT = TypeVar("_ArgsT", bound=BaseModel)

# Temporary document written by create_database so MongoDB materializes
# the database and collection.
INFO_DOC_ID = "info"


def _parse_args(model: type[_ArgsT], value: Any) -> _ArgsT:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value or {})
    except ValidationError as e:
        raise HyperError(400, f"invalid arguments: {e.error_count()} validation error(s)") from e


class MongoDataAdapter(DataAdapter):
    """Data adapter for MongoDB.

    Args:
        client: Native or Atlas store client; the adapter uses only the
            ``StoreClient`` capability interface.
        meta: Existence cache sharing the same client.
    """

    def __init__(self, client: StoreClient, meta: MetaDb) -> None:
        self._client = client
        self._meta = meta

    @property
    def name(self) -> str:
        return "mongodb"

    def _collection(self, db: str) -> StoreCollection:
        return self._client.database(db).collection(db)

    def _fail(self, err: Exception, **context: Any) -> HyperErr:
        if not isinstance(err, HyperError):
            logger.debug("Store error during data operation", exc_info=err)
        return handle_hyper_err(mongo_err_to_hyper_err(context)(err))

    # ── Databases ────────────────────────────────────────────────────────

    async def create_database(self, name: str) -> OkResponse | HyperErr:
        subject = f"database {name}"
        try:
            try:
                await self._meta.get(name)
            except HyperError as e:
                if e.status != 404:
                    raise
            else:
                raise HyperError(409, "database already exists")

            collection = self._collection(name)
            await collection.insert_one(
                {"_id": INFO_DOC_ID, "type": "_ADMIN", "created": datetime.now(UTC).isoformat()}
            )
            await collection.delete_one({"_id": INFO_DOC_ID})
            await self._meta.create(name)
        except Exception as e:
            return self._fail(e, subject=subject, db=subject)

        logger.info("Created database: %s", name)
        return OkResponse()

    async def remove_database(self, name: str) -> OkResponse | HyperErr:
        subject = f"database {name}"
        try:
            await self._meta.get(name)
            await self._client.database(name).drop_database()
            await self._meta.remove(name)
        except Exception as e:
            return self._fail(e, subject=subject, db=subject)

        logger.info("Removed database: %s", name)
        return OkResponse()

    # ── Documents ────────────────────────────────────────────────────────

    async def create_document(self, db: str, id: str, doc: dict[str, Any]) -> IdResponse | HyperErr:
        subject = f"document with _id {id}"
        try:
            if not doc:
                raise HyperError(400, "document empty")
            await self._meta.get(db)
            await self._collection(db).insert_one({**doc, "_id": id})
        except Exception as e:
            return self._fail(e, subject=subject, db="database")
        return IdResponse(id=id)

    async def retrieve_document(self, db: str, id: str) -> dict[str, Any] | HyperErr:
        subject = f"document with _id {id}"
        try:
            await self._meta.get(db)
            doc = await self._collection(db).find_one({"_id": id})
            if doc is None:
                raise HyperError(404, f"document with _id {id} does not exist")
        except Exception as e:
            return self._fail(e, subject=subject, db="database")
        return doc

    async def update_document(self, db: str, id: str, doc: dict[str, Any]) -> IdResponse | HyperErr:
        subject = f"document with _id {id}"
        try:
            await self._meta.get(db)
            result = await self._collection(db).replace_one({"_id": id}, doc, upsert=True)
            # exactly one document must hold the replacement afterwards
            if result.matched_count != 1 and result.upserted_id is None:
                raise HyperError(404, f"Could not update document with _id {id}")
        except Exception as e:
            return self._fail(e, subject=subject, db="database")
        return IdResponse(id=id)

    async def remove_document(self, db: str, id: str) -> IdResponse | HyperErr:
        subject = f"document with _id {id}"
        try:
            await self._meta.get(db)
            result = await self._collection(db).delete_one({"_id": id})
            if result.deleted_count != 1:
                raise HyperError(404, f"document with _id {id} does not exist")
        except Exception as e:
            return self._fail(e, subject=subject, db="database")
        return IdResponse(id=id)

    async def query_documents(self, db: str, query: QueryArgs | dict[str, Any]) -> DocsResponse | HyperErr:
        try:
            args = _parse_args(QueryArgs, query)
            await self._meta.get(db)
            docs = await self._collection(db).find(args.selector, **query_options(args))
        except Exception as e:
            return self._fail(e, subject="database", db="database")
        return DocsResponse(docs=docs)

    async def index_documents(
        self,
        db: str,
        name: str,
        fields: list[Any],
        partial_filter: dict[str, Any] | None = None,
    ) -> OkResponse | HyperErr:
        subject = "index"
        try:
            await self._meta.get(db)
            args = _parse_args(IndexArgs, {"name": name, "fields": fields, "partial_filter": partial_filter})
            subject = f"index with fields {', '.join(args.field_names())}"
            await self._collection(db).create_index(
                map_sort(args.fields),
                name=args.name,
                partial_filter_expression=args.partial_filter,
            )
        except Exception as e:
            return self._fail(e, subject=subject, db="database")
        return OkResponse()

    async def list_documents(self, db: str, args: ListArgs | dict[str, Any] | None = None) -> DocsResponse | HyperErr:
        try:
            args = _parse_args(ListArgs, args)
            await self._meta.get(db)
            docs = await self._collection(db).find(list_filter(args), **list_options(args))
        except Exception as e:
            return self._fail(e, subject="database", db="database")
        return DocsResponse(docs=docs)

    async def bulk_documents(self, db: str, docs: list[dict[str, Any]]) -> BulkResponse | HyperErr:
        subject = "docs"
        try:
            await self._meta.get(db)
            args = _parse_args(BulkArgs, {"docs": docs})
            ids = args.ids()
            subject = f"docs with ids {', '.join(ids)}"
            await self._collection(db).bulk_write(to_bulk_operations(args.docs))
        except Exception as e:
            return self._fail(e, subject=subject, db="database")
        return BulkResponse(results=[IdResponse(id=i) for i in ids])
