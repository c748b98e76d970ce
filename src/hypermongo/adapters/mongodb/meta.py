"""Existence cache — explicit database lifecycle on top of MongoDB.

MongoDB creates databases and collections implicitly on first write and
has no dependable "does this database exist" answer of its own. To give
the hyper port strict semantics (404 when a database is missing, 409 when
it already exists), every logical database gets a record in a hidden
control collection.

The control collection is read once per process and then tracked in
memory: every create/remove updates the record and the cache together.
Another process mutating the control collection is not detected, and
concurrent create/remove calls for the same name are not serialized.
"""

from __future__ import annotations

import logging

from hypermongo.adapters.base.exceptions import HyperError
from hypermongo.clients.base.client import StoreClient, StoreCollection
from hypermongo.models.meta import DatabaseMeta
from hypermongo.models.response import OkResponse

logger = logging.getLogger(__name__)

DEFAULT_META_DB_NAME = "meta-cl1ld3td500003e68rc2f8o6x"


class MetaDb:
    """Registry of logical databases, persisted in a control collection.

    Args:
        client: Store client used to reach the control collection.
        meta_db_name: Name of the control database and collection. This
            name is reserved and can never be used as a logical database.
    """

    def __init__(self, client: StoreClient, meta_db_name: str = DEFAULT_META_DB_NAME) -> None:
        self._client = client
        self.meta_db_name = meta_db_name
        self._databases: dict[str, DatabaseMeta] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def _collection(self) -> StoreCollection:
        return self._client.database(self.meta_db_name).collection(self.meta_db_name)

    async def load(self) -> dict[str, DatabaseMeta]:
        """Read every database record once and cache it.

        Later calls return the cache without touching the store. A failed
        read propagates and leaves the cache unloaded, so the next call
        retries.
        """
        if self._loaded:
            return self._databases

        docs = await self._collection.find({"type": "database"})
        self._databases = {meta.name: meta for meta in (DatabaseMeta.model_validate(doc) for doc in docs)}
        self._loaded = True
        logger.info("Loaded %d database records from %s", len(self._databases), self.meta_db_name)
        return self._databases

    async def get(self, name: str) -> DatabaseMeta:
        """Return the record for ``name``.

        Raises:
            HyperError: 422 if ``name`` is the reserved control name,
                404 if the database does not exist.
        """
        if name == self.meta_db_name:
            raise HyperError(422, f"{name} is a reserved db name")

        databases = await self.load()
        if name not in databases:
            raise HyperError(404, "database does not exist")
        return databases[name]

    async def create(self, name: str) -> DatabaseMeta:
        """Persist a record for ``name`` and add it to the cache.

        Raises:
            HyperError: 409 if the database already exists; any other
                failure of ``get`` (e.g. 422) unchanged.
        """
        try:
            await self.get(name)
        except HyperError as e:
            if e.status != 404:
                raise
        else:
            raise HyperError(409, "database already exists")

        meta = DatabaseMeta.for_name(name)
        await self._collection.insert_one(meta.to_document())
        self._databases[name] = meta
        logger.debug("Created database record: %s", name)
        return meta

    async def remove(self, name: str) -> OkResponse:
        """Delete the record for ``name`` and evict it from the cache.

        Raises:
            HyperError: 404 if the database does not exist.
        """
        await self.get(name)
        await self._collection.delete_one({"_id": name})
        self._databases.pop(name, None)
        logger.debug("Removed database record: %s", name)
        return OkResponse()
