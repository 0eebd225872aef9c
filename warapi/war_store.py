"""MongoDB-backed read access to the ``wars`` collection.

The store is the only component that talks to the database. It issues
simple filter/sort/skip/limit/count/find-one queries and never writes.
Any ``pymongo`` failure is re-raised as :class:`StoreError` so routers
can answer with a generic 500 without leaking driver details.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import motor.motor_asyncio
from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from warcore.config import DEFAULT_DATABASE_NAME, WARS_COLLECTION
from warcore.exceptions import StoreError

logger = logging.getLogger(__name__)

WarDocument = Dict[str, Any]

FINALIZED = {"finalized": True}


def to_json_document(document: Optional[WarDocument]) -> Any:
    """Render a raw store document as JSON-safe data.

    ``_id`` ObjectIds become strings and datetimes become ISO-8601.
    """
    return jsonable_encoder(document, custom_encoder={ObjectId: str})


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        raise StoreError(f"Failed to {action}: {e}") from e


class WarStore:
    """Async queries over the wars collection.

    Args:
        collection: A motor collection (or anything with the same
            ``find``/``find_one``/``count_documents`` surface)
        client: The owning motor client, closed by :meth:`close`
    """

    # Client settings
    SERVER_SELECTION_TIMEOUT_MS = 10_000
    MAX_POOL_SIZE = 100

    def __init__(
        self,
        collection: motor.motor_asyncio.AsyncIOMotorCollection,
        client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None,
    ):
        self._collection = collection
        self._client = client

    @classmethod
    def connect(cls, uri: str, database_name: str = DEFAULT_DATABASE_NAME) -> "WarStore":
        """Create a store bound to ``database_name`` on the server at ``uri``.

        Motor connects lazily; call :meth:`ping` to verify connectivity.
        """
        client = motor.motor_asyncio.AsyncIOMotorClient(
            uri,
            serverSelectionTimeoutMS=cls.SERVER_SELECTION_TIMEOUT_MS,
            maxPoolSize=cls.MAX_POOL_SIZE,
        )
        database = client[database_name]
        return cls(database[WARS_COLLECTION], client=client)

    async def ping(self) -> None:
        """Round-trip to the server, raising StoreError if unreachable."""
        if self._client is None:
            return
        with _store_errors("reach the database"):
            await self._client.admin.command("ping")
        logger.info("Connected to MongoDB")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Closed MongoDB connection")

    async def find_latest_war(self) -> Optional[WarDocument]:
        """Return the war with the newest preparation start, finalized or not."""
        with _store_errors("fetch the current war"):
            return await self._collection.find_one(
                {}, sort=[("preparationStartTime", DESCENDING)]
            )

    async def find_war(self, war_id: str) -> Optional[WarDocument]:
        with _store_errors(f"fetch war {war_id}"):
            return await self._collection.find_one({"warId": war_id})

    async def find_finalized_wars(
        self,
        count: int,
        war_type: Optional[str] = None,
    ) -> List[WarDocument]:
        """Return up to ``count`` finalized wars, newest end time first.

        Args:
            count: Maximum number of wars
            war_type: Optional exact-match filter on ``warType``
        """
        query: Dict[str, Any] = dict(FINALIZED)
        if war_type:
            query["warType"] = war_type

        with _store_errors("fetch finalized wars"):
            cursor = self._collection.find(query).sort("endTime", DESCENDING).limit(count)
            return await cursor.to_list(length=None)

    async def find_member_wars(self, member_tag: str, count: int) -> List[WarDocument]:
        """Return up to ``count`` finalized wars the member took part in."""
        query = {**FINALIZED, "participants.tag": member_tag}

        with _store_errors(f"fetch wars for member {member_tag}"):
            cursor = self._collection.find(query).sort("endTime", DESCENDING).limit(count)
            return await cursor.to_list(length=None)

    async def list_finalized_wars(self, skip: int, limit: int) -> List[WarDocument]:
        """Return one page of finalized wars, newest end time first."""
        with _store_errors("list wars"):
            cursor = (
                self._collection.find(dict(FINALIZED))
                .sort("endTime", DESCENDING)
                .skip(skip)
                .limit(limit)
            )
            return await cursor.to_list(length=None)

    async def count_finalized_wars(self) -> int:
        with _store_errors("count wars"):
            return await self._collection.count_documents(dict(FINALIZED))
