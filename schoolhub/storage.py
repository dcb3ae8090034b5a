"""Keyed document store over MongoDB (Motor).

Every document carries an integer ``id`` assigned on insert; Mongo's own ``_id``
is never returned to callers. Errors raised by the driver propagate unchanged.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo import ReturnDocument

from .utils.scope import prepend_match

logger = logging.getLogger(__name__)

Sort = Sequence[Tuple[str, int]]

DEFAULT_SORT: Sort = (("id", 1),)
MAX_DOCUMENTS = 100000


def _projection(fields: Optional[Sequence[str]]) -> Dict[str, int]:
    projection = {"_id": 0}
    for field in fields or ():
        projection[field] = 1
    return projection


class DocumentStore:
    """Read/write access to the application's collections."""

    def __init__(self, database):
        self.db = database

    def _col(self, collection: str):
        return self.db[collection]

    async def next_id(self, collection: str) -> int:
        last = await self._col(collection).find_one({}, {"_id": 0, "id": 1}, sort=[("id", -1)])
        return (last or {}).get("id", 0) + 1

    async def get(self, collection: str, doc_id: int) -> Optional[Dict[str, Any]]:
        return await self._col(collection).find_one({"id": doc_id}, {"_id": 0})

    async def find_one(
        self, collection: str, query: Dict[str, Any], sort: Optional[Sort] = None
    ) -> Optional[Dict[str, Any]]:
        kwargs = {"sort": list(sort)} if sort else {}
        return await self._col(collection).find_one(query, {"_id": 0}, **kwargs)

    async def find(
        self,
        collection: str,
        query: Optional[Dict[str, Any]] = None,
        sort: Optional[Sort] = DEFAULT_SORT,
        fields: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self._col(collection).find(query or {}, _projection(fields))
        if sort:
            cursor = cursor.sort(list(sort))
        return await cursor.to_list(length=MAX_DOCUMENTS)

    async def insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        record = {"id": await self.next_id(collection), **doc}
        # insert_one mutates its argument with _id; keep the caller's copy clean
        await self._col(collection).insert_one(dict(record))
        return record

    async def insert_if_absent(self, collection: str, doc_id: int, doc: Dict[str, Any]) -> bool:
        """Create the document with a fixed id unless it exists; True when this call created it."""
        fields = {k: v for k, v in doc.items() if k != "id"}
        result = await self._col(collection).update_one(
            {"id": doc_id}, {"$setOnInsert": fields}, upsert=True)
        return result.upserted_id is not None

    async def update(self, collection: str, doc_id: int, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not patch:
            return await self.get(collection, doc_id)
        return await self._col(collection).find_one_and_update(
            {"id": doc_id},
            {"$set": patch},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, collection: str, doc_id: int) -> bool:
        result = await self._col(collection).delete_one({"id": doc_id})
        return result.deleted_count == 1

    async def count(self, collection: str, query: Optional[Dict[str, Any]] = None) -> int:
        return await self._col(collection).count_documents(query or {})

    async def group_count(
        self, collection: str, field: str, query: Optional[Dict[str, Any]] = None
    ) -> Dict[Any, int]:
        """Count documents per distinct value of ``field``."""
        pipeline = prepend_match([
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ], query or {})
        rows = await self._col(collection).aggregate(pipeline).to_list(length=MAX_DOCUMENTS)
        return {row["_id"]: row["count"] for row in rows}
