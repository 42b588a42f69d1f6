# recipesmith/db/store.py
# Per-user key-value storage
# - MongoKeyValueStore: one document per (owner, key) in "kv_store"
# - MemoryKeyValueStore: process-local dict (tests, local runs without Mongo)

from __future__ import annotations
import copy
from datetime import datetime, timezone
from typing import Any, Dict, Protocol, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

KV_COLLECTION = "kv_store"


class KeyValueStore(Protocol):
    async def get(self, owner: str, key: str, default: Any = None) -> Any: ...

    async def set(self, owner: str, key: str, value: Any) -> None: ...

    async def delete(self, owner: str, key: str) -> None: ...


class MongoKeyValueStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[KV_COLLECTION]

    async def get(self, owner: str, key: str, default: Any = None) -> Any:
        doc = await self.col.find_one({"owner": owner, "key": key}, {"_id": 0, "value": 1})
        if not doc or "value" not in doc:
            return default
        return doc["value"]

    async def set(self, owner: str, key: str, value: Any) -> None:
        # last write wins
        await self.col.update_one(
            {"owner": owner, "key": key},
            {
                "$set": {"value": value, "updated_at": datetime.now(timezone.utc)},
                "$setOnInsert": {"created_at": datetime.now(timezone.utc)},
            },
            upsert=True,
        )

    async def delete(self, owner: str, key: str) -> None:
        await self.col.delete_one({"owner": owner, "key": key})


class MemoryKeyValueStore:
    def __init__(self):
        self._data: Dict[Tuple[str, str], Any] = {}

    async def get(self, owner: str, key: str, default: Any = None) -> Any:
        if (owner, key) not in self._data:
            return default
        return copy.deepcopy(self._data[(owner, key)])

    async def set(self, owner: str, key: str, value: Any) -> None:
        self._data[(owner, key)] = copy.deepcopy(value)

    async def delete(self, owner: str, key: str) -> None:
        self._data.pop((owner, key), None)
