# recipesmith/db/init.py
# Mongo connection helpers (motor, used from the startup/shutdown hooks)

from __future__ import annotations
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from recipesmith.core.config import get_settings

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None

async def init_db() -> AsyncIOMotorDatabase:
    # called once at startup; later calls reuse the connection
    global _client, _db
    if _db is not None:
        return _db

    settings = get_settings()
    _client = AsyncIOMotorClient(settings.MONGO_URI)
    _db = _client[settings.MONGO_DB]

    # raises if the server is not reachable yet
    await _db.command("ping")
    return _db

def get_db() -> AsyncIOMotorDatabase:
    # handle for request dependencies; raises before init_db()
    if _db is None:
        raise RuntimeError("MongoDB is not initialized yet.")
    return _db

async def close_db() -> None:
    global _client, _db
    if _client:
        _client.close()
    _client = None
    _db = None
