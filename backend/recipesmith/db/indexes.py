# recipesmith/db/indexes.py
# Collection indexes; awaited once from the startup hook.

from recipesmith.db.init import get_db
from recipesmith.db.store import KV_COLLECTION

async def ensure_indexes():
    db = get_db()

    # one document per (owner, key)
    await db[KV_COLLECTION].create_index([("owner", 1), ("key", 1)], unique=True)
    await db[KV_COLLECTION].create_index([("updated_at", -1)])
