# Re-run recipe validation over every saved recipe in Mongo and list the failures.
# usage: python -m recipesmith.scripts.validate_saved_recipes [limit]
import asyncio
import sys
from typing import List, Tuple

from pydantic import ValidationError

from recipesmith.db.init import close_db, init_db
from recipesmith.db.repository import KEY_SAVED
from recipesmith.db.store import KV_COLLECTION
from recipesmith.models.recipe import Recipe
from recipesmith.services.validation import recipe_problems

def _problems(doc: dict) -> List[str]:
    try:
        recipe = Recipe.from_storage(doc)
    except ValidationError as e:
        return [f"undecodable({e.error_count()})"]
    return recipe_problems(recipe)

async def main(limit: int = 50):
    db = await init_db()
    rows = await db[KV_COLLECTION].find({"key": KEY_SAVED}, {"_id": 0}).limit(limit).to_list(length=limit)
    checked = 0
    bad: List[Tuple[str, str, List[str]]] = []
    for row in rows:
        for doc in row.get("value") or []:
            checked += 1
            p = _problems(doc)
            if p:
                bad.append((doc.get("id"), doc.get("title"), p))
    print(f"owners: {len(rows)}, checked: {checked}, issues: {len(bad)}")
    for rid, title, probs in bad[:20]:
        print("-", rid, "/", title, "=>", probs)
    await close_db()

if __name__ == "__main__":
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else 50))
