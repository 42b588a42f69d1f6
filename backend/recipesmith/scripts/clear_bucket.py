# Remove every dish image from the configured S3 bucket.
# usage: python -m recipesmith.scripts.clear_bucket
import asyncio

from recipesmith.core.deps import get_object_store

async def main():
    store = get_object_store()
    n = await store.clear()
    print(f"bucket: {store.bucket}, deleted: {n}")

if __name__ == "__main__":
    asyncio.run(main())
