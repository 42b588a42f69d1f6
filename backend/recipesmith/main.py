# recipesmith/main.py
# FastAPI app setup; each router defines its own prefix

from __future__ import annotations

import logging
from asyncio import sleep
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recipesmith.api.routes_ingredients import router as ingredients_router
from recipesmith.api.routes_nutrition import router as nutrition_router
from recipesmith.api.routes_prefs import router as prefs_router
from recipesmith.api.routes_recipes import router as recipes_router
from recipesmith.core.config import get_settings
from recipesmith.db.indexes import ensure_indexes
from recipesmith.db.init import close_db, get_db, init_db

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("recipesmith")

app = FastAPI(title="RecipeSmith - API", version="0.1.0")

# local web client + cookie passthrough
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup() -> None:
    # 1) connect to Mongo (MONGO_CONNECT_RETRIES attempts, 1s apart)
    db = None
    for i in range(settings.MONGO_CONNECT_RETRIES):
        try:
            db = await init_db()
            log.info("[startup] db ready")
            break
        except Exception as e:
            log.warning("[startup] db init retry %d: %s", i + 1, e)
            await sleep(1.0)
    if db is None:
        log.error("[startup] db init failed after retries")
        return

    # 2) indexes
    try:
        await ensure_indexes()
        log.info("[startup] indexes ensured")
    except Exception as e:
        log.error("[startup] ensure_indexes failed: %s", e)

@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_db()

@app.get("/")
async def root():
    return {"status": "ok"}

@app.get("/health")
async def health():
    ok = {"status": "ok", "db": "skip"}
    try:
        db = get_db()
        await db.command("ping")
        ok["db"] = "ok"
    except RuntimeError:
        ok["db"] = "not initialized"
    except Exception as e:
        ok["db"] = f"error: {e}"
    return ok

app.include_router(recipes_router)
app.include_router(prefs_router)
app.include_router(nutrition_router)
app.include_router(ingredients_router)
