# Shared dependencies (anonymous user cookie, service wiring)
# Services hold only configuration; routers receive them through Depends.
import uuid
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response

from recipesmith.core.config import get_settings
from recipesmith.db.init import get_db
from recipesmith.db.repository import RecipeRepository
from recipesmith.db.store import KeyValueStore, MongoKeyValueStore
from recipesmith.services.image_gemini import ImageClient
from recipesmith.services.ingredient_search import IngredientSearchService, LatestSearch, SearchSessions
from recipesmith.services.llm_openai import GenerationClient
from recipesmith.services.nutrition import NutritionEstimator, NutritionTuning
from recipesmith.services.recipe_generator import RecipeGenerator
from recipesmith.services.storage_s3 import S3ObjectStore

COOKIE = "anon_id"
MAX_AGE = 60 * 60 * 24 * 365 * 2  # 2 years

def get_or_set_anon_id(request: Request, response: Response) -> str:
    # issue a cookie on first contact, reuse it afterwards
    v = request.cookies.get(COOKIE)
    if not v:
        v = uuid.uuid4().hex
        response.set_cookie(COOKIE, v, max_age=MAX_AGE, httponly=True, samesite="lax")
    return v

# ------------------------------
# storage
# ------------------------------
def get_store() -> KeyValueStore:
    try:
        return MongoKeyValueStore(get_db())
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=f"DB not ready: {e}")

@lru_cache
def get_object_store() -> S3ObjectStore:
    s = get_settings()
    return S3ObjectStore(
        bucket=s.AWS_BUCKET_NAME,
        region=s.AWS_REGION,
        access_key_id=s.AWS_ACCESS_KEY_ID,
        secret_access_key=s.AWS_SECRET_ACCESS_KEY,
    )

def get_repository(
    anon_id: str = Depends(get_or_set_anon_id),
    store: KeyValueStore = Depends(get_store),
    images: S3ObjectStore = Depends(get_object_store),
) -> RecipeRepository:
    return RecipeRepository(store, anon_id, images=images)

# ------------------------------
# generation
# ------------------------------
@lru_cache
def get_generation_client() -> GenerationClient:
    s = get_settings()
    return GenerationClient(
        api_key=s.OPENAI_API_KEY,
        model=s.OPENAI_MODEL,
        temperature=s.OPENAI_TEMPERATURE,
        max_tokens=s.OPENAI_MAX_TOKENS,
    )

@lru_cache
def get_image_client() -> ImageClient:
    s = get_settings()
    return ImageClient(api_key=s.GOOGLE_API_KEY, model=s.GEMINI_IMAGE_MODEL, base_url=s.GEMINI_BASE_URL)

def get_generator(
    llm: GenerationClient = Depends(get_generation_client),
    images: ImageClient = Depends(get_image_client),
    store: S3ObjectStore = Depends(get_object_store),
) -> RecipeGenerator:
    return RecipeGenerator(llm, images=images, store=store)

@lru_cache
def get_nutrition_estimator() -> NutritionEstimator:
    return NutritionEstimator(NutritionTuning.from_settings(get_settings()))

# ------------------------------
# ingredient search
# ------------------------------
@lru_cache
def get_search_service() -> IngredientSearchService:
    s = get_settings()
    return IngredientSearchService(usda_api_key=s.USDA_API_KEY, spoonacular_api_key=s.SPOONACULAR_API_KEY)

def get_search_session(
    request: Request,
    anon_id: str = Depends(get_or_set_anon_id),
    service: IngredientSearchService = Depends(get_search_service),
) -> LatestSearch:
    # one LatestSearch per user so a newer query supersedes only that user's older ones
    sessions: Optional[SearchSessions] = getattr(request.app.state, "search_sessions", None)
    if sessions is None:
        s = get_settings()
        sessions = request.app.state.search_sessions = SearchSessions(
            service, debounce=s.SEARCH_DEBOUNCE_SECONDS, limit=s.SEARCH_SESSION_LIMIT,
        )
    return sessions.for_user(anon_id)
