# recipesmith/core/config.py
# Environment loading (.env): API keys, endpoints, tuning constants

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "recipesmith"
    MONGO_CONNECT_RETRIES: int = 20

    # recipe text generation
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4.1-mini"
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_MAX_TOKENS: int = 2000

    # dish image generation
    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_IMAGE_MODEL: str = "gemini-2.5-flash-image"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    # image storage
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: str = "us-east-1"
    AWS_BUCKET_NAME: str = "recipesmith-images"

    # ingredient search
    USDA_API_KEY: str = "DEMO_KEY"  # DEMO_KEY is rate limited
    SPOONACULAR_API_KEY: Optional[str] = None
    SEARCH_DEBOUNCE_SECONDS: float = 0.3
    SEARCH_SESSION_LIMIT: int = 1000

    # sodium/cholesterol estimation tuning
    SODIUM_ESTIMATE_MAX_MG: float = 5000.0
    CHOLESTEROL_ESTIMATE_MAX_MG: float = 1000.0
    SODIUM_TAG_INCREMENT_MG: float = 400.0
    CHOLESTEROL_TAG_INCREMENT_MG: float = 120.0

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
