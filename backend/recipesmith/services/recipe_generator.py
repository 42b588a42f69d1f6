# recipesmith/services/recipe_generator.py
# Generation pipeline: prompt -> generate -> validate -> (best effort) image
# Generation errors propagate to the caller; the image stage only logs.

from __future__ import annotations
import base64
import binascii
import logging
from typing import Optional

from recipesmith.models.preferences import GenerationRequest
from recipesmith.models.recipe import Recipe
from recipesmith.services.errors import DecodingError, RecipeAPIError
from recipesmith.services.image_gemini import ImageClient
from recipesmith.services.llm_openai import GenerationClient
from recipesmith.services.prompt_builder import (
    build_edit_prompt,
    build_prompt,
    build_recommendation_prompt,
)
from recipesmith.services.storage_s3 import S3ObjectStore
from recipesmith.services.utils import make_image_filename

log = logging.getLogger(__name__)


class RecipeGenerator:
    def __init__(
        self,
        llm: GenerationClient,
        images: Optional[ImageClient] = None,
        store: Optional[S3ObjectStore] = None,
    ):
        self.llm = llm
        self.images = images
        self.store = store

    async def attach_image(self, recipe: Recipe) -> Recipe:
        """Recipe with image_name/image_url set, or unchanged if any step fails."""
        desc = (recipe.image_description or "").strip()
        if not desc or self.images is None or self.store is None:
            return recipe
        try:
            b64 = await self.images.generate_image(desc)
            try:
                data = base64.b64decode(b64, validate=True)
            except (binascii.Error, ValueError) as e:
                raise DecodingError("image payload is not base64") from e
            name = make_image_filename(recipe.title)
            url = await self.store.upload(data, name, "image/png")
        except RecipeAPIError as e:
            log.warning("image stage skipped for %r: %s: %s", recipe.title, type(e).__name__, e)
            return recipe
        return recipe.model_copy(update={"image_name": name, "image_url": url})

    async def generate(self, request: GenerationRequest, with_image: bool = True) -> Recipe:
        recipe = await self.llm.generate_recipe_data(build_prompt(request))
        if with_image:
            recipe = await self.attach_image(recipe)
        return recipe

    async def edit(self, recipe: Recipe, changes: str) -> Recipe:
        regenerated = await self.llm.generate_recipe_data(build_edit_prompt(recipe, changes))
        return recipe.with_regenerated_text(regenerated)

    async def apply_recommendation(self, recipe: Recipe, recommendation: str) -> Recipe:
        regenerated = await self.llm.generate_recipe_data(
            build_recommendation_prompt(recipe, recommendation)
        )
        return recipe.with_regenerated_text(regenerated)
