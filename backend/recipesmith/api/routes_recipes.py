# recipesmith/api/routes_recipes.py
# Recipe generation (ingredients / popular dish), saved collection, edits

from __future__ import annotations
from typing import Awaitable, List
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from recipesmith.core.deps import get_generator, get_repository
from recipesmith.db.repository import RecipeRepository
from recipesmith.models.preferences import GenerationRequest
from recipesmith.models.recipe import Recipe
from recipesmith.models.schemas import DeleteIn, DeleteOut, EditIn, GenerateIn, PopularGenerateIn, PopularOut
from recipesmith.services.errors import RecipeAPIError
from recipesmith.services.llm_openai import LLMNotReady
from recipesmith.services.prompt_builder import POPULAR_DISHES
from recipesmith.services.recipe_generator import RecipeGenerator

log = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])

# the client only offers "try again", so no detail beyond this
GENERATION_FAILED = "Failed to generate recipe. Please try again."

# ------------------------------
# helpers
# ------------------------------
async def generated(call: Awaitable[Recipe]) -> Recipe:
    try:
        return await call
    except LLMNotReady as e:
        raise HTTPException(status_code=503, detail=str(e))
    except RecipeAPIError as e:
        log.warning("generation failed: %s: %s", type(e).__name__, e)
        raise HTTPException(status_code=502, detail=GENERATION_FAILED)

def db_error(e: Exception) -> HTTPException:
    log.error("storage error: %s", e)
    return HTTPException(status_code=503, detail=f"DB error: {e}")

async def saved_or_404(repo: RecipeRepository, rid: str) -> Recipe:
    try:
        recipe = await repo.get_saved(rid)
    except PyMongoError as e:
        raise db_error(e)
    if recipe is None:
        raise HTTPException(status_code=404, detail="recipe not found")
    return recipe

async def persist(repo: RecipeRepository, recipe: Recipe) -> Recipe:
    try:
        return await repo.save(recipe)
    except PyMongoError as e:
        raise db_error(e)

# ------------------------------
# generation
# ------------------------------
@router.get("/popular", response_model=PopularOut)
async def popular_dishes(repo: RecipeRepository = Depends(get_repository)):
    try:
        dish, notes = await repo.get_popular()
    except PyMongoError as e:
        raise db_error(e)
    return PopularOut(dishes=POPULAR_DISHES, selected=dish, notes=notes)

@router.post("/generate", response_model=Recipe)
async def generate_recipe(
    payload: GenerateIn,
    repo: RecipeRepository = Depends(get_repository),
    generator: RecipeGenerator = Depends(get_generator),
):
    """Recipe from ingredients. Unset fields fall back to the user's stored state."""
    try:
        ingredients = payload.ingredients
        if ingredients is None:
            ingredients = [s.display_name for s in await repo.get_slots() if s.display_name]
        allow_other = payload.allow_other_ingredients
        if allow_other is None:
            allow_other = not await repo.get_only_these()
        details = payload.details or await repo.get_extra_details()
    except PyMongoError as e:
        raise db_error(e)

    try:
        request = GenerationRequest(
            ingredients=ingredients,
            allow_other_ingredients=allow_other,
            details=details,
        )
    except ValidationError:
        raise HTTPException(status_code=422, detail="at least one ingredient is required")

    recipe = await generated(generator.generate(request, with_image=payload.with_image))
    if payload.save:
        recipe = await persist(repo, recipe)
    return recipe

@router.post("/generate/popular", response_model=Recipe)
async def generate_popular(
    payload: PopularGenerateIn,
    repo: RecipeRepository = Depends(get_repository),
    generator: RecipeGenerator = Depends(get_generator),
):
    try:
        await repo.set_popular(payload.dish, payload.notes)
        details = await repo.get_extra_details()
    except PyMongoError as e:
        raise db_error(e)

    request = GenerationRequest(dish=payload.dish, dish_notes=payload.notes, details=details)
    recipe = await generated(generator.generate(request, with_image=payload.with_image))
    if payload.save:
        recipe = await persist(repo, recipe)
    return recipe

# ------------------------------
# saved collection
# ------------------------------
@router.get("/saved", response_model=List[Recipe])
async def list_saved(repo: RecipeRepository = Depends(get_repository)):
    try:
        return await repo.list_saved()
    except PyMongoError as e:
        raise db_error(e)

@router.get("/saved/{rid}", response_model=Recipe)
async def get_saved(rid: str, repo: RecipeRepository = Depends(get_repository)):
    return await saved_or_404(repo, rid)

@router.put("/saved", response_model=Recipe)
async def save_recipe(recipe: Recipe, repo: RecipeRepository = Depends(get_repository)):
    # same id -> replaced in place
    return await persist(repo, recipe)

@router.delete("/saved/{rid}", response_model=DeleteOut)
async def delete_saved(rid: str, repo: RecipeRepository = Depends(get_repository)):
    try:
        n = await repo.delete([rid])
    except PyMongoError as e:
        raise db_error(e)
    if n == 0:
        raise HTTPException(status_code=404, detail="recipe not found")
    return DeleteOut(deleted=n)

@router.post("/saved/delete", response_model=DeleteOut)
async def delete_many(payload: DeleteIn, repo: RecipeRepository = Depends(get_repository)):
    try:
        n = await repo.delete(payload.ids)
    except PyMongoError as e:
        raise db_error(e)
    return DeleteOut(deleted=n)

@router.post("/saved/{rid}/edit", response_model=Recipe)
async def edit_saved(
    rid: str,
    payload: EditIn,
    repo: RecipeRepository = Depends(get_repository),
    generator: RecipeGenerator = Depends(get_generator),
):
    recipe = await saved_or_404(repo, rid)
    edited = await generated(generator.edit(recipe, payload.changes))
    return await persist(repo, edited)
