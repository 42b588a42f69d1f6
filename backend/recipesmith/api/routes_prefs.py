# recipesmith/api/routes_prefs.py
# Generation preferences: extra details and the ingredient slots of the home screen

from __future__ import annotations

from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError

from recipesmith.api.routes_recipes import db_error
from recipesmith.core.deps import get_repository
from recipesmith.db.repository import RecipeRepository
from recipesmith.models.preferences import ExtraDetails
from recipesmith.models.schemas import IngredientsState

router = APIRouter(prefix="/preferences", tags=["preferences"])

@router.get("", response_model=ExtraDetails)
async def get_preferences(repo: RecipeRepository = Depends(get_repository)):
    try:
        return await repo.get_extra_details()
    except PyMongoError as e:
        raise db_error(e)

@router.put("", response_model=ExtraDetails)
async def save_preferences(payload: ExtraDetails, repo: RecipeRepository = Depends(get_repository)):
    # whole object replaced; last write wins
    try:
        return await repo.set_extra_details(payload)
    except PyMongoError as e:
        raise db_error(e)

@router.get("/ingredients", response_model=IngredientsState)
async def get_ingredients(repo: RecipeRepository = Depends(get_repository)):
    try:
        return IngredientsState(slots=await repo.get_slots(), only_these=await repo.get_only_these())
    except PyMongoError as e:
        raise db_error(e)

@router.put("/ingredients", response_model=IngredientsState)
async def save_ingredients(payload: IngredientsState, repo: RecipeRepository = Depends(get_repository)):
    try:
        await repo.set_slots(payload.slots)
        await repo.set_only_these(payload.only_these)
    except PyMongoError as e:
        raise db_error(e)
    return payload
