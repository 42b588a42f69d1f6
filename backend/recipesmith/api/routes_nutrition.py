# recipesmith/api/routes_nutrition.py
# Nutrition analytics over single recipes and the saved collection, diet plan

from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError

from recipesmith.api.routes_recipes import db_error, generated, persist, saved_or_404
from recipesmith.core.deps import get_generator, get_nutrition_estimator, get_repository
from recipesmith.db.repository import RecipeRepository
from recipesmith.models.recipe import Recipe
from recipesmith.models.schemas import DietToggleOut, NutritionReport, RecommendationIn, TrendsOut
from recipesmith.services.nutrition import NutritionEstimator
from recipesmith.services.recipe_generator import RecipeGenerator

router = APIRouter(prefix="/nutrition", tags=["nutrition"])

def build_report(recipe: Recipe, estimator: NutritionEstimator) -> NutritionReport:
    data = estimator.calculate(recipe)
    return NutritionReport(
        recipe_id=recipe.id,
        title=recipe.title,
        nutrition=data,
        insights=estimator.health_insights(data),
        recommendations=estimator.dietary_recommendations(data),
    )

@router.post("/analyze", response_model=NutritionReport)
async def analyze(recipe: Recipe, estimator: NutritionEstimator = Depends(get_nutrition_estimator)):
    return build_report(recipe, estimator)

@router.get("/saved/{rid}", response_model=NutritionReport)
async def analyze_saved(
    rid: str,
    repo: RecipeRepository = Depends(get_repository),
    estimator: NutritionEstimator = Depends(get_nutrition_estimator),
):
    return build_report(await saved_or_404(repo, rid), estimator)

@router.post("/saved/{rid}/apply", response_model=Recipe)
async def apply_recommendation(
    rid: str,
    payload: RecommendationIn,
    repo: RecipeRepository = Depends(get_repository),
    generator: RecipeGenerator = Depends(get_generator),
):
    """Regenerate a saved recipe around one recommendation; replaces the saved copy."""
    recipe = await saved_or_404(repo, rid)
    updated = await generated(generator.apply_recommendation(recipe, payload.recommendation))
    return await persist(repo, updated)

@router.get("/trends", response_model=TrendsOut)
async def trends(
    repo: RecipeRepository = Depends(get_repository),
    estimator: NutritionEstimator = Depends(get_nutrition_estimator),
):
    try:
        recipes = await repo.list_saved()
    except PyMongoError as e:
        raise db_error(e)
    return TrendsOut(count=len(recipes), trends=estimator.trends(recipes))

@router.get("/diet", response_model=List[Recipe])
async def diet_recipes(repo: RecipeRepository = Depends(get_repository)):
    try:
        return await repo.list_diet()
    except PyMongoError as e:
        raise db_error(e)

@router.post("/diet/{rid}/toggle", response_model=DietToggleOut)
async def toggle_diet(rid: str, repo: RecipeRepository = Depends(get_repository)):
    # only saved recipes can join the diet plan
    await saved_or_404(repo, rid)
    try:
        in_diet = await repo.toggle_diet(rid)
    except PyMongoError as e:
        raise db_error(e)
    return DietToggleOut(recipe_id=rid, in_diet=in_diet)
