# recipesmith/api/routes_ingredients.py
# Ingredient search (debounced per user; superseded queries come back stale)

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from recipesmith.core.deps import get_search_session
from recipesmith.models.schemas import SearchOut
from recipesmith.services.ingredient_search import LatestSearch

router = APIRouter(prefix="/ingredients", tags=["ingredients"])

@router.get("/search", response_model=SearchOut)
async def search_ingredients(
    q: str = Query("", max_length=100),
    session: LatestSearch = Depends(get_search_session),
):
    results = await session.submit(q)
    if results is None:
        return SearchOut(query=q, stale=True)
    return SearchOut(query=q, results=results)
