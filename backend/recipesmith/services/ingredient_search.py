# recipesmith/services/ingredient_search.py
# Ingredient lookup: USDA FoodData Central search + Spoonacular thumbnails
# - USDA failure fails the search; thumbnail failures are ignored
# - LatestSearch debounces and drops results of superseded queries
# - SearchSessions keeps a bounded LatestSearch per user

from __future__ import annotations
import asyncio
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

import httpx

from recipesmith.models.recipe import IngredientDetail
from recipesmith.services.errors import BadStatusCode, DecodingError, InvalidResponse, RecipeAPIError

log = logging.getLogger(__name__)

USDA_BASE_URL = "https://api.nal.usda.gov/fdc/v1"
SPOONACULAR_BASE_URL = "https://api.spoonacular.com/food/ingredients"
SPOONACULAR_IMAGE_URL = "https://spoonacular.com/cdn/ingredients_100x100/"

PAGE_SIZE = 25

# USDA nutrientName -> IngredientDetail field
_NUTRIENTS = {
    "Energy": "calories",
    "Protein": "protein",
    "Carbohydrate, by difference": "carbs",
    "Total lipid (fat)": "fat",
}


def food_to_detail(food: Dict[str, Any]) -> IngredientDetail:
    values: Dict[str, float] = {}
    for n in food.get("foodNutrients") or []:
        field = _NUTRIENTS.get(n.get("nutrientName"))
        # first occurrence wins (Energy can appear in kcal and kJ)
        if field and field not in values and isinstance(n.get("value"), (int, float)):
            values[field] = float(n["value"])
    return IngredientDetail(
        id=int(food["fdcId"]),
        name=str(food.get("description") or ""),
        serving_size=food.get("servingSize") or 100.0,
        serving_size_unit=food.get("servingSizeUnit") or "g",
        **values,
    )


class IngredientSearchService:
    def __init__(
        self,
        usda_api_key: str = "DEMO_KEY",
        spoonacular_api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._usda_key = usda_api_key
        self._spoon_key = spoonacular_api_key
        self._transport = transport

    async def _search_usda(self, cli: httpx.AsyncClient, query: str) -> List[IngredientDetail]:
        params = {"api_key": self._usda_key, "query": query, "pageSize": PAGE_SIZE}
        try:
            resp = await cli.get(f"{USDA_BASE_URL}/foods/search", params=params)
        except httpx.HTTPError as e:
            log.warning("usda search failed q=%r: %s", query, e)
            raise InvalidResponse(str(e)) from e
        if resp.status_code != 200:
            log.warning("usda search status=%s q=%r", resp.status_code, query)
            raise BadStatusCode(resp.status_code)

        try:
            body = resp.json()
            return [food_to_detail(f) for f in body.get("foods") or []]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise DecodingError("unexpected usda response") from e

    async def _image_for(self, cli: httpx.AsyncClient, name: str) -> Optional[str]:
        if not self._spoon_key:
            return None
        params = {"query": name, "apiKey": self._spoon_key, "number": 1}
        try:
            resp = await cli.get(f"{SPOONACULAR_BASE_URL}/search", params=params)
            if resp.status_code != 200:
                return None
            results = resp.json().get("results") or []
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            log.debug("thumbnail lookup failed name=%r: %s", name, e)
            return None
        if not results or not isinstance(results[0], dict) or not results[0].get("image"):
            return None
        return SPOONACULAR_IMAGE_URL + str(results[0]["image"])

    async def search(self, query: str) -> List[IngredientDetail]:
        q = (query or "").strip()
        if not q:
            return []
        async with httpx.AsyncClient(transport=self._transport) as cli:
            found = await self._search_usda(cli, q)
            images = await asyncio.gather(*(self._image_for(cli, d.name) for d in found))
        return [
            d.model_copy(update={"image_url": url}) if url else d
            for d, url in zip(found, images)
        ]


class LatestSearch:
    """
    One per user. Each submit() waits out the debounce window; if a newer
    submit() arrived meanwhile (or while the request was in flight) its
    result is discarded and None is returned.
    """

    def __init__(self, service: IngredientSearchService, debounce: float = 0.3):
        self._service = service
        self.debounce = debounce
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def submit(self, query: str) -> Optional[List[IngredientDetail]]:
        self._generation += 1
        mine = self._generation

        if self.debounce > 0:
            await asyncio.sleep(self.debounce)
        if mine != self._generation:
            return None

        try:
            results = await self._service.search(query)
        except RecipeAPIError as e:
            log.warning("ingredient search failed q=%r: %s", query, e)
            results = []

        if mine != self._generation:
            log.debug("dropping stale results for q=%r", query)
            return None
        return results


class SearchSessions:
    """LatestSearch per user, least recently used dropped past `limit`."""

    def __init__(self, service: IngredientSearchService, debounce: float = 0.3, limit: int = 1000):
        self._service = service
        self.debounce = debounce
        self.limit = limit
        self._sessions: "OrderedDict[str, LatestSearch]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, owner: str) -> bool:
        return owner in self._sessions

    def for_user(self, owner: str) -> LatestSearch:
        session = self._sessions.get(owner)
        if session is None:
            session = self._sessions[owner] = LatestSearch(self._service, debounce=self.debounce)
        self._sessions.move_to_end(owner)
        while len(self._sessions) > self.limit:
            self._sessions.popitem(last=False)
        return session
