# recipesmith/db/repository.py
# Saved recipes + preference state for one user (anon_id) over a KeyValueStore
# - save: replace by id in place, otherwise append
# - delete: also removes the stored dish image, best effort

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from recipesmith.db.store import KeyValueStore
from recipesmith.models.preferences import ExtraDetails
from recipesmith.models.recipe import IngredientSlot, Recipe
from recipesmith.services.storage_s3 import S3ObjectStore

log = logging.getLogger(__name__)

KEY_SAVED = "saved_recipes"
KEY_EXTRA_DETAILS = "extra_details"
KEY_SLOTS = "ingredient_slots"
KEY_ONLY_THESE = "only_these_ingredients"
KEY_DIET = "diet_recipes"
KEY_POPULAR_DISH = "popular_dish"
KEY_POPULAR_NOTES = "popular_notes"


class RecipeRepository:
    def __init__(self, store: KeyValueStore, owner: str, images: Optional[S3ObjectStore] = None):
        self.store = store
        self.owner = owner
        self.images = images

    async def _raw_saved(self) -> List[Dict[str, Any]]:
        raw = await self.store.get(self.owner, KEY_SAVED, [])
        return [x for x in raw if isinstance(x, dict)] if isinstance(raw, list) else []

    # ------------------------------
    # saved recipes
    # ------------------------------
    async def list_saved(self) -> List[Recipe]:
        out: List[Recipe] = []
        for item in await self._raw_saved():
            try:
                out.append(Recipe.from_storage(item))
            except ValidationError as e:
                log.warning("skipping undecodable saved recipe id=%s: %s", item.get("id"), e.error_count())
        return out

    async def get_saved(self, recipe_id: str) -> Optional[Recipe]:
        for r in await self.list_saved():
            if r.id == recipe_id:
                return r
        return None

    async def save(self, recipe: Recipe) -> Recipe:
        saved = recipe.model_copy(update={"is_from_saved": True})
        doc = saved.to_storage()

        items = await self._raw_saved()
        for i, item in enumerate(items):
            if item.get("id") == saved.id:
                items[i] = doc
                break
        else:
            items.append(doc)

        await self.store.set(self.owner, KEY_SAVED, items)
        return saved

    async def delete(self, recipe_ids: List[str]) -> int:
        ids = set(recipe_ids)
        if not ids:
            return 0
        items = await self._raw_saved()
        keep = [x for x in items if x.get("id") not in ids]
        removed = [x for x in items if x.get("id") in ids]
        if not removed:
            return 0

        await self.store.set(self.owner, KEY_SAVED, keep)

        diet = await self.diet_ids()
        if ids & set(diet):
            await self.store.set(self.owner, KEY_DIET, [x for x in diet if x not in ids])

        if self.images is not None:
            for item in removed:
                name = item.get("imgname")
                if name:
                    await self.images.delete(name)
        log.info("deleted %d saved recipe(s) owner=%s", len(removed), self.owner)
        return len(removed)

    # ------------------------------
    # generation preferences
    # ------------------------------
    async def get_extra_details(self) -> ExtraDetails:
        raw = await self.store.get(self.owner, KEY_EXTRA_DETAILS)
        try:
            return ExtraDetails.from_storage(raw if isinstance(raw, dict) else None)
        except ValidationError as e:
            log.warning("stored extra details unreadable, using defaults: %s", e.error_count())
            return ExtraDetails()

    async def set_extra_details(self, details: ExtraDetails) -> ExtraDetails:
        await self.store.set(self.owner, KEY_EXTRA_DETAILS, details.to_storage())
        return details

    async def get_slots(self) -> List[IngredientSlot]:
        raw = await self.store.get(self.owner, KEY_SLOTS, [])
        out: List[IngredientSlot] = []
        for item in raw if isinstance(raw, list) else []:
            try:
                out.append(IngredientSlot.model_validate(item))
            except ValidationError:
                log.warning("skipping undecodable ingredient slot")
        return out

    async def set_slots(self, slots: List[IngredientSlot]) -> None:
        await self.store.set(self.owner, KEY_SLOTS, [s.model_dump(mode="json", by_alias=True) for s in slots])

    async def get_only_these(self) -> bool:
        return bool(await self.store.get(self.owner, KEY_ONLY_THESE, False))

    async def set_only_these(self, value: bool) -> None:
        await self.store.set(self.owner, KEY_ONLY_THESE, bool(value))

    async def get_popular(self) -> Tuple[Optional[str], Optional[str]]:
        dish = await self.store.get(self.owner, KEY_POPULAR_DISH)
        notes = await self.store.get(self.owner, KEY_POPULAR_NOTES)
        return dish, notes

    async def set_popular(self, dish: Optional[str], notes: Optional[str]) -> None:
        await self.store.set(self.owner, KEY_POPULAR_DISH, dish)
        await self.store.set(self.owner, KEY_POPULAR_NOTES, notes)

    # ------------------------------
    # diet plan (subset of saved recipes)
    # ------------------------------
    async def diet_ids(self) -> List[str]:
        raw = await self.store.get(self.owner, KEY_DIET, [])
        return [str(x) for x in raw] if isinstance(raw, list) else []

    async def list_diet(self) -> List[Recipe]:
        ids = set(await self.diet_ids())
        return [r for r in await self.list_saved() if r.id in ids]

    async def toggle_diet(self, recipe_id: str) -> bool:
        """Flip membership; returns True when the recipe is now in the diet."""
        ids = await self.diet_ids()
        if recipe_id in ids:
            ids.remove(recipe_id)
            now_in = False
        else:
            ids.append(recipe_id)
            now_in = True
        await self.store.set(self.owner, KEY_DIET, ids)
        return now_in
