# recipesmith/services/validation.py
# The only correctness gate for model output: strict on required fields,
# lenient on enrichment fields. Failures are uniform DecodingError; the field is logged.

from __future__ import annotations
import logging
from typing import List, Optional

from recipesmith.models.recipe import Recipe
from recipesmith.services.errors import DecodingError
from recipesmith.services.utils import has_duration_unit, parse_mass, parse_number

log = logging.getLogger(__name__)


def recipe_problems(recipe: Recipe) -> List[str]:
    probs: List[str] = []

    for field in ("title", "description"):
        if not (getattr(recipe, field) or "").strip():
            probs.append(f"empty-{field}")
    if not [x for x in recipe.ingredients if x.strip()]:
        probs.append("no-ingredients")
    if not [x for x in recipe.instructions if x.strip()]:
        probs.append("no-instructions")

    for field in ("prep_time", "cook_time", "total_time"):
        if not has_duration_unit(getattr(recipe, field)):
            probs.append(f"no-duration-unit:{field}")

    if parse_number(recipe.calorie_count) is None:
        probs.append(f"bad-calories:{recipe.calorie_count!r}")

    if not recipe.diet_labels:
        probs.append("no-diet-labels")
    if not recipe.equipment_used:
        probs.append("no-equipment")

    m = recipe.macros
    for field in ("protein", "carbohydrates", "fat"):
        if parse_mass(getattr(m, field), require_unit=True) is None:
            probs.append(f"bad-macro:{field}={getattr(m, field)!r}")
    for field in ("sodium", "cholesterol"):
        value: Optional[str] = getattr(m, field)
        if value is not None and parse_mass(value, target="mg") is None:
            probs.append(f"bad-macro:{field}={value!r}")

    return probs


def validate_recipe(recipe: Recipe) -> Recipe:
    probs = recipe_problems(recipe)
    if probs:
        log.warning("recipe rejected title=%r problems=%s", recipe.title, probs)
        raise DecodingError("recipe failed validation")
    return recipe
