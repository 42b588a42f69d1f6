# recipesmith/services/prompt_builder.py
# GenerationRequest -> prompt text. Pure functions, no I/O.
# Every present constraint becomes exactly one instruction line; absent ones emit nothing.

from __future__ import annotations
from typing import Callable, List, Optional, Tuple

from recipesmith.models.preferences import ExtraDetails, GenerationRequest
from recipesmith.models.recipe import Recipe

SYSTEM_PROMPT = """You are a culinary expert. Return recipe data in strict JSON format.

You MUST follow these rules:
1. Return ONLY a JSON object with NO additional text
2. ALL required fields listed below must be present and must not be empty
3. Time fields MUST include "minutes" (e.g. "15 minutes")
4. Calorie count MUST be a number as string (e.g. "450")
5. Macros MUST include a "g" unit (e.g. "45g"); sodium and cholesterol use "mg"
6. Include at least one diet label and one equipment item
7. DO NOT include step numbers in instructions

Required JSON format:
{
  "cuisine": "string",
  "title": "string",
  "description": "string",
  "imgdesc": "string",
  "servings": "string",
  "serving_size": "string (optional)",
  "prep": "string with minutes",
  "cook": "string with minutes",
  "total": "string with minutes",
  "cal": "number as string",
  "macros": {
    "protein": "string with g",
    "carbohydrates": "string with g",
    "fat": "string with g",
    "fiber": "string with g (optional)",
    "sugar": "string with g (optional)",
    "sodium": "string with mg (optional)",
    "cholesterol": "string with mg (optional)",
    "saturated_fat": "string with g (optional)",
    "trans_fat": "string with g (optional)",
    "vitamins": [{"name": "string", "amount": "number as string", "unit": "mg|mcg|IU"}],
    "minerals": [{"name": "string", "amount": "number as string", "unit": "mg|mcg"}]
  },
  "ingredients": ["string"],
  "instructions": ["string"],
  "meal": "string",
  "equipment": ["string"],
  "diet": ["string"],
  "ingredient_types": {"ingredient as written": ["tag"]}
}"""

RESPONSE_SCHEMA = """Return ONLY a JSON object with these REQUIRED fields:
{
  "cuisine": "specific cuisine type",
  "title": "descriptive recipe name",
  "description": "detailed description",
  "imgdesc": "very detailed visual description for image generation",
  "servings": "specific number",
  "prep": "exact time in minutes",
  "cook": "exact time in minutes",
  "total": "exact total time in minutes",
  "cal": "EXACT number of kcal per serving",
  "macros": {
    "protein": "exact grams per serving, e.g. 30g",
    "carbohydrates": "exact grams per serving, e.g. 45g",
    "fat": "exact grams per serving, e.g. 12g",
    "fiber": "grams per serving, e.g. 6g",
    "sugar": "grams per serving, e.g. 8g",
    "sodium": "milligrams per serving, e.g. 480mg",
    "cholesterol": "milligrams per serving, e.g. 95mg",
    "saturated_fat": "grams per serving, e.g. 3g",
    "trans_fat": "grams per serving, e.g. 0g",
    "vitamins": [{"name": "Vitamin C", "amount": "25", "unit": "mg"}],
    "minerals": [{"name": "Iron", "amount": "3", "unit": "mg"}]
  },
  "ingredients": ["detailed ingredients with amounts"],
  "instructions": ["detailed steps without numbering"],
  "meal": "specific meal type",
  "equipment": ["specific equipment list"],
  "diet": ["all applicable dietary labels"],
  "ingredient_types": {"each ingredient as written": ["tags such as protein, dairy, sodium, cholesterol"]}
}"""

POPULAR_DISHES = [
    "Pizza", "Sushi", "Tacos", "Pasta", "Burger",
    "Pad Thai", "Paella", "Gravy", "Shawarma", "Pho",
    "Biryani", "Ramen", "Dumplings", "BBQ Ribs",
    "Fish and Chips", "Holiday Feast", "Festive Meal",
    "Traditional Feast", "Special Occasion", "Celebration Dish",
    "Custom Recipe (specify in Notes)",
]

_INGREDIENT_TASK = """Create a recipe using these ingredients:
{ingredients}

IMPORTANT REQUIREMENTS:
1. Calculate and include exact nutritional information per serving:
   - Calories (must be a specific number)
   - Protein, carbohydrates and fat (in grams)
2. Always include specific dietary labels based on ingredients and nutrition
3. Provide detailed cooking instructions and timing"""

_STRICT_INGREDIENTS = (
    "CRITICAL: Use ONLY the listed ingredients. Do not add any others. "
    "Be creative with only these ingredients."
)


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {x}" for x in items)


def _joined(items: List[str]) -> Optional[str]:
    return ", ".join(items) if items else None


# emission order is fixed: bounds first, then the (label, accessor) detail lines
_BOUND_LINES: List[Tuple[str, str, str]] = [
    ("calories_min", "Minimum calories per serving", "kcal"),
    ("calories_max", "Maximum calories per serving", "kcal"),
    ("protein_min", "Minimum protein per serving", "g"),
    ("protein_max", "Maximum protein per serving", "g"),
    ("carbs_min", "Minimum carbohydrates per serving", "g"),
    ("carbs_max", "Maximum carbohydrates per serving", "g"),
    ("fat_min", "Minimum fat per serving", "g"),
    ("fat_max", "Maximum fat per serving", "g"),
]

_DETAIL_LINES: List[Tuple[str, Callable[[ExtraDetails], Optional[str]]]] = [
    ("Allergies/restrictions to avoid", lambda d: _joined(d.allergies)),
    ("Dietary preferences", lambda d: _joined(d.diet_preferences)),
    ("Meal type", lambda d: _joined(d.meal_types)),
    ("Cuisine type", lambda d: _joined(d.cuisine_types)),
    ("Available equipment (use nothing else)", lambda d: _joined(d.equipment)),
    ("Serving size", lambda d: d.serving_size),
    ("Time constraint", lambda d: d.time_constraint),
    ("Additional notes", lambda d: d.notes),
]


def constraint_lines(details: Optional[ExtraDetails]) -> List[str]:
    if details is None:
        return []
    lines: List[str] = []
    for field, label, unit in _BOUND_LINES:
        value = getattr(details, field)
        if value is not None:
            lines.append(f"{label}: {value}{unit}")
    for label, get in _DETAIL_LINES:
        value = get(details)
        if value:
            lines.append(f"{label}: {value}")
    return lines


def build_prompt(request: GenerationRequest) -> str:
    """Prompt for a fresh recipe from ingredients or from a dish name."""
    parts: List[str] = []
    if request.dish:
        parts.append(f"Create a {request.dish} recipe.")
        if request.ingredients:
            parts.append("Use these ingredients:\n" + _bullets(request.ingredients))
    else:
        parts.append(_INGREDIENT_TASK.format(ingredients=_bullets(request.ingredients)))

    if not request.allow_other_ingredients:
        parts.append(_STRICT_INGREDIENTS)

    lines = constraint_lines(request.details)
    if request.dish_notes:
        lines.append(f"Notes for this dish: {request.dish_notes}")
    if lines:
        parts.append("Additional requirements:\n" + "\n".join(lines))

    parts.append(RESPONSE_SCHEMA)
    return "\n\n".join(parts)


def build_edit_prompt(recipe: Recipe, changes: str) -> str:
    return "\n\n".join([
        f"Update this recipe according to the following changes: {changes.strip()}",
        "Current Recipe:\n"
        f"Title: {recipe.title}\n"
        f"Description: {recipe.description}\n"
        f"Ingredients: {', '.join(recipe.ingredients)}\n"
        f"Instructions:\n{chr(10).join(recipe.instructions)}",
        "Maintain the JSON format and update ONLY the text fields without changing the image.",
        RESPONSE_SCHEMA,
    ])


def build_recommendation_prompt(recipe: Recipe, recommendation: str) -> str:
    return "\n\n".join([
        f"Update the following recipe based on this health recommendation: {recommendation.strip()}",
        "Current Recipe:\n"
        f"Title: {recipe.title}\n"
        f"Description: {recipe.description}\n"
        f"Ingredients: {', '.join(recipe.ingredients)}\n"
        f"Instructions:\n{chr(10).join(recipe.instructions)}",
        "The updated recipe should incorporate the recommendation while maintaining the recipe's character. "
        "Include all nutritional information: fiber, sugar, sodium, cholesterol, saturated_fat, "
        "trans_fat, vitamins, and minerals.",
        RESPONSE_SCHEMA,
    ])
