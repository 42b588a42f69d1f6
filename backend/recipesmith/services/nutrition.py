# recipesmith/services/nutrition.py
# Recipe -> NutritionData, health insights, trends, dietary recommendations.
# Pure computation over a Recipe; nothing here is persisted.
#
# sodium / cholesterol: a value supplied by the model is always kept as is.
# Otherwise it is estimated from ingredient_types tags, falling back to a
# keyword table over ingredient text, then clamped.

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from recipesmith.models.nutrition import (
    HealthInsight,
    InsightType,
    NutrientValue,
    NutritionData,
    NutritionTrend,
    Severity,
    TrendDirection,
)
from recipesmith.models.recipe import NutrientEntry, Recipe
from recipesmith.services.utils import parse_mass, parse_measure

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NutritionTuning:
    sodium_max_mg: float = 5000.0
    cholesterol_max_mg: float = 1000.0
    sodium_tag_mg: float = 400.0
    cholesterol_tag_mg: float = 120.0

    @classmethod
    def from_settings(cls, settings) -> "NutritionTuning":
        return cls(
            sodium_max_mg=settings.SODIUM_ESTIMATE_MAX_MG,
            cholesterol_max_mg=settings.CHOLESTEROL_ESTIMATE_MAX_MG,
            sodium_tag_mg=settings.SODIUM_TAG_INCREMENT_MG,
            cholesterol_tag_mg=settings.CHOLESTEROL_TAG_INCREMENT_MG,
        )


# (keywords, mg per matching ingredient); first matching row wins per ingredient
KeywordRule = Tuple[Tuple[str, ...], float]

SODIUM_RULES: List[KeywordRule] = [
    (("soy sauce",), 900.0),
    (("broth", "bouillon"), 700.0),
    (("cheese",), 250.0),
    (("bacon", "salami"), 300.0),
    (("salt",), 500.0),
]

CHOLESTEROL_RULES: List[KeywordRule] = [
    (("egg",), 186.0),
    (("shrimp",), 150.0),
    (("butter",), 30.0),
    (("cheese",), 30.0),
    (("lamb", "beef", "pork"), 40.0),
]

_SODIUM_TAGS = {"sodium", "salt"}
_CHOLESTEROL_TAGS = {"cholesterol"}


def keyword_estimate(ingredients: Iterable[str], rules: Sequence[KeywordRule]) -> float:
    total = 0.0
    for ing in ingredients:
        lower = ing.lower()
        for kws, mg in rules:
            if any(k in lower for k in kws):
                total += mg
                break
    return total


def tag_estimate(ingredient_types: Optional[Dict[str, List[str]]], tags: set, increment: float) -> float:
    if not ingredient_types:
        return 0.0
    hits = 0
    for ing_tags in ingredient_types.values():
        # "high_sodium" counts as a sodium tag
        if any(k in t.strip().lower() for t in ing_tags for k in tags):
            hits += 1
    return hits * increment


def _clamp(v: float, hi: float) -> float:
    return max(0.0, min(v, hi))


# ------------------------------
# daily values
# ------------------------------
# (name aliases, {unit: reference amount}); matched on whole words so
# "Vitamin B1" never picks up "Vitamin B12"
_DAILY_VALUES: List[Tuple[Tuple[str, ...], Dict[str, float]]] = [
    (("vitamin c", "ascorbic acid"), {"mg": 90.0}),
    (("vitamin a", "retinol"), {"IU": 3000.0, "mcg": 900.0, "mg": 0.9}),
    (("vitamin d",), {"mcg": 20.0, "IU": 800.0}),
    (("vitamin e",), {"mg": 15.0, "IU": 22.4}),
    (("vitamin k",), {"mcg": 120.0}),
    (("vitamin b12", "b12", "cobalamin"), {"mcg": 2.4}),
    (("vitamin b1", "b1", "thiamin", "thiamine"), {"mg": 1.2}),
    (("vitamin b2", "b2", "riboflavin"), {"mg": 1.3}),
    (("vitamin b3", "b3", "niacin"), {"mg": 16.0}),
    (("vitamin b6", "b6", "pyridoxine"), {"mg": 1.7}),
    (("vitamin b9", "folate", "folic acid"), {"mcg": 400.0}),
    (("calcium",), {"mg": 1000.0}),
    (("iron",), {"mg": 18.0}),
    (("potassium",), {"mg": 4700.0}),
    (("magnesium",), {"mg": 420.0}),
    (("zinc",), {"mg": 11.0}),
    (("phosphorus",), {"mg": 1250.0}),
]

_DV_PATTERNS = [
    ([re.compile(rf"\b{re.escape(a)}\b", re.I) for a in aliases], refs)
    for aliases, refs in _DAILY_VALUES
]

_UNIT_ALIASES = {
    "mg": "mg",
    "milligram": "mg",
    "milligrams": "mg",
    "mcg": "mcg",
    "µg": "mcg",
    "μg": "mcg",
    "ug": "mcg",
    "microgram": "mcg",
    "micrograms": "mcg",
    "iu": "IU",
}


def daily_value(name: str, unit: str) -> float:
    """Reference daily amount for (name, unit); 0 when unknown."""
    u = _UNIT_ALIASES.get((unit or "").strip().lower())
    for patterns, refs in _DV_PATTERNS:
        if any(p.search(name or "") for p in patterns):
            return refs.get(u, 0.0) if u else 0.0
    return 0.0


def _nutrient_values(entries: Optional[List[NutrientEntry]]) -> List[NutrientValue]:
    out: List[NutrientValue] = []
    for e in entries or []:
        parsed = parse_measure(e.amount)
        if parsed is None:
            log.debug("skipping nutrient %r with amount %r", e.name, e.amount)
            continue
        amount, inline_unit = parsed
        unit = e.unit or inline_unit or ""
        out.append(NutrientValue(name=e.name, amount=amount, unit=unit, daily_value=daily_value(e.name, unit)))
    return out


def _grams(value: Optional[str]) -> float:
    v = parse_mass(value, target="g")
    return v if v is not None else 0.0


def _calories(value: Optional[str]) -> float:
    parsed = parse_measure(value)
    return parsed[0] if parsed is not None else 0.0


class NutritionEstimator:
    def __init__(self, tuning: Optional[NutritionTuning] = None):
        self.tuning = tuning or NutritionTuning()

    # ------------------------------
    # per-recipe figures
    # ------------------------------
    def _supplied_mg(self, value: Optional[str]) -> Optional[float]:
        if value is None or not value.strip():
            return None
        return parse_mass(value, target="mg")

    def estimate_sodium(self, recipe: Recipe) -> float:
        t = self.tuning
        mg = tag_estimate(recipe.ingredient_types, _SODIUM_TAGS, t.sodium_tag_mg)
        if mg == 0:
            mg = keyword_estimate(recipe.ingredients, SODIUM_RULES)
        return _clamp(mg, t.sodium_max_mg)

    def estimate_cholesterol(self, recipe: Recipe) -> float:
        t = self.tuning
        mg = tag_estimate(recipe.ingredient_types, _CHOLESTEROL_TAGS, t.cholesterol_tag_mg)
        if mg == 0:
            mg = keyword_estimate(recipe.ingredients, CHOLESTEROL_RULES)
        return _clamp(mg, t.cholesterol_max_mg)

    def calculate(self, recipe: Recipe) -> NutritionData:
        m = recipe.macros

        sodium = self._supplied_mg(m.sodium)
        sodium_estimated = sodium is None
        if sodium_estimated:
            sodium = self.estimate_sodium(recipe)

        cholesterol = self._supplied_mg(m.cholesterol)
        cholesterol_estimated = cholesterol is None
        if cholesterol_estimated:
            cholesterol = self.estimate_cholesterol(recipe)

        return NutritionData(
            calories=_calories(recipe.calorie_count),
            protein=_grams(m.protein),
            carbohydrates=_grams(m.carbohydrates),
            fat=_grams(m.fat),
            fiber=_grams(m.fiber),
            sugar=_grams(m.sugar),
            sodium=sodium,
            cholesterol=cholesterol,
            saturated_fat=_grams(m.saturated_fat),
            trans_fat=_grams(m.trans_fat),
            sodium_estimated=sodium_estimated,
            cholesterol_estimated=cholesterol_estimated,
            vitamins=_nutrient_values(m.vitamins),
            minerals=_nutrient_values(m.minerals),
        )

    # ------------------------------
    # insights / recommendations
    # ------------------------------
    def health_insights(self, data: NutritionData) -> List[HealthInsight]:
        insights: List[HealthInsight] = []

        if data.protein > 25:
            insights.append(HealthInsight(
                type=InsightType.positive,
                title="High Protein Content",
                description="This recipe provides excellent protein content for muscle building and satiety. "
                            "Great for post-workout meals or when you need sustained energy.",
                severity=Severity.low,
            ))
        elif data.protein < 10:
            insights.append(HealthInsight(
                type=InsightType.warning,
                title="Low Protein Content",
                description="This recipe is relatively low in protein.",
                severity=Severity.medium,
                recommendation="Consider adding lean protein sources like chicken, fish, or legumes.",
            ))

        if data.fiber > 8:
            insights.append(HealthInsight(
                type=InsightType.positive,
                title="High Fiber Content",
                description="Excellent fiber content supports digestive health and helps maintain stable blood sugar.",
                severity=Severity.low,
            ))
        elif data.fiber < 3:
            insights.append(HealthInsight(
                type=InsightType.concern,
                title="Low Fiber Content",
                description="This recipe could benefit from more fiber-rich ingredients.",
                severity=Severity.medium,
                recommendation="Add vegetables, whole grains, or legumes to increase fiber content.",
            ))

        if data.sodium > 800:
            insights.append(HealthInsight(
                type=InsightType.warning,
                title="High Sodium Content",
                description="This recipe contains high sodium levels.",
                severity=Severity.high,
                recommendation="Consider reducing salt or using low-sodium alternatives.",
            ))

        # no fat -> no saturated share to speak of
        if data.fat > 0 and data.saturated_fat / data.fat * 100 > 30:
            insights.append(HealthInsight(
                type=InsightType.warning,
                title="High Saturated Fat",
                description="This recipe has a high percentage of saturated fat.",
                severity=Severity.medium,
                recommendation="Consider using healthier fat sources like olive oil or avocado.",
            ))

        density = data.calories / max(1.0, data.protein + data.carbohydrates + data.fat)
        if density > 4:
            insights.append(HealthInsight(
                type=InsightType.concern,
                title="High Calorie Density",
                description="This recipe is calorie-dense with relatively low nutritional value.",
                severity=Severity.medium,
                recommendation="Consider adding more vegetables or reducing high-calorie ingredients.",
            ))

        return insights

    def dietary_recommendations(self, data: NutritionData) -> List[str]:
        recs: List[str] = []
        if data.protein < 20:
            recs.append("Consider adding lean protein sources like chicken breast, fish, or tofu")
        if data.fiber < 5:
            recs.append("Add more vegetables, fruits, or whole grains to increase fiber content")
        if data.saturated_fat > data.fat * 0.3:
            recs.append("Replace saturated fats with unsaturated fats like olive oil or nuts")
        if data.sodium > 600:
            recs.append("Reduce sodium by using herbs, spices, or low-sodium alternatives")
        return recs

    def trends(self, recipes: Sequence[Recipe]) -> List[NutritionTrend]:
        if not recipes:
            return []
        rows = [self.calculate(r) for r in recipes]
        n = float(len(rows))
        return [NutritionTrend(
            period="All Time",
            average_calories=sum(d.calories for d in rows) / n,
            average_protein=sum(d.protein for d in rows) / n,
            average_carbs=sum(d.carbohydrates for d in rows) / n,
            average_fat=sum(d.fat for d in rows) / n,
            trend=TrendDirection.stable,
        )]
