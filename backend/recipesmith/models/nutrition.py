# recipesmith/models/nutrition.py
# Derived nutrition view objects. Computed on demand, never persisted.

from __future__ import annotations
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class InsightType(str, Enum):
    positive = "positive"
    warning = "warning"
    concern = "concern"
    recommendation = "recommendation"


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class TrendDirection(str, Enum):
    increasing = "increasing"
    decreasing = "decreasing"
    stable = "stable"


class NutrientValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    amount: float
    unit: str
    daily_value: float = 0.0

    @computed_field
    @property
    def percent_daily_value(self) -> float:
        # unknown reference -> 0 rather than a division error
        if self.daily_value <= 0:
            return 0.0
        return self.amount / self.daily_value * 100.0


class NutritionData(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: float
    protein: float
    carbohydrates: float
    fat: float
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0            # mg
    cholesterol: float = 0.0       # mg
    saturated_fat: float = 0.0
    trans_fat: float = 0.0
    sodium_estimated: bool = False
    cholesterol_estimated: bool = False
    vitamins: List[NutrientValue] = Field(default_factory=list)
    minerals: List[NutrientValue] = Field(default_factory=list)


class HealthInsight(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: InsightType
    title: str
    description: str
    severity: Severity
    recommendation: Optional[str] = None


class NutritionTrend(BaseModel):
    period: str
    average_calories: float
    average_protein: float
    average_carbs: float
    average_fat: float
    trend: TrendDirection = TrendDirection.stable
