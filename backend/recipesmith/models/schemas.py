# recipesmith/models/schemas.py
# Request/response bodies of the HTTP API

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from recipesmith.models.nutrition import HealthInsight, NutritionData, NutritionTrend
from recipesmith.models.preferences import ExtraDetails
from recipesmith.models.recipe import IngredientDetail, IngredientSlot


def _required_text(v):
    s = (v or "").strip() if isinstance(v, str) else v
    if not s:
        raise ValueError("must not be empty")
    return s


class GenerateIn(BaseModel):
    # None -> use what the user last stored (slots / flag / extra details)
    ingredients: Optional[List[str]] = None
    allow_other_ingredients: Optional[bool] = None
    details: Optional[ExtraDetails] = None
    with_image: bool = True
    save: bool = False


class PopularGenerateIn(BaseModel):
    dish: str
    notes: Optional[str] = None
    with_image: bool = True
    save: bool = False

    @field_validator("dish", mode="before")
    @classmethod
    def _v_dish(cls, v):
        return _required_text(v)


class EditIn(BaseModel):
    changes: str

    @field_validator("changes", mode="before")
    @classmethod
    def _v_changes(cls, v):
        return _required_text(v)


class RecommendationIn(BaseModel):
    recommendation: str

    @field_validator("recommendation", mode="before")
    @classmethod
    def _v_recommendation(cls, v):
        return _required_text(v)


class DeleteIn(BaseModel):
    ids: List[str] = Field(default_factory=list)


class DeleteOut(BaseModel):
    ok: bool = True
    deleted: int


class PopularOut(BaseModel):
    dishes: List[str]
    selected: Optional[str] = None
    notes: Optional[str] = None


class IngredientsState(BaseModel):
    slots: List[IngredientSlot] = Field(default_factory=list)
    only_these: bool = False


class NutritionReport(BaseModel):
    recipe_id: str
    title: str
    nutrition: NutritionData
    insights: List[HealthInsight] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class TrendsOut(BaseModel):
    count: int
    trends: List[NutritionTrend] = Field(default_factory=list)


class DietToggleOut(BaseModel):
    ok: bool = True
    recipe_id: str
    in_diet: bool


class SearchOut(BaseModel):
    query: str
    # True when a newer query from the same user superseded this one
    stale: bool = False
    results: List[IngredientDetail] = Field(default_factory=list)
