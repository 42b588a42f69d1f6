# recipesmith/models/preferences.py
# Extra-details preferences (versioned) and the generation request built from them

from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

EXTRA_DETAILS_VERSION = 1

# legacy unversioned blobs used these to mean "not set"
_LEGACY_NO_TIME_LIMIT = "no time limit"

BOUND_FIELDS = (
    "calories_min", "calories_max",
    "protein_min", "protein_max",
    "carbs_min", "carbs_max",
    "fat_min", "fat_max",
)


class ExtraDetails(BaseModel):
    version: int = EXTRA_DETAILS_VERSION

    calories_min: Optional[int] = Field(default=None, ge=0)
    calories_max: Optional[int] = Field(default=None, ge=0)
    protein_min: Optional[int] = Field(default=None, ge=0)
    protein_max: Optional[int] = Field(default=None, ge=0)
    carbs_min: Optional[int] = Field(default=None, ge=0)
    carbs_max: Optional[int] = Field(default=None, ge=0)
    fat_min: Optional[int] = Field(default=None, ge=0)
    fat_max: Optional[int] = Field(default=None, ge=0)

    allergies: List[str] = Field(default_factory=list)
    diet_preferences: List[str] = Field(default_factory=list)
    meal_types: List[str] = Field(default_factory=list)
    cuisine_types: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)

    serving_size: Optional[str] = None
    time_constraint: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("allergies", "diet_preferences", "meal_types", "cuisine_types", "equipment", mode="before")
    @classmethod
    def _v_lists(cls, v):
        if v is None:
            return []
        # strip + dedupe, order kept
        items = [str(x).strip() for x in v if x is not None and str(x).strip()]
        return list(dict.fromkeys(items))

    @field_validator("serving_size", "time_constraint", "notes", mode="before")
    @classmethod
    def _v_text(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @model_validator(mode="after")
    def _v_bounds(self):
        for name in ("calories", "protein", "carbs", "fat"):
            lo, hi = getattr(self, f"{name}_min"), getattr(self, f"{name}_max")
            if lo is not None and hi is not None and lo > hi:
                raise ValueError(f"{name}_min must not exceed {name}_max")
        return self

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_storage(cls, data: Optional[Dict[str, Any]]) -> "ExtraDetails":
        if not data:
            return cls()
        if "version" not in data:
            data = _migrate_legacy(data)
        return cls.model_validate(data)


def _migrate_legacy(data: Dict[str, Any]) -> Dict[str, Any]:
    # v0: free-form dict; -1 / 0 bounds and "No Time Limit" meant unset
    out: Dict[str, Any] = {"version": EXTRA_DETAILS_VERSION}
    for key in BOUND_FIELDS:
        v = data.get(key)
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0:
            out[key] = int(v)
    for key in ("allergies", "diet_preferences", "meal_types", "cuisine_types", "equipment"):
        v = data.get(key)
        if isinstance(v, list):
            out[key] = v
    for key in ("serving_size", "notes"):
        v = data.get(key)
        if isinstance(v, (str, int)) and not isinstance(v, bool):
            out[key] = str(v)
    tc = data.get("time_constraint")
    if isinstance(tc, str) and tc.strip().lower() != _LEGACY_NO_TIME_LIMIT:
        out["time_constraint"] = tc
    # a bounds pair saved inverted by the old form is dropped rather than rejected
    for name in ("calories", "protein", "carbs", "fat"):
        lo, hi = out.get(f"{name}_min"), out.get(f"{name}_max")
        if lo is not None and hi is not None and lo > hi:
            out.pop(f"{name}_min")
            out.pop(f"{name}_max")
    return out


class GenerationRequest(BaseModel):
    """Either an ingredient list or a dish name, plus optional constraints."""

    ingredients: List[str] = Field(default_factory=list)
    dish: Optional[str] = None
    dish_notes: Optional[str] = None
    allow_other_ingredients: bool = True
    details: Optional[ExtraDetails] = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def _v_ingredients(cls, v):
        if v is None:
            return []
        return [str(x).strip() for x in v if x is not None and str(x).strip()]

    @field_validator("dish", "dish_notes", mode="before")
    @classmethod
    def _v_text(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @model_validator(mode="after")
    def _v_target(self):
        if not self.ingredients and not self.dish:
            raise ValueError("either ingredients or dish is required")
        return self
