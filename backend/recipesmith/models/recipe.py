# recipesmith/models/recipe.py
# Recipe / Macros / IngredientDetail / IngredientSlot
# Field aliases are the wire keys the model returns and the keys of the persisted form.

from __future__ import annotations
import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _new_id() -> str:
    return str(uuid.uuid4())


def _number_to_str(v: Any, unit: str = "") -> Any:
    # The model sometimes answers 45 instead of "45g"
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return f"{v}{unit}"
    if isinstance(v, float):
        return f"{v:g}{unit}"
    return v


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class NutrientEntry(BaseModel):
    name: str
    amount: str
    unit: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def _v_amount(cls, v):
        return _number_to_str(v)


def _lenient_entries(v: Any) -> Optional[List[Dict[str, Any]]]:
    # enrichment field: malformed entries are dropped, a malformed list becomes None
    if v is None or not isinstance(v, list):
        return None
    out = []
    for item in v:
        if isinstance(item, NutrientEntry):
            out.append(item.model_dump())
        elif (
            isinstance(item, dict)
            and isinstance(item.get("name"), str)
            and isinstance(item.get("amount"), (str, int, float))
            and isinstance(item.get("unit", ""), str)
        ):
            out.append(item)
    return out


class Macros(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    protein: str
    carbohydrates: str
    fat: str
    fiber: Optional[str] = None
    sugar: Optional[str] = None
    sodium: Optional[str] = None
    cholesterol: Optional[str] = None
    saturated_fat: Optional[str] = None
    trans_fat: Optional[str] = None
    vitamins: Optional[List[NutrientEntry]] = None
    minerals: Optional[List[NutrientEntry]] = None

    @field_validator("protein", "carbohydrates", "fat", mode="before")
    @classmethod
    def _v_required_grams(cls, v):
        return _number_to_str(v, "g")

    @field_validator("fiber", "sugar", "saturated_fat", "trans_fat", mode="before")
    @classmethod
    def _v_optional_grams(cls, v):
        return _blank_to_none(_number_to_str(v, "g"))

    @field_validator("sodium", "cholesterol", mode="before")
    @classmethod
    def _v_optional_milligrams(cls, v):
        return _blank_to_none(_number_to_str(v, "mg"))

    @field_validator("vitamins", "minerals", mode="before")
    @classmethod
    def _v_entries(cls, v):
        return _lenient_entries(v)


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    cuisine: str
    title: str
    description: str
    image_description: Optional[str] = Field(default=None, alias="imgdesc")
    servings: str
    serving_size: Optional[str] = None
    prep_time: str = Field(alias="prep")
    cook_time: str = Field(alias="cook")
    total_time: str = Field(alias="total")
    calorie_count: str = Field(alias="cal")
    macros: Macros
    ingredients: List[str]
    instructions: List[str]
    meal_type: str = Field(alias="meal")
    equipment_used: List[str] = Field(alias="equipment")
    diet_labels: List[str] = Field(alias="diet")
    ingredient_types: Optional[Dict[str, List[str]]] = None
    image_name: Optional[str] = Field(default=None, alias="imgname")
    image_url: Optional[str] = Field(default=None, alias="imgurl")
    is_from_saved: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _v_id(cls, v):
        # null ids from the model get a fresh one
        return v if v else _new_id()

    @field_validator("servings", "calorie_count", mode="before")
    @classmethod
    def _v_numeric_text(cls, v):
        return _number_to_str(v)

    @field_validator("image_description", "serving_size", "image_name", "image_url", mode="before")
    @classmethod
    def _v_optional_text(cls, v):
        return _blank_to_none(_number_to_str(v))

    @field_validator("ingredient_types", mode="before")
    @classmethod
    def _v_ingredient_types(cls, v):
        if not isinstance(v, dict):
            return None
        out: Dict[str, List[str]] = {}
        for k, tags in v.items():
            if isinstance(tags, str):
                tags = [tags]
            if isinstance(tags, list):
                out[str(k)] = [str(t) for t in tags if isinstance(t, str)]
        return out

    def to_storage(self) -> Dict[str, Any]:
        # persisted form: wire keys, unset optionals omitted
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "Recipe":
        return cls.model_validate(data)

    def with_regenerated_text(self, regenerated: "Recipe") -> "Recipe":
        # Edits replace the text fields but keep identity, image and saved state
        return regenerated.model_copy(update={
            "id": self.id,
            "image_name": self.image_name,
            "image_url": self.image_url,
            "is_from_saved": self.is_from_saved,
        })


class IngredientDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    serving_size: float = Field(default=100.0, alias="servingSize")
    serving_size_unit: str = Field(default="g", alias="servingSizeUnit")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class IngredientSlot(BaseModel):
    id: str = Field(default_factory=_new_id)
    text: str = ""
    detail: Optional[IngredientDetail] = None

    def attach(self, detail: IngredientDetail) -> "IngredientSlot":
        # by value: later search results never alter this slot
        return self.model_copy(update={"detail": detail.model_copy(deep=True)})

    @property
    def display_name(self) -> str:
        name = self.detail.name if self.detail else self.text
        return (name or "").strip()
