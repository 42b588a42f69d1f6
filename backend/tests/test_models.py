import pytest
from pydantic import ValidationError

from recipesmith.models.preferences import EXTRA_DETAILS_VERSION, ExtraDetails, GenerationRequest
from recipesmith.models.recipe import IngredientDetail, IngredientSlot, Recipe


# ------------------------------
# Recipe
# ------------------------------
def test_recipe_storage_round_trip(recipe):
    stored = recipe.model_copy(update={"image_name": "x_1.png", "image_url": "https://b/x_1.png", "is_from_saved": True})
    back = Recipe.from_storage(stored.to_storage())
    assert back == stored


def test_storage_form_uses_wire_keys(recipe):
    doc = recipe.to_storage()
    for key in ("imgdesc", "prep", "cook", "total", "cal", "meal", "equipment", "diet"):
        assert key in doc
    assert "prep_time" not in doc
    # unset optionals are omitted, not written as null
    assert "imgname" not in doc


def test_id_generated_when_missing_or_null(payload):
    a = Recipe.model_validate(payload)
    payload["id"] = None
    b = Recipe.model_validate(payload)
    assert a.id and b.id and a.id != b.id


def test_numbers_coerced_to_strings(payload):
    payload["cal"] = 480
    payload["servings"] = 2
    payload["macros"]["protein"] = 30
    payload["macros"]["sodium"] = 410.5
    r = Recipe.model_validate(payload)
    assert r.calorie_count == "480"
    assert r.servings == "2"
    assert r.macros.protein == "30g"
    assert r.macros.sodium == "410.5mg"


def test_blank_optional_macros_become_none(payload):
    payload["macros"]["sodium"] = "  "
    payload["macros"]["fiber"] = ""
    r = Recipe.model_validate(payload)
    assert r.macros.sodium is None
    assert r.macros.fiber is None


def test_malformed_enrichment_fields_are_dropped(payload):
    payload["macros"]["vitamins"] = "lots"
    payload["macros"]["minerals"] = [{"name": "Iron", "amount": "2", "unit": "mg"}, {"oops": 1}, 5]
    payload["ingredient_types"] = ["not", "a", "map"]
    r = Recipe.model_validate(payload)
    assert r.macros.vitamins is None
    assert [m.name for m in r.macros.minerals] == ["Iron"]
    assert r.ingredient_types is None


def test_missing_required_field_fails(payload):
    del payload["macros"]["protein"]
    with pytest.raises(ValidationError):
        Recipe.model_validate(payload)


def test_regenerated_text_keeps_identity(recipe, payload):
    original = recipe.model_copy(update={"image_name": "a.png", "image_url": "https://b/a.png", "is_from_saved": True})
    payload["title"] = "Lighter Garlic Chicken Pasta"
    regenerated = Recipe.model_validate(payload)

    edited = original.with_regenerated_text(regenerated)
    assert edited.title == "Lighter Garlic Chicken Pasta"
    assert edited.id == original.id
    assert edited.image_name == "a.png"
    assert edited.image_url == "https://b/a.png"
    assert edited.is_from_saved is True


# ------------------------------
# ingredient slots
# ------------------------------
def test_slot_attach_copies_detail():
    detail = IngredientDetail(id=1, name="Eggs, whole, raw", calories=143, protein=12.6)
    slot = IngredientSlot(text="egg").attach(detail)
    detail.name = "changed later"
    assert slot.detail.name == "Eggs, whole, raw"
    assert slot.display_name == "Eggs, whole, raw"
    assert IngredientSlot(text="  basil ").display_name == "basil"


def test_ingredient_detail_accepts_camel_case():
    d = IngredientDetail.model_validate({"id": 7, "name": "Rice", "servingSize": 50, "servingSizeUnit": "g", "imageUrl": "u"})
    assert d.serving_size == 50
    assert d.image_url == "u"


# ------------------------------
# ExtraDetails
# ------------------------------
def test_extra_details_defaults():
    d = ExtraDetails()
    assert d.version == EXTRA_DETAILS_VERSION
    assert d.calories_min is None and d.allergies == [] and d.notes is None


def test_extra_details_lists_cleaned():
    d = ExtraDetails(allergies=[" nuts ", "nuts", "", "shellfish"])
    assert d.allergies == ["nuts", "shellfish"]


def test_extra_details_inverted_bounds_rejected():
    with pytest.raises(ValidationError):
        ExtraDetails(calories_min=800, calories_max=300)


def test_extra_details_storage_round_trip():
    d = ExtraDetails(protein_min=30, allergies=["peanuts"], time_constraint="30 minutes")
    assert ExtraDetails.from_storage(d.to_storage()) == d


def test_extra_details_from_legacy_dict():
    legacy = {
        "calories_min": -1,
        "calories_max": 700,
        "protein_min": 0,
        "fat_min": 40,
        "fat_max": 10,
        "allergies": ["dairy"],
        "time_constraint": "No Time Limit",
        "notes": "kid friendly",
    }
    d = ExtraDetails.from_storage(legacy)
    assert d.version == EXTRA_DETAILS_VERSION
    assert d.calories_min is None
    assert d.calories_max == 700
    assert d.protein_min is None
    # inverted legacy pair dropped
    assert d.fat_min is None and d.fat_max is None
    assert d.allergies == ["dairy"]
    assert d.time_constraint is None
    assert d.notes == "kid friendly"


def test_extra_details_from_nothing():
    assert ExtraDetails.from_storage(None) == ExtraDetails()
    assert ExtraDetails.from_storage({}) == ExtraDetails()


# ------------------------------
# GenerationRequest
# ------------------------------
def test_generation_request_needs_ingredients_or_dish():
    with pytest.raises(ValidationError):
        GenerationRequest(ingredients=["  ", ""])
    assert GenerationRequest(dish="Pho").dish == "Pho"
    assert GenerationRequest(ingredients=[" rice "]).ingredients == ["rice"]
