import pytest

from recipesmith.models.nutrition import InsightType, NutritionData, Severity, TrendDirection
from recipesmith.models.recipe import Recipe
from recipesmith.services.nutrition import (
    CHOLESTEROL_RULES,
    SODIUM_RULES,
    NutritionEstimator,
    NutritionTuning,
    daily_value,
    keyword_estimate,
)


@pytest.fixture
def estimator():
    return NutritionEstimator()


def _recipe(payload, ingredients=None, types=None, **macros):
    data = dict(payload)
    data["macros"] = dict(payload["macros"], **macros)
    if ingredients is not None:
        data["ingredients"] = ingredients
    data["ingredient_types"] = types
    return Recipe.model_validate(data)


def _data(**kw):
    base = dict(calories=400, protein=15, carbohydrates=40, fat=10, fiber=5)
    base.update(kw)
    return NutritionData(**base)


# ------------------------------
# calculate
# ------------------------------
def test_basic_figures(estimator, recipe):
    d = estimator.calculate(recipe)
    assert (d.calories, d.protein, d.carbohydrates, d.fat) == (520, 32, 55, 16)
    assert d.fiber == 4 and d.sugar == 5 and d.saturated_fat == 6
    assert d.trans_fat == 0


def test_eggs_and_cheese_cholesterol(estimator, payload):
    r = _recipe(payload, ingredients=["2 eggs", "1 cup shredded cheese"])
    d = estimator.calculate(r)
    assert d.cholesterol == 186 + 30
    assert d.cholesterol_estimated is True
    # cheese is also the only sodium source
    assert d.sodium == 250


def test_explicit_values_kept(estimator, payload):
    r = _recipe(payload, ingredients=["2 eggs", "soy sauce"], sodium="1.2g", cholesterol="95mg")
    d = estimator.calculate(r)
    assert d.sodium == pytest.approx(1200)
    assert d.cholesterol == 95
    assert d.sodium_estimated is False and d.cholesterol_estimated is False


def test_explicit_zero_is_not_replaced(estimator, payload):
    r = _recipe(payload, ingredients=["3 eggs"], cholesterol="0mg")
    d = estimator.calculate(r)
    assert d.cholesterol == 0 and d.cholesterol_estimated is False


def test_tags_take_precedence_over_keywords(estimator, payload):
    types = {"anchovy paste": ["Sodium"], "cured ham": ["salt", "protein"], "2 eggs": ["cholesterol"]}
    r = _recipe(payload, ingredients=["anchovy paste", "cured ham", "2 eggs", "soy sauce"], types=types)
    d = estimator.calculate(r)
    assert d.sodium == 800
    assert d.cholesterol == 120


def test_keywords_used_when_tags_give_nothing(estimator, payload):
    r = _recipe(payload, ingredients=["1 tbsp soy sauce", "2 cups chicken broth"], types={"x": ["vegetable"]})
    assert estimator.calculate(r).sodium == 900 + 700


def test_first_matching_rule_per_ingredient():
    # cheese row comes before salt
    assert keyword_estimate(["cheese with salt"], SODIUM_RULES) == 250
    assert keyword_estimate(["ground beef", "pork chops", "lamb"], CHOLESTEROL_RULES) == 120


def test_keywords_match_inside_words():
    assert keyword_estimate(["2 tbsp salted butter"], SODIUM_RULES) == 500
    assert keyword_estimate(["1 cup Buttermilk"], CHOLESTEROL_RULES) == 30


def test_salted_butter_sodium(estimator, payload):
    d = estimator.calculate(_recipe(payload, ingredients=["2 tbsp salted butter"]))
    assert d.sodium == 500 and d.sodium_estimated is True


def test_prefixed_tags_count(estimator, payload):
    types = {"anchovy paste": ["high_sodium"], "fish roe": ["High_Cholesterol"]}
    r = _recipe(payload, ingredients=["anchovy paste", "fish roe"], types=types)
    d = estimator.calculate(r)
    assert d.sodium == 400
    assert d.cholesterol == 120


def test_estimates_are_clamped(payload):
    est = NutritionEstimator(NutritionTuning(sodium_max_mg=1000, cholesterol_max_mg=200))
    r = _recipe(payload, ingredients=["soy sauce", "beef broth", "salt", "6 eggs", "shrimp"])
    d = est.calculate(r)
    assert 0 <= d.sodium <= 1000 and d.sodium == 1000
    assert 0 <= d.cholesterol <= 200 and d.cholesterol == 200


def test_default_clamp_bounds(estimator, payload):
    many = ["soy sauce"] * 20
    d = estimator.calculate(_recipe(payload, ingredients=many))
    assert d.sodium == 5000


def test_calculation_is_idempotent(estimator, recipe):
    assert estimator.calculate(recipe) == estimator.calculate(recipe)


def test_vitamins_get_daily_values(estimator, payload):
    r = _recipe(payload, vitamins=[
        {"name": "Vitamin A", "amount": "1500", "unit": "IU"},
        {"name": "Vitamin B12", "amount": "1.2", "unit": "mcg"},
        {"name": "Unobtainium", "amount": "5", "unit": "mg"},
    ])
    vit = {v.name: v for v in estimator.calculate(r).vitamins}
    assert vit["Vitamin A"].percent_daily_value == pytest.approx(50)
    assert vit["Vitamin B12"].daily_value == 2.4
    assert vit["Unobtainium"].daily_value == 0
    assert vit["Unobtainium"].percent_daily_value == 0


@pytest.mark.parametrize("name,unit,dv", [
    ("Vitamin A", "mcg", 900),
    ("Vitamin A", "mg", 0.9),
    ("Vitamin B1", "mg", 1.2),
    ("Thiamin", "mg", 1.2),
    ("Vitamin D", "IU", 800),
    ("Folate", "µg", 400),
    ("Calcium", "mg", 1000),
    ("Iron", "IU", 0),
])
def test_daily_value_table(name, unit, dv):
    assert daily_value(name, unit) == pytest.approx(dv)


# ------------------------------
# insights
# ------------------------------
def test_insights_for_balanced_recipe(estimator):
    assert estimator.health_insights(_data(protein=15, fiber=5, calories=200)) == []


def test_high_protein_low_fiber_high_sodium(estimator):
    insights = estimator.health_insights(_data(protein=30, fiber=1, sodium=900, calories=200))
    assert [i.title for i in insights] == ["High Protein Content", "Low Fiber Content", "High Sodium Content"]
    assert insights[0].type is InsightType.positive and insights[0].recommendation is None
    assert insights[1].type is InsightType.concern
    assert insights[2].severity is Severity.high


def test_saturated_fat_needs_fat(estimator):
    assert any(i.title == "High Saturated Fat" for i in estimator.health_insights(_data(fat=10, saturated_fat=4)))
    titles = [i.title for i in estimator.health_insights(_data(fat=0, saturated_fat=0))]
    assert "High Saturated Fat" not in titles


def test_calorie_density(estimator):
    titles = [i.title for i in estimator.health_insights(_data(calories=500, protein=15, carbohydrates=40, fat=10))]
    assert "High Calorie Density" in titles
    # zero macros: denominator floors at 1
    titles = [i.title for i in estimator.health_insights(_data(calories=3, protein=0, carbohydrates=0, fat=0))]
    assert "High Calorie Density" not in titles


def test_dietary_recommendations(estimator):
    recs = estimator.dietary_recommendations(_data(protein=10, fiber=2, fat=10, saturated_fat=5, sodium=700))
    assert len(recs) == 4
    assert estimator.dietary_recommendations(_data(protein=25, fiber=6, fat=10, saturated_fat=1, sodium=100)) == []


# ------------------------------
# trends
# ------------------------------
def test_trends_empty(estimator):
    assert estimator.trends([]) == []


def test_trends_average(estimator, payload):
    a = _recipe(payload)
    b = Recipe.model_validate(dict(payload, cal="320", macros=dict(payload["macros"], protein="12g")))
    (trend,) = estimator.trends([a, b])
    assert trend.period == "All Time"
    assert trend.average_calories == 420
    assert trend.average_protein == 22
    assert trend.trend is TrendDirection.stable
