# flake8: noqa
import sys
from pathlib import Path

# Ensure project root is on sys.path so `recipe_finder` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest

from recipe_finder.catalog import index_catalog
from recipe_finder.errors import InvalidCatalog, MalformedRecipe
from recipe_finder.images import DEFAULT_IMAGES, IMAGE_CATEGORIES, assign_image, match_category
from recipe_finder.normalize import normalize_ingredient
from recipe_finder.recipes import load_recipes

DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "recipes.json"


def _raw(id, name, ingredients, **extra):
    r = {"id": id, "name": name, "ingredients": ingredients, "steps": ["cook"]}
    r.update(extra)
    return r


RAW = [
    _raw(1, "Chicken Fried Rice", ["2 cups cooked rice", "1 chicken breast", "1 chopped onion"],
         dietary=["Dairy-Free"], difficulty="Easy", time=25, servings=2,
         nutrition={"calories": 520, "protein": 32, "fat": 14, "carbs": 62}),
    _raw(2, "3 Bean Chili", ["1 can kidney beans", "1 chopped onion", "2 cups canned tomatoes"]),
    _raw(3, "Plain Toast", ["2 slices bread", "1 tbsp butter"]),
]


def test_index_normalizes_ingredients_and_names():
    catalog = index_catalog(RAW)
    assert len(catalog) == 3
    first = catalog.get(1)
    assert first.ingredients == ["rice", "chicken breast", "onion"]
    assert first.dietary == ["dairy-free"]
    assert first.difficulty == "easy"
    assert first.nutrition.calories == 520
    assert catalog.get(2).name == "Bean Chili"


def test_vocabulary_is_normalized_set_without_duplicates():
    catalog = index_catalog(RAW)
    expected = {normalize_ingredient(i) for r in RAW for i in r["ingredients"]} - {""}
    assert set(catalog.vocabulary) == expected
    assert len(catalog.vocabulary) == len(expected)
    # insertion order follows the catalog
    assert catalog.vocabulary[:3] == ("rice", "chicken breast", "onion")
    assert list(catalog.sorted_vocabulary) == sorted(expected)


def test_vocabulary_matches_sample_data_file():
    raw = load_recipes(DATA_FILE)
    catalog = index_catalog(raw)
    expected = {normalize_ingredient(i) for r in raw for i in r["ingredients"]} - {""}
    assert set(catalog.vocabulary) == expected
    assert "milk" in catalog.vocabulary


@pytest.mark.parametrize("bad", [None, [], (), {}, "recipes", {"id": 1}])
def test_invalid_catalog(bad):
    with pytest.raises(InvalidCatalog):
        index_catalog(bad)


def test_malformed_records_are_skipped():
    raw = RAW + [
        {"name": "No id", "ingredients": ["salt"]},
        _raw("abc", "Bad id", ["salt"]),
        _raw(True, "Bool id", ["salt"]),
        {"id": 7, "name": "No ingredients"},
        _raw(8, "Empty ingredients", []),
        _raw(9, "Blank ingredients", ["  ", ""]),
        _raw(1, "Duplicate id", ["salt"]),
        "not a recipe",
    ]
    catalog = index_catalog(raw)
    assert [r.id for r in catalog] == [1, 2, 3]
    assert len(catalog.skipped) == 8
    assert all(isinstance(e, MalformedRecipe) for e in catalog.skipped)
    assert [e.position for e in catalog.skipped] == list(range(3, 11))
    assert "duplicate id 1" in catalog.skipped[6].reason


def test_all_records_malformed_is_invalid():
    with pytest.raises(InvalidCatalog):
        index_catalog([{"name": "x"}, {"id": 2}])


def test_numeric_string_id_is_accepted():
    catalog = index_catalog([_raw("5", "Toast", ["bread"])])
    assert catalog.get(5) is not None


def test_recipes_are_immutable():
    catalog = index_catalog(RAW)
    with pytest.raises(Exception):
        catalog.get(1).name = "Changed"


def test_reindexing_gives_identical_images():
    first = {r.id: r.image for r in index_catalog(RAW)}
    second = {r.id: r.image for r in index_catalog(RAW)}
    assert first == second


def test_image_exact_dish_wins():
    url = assign_image(99, "Grandma's Margherita Pizza", ["dough"])
    assert url == IMAGE_CATEGORIES["pizza"]["images"][0]


def test_image_category_priority_and_id_modulo():
    # chicken outranks rice in the priority list
    images = IMAGE_CATEGORIES["chicken"]["images"]
    assert assign_image(7, "Dinner Bowl", ["rice", "chicken thigh"]) == images[7 % len(images)]
    assert match_category("dinner bowl", ["rice", "chicken thigh"]) == "chicken"


def test_image_keyword_in_ingredient():
    assert match_category("Weeknight Special", ["200g firm tofu"]) == "vegetarian"


def test_image_default_fallback():
    for rid in range(6):
        assert assign_image(rid, "Mystery", ["xyz"]) == DEFAULT_IMAGES[rid % len(DEFAULT_IMAGES)]


def test_suggest_excludes_selected_and_limits():
    catalog = index_catalog(load_recipes(DATA_FILE))
    suggestions = catalog.suggest("oil", exclude=["olive oil"])
    assert "olive oil" not in suggestions
    assert all("oil" in s for s in suggestions)
    assert len(catalog.suggest("e", limit=3)) == 3
    assert catalog.suggest("   ") == []


def test_is_known_checks_vocabulary():
    catalog = index_catalog(RAW)
    assert catalog.is_known("onion")
    assert catalog.is_known("chicken breast")
    assert not catalog.is_known("1 chopped onion")
    assert not catalog.is_known("dragonfruit")


def test_featured_is_seeded():
    catalog = index_catalog(load_recipes(DATA_FILE))
    a = [r.id for r in catalog.featured(4, seed=11)]
    b = [r.id for r in catalog.featured(4, seed=11)]
    assert a == b
    assert len(set(a)) == 4
    assert len(catalog.featured(100)) == len(catalog)


def test_load_recipes_missing_file(tmp_path):
    with pytest.raises(InvalidCatalog):
        load_recipes(tmp_path / "nope.json")


def test_load_recipes_bad_json(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text("[{", encoding="utf-8")
    with pytest.raises(InvalidCatalog):
        load_recipes(p)
