import re
from typing import Iterable, List

# Exact matches only; units and descriptors are only stripped from the front.

MEASUREMENT_UNITS = frozenset([
    "cup", "cups", "c", "tbsp", "tsp", "tablespoon", "tablespoons",
    "teaspoon", "teaspoons",
    "oz", "ounce", "ounces", "lb", "lbs", "pound", "pounds",
    "gram", "grams", "g", "kg", "kilogram", "kilograms",
    "ml", "milliliter", "milliliters", "liter", "liters", "l",
    "pint", "pints", "pt", "quart", "quarts", "qt", "gallon", "gallons", "gal",
    "inch", "inches", "cm", "centimeter", "centimeters",
])

DESCRIPTOR_WORDS = frozenset([
    "of", "the", "and", "or", "with", "without", "plus", "extra",
    "fresh", "dried", "frozen", "canned", "bottled", "packaged",
    "chopped", "sliced", "diced", "minced", "grated", "shredded",
    "cooked", "uncooked", "raw", "prepared", "ready",
    "low-fat", "non-fat", "fat-free", "sugar-free", "salt-free",
    "organic", "natural", "pure", "whole", "reduced",
])

_LEADING_PERCENT = re.compile(r"^[0-9]+%?\s*")
_LEADING_NON_ALPHA = re.compile(r"^[^a-z]+")
_NUMBER = re.compile(r"^[0-9]+(/[0-9]+)?$")
_NUMBER_WITH_UNIT = re.compile(r"^[0-9]+[a-z]+$")


def _is_measure(word: str) -> bool:
    if _NUMBER.match(word):
        return True
    if word in MEASUREMENT_UNITS:
        return True
    # "2cups", "500g"
    if _NUMBER_WITH_UNIT.match(word):
        return any(unit in word for unit in MEASUREMENT_UNITS)
    return False


def _clean_once(text: str) -> str:
    t = _LEADING_PERCENT.sub("", text)
    t = _LEADING_NON_ALPHA.sub("", t).strip()

    words = t.split()
    while words and _is_measure(words[0]):
        words.pop(0)

    t = _LEADING_NON_ALPHA.sub("", " ".join(words)).strip()

    words = t.split()
    while len(words) > 1 and words[0] in DESCRIPTOR_WORDS:
        words.pop(0)
    return " ".join(words)


def normalize_ingredient(s: str) -> str:
    """Reduce a raw ingredient phrase to its canonical lowercase form.

    "2% low-fat milk" -> "milk", "1/2 cup chopped onion" -> "onion".

    The cleaning pass is repeated until the text is stable, so the result
    is a fixed point and normalizing twice changes nothing. When cleaning
    leaves fewer than two characters the trimmed input is returned as is.
    """
    if not isinstance(s, str):
        return ""
    original = s.strip()
    if not original:
        return ""

    w = original.lower()
    while True:
        cleaned = _clean_once(w)
        if cleaned == w:
            break
        w = cleaned

    if len(w) < 2:
        return original
    return w


def normalize_many(names: Iterable[str]) -> List[str]:
    """Normalize a batch, dropping blanks and keeping first-seen order."""
    out: List[str] = []
    for name in names:
        n = normalize_ingredient(name)
        if n and n not in out:
            out.append(n)
    return out


def clean_recipe_name(name: str) -> str:
    # "12 Chicken Curry" -> "Chicken Curry"
    if name and name[0].isdigit():
        return re.sub(r"^[0-9]+\s*", "", name).strip()
    return name


def is_ingredient_match(selected: str, recipe_ing: str, mode: str = "contains") -> bool:
    """Return True if a selected ingredient matches a recipe ingredient.

    `exact` compares the canonical strings. `contains` also accepts either
    string being a substring of the other, so "chicken" matches
    "chicken breast" and "chicken breast" matches "chicken".
    """
    if not selected or not recipe_ing:
        return False
    if mode == "exact":
        return selected == recipe_ing
    if mode == "contains":
        return selected in recipe_ing or recipe_ing in selected
    raise ValueError(f"unknown match mode: {mode!r}")
