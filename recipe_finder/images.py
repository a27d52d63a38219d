"""Deterministic illustrative images for recipes.

A recipe's image depends only on its id, name and ingredients, so
re-indexing a catalog always yields the same picture for the same recipe.
"""
from typing import Dict, Iterable, List, Tuple

_UNSPLASH = "https://images.unsplash.com/photo-{}?w=600&h=400&fit=crop&crop=center"


def _img(photo_id: str) -> str:
    return _UNSPLASH.format(photo_id)


# Checked in order; the first dish name found in the recipe name wins.
EXACT_MATCHES: List[Tuple[str, str]] = [
    ("spaghetti carbonara", _img("1551183053-bf91a1d81141")),
    ("chicken alfredo", _img("1572441713132-51c75654db73")),
    ("margherita pizza", _img("1565299624946-b28f40a0ca4b")),
    ("caesar salad", _img("1540420773420-3366772f4999")),
    ("grilled salmon", _img("1544943910-4c1dc44aab44")),
    ("beef steak", _img("1546833999-b9f581a1996d")),
    ("chocolate cake", _img("1551024506-0bccd828d307")),
    ("fried rice", _img("1563379091339-03246963d96c")),
    ("tomato soup", _img("1547592180-85f173990554")),
    ("pancakes", _img("1551782450-a2132b4ba21d")),
    ("hamburger", _img("1558030006-450675393462")),
    ("sushi", _img("1579952363873-27d3bfad9c0d")),
    ("lasagna", _img("1551892374-ecf8754cf8b0")),
    ("ramen", _img("1569718212165-3a8278d5f624")),
    ("fish and chips", _img("1565680018434-b513d5e5fd47")),
    ("greek salad", _img("1546793665-c74683f339c1")),
    ("fried chicken", _img("1562967914-608f82629710")),
    ("ice cream", _img("1551024601-bec78aea704b")),
    ("cheesecake", _img("1563729784474-d77dbb933a9e")),
    ("paella", _img("1565299507177-b0ac66763828")),
]

IMAGE_CATEGORIES: Dict[str, Dict[str, List[str]]] = {
    "breakfast": {
        "keywords": ["breakfast", "pancake", "waffle", "toast", "cereal",
                     "oatmeal", "eggs", "bacon", "omelet", "french toast"],
        "images": [
            _img("1551782450-a2132b4ba21d"),
            _img("1484723091739-30a097e8f929"),
            _img("1506084868230-bb9d95c24759"),
            _img("1525351484163-7529414344d8"),
            _img("1551218808-94e220e084d2"),
        ],
    },
    "pizza": {
        "keywords": ["pizza", "margherita", "pepperoni"],
        "images": [
            _img("1565299624946-b28f40a0ca4b"),
            _img("1513104890138-7c749659a591"),
            _img("1571407970349-bc81e7e96d47"),
            _img("1574071318508-1cdbab80d002"),
        ],
    },
    "pasta": {
        "keywords": ["pasta", "spaghetti", "linguine", "fettuccine", "penne",
                     "macaroni", "carbonara", "bolognese", "alfredo", "lasagna"],
        "images": [
            _img("1551183053-bf91a1d81141"),
            _img("1621996346565-e3dbc353d2e5"),
            _img("1563379091339-03246963d96c"),
            _img("1572441713132-51c75654db73"),
            _img("1551892374-ecf8754cf8b0"),
        ],
    },
    "soup": {
        "keywords": ["soup", "broth", "bisque", "chowder", "stew", "ramen",
                     "pho", "minestrone", "tomato soup"],
        "images": [
            _img("1547592180-85f173990554"),
            _img("1476718406336-bb5a9690ee2a"),
            _img("1574484284002-952d92456975"),
            _img("1569718212165-3a8278d5f624"),
            _img("1547592166-23ac45744acd"),
        ],
    },
    "salad": {
        "keywords": ["salad", "greens", "lettuce", "spinach", "caesar", "greek",
                     "cobb", "caprese"],
        "images": [
            _img("1540420773420-3366772f4999"),
            _img("1512621776951-a57141f2eefd"),
            _img("1546793665-c74683f339c1"),
            _img("1505576391880-b3f9d713dc4f"),
            _img("1571068316344-75bc76f77890"),
        ],
    },
    "chicken": {
        "keywords": ["chicken", "poultry", "grilled chicken", "fried chicken",
                     "chicken breast", "wings", "drumstick"],
        "images": [
            _img("1598103442097-8b74394b95c6"),
            _img("1532550907401-a500c9a57435"),
            _img("1604503468506-a8da13d82791"),
            _img("1562967914-608f82629710"),
            _img("1527477396000-e27163b481c2"),
        ],
    },
    "beef": {
        "keywords": ["beef", "steak", "burger", "ground beef", "ribeye",
                     "sirloin", "filet", "meatball", "roast beef"],
        "images": [
            _img("1546833999-b9f581a1996d"),
            _img("1558030006-450675393462"),
            _img("1544025162-d76694265947"),
            _img("1551218808-94e220e084d2"),
            _img("1529692236671-f1f6cf9683ba"),
        ],
    },
    "seafood": {
        "keywords": ["fish", "salmon", "tuna", "shrimp", "seafood", "crab",
                     "lobster", "cod", "tilapia", "prawns"],
        "images": [
            _img("1544943910-4c1dc44aab44"),
            _img("1559847844-5315695dadae"),
            _img("1565680018434-b513d5e5fd47"),
            _img("1571019613454-1cb2f99b2d8b"),
            _img("1559847844-d724ce1b2b5e"),
        ],
    },
    "rice": {
        "keywords": ["rice", "risotto", "fried rice", "pilaf", "biryani",
                     "paella", "sushi"],
        "images": [
            _img("1563379091339-03246963d96c"),
            _img("1571019613454-1cb2f99b2d8b"),
            _img("1579952363873-27d3bfad9c0d"),
            _img("1565299507177-b0ac66763828"),
            _img("1596797038530-2c107229654b"),
        ],
    },
    "sandwich": {
        "keywords": ["sandwich", "wrap", "sub", "panini", "club", "blt",
                     "grilled cheese", "burrito", "quesadilla"],
        "images": [
            _img("1539252554453-80ab65ce3586"),
            _img("1565299624946-b28f40a0ca4b"),
            _img("1551218808-94e220e084d2"),
            _img("1565299507177-b0ac66763828"),
            _img("1551218808-94e220e084d2"),
        ],
    },
    "dessert": {
        "keywords": ["cake", "cookie", "pie", "dessert", "sweet", "chocolate",
                     "ice cream", "pudding", "brownie", "cheesecake", "tiramisu"],
        "images": [
            _img("1551024506-0bccd828d307"),
            _img("1578985545062-69928b1d9587"),
            _img("1563729784474-d77dbb933a9e"),
            _img("1551024601-bec78aea704b"),
            _img("1571115764595-644a1f56a55c"),
        ],
    },
    "vegetarian": {
        "keywords": ["vegetarian", "vegan", "tofu", "quinoa", "lentil", "bean",
                     "veggie", "plant-based"],
        "images": [
            _img("1512621776951-a57141f2eefd"),
            _img("1540420773420-3366772f4999"),
            _img("1571068316344-75bc76f77890"),
            _img("1505576391880-b3f9d713dc4f"),
            _img("1546793665-c74683f339c1"),
        ],
    },
}

CATEGORY_PRIORITY = [
    "pizza", "pasta", "chicken", "beef", "seafood", "rice",
    "sandwich", "soup", "salad", "breakfast", "dessert", "vegetarian",
]

DEFAULT_IMAGES = [
    _img("1546069901-ba9599a7e63c"),
    _img("1504674900247-0877df9cc836"),
    _img("1555939594-58d7cb561ad1"),
    _img("1565299624946-b28f40a0ca4b"),
    _img("1551218808-94e220e084d2"),
]


def match_category(name: str, ingredients: Iterable[str]) -> str | None:
    """Return the first category (by priority) whose keywords appear."""
    name = name.lower()
    ings = [i.lower() for i in ingredients]
    for category in CATEGORY_PRIORITY:
        for keyword in IMAGE_CATEGORIES[category]["keywords"]:
            if keyword in name or any(keyword in ing for ing in ings):
                return category
    return None


def assign_image(recipe_id: int, name: str, ingredients: Iterable[str]) -> str:
    lowered = name.lower()
    for dish, url in EXACT_MATCHES:
        if dish in lowered:
            return url

    category = match_category(lowered, ingredients)
    if category is not None:
        images = IMAGE_CATEGORIES[category]["images"]
        return images[recipe_id % len(images)]
    return DEFAULT_IMAGES[recipe_id % len(DEFAULT_IMAGES)]
