from typing import Optional

# Detected food label (lowercase) -> canonical ingredient
FOOD_MAPPINGS = {
    "tomato": "tomato",
    "tomatoes": "tomato",
    "onion": "onion",
    "onions": "onion",
    "garlic": "garlic",
    "chicken": "chicken",
    "beef": "beef",
    "pork": "pork",
    "fish": "fish",
    "salmon": "salmon",
    "tuna": "tuna",
    "cheese": "cheese",
    "milk": "milk",
    "egg": "egg",
    "eggs": "egg",
    "bread": "bread",
    "rice": "rice",
    "pasta": "pasta",
    "potato": "potato",
    "potatoes": "potato",
    "carrot": "carrot",
    "carrots": "carrot",
    "bell pepper": "bell pepper",
    "pepper": "bell pepper",
    "capsicum": "bell pepper",
    "mushroom": "mushroom",
    "mushrooms": "mushroom",
    "spinach": "spinach",
    "lettuce": "lettuce",
    "cucumber": "cucumber",
    "avocado": "avocado",
    "lemon": "lemon",
    "lime": "lime",
    "apple": "apple",
    "banana": "banana",
    "orange": "orange",
    "broccoli": "broccoli",
    "cauliflower": "cauliflower",
    "zucchini": "zucchini",
    "courgette": "zucchini",
    "eggplant": "eggplant",
    "eggplants": "eggplant",
    "aubergine": "eggplant",
    "corn": "corn",
    "beans": "beans",
    "peas": "peas",
    "scallion": "green onion",
    "scallions": "green onion",
    "cilantro": "coriander",
}


def map_label(label: str) -> Optional[str]:
    """Map a recognition label to a known ingredient, or None."""
    if not isinstance(label, str):
        return None
    return FOOD_MAPPINGS.get(label.strip().lower())


def suggest_ingredient(label: str) -> str:
    # unmapped labels are still offered to the user as typed by the service
    return map_label(label) or (label or "").strip().lower()
