import logging
import random
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from .errors import InvalidCatalog, MalformedRecipe
from .images import assign_image
from .normalize import clean_recipe_name, normalize_ingredient
from .schemas import RawRecipe, Recipe

log = logging.getLogger(__name__)


class Catalog:
    """Indexed recipes plus the ingredient vocabulary derived from them.

    Built once per catalog load by `index_catalog`; never mutated afterwards.
    """

    def __init__(self, recipes: Sequence[Recipe], skipped: Sequence[MalformedRecipe] = ()):
        self.recipes: Tuple[Recipe, ...] = tuple(recipes)
        self.skipped: Tuple[MalformedRecipe, ...] = tuple(skipped)
        self._by_id: Dict[int, Recipe] = {r.id: r for r in self.recipes}

        seen = {}
        for r in self.recipes:
            for ing in r.ingredients:
                if ing:
                    seen.setdefault(ing, None)
        self.vocabulary: Tuple[str, ...] = tuple(seen)
        self.sorted_vocabulary: Tuple[str, ...] = tuple(sorted(seen))
        self._vocab_set = frozenset(seen)

    def __len__(self) -> int:
        return len(self.recipes)

    def __iter__(self) -> Iterator[Recipe]:
        return iter(self.recipes)

    def get(self, recipe_id: int) -> Optional[Recipe]:
        return self._by_id.get(recipe_id)

    def is_known(self, ingredient: str) -> bool:
        return ingredient in self._vocab_set

    def suggest(self, query: str, exclude: Iterable[str] = (), limit: int = 10) -> List[str]:
        """Vocabulary entries containing `query`, minus those already chosen."""
        q = (query or "").strip().lower()
        if not q:
            return []
        excluded = set(exclude)
        out = []
        for ing in self.vocabulary:
            if q in ing and ing not in excluded:
                out.append(ing)
                if len(out) >= limit:
                    break
        return out

    def featured(self, count: int = 6, seed: int = 0) -> List[Recipe]:
        # seeded so the home-page sample is reproducible
        count = max(0, min(count, len(self.recipes)))
        return random.Random(seed).sample(list(self.recipes), count)


def _index_one(position: int, raw, seen_ids: set) -> Recipe:
    if not isinstance(raw, dict):
        raise MalformedRecipe(position, "record is not an object")
    try:
        rec = RawRecipe.model_validate(raw)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedRecipe(position, f"invalid fields: {fields}") from e

    if rec.id in seen_ids:
        raise MalformedRecipe(position, f"duplicate id {rec.id}")

    ingredients = []
    for ing in rec.ingredients:
        if not ing.strip():
            continue
        ingredients.append(normalize_ingredient(ing) or ing)
    if not ingredients:
        raise MalformedRecipe(position, "no ingredients")

    image = assign_image(rec.id, rec.name, rec.ingredients)
    data = rec.model_dump(exclude={"ingredients"})
    data.update(
        name=clean_recipe_name(rec.name) or rec.name,
        ingredients=ingredients,
        image=image,
    )
    return Recipe.model_validate(data)


def index_catalog(raw_recipes) -> Catalog:
    """Validate, normalize and enrich a raw catalog.

    Malformed records are skipped; the catalog keeps them in `skipped`.
    Raises InvalidCatalog when the input is not a non-empty list or when no
    record survives.
    """
    if not isinstance(raw_recipes, (list, tuple)) or not raw_recipes:
        raise InvalidCatalog("Invalid recipe data: not an array or empty")

    recipes: List[Recipe] = []
    skipped: List[MalformedRecipe] = []
    seen_ids: set = set()
    for position, raw in enumerate(raw_recipes):
        try:
            recipe = _index_one(position, raw, seen_ids)
        except MalformedRecipe as e:
            skipped.append(e)
            continue
        seen_ids.add(recipe.id)
        recipes.append(recipe)

    if skipped:
        log.warning(
            "Skipped %d malformed recipe(s): %s",
            len(skipped), "; ".join(str(e) for e in skipped),
        )
    if not recipes:
        raise InvalidCatalog("no valid recipes in catalog")

    catalog = Catalog(recipes, skipped)
    log.info(
        "Indexed %d recipe(s), %d distinct ingredient(s)",
        len(catalog), len(catalog.vocabulary),
    )
    return catalog
