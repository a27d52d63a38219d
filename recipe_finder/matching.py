import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import EmptySelection
from .normalize import is_ingredient_match
from .schemas import MatchResult, Recipe

log = logging.getLogger(__name__)

MATCH_MODES = ("exact", "contains")


def _dedupe(values: Iterable[str]) -> List[str]:
    out: List[str] = []
    for v in values:
        v = (v or "").strip().lower()
        if v and v not in out:
            out.append(v)
    return out


def score_recipe(recipe: Recipe, selection: Iterable[str], mode: str = "contains") -> Tuple[int, float]:
    """Return (matched, accuracy) of a recipe for a selection.

    `matched` counts selected ingredients found in the recipe; `accuracy` is
    that count as a percentage of the selection size.
    """
    if mode not in MATCH_MODES:
        raise ValueError(f"unknown match mode: {mode!r}")
    selected = _dedupe(selection)
    if not selected:
        raise EmptySelection("select at least one ingredient")
    matched = sum(
        1 for s in selected
        if any(is_ingredient_match(s, ing, mode) for ing in recipe.ingredients)
    )
    return matched, 100.0 * matched / len(selected)


def meets_dietary(recipe: Recipe, dietary_filters: Iterable[str]) -> bool:
    tags = set(recipe.dietary)
    return all(f in tags for f in _dedupe(dietary_filters))


def search(
    catalog: Iterable[Recipe],
    selection: Iterable[str],
    dietary_filters: Iterable[str] = (),
    *,
    mode: str = "contains",
    ranked: bool = False,
    threshold: float = 50.0,
    is_favorite: Optional[Callable[[int], bool]] = None,
) -> List[MatchResult]:
    """Score every recipe against the selection and keep the qualifying ones.

    Threshold mode keeps recipes whose accuracy reaches `threshold`, in
    catalog order. Ranked mode keeps every recipe with at least one match,
    sorted by match count (highest first, ties in catalog order).
    Dietary filters must all be present on a recipe for it to qualify.
    `is_favorite` only sets the `favorite` flag on results.
    """
    if mode not in MATCH_MODES:
        raise ValueError(f"unknown match mode: {mode!r}")
    selected = _dedupe(selection)
    if not selected:
        raise EmptySelection("select at least one ingredient")
    filters = _dedupe(dietary_filters)

    results: List[MatchResult] = []
    for recipe in catalog:
        if filters and not meets_dietary(recipe, filters):
            continue
        matched, accuracy = score_recipe(recipe, selected, mode)
        if ranked:
            if matched == 0:
                continue
        elif accuracy < threshold:
            continue
        results.append(MatchResult(
            recipe=recipe,
            matched=matched,
            accuracy=accuracy,
            favorite=bool(is_favorite(recipe.id)) if is_favorite else False,
        ))

    if ranked:
        # sort() is stable, so equal counts keep catalog order
        results.sort(key=lambda r: r.matched, reverse=True)

    log.debug(
        "search %s mode=%s ranked=%s filters=%s -> %d result(s)",
        selected, mode, ranked, filters, len(results),
    )
    return results
