from typing import Iterable, Iterator, List, Tuple


class Selection:
    """The ingredients a user has chosen, in the order they chose them.

    No ingredient appears twice. Only explicit add/remove/clear calls change
    it; searching never does.
    """

    def __init__(self, ingredients: Iterable[str] = ()):
        self._items: List[str] = []
        self.extend(ingredients)

    @staticmethod
    def _key(ingredient: str) -> str:
        return (ingredient or "").strip().lower()

    def add(self, ingredient: str) -> bool:
        key = self._key(ingredient)
        if not key or key in self._items:
            return False
        self._items.append(key)
        return True

    def remove(self, ingredient: str) -> bool:
        key = self._key(ingredient)
        if key not in self._items:
            return False
        self._items.remove(key)
        return True

    def toggle(self, ingredient: str) -> bool:
        """Add if absent, remove if present. Returns True if now selected."""
        if self._key(ingredient) in self._items:
            self.remove(ingredient)
            return False
        return self.add(ingredient)

    def extend(self, ingredients: Iterable[str]) -> int:
        return sum(1 for ing in ingredients if self.add(ing))

    def clear(self) -> None:
        self._items.clear()

    @property
    def items(self) -> Tuple[str, ...]:
        return tuple(self._items)

    def __contains__(self, ingredient) -> bool:
        return isinstance(ingredient, str) and self._key(ingredient) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Selection({self._items!r})"
