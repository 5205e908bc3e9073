"""Memoisation keyed by a generation counter.

Every cached value remembers the generation it was computed at; when the
owner's counter has moved on, the whole cache is dropped and values are
recomputed on next access.
"""

from typing import Any, Callable, Hashable


class GenerationCache:
    """Dictionary cache invalidated wholesale when the generation changes.

    Parameters
    ----------
    generation : callable
        Returns the owner's current generation counter.
    """

    def __init__(self, generation: Callable[[], int]) -> None:
        self._generation = generation
        self._seen = generation()
        self._values: dict[Hashable, Any] = {}

    def _sync(self) -> None:
        current = self._generation()
        if current != self._seen:
            self._values.clear()
            self._seen = current

    def get(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        self._sync()
        if key not in self._values:
            self._values[key] = compute()
        return self._values[key]

    def __contains__(self, key: Hashable) -> bool:
        self._sync()
        return key in self._values

    def __len__(self) -> int:
        self._sync()
        return len(self._values)
