from __future__ import annotations

import copy
from threading import RLock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class ValueCache(Generic[T]):
    """Lock-guarded single value cache.

    Callers only ever receive copies of the cached value, never the stored
    object itself, so a returned list can be mutated freely.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._value: T | None = None
        self._filled = False

    def get_or_compute(self, compute: Callable[[], T]) -> T:
        """Return the cached value, computing and storing it on a miss.

        Exceptions from *compute* propagate and leave the cache empty.
        """
        with self._lock:
            if not self._filled:
                self._value = compute()
                self._filled = True
            return copy.copy(self._value)  # type: ignore[return-value]

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._filled = False

    @property
    def filled(self) -> bool:
        with self._lock:
            return self._filled
