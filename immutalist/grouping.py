from __future__ import annotations
from typing import Any, Callable, Dict, Hashable, Iterable, List, Tuple, TypeVar

from .errors import InvalidArgument

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(items: Iterable[T], key: Callable[[T, int], str]) -> Dict[str, List[T]]:
    """Partition ``items`` into a dict of key -> items, keys in first-seen order.

    Raises:
        InvalidArgument: if ``key`` returns anything other than a ``str``.
    """
    out: Dict[str, List[T]] = {}
    for i, x in enumerate(items):
        k = key(x, i)
        if not isinstance(k, str):
            raise InvalidArgument(f"group key must be a str, got {type(k).__name__}")
        out.setdefault(k, []).append(x)
    return out


def count_by(items: Iterable[T], key: Callable[[T, int], K]) -> Dict[K, int]:
    out: Dict[K, int] = {}
    for i, x in enumerate(items):
        k = key(x, i)
        try:
            hash(k)
        except TypeError as ex:
            raise InvalidArgument(f"count key must be hashable, got {type(k).__name__}") from ex
        out[k] = out.get(k, 0) + 1
    return out


class Seen:
    """Membership set that tolerates unhashable values.

    Hashable values go into a ``set``; anything else is kept in a list and
    compared with ``==``.
    """

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._hashed: set = set()
        self._other: List[Any] = []
        for v in values:
            self.add(v)

    def __contains__(self, v: Any) -> bool:
        try:
            return v in self._hashed
        except TypeError:
            return v in self._other

    def add(self, v: Any) -> None:
        try:
            self._hashed.add(v)
        except TypeError:
            self._other.append(v)


class Bag:
    """Multiset counterpart of ``Seen``; ``take`` consumes one occurrence."""

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._counts: Dict[Any, int] = {}
        self._other: List[Any] = []
        for v in values:
            try:
                self._counts[v] = self._counts.get(v, 0) + 1
            except TypeError:
                self._other.append(v)

    def take(self, v: Any) -> bool:
        try:
            n = self._counts.get(v, 0)
        except TypeError:
            for i, o in enumerate(self._other):
                if o == v:
                    del self._other[i]
                    return True
            return False
        if n == 0:
            return False
        self._counts[v] = n - 1
        return True


def unique_by(items: Iterable[T], key: Callable[[T, int], Any]) -> List[T]:
    seen = Seen(); out: List[T] = []
    for i, x in enumerate(items):
        k = key(x, i)
        if k in seen:
            continue
        seen.add(k); out.append(x)
    return out


def partition(items: Iterable[T], pred: Callable[[T, int], bool]) -> Tuple[List[T], List[T]]:
    matched: List[T] = []; unmatched: List[T] = []
    for i, x in enumerate(items):
        (matched if pred(x, i) else unmatched).append(x)
    return matched, unmatched
