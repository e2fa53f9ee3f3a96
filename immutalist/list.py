from __future__ import annotations
import copy
import inspect
from dataclasses import dataclass
from functools import cmp_to_key
from typing import (
    Any, Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional,
    Set, Tuple, TypeGuard, TypeVar, Union, overload,
)

from .errors import InvalidArgument, UnsupportedOperation
from .grouping import Bag, Seen, count_by as _count_by, group_by as _group_by, partition as _partition, unique_by as _unique_by
from .logger import get_logger
from .option import NONE, Option, Some
from .random import current_random

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K", bound=Hashable)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _require_callable(fn: Any, name: str) -> None:
    if not callable(fn):
        raise InvalidArgument(f"'{name}' must be a function.")


def _indexed(fn: Any, name: str) -> Callable[[Any, int], Any]:
    """Validate ``fn`` and adapt it to the ``(item, index)`` calling convention.

    Callables needing one argument (``lambda x: ...``, ``str``, ``round``,
    ``dict.get``) receive only the item; callables with two or more required
    positional parameters, or ``*args``, also receive the index.
    """
    _require_callable(fn, name)
    if isinstance(fn, type):
        return lambda x, _i: fn(x)
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return lambda x, _i: fn(x)
    if any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in params):
        return fn
    if len([p for p in params if p.kind in _POSITIONAL and p.default is p.empty]) >= 2:
        return fn
    return lambda x, _i: fn(x)


def _is_nested(x: Any) -> bool:
    return isinstance(x, (list, tuple, ImmutableList))


def _flatten(items: Iterable[Any], depth: float) -> List[Any]:
    out: List[Any] = []
    for x in items:
        if depth > 0 and _is_nested(x):
            out.extend(_flatten(x, depth - 1))
        else:
            out.append(x)
    return out


def _join(items: Iterable[Any]) -> str:
    # Nested sequences join inline: (1, [2, 3]) renders as "1,2,3"
    return ",".join("" if x is None else _join(x) if _is_nested(x) else str(x) for x in items)


def _fallback_key(x: Any) -> Tuple[bool, str]:
    return (x is None, "" if x is None else str(x))


def _require_list(other: Any) -> None:
    if not isinstance(other, ImmutableList):
        raise InvalidArgument("'other' must be an instance of 'ImmutableList'.")


@dataclass(frozen=True, repr=False)
class ImmutableList(Generic[T]):
    """An ordered, fixed collection whose operations all return new values.

    The elements live in a private tuple; every transformation builds a new
    tuple and wraps it in a new ``ImmutableList``. Accessors that may find
    nothing return an :class:`~immutalist.option.Option` instead of ``None``.

    Example:
        ```python
        nums = ImmutableList.of(1, 2, 3, None, 4, None, 5)
        nums.compact().to_list()           # [1, 2, 3, 4, 5]
        nums.compact().first().unwrap()    # 1
        ImmutableList.empty().last()       # NONE
        ```
    """

    _items: Tuple[T, ...]

    def __post_init__(self) -> None:
        if not isinstance(self._items, tuple):
            object.__setattr__(self, "_items", tuple(self._items))

    # -- construction -----------------------------------------------------

    @staticmethod
    def empty() -> "ImmutableList[T]":
        return ImmutableList(())

    @staticmethod
    def of(*items: T) -> "ImmutableList[T]":
        return ImmutableList(items)

    @staticmethod
    def from_iterable(source: Union[Iterable[T], Any]) -> "ImmutableList[T]":
        """Materialize any finite iterable, or an object with ``__len__`` and ``__getitem__``.

        Raises:
            InvalidArgument: if ``source`` is neither iterable nor sequence-like.
        """
        if isinstance(source, ImmutableList):
            return ImmutableList(source._items)
        if hasattr(source, "__iter__"):
            return ImmutableList(tuple(source))
        if hasattr(source, "__len__") and hasattr(source, "__getitem__"):
            return ImmutableList(tuple(source[i] for i in range(len(source))))
        raise InvalidArgument("'source' must be an iterable object.")

    @staticmethod
    def range(start: float, stop: float, step: float = 1) -> "ImmutableList[float]":
        """``start, start + step, ...`` while strictly below ``stop``."""
        if step <= 0:
            raise InvalidArgument("'step' must be a positive number.")
        out: List[float] = []
        k = 0
        while start + k * step < stop:
            out.append(start + k * step)
            k += 1
        return ImmutableList(out)

    # -- protocol ---------------------------------------------------------

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> "ImmutableList[T]": ...

    def __getitem__(self, index: int | slice) -> "T | ImmutableList[T]":
        if isinstance(index, slice):
            return ImmutableList(self._items[index])
        return self._items[index]

    def __repr__(self) -> str:
        return f"ImmutableList({list(self._items)!r})"

    def __str__(self) -> str:
        return _join(self._items)

    @property
    def size(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return len(self._items) == 0

    def is_not_empty(self) -> bool:
        return len(self._items) > 0

    def _normalize(self, index: int) -> int:
        return len(self._items) + index if index < 0 else index

    def _in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._items)

    def _unchanged(self, op: str, **fields: Any) -> "ImmutableList[T]":
        get_logger().debug(f"{op}: index out of range, returning copy", size=len(self._items), **fields)
        return ImmutableList(self._items)

    # -- element access ---------------------------------------------------

    def at(self, index: int) -> Option[T]:
        i = self._normalize(index)
        if not self._in_bounds(i):
            return NONE  # type: ignore[return-value]
        return Some(self._items[i])

    def first(self) -> Option[T]:
        return self.at(0)

    def last(self) -> Option[T]:
        return self.at(-1)

    def random(self) -> Option[T]:
        """A uniformly chosen element, drawn from the active random source."""
        if not self._items:
            return NONE  # type: ignore[return-value]
        return Some(current_random().choice(self._items))

    # -- search -----------------------------------------------------------

    def find(self, predicate: Callable[..., bool]) -> Option[T]:
        return self.find_index(predicate).map(lambda i: self._items[i])

    def find_index(self, predicate: Callable[..., bool]) -> Option[int]:
        p = _indexed(predicate, "predicate")
        for i, x in enumerate(self._items):
            if p(x, i):
                return Some(i)
        return NONE  # type: ignore[return-value]

    def find_last(self, predicate: Callable[..., bool]) -> Option[T]:
        return self.find_last_index(predicate).map(lambda i: self._items[i])

    def find_last_index(self, predicate: Callable[..., bool]) -> Option[int]:
        p = _indexed(predicate, "predicate")
        for i in range(len(self._items) - 1, -1, -1):
            if p(self._items[i], i):
                return Some(i)
        return NONE  # type: ignore[return-value]

    def has(self, item: T) -> bool:
        return item in self._items

    def every(self, predicate: Callable[..., bool]) -> bool:
        p = _indexed(predicate, "predicate")
        return all(p(x, i) for i, x in enumerate(self._items))

    def some(self, predicate: Callable[..., bool]) -> bool:
        p = _indexed(predicate, "predicate")
        return any(p(x, i) for i, x in enumerate(self._items))

    # -- transformation ---------------------------------------------------

    def map(self, callback: Callable[..., U]) -> "ImmutableList[U]":
        f = _indexed(callback, "callback")
        return ImmutableList(tuple(f(x, i) for i, x in enumerate(self._items)))

    @overload
    def filter(self, predicate: Callable[[T], TypeGuard[U]]) -> "ImmutableList[U]": ...

    @overload
    def filter(self, predicate: Callable[..., bool]) -> "ImmutableList[T]": ...

    def filter(self, predicate: Callable[..., Any]) -> "ImmutableList[Any]":
        p = _indexed(predicate, "predicate")
        return ImmutableList(tuple(x for i, x in enumerate(self._items) if p(x, i)))

    def compact(self) -> "ImmutableList[T]":
        """Drop ``None`` elements; other falsy values (``0``, ``""``, ``False``) stay."""
        return ImmutableList(tuple(x for x in self._items if x is not None))

    def compact_map(self, callback: Callable[..., Optional[U]]) -> "ImmutableList[U]":
        f = _indexed(callback, "callback")
        out: List[U] = []
        for i, x in enumerate(self._items):
            y = f(x, i)
            if y is not None:
                out.append(y)
        return ImmutableList(out)

    def flat_map(self, callback: Callable[..., Any]) -> "ImmutableList[Any]":
        # Only list/tuple/ImmutableList results are spliced; strings stay whole
        f = _indexed(callback, "callback")
        out: List[Any] = []
        for i, x in enumerate(self._items):
            y = f(x, i)
            if _is_nested(y):
                out.extend(y)
            else:
                out.append(y)
        return ImmutableList(out)

    def flat(self, depth: float = 1) -> "ImmutableList[Any]":
        return ImmutableList(_flatten(self._items, depth))

    def reduce(self, initial: U, callback: Callable[[U, T], U]) -> U:
        _require_callable(callback, "callback")
        acc = initial
        for x in self._items:
            acc = callback(acc, x)
        return acc

    def reduce_right(self, initial: U, callback: Callable[[U, T], U]) -> U:
        _require_callable(callback, "callback")
        acc = initial
        for x in reversed(self._items):
            acc = callback(acc, x)
        return acc

    def enumerate(self) -> "ImmutableList[Tuple[int, T]]":
        return ImmutableList(tuple(enumerate(self._items)))

    def each(self, callback: Callable[..., Any]) -> "ImmutableList[T]":
        """Call ``callback`` for every element and return ``self`` for chaining."""
        f = _indexed(callback, "callback")
        for i, x in enumerate(self._items):
            f(x, i)
        return self

    # -- structural edits -------------------------------------------------

    def splice(self, start: int, delete_count: int = 0, *items: T) -> "ImmutableList[T]":
        """Remove ``delete_count`` elements at ``start`` and insert ``items`` there.

        ``start`` is clamped into ``[0, size]`` after negative normalization and
        ``delete_count`` into ``[0, size - start]``, so this never fails.
        """
        n = len(self._items)
        s = max(n + start, 0) if start < 0 else min(start, n)
        d = max(0, min(delete_count, n - s))
        return ImmutableList(self._items[:s] + tuple(items) + self._items[s + d:])

    def insert_at(self, index: int, item: T) -> "ImmutableList[T]":
        i = self._normalize(index)
        if not 0 <= i <= len(self._items):
            return self._unchanged("insert_at", index=index)
        return self.splice(i, 0, item)

    def remove_at(self, index: int) -> "ImmutableList[T]":
        i = self._normalize(index)
        if not self._in_bounds(i):
            return self._unchanged("remove_at", index=index)
        return self.splice(i, 1)

    def replace_at(self, index: int, item: T) -> "ImmutableList[T]":
        i = self._normalize(index)
        if not self._in_bounds(i):
            return self._unchanged("replace_at", index=index)
        return self.splice(i, 1, item)

    def update_at(self, index: int, callback: Callable[..., T]) -> "ImmutableList[T]":
        f = _indexed(callback, "callback")
        i = self._normalize(index)
        if not self._in_bounds(i):
            return self._unchanged("update_at", index=index)
        return self.splice(i, 1, f(self._items[i], i))

    def swap(self, a_index: int, b_index: int) -> "ImmutableList[T]":
        a = self._normalize(a_index); b = self._normalize(b_index)
        if not (self._in_bounds(a) and self._in_bounds(b)):
            return self._unchanged("swap", a_index=a_index, b_index=b_index)
        arr = list(self._items)
        arr[a], arr[b] = arr[b], arr[a]
        return ImmutableList(arr)

    def move(self, src: int, dst: int) -> "ImmutableList[T]":
        """Remove the element at ``src`` and reinsert it at ``dst``.

        Both indices may be negative and are resolved against the current size.
        """
        s = self._normalize(src); d = self._normalize(dst)
        if not (self._in_bounds(s) and self._in_bounds(d)):
            return self._unchanged("move", src=src, dst=dst)
        arr = list(self._items)
        arr.insert(d, arr.pop(s))
        return ImmutableList(arr)

    def append(self, *items: T) -> "ImmutableList[T]":
        return ImmutableList(self._items + items)

    def prepend(self, *items: T) -> "ImmutableList[T]":
        return ImmutableList(items + self._items)

    def concat(self, *iterables: Iterable[T]) -> "ImmutableList[T]":
        out = list(self._items)
        for it in iterables:
            if not hasattr(it, "__iter__"):
                raise InvalidArgument("'iterables' must all be iterable.")
            out.extend(it)
        return ImmutableList(out)

    def slice(self, start: Optional[int] = None, stop: Optional[int] = None) -> "ImmutableList[T]":
        return ImmutableList(self._items[start:stop])

    def take(self, count: int) -> "ImmutableList[T]":
        if count <= 0:
            raise InvalidArgument("'count' must be greater than zero.")
        return ImmutableList(self._items[:count])

    def drop(self, count: int) -> "ImmutableList[T]":
        if count <= 0:
            raise InvalidArgument("'count' must be greater than zero.")
        return ImmutableList(self._items[count:])

    def drop_first(self) -> "ImmutableList[T]":
        return ImmutableList(self._items[1:])

    def drop_last(self) -> "ImmutableList[T]":
        return ImmutableList(self._items[:-1])

    def _prefix_length(self, predicate: Callable[..., bool]) -> int:
        p = _indexed(predicate, "predicate")
        n = 0
        while n < len(self._items) and p(self._items[n], n):
            n += 1
        return n

    def take_while(self, predicate: Callable[..., bool]) -> "ImmutableList[T]":
        return ImmutableList(self._items[:self._prefix_length(predicate)])

    def drop_while(self, predicate: Callable[..., bool]) -> "ImmutableList[T]":
        return ImmutableList(self._items[self._prefix_length(predicate):])

    # -- ordering ---------------------------------------------------------

    def sort(self, compare_fn: Optional[Callable[[T, T], float]] = None, *, key: Optional[Callable[[T], Any]] = None) -> "ImmutableList[T]":
        """Stable sort.

        Args:
            compare_fn: three-way comparator returning a negative number, zero
                or a positive number.
            key: a regular Python key function, as for ``sorted``.

        Without either, elements are sorted by their natural ordering. When
        they cannot be compared with each other, ``None`` sorts last and
        everything else is ordered by ``str()``.
        """
        if compare_fn is not None and key is not None:
            raise InvalidArgument("pass either 'compare_fn' or 'key', not both.")
        if compare_fn is not None:
            _require_callable(compare_fn, "compare_fn")
            return ImmutableList(tuple(sorted(self._items, key=cmp_to_key(compare_fn))))
        if key is not None:
            _require_callable(key, "key")
            return ImmutableList(tuple(sorted(self._items, key=key)))
        try:
            return ImmutableList(tuple(sorted(self._items)))  # type: ignore[type-var]
        except TypeError:
            # Elements that do not compare with each other: None last, the rest by str()
            return ImmutableList(tuple(sorted(self._items, key=_fallback_key)))

    def reverse(self) -> "ImmutableList[T]":
        return ImmutableList(self._items[::-1])

    def rotate(self, count: int) -> "ImmutableList[T]":
        """Positive ``count`` moves the last ``count`` elements to the front; negative rotates toward the head."""
        n = len(self._items)
        if n == 0:
            return self
        k = count % n
        return ImmutableList(self._items[n - k:] + self._items[:n - k])

    def shuffle(self, permutations: int = 1) -> "ImmutableList[T]":
        if permutations < 0:
            raise InvalidArgument("'permutations' must not be negative.")
        return ImmutableList(current_random().shuffled(self._items, permutations))

    def chunk(self, size: int) -> "ImmutableList[Tuple[T, ...]]":
        if size <= 0:
            raise InvalidArgument("'size' must be greater than zero.")
        return ImmutableList(tuple(self._items[i:i + size] for i in range(0, len(self._items), size)))

    # -- set-like and grouping --------------------------------------------

    def union(self, other: "ImmutableList[T]") -> "ImmutableList[T]":
        _require_list(other)
        return self.concat(other).unique()

    def intersection(self, other: "ImmutableList[T]") -> "ImmutableList[T]":
        """Elements of ``self`` also in ``other``; each element of ``other`` matches at most once."""
        _require_list(other)
        bag = Bag(other._items)
        return ImmutableList(tuple(x for x in self._items if bag.take(x)))

    def difference(self, other: "ImmutableList[T]") -> "ImmutableList[T]":
        _require_list(other)
        seen = Seen(other._items)
        return ImmutableList(tuple(x for x in self._items if x not in seen))

    def unique(self) -> "ImmutableList[T]":
        return ImmutableList(_unique_by(self._items, lambda x, _i: x))

    def unique_by(self, callback: Callable[..., Hashable]) -> "ImmutableList[T]":
        return ImmutableList(_unique_by(self._items, _indexed(callback, "callback")))

    def group_by(self, callback: Callable[..., str]) -> Dict[str, List[T]]:
        return _group_by(self._items, _indexed(callback, "callback"))

    def count_by(self, callback: Callable[..., K]) -> Dict[K, int]:
        return _count_by(self._items, _indexed(callback, "callback"))

    @overload
    def partition(self, predicate: Callable[[T], TypeGuard[U]]) -> "Tuple[ImmutableList[U], ImmutableList[T]]": ...

    @overload
    def partition(self, predicate: Callable[..., bool]) -> "Tuple[ImmutableList[T], ImmutableList[T]]": ...

    def partition(self, predicate: Callable[..., Any]) -> "Tuple[ImmutableList[Any], ImmutableList[Any]]":
        matched, unmatched = _partition(self._items, _indexed(predicate, "predicate"))
        return ImmutableList(matched), ImmutableList(unmatched)

    def zip(self, other: "ImmutableList[U]") -> "ImmutableList[Tuple[T, U]]":
        _require_list(other)
        return ImmutableList(tuple(zip(self._items, other._items)))

    # -- conversion -------------------------------------------------------

    def to_list(self) -> List[T]:
        return list(self._items)

    def to_json(self) -> List[T]:
        return self.to_list()

    def to_set(self) -> Set[T]:
        return set(self._items)

    def clone(self, deep: bool = False) -> "ImmutableList[T]":
        if not deep:
            return ImmutableList(self._items)
        try:
            return ImmutableList(copy.deepcopy(self._items))
        except (TypeError, copy.Error) as ex:
            get_logger().debug("clone: deep copy failed", error=repr(ex))
            raise UnsupportedOperation(f"deep clone is not supported for these elements: {ex}") from ex
