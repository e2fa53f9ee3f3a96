from __future__ import annotations
import contextvars
import random as _rand
from contextlib import contextmanager
from typing import Iterator, List, MutableSequence, Sequence, TypeVar

from .errors import InvalidArgument

T = TypeVar("T")


class Random:
    """Source of randomness used by ``ImmutableList.random`` and ``shuffle``.

    Wraps a ``random.Random`` instance so that tests can swap in a seeded
    generator without touching the global ``random`` module state.
    """

    def __init__(self, rng: _rand.Random | None = None) -> None:
        self._rng = rng or _rand.Random()

    @staticmethod
    def seeded(seed: int) -> "Random":
        return Random(_rand.Random(seed))

    def next_int(self, bound: int) -> int:
        if bound <= 0:
            raise InvalidArgument("bound must be > 0")
        return self._rng.randrange(bound)

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise InvalidArgument("empty sequence")
        return seq[self.next_int(len(seq))]

    def shuffle_in_place(self, items: MutableSequence[T]) -> None:
        # Fisher-Yates: walk down from the tail, swapping with a slot in [0, i]
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(i + 1)
            items[i], items[j] = items[j], items[i]

    def shuffled(self, items: Sequence[T], passes: int = 1) -> List[T]:
        out = list(items)
        for _ in range(passes):
            self.shuffle_in_place(out)
        return out


_default: Random = Random()
_current: contextvars.ContextVar[Random | None] = contextvars.ContextVar("immutalist_random", default=None)


def default_random() -> Random:
    return _default


def set_default_random(rnd: Random) -> None:
    global _default
    if not isinstance(rnd, Random):
        raise InvalidArgument("'rnd' must be a Random instance.")
    _default = rnd


def current_random() -> Random:
    """Random source in effect: the innermost ``use_random`` block, else the default."""
    rnd = _current.get()
    return rnd if rnd is not None else _default


@contextmanager
def use_random(source: Random | int) -> Iterator[Random]:
    """Scope a random source (or an int seed) to a ``with`` block.

    Example:
        ```python
        with use_random(42):
            a = ImmutableList.of(1, 2, 3).shuffle()
        with use_random(42):
            b = ImmutableList.of(1, 2, 3).shuffle()
        assert a == b
        ```
    """
    if isinstance(source, bool) or not isinstance(source, (Random, int)):
        raise InvalidArgument("'source' must be a Random instance or an int seed.")
    rnd = source if isinstance(source, Random) else Random.seeded(source)
    token = _current.set(rnd)
    try:
        yield rnd
    finally:
        _current.reset(token)
