"""
Seeded PRNG used by board generation.

A string seed is hashed to a 32-bit state with xmur3 and expanded into a
stream of floats in [0, 1) with mulberry32. Every operation is masked to
32 bits so the same seed yields the same board on any platform, and
matches the browser implementation of the game bit for bit.
"""

import time
from typing import Callable, List, MutableSequence, Sequence, TypeVar

T = TypeVar("T")

_MASK = 0xFFFFFFFF


def _uint32(n: int) -> int:
    """Convert to unsigned 32-bit integer."""
    return n & _MASK


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply (JavaScript Math.imul), unsigned result."""
    return (a * b) & _MASK


def _code_units(text: str) -> List[int]:
    """UTF-16 code units of a string, as JavaScript charCodeAt sees them."""
    data = text.encode("utf-16-le", "surrogatepass")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def xmur3(text: str) -> Callable[[], int]:
    """
    Hash a string into a generator of 32-bit states.

    Args:
        text: Seed string

    Returns:
        Function producing successive 32-bit unsigned integers
    """
    units = _code_units(text)
    h = _uint32(1779033703 ^ len(units))
    for code in units:
        h = _imul(h ^ code, 3432918353)
        h = _uint32((h << 13) | (h >> 19))

    def next_state() -> int:
        nonlocal h
        h = _imul(h ^ (h >> 16), 2246822507)
        h = _imul(h ^ (h >> 13), 3266489909)
        h ^= h >> 16
        return h

    return next_state


def mulberry32(state: int) -> Callable[[], float]:
    """
    Build a mulberry32 stream from a 32-bit state.

    Returns:
        Function producing floats in [0, 1)
    """
    a = _uint32(state)

    def next_float() -> float:
        nonlocal a
        a = _uint32(a + 0x6D2B79F5)
        t = _imul(a ^ (a >> 15), a | 1)
        t ^= _uint32(t + _imul(t ^ (t >> 7), t | 61))
        return _uint32(t ^ (t >> 14)) / 4294967296.0

    return next_float


def fallback_seed() -> str:
    """Time-based seed used when the caller provides none."""
    return str(time.time_ns())


class SeededRandom:
    """
    Deterministic uniform generator over [0, 1) seeded from a string.

    The effective seed is kept on ``seed`` so a board generated without
    an explicit seed can still be shared and reproduced.
    """

    def __init__(self, seed: str = ""):
        """Initialize with a seed string (empty means time-based)."""
        seed = (seed or "").strip()
        self.seed = seed if seed else fallback_seed()
        self.call_count = 0
        self._next = mulberry32(xmur3(self.seed)())

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        return self._next()

    def randint(self, n: int) -> int:
        """Random integer in [0, n)."""
        return int(self.random() * n)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]

    def shuffle(self, seq: MutableSequence[T]) -> MutableSequence[T]:
        """Fisher-Yates shuffle in place, consuming the stream."""
        for i in range(len(seq) - 1, 0, -1):
            j = self.randint(i + 1)
            seq[i], seq[j] = seq[j], seq[i]
        return seq


def make_rng(seed_str: str = "") -> SeededRandom:
    """Create the generator for one board."""
    return SeededRandom(seed_str)
