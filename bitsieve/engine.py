"""
Sieve-marking engine.

Responsibility: one round of the sieve of Eratosthenes per filter() call.
The outer loop over n is the caller's job (see primes.py).

Convention: bit i True means "i is composite / excluded",
False means "i is still a candidate". Nothing ever marks 0 or 1.
"""

import operator

from .bitset import Bitset
from .errors import InvalidArgument, ReleasedError
from .iterator import SieveIterator


class SieveEngine:
    """
    Sieve of length N. All indices start as candidates.

    Owns exactly one Bitset. Iterating yields the indices still unmarked,
    reading the live state (see iterator.SieveIterator).
    """

    __slots__ = ('_bits',)

    def __init__(self, length: int):
        self._bits = Bitset(length)

    @property
    def bits(self) -> Bitset:
        return self._bits

    @property
    def released(self) -> bool:
        return self._bits.released

    def len(self) -> int:
        return self._bits.len()

    def __len__(self) -> int:
        return self._bits.len()

    def get(self, index: int) -> bool:
        """Check if `index` is currently marked as composite."""
        return self._bits.get(index)

    def set(self, index: int, value: bool) -> None:
        """Mark `index` as composite (True) or candidate (False)."""
        self._bits.set(index, value)

    def __getitem__(self, index: int) -> bool:
        return self._bits.get(index)

    def __setitem__(self, index: int, value: bool) -> None:
        self._bits.set(index, value)

    def filter(self, n: int) -> None:
        """
        Mark every proper multiple of n (2n, 3n, ...) below length.

        No-op if n is already marked: its multiples were covered by the
        round for its smallest prime factor.

        Parameters
        ----------
        n : int
            Stride of this round (n >= 2).

        Raises
        ------
        InvalidArgument
            If n < 2 (zero stride, or marking every index via n=1).
        """
        n = operator.index(n)
        if n < 2:
            raise InvalidArgument(f"filter requires n >= 2, got {n}")
        if self._bits.released:
            raise ReleasedError("sieve used after release()")

        # 2n >= length: no multiple in range, and bit n may not exist
        if 2 * n >= self._bits.len():
            return
        if self._bits.get(n):
            return

        self._bits.set_every(2 * n, n)

    def count_candidates(self) -> int:
        """Number of indices still unmarked."""
        return self._bits.len() - self._bits.count()

    def release(self) -> None:
        """Release the owned bitset. Allowed once."""
        self._bits.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        if not self._bits.released:
            self._bits.release()
        return False

    def __iter__(self) -> SieveIterator:
        return SieveIterator(self)

    def __repr__(self) -> str:
        if self._bits.released:
            return f"SieveEngine(length={self._bits.len()}, released)"
        return f"SieveEngine(length={self._bits.len()}, candidates={self.count_candidates()})"
