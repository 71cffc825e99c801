"""
Fixed-length, bit-packed boolean array.

Responsibility: storage only. No sieve logic.

Layout:
- Bit i lives in byte i // 8, position i % 8 (least-significant bit first)
- Storage is a numpy uint8 buffer of ceil(length / 8) bytes
- Padding bits past `length` in the last byte are never set

Memory: 1 bit per index, so N = 10^9 needs 125MB
(a numpy bool array would need 1GB).
"""

import operator

import numpy as np

from .errors import AllocationFailure, IndexOutOfBounds, InvalidArgument, ReleasedError


def n_bytes_for(length: int) -> int:
    """Number of bytes needed to hold `length` bits."""
    return (length + 7) // 8


class Bitset:
    """
    Fixed-length bit-packed boolean array. All bits start False.

    The length is set once at construction and never changes.
    Every get/set is bounds-checked against [0, length).
    """

    __slots__ = ('_length', '_storage')

    def __init__(self, length: int):
        try:
            length = operator.index(length)
        except TypeError:
            raise InvalidArgument(f"bitset length must be an integer, got {length!r}") from None
        if length < 0:
            raise InvalidArgument(f"bitset length must be >= 0, got {length}")

        try:
            storage = np.zeros(n_bytes_for(length), dtype=np.uint8)
        except MemoryError as e:
            raise AllocationFailure(
                f"could not allocate {n_bytes_for(length):,} bytes for {length:,} bits"
            ) from e

        self._length = length
        self._storage = storage

    @property
    def released(self) -> bool:
        return self._storage is None

    @property
    def storage(self) -> np.ndarray:
        """The underlying uint8 buffer (read-only view)."""
        view = self._live_storage().view()
        view.flags.writeable = False
        return view

    def len(self) -> int:
        """Return the fixed bit count."""
        return self._length

    def __len__(self) -> int:
        return self._length

    def _live_storage(self) -> np.ndarray:
        if self._storage is None:
            raise ReleasedError("bitset used after release()")
        return self._storage

    def _locate(self, index: int):
        """Validate index and return (byte_index, mask)."""
        index = operator.index(index)
        # Negative indices are errors, not Python-style wraparound
        if index < 0 or index >= self._length:
            raise IndexOutOfBounds(index, self._length)
        return index >> 3, 1 << (index & 0b111)

    def get(self, index: int) -> bool:
        """
        Return the bit at `index`.

        Raises
        ------
        IndexOutOfBounds
            If index is outside [0, length).
        """
        storage = self._live_storage()
        byte_index, mask = self._locate(index)
        return bool(storage[byte_index] & mask)

    def set(self, index: int, value: bool) -> None:
        """
        Write the bit at `index`.

        Raises
        ------
        IndexOutOfBounds
            If index is outside [0, length).
        """
        storage = self._live_storage()
        byte_index, mask = self._locate(index)
        if value:
            storage[byte_index] |= mask
        else:
            storage[byte_index] &= ~mask & 0xFF

    def set_every(self, start: int, step: int) -> None:
        """
        Set bits start, start + step, start + 2*step, ... below length.

        Parameters
        ----------
        start : int
            First index to set (>= 0).
        step : int
            Stride (>= 1).
        """
        storage = self._live_storage()
        if start < 0:
            raise IndexOutOfBounds(start, self._length)
        if step < 1:
            raise InvalidArgument(f"step must be >= 1, got {step}")
        if start >= self._length:
            return

        # 8 steps advance exactly `step` bytes and return to the same bit
        # position, so each of the first 8 indices starts one strided byte slice
        period = 8 * step
        for first in range(start, min(start + period, self._length), step):
            byte_index = first >> 3
            count = (self._length - first + period - 1) // period
            view = storage[byte_index:byte_index + count * step:step]
            np.bitwise_or(view, 1 << (first & 0b111), out=view)

    def count(self) -> int:
        """Number of bits currently set."""
        storage = self._live_storage()
        return int(np.unpackbits(storage, bitorder='little').sum())

    def to_bool_array(self) -> np.ndarray:
        """
        Unpack into a boolean array.

        Returns
        -------
        np.ndarray
            Boolean array of length `length`, a copy of the current bits.
        """
        storage = self._live_storage()
        bits = np.unpackbits(storage, count=self._length, bitorder='little')
        return bits.astype(bool)

    def release(self) -> None:
        """
        Drop the storage buffer.

        Allowed exactly once. Any later call (including a second release)
        raises ReleasedError.
        """
        self._live_storage()
        self._storage = None

    def __repr__(self) -> str:
        if self._storage is None:
            return f"Bitset(length={self._length}, released)"
        return f"Bitset(length={self._length}, set={self.count()})"
