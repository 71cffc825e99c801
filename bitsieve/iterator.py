"""
Lazy forward iterator over unmarked sieve indices.

Responsibility: iteration only. Reads the sieve it was created from,
never copies it.

Semantics:
- Yields ascending i in [0, length) with sieve.get(i) == False
- Live: marks/unmarks made between next() calls affect later results
  (only indices >= cursor can still be yielded)
- Exhausted is terminal: once StopIteration is raised it is raised forever
"""

from .errors import ReleasedError


class SieveIterator:
    """
    Iterator over the candidates of a sieve.

    Holds a strong reference to the sieve, so the sieve stays alive as long
    as the iterator does. If the sieve is explicitly released, the next
    call on an active iterator raises ReleasedError.
    """

    __slots__ = ('_sieve', '_cursor', '_exhausted')

    def __init__(self, sieve):
        self._sieve = sieve
        self._cursor = 0
        self._exhausted = False

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __iter__(self):
        return self

    def __next__(self) -> int:
        if self._exhausted:
            raise StopIteration

        sieve = self._sieve
        if sieve.released:
            raise ReleasedError("iterator used after its sieve was released")
        index = self._cursor
        length = sieve.len()
        while index < length and sieve.get(index):
            index += 1

        if index >= length:
            self._exhausted = True
            self._cursor = length
            # Drop the reference once there is nothing left to read
            self._sieve = None
            raise StopIteration

        self._cursor = index + 1
        return index

    def next(self) -> int:
        return self.__next__()

    def __repr__(self) -> str:
        state = 'exhausted' if self._exhausted else 'active'
        return f"SieveIterator(cursor={self._cursor}, {state})"
