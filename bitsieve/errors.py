"""
Error taxonomy for the bitset and sieve.

Responsibility: exception types only. Every error is raised to the
immediate caller; nothing here exits the process.
"""


class SieveError(Exception):
    """Base class for all bitset and sieve errors."""


class IndexOutOfBounds(SieveError, IndexError):
    """get/set called with an index outside [0, length)."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(
            f"tried to access index {index} of bitset with a length of {length}"
        )


class InvalidArgument(SieveError, ValueError):
    """Bad argument, e.g. filter(n) with n < 2."""


class AllocationFailure(SieveError, MemoryError):
    """Storage for the bitset could not be allocated."""


class ReleasedError(SieveError, RuntimeError):
    """Use of a bitset or sieve after release()."""
