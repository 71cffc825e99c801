"""
Prime generation on top of SieveEngine.

Responsibility: the outer sieve loop. SieveEngine.filter does one round;
this module decides which rounds to run.
"""

from math import isqrt

import numpy as np

from .engine import SieveEngine
from .errors import InvalidArgument


def sieve_upto(N: int) -> SieveEngine:
    """
    Run the sieve of Eratosthenes over [0, N].

    Parameters
    ----------
    N : int
        Upper bound (inclusive), N >= 0.

    Returns
    -------
    SieveEngine
        Engine of length N+1. Index i is unmarked iff i is prime, or i < 2.
    """
    if N < 0:
        raise InvalidArgument(f"N must be >= 0, got {N}")
    sieve = SieveEngine(N + 1)
    # Every composite <= N has a prime factor <= sqrt(N)
    for n in range(2, isqrt(N) + 1):
        if not sieve.get(n):
            sieve.filter(n)
    return sieve


def candidates(sieve: SieveEngine) -> np.ndarray:
    """
    Return all unmarked indices of a sieve, in ascending order.

    Bulk equivalent of list(iter(sieve)), computed from one unpack of the
    storage instead of a get() per index.
    """
    return np.flatnonzero(~sieve.bits.to_bool_array())


def prime_flags_upto(N: int) -> np.ndarray:
    """
    Primality flags for [0, N], unpacked from a bit-packed sieve.

    Candidates left by sieve_upto are inverted into flags, then 0 and 1
    are cleared by hand since no filter round ever marks them. The sieve
    is released before returning.

    Parameters
    ----------
    N : int
        Upper bound (inclusive), N >= 0.

    Returns
    -------
    np.ndarray
        Boolean array of length N+1, flags[i] True iff i is prime.
    """
    with sieve_upto(N) as sieve:
        flags = ~sieve.bits.to_bool_array()
    # The sieve never marks 0 or 1
    flags[:2] = False
    return flags


def primes_upto(N: int) -> np.ndarray:
    """
    Ascending primes <= N, read off prime_flags_upto.

    Returns
    -------
    np.ndarray
        Integer index array (empty for N < 2).
    """
    flags = prime_flags_upto(N)
    return np.nonzero(flags)[0]
