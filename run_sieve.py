#!/usr/bin/env python3
"""
Build a bit-packed sieve and report its candidates.

Usage:
    python run_sieve.py
    python run_sieve.py --N 1e7
    python run_sieve.py --config config/custom.yaml --verify
"""

import argparse
import sys
import time

import numpy as np
import yaml

from bitsieve.bitset import n_bytes_for
from bitsieve.primes import sieve_upto, candidates


def reference_flags(N: int) -> np.ndarray:
    """Unmarked flags from a plain numpy slicing sieve (indices 0, 1 unmarked)."""
    unmarked = np.ones(N + 1, dtype=bool)
    for p in range(2, int(N**0.5) + 1):
        if unmarked[p]:
            unmarked[2*p::p] = False
    return unmarked


def run(N: int, show: int, verify: bool) -> bool:
    print("=" * 60)
    print("Bit-packed Sieve of Eratosthenes")
    print("=" * 60)
    print(f"  N = {N:,}")
    print(f"  storage = {n_bytes_for(N + 1):,} bytes")
    print()

    start = time.time()
    with sieve_upto(N) as sieve:
        print(f"  Sieve built in {time.time() - start:.2f}s")

        found = candidates(sieve)
        print(f"  Candidates: {len(found):,} (primes: {max(len(found) - min(N + 1, 2), 0):,})")

        head = []
        for index in sieve:
            if len(head) >= show:
                break
            head.append(index)
    print(f"  First {len(head)}: {head}")

    ok = True
    if verify:
        print()
        print("-" * 60)
        print("Verifying against numpy reference sieve")
        print("-" * 60)
        start = time.time()
        expected = np.flatnonzero(reference_flags(N))
        ok = np.array_equal(found, expected)
        if ok:
            print(f"  ✓ All {len(expected):,} candidates match ({time.time() - start:.2f}s)")
        else:
            print("  ✗ Candidates do not match!")

    return ok


def main():
    parser = argparse.ArgumentParser(description='Run the bit-packed sieve')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    parser.add_argument('--N', type=float, default=None,
                        help='Upper bound (overrides config)')
    parser.add_argument('--verify', action='store_true',
                        help='Check result against a numpy reference sieve')
    args = parser.parse_args()

    with open(args.config) as f:
        config = yaml.safe_load(f)

    N = int(args.N) if args.N is not None else int(config['N'])
    show = int(config.get('show', 20))

    if not run(N, show, args.verify):
        sys.exit(1)


if __name__ == '__main__':
    main()
