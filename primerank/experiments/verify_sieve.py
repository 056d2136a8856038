#!/usr/bin/env python3
"""
Verify the packed sieve gives identical results to the plain boolean sieve.

Compares:
1. Membership for every integer below the sieve limit
2. pi(n) and prime ordinals
3. n-th prime for every ordinal
4. Neighbor queries

Run at a small bound first, then scale up.

Usage:
    python -m primerank.experiments.verify_sieve --max-prime 1e6
"""

import sys
import time
import numpy as np

from ..primes import prime_flags_upto
from ..sieve import PrimeSieve


def verify_membership(sieve: PrimeSieve, flags: np.ndarray, verbose: bool = True) -> bool:
    """Verify is_prime agrees with the boolean flags everywhere."""
    if verbose:
        print(f"\n=== Verifying membership below {sieve.limit:,} ===")

    errors = 0
    for n in range(sieve.limit):
        if sieve.is_prime(n) != bool(flags[n]):
            errors += 1
            if errors <= 10:
                print(f"  MISMATCH at n={n}: packed={sieve.is_prime(n)}, flags={flags[n]}")

    if verbose:
        if errors == 0:
            print(f"  ✓ All {sieve.limit:,} values match!")
        else:
            print(f"  ✗ {errors:,} mismatches found")

    return errors == 0


def verify_ranks(sieve: PrimeSieve, flags: np.ndarray, verbose: bool = True) -> bool:
    """Verify prime_pi, prime_idx and nth_prime against cumulative counts."""
    if verbose:
        print(f"\n=== Verifying ranks below {sieve.limit:,} ===")

    counts = np.cumsum(flags)
    primes = np.nonzero(flags)[0]

    errors = 0
    if sieve.num_primes() != len(primes):
        errors += 1
        print(f"  MISMATCH num_primes: packed={sieve.num_primes()}, flags={len(primes)}")

    for n in range(sieve.limit):
        if sieve.prime_pi(n) != counts[n]:
            errors += 1
            if errors <= 10:
                print(f"  MISMATCH pi({n}): packed={sieve.prime_pi(n)}, flags={counts[n]}")

    for idx, p in enumerate(primes):
        p = int(p)
        if sieve.prime_idx(p) != idx or sieve.nth_prime(idx) != p:
            errors += 1
            if errors <= 10:
                print(f"  MISMATCH ordinal {idx}: prime_idx({p})={sieve.prime_idx(p)}, "
                      f"nth_prime({idx})={sieve.nth_prime(idx)}")

    if verbose:
        if errors == 0:
            print(f"  ✓ All {len(primes):,} ordinals match!")
        else:
            print(f"  ✗ {errors:,} mismatches found")

    return errors == 0


def verify_neighbors(sieve: PrimeSieve, flags: np.ndarray, verbose: bool = True) -> bool:
    """Verify prime_after / prime_before / largest_prime_below."""
    if verbose:
        print(f"\n=== Verifying neighbor queries ===")

    primes = np.nonzero(flags)[0]
    errors = 0

    for p, q in zip(primes[:-1], primes[1:]):
        p, q = int(p), int(q)
        if sieve.prime_after(p) != q or sieve.prime_before(q) != p:
            errors += 1
            if errors <= 10:
                print(f"  MISMATCH pair ({p}, {q}): after={sieve.prime_after(p)}, "
                      f"before={sieve.prime_before(q)}")

    prev_prime = 0
    for n in range(sieve.limit):
        if flags[n]:
            prev_prime = n
        if prev_prime != 0 and sieve.largest_prime_below(n) != prev_prime:
            errors += 1
            if errors <= 10:
                print(f"  MISMATCH largest_prime_below({n}): "
                      f"packed={sieve.largest_prime_below(n)}, expected={prev_prime}")

    if verbose:
        if errors == 0:
            print(f"  ✓ All neighbor queries match!")
        else:
            print(f"  ✗ {errors:,} mismatches found")

    return errors == 0


def verify_sieve(max_prime: int, verbose: bool = True) -> bool:
    """Build both sieves up to max_prime and run every check."""
    t0 = time.time()
    sieve = PrimeSieve.with_max_prime(max_prime)
    t_packed = time.time() - t0

    t0 = time.time()
    flags = prime_flags_upto(sieve.limit - 1)
    t_flags = time.time() - t0

    if verbose:
        print(f"  Packed sieve: {t_packed:.2f}s, size={sieve.blocks.nbytes / 1e6:.2f}MB")
        print(f"  Boolean sieve: {t_flags:.2f}s, size={flags.nbytes / 1e6:.2f}MB")
        print(f"  Memory ratio: {flags.nbytes / sieve.blocks.nbytes:.1f}x")

    membership_ok = verify_membership(sieve, flags, verbose)
    ranks_ok = verify_ranks(sieve, flags, verbose)
    neighbors_ok = verify_neighbors(sieve, flags, verbose)

    return membership_ok and ranks_ok and neighbors_ok


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Verify packed sieve correctness')
    parser.add_argument('--max-prime', type=float, default=1e5,
                        help='Sieve bound (default: 1e5)')
    args = parser.parse_args()

    max_prime = int(args.max_prime)

    print(f"Packed Sieve Verification")
    print(f"max_prime = {max_prime:,}")
    print("=" * 50)

    ok = verify_sieve(max_prime)

    print("\n" + "=" * 50)
    if ok:
        print("✓ All verifications passed!")
    else:
        print("✗ Some verifications failed!")
        sys.exit(1)
