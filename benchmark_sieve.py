#!/usr/bin/env python3
"""
Benchmark sieve construction and queries.

Times:
1. Construction by bound and by prime count
2. Random is_prime / prime_pi / nth_prime queries

Run at 10^6 or 10^7 for a quick comparison.
"""

import argparse
import time
import numpy as np

from primerank.bounds import prime_pi_inv_upper_bound
from primerank.sieve import PrimeSieve


def benchmark(max_prime: int, num_queries: int, seed: int = 123):
    """Run construction and query timings."""
    print("=" * 60)
    print(f"Sieve Benchmark: max_prime = {max_prime:,}")
    print("=" * 60)

    print("Building sieve by bound...", end=" ", flush=True)
    t0 = time.time()
    sieve = PrimeSieve.with_max_prime(max_prime)
    print(f"{time.time() - t0:.2f}s")

    num_primes = sieve.num_primes()
    print("Building sieve by count...", end=" ", flush=True)
    t0 = time.time()
    by_count = PrimeSieve.with_prime_count(num_primes)
    print(f"{time.time() - t0:.2f}s (limit {by_count.limit:,}, "
          f"{by_count.limit / sieve.limit:.2f}x the bound sieve)")
    print(f"Inverse upper bound for {num_primes:,} primes: "
          f"{prime_pi_inv_upper_bound(num_primes):,}")
    print()

    rng = np.random.default_rng(seed)
    values = rng.integers(0, sieve.limit, size=num_queries)
    ordinals = rng.integers(0, num_primes, size=num_queries)

    print("-" * 60)
    print(f"Queries ({num_queries:,} each)")
    print("-" * 60)

    t0 = time.time()
    hits = sum(sieve.is_prime(int(n)) for n in values)
    elapsed = time.time() - t0
    print(f"  is_prime:  {elapsed:.3f}s  ({elapsed / num_queries * 1e6:.2f}us/query, {hits:,} primes)")

    t0 = time.time()
    for n in values:
        sieve.prime_pi(int(n))
    elapsed = time.time() - t0
    print(f"  prime_pi:  {elapsed:.3f}s  ({elapsed / num_queries * 1e6:.2f}us/query)")

    t0 = time.time()
    for idx in ordinals:
        sieve.nth_prime(int(idx))
    elapsed = time.time() - t0
    print(f"  nth_prime: {elapsed:.3f}s  ({elapsed / num_queries * 1e6:.2f}us/query)")

    print()
    print(f"Memory: blocks={sieve.blocks.nbytes / 1e6:.2f}MB, "
          f"anchors={sieve.anchors.nbytes / 1e6:.2f}MB")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Benchmark the packed prime sieve')
    parser.add_argument('--max-prime', type=float, default=1e7, help='Sieve bound')
    parser.add_argument('--queries', type=float, default=1e5, help='Queries per operation')
    args = parser.parse_args()

    benchmark(int(args.max_prime), int(args.queries))
