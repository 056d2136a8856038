"""
Bit-packed prime sieve with a rank index.

Integers [0, max_prime] are stored 64 per block: bit i of block b is set iff
b * 64 + i is prime and <= max_prime, so the tail of the last block is
zero. Each block also has a rank anchor, the number of primes below its
first integer, so that

    anchors[0] == 0
    anchors[b + 1] == anchors[b] + popcount(blocks[b])

Rank (ordinal of a prime) is one anchor lookup plus a popcount. Select (the
prime with a given ordinal) is a binary search over the anchors followed by
stripping set bits inside a single block.

A sieve is immutable once built and can be read from several threads.
"""

import operator
import time

import numpy as np
from loguru import logger

from .bounds import prime_pi_inv_upper_bound
from .primes import BLOCK_BITS, block_popcounts, pack_flags, prime_flags_upto


class SieveRangeError(IndexError):
    """Integer or ordinal outside what the sieve holds."""


class NotPrimeError(ValueError):
    """Operation needs a prime argument and got a composite (or 0, 1)."""


class PrimeSieve:
    """
    Primes up to a fixed bound, packed into 64-bit blocks.

    Build with `PrimeSieve.with_max_prime(n)` or
    `PrimeSieve.with_prime_count(k)`.

    Parameters
    ----------
    max_prime : int
        Every prime <= max_prime is held, and no larger one.
    """

    def __init__(self, max_prime: int):
        max_prime = operator.index(max_prime)
        if max_prime < 0:
            raise ValueError(f"max_prime must be non-negative, got {max_prime}")

        t0 = time.time()
        num_blocks = (max_prime + BLOCK_BITS) // BLOCK_BITS
        blocks = pack_flags(prime_flags_upto(max_prime), num_blocks)
        counts = block_popcounts(blocks)
        anchors = np.zeros(num_blocks, dtype=np.int64)
        np.cumsum(counts[:-1], out=anchors[1:])

        blocks.flags.writeable = False
        anchors.flags.writeable = False

        self._max_prime = max_prime
        self._blocks = blocks
        self._anchors = anchors
        self._num_primes = int(anchors[-1] + counts[-1])

        logger.debug(
            f"Built sieve up to {max_prime:,}: {num_blocks:,} blocks, "
            f"{self._num_primes:,} primes in {time.time() - t0:.3f}s"
        )

    @classmethod
    def with_max_prime(cls, max_prime: int) -> 'PrimeSieve':
        """Sieve holding every prime <= max_prime."""
        return cls(max_prime)

    @classmethod
    def with_prime_count(cls, num_primes: int) -> 'PrimeSieve':
        """
        Sieve holding at least num_primes + 1 primes.

        `nth_prime(num_primes)` is always available on the result.
        """
        num_primes = operator.index(num_primes)
        max_prime = prime_pi_inv_upper_bound(num_primes)
        logger.debug(f"Sizing sieve for {num_primes:,} primes: max_prime={max_prime:,}")
        return cls(max_prime)

    @property
    def max_prime(self) -> int:
        return self._max_prime

    @property
    def limit(self) -> int:
        """Exclusive upper end of the integers this sieve can answer for."""
        return self._max_prime + 1

    @property
    def blocks(self) -> np.ndarray:
        return self._blocks

    @property
    def anchors(self) -> np.ndarray:
        return self._anchors

    def __len__(self) -> int:
        return self._num_primes

    def __repr__(self) -> str:
        return (f"PrimeSieve(max_prime={self._max_prime}, limit={self.limit}, "
                f"num_primes={self._num_primes})")

    def _check_value(self, n: int) -> int:
        n = operator.index(n)
        if not 0 <= n < self.limit:
            raise SieveRangeError(f"{n} is outside the sieve range [0, {self.limit})")
        return n

    def _check_ordinal(self, idx: int) -> int:
        idx = operator.index(idx)
        if not 0 <= idx < self._num_primes:
            raise SieveRangeError(
                f"ordinal {idx} is outside [0, {self._num_primes}) for this sieve"
            )
        return idx

    def is_prime(self, n: int) -> bool:
        n = self._check_value(n)
        return ((int(self._blocks[n // BLOCK_BITS]) >> (n % BLOCK_BITS)) & 1) == 1

    def prime_pi(self, n: int) -> int:
        """
        Exact count of primes <= n.

        Parameters
        ----------
        n : int
            Integer in [0, limit).

        Returns
        -------
        int
            pi(n).
        """
        n = self._check_value(n)
        block, offset = divmod(n, BLOCK_BITS)
        below = int(self._blocks[block]) & ((2 << offset) - 1)
        return int(self._anchors[block]) + below.bit_count()

    def prime_idx(self, p: int) -> int:
        """0-based ordinal of the prime p."""
        if not self.is_prime(p):
            raise NotPrimeError(f"{p} is not prime")
        return self.prime_pi(p) - 1

    def nth_prime(self, idx: int) -> int:
        """
        Prime with 0-based ordinal idx.

        Parameters
        ----------
        idx : int
            Ordinal in [0, num_primes()).

        Returns
        -------
        int
            The prime.
        """
        idx = self._check_ordinal(idx)

        # Last block whose anchor is <= idx. Empty blocks share their
        # successor's anchor, so this is always the block holding the prime.
        block = int(np.searchsorted(self._anchors, idx, side='right')) - 1

        mask = int(self._blocks[block])
        for _ in range(idx - int(self._anchors[block])):
            mask &= mask - 1

        return block * BLOCK_BITS + (mask & -mask).bit_length() - 1

    def largest_prime_below(self, n: int) -> int:
        """Largest prime <= n. Returns n itself if n is prime."""
        count = self.prime_pi(n)
        if count == 0:
            raise SieveRangeError(f"no prime <= {n}")
        return self.nth_prime(count - 1)

    def prime_after(self, p: int) -> int:
        """Next prime after the prime p."""
        idx = self.prime_idx(p) + 1
        if idx >= self._num_primes:
            raise SieveRangeError(f"{p} is the largest prime in this sieve")
        return self.nth_prime(idx)

    def prime_before(self, p: int) -> int:
        """Previous prime before the prime p."""
        idx = self.prime_idx(p)
        if idx == 0:
            raise SieveRangeError(f"{p} is the smallest prime, nothing before it")
        return self.nth_prime(idx - 1)

    def num_primes(self) -> int:
        """Number of primes in this sieve."""
        return self._num_primes

    def primes(self) -> np.ndarray:
        """All primes in the sieve, ascending."""
        bits = np.unpackbits(self._blocks.astype('<u8').view(np.uint8), bitorder='little')
        return np.nonzero(bits)[0]
