"""
Prime flag generation and bit packing.

Responsibility: producing primality flags and their 64-bit block form.
No rank logic, no queries.
"""

import numpy as np

# Integers covered by one block.
BLOCK_BITS = 64


def prime_flags_upto(N: int) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Uses Sieve of Eratosthenes.

    Parameters
    ----------
    N : int
        Upper bound (inclusive). N = 0 and N = 1 give arrays with no primes.

    Returns
    -------
    np.ndarray
        Boolean array of length N+1.
    """
    flags = np.ones(N + 1, dtype=bool)
    flags[:2] = False
    for p in range(2, int(N**0.5) + 1):
        if flags[p]:
            flags[p*p::p] = False
    return flags


def primes_upto(N: int) -> np.ndarray:
    """
    Return array of all primes <= N.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).

    Returns
    -------
    np.ndarray
        Array of primes.
    """
    flags = prime_flags_upto(N)
    return np.nonzero(flags)[0]


def pack_flags(flags: np.ndarray, num_blocks: int = None) -> np.ndarray:
    """
    Pack boolean flags into 64-bit blocks.

    Bit i of block b (counting from the low end) holds flags[b * 64 + i].
    Bits past the end of flags are zero.

    Parameters
    ----------
    flags : np.ndarray
        Boolean array.
    num_blocks : int, optional
        Number of blocks to return. Defaults to ceil(len(flags) / 64).

    Returns
    -------
    np.ndarray
        uint64 array of length num_blocks.
    """
    if num_blocks is None:
        num_blocks = -(-len(flags) // BLOCK_BITS)
    if num_blocks * BLOCK_BITS < len(flags):
        raise ValueError(f"{num_blocks} blocks cannot hold {len(flags)} flags")

    packed = np.packbits(flags, bitorder='little')
    raw = np.zeros(num_blocks * (BLOCK_BITS // 8), dtype=np.uint8)
    raw[:len(packed)] = packed
    return raw.view('<u8').astype(np.uint64)


def block_popcounts(blocks: np.ndarray) -> np.ndarray:
    """Number of set bits in each block, as int64."""
    return np.bitwise_count(blocks).astype(np.int64)
