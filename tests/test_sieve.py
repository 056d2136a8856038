"""
Tests for the packed prime sieve.

Checks membership, ranks and neighbor queries against trial division and
the plain boolean sieve, plus the error contract for bad arguments.
"""

import math

import numpy as np
import pytest

from primerank.primes import prime_flags_upto
from primerank.sieve import PrimeSieve, SieveRangeError, NotPrimeError


MAX_PRIME = 100000

SMALL_PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]
SMALL_COMPOSITES = [0, 1, 4, 6, 8, 9, 10, 12, 14, 15, 16, 18, 20, 21, 22, 24, 25]


def is_prime_naive(n: int) -> bool:
    if n < 2:
        return False
    for d in range(2, math.isqrt(n) + 1):
        if n % d == 0:
            return False
    return True


@pytest.fixture(scope='module')
def sieve():
    return PrimeSieve.with_max_prime(MAX_PRIME)


@pytest.fixture(scope='module')
def flags(sieve):
    return prime_flags_upto(sieve.limit - 1)


class TestConstruction:
    """Sizing and the rank anchor invariant."""

    @pytest.mark.parametrize('max_prime, num_blocks', [
        (0, 1), (1, 1), (2, 1), (63, 1), (64, 2), (65, 2), (127, 2), (128, 3),
    ])
    def test_block_count(self, max_prime, num_blocks):
        """ceil((max_prime + 1) / 64) blocks."""
        s = PrimeSieve.with_max_prime(max_prime)
        assert len(s.blocks) == num_blocks
        assert s.limit == max_prime + 1

    @pytest.mark.parametrize('max_prime', [0, 1])
    def test_tiny_sieve_is_empty(self, max_prime):
        """0 and 1 give a valid sieve with no primes."""
        s = PrimeSieve.with_max_prime(max_prime)
        assert s.num_primes() == 0
        assert len(s) == 0
        assert s.prime_pi(max_prime) == 0
        assert not s.is_prime(max_prime)
        assert len(s.primes()) == 0
        with pytest.raises(SieveRangeError):
            s.nth_prime(0)

    def test_primes_above_bound_not_held(self):
        """The block runs to 63, but nothing past max_prime is counted."""
        s = PrimeSieve.with_max_prime(30)
        assert s.num_primes() == 10
        assert int(s.blocks[0]) >> 31 == 0
        assert list(s.primes()) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]

    @pytest.mark.parametrize('max_prime, count', [
        (2, 1), (63, 18), (64, 18), (127, 31), (128, 31),
    ])
    def test_count_at_block_edges(self, max_prime, count):
        assert PrimeSieve.with_max_prime(max_prime).num_primes() == count

    def test_count_up_to_one_million(self):
        """pi(10^6) = 78498."""
        s = PrimeSieve.with_max_prime(1000000)
        assert s.num_primes() == 78498
        assert s.nth_prime(78497) == 999983

    def test_anchor_invariant(self, sieve):
        """anchor[0] = 0 and anchor[i+1] = anchor[i] + popcount(block[i])."""
        anchors = sieve.anchors
        counts = [bin(int(b)).count('1') for b in sieve.blocks]
        assert anchors[0] == 0
        for i in range(len(anchors) - 1):
            assert anchors[i + 1] == anchors[i] + counts[i], f"anchor mismatch at block {i}"
        assert sieve.num_primes() == anchors[-1] + counts[-1]

    def test_sieve_is_read_only(self, sieve):
        """Blocks and anchors cannot be mutated through the views."""
        with pytest.raises(ValueError):
            sieve.blocks[0] = 0
        with pytest.raises(ValueError):
            sieve.anchors[0] = 1

    def test_negative_bound_rejected(self):
        with pytest.raises(ValueError):
            PrimeSieve.with_max_prime(-1)

    def test_numpy_integer_accepted(self):
        s = PrimeSieve.with_max_prime(np.int64(30))
        assert s.max_prime == 30
        assert s.is_prime(np.uint64(29))

    def test_with_prime_count(self):
        """with_prime_count(k) always has an ordinal k."""
        for num_primes in range(0, 200):
            s = PrimeSieve.with_prime_count(num_primes)
            assert s.num_primes() >= num_primes + 1, \
                f"with_prime_count({num_primes}) holds only {s.num_primes()} primes"
            assert s.is_prime(s.nth_prime(num_primes))

    def test_with_prime_count_larger(self):
        s = PrimeSieve.with_prime_count(10000)
        assert s.nth_prime(9999) == 104729
        assert s.num_primes() > 10000

    def test_len_and_repr(self, sieve):
        assert len(sieve) == sieve.num_primes()
        assert 'PrimeSieve(max_prime=100000' in repr(sieve)


class TestQueriesExhaustive:
    """Every query against an independent reference up to MAX_PRIME."""

    def test_is_prime_matches_trial_division(self, sieve):
        for n in range(0, 5000):
            assert sieve.is_prime(n) == is_prime_naive(n), f"is_prime({n}) wrong"

    def test_is_prime_matches_flags(self, sieve, flags):
        for n in range(sieve.limit):
            assert sieve.is_prime(n) == flags[n], f"is_prime({n}) wrong"

    def test_prime_pi(self, sieve, flags):
        counts = np.cumsum(flags)
        for n in range(sieve.limit):
            assert sieve.prime_pi(n) == counts[n], f"prime_pi({n}) wrong"

    def test_prime_idx_and_nth_prime(self, sieve, flags):
        primes = np.nonzero(flags)[0]
        assert sieve.num_primes() == len(primes)
        for idx, p in enumerate(primes):
            assert sieve.prime_idx(int(p)) == idx, f"prime_idx({p}) should be {idx}"
            assert sieve.nth_prime(idx) == p, f"nth_prime({idx}) should be {p}"

    def test_primes_array(self, sieve, flags):
        assert np.array_equal(sieve.primes(), np.nonzero(flags)[0])

    def test_largest_prime_below(self, sieve):
        prev_prime = 0
        for n in range(sieve.limit):
            if sieve.is_prime(n):
                prev_prime = n
            if prev_prime != 0:
                assert sieve.largest_prime_below(n) == prev_prime, \
                    f"largest_prime_below({n}) should be {prev_prime}"

    def test_prime_after_and_before(self, sieve, flags):
        primes = np.nonzero(flags)[0]
        for p, q in zip(primes[:-1], primes[1:]):
            assert sieve.prime_after(int(p)) == q
            assert sieve.prime_before(int(q)) == p


class TestSmallSieve:
    """Sieve up to 30."""

    @pytest.fixture
    def small(self):
        return PrimeSieve.with_max_prime(30)

    def test_primes_up_to_30(self, small):
        found = [n for n in range(31) if small.is_prime(n)]
        assert found == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]

    def test_num_primes(self, small):
        assert small.num_primes() == 10
        assert small.prime_pi(30) == 10

    def test_ordinals(self, small):
        assert small.nth_prime(0) == 2
        assert small.nth_prime(9) == 29
        assert small.prime_idx(29) == 9

    def test_neighbors(self, small):
        assert small.prime_after(23) == 29
        assert small.prime_before(29) == 23
        assert small.largest_prime_below(28) == 23
        assert small.largest_prime_below(29) == 29

    def test_known_membership(self, small):
        for p in SMALL_PRIMES:
            if p <= 30:
                assert small.is_prime(p), f"{p} should be prime"
        for n in SMALL_COMPOSITES:
            assert not small.is_prime(n), f"{n} should not be prime"


class TestBlockBoundaries:
    """Primes around multiples of 64."""

    def test_ordinals_across_blocks(self, sieve):
        # 61 is the last prime of block 0, 67 the first of block 1
        assert sieve.prime_after(61) == 67
        assert sieve.prime_before(67) == 61
        assert sieve.largest_prime_below(64) == 61
        assert sieve.largest_prime_below(66) == 61
        assert sieve.nth_prime(sieve.prime_idx(67)) == 67

    def test_bit_63(self):
        """Offset 63 is the top bit of a block."""
        s = PrimeSieve.with_max_prime(200)
        assert s.is_prime(127)  # 127 = 64 + 63
        assert s.prime_idx(127) == 30
        assert s.nth_prime(30) == 127
        assert s.prime_pi(127) == 31

    def test_gap_crossing_block_boundary(self):
        """1327 and 1361 are consecutive primes."""
        s = PrimeSieve.with_max_prime(1500)
        assert s.prime_after(1327) == 1361
        assert s.prime_before(1361) == 1327
        assert s.largest_prime_below(1360) == 1327

    def test_empty_block(self):
        """370261 and 370373 are consecutive; block 5786 (370304..370367) holds no prime."""
        s = PrimeSieve.with_max_prime(370400)
        assert s.blocks[5786] == 0
        assert s.anchors[5786] == s.anchors[5787]
        assert s.prime_after(370261) == 370373
        assert s.prime_before(370373) == 370261
        assert s.largest_prime_below(370340) == 370261
        idx = s.prime_idx(370373)
        assert s.nth_prime(idx) == 370373
        assert s.nth_prime(idx - 1) == 370261


class TestErrors:
    """Out-of-range and non-prime arguments raise instead of guessing."""

    @pytest.fixture
    def small(self):
        return PrimeSieve.with_max_prime(30)

    def test_value_out_of_range(self, small):
        for call in (small.is_prime, small.prime_pi, small.prime_idx,
                     small.largest_prime_below, small.prime_after, small.prime_before):
            with pytest.raises(SieveRangeError):
                call(small.limit)
            with pytest.raises(SieveRangeError):
                call(-1)

    def test_range_error_is_index_error(self, small):
        with pytest.raises(IndexError):
            small.is_prime(10**6)

    def test_ordinal_out_of_range(self, small):
        with pytest.raises(SieveRangeError):
            small.nth_prime(small.num_primes())
        with pytest.raises(SieveRangeError):
            small.nth_prime(-1)

    def test_no_prime_before_first(self, small):
        with pytest.raises(SieveRangeError):
            small.prime_before(2)

    def test_no_prime_after_last(self, small):
        last = small.nth_prime(small.num_primes() - 1)
        assert last == 29
        with pytest.raises(SieveRangeError):
            small.prime_after(last)

    def test_nothing_after_max_prime(self, small):
        """31 is prime but beyond the bound."""
        with pytest.raises(SieveRangeError):
            small.prime_after(29)
        with pytest.raises(SieveRangeError):
            small.is_prime(31)

    def test_no_prime_below_two(self, small):
        with pytest.raises(SieveRangeError):
            small.largest_prime_below(1)

    @pytest.mark.parametrize('n', [0, 1, 4, 9, 25, 28])
    def test_non_prime_arguments(self, small, n):
        with pytest.raises(NotPrimeError):
            small.prime_idx(n)
        with pytest.raises(NotPrimeError):
            small.prime_after(n)
        with pytest.raises(NotPrimeError):
            small.prime_before(n)

    def test_not_prime_is_value_error(self, small):
        with pytest.raises(ValueError):
            small.prime_idx(4)

    def test_no_prime_at_zero(self):
        """Nothing at or below 0."""
        s = PrimeSieve.with_max_prime(0)
        assert s.prime_pi(0) == 0
        with pytest.raises(SieveRangeError):
            s.largest_prime_below(0)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
