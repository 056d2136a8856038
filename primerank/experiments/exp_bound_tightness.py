"""
Experiment: Tightness of the pi(x) bounds and their inverses.

Compares the closed-form bounds to exact counts from the packed sieve.
Outputs tables and CSVs.
"""

import numpy as np
import pandas as pd
from pathlib import Path
from scipy.special import expi
from typing import List, Tuple

from ..bounds import prime_pi_bounds_array, prime_pi_inv_bounds_array, prime_pi_inv_upper_bound
from ..sieve import PrimeSieve
from ..metrics import bound_gap


def log_integral(x: np.ndarray) -> np.ndarray:
    """
    li(x) = Ei(ln x), used as a reference curve.

    Returns nan for x < 2.
    """
    x = np.asarray(x, dtype=np.float64)
    out = np.full(len(x), np.nan)
    valid = x >= 2
    out[valid] = expi(np.log(x[valid]))
    return out


def build_sieve_for(max_prime: int, x_grid: List[int], idx_grid: List[int]) -> PrimeSieve:
    """Smallest sieve answering every x in x_grid and every ordinal in idx_grid."""
    needed = max([max_prime, *x_grid])
    if idx_grid:
        needed = max(needed, prime_pi_inv_upper_bound(max(idx_grid)))
    return PrimeSieve.with_max_prime(needed)


def compute_pi_table(sieve: PrimeSieve, x_grid: List[int]) -> pd.DataFrame:
    """
    Exact pi(x) next to its bounds for each x.

    Parameters
    ----------
    sieve : PrimeSieve
        Sieve covering every x in x_grid.
    x_grid : list of int
        Points to evaluate.

    Returns
    -------
    pd.DataFrame
        Columns x, pi_lower, pi_exact, pi_upper, li.
    """
    xs = np.asarray(sorted(x_grid), dtype=np.int64)
    lower, upper = prime_pi_bounds_array(xs)
    exact = np.array([sieve.prime_pi(int(x)) for x in xs], dtype=np.int64)

    return pd.DataFrame({
        'x': xs,
        'pi_lower': lower,
        'pi_exact': exact,
        'pi_upper': upper,
        'li': log_integral(xs),
    })


def compute_inverse_table(sieve: PrimeSieve, idx_grid: List[int]) -> pd.DataFrame:
    """
    Prime with each ordinal next to its inverse bounds.

    Parameters
    ----------
    sieve : PrimeSieve
        Sieve holding every ordinal in idx_grid.
    idx_grid : list of int
        Ordinals to evaluate.

    Returns
    -------
    pd.DataFrame
        Columns idx, inv_lower, nth_prime, inv_upper.
    """
    idxs = np.asarray(sorted(idx_grid), dtype=np.int64)
    lower, upper = prime_pi_inv_bounds_array(idxs)
    primes = np.array([sieve.nth_prime(int(i)) for i in idxs], dtype=np.int64)

    return pd.DataFrame({
        'idx': idxs,
        'inv_lower': lower,
        'nth_prime': primes,
        'inv_upper': upper,
    })


def run_bound_tightness_experiment(max_prime: int, x_grid: List[int],
                                   idx_grid: List[int],
                                   output_dir: Path) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Run the full bound tightness experiment.

    Parameters
    ----------
    max_prime : int
        Minimum sieve bound.
    x_grid : list of int
        Points for the pi(x) table.
    idx_grid : list of int
        Ordinals for the inverse table.
    output_dir : Path
        Directory for output files.

    Returns
    -------
    tuple
        (pi table, inverse table)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"  Building sieve (max_prime >= {max_prime:,})...")
    sieve = build_sieve_for(max_prime, x_grid, idx_grid)
    print(f"  {sieve.num_primes():,} primes below {sieve.limit:,}")

    df_pi = compute_pi_table(sieve, x_grid)
    df_inv = compute_inverse_table(sieve, idx_grid)

    gap = bound_gap(df_pi['pi_lower'], df_pi['pi_exact'], df_pi['pi_upper'])
    print(f"  pi(x) bounds: mean gap below = {gap['mean_gap_lower']:.2f}, "
          f"above = {gap['mean_gap_upper']:.2f}, violations = {gap['violations']}")

    # The bracket on the n-th prime is inclusive at the top.
    inv_violations = int(np.sum((df_inv['inv_lower'] > df_inv['nth_prime']) |
                                (df_inv['nth_prime'] > df_inv['inv_upper'])))
    print(f"  inverse bounds: violations = {inv_violations}")

    df_pi.to_csv(output_dir / 'pi_bounds.csv', index=False)
    df_inv.to_csv(output_dir / 'inverse_bounds.csv', index=False)

    return df_pi, df_inv
