"""
Definitions of all reported statistics.

Responsibility: how tight the pi(x) bounds are. Keeps the numbers in the
tables tied to one definition.
"""

import numpy as np
from typing import Dict


def relative_error(approx: np.ndarray, exact: np.ndarray) -> np.ndarray:
    """
    Compute (approx - exact) / exact elementwise.

    Parameters
    ----------
    approx : np.ndarray
        Approximate values (e.g. a bound).
    exact : np.ndarray
        Exact values.

    Returns
    -------
    np.ndarray
        Relative error, nan where exact is 0.
    """
    approx = np.asarray(approx, dtype=np.float64)
    exact = np.asarray(exact, dtype=np.float64)
    out = np.full(len(exact), np.nan)
    nonzero = exact != 0
    out[nonzero] = (approx[nonzero] - exact[nonzero]) / exact[nonzero]
    return out


def bound_gap(lower: np.ndarray, exact: np.ndarray,
              upper: np.ndarray) -> Dict[str, float]:
    """
    Summarize how far a pair of bounds sits from the exact values.

    Parameters
    ----------
    lower : np.ndarray
        Lower bounds.
    exact : np.ndarray
        Exact values.
    upper : np.ndarray
        Upper bounds.

    Returns
    -------
    dict
        Mean/max absolute gaps below and above, mean relative width,
        and the number of points where a bound is violated.
    """
    lower = np.asarray(lower)
    exact = np.asarray(exact)
    upper = np.asarray(upper)

    if len(exact) == 0:
        return {
            'mean_gap_lower': np.nan,
            'max_gap_lower': np.nan,
            'mean_gap_upper': np.nan,
            'max_gap_upper': np.nan,
            'mean_rel_width': np.nan,
            'violations': 0
        }

    gap_lower = exact - lower
    gap_upper = upper - exact

    return {
        'mean_gap_lower': float(np.mean(gap_lower)),
        'max_gap_lower': float(np.max(gap_lower)),
        'mean_gap_upper': float(np.mean(gap_upper)),
        'max_gap_upper': float(np.max(gap_upper)),
        'mean_rel_width': float(np.nanmean(relative_error(upper, lower))),
        'violations': int(np.sum((gap_lower < 0) | (gap_upper < 0)))
    }
