"""
Visualization utilities.

Responsibility: plots only. No logic, no computation.
"""

import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional


def plot_pi_bounds(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot pi(x) against its lower and upper bounds.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from exp_bound_tightness with columns:
        x, pi_lower, pi_exact, pi_upper, li.
    output_path : Path, optional
        If provided, save figure to this path.

    Returns
    -------
    matplotlib.Figure
    """
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.plot(df['x'], df['pi_exact'], 'k-', label='pi(x)')
    ax.plot(df['x'], df['pi_lower'], '--', label='Lower bound')
    ax.plot(df['x'], df['pi_upper'], '--', label='Upper bound')
    ax.plot(df['x'], df['li'], ':', label='li(x)')
    ax.set_xlabel('x')
    ax.set_ylabel('Count of primes <= x')
    ax.set_title('Prime counting bounds')
    ax.legend()
    ax.grid(True, alpha=0.3)

    # Normalized view; skip x where pi(x) = 0
    ax = axes[1]
    sub = df[df['pi_exact'] > 0]
    ax.plot(sub['x'], sub['pi_lower'] / sub['pi_exact'], 'o-', label='lower / pi')
    ax.plot(sub['x'], sub['pi_upper'] / sub['pi_exact'], 's-', label='upper / pi')
    ax.axhline(y=1, color='gray', linestyle='--', alpha=0.5)
    ax.set_xscale('log')
    ax.set_xlabel('x')
    ax.set_ylabel('Ratio to pi(x)')
    ax.set_title('Bound tightness')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig


def plot_inverse_bounds(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot the n-th prime against the inverse bounds.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame with columns idx, inv_lower, nth_prime, inv_upper.
    output_path : Path, optional
        If provided, save figure.

    Returns
    -------
    matplotlib.Figure
    """
    fig, ax = plt.subplots(figsize=(8, 6))

    ax.fill_between(df['idx'], df['inv_lower'], df['inv_upper'],
                    alpha=0.3, label='Bracket')
    ax.plot(df['idx'], df['nth_prime'], 'k.-', label='Prime with ordinal idx')
    ax.set_xlabel('Ordinal idx')
    ax.set_ylabel('Prime')
    ax.set_title('Inverse bounds on the n-th prime')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig
