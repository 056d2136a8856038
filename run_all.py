#!/usr/bin/env python3
"""
Full reproducibility script.

Running this file regenerates every table and figure for the bounds report.

Usage:
    python run_all.py
    python run_all.py --config config/custom.yaml
"""

import argparse
import yaml
from pathlib import Path
import time

from primerank.experiments.exp_bound_tightness import run_bound_tightness_experiment
from primerank.experiments.verify_sieve import verify_sieve
from primerank.plotting import plot_pi_bounds, plot_inverse_bounds


def main():
    parser = argparse.ArgumentParser(description='Run all prime sieve experiments')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    parser.add_argument('--skip-verify', action='store_true',
                        help='Skip the packed vs boolean sieve cross-check')
    args = parser.parse_args()

    # Load config
    with open(args.config) as f:
        config = yaml.safe_load(f)

    print("=" * 60)
    print("Prime Sieve Rank Index - Full Experiment Suite")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  max_prime = {config['max_prime']:,}")
    print(f"  x_grid = {config['x_grid']}")
    print(f"  idx_grid = {config['idx_grid']}")
    print()

    output_dir = Path(config.get('output_dir', 'data/results'))
    output_dir.mkdir(parents=True, exist_ok=True)

    total_start = time.time()

    # 1. Cross-check
    if not args.skip_verify:
        print("-" * 60)
        print("1. Packed sieve verification")
        print("-" * 60)
        start = time.time()
        ok = verify_sieve(config['max_prime'], verbose=False)
        print(f"   {'passed' if ok else 'FAILED'} in {time.time() - start:.1f}s")
        print()

    # 2. Bound tightness
    print("-" * 60)
    print("2. Bound tightness")
    print("-" * 60)
    start = time.time()
    df_pi, df_inv = run_bound_tightness_experiment(
        config['max_prime'],
        config['x_grid'],
        config['idx_grid'],
        output_dir
    )
    print(f"   Completed in {time.time() - start:.1f}s")
    print()

    # 3. Generate Figures
    print("-" * 60)
    print("3. Generating Figures")
    print("-" * 60)

    figures_dir = output_dir / 'figures'
    figures_dir.mkdir(exist_ok=True)

    print("  - pi(x) bounds...")
    plot_pi_bounds(df_pi, figures_dir / 'pi_bounds.png')

    print("  - Inverse bounds...")
    plot_inverse_bounds(df_inv, figures_dir / 'inverse_bounds.png')

    print()

    # Summary
    total_time = time.time() - total_start
    print("=" * 60)
    print("COMPLETE")
    print("=" * 60)
    print(f"\nTotal runtime: {total_time:.1f}s")
    print(f"\nOutputs saved to: {output_dir.absolute()}")

    print("\n" + "=" * 60)
    print("KEY RESULTS")
    print("=" * 60)

    print("\npi(x) against its bounds:")
    print(df_pi[['x', 'pi_lower', 'pi_exact', 'pi_upper']].to_string(index=False))

    print("\nn-th prime against inverse bounds:")
    print(df_inv.to_string(index=False))


if __name__ == '__main__':
    main()
