#!/usr/bin/env python3
"""
benchmark_performance.py - Throughput of the analytic and Monte Carlo pricers.

Usage:
    python scripts/benchmark_performance.py [--paths N] [--workers 1 2 4 8]

Benchmarks:
    1. Black-Scholes closed form (options/sec)
    2. GBM Monte Carlo, one call per worker count (paths/sec, speedup)
    3. Heston Monte Carlo at the largest worker count (path-steps/sec)

Prices are printed next to timings so a scaling run doubles as a sanity
check: for a fixed worker count the price is bit-identical across reruns.
"""

import argparse
import time
from typing import NamedTuple

from mc_pricing.config.settings import SimulationConfig
from mc_pricing.options.payoffs.base import EuropeanOption, OptionType
from mc_pricing.options.pricing.black_scholes import black_scholes_call
from mc_pricing.options.simulation.heston_paths import HestonParams, price_heston
from mc_pricing.options.simulation.monte_carlo import price_gbm

SPOT, STRIKE, RATE, VOL, MATURITY = 100.0, 100.0, 0.05, 0.20, 1.0


class TimingResult(NamedTuple):
    """One timed pricing run."""
    label: str
    seconds: float
    units: int
    price: float


def _separator() -> None:
    print("=" * 70)


def benchmark_black_scholes(iterations: int) -> TimingResult:
    """Time repeated closed-form call pricing."""
    total = 0.0
    start = time.perf_counter()
    for _ in range(iterations):
        total += black_scholes_call(SPOT, STRIKE, RATE, VOL, MATURITY)
    elapsed = time.perf_counter() - start
    return TimingResult("Black-Scholes", elapsed, iterations, total / iterations)


def benchmark_gbm(n_paths: int, n_workers: int, seed: int) -> TimingResult:
    """Time one GBM pricing call."""
    option = EuropeanOption(strike=STRIKE, maturity=MATURITY, option_type=OptionType.CALL)
    config = SimulationConfig(n_paths=n_paths, base_seed=seed, n_workers=n_workers)

    start = time.perf_counter()
    result = price_gbm(option, SPOT, RATE, VOL, config)
    elapsed = time.perf_counter() - start

    return TimingResult(f"GBM x{n_workers}", elapsed, result.n_paths, result.price)


def benchmark_heston(n_paths: int, n_steps: int, n_workers: int, seed: int) -> TimingResult:
    """Time one Heston pricing call."""
    option = EuropeanOption(strike=STRIKE, maturity=MATURITY, option_type=OptionType.CALL)
    params = HestonParams(v0=0.04, kappa=2.0, theta=0.04, xi=0.3, rho=-0.7)
    config = SimulationConfig(n_paths=n_paths, n_steps=n_steps, base_seed=seed, n_workers=n_workers)

    start = time.perf_counter()
    result = price_heston(option, SPOT, RATE, params, config)
    elapsed = time.perf_counter() - start

    return TimingResult(f"Heston x{n_workers}", elapsed, n_paths * n_steps, result.price)


def main() -> None:
    parser = argparse.ArgumentParser(description="Pricing engine performance benchmark")
    parser.add_argument("--paths", type=int, default=1_000_000, help="GBM paths per call (default: 1M)")
    parser.add_argument(
        "--workers", type=int, nargs="+", default=[1, 2, 4, 8], help="Worker counts to compare"
    )
    parser.add_argument("--bs-iterations", type=int, default=100_000, help="Closed-form calls to time")
    parser.add_argument("--heston-paths", type=int, default=100_000, help="Heston paths (default: 100k)")
    parser.add_argument("--heston-steps", type=int, default=100, help="Heston steps (default: 100)")
    parser.add_argument("--seed", type=int, default=42, help="Base seed (default: 42)")
    args = parser.parse_args()

    _separator()
    print("   Performance Benchmark: mc-pricing")
    _separator()

    print("\n1. Black-Scholes analytical formula")
    bs = benchmark_black_scholes(args.bs_iterations)
    print(f"   Iterations: {bs.units:,}")
    print(f"   Total Time: {bs.seconds * 1000:.0f} ms")
    print(f"   Throughput: {bs.units / bs.seconds:,.0f} options/sec")

    print(f"\n2. GBM Monte Carlo ({args.paths:,} antithetic paths)")
    print(f"   {'Workers':>8} {'Time (ms)':>10} {'Paths/sec':>14} {'Speedup':>8} {'Price':>10}")
    print("   " + "-" * 54)
    baseline = None
    for n_workers in args.workers:
        run = benchmark_gbm(args.paths, n_workers, args.seed)
        baseline = baseline or run.seconds
        print(
            f"   {n_workers:>8} {run.seconds * 1000:>10.0f} {run.units / run.seconds:>14,.0f} "
            f"{baseline / run.seconds:>7.2f}x {run.price:>10.4f}"
        )

    n_workers = max(args.workers)
    print(f"\n3. Heston Monte Carlo ({args.heston_paths:,} paths x {args.heston_steps} steps, {n_workers} workers)")
    heston = benchmark_heston(args.heston_paths, args.heston_steps, n_workers, args.seed)
    print(f"   Total Time: {heston.seconds * 1000:.0f} ms")
    print(f"   Throughput: {heston.units / heston.seconds:,.0f} path-steps/sec")
    print(f"   Price:      {heston.price:.4f}")

    _separator()
    print(f"Black-Scholes reference: {bs.price:.4f}")
    print("Monte Carlo cost is dominated by normal generation and exp().")


if __name__ == "__main__":
    main()
