"""
Fork-join execution for Monte Carlo path blocks.

A pricing call spawns a fixed-size team of worker threads, gives each
worker a contiguous block of loop iterations and a private NormalSampler,
then joins and reduces the partial statistics.

Contract:
- One private random stream per worker, seeded base_seed + worker_index + offset
- No cross-worker mutable state; workers return partial sums
- Reduction is plain addition performed after the join in worker-index order,
  so a fixed (seed, n_workers) gives bit-identical results whatever the
  thread scheduling

[T1] NumPy releases the GIL inside array kernels, so batched workers
run concurrently on a thread pool.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TypeVar

from mc_pricing.options.simulation.sampler import NormalSampler

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class WorkBlock:
    """
    Contiguous range of loop iterations assigned to one worker.

    Attributes
    ----------
    worker_index : int
        Position of the worker in the team (0-based)
    start : int
        First iteration index (inclusive)
    stop : int
        Last iteration index (exclusive)
    seed : int
        Seed of the worker's private NormalSampler
    """

    worker_index: int
    start: int
    stop: int
    seed: int

    @property
    def size(self) -> int:
        """Number of iterations in the block."""
        return self.stop - self.start


@dataclass(frozen=True)
class PartialSums:
    """
    Per-worker reduction accumulators.

    Attributes
    ----------
    sum_payoffs : float
        Sum of undiscounted payoffs
    sum_sq_payoffs : float
        Sum of squared undiscounted payoffs
    """

    sum_payoffs: float = 0.0
    sum_sq_payoffs: float = 0.0

    def __add__(self, other: "PartialSums") -> "PartialSums":
        return PartialSums(
            sum_payoffs=self.sum_payoffs + other.sum_payoffs,
            sum_sq_payoffs=self.sum_sq_payoffs + other.sum_sq_payoffs,
        )


def partition(n_iterations: int, n_workers: int, base_seed: int, seed_offset: int = 0) -> list[WorkBlock]:
    """
    Split ``n_iterations`` into one contiguous block per worker.

    Static schedule: the first ``n_iterations % n_workers`` workers get one
    extra iteration. Negative iteration counts are treated as zero.

    Parameters
    ----------
    n_iterations : int
        Total loop iterations to distribute
    n_workers : int
        Team size (>= 1)
    base_seed : int
        Base seed of the pricing call
    seed_offset : int, default 0
        Engine-specific constant added to every worker seed

    Returns
    -------
    list[WorkBlock]
        Exactly ``n_workers`` blocks (some possibly empty), in worker order
    """
    n_iterations = max(n_iterations, 0)
    base, remainder = divmod(n_iterations, n_workers)

    blocks = []
    start = 0
    for worker_index in range(n_workers):
        size = base + (1 if worker_index < remainder else 0)
        blocks.append(
            WorkBlock(
                worker_index=worker_index,
                start=start,
                stop=start + size,
                seed=base_seed + worker_index + seed_offset,
            )
        )
        start += size

    return blocks


def batch_sizes(n_items: int, batch_size: int) -> list[int]:
    """Sizes of consecutive batches covering ``n_items`` (last may be short)."""
    full, rest = divmod(max(n_items, 0), batch_size)
    return [batch_size] * full + ([rest] if rest else [])


def fork_join(
    task: Callable[[WorkBlock, NormalSampler], T],
    blocks: list[WorkBlock],
) -> list[T]:
    """
    Run ``task`` once per block on its own thread and join.

    Each worker receives a freshly seeded NormalSampler that it owns
    exclusively. Results come back in worker-index order. Exceptions raised
    by a worker propagate to the caller.

    Parameters
    ----------
    task : Callable[[WorkBlock, NormalSampler], T]
        Work performed by one worker
    blocks : list[WorkBlock]
        Blocks from :func:`partition`

    Returns
    -------
    list[T]
        One result per block, ordered by worker index
    """
    if len(blocks) == 1:
        block = blocks[0]
        return [task(block, NormalSampler(block.seed))]

    with ThreadPoolExecutor(max_workers=len(blocks), thread_name_prefix="mc-worker") as executor:
        futures = [
            executor.submit(task, block, NormalSampler(block.seed))
            for block in blocks
        ]
        results = [future.result() for future in futures]

    logger.debug(f"Joined {len(blocks)} workers")
    return results


def reduce_partial_sums(partials: list[PartialSums]) -> PartialSums:
    """Combine worker accumulators by addition in worker-index order."""
    total = PartialSums()
    for partial in partials:
        total = total + partial
    return total
