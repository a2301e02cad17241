"""
Iteration-range splitting and reduction.

Iterations are independent, so a run is split into contiguous ranges, each
range is simulated with its own child generator and accumulator, and the
accumulators are merged by summation.
"""

import concurrent.futures
import numpy as np
from typing import List, Optional, Callable, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Universes sampled per block inside a range (bounds peak memory)
BLOCK_SIZE = 20000


def split_iterations(iterations: int, n_parts: int) -> List[int]:
    """Split iterations into at most n_parts near-equal positive sizes."""
    n_parts = max(1, min(n_parts, iterations))
    base, extra = divmod(iterations, n_parts)
    return [base + (1 if i < extra else 0) for i in range(n_parts)]


def iter_blocks(n_iterations: int, block_size: int = BLOCK_SIZE):
    """Yield (start, size) blocks covering n_iterations."""
    start = 0
    while start < n_iterations:
        size = min(block_size, n_iterations - start)
        yield start, size
        start += size


def run_chunked(
    run_range: Callable[[int, int, np.random.Generator], T],
    merge: Callable[[T, T], T],
    iterations: int,
    seed: Optional[int] = None,
    n_workers: int = 1,
) -> T:
    """
    Run iteration ranges and reduce the partial accumulators.

    Args:
        run_range: (n_iterations, offset, rng) -> accumulator for that range
        merge: Combines two accumulators (commutative, associative)
        iterations: Total iterations
        seed: Root seed. Each range gets a child of SeedSequence(seed).
        n_workers: Number of ranges run concurrently

    Returns:
        Merged accumulator
    """
    if n_workers <= 1:
        return run_range(iterations, 0, np.random.default_rng(seed))

    sizes = split_iterations(iterations, n_workers)
    offsets = np.concatenate([[0], np.cumsum(sizes)[:-1]]).astype(int)
    children = np.random.SeedSequence(seed).spawn(len(sizes))

    logger.info("Running %d iterations across %d workers", iterations, len(sizes))

    partials = [None] * len(sizes)
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(sizes)) as executor:
        futures = {}
        for idx, (size, offset, child) in enumerate(zip(sizes, offsets, children)):
            future = executor.submit(run_range, size, int(offset), np.random.default_rng(child))
            futures[future] = idx

        for future in concurrent.futures.as_completed(futures):
            partials[futures[future]] = future.result()

    # Reduce in range order so first-seen bookkeeping stays deterministic
    result = partials[0]
    for partial_result in partials[1:]:
        result = merge(result, partial_result)
    return result
