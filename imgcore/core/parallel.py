"""Parallel execution utilities for chunked data-parallel reductions."""

from __future__ import annotations

import contextvars
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed

from .errors import InvalidParameterError

log = logging.getLogger("imgcore.core.parallel")

__all__ = [
    "parallel_map",
    "partition_range",
    "resolve_n_jobs",
]


def resolve_n_jobs(n_jobs):
    """Translate an ``n_jobs`` request into a concrete worker count.

    Parameters
    ----------
    n_jobs : int or None
        1 or None = sequential, -1 = all cores, >1 = that many workers.

    Returns
    -------
    int
        Number of workers, at least 1.
    """
    if n_jobs is None or n_jobs == 1:
        return 1
    if n_jobs == -1:
        return os.cpu_count() or 1
    if n_jobs < 1:
        raise InvalidParameterError(f"n_jobs must be -1 or a positive integer, got {n_jobs}.")
    return int(n_jobs)


def partition_range(n, n_parts):
    """Split ``range(n)`` into at most ``n_parts`` contiguous, disjoint ranges.

    The first ``n % n_parts`` ranges are one element longer than the rest.
    Empty ranges are never produced.

    Parameters
    ----------
    n : int
        Length of the index space.
    n_parts : int
        Requested number of ranges.

    Returns
    -------
    list of tuple of int
        ``(start, stop)`` pairs in index order.
    """
    n_parts = max(1, min(int(n_parts), int(n)))
    if n == 0:
        return []
    base, extra = divmod(n, n_parts)
    bounds = []
    start = 0
    for i in range(n_parts):
        stop = start + base + (1 if i < extra else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


def parallel_map(func, args_list, n_jobs=1):
    """Execute func(*args) for each args in args_list, optionally in parallel.

    Uses threads rather than processes because the per-chunk work is
    dominated by NumPy reductions and numba kernels that release the GIL,
    and the input arrays are shared read-only without serialization.

    ``ContextVar`` values are propagated to each worker thread via
    :func:`contextvars.copy_context`.

    Parameters
    ----------
    func : callable
        Function to call for each set of arguments.
    args_list : list of tuples
        Arguments for each call.
    n_jobs : int
        1 = sequential (default), -1 = all cores, >1 = that many workers.

    Returns
    -------
    list
        Results in the same order as args_list.
    """
    max_workers = resolve_n_jobs(n_jobs)
    if max_workers == 1 or len(args_list) <= 1:
        return [func(*args) for args in args_list]

    log.debug("parallel_map: %d tasks on %d workers", len(args_list), max_workers)
    results = [None] * len(args_list)

    # Each task gets its own snapshot so Context.run() is never called
    # concurrently on the same object (which would raise RuntimeError).
    contexts = [contextvars.copy_context() for _ in args_list]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_idx = {
            executor.submit(ctx.run, func, *args): i
            for i, (ctx, args) in enumerate(zip(contexts, args_list, strict=True))
        }
        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            results[idx] = future.result()
    return results
