"""Thread pool used by the local driver to assemble partitions."""

from __future__ import annotations

import contextvars
import os
from concurrent.futures import ThreadPoolExecutor


def parallel_map(func, args_list, n_jobs=1):
    """Call ``func(*args)`` for every partition's arguments.

    Each call runs in its own copy of the caller's context, so the array
    backend chosen with :func:`~matcompose.core.backend.use_backend` is seen
    by every worker.

    Parameters
    ----------
    func : callable
        Partition assembler.
    args_list : list of tuples
        Arguments for each partition.
    n_jobs : int, default 1
        1 = sequential, -1 = all cores, >1 = that many threads.

    Returns
    -------
    list
        One result per partition, in input order.
    """
    if n_jobs == 1:
        return [func(*args) for args in args_list]

    max_workers = os.cpu_count() if n_jobs == -1 else n_jobs
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        # a Context cannot be entered by two threads at once
        futures = [executor.submit(contextvars.copy_context().run, func, *args) for args in args_list]
        return [future.result() for future in futures]
