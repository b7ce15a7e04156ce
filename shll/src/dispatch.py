"""
Compute dispatch: run a per-cell kernel over a range of work items.

A kernel is a callable taking a slice of work items (cells). It must only
write the items of its own slice. Every dispatcher returns from launch()
only once all items have completed, so successive launches are separated
by a full barrier.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List

from joblib import Parallel, delayed, cpu_count

from .errors import DispatchError

logger = logging.getLogger(__name__)

Kernel = Callable[[slice], None]


def local_work_size(global_size: int, max_work_group_size: int) -> int:
    """
    Largest work-group size not above the maximum that divides the global size.
    """
    if global_size < 1 or max_work_group_size < 1:
        raise ValueError("work sizes must be positive")

    local_size = min(max_work_group_size, global_size)
    while global_size % local_size != 0 and local_size > 1:
        local_size -= 1
    return local_size


def work_groups(n_items: int, group_size: int) -> List[slice]:
    """Contiguous slices of at most group_size items covering 0..n_items-1."""
    return [slice(lo, min(lo + group_size, n_items)) for lo in range(0, n_items, group_size)]


class Dispatcher(ABC):
    """Abstract base class for compute backends."""

    name = ''

    @abstractmethod
    def launch(self, kernel: Kernel, n_items: int) -> None:
        """
        Run kernel over items 0..n_items-1 and wait for all of them.

        Args:
            kernel: Callable receiving a slice of items
            n_items: Number of work items
        """
        pass

    def describe(self) -> str:
        """Human readable description of the backend."""
        return self.name


class VectorizedDispatcher(Dispatcher):
    """All items in a single numpy call."""

    name = 'vectorized'

    def launch(self, kernel: Kernel, n_items: int) -> None:
        kernel(slice(0, n_items))

    def describe(self) -> str:
        return 'vectorized (numpy, single call per stage)'


class SerialDispatcher(Dispatcher):
    """One call per item, in index order. Slow; for verification."""

    name = 'serial'

    def launch(self, kernel: Kernel, n_items: int) -> None:
        for i in range(n_items):
            kernel(slice(i, i + 1))

    def describe(self) -> str:
        return 'serial (one kernel call per cell)'


class ThreadedDispatcher(Dispatcher):
    """
    Work groups executed by a joblib thread pool.

    numpy releases the GIL inside its array loops, so work groups of a
    stage run concurrently. The Parallel call returns only after every
    work group is done.
    """

    name = 'threaded'

    def __init__(self, n_jobs: int = -1, max_work_group_size: int = 256):
        if n_jobs == 0:
            raise DispatchError("n_jobs must be non-zero")
        if max_work_group_size < 1:
            raise DispatchError("max_work_group_size must be at least 1")

        self.n_jobs = n_jobs
        self.max_work_group_size = max_work_group_size
        self._parallel = Parallel(n_jobs=n_jobs, backend='threading')

    def launch(self, kernel: Kernel, n_items: int) -> None:
        group_size = local_work_size(n_items, self.max_work_group_size)
        groups = work_groups(n_items, group_size)
        logger.debug("launching %d work groups of %d items", len(groups), group_size)
        self._parallel(delayed(kernel)(group) for group in groups)

    def describe(self) -> str:
        return (f'threaded (joblib, n_jobs={self.n_jobs}, cpu_count={cpu_count()}, '
                f'max work group size={self.max_work_group_size})')


DISPATCHERS = {
    VectorizedDispatcher.name: VectorizedDispatcher,
    SerialDispatcher.name: SerialDispatcher,
    ThreadedDispatcher.name: ThreadedDispatcher,
}


def make_dispatcher(name: str, n_jobs: int = -1, max_work_group_size: int = 256) -> Dispatcher:
    """
    Create a compute backend by name.

    Raises:
        DispatchError: Unknown backend or invalid backend settings
    """
    if name not in DISPATCHERS:
        raise DispatchError(f"Unknown compute backend: {name}. "
                            f"Options: {', '.join(DISPATCHERS)}")

    if name == ThreadedDispatcher.name:
        dispatcher = ThreadedDispatcher(n_jobs=n_jobs, max_work_group_size=max_work_group_size)
    else:
        dispatcher = DISPATCHERS[name]()

    logger.info("Using compute backend: %s", dispatcher.describe())
    return dispatcher
