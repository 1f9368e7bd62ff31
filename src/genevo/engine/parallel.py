"""Parallel fitness evaluation.

Scores of independent chromosomes can be computed concurrently. The values
are written back only after every score has been collected, so no chromosome
is modified while another worker still reads the batch.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from joblib import Parallel, delayed

from .fitness import BulkFitnessFunction, FitnessFunction, as_fitness_function

if TYPE_CHECKING:  # pragma: no cover
    from .chromosome import Chromosome

__all__ = ["BACKENDS", "parallel_map", "ParallelFitnessEvaluator"]

logger = logging.getLogger(__name__)

BACKENDS = ("sequential", "thread", "joblib")


def parallel_map(
    func: Callable[[Any], Any],
    items: Sequence[Any],
    backend: str = "thread",
    max_workers: int | None = None,
    joblib_backend: str = "loky",
) -> list[Any]:
    """Apply ``func`` to every item and return the results in input order.

    The first exception raised by a worker propagates to the caller.
    """

    if backend not in BACKENDS:
        raise ValueError(f"unknown backend '{backend}', expected one of {BACKENDS}")
    job_name = getattr(func, "__name__", type(func).__name__)
    start = time.perf_counter()

    if backend == "sequential" or max_workers == 1 or len(items) <= 1:
        results = [func(item) for item in items]
    elif backend == "thread":
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(func, items))
    else:
        n_jobs = -1 if max_workers is None else max_workers
        results = Parallel(n_jobs=n_jobs, backend=joblib_backend)(
            delayed(func)(item) for item in items
        )

    logger.debug(
        "%s: %d item(s) via %s in %.3fs",
        job_name,
        len(items),
        backend,
        time.perf_counter() - start,
    )
    return list(results)


class ParallelFitnessEvaluator(BulkFitnessFunction):
    """Bulk fitness function scoring each chromosome independently in parallel."""

    def __init__(
        self,
        fitness_function: FitnessFunction | Callable[["Chromosome"], float],
        backend: str = "thread",
        max_workers: int | None = None,
        joblib_backend: str = "loky",
    ) -> None:
        if fitness_function is None:
            raise ValueError("fitness_function must not be None")
        if backend not in BACKENDS:
            raise ValueError(f"unknown backend '{backend}', expected one of {BACKENDS}")
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._fitness_function = as_fitness_function(fitness_function)
        self.backend = backend
        self.max_workers = max_workers
        self.joblib_backend = joblib_backend

    @property
    def fitness_function(self) -> FitnessFunction:
        return self._fitness_function

    def evaluate(self, chromosomes: Iterable["Chromosome"]) -> None:
        batch = list(chromosomes)
        if not batch:
            return
        scores = parallel_map(
            self._fitness_function.get_fitness_value,
            batch,
            backend=self.backend,
            max_workers=self.max_workers,
            joblib_backend=self.joblib_backend,
        )
        for chromosome, score in zip(batch, scores):
            chromosome.set_fitness_value(score)

    def __repr__(self) -> str:
        return (
            f"ParallelFitnessEvaluator({self._fitness_function!r}, "
            f"backend={self.backend!r}, max_workers={self.max_workers})"
        )
