from __future__ import annotations

import threading

import pytest

from genevo.engine import Configuration, ParallelFitnessEvaluator, parallel_map


def _square(value: int) -> int:
    return value * value


@pytest.mark.parametrize("backend", ["sequential", "thread", "joblib"])
def test_parallel_map_preserves_order(backend) -> None:
    items = list(range(12))
    results = parallel_map(_square, items, backend=backend, max_workers=3, joblib_backend="threading")
    assert results == [v * v for v in items]


def test_parallel_map_rejects_unknown_backend() -> None:
    with pytest.raises(ValueError):
        parallel_map(_square, [1, 2], backend="gpu")


def test_single_worker_runs_in_calling_thread() -> None:
    seen: set[int] = set()

    def record(value: int) -> int:
        seen.add(threading.get_ident())
        return value

    parallel_map(record, [1, 2, 3], backend="thread", max_workers=1)
    assert seen == {threading.get_ident()}


def test_worker_errors_propagate() -> None:
    def explode(value: int) -> int:
        raise RuntimeError(f"bad item {value}")

    with pytest.raises(RuntimeError, match="bad item"):
        parallel_map(explode, [1, 2, 3], backend="thread", max_workers=2)


def test_evaluator_validates_arguments() -> None:
    with pytest.raises(ValueError):
        ParallelFitnessEvaluator(None)
    with pytest.raises(ValueError):
        ParallelFitnessEvaluator(len, backend="cluster")
    with pytest.raises(ValueError):
        ParallelFitnessEvaluator(len, max_workers=0)


@pytest.mark.parametrize("backend", ["thread", "joblib"])
def test_evaluator_scores_every_chromosome(make_chromosome, backend) -> None:
    chromosomes = [make_chromosome(v, v) for v in range(6)]
    evaluator = ParallelFitnessEvaluator(
        lambda c: c.gene(0).allele * 10,
        backend=backend,
        max_workers=2,
        joblib_backend="threading",
    )

    evaluator.evaluate(chromosomes)

    assert [c.fitness_value_direct for c in chromosomes] == [v * 10.0 for v in range(6)]


def test_evaluator_is_a_bulk_fitness_function() -> None:
    config = Configuration(population_size=4, seed=1)
    config.bulk_fitness_function = ParallelFitnessEvaluator(lambda c: c.gene(0).allele)
    assert config.bulk_fitness_function.backend == "thread"


def test_empty_batch_is_a_no_op() -> None:
    ParallelFitnessEvaluator(len).evaluate([])
