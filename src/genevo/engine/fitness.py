"""Fitness functions and fitness evaluators.

A *fitness function* scores chromosomes; a *fitness evaluator* decides which
of two scores is fitter, so the same scores can drive maximisation or
minimisation.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:  # pragma: no cover
    from .chromosome import Chromosome

__all__ = [
    "FitnessEvaluator",
    "DefaultFitnessEvaluator",
    "DeltaFitnessEvaluator",
    "FitnessFunction",
    "CallableFitness",
    "BulkFitnessFunction",
    "BulkFitnessOffsetRemover",
    "as_fitness_function",
]


class FitnessEvaluator(ABC):
    """Stateless ordering policy over fitness values."""

    @abstractmethod
    def is_fitter(self, first: float, second: float) -> bool:
        """Return ``True`` when ``first`` is strictly fitter than ``second``."""

    def compare(self, first: float, second: float) -> int:
        """Three-way comparison with the fitter value first (sort key helper)."""
        if self.is_fitter(first, second):
            return -1
        if self.is_fitter(second, first):
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class DefaultFitnessEvaluator(FitnessEvaluator):
    """Higher fitness values are fitter (maximisation)."""

    def is_fitter(self, first: float, second: float) -> bool:
        return first > second


class DeltaFitnessEvaluator(FitnessEvaluator):
    """Lower fitness values are fitter (minimisation of a delta/error).

    Negative values are treated as invalid scores: they are never fitter than
    anything, and any non-negative value is fitter than a negative one.
    """

    def is_fitter(self, first: float, second: float) -> bool:
        if first < 0:
            return False
        if second < 0:
            return True
        return first < second


class FitnessFunction(ABC):
    """Scores a single chromosome."""

    def get_fitness_value(self, chromosome: "Chromosome") -> float:
        value = float(self.evaluate(chromosome))
        if not math.isfinite(value):
            raise ValueError(
                f"{type(self).__name__} returned a non-finite fitness value: {value}"
            )
        return value

    @abstractmethod
    def evaluate(self, chromosome: "Chromosome") -> float:
        ...


class CallableFitness(FitnessFunction):
    """Adapter turning a plain ``callable(chromosome) -> float`` into a fitness function."""

    def __init__(self, func: Callable[["Chromosome"], float]) -> None:
        if not callable(func):
            raise TypeError("fitness function must be callable")
        self._func = func

    def evaluate(self, chromosome: "Chromosome") -> float:
        return self._func(chromosome)

    def __repr__(self) -> str:
        name = getattr(self._func, "__name__", repr(self._func))
        return f"CallableFitness({name})"


def as_fitness_function(
    candidate: FitnessFunction | Callable[["Chromosome"], float],
) -> FitnessFunction:
    if isinstance(candidate, FitnessFunction):
        return candidate
    return CallableFitness(candidate)


class BulkFitnessFunction(ABC):
    """Scores a whole batch of chromosomes at once.

    Implementations must assign a fitness value to every chromosome of the
    batch before returning; this allows scores that depend on the other
    members of the batch (competitive or normalised fitness).
    """

    @abstractmethod
    def evaluate(self, chromosomes: Iterable["Chromosome"]) -> None:
        ...


class BulkFitnessOffsetRemover(BulkFitnessFunction):
    """Shifts single-chromosome scores so the weakest of the batch scores 1.

    Useful when a fitness function produces large absolute values with small
    relative differences, which would make fitness-proportional selection
    nearly uniform.
    """

    def __init__(self, fitness_function: FitnessFunction | Callable[["Chromosome"], float]) -> None:
        if fitness_function is None:
            raise ValueError("fitness_function must not be None")
        self._fitness_function = as_fitness_function(fitness_function)

    def evaluate(self, chromosomes: Iterable["Chromosome"]) -> None:
        batch = list(chromosomes)
        if not batch:
            return
        raw = [self._fitness_function.get_fitness_value(chrom) for chrom in batch]
        offset = min(raw)
        for chromosome, value in zip(batch, raw):
            chromosome.set_fitness_value(value - offset + 1.0)
