"""Single-point crossover between randomly paired chromosomes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ..config.constants import DEFAULT_CROSSOVER_RATE
from .errors import InvalidConfigurationError
from .operators import GeneticOperator

if TYPE_CHECKING:  # pragma: no cover
    import numpy as np

    from .chromosome import Chromosome
    from .configuration import Configuration
    from .genes import Gene
    from .population import Population

__all__ = ["CrossoverOperator"]


class CrossoverOperator(GeneticOperator):
    """Performs ``population_size // rate`` crossovers per cycle.

    Each crossover picks two parents by index (the same chromosome may be
    picked twice), clones both, and swaps every allele from a random locus to
    the end of the chromosome. When the locus falls on a composite gene the
    swap starts at a random sub-gene inside it. Both offspring are appended to
    the candidate list; parents are left untouched. A rate of ``0`` disables
    the operator.
    """

    def __init__(self, configuration: "Configuration", rate: int = DEFAULT_CROSSOVER_RATE) -> None:
        super().__init__(configuration)
        if int(rate) < 0:
            raise InvalidConfigurationError("crossover rate must be >= 0")
        self._rate = int(rate)

    @property
    def crossover_rate(self) -> int:
        return self._rate

    def operate(
        self,
        population: "Population",
        candidate_chromosomes: list["Chromosome"],
    ) -> None:
        if self._rate == 0:
            return
        size = min(self._configuration.population_size, population.size())
        if size == 0:
            return
        rng = self._configuration.random_generator
        for _ in range(size // self._rate):
            first = population[int(rng.integers(size))].clone()
            second = population[int(rng.integers(size))].clone()
            _cross(first.genes, second.genes, rng)
            first.reset_fitness_value()
            second.reset_fitness_value()
            candidate_chromosomes.append(first)
            candidate_chromosomes.append(second)

    def __repr__(self) -> str:
        return f"CrossoverOperator(rate={self._rate})"


def _swap(first: "Gene", second: "Gene") -> None:
    first.allele, second.allele = second.allele, first.allele


def _cross(first: Sequence["Gene"], second: Sequence["Gene"], rng: "np.random.Generator") -> None:
    length = min(len(first), len(second))
    locus = int(rng.integers(length))
    start = locus
    if first[locus].is_composite and second[locus].is_composite:
        inner_first = first[locus].genes  # type: ignore[attr-defined]
        inner_second = second[locus].genes  # type: ignore[attr-defined]
        inner_length = min(len(inner_first), len(inner_second))
        if inner_length:
            for position in range(int(rng.integers(inner_length)), inner_length):
                _swap(inner_first[position], inner_second[position])
        start = locus + 1
    for position in range(start, length):
        _swap(first[position], second[position])
