"""Per-gene random mutation.

Every gene of the first ``min(population_size, len(population))``
chromosomes is offered a mutation. The decision is taken either by a fixed
rate (probability ``1 / rate``; ``0`` disables mutation) or by a dynamic
:class:`MutationRateCalculator`. A chromosome with at least one mutated gene
is cloned exactly once and the clone, not the original, receives all of its
mutations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from ..config.constants import MUTATION_STRENGTH_RANGE
from .errors import InvalidConfigurationError
from .operators import GeneticOperator

if TYPE_CHECKING:  # pragma: no cover
    from .chromosome import Chromosome
    from .configuration import Configuration
    from .genes import Gene
    from .population import Population

__all__ = [
    "MutationRateCalculator",
    "DefaultMutationRateCalculator",
    "MutationOperator",
]


@runtime_checkable
class MutationRateCalculator(Protocol):
    """Anything able to decide, gene by gene, whether to mutate."""

    def should_mutate(self) -> bool:
        ...


class DefaultMutationRateCalculator:
    """Mutates each gene with probability ``1 / chromosome_size``."""

    def __init__(self, configuration: "Configuration") -> None:
        if configuration is None:
            raise ValueError("configuration must not be None")
        self._configuration = configuration

    def should_mutate(self) -> bool:
        total_genes = max(1, self._configuration.chromosome_size)
        return int(self._configuration.random_generator.integers(total_genes)) == 0


class MutationOperator(GeneticOperator):
    def __init__(
        self,
        configuration: "Configuration",
        mutation_rate: "int | MutationRateCalculator | None" = None,
    ) -> None:
        super().__init__(configuration)
        self._mutation_rate = 0
        self._calculator: MutationRateCalculator | None = None
        if mutation_rate is None:
            self.mutation_rate_calculator = DefaultMutationRateCalculator(configuration)
        elif isinstance(mutation_rate, MutationRateCalculator):
            self.mutation_rate_calculator = mutation_rate
        else:
            self.mutation_rate = mutation_rate

    @property
    def mutation_rate(self) -> int:
        return self._mutation_rate

    @mutation_rate.setter
    def mutation_rate(self, rate: int) -> None:
        if int(rate) < 0:
            raise InvalidConfigurationError("mutation rate must be >= 0")
        self._mutation_rate = int(rate)
        self._calculator = None

    @property
    def mutation_rate_calculator(self) -> MutationRateCalculator | None:
        return self._calculator

    @mutation_rate_calculator.setter
    def mutation_rate_calculator(self, calculator: MutationRateCalculator | None) -> None:
        if calculator is not None and not isinstance(calculator, MutationRateCalculator):
            raise TypeError("mutation rate calculator must provide should_mutate()")
        self._calculator = calculator
        if calculator is not None:
            self._mutation_rate = 0

    def _should_mutate(self, rng: np.random.Generator) -> bool:
        if self._calculator is not None:
            return bool(self._calculator.should_mutate())
        return int(rng.integers(self._mutation_rate)) == 0

    def operate(
        self,
        population: "Population",
        candidate_chromosomes: list["Chromosome"],
    ) -> None:
        if self._mutation_rate == 0 and self._calculator is None:
            return
        rng = self._configuration.random_generator
        size = min(self._configuration.population_size, population.size())
        for index in range(size):
            original = population[index]
            mutant: "Chromosome | None" = None
            for position in range(original.size()):
                if not self._should_mutate(rng):
                    continue
                if mutant is None:
                    mutant = original.clone()
                    candidate_chromosomes.append(mutant)
                _mutate_gene(mutant.gene(position), rng)
            if mutant is not None:
                mutant.reset_fitness_value()

    def __repr__(self) -> str:
        if self._calculator is not None:
            return f"MutationOperator(calculator={type(self._calculator).__name__})"
        return f"MutationOperator(rate={self._mutation_rate})"


def _mutate_gene(gene: "Gene", rng: np.random.Generator) -> None:
    if gene.is_composite:
        for child in gene:  # type: ignore[attr-defined]
            _mutate_gene(child, rng)
        return
    for element in range(gene.size()):
        low, high = MUTATION_STRENGTH_RANGE
        strength = low + rng.random() * (high - low)
        gene.apply_mutation(element, strength)
