"""Chromosome: a fixed-length sequence of genes with a cached fitness."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterator, Sequence

from ..config.constants import NO_FITNESS_VALUE
from .errors import InvalidConfigurationError
from .genes import Gene

if TYPE_CHECKING:  # pragma: no cover
    from .configuration import Configuration

__all__ = ["Chromosome"]


class Chromosome:
    """One candidate solution.

    The gene count is fixed at construction and no slot may be ``None``.
    Fitness is cached: it is computed lazily through the configuration's
    fitness function the first time :attr:`fitness_value` is read and kept
    until :meth:`reset_fitness_value` or :meth:`set_fitness_value`.
    """

    def __init__(
        self,
        genes: Sequence[Gene] | Gene,
        size: int | None = None,
        *,
        configuration: "Configuration | None" = None,
    ) -> None:
        if genes is None:
            raise ValueError("genes must not be None")
        if isinstance(genes, Gene):
            if size is None or size <= 0:
                raise ValueError("size must be positive when building from a sample gene")
            gene_list = [genes.clone() for _ in range(size)]
        else:
            if size is not None:
                raise ValueError("size is only valid together with a sample gene")
            gene_list = list(genes)
        if not gene_list:
            raise ValueError("a chromosome needs at least one gene")
        for index, gene in enumerate(gene_list):
            if gene is None:
                raise ValueError(f"gene at index {index} is None")
        self._genes: list[Gene] = gene_list
        self._configuration = configuration
        self._fitness_value: float | None = None
        self._selected_for_next_generation = False

    @classmethod
    def random_initial_chromosome(cls, configuration: "Configuration") -> "Chromosome":
        """Build a chromosome with the sample chromosome's layout and random alleles."""

        sample = configuration.sample_chromosome
        if sample is None:
            raise InvalidConfigurationError(
                "a sample chromosome must be configured before random initialisation"
            )
        rng = configuration.random_generator
        genes = []
        for template in sample.genes:
            gene = template.new_gene()
            gene.set_to_random_value(rng)
            genes.append(gene)
        return cls(genes, configuration=configuration)

    @property
    def genes(self) -> tuple[Gene, ...]:
        return tuple(self._genes)

    def gene(self, index: int) -> Gene:
        return self._genes[index]

    def size(self) -> int:
        return len(self._genes)

    def __len__(self) -> int:
        return len(self._genes)

    def __iter__(self) -> Iterator[Gene]:
        return iter(self._genes)

    @property
    def configuration(self) -> "Configuration | None":
        return self._configuration

    @configuration.setter
    def configuration(self, configuration: "Configuration | None") -> None:
        self._configuration = configuration

    @property
    def fitness_value(self) -> float:
        """Cached fitness, computed on demand when a fitness function is available.

        Returns :data:`NO_FITNESS_VALUE` when the value was never assigned and
        no single-chromosome fitness function is configured (e.g. fitness is
        assigned by a bulk function).
        """
        if self._fitness_value is None:
            function = self._configuration.fitness_function if self._configuration else None
            if function is None:
                return NO_FITNESS_VALUE
            self._fitness_value = function.get_fitness_value(self)
        return self._fitness_value

    @property
    def fitness_value_direct(self) -> float | None:
        return self._fitness_value

    @property
    def has_fitness_value(self) -> bool:
        return self._fitness_value is not None

    def set_fitness_value(self, value: float) -> None:
        value = float(value)
        if math.isnan(value):
            raise ValueError("fitness value must not be NaN")
        self._fitness_value = value

    def reset_fitness_value(self) -> None:
        self._fitness_value = None

    @property
    def is_selected_for_next_generation(self) -> bool:
        return self._selected_for_next_generation

    def set_selected_for_next_generation(self, selected: bool) -> None:
        self._selected_for_next_generation = bool(selected)

    def clone(self) -> "Chromosome":
        """Deep copy with fresh gene clones; the fitness cache is carried over."""
        copy = Chromosome([gene.clone() for gene in self._genes], configuration=self._configuration)
        copy._fitness_value = self._fitness_value
        return copy

    def cleanup(self) -> None:
        """Release resources held by the genes of a discarded chromosome."""
        for gene in self._genes:
            gene.cleanup()

    def compare_to(self, other: "Chromosome") -> int:
        if len(self._genes) != len(other._genes):
            return -1 if len(self._genes) < len(other._genes) else 1
        for mine, theirs in zip(self._genes, other._genes):
            result = mine.compare_to(theirs)
            if result:
                return result
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self._genes == other._genes

    def __lt__(self, other: "Chromosome") -> bool:
        return self.compare_to(other) < 0

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        alleles = ", ".join(repr(gene.allele) for gene in self._genes)
        return f"Chromosome([{alleles}], fitness={self._fitness_value})"
