"""Population container with fitness-sort caching.

A population holds chromosome references (never copies). Any structural
change marks it *changed* and *unsorted*; sorting through
:meth:`Population.sort_by_fitness` or :meth:`Population.fittest_n` restores
the sorted state and memoises the fittest chromosome as the first element.

Populations are not thread-safe: structural changes must not overlap with a
sort or a selector iterating the same population.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Iterable, Iterator

import pandas as pd

from .chromosome import Chromosome
from .genes import Gene

if TYPE_CHECKING:  # pragma: no cover
    from .configuration import Configuration

__all__ = ["Population"]


class Population:
    def __init__(
        self,
        configuration: "Configuration",
        chromosomes: Iterable[Chromosome] | None = None,
    ) -> None:
        if configuration is None:
            raise ValueError("configuration must not be None")
        self._configuration = configuration
        self._chromosomes: list[Chromosome] = list(chromosomes or [])
        self._fittest: Chromosome | None = None
        self._changed = True
        self._sorted = False

    @property
    def configuration(self) -> "Configuration":
        return self._configuration

    # State flags ---------------------------------------------------------

    def mark_changed(self) -> None:
        self._changed = True
        self._sorted = False

    @property
    def is_changed(self) -> bool:
        return self._changed

    @property
    def is_sorted(self) -> bool:
        return self._sorted

    # Structural operations -----------------------------------------------

    def add(self, chromosome: Chromosome | None) -> None:
        if chromosome is None:
            return
        self._chromosomes.append(chromosome)
        self.mark_changed()

    def add_all(self, other: "Population | Iterable[Chromosome] | None") -> None:
        if other is None:
            return
        incoming = list(other)
        if not incoming:
            return
        self._chromosomes.extend(incoming)
        self.mark_changed()

    def replace(self, index: int, chromosome: Chromosome) -> None:
        """Overwrite slot ``index``; ``index == size()`` appends instead."""
        if index == len(self._chromosomes):
            self.add(chromosome)
            return
        if not 0 <= index < len(self._chromosomes):
            raise IndexError(f"index {index} out of range for population of {len(self)}")
        self._chromosomes[index] = chromosome
        self.mark_changed()

    def remove(self, index: int) -> Chromosome:
        if not 0 <= index < len(self._chromosomes):
            raise ValueError(f"index {index} must be within [0, {len(self._chromosomes)})")
        removed = self._chromosomes.pop(index)
        self.mark_changed()
        return removed

    def set_chromosomes(self, chromosomes: Iterable[Chromosome]) -> None:
        self._chromosomes = list(chromosomes)
        self.mark_changed()

    def clear(self) -> None:
        self._chromosomes.clear()
        self._fittest = None
        self.mark_changed()

    # Read access ---------------------------------------------------------

    @property
    def chromosomes(self) -> list[Chromosome]:
        return list(self._chromosomes)

    def chromosome(self, index: int) -> Chromosome:
        return self._chromosomes[index]

    def to_chromosomes(self) -> list[Chromosome]:
        return list(self._chromosomes)

    def size(self) -> int:
        return len(self._chromosomes)

    def __len__(self) -> int:
        return len(self._chromosomes)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self._chromosomes)

    def __getitem__(self, index: int) -> Chromosome:
        return self._chromosomes[index]

    def contains(self, chromosome: Chromosome) -> bool:
        return chromosome in self._chromosomes

    __contains__ = contains

    # Fitness ordering ----------------------------------------------------

    def fittest(self) -> Chromosome | None:
        """Return the fittest chromosome, rescanning only after a change."""

        if not self._changed and self._fittest is not None:
            return self._fittest
        if not self._chromosomes:
            return None
        evaluator = self._configuration.fitness_evaluator
        best = self._chromosomes[0]
        best_fitness = best.fitness_value
        for candidate in self._chromosomes[1:]:
            fitness = candidate.fitness_value
            if evaluator.is_fitter(fitness, best_fitness):
                best, best_fitness = candidate, fitness
        self._fittest = best
        self._changed = False
        return best

    def fittest_n(self, count: int) -> list[Chromosome]:
        """Return the ``count`` fittest chromosomes, fitter first."""

        count = min(count, len(self._chromosomes))
        if count <= 0:
            return []
        if not self._changed and self._sorted:
            return self._chromosomes[:count]
        self.sort_by_fitness()
        return self._chromosomes[:count]

    def sort_by_fitness(self) -> None:
        """Stable sort, fitter first, according to the configured evaluator."""

        evaluator = self._configuration.fitness_evaluator
        scored = [(chromosome.fitness_value, chromosome) for chromosome in self._chromosomes]
        scored.sort(key=cmp_to_key(lambda a, b: evaluator.compare(a[0], b[0])))
        self._chromosomes = [chromosome for _, chromosome in scored]
        self._changed = False
        self._sorted = True
        self._fittest = self._chromosomes[0] if self._chromosomes else None

    # Genome access -------------------------------------------------------

    def flatten_genes(self, resolve_composite: bool) -> list[Gene]:
        """All genes of all chromosomes in order.

        With ``resolve_composite`` composite genes are replaced by their leaf
        genes in depth-first order.
        """

        result: list[Gene] = []
        for chromosome in self._chromosomes:
            for gene in chromosome.genes:
                if resolve_composite:
                    _collect_leaves(gene, result)
                else:
                    result.append(gene)
        return result

    def to_frame(self) -> pd.DataFrame:
        """Tabular view: one row per chromosome with fitness and alleles."""

        rows: list[dict[str, Any]] = []
        for chromosome in self._chromosomes:
            row: dict[str, Any] = {"fitness": chromosome.fitness_value}
            for index, gene in enumerate(chromosome.genes):
                row[f"gene_{index}"] = gene.allele
            rows.append(row)
        return pd.DataFrame(rows)

    # Comparison ----------------------------------------------------------

    def compare_to(self, other: "Population | None") -> int:
        """Size first, then containment of every chromosome of ``self`` in ``other``.

        This is a convenience check, not a total order: it is not symmetric
        (``a.compare_to(b) == 0`` does not imply ``b.compare_to(a) == 0`` when
        ``self`` holds duplicates) and unequal populations of the same size
        always compare as ``1``.
        """

        if other is None:
            return 1
        size_self, size_other = len(self), len(other)
        if size_self != size_other:
            return -1 if size_self < size_other else 1
        others = other._chromosomes
        for chromosome in self._chromosomes:
            if chromosome not in others:
                return 1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Population):
            return NotImplemented
        return self.compare_to(other) == 0

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Population(size={len(self)}, sorted={self._sorted})"


def _collect_leaves(gene: Gene, result: list[Gene]) -> None:
    if gene.is_composite:
        for child in gene:  # type: ignore[attr-defined]
            _collect_leaves(child, result)
    else:
        result.append(gene)
