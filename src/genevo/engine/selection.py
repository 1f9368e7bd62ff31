"""Natural selectors deciding which chromosomes survive into the next generation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

import numpy as np

from .errors import InvalidConfigurationError
from .population import Population

if TYPE_CHECKING:  # pragma: no cover
    from .chromosome import Chromosome
    from .configuration import Configuration

__all__ = [
    "NaturalSelector",
    "BestChromosomesSelector",
    "TournamentSelector",
    "WeightedRouletteSelector",
]


class NaturalSelector(ABC):
    """Accumulates chromosomes with :meth:`add` and picks survivors with :meth:`select`.

    The pool filled by ``add`` belongs to the selector; :meth:`empty` clears it
    without touching any population produced by an earlier ``select``.
    """

    def __init__(self, configuration: "Configuration") -> None:
        if configuration is None:
            raise ValueError("configuration must not be None")
        self._configuration = configuration
        self._pool = Population(configuration)

    @property
    def configuration(self) -> "Configuration":
        return self._configuration

    def add(self, chromosome: "Chromosome") -> None:
        self._pool.add(chromosome)

    def select(
        self,
        count: int,
        from_population: Population | None,
        to_population: Population,
    ) -> None:
        """Absorb ``from_population`` (when given) and append up to ``count`` survivors."""

        if from_population is not None:
            for chromosome in from_population:
                self.add(chromosome)
        self._select_chromosomes(count, to_population)

    @abstractmethod
    def _select_chromosomes(self, count: int, to_population: Population) -> None:
        ...

    def empty(self) -> None:
        self._pool.clear()

    @abstractmethod
    def returns_unique_chromosomes(self) -> bool:
        ...

    def pool_size(self) -> int:
        return self._pool.size()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pool_size={self._pool.size()})"


class BestChromosomesSelector(NaturalSelector):
    """Elitist selection: the fittest chromosomes of the pool win.

    ``original_rate`` is the share of the requested count taken from distinct
    top performers. When doublettes are allowed the output is topped up to the
    requested count by cycling through the sorted pool again, so the same
    chromosome object can appear several times in one output population.
    ``returns_unique_chromosomes`` still reports ``True``; callers composing
    selectors rely on that declared value.
    """

    def __init__(
        self,
        configuration: "Configuration",
        original_rate: float = 1.0,
        doublettes_allowed: bool = False,
    ) -> None:
        super().__init__(configuration)
        if not 0.0 < original_rate <= 1.0:
            raise InvalidConfigurationError(
                f"original_rate must be within (0, 1], got {original_rate}"
            )
        self._original_rate = float(original_rate)
        self._doublettes_allowed = bool(doublettes_allowed)
        self._needs_sorting = False

    @property
    def original_rate(self) -> float:
        return self._original_rate

    @property
    def doublettes_allowed(self) -> bool:
        return self._doublettes_allowed

    @doublettes_allowed.setter
    def doublettes_allowed(self, allowed: bool) -> None:
        self._doublettes_allowed = bool(allowed)

    def add(self, chromosome: "Chromosome") -> None:
        if not self._doublettes_allowed and self._pool.contains(chromosome):
            return
        chromosome.set_selected_for_next_generation(False)
        self._pool.add(chromosome)
        self._needs_sorting = True

    def _select_chromosomes(self, count: int, to_population: Population) -> None:
        pool_size = self._pool.size()
        selectable = min(count, pool_size)
        if self._original_rate < 1.0:
            # half-up rounding
            selectable = max(1, int(selectable * self._original_rate + 0.5))
        if self._needs_sorting:
            self._pool.sort_by_fitness()
            self._needs_sorting = False

        for index in range(min(selectable, pool_size)):
            chromosome = self._pool[index]
            chromosome.set_selected_for_next_generation(True)
            to_population.add(chromosome)

        if not self._doublettes_allowed or pool_size == 0:
            return
        for index in range(count - to_population.size()):
            chromosome = self._pool[index % pool_size]
            chromosome.set_selected_for_next_generation(True)
            to_population.add(chromosome)

    def empty(self) -> None:
        super().empty()
        self._needs_sorting = False

    def returns_unique_chromosomes(self) -> bool:
        return True


class TournamentSelector(NaturalSelector):
    """Repeated tournaments between randomly drawn pool members.

    Each pick draws ``tournament_size`` contestants with replacement, ranks
    them fitter-first and takes the best with ``probability``, the second
    best with ``probability * (1 - probability)`` and so on, falling back to
    the weakest contestant.
    """

    def __init__(
        self,
        configuration: "Configuration",
        tournament_size: int = 3,
        probability: float = 1.0,
    ) -> None:
        super().__init__(configuration)
        if tournament_size < 1:
            raise InvalidConfigurationError("tournament_size must be at least 1")
        if not 0.0 < probability <= 1.0:
            raise InvalidConfigurationError(
                f"probability must be within (0, 1], got {probability}"
            )
        self._tournament_size = int(tournament_size)
        self._probability = float(probability)

    @property
    def tournament_size(self) -> int:
        return self._tournament_size

    @property
    def probability(self) -> float:
        return self._probability

    def _select_chromosomes(self, count: int, to_population: Population) -> None:
        pool_size = self._pool.size()
        if pool_size == 0:
            return
        rng = self._configuration.random_generator
        for _ in range(count):
            indices = rng.integers(0, pool_size, size=self._tournament_size)
            contestants = Population(self._configuration, (self._pool[int(i)] for i in indices))
            ranked = contestants.fittest_n(self._tournament_size)
            winner = ranked[self._pick_rank(rng.random())]
            winner.set_selected_for_next_generation(True)
            to_population.add(winner)

    def _pick_rank(self, draw: float) -> int:
        # rank k wins with p * (1 - p) ** k; the weakest takes the remainder
        term = self._probability
        accumulated = term
        rank = 0
        while rank < self._tournament_size - 1 and draw > accumulated:
            term *= 1.0 - self._probability
            accumulated += term
            rank += 1
        return rank

    def returns_unique_chromosomes(self) -> bool:
        return False


def _normalise_fitness(fitness: Sequence[float]) -> np.ndarray:
    values = np.asarray(fitness, dtype=float)
    finite = np.isfinite(values)
    if not finite.any():
        raise ValueError("fitness scores contain no finite values")
    values = np.where(finite, values, 0.0)
    min_value = values.min()
    if min_value < 0:
        values = values - min_value + 1e-9
    total = values.sum()
    if total == 0:
        return np.full_like(values, 1.0 / len(values))
    return values / total


class WeightedRouletteSelector(NaturalSelector):
    """Fitness-proportional selection with replacement.

    Weights follow the raw fitness values, so this selector assumes a
    maximising evaluator. Negative scores are shifted onto a small positive
    floor and an all-zero pool is sampled uniformly.
    """

    def _select_chromosomes(self, count: int, to_population: Population) -> None:
        pool_size = self._pool.size()
        if pool_size == 0 or count <= 0:
            return
        rng = self._configuration.random_generator
        probabilities = _normalise_fitness([c.fitness_value for c in self._pool])
        for index in rng.choice(pool_size, size=count, p=probabilities):
            chromosome = self._pool[int(index)]
            chromosome.set_selected_for_next_generation(True)
            to_population.add(chromosome)

    def returns_unique_chromosomes(self) -> bool:
        return False
