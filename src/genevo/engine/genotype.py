"""Generational driver of an evolution run.

One call to :meth:`Genotype.evolve` performs a full cycle:

1. natural selectors registered *before* the operators pick a new population;
2. every genetic operator appends new candidates to the working pool;
3. the working pool is merged into the population;
4. a configured bulk fitness function scores the working pool in one batch;
5. natural selectors registered *after* the operators shrink the population
   back towards the configured size;
6. the population is topped up with random chromosomes when it fell below
   the configured minimum percentage;
7. ``GENOTYPE_EVOLVED_EVENT`` is fired;
8. working-pool chromosomes neither flagged as selected nor kept in the new
   population are cleaned up and the pool is cleared, even when an earlier
   step raised.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Iterable

import numpy as np
import pandas as pd

from ..config.constants import GENOTYPE_EVOLVED_EVENT
from .chromosome import Chromosome
from .errors import ConfigurationMissingError
from .events import GeneticEvent
from .population import Population

if TYPE_CHECKING:  # pragma: no cover
    from .configuration import Configuration

__all__ = ["Genotype"]

logger = logging.getLogger(__name__)


class Genotype:
    """Owns the live population of one run and evolves it generation by generation.

    Building a genotype locks its configuration. ``evolve`` is exclusive per
    instance; concurrent callers are serialised on an internal lock.
    """

    def __init__(
        self,
        configuration: "Configuration",
        population: Population | Iterable[Chromosome],
    ) -> None:
        if configuration is None:
            raise ValueError("configuration must not be None")
        if population is None:
            raise ValueError("population must not be None")
        if not isinstance(population, Population):
            population = Population(configuration, population)
        for index, chromosome in enumerate(population):
            if chromosome is None:
                raise ValueError(f"chromosome at index {index} is None")
            if chromosome.configuration is None:
                chromosome.configuration = configuration
        configuration.lock_settings()
        self._configuration: "Configuration | None" = configuration
        self._population = population
        self._working_pool: list[Chromosome] = []
        self._generation = 0
        self._lock = threading.RLock()

    @classmethod
    def random_initial_genotype(cls, configuration: "Configuration") -> "Genotype":
        """Genotype with ``population_size`` random chromosomes shaped like the sample."""

        if configuration is None:
            raise ValueError("configuration must not be None")
        configuration.lock_settings()
        population = Population(
            configuration,
            (
                Chromosome.random_initial_chromosome(configuration)
                for _ in range(configuration.population_size)
            ),
        )
        bulk_function = configuration.bulk_fitness_function
        if bulk_function is not None:
            bulk_function.evaluate(population.chromosomes)
        logger.debug("random initial genotype with %d chromosomes", population.size())
        return cls(configuration, population)

    # Accessors -----------------------------------------------------------

    @property
    def configuration(self) -> "Configuration | None":
        return self._configuration

    @property
    def population(self) -> Population:
        return self._population

    @property
    def chromosomes(self) -> list[Chromosome]:
        return self._population.chromosomes

    @property
    def generation(self) -> int:
        """Number of completed evolution cycles."""
        return self._generation

    def fittest_chromosome(self) -> Chromosome | None:
        """Fittest member of the live population, ``None`` when it is empty.

        With a bulk fitness function, members without a fitness value are
        scored in one batch first.
        """
        configuration = self._require_configuration()
        bulk_function = configuration.bulk_fitness_function
        if bulk_function is not None:
            unscored = [c for c in self._population if not c.has_fitness_value]
            if unscored:
                bulk_function.evaluate(self._population.chromosomes)
                self._population.mark_changed()
        return self._population.fittest()

    # Evolution -----------------------------------------------------------

    def _require_configuration(self) -> "Configuration":
        configuration = self._configuration
        if configuration is None or not configuration.is_locked:
            raise ConfigurationMissingError(
                "the genotype has no locked configuration; build it with a valid Configuration"
            )
        return configuration

    def evolve(self, iterations: int = 1) -> None:
        """Run ``iterations`` evolution cycles one after another."""

        if iterations < 0:
            raise ValueError("iterations must be >= 0")
        with self._lock:
            for _ in range(iterations):
                self._evolve_once()

    def _evolve_once(self) -> None:
        configuration = self._require_configuration()
        previous_fittest = (
            self._population.fittest() if configuration.preserve_fittest else None
        )
        for chromosome in self._population:
            chromosome.set_selected_for_next_generation(False)
        try:
            self._apply_natural_selectors(configuration, before_operators=True)

            for operator in configuration.genetic_operators:
                operator.operate(self._population, self._working_pool)

            self._population.add_all(self._working_pool)

            bulk_function = configuration.bulk_fitness_function
            if bulk_function is not None:
                bulk_function.evaluate(list(self._working_pool))

            self._apply_natural_selectors(configuration, before_operators=False)

            if previous_fittest is not None:
                self._restore_fittest(configuration, previous_fittest)

            self._fill_to_minimum_size(configuration)

            self._generation += 1
            if logger.isEnabledFor(logging.DEBUG):
                fittest = self._population.fittest()
                logger.debug(
                    "generation %d: population=%d candidates=%d fittest=%s",
                    self._generation,
                    self._population.size(),
                    len(self._working_pool),
                    None if fittest is None else fittest.fitness_value,
                )
            configuration.event_manager.fire(GeneticEvent(GENOTYPE_EVOLVED_EVENT, self))
        finally:
            # a later selector's add() clears flags set by an earlier one
            survivors = {id(chromosome) for chromosome in self._population}
            for chromosome in self._working_pool:
                if chromosome.is_selected_for_next_generation or id(chromosome) in survivors:
                    continue
                chromosome.cleanup()
            self._working_pool.clear()

    def _apply_natural_selectors(self, configuration: "Configuration", before_operators: bool) -> None:
        selectors = configuration.natural_selectors(before_operators)
        if not selectors:
            return
        population_size = configuration.population_size
        single_size = population_size // len(selectors)

        if len(selectors) == 1:
            selector = selectors[0]
            new_population = Population(configuration)
            for chromosome in self._population:
                selector.add(chromosome)
            selector.select(single_size, None, new_population)
            selector.empty()
            self._population = new_population
            return

        new_population = Population(configuration)
        last = len(selectors) - 1
        for index, selector in enumerate(selectors):
            for chromosome in self._population:
                selector.add(chromosome)
            if index == last:
                single_size = population_size - new_population.size()
            partial = Population(configuration)
            selector.select(single_size, None, partial)
            logger.debug(
                "selector %d/%d (%s) contributed %d of %d requested",
                index + 1,
                len(selectors),
                type(selector).__name__,
                partial.size(),
                single_size,
            )
            new_population.add_all(partial)
            selector.empty()
        self._population = new_population

    def _restore_fittest(self, configuration: "Configuration", fittest: Chromosome) -> None:
        if any(chromosome is fittest for chromosome in self._population):
            return
        fittest.set_selected_for_next_generation(True)
        if self._population.size() >= configuration.population_size and self._population.size():
            self._population.sort_by_fitness()
            self._population.replace(self._population.size() - 1, fittest)
        else:
            self._population.add(fittest)

    def _fill_to_minimum_size(self, configuration: "Configuration") -> None:
        percent = configuration.minimum_pop_size_percent
        if percent <= 0:
            return
        minimum = configuration.population_size * percent // 100
        missing = minimum - self._population.size()
        if missing <= 0:
            return
        logger.info(
            "population dropped to %d, adding %d random chromosomes (minimum %d)",
            self._population.size(),
            missing,
            minimum,
        )
        try:
            while self._population.size() < minimum:
                self._population.add(Chromosome.random_initial_chromosome(configuration))
        except ValueError:
            logger.exception("could not build a random chromosome to refill the population")

    # Reporting -----------------------------------------------------------

    def summary(self) -> pd.Series:
        """Generation, size and fitness statistics of the live population."""

        values = np.asarray([c.fitness_value for c in self._population], dtype=float)
        fittest = self._population.fittest()
        return pd.Series(
            {
                "generation": self._generation,
                "size": int(values.size),
                "best": np.nan if fittest is None else fittest.fitness_value,
                "mean": float(values.mean()) if values.size else np.nan,
                "min": float(values.min()) if values.size else np.nan,
                "max": float(values.max()) if values.size else np.nan,
            }
        )

    # Comparison ----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        """Same chromosomes, by value, with the same multiplicities."""
        if not isinstance(other, Genotype):
            return NotImplemented
        remaining = other._population.chromosomes
        if len(remaining) != self._population.size():
            return False
        for chromosome in self._population:
            for position, candidate in enumerate(remaining):
                if candidate == chromosome:
                    del remaining[position]
                    break
            else:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Genotype(generation={self._generation}, "
            f"population_size={self._population.size()})"
        )
