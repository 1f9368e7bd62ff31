"""Runtime configuration shared by every component of one evolution run.

A :class:`Configuration` is passed explicitly to the chromosomes,
populations, selectors, operators and the genotype that belong to a run, so
several independent runs can coexist in the same process. Once a genotype
is built the configuration is locked and further changes are rejected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import numpy as np

from ..config.constants import DEFAULT_POPULATION_SIZE, MAX_MINIMUM_POP_SIZE_PERCENT
from .errors import InvalidConfigurationError
from .events import EventManager
from .fitness import (
    BulkFitnessFunction,
    DefaultFitnessEvaluator,
    FitnessEvaluator,
    FitnessFunction,
    as_fitness_function,
)

if TYPE_CHECKING:  # pragma: no cover
    from .chromosome import Chromosome
    from .operators import GeneticOperator
    from .selection import NaturalSelector

__all__ = ["Configuration"]

logger = logging.getLogger(__name__)


class Configuration:
    """Mutable-until-locked settings of an evolution run."""

    def __init__(
        self,
        *,
        population_size: int = DEFAULT_POPULATION_SIZE,
        fitness_evaluator: FitnessEvaluator | None = None,
        random_generator: np.random.Generator | None = None,
        seed: int | None = None,
        name: str = "",
    ) -> None:
        self.name = name
        self._locked = False
        self._population_size = 0
        self._fitness_function: FitnessFunction | None = None
        self._bulk_fitness_function: BulkFitnessFunction | None = None
        self._sample_chromosome: "Chromosome | None" = None
        self._genetic_operators: list["GeneticOperator"] = []
        self._pre_selectors: list["NaturalSelector"] = []
        self._post_selectors: list["NaturalSelector"] = []
        self._minimum_pop_size_percent = 0
        self._preserve_fittest = False
        self._fitness_evaluator: FitnessEvaluator = fitness_evaluator or DefaultFitnessEvaluator()
        self._random_generator = random_generator or np.random.default_rng(seed)
        self._event_manager = EventManager()
        self.population_size = population_size

    # Locking ------------------------------------------------------------

    @property
    def is_locked(self) -> bool:
        return self._locked

    def _check_unlocked(self) -> None:
        if self._locked:
            raise InvalidConfigurationError(
                "the configuration is locked and can no longer be changed"
            )

    def verify_state_is_valid(self) -> None:
        """Raise :class:`InvalidConfigurationError` unless the setup is complete."""

        if self._fitness_function is None and self._bulk_fitness_function is None:
            raise InvalidConfigurationError("a fitness function or bulk fitness function is required")
        if self._sample_chromosome is None:
            raise InvalidConfigurationError("a sample chromosome is required")
        if self._population_size <= 0:
            raise InvalidConfigurationError("population size must be positive")
        if not self._genetic_operators:
            raise InvalidConfigurationError("at least one genetic operator is required")
        if not self._pre_selectors and not self._post_selectors:
            raise InvalidConfigurationError("at least one natural selector is required")

    def lock_settings(self) -> None:
        if self._locked:
            return
        self.verify_state_is_valid()
        self._locked = True
        logger.debug(
            "configuration %r locked (population_size=%d, operators=%d, selectors=%d/%d)",
            self.name,
            self._population_size,
            len(self._genetic_operators),
            len(self._pre_selectors),
            len(self._post_selectors),
        )

    # Population ---------------------------------------------------------

    @property
    def population_size(self) -> int:
        return self._population_size

    @population_size.setter
    def population_size(self, size: int) -> None:
        self._check_unlocked()
        if int(size) <= 0:
            raise InvalidConfigurationError("population size must be positive")
        self._population_size = int(size)

    @property
    def minimum_pop_size_percent(self) -> int:
        return self._minimum_pop_size_percent

    @minimum_pop_size_percent.setter
    def minimum_pop_size_percent(self, percent: int) -> None:
        self._check_unlocked()
        if not 0 <= int(percent) <= MAX_MINIMUM_POP_SIZE_PERCENT:
            raise InvalidConfigurationError("minimum population size percent must be within [0, 100]")
        self._minimum_pop_size_percent = int(percent)

    @property
    def preserve_fittest(self) -> bool:
        return self._preserve_fittest

    @preserve_fittest.setter
    def preserve_fittest(self, preserve: bool) -> None:
        self._check_unlocked()
        self._preserve_fittest = bool(preserve)

    @property
    def sample_chromosome(self) -> "Chromosome | None":
        return self._sample_chromosome

    @sample_chromosome.setter
    def sample_chromosome(self, chromosome: "Chromosome") -> None:
        self._check_unlocked()
        if chromosome is None:
            raise InvalidConfigurationError("sample chromosome must not be None")
        chromosome.configuration = self
        self._sample_chromosome = chromosome

    @property
    def chromosome_size(self) -> int:
        return 0 if self._sample_chromosome is None else self._sample_chromosome.size()

    # Fitness ------------------------------------------------------------

    @property
    def fitness_function(self) -> FitnessFunction | None:
        return self._fitness_function

    @fitness_function.setter
    def fitness_function(self, function: FitnessFunction | Callable[["Chromosome"], float]) -> None:
        self._check_unlocked()
        if function is None:
            raise InvalidConfigurationError("fitness function must not be None")
        if self._bulk_fitness_function is not None:
            raise InvalidConfigurationError(
                "a bulk fitness function is already set; only one kind may be configured"
            )
        self._fitness_function = as_fitness_function(function)

    @property
    def bulk_fitness_function(self) -> BulkFitnessFunction | None:
        return self._bulk_fitness_function

    @bulk_fitness_function.setter
    def bulk_fitness_function(self, function: BulkFitnessFunction) -> None:
        self._check_unlocked()
        if not isinstance(function, BulkFitnessFunction):
            raise InvalidConfigurationError("bulk fitness function must be a BulkFitnessFunction")
        if self._fitness_function is not None:
            raise InvalidConfigurationError(
                "a fitness function is already set; only one kind may be configured"
            )
        self._bulk_fitness_function = function

    @property
    def fitness_evaluator(self) -> FitnessEvaluator:
        return self._fitness_evaluator

    @fitness_evaluator.setter
    def fitness_evaluator(self, evaluator: FitnessEvaluator) -> None:
        self._check_unlocked()
        if not isinstance(evaluator, FitnessEvaluator):
            raise InvalidConfigurationError("fitness evaluator must be a FitnessEvaluator")
        self._fitness_evaluator = evaluator

    # Operators and selectors ---------------------------------------------

    def add_genetic_operator(self, operator: "GeneticOperator") -> None:
        self._check_unlocked()
        if operator is None:
            raise InvalidConfigurationError("genetic operator must not be None")
        self._genetic_operators.append(operator)

    @property
    def genetic_operators(self) -> list["GeneticOperator"]:
        return list(self._genetic_operators)

    def add_natural_selector(self, selector: "NaturalSelector", before_operators: bool) -> None:
        self._check_unlocked()
        if selector is None:
            raise InvalidConfigurationError("natural selector must not be None")
        target = self._pre_selectors if before_operators else self._post_selectors
        target.append(selector)

    def remove_natural_selectors(self, before_operators: bool) -> None:
        self._check_unlocked()
        if before_operators:
            self._pre_selectors.clear()
        else:
            self._post_selectors.clear()

    def natural_selectors(self, before_operators: bool) -> list["NaturalSelector"]:
        return list(self._pre_selectors if before_operators else self._post_selectors)

    def natural_selectors_size(self, before_operators: bool) -> int:
        return len(self._pre_selectors if before_operators else self._post_selectors)

    def natural_selector(self, before_operators: bool, index: int) -> "NaturalSelector":
        return (self._pre_selectors if before_operators else self._post_selectors)[index]

    # Infrastructure ------------------------------------------------------

    @property
    def random_generator(self) -> np.random.Generator:
        return self._random_generator

    @random_generator.setter
    def random_generator(self, generator: np.random.Generator) -> None:
        self._check_unlocked()
        self._random_generator = generator

    @property
    def event_manager(self) -> EventManager:
        return self._event_manager

    def __repr__(self) -> str:
        return (
            f"Configuration(name={self.name!r}, population_size={self._population_size}, "
            f"locked={self._locked})"
        )
