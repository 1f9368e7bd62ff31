"""Build runtime configurations from validated :class:`EngineConfig` models."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import numpy as np

from ..config.loader import load_config
from ..config.schemas import EngineConfig, SelectorConfig
from ..config.settings import get_settings
from .chromosome import Chromosome
from .configuration import Configuration
from .crossover import CrossoverOperator
from .fitness import (
    BulkFitnessFunction,
    DefaultFitnessEvaluator,
    DeltaFitnessEvaluator,
    FitnessEvaluator,
    FitnessFunction,
)
from .mutation import MutationOperator
from .selection import (
    BestChromosomesSelector,
    NaturalSelector,
    TournamentSelector,
    WeightedRouletteSelector,
)

__all__ = ["build_configuration", "build_selector", "configuration_from_file"]

logger = logging.getLogger(__name__)

_EVALUATORS: dict[str, type[FitnessEvaluator]] = {
    "default": DefaultFitnessEvaluator,
    "delta": DeltaFitnessEvaluator,
}


def build_selector(configuration: Configuration, spec: SelectorConfig) -> NaturalSelector:
    if spec.kind == "best":
        return BestChromosomesSelector(
            configuration,
            original_rate=spec.original_rate,
            doublettes_allowed=spec.doublettes_allowed,
        )
    if spec.kind == "tournament":
        return TournamentSelector(
            configuration,
            tournament_size=spec.tournament_size,
            probability=spec.probability,
        )
    if spec.kind == "weighted_roulette":
        return WeightedRouletteSelector(configuration)
    raise ValueError(f"unsupported selector kind '{spec.kind}'")


def build_configuration(
    engine_config: EngineConfig,
    sample_chromosome: Chromosome,
    fitness_function: FitnessFunction | Callable[[Chromosome], float] | None = None,
    bulk_fitness_function: BulkFitnessFunction | None = None,
    *,
    name: str = "",
) -> Configuration:
    """Assemble an unlocked :class:`Configuration` from a declarative model.

    Exactly one of ``fitness_function`` and ``bulk_fitness_function`` must be
    given. When the model has no ``random_seed`` the process-wide seed from
    :func:`genevo.config.settings.get_settings` is used.
    """

    if (fitness_function is None) == (bulk_fitness_function is None):
        raise ValueError("provide exactly one of fitness_function or bulk_fitness_function")

    seed = engine_config.random_seed
    if seed is None:
        seed = get_settings().random_seed
    configuration = Configuration(
        population_size=engine_config.population_size,
        fitness_evaluator=_EVALUATORS[engine_config.fitness_evaluator](),
        random_generator=np.random.default_rng(seed),
        name=name,
    )
    configuration.sample_chromosome = sample_chromosome
    if fitness_function is not None:
        configuration.fitness_function = fitness_function
    else:
        configuration.bulk_fitness_function = bulk_fitness_function
    configuration.minimum_pop_size_percent = engine_config.minimum_pop_size_percent
    configuration.preserve_fittest = engine_config.preserve_fittest

    for selector_spec in engine_config.selectors:
        configuration.add_natural_selector(
            build_selector(configuration, selector_spec),
            selector_spec.before_operators,
        )
    if engine_config.crossover is not None:
        configuration.add_genetic_operator(
            CrossoverOperator(configuration, engine_config.crossover.rate)
        )
    if engine_config.mutation is not None:
        configuration.add_genetic_operator(
            MutationOperator(configuration, engine_config.mutation.rate)
        )

    logger.debug(
        "built configuration %r: size=%d selectors=%d operators=%d seed=%s",
        name,
        engine_config.population_size,
        len(engine_config.selectors),
        len(configuration.genetic_operators),
        seed,
    )
    return configuration


def configuration_from_file(
    file_path: str | Path,
    sample_chromosome: Chromosome,
    fitness_function: FitnessFunction | Callable[[Chromosome], float] | None = None,
    bulk_fitness_function: BulkFitnessFunction | None = None,
    *,
    project_root: Path | None = None,
) -> Configuration:
    """Load an :class:`EngineConfig` YAML file and build its configuration."""

    engine_config = load_config(file_path, EngineConfig, project_root=project_root)
    return build_configuration(
        engine_config,
        sample_chromosome,
        fitness_function,
        bulk_fitness_function,
        name=Path(file_path).stem,
    )
