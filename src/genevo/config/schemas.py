"""Pydantic schemas for engine configuration files.

The models describe the declarative part of an evolution run: population
size, selection pipeline, operators and fitness direction. Problem specific
pieces (sample chromosome, fitness function) are supplied in code and
combined with these schemas by :func:`genevo.engine.factory.build_configuration`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from .constants import DEFAULT_CROSSOVER_RATE, DEFAULT_POPULATION_SIZE

__all__ = [
    "SelectorConfig",
    "MutationConfig",
    "CrossoverConfig",
    "EngineConfig",
]


class SelectorConfig(BaseModel):
    """One natural selector in the pipeline.

    Attributes
    ----------
    kind : {"best", "tournament", "weighted_roulette"}
        Selector implementation.
    before_operators : bool
        Run before the genetic operators instead of after them.
    original_rate : float
        Share of distinct top chromosomes for ``best`` selectors (0, 1].
    doublettes_allowed : bool
        Whether ``best`` selectors may keep value-equal chromosomes and fill
        up with duplicates.
    tournament_size : int
        Contestants per tournament for ``tournament`` selectors.
    probability : float
        Probability of the fittest contestant winning, (0, 1].
    """

    kind: Literal["best", "tournament", "weighted_roulette"] = "best"
    before_operators: bool = False
    original_rate: float = Field(default=1.0, gt=0, le=1)
    doublettes_allowed: bool = False
    tournament_size: int = Field(default=3, ge=1)
    probability: float = Field(default=1.0, gt=0, le=1)


class MutationConfig(BaseModel):
    """Mutation operator settings.

    ``rate`` is the inverse per-gene probability (``1/rate``); ``0`` disables
    mutation and ``None`` selects the dynamic default calculator.
    """

    rate: int | None = Field(default=None, ge=0)


class CrossoverConfig(BaseModel):
    """Crossover operator settings; ``rate`` 0 disables crossover."""

    rate: int = Field(default=DEFAULT_CROSSOVER_RATE, ge=0)


class EngineConfig(BaseModel):
    """Declarative configuration of an evolution run."""

    population_size: int = Field(
        default=DEFAULT_POPULATION_SIZE, gt=0, description="Target population size"
    )
    minimum_pop_size_percent: int = Field(
        default=0, ge=0, le=100, description="Backfill floor as percent of size"
    )
    fitness_evaluator: Literal["default", "delta"] = Field(
        default="default", description="'default' maximises, 'delta' minimises"
    )
    random_seed: int | None = Field(default=None, description="Seed for the engine RNG")
    preserve_fittest: bool = False
    selectors: list[SelectorConfig] = Field(
        default_factory=lambda: [SelectorConfig()],
        description="Natural selectors in execution order",
    )
    mutation: MutationConfig | None = Field(default_factory=MutationConfig)
    crossover: CrossoverConfig | None = None

    @model_validator(mode="after")
    def validate_pipeline(self) -> "EngineConfig":
        """Require at least one selector and one operator."""
        if not self.selectors:
            raise ValueError("at least one natural selector is required")
        if self.mutation is None and self.crossover is None:
            raise ValueError("at least one genetic operator is required")
        return self
