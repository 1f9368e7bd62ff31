"""Constants shared across the engine.

Centralises the fitness sentinel, default sizes and event names so that the
same literals are not repeated across modules.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "DEFAULT_CROSSOVER_RATE",
    "DEFAULT_POPULATION_SIZE",
    "GENOTYPE_EVOLVED_EVENT",
    "LOG_FILE_NAME",
    "MAX_MINIMUM_POP_SIZE_PERCENT",
    "MUTATION_STRENGTH_RANGE",
    "NO_FITNESS_VALUE",
    "PERSISTENT_DELIMITER",
]


NO_FITNESS_VALUE: Final[float] = -1.0
"""Value reported by a chromosome whose fitness cannot be computed yet."""

DEFAULT_POPULATION_SIZE: Final[int] = 100
DEFAULT_CROSSOVER_RATE: Final[int] = 6
"""One crossover per this many population members and cycle."""

MAX_MINIMUM_POP_SIZE_PERCENT: Final[int] = 100

MUTATION_STRENGTH_RANGE: Final[tuple[float, float]] = (-1.0, 1.0)
"""Half-open interval from which per-element mutation strengths are drawn."""

GENOTYPE_EVOLVED_EVENT: Final[str] = "genotype_evolved"

PERSISTENT_DELIMITER: Final[str] = ":"
"""Separator between the fields of a persisted atomic gene (allele, lower, upper)."""

LOG_FILE_NAME: Final[str] = "genevo.log"
