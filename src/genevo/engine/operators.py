"""Base class of genetic operators run during each evolution cycle."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .chromosome import Chromosome
    from .configuration import Configuration
    from .population import Population

__all__ = ["GeneticOperator"]


class GeneticOperator(ABC):
    """Produces new candidate chromosomes from the live population.

    Operators only append to ``candidate_chromosomes``; they must neither
    remove chromosomes from the population nor modify its members in place.
    """

    def __init__(self, configuration: "Configuration") -> None:
        if configuration is None:
            raise ValueError("configuration must not be None")
        self._configuration = configuration

    @property
    def configuration(self) -> "Configuration":
        return self._configuration

    @abstractmethod
    def operate(
        self,
        population: "Population",
        candidate_chromosomes: list["Chromosome"],
    ) -> None:
        ...
