"""Bounded history of past populations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import numpy as np
import pandas as pd

from .population import Population

if TYPE_CHECKING:  # pragma: no cover
    from .events import GeneticEvent

__all__ = ["PopulationHistory"]


class PopulationHistory:
    """Most recent populations, newest first.

    ``max_size`` of ``0`` keeps an unbounded history. The history stores
    references; callers wanting frozen snapshots add copies.
    """

    def __init__(self, max_size: int = 0) -> None:
        if max_size < 0:
            raise ValueError("max_size must be >= 0")
        self._max_size = int(max_size)
        self._populations: list[Population] = []

    @property
    def max_size(self) -> int:
        return self._max_size

    def add(self, population: Population) -> None:
        if population is None:
            raise ValueError("population must not be None")
        self._populations.insert(0, population)
        self._truncate()

    def get(self, index: int) -> Population | None:
        """Population ``index`` generations back, ``None`` when out of range."""
        if 0 <= index < len(self._populations):
            return self._populations[index]
        return None

    def clear(self) -> None:
        self._populations.clear()

    def set_populations(self, populations: Iterable[Population]) -> None:
        self._populations = list(populations)
        self._truncate()

    @property
    def populations(self) -> list[Population]:
        return list(self._populations)

    def size(self) -> int:
        return len(self._populations)

    def __len__(self) -> int:
        return len(self._populations)

    def _truncate(self) -> None:
        if self._max_size and len(self._populations) > self._max_size:
            del self._populations[self._max_size:]

    def record(self, event: "GeneticEvent") -> None:
        """Event listener storing a snapshot of the evolved genotype's population."""
        genotype = event.source
        population = genotype.population
        self.add(Population(population.configuration, population.chromosomes))

    def to_frame(self) -> pd.DataFrame:
        """Fitness statistics per stored population, oldest first."""

        rows = []
        for age, population in enumerate(self._populations):
            values = np.asarray([c.fitness_value for c in population], dtype=float)
            fittest = population.fittest()
            rows.append(
                {
                    "age": age,
                    "size": int(values.size),
                    "best": np.nan if fittest is None else fittest.fitness_value,
                    "mean": float(values.mean()) if values.size else np.nan,
                    "min": float(values.min()) if values.size else np.nan,
                    "max": float(values.max()) if values.size else np.nan,
                }
            )
        frame = pd.DataFrame(rows, columns=["age", "size", "best", "mean", "min", "max"])
        return frame.iloc[::-1].reset_index(drop=True)
