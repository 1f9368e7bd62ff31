from __future__ import annotations

from typing import Callable

import pytest

from genevo.config.settings import reset_settings_cache
from genevo.engine import (
    Chromosome,
    Configuration,
    IntegerGene,
)


def allele_sum(chromosome: Chromosome) -> float:
    return float(sum(gene.allele for gene in chromosome.genes))


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def configuration() -> Configuration:
    """Unlocked configuration: 10 chromosomes of one IntegerGene in [0, 100]."""

    config = Configuration(population_size=10, seed=7, name="test")
    config.sample_chromosome = Chromosome([IntegerGene(0, 100)])
    config.fitness_function = allele_sum
    return config


@pytest.fixture
def make_chromosome(configuration: Configuration) -> Callable[..., Chromosome]:
    """Build chromosomes of IntegerGenes in [0, 100] holding the given alleles."""

    def factory(*values: int, config: Configuration | None = None) -> Chromosome:
        genes = []
        for value in values:
            gene = IntegerGene(0, 100)
            gene.allele = value
            genes.append(gene)
        return Chromosome(genes, configuration=config or configuration)

    return factory
