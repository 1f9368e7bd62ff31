"""genevo: a generational evolution engine.

Client code supplies a sample chromosome and a fitness function; the engine
selects, mutates and recombines chromosomes generation after generation.

>>> from genevo import Configuration, Genotype
"""

__version__ = "0.1.0"

from .engine import (
    BestChromosomesSelector,
    Chromosome,
    Configuration,
    CrossoverOperator,
    DefaultFitnessEvaluator,
    DeltaFitnessEvaluator,
    Genotype,
    IntegerGene,
    MutationOperator,
    Population,
    build_configuration,
)

__all__ = [
    "__version__",
    "BestChromosomesSelector",
    "Chromosome",
    "Configuration",
    "CrossoverOperator",
    "DefaultFitnessEvaluator",
    "DeltaFitnessEvaluator",
    "Genotype",
    "IntegerGene",
    "MutationOperator",
    "Population",
    "build_configuration",
]
