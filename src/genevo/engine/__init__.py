"""Public API of the evolution engine."""

from .chromosome import Chromosome
from .configuration import Configuration
from .crossover import CrossoverOperator
from .errors import ConfigurationMissingError, InvalidConfigurationError
from .events import GENOTYPE_EVOLVED_EVENT, EventManager, GeneticEvent
from .factory import build_configuration, build_selector, configuration_from_file
from .fitness import (
    BulkFitnessFunction,
    BulkFitnessOffsetRemover,
    CallableFitness,
    DefaultFitnessEvaluator,
    DeltaFitnessEvaluator,
    FitnessEvaluator,
    FitnessFunction,
)
from .genes import (
    BooleanGene,
    CompositeGene,
    DoubleGene,
    Gene,
    IntegerGene,
    gene_from_persistent,
)
from .genotype import Genotype
from .history import PopulationHistory
from .mutation import DefaultMutationRateCalculator, MutationOperator, MutationRateCalculator
from .operators import GeneticOperator
from .parallel import ParallelFitnessEvaluator, parallel_map
from .population import Population
from .selection import (
    BestChromosomesSelector,
    NaturalSelector,
    TournamentSelector,
    WeightedRouletteSelector,
)

__all__ = [
    "Chromosome",
    "Configuration",
    "CrossoverOperator",
    "ConfigurationMissingError",
    "InvalidConfigurationError",
    "GENOTYPE_EVOLVED_EVENT",
    "EventManager",
    "GeneticEvent",
    "build_configuration",
    "build_selector",
    "configuration_from_file",
    "BulkFitnessFunction",
    "BulkFitnessOffsetRemover",
    "CallableFitness",
    "DefaultFitnessEvaluator",
    "DeltaFitnessEvaluator",
    "FitnessEvaluator",
    "FitnessFunction",
    "BooleanGene",
    "CompositeGene",
    "DoubleGene",
    "Gene",
    "IntegerGene",
    "gene_from_persistent",
    "Genotype",
    "PopulationHistory",
    "DefaultMutationRateCalculator",
    "MutationOperator",
    "MutationRateCalculator",
    "GeneticOperator",
    "ParallelFitnessEvaluator",
    "parallel_map",
    "Population",
    "BestChromosomesSelector",
    "NaturalSelector",
    "TournamentSelector",
    "WeightedRouletteSelector",
]
