from genevo.config.constants import (
    DEFAULT_CROSSOVER_RATE,
    DEFAULT_POPULATION_SIZE,
    GENOTYPE_EVOLVED_EVENT,
    MAX_MINIMUM_POP_SIZE_PERCENT,
    MUTATION_STRENGTH_RANGE,
    NO_FITNESS_VALUE,
)
from genevo.config.schemas import CrossoverConfig, EngineConfig


def test_schema_defaults_follow_constants():
    assert EngineConfig().population_size == DEFAULT_POPULATION_SIZE
    assert CrossoverConfig().rate == DEFAULT_CROSSOVER_RATE


def test_core_constants_are_reasonable():
    low, high = MUTATION_STRENGTH_RANGE
    assert low < 0 < high
    assert NO_FITNESS_VALUE < 0
    assert MAX_MINIMUM_POP_SIZE_PERCENT == 100
    assert GENOTYPE_EVOLVED_EVENT
