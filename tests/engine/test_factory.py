from __future__ import annotations

from pathlib import Path

import pytest

from genevo.config.loader import ConfigError
from genevo.config.schemas import (
    CrossoverConfig,
    EngineConfig,
    MutationConfig,
    SelectorConfig,
)
from genevo.config.settings import reset_settings_cache
from genevo.engine import (
    BestChromosomesSelector,
    BulkFitnessOffsetRemover,
    Chromosome,
    CrossoverOperator,
    DefaultMutationRateCalculator,
    DeltaFitnessEvaluator,
    Genotype,
    IntegerGene,
    MutationOperator,
    TournamentSelector,
    WeightedRouletteSelector,
    build_configuration,
    build_selector,
    configuration_from_file,
)


def _sample() -> Chromosome:
    return Chromosome(IntegerGene(0, 9), 4)


def _ones(chromosome: Chromosome) -> float:
    return float(sum(gene.allele for gene in chromosome.genes))


def test_defaults_build_a_runnable_configuration() -> None:
    config = build_configuration(EngineConfig(population_size=8, random_seed=3), _sample(), _ones)

    assert config.population_size == 8
    assert not config.is_locked
    [selector] = config.natural_selectors(False)
    assert isinstance(selector, BestChromosomesSelector)
    [operator] = config.genetic_operators
    assert isinstance(operator, MutationOperator)
    assert isinstance(operator.mutation_rate_calculator, DefaultMutationRateCalculator)

    genotype = Genotype.random_initial_genotype(config)
    genotype.evolve(2)
    assert genotype.generation == 2


def test_operators_are_added_crossover_first() -> None:
    engine_config = EngineConfig(
        population_size=6,
        random_seed=1,
        crossover=CrossoverConfig(rate=2),
        mutation=MutationConfig(rate=5),
    )
    config = build_configuration(engine_config, _sample(), _ones)

    crossover, mutation = config.genetic_operators
    assert isinstance(crossover, CrossoverOperator) and crossover.crossover_rate == 2
    assert isinstance(mutation, MutationOperator) and mutation.mutation_rate == 5


def test_selectors_follow_declared_order_and_phase() -> None:
    engine_config = EngineConfig(
        population_size=6,
        random_seed=1,
        selectors=[
            SelectorConfig(kind="tournament", before_operators=True, tournament_size=2),
            SelectorConfig(kind="best", original_rate=0.5, doublettes_allowed=True),
            SelectorConfig(kind="weighted_roulette"),
        ],
    )
    config = build_configuration(engine_config, _sample(), _ones)

    [pre] = config.natural_selectors(True)
    assert isinstance(pre, TournamentSelector) and pre.tournament_size == 2
    best, roulette = config.natural_selectors(False)
    assert best.original_rate == 0.5 and best.doublettes_allowed
    assert isinstance(roulette, WeightedRouletteSelector)


def test_scalar_settings_are_applied() -> None:
    engine_config = EngineConfig(
        population_size=5,
        random_seed=1,
        minimum_pop_size_percent=40,
        preserve_fittest=True,
        fitness_evaluator="delta",
    )
    config = build_configuration(engine_config, _sample(), _ones, name="run")

    assert config.minimum_pop_size_percent == 40
    assert config.preserve_fittest
    assert isinstance(config.fitness_evaluator, DeltaFitnessEvaluator)
    assert config.name == "run"
    assert config.sample_chromosome.configuration is config


def test_exactly_one_fitness_kind_is_required() -> None:
    bulk = BulkFitnessOffsetRemover(_ones)
    with pytest.raises(ValueError):
        build_configuration(EngineConfig(), _sample())
    with pytest.raises(ValueError):
        build_configuration(EngineConfig(), _sample(), _ones, bulk)

    config = build_configuration(EngineConfig(random_seed=0), _sample(), bulk_fitness_function=bulk)
    assert config.bulk_fitness_function is bulk
    assert config.fitness_function is None


def test_seed_makes_runs_reproducible() -> None:
    def alleles_after_run() -> list[int]:
        config = build_configuration(EngineConfig(population_size=10, random_seed=21), _sample(), _ones)
        genotype = Genotype.random_initial_genotype(config)
        genotype.evolve(3)
        return [c.gene(0).allele for c in genotype.chromosomes]

    assert alleles_after_run() == alleles_after_run()


def test_missing_seed_falls_back_to_settings(monkeypatch) -> None:
    monkeypatch.setenv("GENEVO_RANDOM_SEED", "1234")
    reset_settings_cache()

    first = build_configuration(EngineConfig(), _sample(), _ones)
    second = build_configuration(EngineConfig(random_seed=1234), _sample(), _ones)

    assert first.random_generator.integers(10**6) == second.random_generator.integers(10**6)


def test_build_selector_handles_every_kind(configuration) -> None:
    assert isinstance(build_selector(configuration, SelectorConfig()), BestChromosomesSelector)
    assert isinstance(
        build_selector(configuration, SelectorConfig(kind="tournament")), TournamentSelector
    )
    assert isinstance(
        build_selector(configuration, SelectorConfig(kind="weighted_roulette")),
        WeightedRouletteSelector,
    )


def test_configuration_from_file(tmp_path: Path) -> None:
    config_file = tmp_path / "onemax.yaml"
    config_file.write_text(
        "population_size: 12\n"
        "random_seed: 5\n"
        "crossover:\n"
        "  rate: 4\n"
        "selectors:\n"
        "  - kind: best\n"
        "    original_rate: 0.8\n",
        encoding="utf-8",
    )

    config = configuration_from_file(config_file, _sample(), _ones)

    assert config.name == "onemax"
    assert config.population_size == 12
    assert len(config.genetic_operators) == 2


def test_configuration_from_file_rejects_invalid_model(tmp_path: Path) -> None:
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("population_size: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="validation failed"):
        configuration_from_file(config_file, _sample(), _ones)
