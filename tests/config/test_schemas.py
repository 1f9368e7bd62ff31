"""Tests for the engine configuration schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from genevo.config.schemas import (
    CrossoverConfig,
    EngineConfig,
    MutationConfig,
    SelectorConfig,
)


def test_engine_defaults():
    config = EngineConfig()

    assert config.population_size == 100
    assert config.minimum_pop_size_percent == 0
    assert config.fitness_evaluator == "default"
    assert config.random_seed is None
    assert config.preserve_fittest is False
    assert [s.kind for s in config.selectors] == ["best"]
    assert config.mutation == MutationConfig()
    assert config.crossover is None


@pytest.mark.parametrize(
    "field, value",
    [
        ("population_size", 0),
        ("minimum_pop_size_percent", -1),
        ("minimum_pop_size_percent", 101),
        ("fitness_evaluator", "inverse"),
    ],
)
def test_engine_rejects_invalid_values(field, value):
    with pytest.raises(ValidationError):
        EngineConfig(**{field: value})


def test_engine_requires_a_selector():
    with pytest.raises(ValidationError, match="natural selector"):
        EngineConfig(selectors=[])


def test_engine_requires_an_operator():
    with pytest.raises(ValidationError, match="genetic operator"):
        EngineConfig(mutation=None, crossover=None)


def test_crossover_alone_is_a_valid_pipeline():
    config = EngineConfig(mutation=None, crossover=CrossoverConfig())
    assert config.crossover.rate == 6


def test_selector_defaults():
    selector = SelectorConfig()
    assert selector.kind == "best"
    assert selector.before_operators is False
    assert selector.original_rate == 1.0
    assert selector.doublettes_allowed is False
    assert selector.tournament_size == 3
    assert selector.probability == 1.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "random"},
        {"original_rate": 0.0},
        {"original_rate": 1.5},
        {"tournament_size": 0},
        {"probability": 0.0},
    ],
)
def test_selector_rejects_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        SelectorConfig(**kwargs)


def test_operator_rates_must_be_non_negative():
    assert MutationConfig(rate=0).rate == 0
    assert CrossoverConfig(rate=0).rate == 0
    with pytest.raises(ValidationError):
        MutationConfig(rate=-1)
    with pytest.raises(ValidationError):
        CrossoverConfig(rate=-2)


def test_engine_from_mapping():
    config = EngineConfig.model_validate(
        {
            "population_size": 50,
            "fitness_evaluator": "delta",
            "selectors": [
                {"kind": "best", "before_operators": True},
                {"kind": "tournament", "tournament_size": 5, "probability": 0.8},
            ],
            "crossover": {"rate": 3},
        }
    )

    assert config.fitness_evaluator == "delta"
    assert config.selectors[0].before_operators is True
    assert config.selectors[1].probability == 0.8
    assert config.crossover.rate == 3
