from __future__ import annotations

import pandas as pd
import pytest

from genevo.engine import (
    Chromosome,
    CompositeGene,
    Configuration,
    DeltaFitnessEvaluator,
    IntegerGene,
    Population,
)


def _alleles(chromosomes) -> list[int]:
    return [c.gene(0).allele for c in chromosomes]


def test_requires_configuration() -> None:
    with pytest.raises(ValueError):
        Population(None)


def test_add_ignores_none_and_marks_changed(configuration, make_chromosome) -> None:
    population = Population(configuration)
    population.add(None)
    assert population.size() == 0

    population.add(make_chromosome(1))
    population.sort_by_fitness()
    assert population.is_sorted and not population.is_changed

    population.add(make_chromosome(2))
    assert population.is_changed and not population.is_sorted
    assert len(population) == 2


def test_add_all_skips_empty_sources(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(1)])
    population.sort_by_fitness()
    population.add_all(None)
    population.add_all(Population(configuration))
    assert population.is_sorted

    population.add_all(Population(configuration, [make_chromosome(2), make_chromosome(3)]))
    assert population.size() == 3
    assert not population.is_sorted


def test_fittest_n_sorts_fitter_first(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(v) for v in (3, 9, 1, 7)])

    top = population.fittest_n(2)

    assert _alleles(top) == [9, 7]
    assert _alleles(population) == [9, 7, 3, 1]
    assert population.is_sorted
    assert not population.is_changed
    assert population.fittest() is population[0]


def test_fittest_n_clamps_and_handles_empty(configuration, make_chromosome) -> None:
    assert Population(configuration).fittest_n(3) == []
    population = Population(configuration, [make_chromosome(4), make_chromosome(2)])
    assert population.fittest_n(0) == []
    assert population.fittest_n(-1) == []
    assert _alleles(population.fittest_n(10)) == [4, 2]


def test_fittest_on_empty_population_is_none(configuration) -> None:
    assert Population(configuration).fittest() is None


def test_fittest_scans_with_evaluator(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(v) for v in (5, 8, 2)])
    assert population.fittest().gene(0).allele == 8
    assert not population.is_changed
    assert not population.is_sorted


def test_sorted_cache_is_kept_until_structural_change(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(v) for v in (3, 9, 1)])
    population.sort_by_fitness()
    best = population[0]

    configuration.fitness_evaluator = DeltaFitnessEvaluator()

    assert population.fittest() is best
    assert population.fittest_n(1) == [best]

    population.add(make_chromosome(5))
    assert population.fittest().gene(0).allele == 1
    assert _alleles(population.fittest_n(4)) == [1, 3, 5, 9]


def test_sort_is_stable_for_equal_fitness(configuration, make_chromosome) -> None:
    first, second, third = make_chromosome(5), make_chromosome(5), make_chromosome(8)
    population = Population(configuration, [first, second, third])
    population.sort_by_fitness()
    assert population[0] is third
    assert population[1] is first
    assert population[2] is second


def test_structural_changes_clear_sorted_flag(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(v) for v in (1, 2, 3)])
    operations = [
        lambda: population.add(make_chromosome(4)),
        lambda: population.remove(0),
        lambda: population.replace(0, make_chromosome(6)),
        lambda: population.set_chromosomes(population.chromosomes),
    ]
    for operation in operations:
        population.sort_by_fitness()
        assert population.is_sorted
        operation()
        assert not population.is_sorted
        assert population.is_changed


def test_replace_and_remove_bounds(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(1)])

    population.replace(1, make_chromosome(2))
    assert _alleles(population) == [1, 2]

    population.replace(0, make_chromosome(3))
    assert _alleles(population) == [3, 2]

    with pytest.raises(IndexError):
        population.replace(5, make_chromosome(4))

    removed = population.remove(1)
    assert removed.gene(0).allele == 2
    with pytest.raises(ValueError):
        population.remove(1)
    with pytest.raises(ValueError):
        population.remove(-1)


def test_flatten_genes_resolves_composites(configuration) -> None:
    leaves = [IntegerGene(0, 9) for _ in range(3)]
    for value, gene in enumerate(leaves):
        gene.allele = value
    composite = CompositeGene([leaves[1], CompositeGene([leaves[2]])])
    chromosome = Chromosome([leaves[0], composite], configuration=configuration)
    population = Population(configuration, [chromosome])

    assert population.flatten_genes(False) == [leaves[0], composite]
    flat = population.flatten_genes(True)
    assert len(flat) == 3
    assert all(a is b for a, b in zip(flat, leaves))


def test_compare_to_checks_size_then_membership(configuration, make_chromosome) -> None:
    c1, c2 = make_chromosome(1), make_chromosome(2)
    a = Population(configuration, [c1])
    b = Population(configuration, [c1, c2])

    assert a.compare_to(b) == -1
    assert b.compare_to(a) == 1
    assert a.compare_to(None) == 1
    assert Population(configuration, [c2]).compare_to(a) == 1
    assert Population(configuration, [make_chromosome(1)]) == a


def test_compare_to_is_not_symmetric_with_duplicates(configuration, make_chromosome) -> None:
    c1, c2 = make_chromosome(1), make_chromosome(2)
    duplicated = Population(configuration, [c1, c1])
    distinct = Population(configuration, [c1, c2])

    assert duplicated.compare_to(distinct) == 0
    assert distinct.compare_to(duplicated) == 1


def test_contains_uses_value_equality(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(4)])
    assert population.contains(make_chromosome(4))
    assert make_chromosome(5) not in population


def test_to_frame_lists_fitness_and_alleles(configuration, make_chromosome) -> None:
    population = Population(configuration, [make_chromosome(1, 2), make_chromosome(3, 4)])
    frame = population.to_frame()
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ["fitness", "gene_0", "gene_1"]
    assert frame["fitness"].tolist() == [3.0, 7.0]
    assert frame["gene_1"].tolist() == [2, 4]


def test_population_holds_references(configuration: Configuration, make_chromosome) -> None:
    chromosome = make_chromosome(1)
    population = Population(configuration, [chromosome])
    assert population[0] is chromosome
    assert population.to_chromosomes()[0] is chromosome
