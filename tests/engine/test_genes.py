from __future__ import annotations

import numpy as np
import pytest

from genevo.engine.genes import (
    BooleanGene,
    CompositeGene,
    DoubleGene,
    IntegerGene,
    gene_from_persistent,
)


def test_integer_gene_rejects_out_of_bounds_allele() -> None:
    gene = IntegerGene(0, 10)
    gene.allele = 10
    assert gene.allele == 10
    with pytest.raises(ValueError):
        gene.allele = 11
    with pytest.raises(ValueError):
        IntegerGene(5, 1)


def test_integer_gene_mutation_is_clipped_to_bounds() -> None:
    gene = IntegerGene(0, 10)
    gene.allele = 5
    gene.apply_mutation(0, 0.99)
    assert gene.allele == 10
    gene.apply_mutation(0, -1.0)
    assert gene.allele == 0
    gene.apply_mutation(0, 0.2)
    assert gene.allele == 2


def test_random_values_stay_within_bounds() -> None:
    rng = np.random.default_rng(0)
    integer = IntegerGene(-3, 3)
    double = DoubleGene(0.0, 1.0)
    for _ in range(50):
        integer.set_to_random_value(rng)
        double.set_to_random_value(rng)
        assert -3 <= integer.allele <= 3
        assert 0.0 <= double.allele <= 1.0


def test_double_gene_mutation_scales_with_range() -> None:
    gene = DoubleGene(0.0, 2.0)
    gene.allele = 1.0
    gene.apply_mutation(0, 0.25)
    assert gene.allele == pytest.approx(1.5)


def test_boolean_gene_mutation_follows_sign() -> None:
    gene = BooleanGene()
    gene.allele = False
    gene.apply_mutation(0, 0.3)
    assert gene.allele is True
    gene.apply_mutation(0, -0.3)
    assert gene.allele is False
    gene.apply_mutation(0, 0.0)
    assert gene.allele is False


def test_clone_is_independent_copy() -> None:
    gene = IntegerGene(0, 10)
    gene.allele = 4
    copy = gene.clone()
    assert copy == gene
    assert copy is not gene
    copy.allele = 7
    assert gene.allele == 4


def test_equality_requires_same_type() -> None:
    integer = IntegerGene(0, 10)
    integer.allele = 1
    double = DoubleGene(0.0, 10.0)
    double.allele = 1.0
    assert integer != double


def test_ordering_by_allele() -> None:
    low, high = IntegerGene(0, 10), IntegerGene(0, 10)
    low.allele, high.allele = 2, 8
    assert low < high
    assert low.compare_to(high) == -1
    assert high.compare_to(low) == 1
    assert sorted([high, low]) == [low, high]


def test_composite_gene_exposes_sub_genes() -> None:
    first, second = IntegerGene(0, 10), DoubleGene(0.0, 1.0)
    first.allele, second.allele = 3, 0.5
    composite = CompositeGene([first, second])

    assert composite.is_composite
    assert composite.size() == 2
    assert composite.gene_at(1) is second
    assert list(composite) == [first, second]
    assert composite.allele == [3, 0.5]

    composite.allele = [4, 0.25]
    assert first.allele == 4
    with pytest.raises(ValueError):
        composite.allele = [1]
    with pytest.raises(ValueError):
        composite.add_gene(None)


def test_composite_clone_is_deep() -> None:
    inner = IntegerGene(0, 10)
    inner.allele = 1
    composite = CompositeGene([inner])
    copy = composite.clone()
    assert copy == composite
    assert copy.gene_at(0) is not inner


def test_persistent_representation_rebuilds_equal_genes() -> None:
    integer = IntegerGene(0, 10)
    integer.allele = 7
    boolean = BooleanGene()
    boolean.allele = True
    composite = CompositeGene([integer, boolean])

    restored = gene_from_persistent("CompositeGene", composite.to_persistent())
    assert restored == composite
    assert integer.to_persistent() == "7:0:10"
    unset = gene_from_persistent("IntegerGene", IntegerGene(0, 5).to_persistent())
    assert unset.allele is None
    assert (unset.lower, unset.upper) == (0, 5)


def test_persistent_representation_errors() -> None:
    with pytest.raises(ValueError, match="unknown gene type"):
        gene_from_persistent("NoSuchGene", "1")
    with pytest.raises(ValueError, match="malformed"):
        IntegerGene().load_persistent("1:2")
    with pytest.raises(ValueError, match="malformed"):
        BooleanGene().load_persistent("maybe")
