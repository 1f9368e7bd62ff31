"""Reference gene encodings.

A gene is either atomic (one allele made of ``size()`` mutable elements) or
composite (an ordered container of sub-genes). The engine only relies on the
small capability set defined by :class:`Gene`: allele access, per-element
mutation, random initialisation, cloning, equality and the ``is_composite``
discriminator.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator

import numpy as np

from ..config.constants import PERSISTENT_DELIMITER

__all__ = [
    "Gene",
    "IntegerGene",
    "DoubleGene",
    "BooleanGene",
    "CompositeGene",
    "gene_from_persistent",
]

_NULL = "null"
_GENE_TYPES: dict[str, type["Gene"]] = {}


class Gene(ABC):
    """Unit of heritable information owned by a single chromosome."""

    is_composite = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _GENE_TYPES[cls.__name__] = cls

    def __init__(self) -> None:
        self._allele: Any = None

    @property
    def allele(self) -> Any:
        return self._allele

    @allele.setter
    def allele(self, value: Any) -> None:
        self._allele = None if value is None else self._validate_allele(value)

    def size(self) -> int:
        """Number of atomic elements that can be mutated independently."""
        return 1

    def cleanup(self) -> None:
        """Release resources held by the allele. No-op for plain values."""

    def clone(self) -> "Gene":
        copy = self.new_gene()
        copy._allele = self._allele
        return copy

    @abstractmethod
    def new_gene(self) -> "Gene":
        """Return a gene with the same setup and no allele."""

    @abstractmethod
    def apply_mutation(self, index: int, percentage: float) -> None:
        """Mutate element ``index`` by ``percentage`` in ``[-1, 1)``."""

    @abstractmethod
    def set_to_random_value(self, rng: np.random.Generator) -> None:
        ...

    @abstractmethod
    def _validate_allele(self, value: Any) -> Any:
        ...

    @abstractmethod
    def to_persistent(self) -> str:
        ...

    @abstractmethod
    def load_persistent(self, representation: str) -> None:
        ...

    def compare_to(self, other: "Gene") -> int:
        if type(self) is not type(other):
            return -1 if type(self).__name__ < type(other).__name__ else 1
        if self._allele is None:
            return 0 if other._allele is None else -1
        if other._allele is None:
            return 1
        if self._allele == other._allele:
            return 0
        return -1 if self._allele < other._allele else 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gene):
            return NotImplemented
        return type(self) is type(other) and self._allele == other._allele

    def __lt__(self, other: "Gene") -> bool:
        return self.compare_to(other) < 0

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._allele!r})"


def _split_persistent(representation: str, expected: int) -> list[str]:
    parts = representation.split(PERSISTENT_DELIMITER)
    if len(parts) != expected:
        raise ValueError(f"malformed gene representation: {representation!r}")
    return parts


class IntegerGene(Gene):
    """Integer allele bounded by ``[lower, upper]``."""

    def __init__(self, lower: int = -(2**31), upper: int = 2**31 - 1) -> None:
        super().__init__()
        if lower > upper:
            raise ValueError(f"invalid bounds [{lower}, {upper}]")
        self.lower = int(lower)
        self.upper = int(upper)

    def new_gene(self) -> "IntegerGene":
        return IntegerGene(self.lower, self.upper)

    def _validate_allele(self, value: Any) -> int:
        number = int(value)
        if not self.lower <= number <= self.upper:
            raise ValueError(f"allele {number} outside [{self.lower}, {self.upper}]")
        return number

    def apply_mutation(self, index: int, percentage: float) -> None:
        current = self.lower if self._allele is None else self._allele
        shifted = round(current + percentage * (self.upper - self.lower))
        self._allele = int(np.clip(shifted, self.lower, self.upper))

    def set_to_random_value(self, rng: np.random.Generator) -> None:
        self._allele = int(rng.integers(self.lower, self.upper, endpoint=True))

    def to_persistent(self) -> str:
        value = _NULL if self._allele is None else str(self._allele)
        return PERSISTENT_DELIMITER.join([value, str(self.lower), str(self.upper)])

    def load_persistent(self, representation: str) -> None:
        value, lower, upper = _split_persistent(representation, 3)
        self.lower, self.upper = int(lower), int(upper)
        self.allele = None if value == _NULL else int(value)


class DoubleGene(Gene):
    """Floating point allele bounded by ``[lower, upper]``."""

    def __init__(self, lower: float = -float(2**31), upper: float = float(2**31 - 1)) -> None:
        super().__init__()
        if lower > upper:
            raise ValueError(f"invalid bounds [{lower}, {upper}]")
        self.lower = float(lower)
        self.upper = float(upper)

    def new_gene(self) -> "DoubleGene":
        return DoubleGene(self.lower, self.upper)

    def _validate_allele(self, value: Any) -> float:
        number = float(value)
        if not self.lower <= number <= self.upper:
            raise ValueError(f"allele {number} outside [{self.lower}, {self.upper}]")
        return number

    def apply_mutation(self, index: int, percentage: float) -> None:
        current = self.lower if self._allele is None else self._allele
        shifted = current + percentage * (self.upper - self.lower)
        self._allele = float(np.clip(shifted, self.lower, self.upper))

    def set_to_random_value(self, rng: np.random.Generator) -> None:
        self._allele = float(rng.uniform(self.lower, self.upper))

    def to_persistent(self) -> str:
        value = _NULL if self._allele is None else repr(self._allele)
        return PERSISTENT_DELIMITER.join([value, repr(self.lower), repr(self.upper)])

    def load_persistent(self, representation: str) -> None:
        value, lower, upper = _split_persistent(representation, 3)
        self.lower, self.upper = float(lower), float(upper)
        self.allele = None if value == _NULL else float(value)


class BooleanGene(Gene):
    """Boolean allele; positive mutations set it, negative ones clear it."""

    def new_gene(self) -> "BooleanGene":
        return BooleanGene()

    def _validate_allele(self, value: Any) -> bool:
        return bool(value)

    def apply_mutation(self, index: int, percentage: float) -> None:
        if percentage > 0:
            self._allele = True
        elif percentage < 0:
            self._allele = False

    def set_to_random_value(self, rng: np.random.Generator) -> None:
        self._allele = bool(rng.integers(2))

    def to_persistent(self) -> str:
        return _NULL if self._allele is None else str(self._allele).lower()

    def load_persistent(self, representation: str) -> None:
        if representation == _NULL:
            self._allele = None
        elif representation in {"true", "false"}:
            self._allele = representation == "true"
        else:
            raise ValueError(f"malformed gene representation: {representation!r}")


class CompositeGene(Gene):
    """Ordered container of sub-genes treated as one gene slot."""

    is_composite = True

    def __init__(self, genes: Iterable[Gene] = ()) -> None:
        super().__init__()
        self._genes: list[Gene] = []
        for gene in genes:
            self.add_gene(gene)

    def add_gene(self, gene: Gene) -> None:
        if gene is None:
            raise ValueError("sub-gene must not be None")
        self._genes.append(gene)

    def gene_at(self, index: int) -> Gene:
        return self._genes[index]

    @property
    def genes(self) -> tuple[Gene, ...]:
        return tuple(self._genes)

    def __iter__(self) -> Iterator[Gene]:
        return iter(self._genes)

    def size(self) -> int:
        return len(self._genes)

    @property
    def allele(self) -> list[Any]:
        return [gene.allele for gene in self._genes]

    @allele.setter
    def allele(self, values: Iterable[Any]) -> None:
        values = list(values)
        if len(values) != len(self._genes):
            raise ValueError("allele length must match the number of sub-genes")
        for gene, value in zip(self._genes, values):
            gene.allele = value

    def _validate_allele(self, value: Any) -> Any:  # pragma: no cover - setter overridden
        return value

    def new_gene(self) -> "CompositeGene":
        return CompositeGene(gene.new_gene() for gene in self._genes)

    def clone(self) -> "CompositeGene":
        return CompositeGene(gene.clone() for gene in self._genes)

    def cleanup(self) -> None:
        for gene in self._genes:
            gene.cleanup()

    def apply_mutation(self, index: int, percentage: float) -> None:
        self._genes[index].apply_mutation(0, percentage)

    def set_to_random_value(self, rng: np.random.Generator) -> None:
        for gene in self._genes:
            gene.set_to_random_value(rng)

    def to_persistent(self) -> str:
        return json.dumps([[type(gene).__name__, gene.to_persistent()] for gene in self._genes])

    def load_persistent(self, representation: str) -> None:
        try:
            entries = json.loads(representation)
        except json.JSONDecodeError as exc:
            raise ValueError(f"malformed gene representation: {representation!r}") from exc
        self._genes = [gene_from_persistent(name, payload) for name, payload in entries]

    def compare_to(self, other: Gene) -> int:
        if not isinstance(other, CompositeGene):
            return super().compare_to(other)
        for mine, theirs in zip(self._genes, other._genes):
            result = mine.compare_to(theirs)
            if result:
                return result
        return (len(self._genes) > len(other._genes)) - (len(self._genes) < len(other._genes))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gene):
            return NotImplemented
        return isinstance(other, CompositeGene) and self._genes == other._genes

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CompositeGene({self._genes!r})"


def gene_from_persistent(type_name: str, representation: str) -> Gene:
    """Rebuild a gene from its class name and :meth:`Gene.to_persistent` output."""

    try:
        gene_type = _GENE_TYPES[type_name]
    except KeyError:
        raise ValueError(f"unknown gene type '{type_name}'") from None
    gene = gene_type()
    gene.load_persistent(representation)
    return gene
