"""Persistence pairs and the ordered diagram built from them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, Optional, Set, Tuple

INF = math.inf


@dataclass(frozen=True)
class PersistencePair:
    birth_id: int
    death_id: Optional[int]
    birth_value: float
    death_value: float
    birth_real_value: float
    death_real_value: float

    @property
    def is_essential(self) -> bool:
        return self.death_id is None

    @property
    def persistence(self) -> float:
        return self.death_value - self.birth_value

    def id_pair(self) -> FrozenSet[int]:
        if self.death_id is None:
            return frozenset((self.birth_id,))
        return frozenset((self.birth_id, self.death_id))


def pair_order_key(p: PersistencePair) -> Tuple[float, float, int]:
    """The one ordering used for diagrams: birth, then death, then birth id."""
    return (p.birth_value, p.death_value, p.birth_id)


class Diagram:
    """
    Immutable persistence diagram.

    Pairs are kept sorted by pair_order_key. Essential pairs carry an infinite
    death value, so they come after every finite pair with the same birth.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[PersistencePair] = ()):
        self._pairs: Tuple[PersistencePair, ...] = tuple(sorted(pairs, key=pair_order_key))

    @property
    def pairs(self) -> Tuple[PersistencePair, ...]:
        return self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[PersistencePair]:
        return iter(self._pairs)

    def __getitem__(self, i):
        return self._pairs[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Diagram):
            return NotImplemented
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __repr__(self) -> str:
        n_ess = sum(1 for p in self._pairs if p.is_essential)
        return f"Diagram({len(self._pairs)} pairs, {n_ess} essential)"

    def essential(self) -> Tuple[PersistencePair, ...]:
        return tuple(p for p in self._pairs if p.is_essential)

    def finite(self) -> Tuple[PersistencePair, ...]:
        return tuple(p for p in self._pairs if not p.is_essential)

    def ids(self) -> Set[FrozenSet[int]]:
        return {p.id_pair() for p in self._pairs}
