"""
Cross-algorithm diagram comparison.

Two pairing algorithms run on the same input must agree on which critical
points are paired. Values are algorithm-internal, so pairs are matched only
by global id. Every discrepancy is collected; the scan never stops early.

Mismatch kinds:
  missing_pair        finite pair of A has no counterpart in B
  partner_mismatch    A's birth id is paired in B, but with a different id
  missing_essential   essential point of A is not essential in B
  unexpected_pair     finite pair of B absent from A (symmetric mode)
  unexpected_essential essential point of B not essential in A
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .diagram import Diagram, PersistencePair
from .extract import Subgraphs, extract

DiagramLike = Union[Diagram, Subgraphs]


@dataclass(frozen=True)
class Mismatch:
    kind: str
    birth_id: int
    death_id: Optional[int]
    other_death_id: Optional[int] = None

    def describe(self) -> str:
        death = "NULL" if self.death_id is None else str(self.death_id)
        msg = f"{self.kind}: {self.birth_id} | {death}"
        if self.kind == "partner_mismatch":
            other = "NULL" if self.other_death_id is None else str(self.other_death_id)
            msg += f" (other: {self.birth_id} | {other})"
        return msg


@dataclass
class Comparison:
    mismatches: List[Mismatch] = field(default_factory=list)
    checked_pairs: int = 0
    checked_essential: int = 0

    @property
    def equivalent(self) -> bool:
        return not self.mismatches

    def __bool__(self) -> bool:
        return self.equivalent

    def report(self) -> List[str]:
        return ["  error == " + m.describe() for m in self.mismatches]


def _as_diagram(d: DiagramLike) -> Diagram:
    return d if isinstance(d, Diagram) else extract(d)


def _partner_index(diagram: Diagram) -> Dict[int, Optional[int]]:
    """Map every id in the diagram to its partner id (None when essential)."""
    index: Dict[int, Optional[int]] = {}
    for p in diagram:
        index[p.birth_id] = p.death_id
        if p.death_id is not None:
            index[p.death_id] = p.birth_id
    return index


_MISSING = object()


def _check_finite(p: PersistencePair, other: Dict[int, Optional[int]], kind: str) -> Optional[Mismatch]:
    if other.get(p.birth_id, _MISSING) == p.death_id:
        return None
    if kind == "missing_pair" and p.birth_id in other:
        return Mismatch("partner_mismatch", p.birth_id, p.death_id, other[p.birth_id])
    return Mismatch(kind, p.birth_id, p.death_id)


def compare_diagrams(a: DiagramLike, b: DiagramLike, symmetric: bool = True) -> Comparison:
    """Match pairs of A against B by global id and collect every mismatch."""
    da, db = _as_diagram(a), _as_diagram(b)
    index_a, index_b = _partner_index(da), _partner_index(db)
    result = Comparison()

    for p in da:
        if p.is_essential:
            result.checked_essential += 1
            if not (p.birth_id in index_b and index_b[p.birth_id] is None):
                result.mismatches.append(Mismatch("missing_essential", p.birth_id, None))
            continue
        result.checked_pairs += 1
        m = _check_finite(p, index_b, "missing_pair")
        if m is not None:
            result.mismatches.append(m)

    for p in db:
        if p.is_essential:
            if not (p.birth_id in index_a and index_a[p.birth_id] is None):
                result.mismatches.append(Mismatch("unexpected_essential", p.birth_id, None))
            continue
        if not symmetric:
            continue
        m = _check_finite(p, index_a, "unexpected_pair")
        if m is not None:
            result.mismatches.append(m)

    return result


def equivalent(a: DiagramLike, b: DiagramLike) -> bool:
    return compare_diagrams(a, b).equivalent
