"""
Decorated critical points produced by a pairing algorithm.

A VertexTable holds the critical points of one connected component. Partners
are stored as indices into the same table, so a pair never forms an object
cycle and partner lookup is a list access.

Record shape accepted by VertexTable.from_records / produced by to_records:
  {"id": 4, "value": 1.0, "real_value": 12.5, "type": "DOWNFORK", "partner": None}
where "partner" is the partner's global id (not its index).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence


class NodeType(Enum):
    LEAF_MIN = "LEAF_MIN"
    LEAF_MAX = "LEAF_MAX"
    UPFORK = "UPFORK"
    DOWNFORK = "DOWNFORK"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: Any) -> "NodeType":
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return cls.UNKNOWN
        try:
            return cls[str(raw).strip().upper()]
        except KeyError:
            raise ValueError(f"unknown node type: {raw!r}") from None


@dataclass(frozen=True)
class Vertex:
    global_id: int
    value: float
    real_value: float
    type: NodeType = NodeType.UNKNOWN
    partner: Optional[int] = None

    @property
    def is_essential(self) -> bool:
        return self.partner is None

    def order_key(self):
        """Key deciding which side of a pair is the birth."""
        return (self.value, self.global_id)


class VertexTable(Sequence[Vertex]):
    """Immutable, validated table of the vertices of one subgraph."""

    __slots__ = ("_vertices", "_index")

    def __init__(self, vertices: Iterable[Vertex]):
        self._vertices = tuple(vertices)
        self._index: Dict[int, int] = {}
        for i, v in enumerate(self._vertices):
            if v.global_id in self._index:
                raise ValueError(f"duplicate global id {v.global_id} at indices {self._index[v.global_id]} and {i}")
            if not (math.isfinite(v.value) and math.isfinite(v.real_value)):
                raise ValueError(
                    f"vertex {v.global_id}: value and real_value must be finite, got {v.value} and {v.real_value}"
                )
            self._index[v.global_id] = i
        self._check_partners()

    def _check_partners(self) -> None:
        n = len(self._vertices)
        for i, v in enumerate(self._vertices):
            p = v.partner
            if p is None:
                continue
            if not 0 <= p < n:
                raise ValueError(f"vertex {v.global_id}: partner index {p} out of range (table size {n})")
            if p == i:
                raise ValueError(f"vertex {v.global_id} is paired with itself")
            back = self._vertices[p].partner
            if back != i:
                raise ValueError(
                    f"asymmetric pairing: {v.global_id} -> {self._vertices[p].global_id}, "
                    f"but {self._vertices[p].global_id} -> "
                    f"{'None' if back is None else self._vertices[back].global_id}"
                )

    # Sequence protocol

    def __getitem__(self, i):
        return self._vertices[i]

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VertexTable):
            return NotImplemented
        return self._vertices == other._vertices

    def __hash__(self) -> int:
        return hash(self._vertices)

    def __repr__(self) -> str:
        return f"VertexTable({len(self)} vertices)"

    # Lookups

    def index_of(self, global_id: int) -> int:
        try:
            return self._index[global_id]
        except KeyError:
            raise KeyError(f"global id {global_id} not in table") from None

    def by_id(self, global_id: int) -> Vertex:
        return self._vertices[self.index_of(global_id)]

    def partner_of(self, i: int) -> Optional[Vertex]:
        p = self._vertices[i].partner
        return None if p is None else self._vertices[p]

    def global_ids(self) -> List[int]:
        return [v.global_id for v in self._vertices]

    # Record conversion

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "VertexTable":
        """Build a table from dict records whose "partner" is a global id."""
        rows = list(records)
        ids: Dict[int, int] = {}
        for i, r in enumerate(rows):
            if "id" not in r or "value" not in r:
                raise ValueError(f"vertex record {i} missing 'id' or 'value': {r}")
            gid = int(r["id"])
            if gid in ids:
                raise ValueError(f"duplicate global id {gid} in records")
            ids[gid] = i

        vertices: List[Vertex] = []
        for r in rows:
            partner = r.get("partner")
            if partner is not None:
                if int(partner) not in ids:
                    raise ValueError(f"vertex {r['id']}: partner {partner} not in records")
                partner = ids[int(partner)]
            value = float(r["value"])
            real = r.get("real_value")
            vertices.append(Vertex(
                global_id=int(r["id"]),
                value=value,
                real_value=value if real is None else float(real),
                type=NodeType.parse(r.get("type")),
                partner=partner,
            ))
        return cls(vertices)

    def to_records(self) -> List[Dict[str, Any]]:
        out = []
        for v in self._vertices:
            out.append({
                "id": v.global_id,
                "value": v.value,
                "real_value": v.real_value,
                "type": str(v.type),
                "partner": None if v.partner is None else self._vertices[v.partner].global_id,
            })
        return out
