"""
Result extraction from paired subgraphs.

extract()      flattens any number of VertexTables into one Diagram,
               emitting every unordered pair exactly once.
count_loops()  counts essential DOWNFORK vertices (independent cycles).

Which vertex of a pair is the birth is decided by (value, global_id), so two
partners with the same value still produce a single record, born at the
lower global id.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple, Union

from .diagram import INF, Diagram, PersistencePair
from .vertex import NodeType, Vertex, VertexTable

Subgraphs = Union[VertexTable, Iterable[VertexTable]]


def as_tables(subgraphs: Subgraphs) -> List[VertexTable]:
    if isinstance(subgraphs, VertexTable):
        return [subgraphs]
    tables = list(subgraphs)
    for t in tables:
        if not isinstance(t, VertexTable):
            raise TypeError(f"expected VertexTable, got {type(t).__name__}")
    return tables


def flatten(subgraphs: Subgraphs) -> Iterator[Tuple[VertexTable, int, Vertex]]:
    """Yield (table, index, vertex) for every vertex of every subgraph."""
    seen = {}
    for ti, table in enumerate(as_tables(subgraphs)):
        for i, v in enumerate(table):
            if v.global_id in seen:
                raise ValueError(
                    f"global id {v.global_id} appears in subgraphs {seen[v.global_id]} and {ti}"
                )
            seen[v.global_id] = ti
            yield table, i, v


def is_canonical(v: Vertex, partner: Vertex) -> bool:
    """True when v is the birth side of its pair."""
    return v.order_key() < partner.order_key()


def extract(subgraphs: Subgraphs) -> Diagram:
    pairs: List[PersistencePair] = []
    for table, i, v in flatten(subgraphs):
        p = table.partner_of(i)
        if p is None:
            pairs.append(PersistencePair(
                birth_id=v.global_id,
                death_id=None,
                birth_value=v.value,
                death_value=INF,
                birth_real_value=v.real_value,
                death_real_value=INF,
            ))
            continue
        if not is_canonical(v, p):
            continue
        pairs.append(PersistencePair(
            birth_id=v.global_id,
            death_id=p.global_id,
            birth_value=v.value,
            death_value=p.value,
            birth_real_value=v.real_value,
            death_real_value=p.real_value,
        ))
    return Diagram(pairs)


def count_loops(subgraphs: Subgraphs) -> int:
    return sum(
        1 for _, _, v in flatten(subgraphs)
        if v.is_essential and v.type is NodeType.DOWNFORK
    )


def vertex_count(subgraphs: Subgraphs) -> int:
    return sum(len(t) for t in as_tables(subgraphs))
