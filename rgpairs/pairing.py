"""
Pairing algorithm protocol, timed runs and the array entry point.

A pairing algorithm is any object with a `name` and a
`pair(component: networkx.Graph) -> VertexTable` method. Algorithms live
outside this package and are named by import path, e.g.
"mypkg.merge:MergePairing".
"""

from __future__ import annotations

import importlib
import sys
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

import networkx as nx

from .diagram import Diagram
from .extract import count_loops, extract
from .graph import build_graph, connected_components
from .serialize import ResultArrays, csv_lines, to_arrays
from .vertex import VertexTable


@runtime_checkable
class PairingAlgorithm(Protocol):
    name: str

    def pair(self, component: nx.Graph) -> VertexTable:
        ...


def resolve_object(spec: str) -> Any:
    """Import "package.module:attr" and return attr."""
    if not isinstance(spec, str) or ":" not in spec:
        raise ValueError(f"expected 'module:attr', got {spec!r}")
    mod_name, _, attr = spec.partition(":")
    if not mod_name or not attr:
        raise ValueError(f"expected 'module:attr', got {spec!r}")
    try:
        module = importlib.import_module(mod_name)
    except ImportError as e:
        raise ValueError(f"cannot import {mod_name!r}: {e}") from e
    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"{mod_name!r} has no attribute {attr!r}") from None
    return obj


def resolve_algorithm(spec: Any) -> PairingAlgorithm:
    """Accept an algorithm instance, a class, or a "module:attr" import path."""
    obj = resolve_object(spec) if isinstance(spec, str) else spec
    if isinstance(obj, type):
        obj = obj()
    if not callable(getattr(obj, "pair", None)):
        raise ValueError(f"{spec!r} is not a pairing algorithm (no pair() method)")
    return obj


def algorithm_name(algorithm: Any) -> str:
    return getattr(algorithm, "name", None) or type(algorithm).__name__


@dataclass
class PairingRun:
    tables: List[VertexTable]
    elapsed_ms: float
    algorithm: str


def run_pairing(components: Sequence[nx.Graph], algorithm: Any, verbose: bool = False) -> PairingRun:
    """Pair every component; only the pairing loop is timed."""
    name = algorithm_name(algorithm)
    if verbose:
        print(f"\n{name}", file=sys.stderr)
        print(f" Connected components: {len(components)}", file=sys.stderr)

    tables: List[VertexTable] = []
    start = time.perf_counter()
    for comp in components:
        table = algorithm.pair(comp)
        if not isinstance(table, VertexTable):
            raise TypeError(f"{name}.pair() returned {type(table).__name__}, expected VertexTable")
        tables.append(table)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    if verbose:
        print(f" Total Loops: {count_loops(tables)}", file=sys.stderr)
        print(f" {name} computation time: {elapsed_ms:.3f}ms", file=sys.stderr)
    return PairingRun(tables=tables, elapsed_ms=elapsed_ms, algorithm=name)


# ----------------------------
# Array entry point
# ----------------------------

@dataclass
class PairingResult:
    tables: List[VertexTable]
    diagram: Diagram
    elapsed_ms: float
    loops: int
    algorithm: str = ""
    _arrays: Optional[ResultArrays] = field(default=None, repr=False, compare=False)

    @property
    def arrays(self) -> ResultArrays:
        if self._arrays is None:
            self._arrays = to_arrays(self.diagram)
        return self._arrays

    def birth_values(self):
        return self.arrays.birth_values

    def death_values(self):
        return self.arrays.death_values

    def birth_real_values(self):
        return self.arrays.birth_real_values

    def death_real_values(self):
        return self.arrays.death_real_values

    def birth_ids(self):
        return self.arrays.birth_ids

    def death_ids(self):
        return self.arrays.death_ids

    def csv_lines(self) -> List[str]:
        return csv_lines(self.diagram)


def pair_arrays(
    vertex_ids: Sequence[int],
    vertex_weights: Sequence[float],
    edge_origins: Sequence[int],
    edge_destinations: Sequence[int],
    algorithm: Any,
    verbose: bool = False,
) -> PairingResult:
    """
    Run a pairing algorithm on a graph given as four aligned sequences.

    Raises ValueError before any pairing if the sequences are misaligned or
    reference unknown vertices.
    """
    algorithm = resolve_algorithm(algorithm)
    G = build_graph(vertex_ids, vertex_weights, edge_origins, edge_destinations)
    run = run_pairing(connected_components(G), algorithm, verbose=verbose)
    return PairingResult(
        tables=run.tables,
        diagram=extract(run.tables),
        elapsed_ms=run.elapsed_ms,
        loops=count_loops(run.tables),
        algorithm=run.algorithm,
    )
