"""
Batch processing and cross-algorithm validation.

Every input yields an InputOutcome; a failing input never stops the batch and
leaves nothing behind but its error message. Nothing is kept between calls.
"""

from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import networkx as nx

from .compare import Comparison, compare_diagrams
from .diagram import Diagram
from .extract import count_loops, extract, vertex_count
from .graph import connected_components, load_graph_json
from .pairing import algorithm_name, resolve_algorithm, run_pairing
from .vertex import VertexTable

Loader = Callable[[str], nx.Graph]


@dataclass
class InputOutcome:
    path: str
    ok: bool
    algorithm: str = ""
    diagram: Optional[Diagram] = None
    tables: List[VertexTable] = field(default_factory=list)
    loops: Optional[int] = None
    load_ms: Optional[float] = None
    pair_ms: Optional[float] = None
    error: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "input": os.path.basename(self.path),
            "ok": self.ok,
            "algorithm": self.algorithm,
        }
        if self.ok:
            out.update({
                "n_components": len(self.tables),
                "n_vertices": vertex_count(self.tables),
                "n_pairs": len(self.diagram),
                "n_essential": len(self.diagram.essential()),
                "loops": self.loops,
                "load_ms": self.load_ms,
                "pair_ms": self.pair_ms,
            })
        else:
            out["error"] = self.error
        return out


def _load_timed(path: str, loader: Loader) -> Tuple[nx.Graph, float]:
    start = time.perf_counter()
    G = loader(path)
    return G, (time.perf_counter() - start) * 1000.0


def process_input(
    path: str,
    algorithm: Any,
    loader: Loader = load_graph_json,
    verbose: bool = False,
) -> InputOutcome:
    """Load, pair and extract one input. Errors are captured, not raised."""
    algorithm = resolve_algorithm(algorithm)
    name = algorithm_name(algorithm)
    try:
        G, load_ms = _load_timed(path, loader)
        if verbose:
            print(f" Load time: {load_ms:.3f}ms", file=sys.stderr)
        run = run_pairing(connected_components(G), algorithm, verbose=verbose)
        diagram = extract(run.tables)
        loops = count_loops(run.tables)
    except Exception as e:
        return InputOutcome(path=path, ok=False, algorithm=name, error=f"{type(e).__name__}: {e}")

    return InputOutcome(
        path=path,
        ok=True,
        algorithm=name,
        diagram=diagram,
        tables=run.tables,
        loops=loops,
        load_ms=load_ms,
        pair_ms=run.elapsed_ms,
    )


def iter_batch(
    paths: Sequence[str],
    algorithm: Any,
    loader: Loader = load_graph_json,
    verbose: bool = False,
) -> Iterator[Tuple[str, InputOutcome]]:
    """Yield (path, outcome) as each input finishes."""
    algorithm = resolve_algorithm(algorithm)
    for path in paths:
        if verbose:
            print(f"Processing {os.path.basename(path)}...", file=sys.stderr)
        yield path, process_input(path, algorithm, loader=loader, verbose=verbose)


def run_batch(
    paths: Sequence[str],
    algorithm: Any,
    loader: Loader = load_graph_json,
    verbose: bool = False,
) -> List[Tuple[str, InputOutcome]]:
    return list(iter_batch(paths, algorithm, loader=loader, verbose=verbose))


def any_failed(results: Sequence[Tuple[str, InputOutcome]]) -> bool:
    return any(not outcome.ok for _, outcome in results)


# ----------------------------
# Cross-algorithm validation
# ----------------------------

@dataclass
class ValidationReport:
    path: str
    algorithm_a: str
    algorithm_b: str
    initial_vertices: int = 0
    conditioned_vertices: int = 0
    n_components: int = 0
    loops_a: Optional[int] = None
    loops_b: Optional[int] = None
    load_ms: Optional[float] = None
    pair_ms_a: Optional[float] = None
    pair_ms_b: Optional[float] = None
    comparison: Optional[Comparison] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.comparison is not None
            and self.comparison.equivalent
            and self.loops_a == self.loops_b
        )

    def summary(self) -> str:
        name = os.path.basename(self.path)
        if self.error is not None:
            return f"[FAIL] {name}: {self.error}"
        status = "OK" if self.ok else "MISMATCH"
        return (
            f"[{status}] {name}: V={self.initial_vertices} conditioned={self.conditioned_vertices} "
            f"cc={self.n_components} loops={self.loops_a}/{self.loops_b} "
            f"{self.algorithm_a}={self.pair_ms_a:.3f}ms {self.algorithm_b}={self.pair_ms_b:.3f}ms"
        )

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "input": os.path.basename(self.path),
            "ok": self.ok,
            "algorithm_a": self.algorithm_a,
            "algorithm_b": self.algorithm_b,
        }
        if self.error is not None:
            out["error"] = self.error
            return out
        out.update({
            "initial_vertices": self.initial_vertices,
            "conditioned_vertices": self.conditioned_vertices,
            "n_components": self.n_components,
            "loops_a": self.loops_a,
            "loops_b": self.loops_b,
            "load_ms": self.load_ms,
            "pair_ms_a": self.pair_ms_a,
            "pair_ms_b": self.pair_ms_b,
            "mismatches": [m.describe() for m in self.comparison.mismatches],
        })
        return out


def cross_validate(
    path: str,
    algorithm_a: Any,
    algorithm_b: Any,
    loader: Loader = load_graph_json,
    verbose: bool = False,
) -> ValidationReport:
    """
    Run two algorithms on the same input and check they pair identically.

    Each algorithm gets its own freshly loaded graph so neither can see the
    other's decorations.
    """
    algorithm_a = resolve_algorithm(algorithm_a)
    algorithm_b = resolve_algorithm(algorithm_b)
    report = ValidationReport(
        path=path,
        algorithm_a=algorithm_name(algorithm_a),
        algorithm_b=algorithm_name(algorithm_b),
    )
    try:
        G, report.load_ms = _load_timed(path, loader)
        report.initial_vertices = G.number_of_nodes()
        components = connected_components(G)
        report.n_components = len(components)
        run_a = run_pairing(components, algorithm_a, verbose=verbose)

        G_b, _ = _load_timed(path, loader)
        run_b = run_pairing(connected_components(G_b), algorithm_b, verbose=verbose)
        diagram_a, diagram_b = extract(run_a.tables), extract(run_b.tables)
    except Exception as e:
        report.error = f"{type(e).__name__}: {e}"
        return report

    report.conditioned_vertices = vertex_count(run_a.tables)
    report.loops_a = count_loops(run_a.tables)
    report.loops_b = count_loops(run_b.tables)
    report.pair_ms_a = run_a.elapsed_ms
    report.pair_ms_b = run_b.elapsed_ms

    if verbose:
        print("\nCOMPARING GRAPHS", file=sys.stderr)
    report.comparison = compare_diagrams(diagram_a, diagram_b)
    if verbose:
        for line in report.comparison.report():
            print(line, file=sys.stderr)
        if not report.comparison.equivalent:
            print("ERROR: Difference Found in pairings", file=sys.stderr)
    return report
