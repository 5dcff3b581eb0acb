"""
Graph input assembly for pairing algorithms.

Pairing algorithms receive one connected component at a time as a
networkx.Graph whose nodes are global vertex ids with attributes:
  real_value  the scalar given by the caller
  value       real_value min-max normalized into [0, 1]

Two ways in:
  build_graph()      four aligned sequences (ids, weights, edge origins, edge destinations)
  load_graph_json()  {"vertices": [{"id": 0, "value": 1.5}, ...], "edges": [[0, 1], ...]}
"""

from __future__ import annotations

import json
import math
from typing import Any, List, Sequence

import networkx as nx


def _check_lengths(name_a: str, a: Sequence[Any], name_b: str, b: Sequence[Any]) -> None:
    if len(a) != len(b):
        raise ValueError(
            f"{name_a} and {name_b} must have the same length, got {len(a)} and {len(b)}"
        )


def build_graph(
    vertex_ids: Sequence[int],
    vertex_weights: Sequence[float],
    edge_origins: Sequence[int],
    edge_destinations: Sequence[int],
) -> nx.Graph:
    """Validate the aligned input sequences and build the scalar-field graph."""
    _check_lengths("vertex_ids", vertex_ids, "vertex_weights", vertex_weights)
    _check_lengths("edge_origins", edge_origins, "edge_destinations", edge_destinations)

    G = nx.Graph()
    weights: List[float] = []
    for vid, w in zip(vertex_ids, vertex_weights):
        vid = int(vid)
        w = float(w)
        if vid in G:
            raise ValueError(f"duplicate vertex id {vid}")
        if not math.isfinite(w):
            raise ValueError(f"vertex {vid}: weight must be finite, got {w}")
        G.add_node(vid, real_value=w)
        weights.append(w)

    for k, (u, v) in enumerate(zip(edge_origins, edge_destinations)):
        u, v = int(u), int(v)
        for end in (u, v):
            if end not in G:
                raise ValueError(f"edge {k} ({u}, {v}) references unknown vertex {end}")
        G.add_edge(u, v)

    lo = min(weights) if weights else 0.0
    span = (max(weights) - lo) if weights else 0.0
    for n, data in G.nodes(data=True):
        data["value"] = (data["real_value"] - lo) / span if span > 0 else 0.0
    return G


def connected_components(G: nx.Graph) -> List[nx.Graph]:
    """Component subgraphs ordered by their smallest vertex id."""
    comps = [sorted(c) for c in nx.connected_components(G)]
    comps.sort(key=lambda c: c[0])
    return [G.subgraph(c).copy() for c in comps]


# ----------------------------
# JSON -> Graph parsing
# ----------------------------

def _vertex_record(v: Any, idx: int):
    if isinstance(v, dict):
        vid = v.get("id", v.get("index", idx))
        for k in ("value", "weight", "w"):
            if k in v:
                return vid, v[k]
        raise ValueError(f"vertex {vid} has no 'value'")
    if isinstance(v, (list, tuple)) and len(v) >= 2:
        return v[0], v[1]
    if isinstance(v, (int, float)):
        return idx, v
    raise ValueError(f"unsupported vertex record: {v}")


def load_graph_json(path: str) -> nx.Graph:
    """
    Accepts a few common shapes:
      - {"vertices": [{"id": 0, "value": 1.5}, ...], "edges": [[u, v], ...]}
      - {"vertices": [[0, 1.5], ...], "edges": [{"source": u, "target": v}, ...]}
      - {"vertices": [1.5, 0.2, ...], ...}   (ids are list positions)
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    vertices = data.get("vertices", data.get("V"))
    if not isinstance(vertices, list):
        raise ValueError(f"{path}: 'vertices' must be a list")
    edges = data.get("edges", data.get("E", []))
    if not isinstance(edges, list):
        raise ValueError(f"{path}: 'edges' must be a list")

    ids, weights = [], []
    for i, v in enumerate(vertices):
        vid, w = _vertex_record(v, i)
        ids.append(vid)
        weights.append(w)

    origins, dests = [], []
    for e in edges:
        if isinstance(e, (list, tuple)) and len(e) >= 2:
            origins.append(e[0])
            dests.append(e[1])
        elif isinstance(e, dict):
            u = e.get("source", e.get("u"))
            v = e.get("target", e.get("v"))
            if u is None or v is None:
                raise ValueError(f"{path}: edge dict missing endpoints: {e}")
            origins.append(u)
            dests.append(v)
        else:
            raise ValueError(f"{path}: unsupported edge record: {e}")

    return build_graph(ids, weights, origins, dests)
