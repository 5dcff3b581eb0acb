import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from rgpairs.vertex import NodeType, Vertex, VertexTable

# ids 0..4, values [0.1, 0.5, 0.5, 0.9, 1.0], pairs (0,1) and (2,3), 4 essential DOWNFORK
EXAMPLE_IDS = [0, 1, 2, 3, 4]
EXAMPLE_VALUES = [0.1, 0.5, 0.5, 0.9, 1.0]
EXAMPLE_EDGES = [(0, 1), (1, 2), (2, 3), (3, 4), (4, 1)]
EXAMPLE_CSV = [
    "birth_value,death_value,birth_index,death_index",
    "0.1,0.5,0,1",
    "0.5,0.9,2,3",
    "1.0,INF,4,-1",
]


def make_table(rows):
    """rows: (id, value, type, partner_id) tuples; real_value == value."""
    return VertexTable.from_records(
        {"id": gid, "value": value, "type": t, "partner": partner}
        for gid, value, t, partner in rows
    )


@pytest.fixture
def example_table():
    return VertexTable([
        Vertex(0, 0.1, 0.1, NodeType.LEAF_MIN, 1),
        Vertex(1, 0.5, 0.5, NodeType.UPFORK, 0),
        Vertex(2, 0.5, 0.5, NodeType.UPFORK, 3),
        Vertex(3, 0.9, 0.9, NodeType.LEAF_MAX, 2),
        Vertex(4, 1.0, 1.0, NodeType.DOWNFORK, None),
    ])


@pytest.fixture
def two_components():
    a = make_table([
        (0, 0.0, "LEAF_MIN", 2),
        (1, 0.4, "DOWNFORK", None),
        (2, 0.6, "LEAF_MAX", 0),
    ])
    b = make_table([
        (10, 0.2, "LEAF_MIN", 11),
        (11, 0.3, "UPFORK", 10),
        (12, 0.9, "DOWNFORK", None),
        (13, 0.1, "LEAF_MIN", None),
    ])
    return [a, b]


def write_graph(path, ids, values, edges):
    data = {
        "vertices": [{"id": i, "value": v} for i, v in zip(ids, values)],
        "edges": [list(e) for e in edges],
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def example_graph_file(tmp_path):
    return write_graph(tmp_path / "example.json", EXAMPLE_IDS, EXAMPLE_VALUES, EXAMPLE_EDGES)


@pytest.fixture
def two_component_graph_file(tmp_path):
    ids = [0, 1, 2, 3, 10, 11, 12]
    values = [3.0, 1.0, 2.0, 5.0, 4.0, 0.0, 6.0]
    edges = [(0, 1), (1, 2), (2, 3), (10, 11), (11, 12)]
    return write_graph(tmp_path / "two.json", ids, values, edges)
