"""
Serialization of diagrams and decorated subgraphs.

CSV table (stable format):
  birth_value,death_value,birth_index,death_index
  0.1,0.5,0,1
  1.0,INF,4,-1

Rows follow the diagram order; nothing here re-sorts. Values are the real
(original-domain) values; essential rows carry INF and -1.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, List, TextIO

import numpy as np

from .diagram import Diagram, PersistencePair
from .extract import Subgraphs, as_tables
from .vertex import VertexTable

CSV_HEADER = "birth_value,death_value,birth_index,death_index"
INF_MARKER = "INF"
NO_INDEX = -1


def format_value(x: float) -> str:
    if math.isinf(x):
        return INF_MARKER
    return repr(float(x))


def csv_row(p: PersistencePair) -> str:
    if p.is_essential:
        return f"{format_value(p.birth_real_value)},{INF_MARKER},{p.birth_id},{NO_INDEX}"
    return f"{format_value(p.birth_real_value)},{format_value(p.death_real_value)},{p.birth_id},{p.death_id}"


def csv_lines(diagram: Diagram) -> List[str]:
    return [CSV_HEADER] + [csv_row(p) for p in diagram]


def to_csv(diagram: Diagram) -> str:
    return "\n".join(csv_lines(diagram)) + "\n"


def write_csv(diagram: Diagram, stream: TextIO) -> None:
    stream.write(to_csv(diagram))


def write_pairs(diagram: Diagram, path: str) -> None:
    """Plain "birth death" file, one pair per line."""
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for p in diagram:
            death = "inf" if p.is_essential else repr(float(p.death_real_value))
            f.write(f"{p.birth_real_value!r} {death}\n")


# ----------------------------
# Parallel arrays
# ----------------------------

@dataclass(frozen=True)
class ResultArrays:
    """Index-aligned arrays for callers that want primitives, not objects."""
    birth_values: np.ndarray
    death_values: np.ndarray
    birth_real_values: np.ndarray
    death_real_values: np.ndarray
    birth_ids: np.ndarray
    death_ids: np.ndarray
    essential: np.ndarray

    def __len__(self) -> int:
        return int(self.birth_ids.shape[0])

    def as_dict(self) -> Dict[str, List[Any]]:
        return {
            "birth_values": self.birth_values.tolist(),
            "death_values": self.death_values.tolist(),
            "birth_real_values": self.birth_real_values.tolist(),
            "death_real_values": self.death_real_values.tolist(),
            "birth_ids": self.birth_ids.tolist(),
            "death_ids": self.death_ids.tolist(),
            "essential": self.essential.tolist(),
        }


def _frozen(values, dtype) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.flags.writeable = False
    return arr


def to_arrays(diagram: Diagram) -> ResultArrays:
    """Read-only arrays; callers that need to edit take a copy."""
    pairs = diagram.pairs
    return ResultArrays(
        birth_values=_frozen([p.birth_value for p in pairs], np.float64),
        death_values=_frozen([p.death_value for p in pairs], np.float64),
        birth_real_values=_frozen([p.birth_real_value for p in pairs], np.float64),
        death_real_values=_frozen([p.death_real_value for p in pairs], np.float64),
        birth_ids=_frozen([p.birth_id for p in pairs], np.int64),
        death_ids=_frozen([NO_INDEX if p.death_id is None else p.death_id for p in pairs], np.int64),
        essential=_frozen([p.is_essential for p in pairs], bool),
    )


# ----------------------------
# Decorated subgraphs <-> JSON
# ----------------------------

def tables_to_json(subgraphs: Subgraphs) -> Dict[str, Any]:
    return {"components": [t.to_records() for t in as_tables(subgraphs)]}


def tables_from_json(data: Any) -> List[VertexTable]:
    """
    Accepts {"components": [[record, ...], ...]} or a bare list of components.
    A flat list of records is read as a single component.
    """
    comps = data.get("components") if isinstance(data, dict) else data
    if not isinstance(comps, list):
        raise ValueError("expected a list of components")
    if comps and all(isinstance(r, dict) for r in comps):
        comps = [comps]
    tables = []
    for ci, comp in enumerate(comps):
        if not isinstance(comp, list):
            raise ValueError(f"component {ci} must be a list of vertex records")
        tables.append(VertexTable.from_records(comp))
    return tables


def save_tables(path: str, subgraphs: Subgraphs) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(tables_to_json(subgraphs), f, indent=2)


def load_tables(path: str) -> List[VertexTable]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return tables_from_json(data)
