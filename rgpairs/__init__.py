"""Persistence diagram extraction, canonicalization and cross-algorithm validation for paired graphs."""

__version__ = "1.0.0"

from .compare import Comparison, Mismatch, compare_diagrams, equivalent
from .diagram import Diagram, PersistencePair
from .extract import count_loops, extract, flatten
from .pairing import PairingAlgorithm, PairingResult, pair_arrays
from .serialize import ResultArrays, csv_lines, to_arrays, to_csv
from .vertex import NodeType, Vertex, VertexTable

__all__ = [
    "__version__",
    "Comparison",
    "Diagram",
    "Mismatch",
    "NodeType",
    "PairingAlgorithm",
    "PairingResult",
    "PersistencePair",
    "ResultArrays",
    "Vertex",
    "VertexTable",
    "compare_diagrams",
    "count_loops",
    "csv_lines",
    "equivalent",
    "extract",
    "flatten",
    "pair_arrays",
    "to_arrays",
    "to_csv",
]
