import pytest

from conftest import EXAMPLE_CSV, EXAMPLE_EDGES, EXAMPLE_IDS, EXAMPLE_VALUES
from pairings import ChainPairing, FailingPairing, NotATablePairing, ReversedChainPairing
from rgpairs.graph import build_graph, connected_components
from rgpairs.pairing import (
    PairingAlgorithm,
    pair_arrays,
    resolve_algorithm,
    resolve_object,
    run_pairing,
)


def _example(algorithm=ChainPairing()):
    origins, dests = zip(*EXAMPLE_EDGES)
    return pair_arrays(EXAMPLE_IDS, EXAMPLE_VALUES, origins, dests, algorithm)


def test_pair_arrays_example():
    result = _example()
    assert result.csv_lines() == EXAMPLE_CSV
    assert result.loops == 1
    assert result.algorithm == "chain"
    assert result.elapsed_ms >= 0.0


def test_pair_arrays_accessors_are_aligned():
    result = _example()
    assert result.birth_ids().tolist() == [0, 2, 4]
    assert result.death_ids().tolist() == [1, 3, -1]
    assert result.birth_real_values().tolist() == [0.1, 0.5, 1.0]
    assert result.death_real_values().tolist()[:2] == [0.5, 0.9]
    assert result.birth_values().tolist()[0] == 0.0
    assert result.death_values().tolist()[1] == pytest.approx(8.0 / 9.0)
    n = len(result.diagram)
    for accessor in (result.birth_values, result.death_values, result.birth_real_values,
                     result.death_real_values, result.birth_ids, result.death_ids):
        assert len(accessor()) == n


def test_accessors_cannot_be_edited_in_place():
    result = _example()
    ids = result.birth_ids()
    with pytest.raises(ValueError):
        ids[0] = 99
    copy = result.birth_ids().copy()
    copy[0] = 99
    assert result.birth_ids().tolist() == [0, 2, 4]
    assert result.csv_lines() == EXAMPLE_CSV


def test_mismatched_lengths_fail_before_pairing():
    with pytest.raises(ValueError, match="vertex_ids and vertex_weights must have the same length, got 5 and 4"):
        pair_arrays([0, 1, 2, 3, 4], [0.1, 0.2, 0.3, 0.4], [0], [1], FailingPairing())


def test_calls_do_not_share_state():
    first = _example()
    second = pair_arrays([7, 8], [2.0, 1.0], [7], [8], ChainPairing())
    assert first.csv_lines() == EXAMPLE_CSV
    assert second.csv_lines() == ["birth_value,death_value,birth_index,death_index", "1.0,2.0,8,7"]
    assert first.diagram is not second.diagram


def test_layout_does_not_change_the_answer():
    assert _example(ReversedChainPairing()).csv_lines() == _example().csv_lines()


def test_run_pairing_times_and_collects_tables():
    origins, dests = zip(*EXAMPLE_EDGES)
    comps = connected_components(build_graph(EXAMPLE_IDS, EXAMPLE_VALUES, origins, dests))
    run = run_pairing(comps, ChainPairing())
    assert len(run.tables) == 1
    assert run.elapsed_ms >= 0.0
    assert run.algorithm == "chain"


def test_run_pairing_verbose_prints_to_stderr(capsys):
    comps = connected_components(build_graph([0, 1], [0.0, 1.0], [0], [1]))
    run_pairing(comps, ChainPairing(), verbose=True)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "chain computation time" in captured.err


def test_run_pairing_quiet_by_default(capsys):
    comps = connected_components(build_graph([0, 1], [0.0, 1.0], [0], [1]))
    run_pairing(comps, ChainPairing())
    assert capsys.readouterr().err == ""


def test_run_pairing_rejects_wrong_return_type():
    comps = connected_components(build_graph([0, 1], [0.0, 1.0], [0], [1]))
    with pytest.raises(TypeError, match="expected VertexTable"):
        run_pairing(comps, NotATablePairing())


def test_resolve_algorithm_from_import_path():
    algo = resolve_algorithm("pairings:ChainPairing")
    assert isinstance(algo, ChainPairing)
    assert isinstance(algo, PairingAlgorithm)


def test_resolve_algorithm_passes_instances_through():
    algo = ChainPairing()
    assert resolve_algorithm(algo) is algo
    assert isinstance(resolve_algorithm(ChainPairing), ChainPairing)


@pytest.mark.parametrize("spec, message", [
    ("pairings", "expected 'module:attr'"),
    ("pairings:", "expected 'module:attr'"),
    ("no_such_module_xyz:Thing", "cannot import"),
    ("pairings:Missing", "has no attribute"),
])
def test_resolve_object_errors(spec, message):
    with pytest.raises(ValueError, match=message):
        resolve_object(spec)


def test_resolve_algorithm_requires_pair_method():
    with pytest.raises(ValueError, match="not a pairing algorithm"):
        resolve_algorithm("pairings:_order")
