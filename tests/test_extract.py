import math
from collections import Counter

import pytest

from conftest import make_table
from rgpairs.extract import count_loops, extract, flatten, vertex_count


def test_example_diagram(example_table):
    d = extract([example_table])
    assert [(p.birth_id, p.death_id) for p in d] == [(0, 1), (2, 3), (4, None)]
    assert [p.birth_value for p in d] == [0.1, 0.5, 1.0]
    assert d[2].death_value == math.inf
    assert count_loops([example_table]) == 1


def test_single_table_accepted(example_table):
    assert extract(example_table) == extract([example_table])


def test_no_double_emission(two_components):
    d = extract(two_components)
    counts = Counter(p.id_pair() for p in d)
    assert all(c == 1 for c in counts.values())


def test_row_count_law(two_components):
    d = extract(two_components)
    verts = [v for _, _, v in flatten(two_components)]
    n_pairs = sum(1 for v in verts if v.partner is not None) // 2
    n_essential = sum(1 for v in verts if v.partner is None)
    assert len(d) == n_pairs + n_essential


def test_essential_classification(two_components):
    d = extract(two_components)
    essential_ids = {v.global_id for _, _, v in flatten(two_components) if v.is_essential}
    for p in d:
        assert p.is_essential == (p.birth_id in essential_ids)
        assert (p.death_value == math.inf) == p.is_essential


def test_ordering_law(two_components):
    d = extract(two_components)
    keys = [(p.birth_value, p.death_value) for p in d]
    assert keys == sorted(keys)
    assert [p.birth_id for p in d] == [0, 13, 10, 1, 12]


def test_birth_not_after_death(two_components):
    for p in extract(two_components):
        assert p.birth_value <= p.death_value


def test_extraction_is_idempotent(two_components):
    first = extract(two_components)
    second = extract(two_components)
    assert first == second
    assert first.pairs == second.pairs


def test_extraction_does_not_mutate(two_components):
    before = [t.to_records() for t in two_components]
    extract(two_components)
    count_loops(two_components)
    assert [t.to_records() for t in two_components] == before


@pytest.mark.parametrize("types", [("UPFORK", "LEAF_MAX"), ("LEAF_MAX", "UPFORK")])
def test_exact_tie_emits_once_with_lower_id_as_birth(types):
    table = make_table([
        (6, 0.5, types[0], 5),
        (5, 0.5, types[1], 6),
    ])
    d = extract(table)
    assert len(d) == 1
    assert (d[0].birth_id, d[0].death_id) == (5, 6)


def test_exact_tie_independent_of_table_layout():
    a = make_table([(8, 0.5, None, 2), (2, 0.5, None, 8)])
    b = make_table([(2, 0.5, None, 8), (8, 0.5, None, 2)])
    assert extract(a) == extract(b)
    assert (extract(a)[0].birth_id, extract(a)[0].death_id) == (2, 8)


def test_equal_births_ordered_by_death_then_id():
    table = make_table([
        (0, 0.2, None, 1), (1, 0.9, None, 0),
        (2, 0.2, None, 3), (3, 0.4, None, 2),
        (4, 0.2, None, None),
        (5, 0.2, None, 6), (6, 0.4, None, 5),
    ])
    d = extract(table)
    assert [p.birth_id for p in d] == [2, 5, 0, 4]


def test_duplicate_id_across_subgraphs():
    a = make_table([(1, 0.0, None, None)])
    b = make_table([(1, 0.5, None, None)])
    with pytest.raises(ValueError, match="global id 1 appears in subgraphs 0 and 1"):
        extract([a, b])


def test_rejects_non_table():
    with pytest.raises(TypeError, match="expected VertexTable"):
        extract([[1, 2, 3]])


def test_count_loops_only_essential_downforks(two_components):
    # 1 and 12 are essential DOWNFORKs; 13 is essential but LEAF_MIN
    assert count_loops(two_components) == 2
    assert count_loops(two_components) == count_loops(two_components)


def test_count_loops_ignores_paired_downforks():
    table = make_table([
        (0, 0.1, "DOWNFORK", 1),
        (1, 0.2, "DOWNFORK", 0),
    ])
    assert count_loops(table) == 0


def test_empty_input():
    assert len(extract([])) == 0
    assert count_loops([]) == 0
    assert vertex_count([]) == 0


def test_vertex_count(two_components):
    assert vertex_count(two_components) == 7
