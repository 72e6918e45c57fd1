"""
Tests for Petrie polygons and the Petrie dual
=============================================

Run: python -m pytest tests/core/test_petrie.py -v
"""

from collections import Counter

import pytest

from polytope_math.spec import PetrieUndefinedError
from polytope_math.builders import (
    canonical_cycle,
    petrie_dual,
    petrie_polygons,
    point,
    polygon,
    hypercube,
    tetrahedron,
    cube,
    octahedron,
    hemicube,
    compound,
)
from polytope_math.analysis import is_isomorphic, schlafli_type


# =============================================================================
# P1: canonical_cycle
# =============================================================================

def test_canonical_cycle_rotation_invariant():
    """P1.1: Rotations of the same cycle share a key, orientation +1."""
    rotations = [[0, 1, 2, 3], [1, 2, 3, 0], [2, 3, 0, 1], [3, 0, 1, 2]]
    keys = {canonical_cycle(r) for r in rotations}
    assert keys == {((0, 1, 2, 3), 1)}


def test_canonical_cycle_reversal():
    """P1.2: Reversed cycle -> same key, orientation -1."""
    assert canonical_cycle([3, 1, 4, 2]) == ((1, 3, 2, 4), -1)
    assert canonical_cycle([0, 3, 2, 1]) == ((0, 1, 2, 3), -1)


def test_canonical_cycle_short():
    assert canonical_cycle([5]) == ((5,), 1)
    assert canonical_cycle([]) == ((), 1)


# =============================================================================
# P2: Petrie polygons
# =============================================================================

def test_tetrahedron_petrie_polygons():
    """P2.1: Three skew quadrilaterals, each edge in exactly two."""
    t = tetrahedron()
    polygons = petrie_polygons(t)
    assert len(polygons) == 3

    edge_use = Counter()
    for vertices, edges in polygons:
        assert len(vertices) == len(edges) == 4
        edge_use.update(edges)
        for k, e in enumerate(edges):
            ends = {vertices[k], vertices[(k + 1) % len(vertices)]}
            assert t.subelements(1, e) == frozenset(ends)
    assert set(edge_use.values()) == {2}
    assert len(edge_use) == 6


def test_cube_petrie_polygons_are_hexagons():
    polygons = petrie_polygons(cube())
    assert len(polygons) == 4
    assert all(len(edges) == 6 for _, edges in polygons)


def test_petrie_polygons_in_canonical_orientation():
    for _, edges in petrie_polygons(octahedron()):
        assert canonical_cycle(list(edges))[1] == 1


# =============================================================================
# P3: Petrie dual
# =============================================================================

def test_petrial_of_tetrahedron_is_hemicube():
    """P3.1: Petrial of {3,3} is {4,3}_3: counts [1,4,6,3,1], non-orientable."""
    p = petrie_dual(tetrahedron())
    assert p.element_count_per_rank() == [1, 4, 6, 3, 1]
    assert p.is_valid()
    assert not p.is_orientable()
    assert is_isomorphic(p, hemicube())


def test_petrial_keeps_vertices_and_edges():
    """P3.2: Vertex-edge incidence is unchanged."""
    c = cube()
    p = petrie_dual(c)
    assert p.element_count_per_rank() == [1, 8, 12, 4, 1]
    for e in range(12):
        assert p.subelements(1, e) == c.subelements(1, e)
    assert schlafli_type(p) == [6, 3]


@pytest.mark.parametrize("builder", [tetrahedron, cube, octahedron])
def test_petrie_dual_is_an_involution(builder):
    """P3.3: petrie_dual(petrie_dual(P)) ~ P."""
    p = builder()
    assert is_isomorphic(petrie_dual(petrie_dual(p)), p)


def test_petrial_of_hemicube_is_tetrahedron():
    assert is_isomorphic(petrie_dual(hemicube()), tetrahedron())


def test_petrial_of_compound_is_compound_of_petrials():
    """P3.5: Each component gets its own Petrie polygons."""
    p = petrie_dual(compound(tetrahedron(), cube()))
    assert p.is_compound
    assert p.is_valid()
    assert p.element_count_per_rank() == [1, 12, 18, 7, 1]
    assert is_isomorphic(p, compound(hemicube(), petrie_dual(cube())))


@pytest.mark.parametrize("builder", [point, lambda: polygon(5), lambda: hypercube(4)])
def test_petrie_dual_needs_rank_three(builder):
    """P3.4: Other ranks raise PetrieUndefinedError."""
    with pytest.raises(PetrieUndefinedError, match="rank 3"):
        petrie_dual(builder())
