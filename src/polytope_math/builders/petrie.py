"""
Petrie Polygons and the Petrie Dual
===================================

PETRIE POLYGON (rank 3):
    A closed edge path where every two consecutive edges share a face but
    no three do. Traced on flags by the walk

        Phi -> Phi^0 -> Phi^01 -> Phi^012   (one step)

    Each step changes vertex, then edge, then face; the edges visited form
    the polygon.

PETRIE DUAL (Petrial):
    Same vertices and edges, faces replaced by the Petrie polygons.
    Involution: petrie_dual(petrie_dual(P)) ~ P.

    Example: Petrial of the tetrahedron = hemicube {4,3}_3
             (3 skew quadrilaterals, non-orientable).

UNDEFINED WHEN:
    - rank != 3
    - a Petrie polygon revisits a vertex or an edge
    - the resulting structure fails the axioms
"""

from typing import List, Set, Tuple

from ..spec.constants import PETRIE_RANK
from ..spec.errors import AxiomViolation, PetrieUndefinedError
from ..spec.structures import Polytope


def canonical_cycle(cycle: List[int]) -> Tuple[Tuple[int, ...], int]:
    """
    Canonical representation of a cyclic sequence and its orientation.

    The canonical form starts at the minimum entry and runs in the
    direction whose second entry is smaller.

    Returns:
        (canonical_tuple, orientation): orientation is +1 if the input runs
        in the canonical direction, -1 if reversed.

    Example:
        canonical_cycle([3, 1, 4, 2]) -> ((1, 3, 2, 4), -1)
    """
    if len(cycle) < 2:
        return tuple(cycle), +1

    min_idx = cycle.index(min(cycle))
    rotated = cycle[min_idx:] + cycle[:min_idx]
    reversed_rot = [rotated[0]] + rotated[1:][::-1]

    if tuple(rotated) <= tuple(reversed_rot):
        return tuple(rotated), +1
    return tuple(reversed_rot), -1


def petrie_polygons(polytope: Polytope) -> List[Tuple[List[int], List[int]]]:
    """
    Trace every Petrie polygon of a rank-3 polytope.

    Returns:
        list of (vertex_cycle, edge_cycle), edge_cycle[k] joining
        vertex_cycle[k] and vertex_cycle[k + 1]. Each polygon once, in the
        order first met by the flag iteration, in canonical orientation.

    Raises:
        PetrieUndefinedError: rank != 3, or a polygon revisits a vertex/edge
    """
    if polytope.rank != PETRIE_RANK:
        raise PetrieUndefinedError(
            f"Petrie polygons are defined for rank {PETRIE_RANK}, got rank {polytope.rank}")

    engine = polytope.flag_engine
    visited: Set[tuple] = set()
    seen_keys: Set[Tuple[int, ...]] = set()
    polygons = []

    for start in engine.iter_flags():
        if start in visited:
            continue

        flag = start
        vertices, edges = [], []
        while True:
            visited.add(flag)
            vertices.append(flag[1])
            edges.append(flag[2])
            flag = engine.walk(flag, (0, 1, 2))
            if flag == start:
                break

        # An orbit that closes only after two laps traces the polygon twice
        half = len(edges) // 2
        if len(edges) % 2 == 0 and edges[:half] == edges[half:] and vertices[:half] == vertices[half:]:
            vertices, edges = vertices[:half], edges[:half]

        if len(set(edges)) != len(edges) or len(set(vertices)) != len(vertices):
            raise PetrieUndefinedError(
                f"Petrie polygon through flag {start} revisits a vertex or an edge: "
                f"vertices {vertices}, edges {edges}")

        key, orientation = canonical_cycle(edges)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        if orientation < 0:
            # reverse, keeping edges[k] between vertices[k] and vertices[k + 1]
            vertices = [vertices[0]] + vertices[1:][::-1]
            edges = edges[::-1]
        polygons.append((vertices, edges))

    return polygons


def petrie_dual(polytope: Polytope) -> Polytope:
    """
    Replace the 2-faces of a polyhedron by its Petrie polygons.

    Vertices and the vertex-edge incidence are kept unchanged; face k of
    the result is the k-th polygon of petrie_polygons(). Petrie polygons
    stay inside one component, so the Petrial of a compound is the
    compound of the Petrials.

    Raises:
        PetrieUndefinedError: see module docstring
    """
    polygons = petrie_polygons(polytope)

    ranks = [
        [[]],
        [[0] for _ in range(polytope.element_count(0))],
        [list(e.subelements) for e in polytope.elements(1)],
        [edges for _, edges in polygons],
        [range(len(polygons))],
    ]
    result = Polytope.assemble(ranks, is_compound=polytope.is_compound)
    try:
        result.validate(strict=True)
    except AxiomViolation as exc:
        raise PetrieUndefinedError(f"Petrie polygons do not form a polytope: {exc}") from exc
    return result
