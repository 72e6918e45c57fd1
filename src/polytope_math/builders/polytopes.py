"""
Named Abstract Polytopes
========================

Small building blocks and the regular families, built by the
constructors or from explicit incidence lists.

POLYTOPES INCLUDED:
    - nullitope     rank -1   [1]
    - point         rank 0    [1, 1]
    - segment       rank 1    [1, 2, 1]
    - polygon(p)    rank 2    [1, p, p, 1]
    - simplex(n)    n-fold pyramid over a point
    - hypercube(n)  n-fold prism over a point
    - orthoplex(n)  n-fold bipyramid over a point
    - tetrahedron, cube, octahedron (rank 3 members of the families)
    - hemicube      {4,3}_3: V=4, E=6, F=3, non-orientable

Polyhedra in mesh form (vertex count, edge pairs, faces as vertex
cycles) go through from_faces().
"""

from typing import Iterable, List, Sequence, Tuple

from ..spec.errors import OutOfRangeError, PolytopeError
from ..spec.structures import Polytope
from .constructors import bipyramid, prism, pyramid


def nullitope() -> Polytope:
    """The rank -1 polytope: a single (empty) element."""
    return Polytope.from_subelements([[[]]])


def point() -> Polytope:
    """The rank 0 polytope: nullitope + one vertex."""
    return Polytope.from_subelements([[[]], [[0]]])


def segment() -> Polytope:
    """The rank 1 polytope (dyad): two vertices, one edge."""
    return Polytope.from_boundaries(2, [])


def polygon(p: int) -> Polytope:
    """
    The p-gon: vertices 0..p-1, edge k joins k and k+1 (mod p).

    p = 2 gives the digon, a valid abstract polygon.
    """
    if p < 2:
        raise OutOfRangeError(f"A polygon needs at least 2 sides, got {p}")
    if p == 2:
        return Polytope.from_boundaries(2, [[(0, 1), (0, 1)]])
    return Polytope.from_boundaries(p, [[(k, (k + 1) % p) for k in range(p)]])


def simplex(n: int) -> Polytope:
    """
    The n-simplex: n + 1 vertices, every subset an element.

    simplex(-1) is the nullitope, simplex(0) a point.
    """
    if n < -1:
        raise OutOfRangeError(f"Simplex rank must be >= -1, got {n}")
    result = nullitope()
    for _ in range(n + 1):
        result = pyramid(result)
    return result


def hypercube(n: int) -> Polytope:
    """The n-cube: 2^n vertices. hypercube(0) is a point."""
    if n < 0:
        raise OutOfRangeError(f"Hypercube rank must be >= 0, got {n}")
    result = point()
    for _ in range(n):
        result = prism(result)
    return result


def orthoplex(n: int) -> Polytope:
    """The n-orthoplex (cross-polytope): 2n vertices, dual of the n-cube."""
    if n < 0:
        raise OutOfRangeError(f"Orthoplex rank must be >= 0, got {n}")
    if n == 0:
        return point()
    result = segment()
    for _ in range(n - 1):
        result = bipyramid(result)
    return result


def tetrahedron() -> Polytope:
    return simplex(3)


def cube() -> Polytope:
    return hypercube(3)


def octahedron() -> Polytope:
    return orthoplex(3)


def from_faces(n_vertices: int,
               edges: Sequence[Tuple[int, int]],
               faces: Iterable[Sequence[int]]) -> Polytope:
    """
    Build a polyhedron from mesh data.

    Args:
        n_vertices: number of vertices
        edges: list of (i, j) vertex pairs
        faces: faces as vertex cycles (consecutive vertices share an edge)

    Returns:
        validated rank-3 Polytope; face k uses the edges of cycle k

    FAIL-FAST:
        Raises OutOfRangeError for a vertex index out of bounds and
        PolytopeError if a face segment is not in the edge list or a face
        uses an edge twice.
    """
    edge_dict = {}
    for e_idx, (i, j) in enumerate(edges):
        for v in (i, j):
            if v < 0 or v >= n_vertices:
                raise OutOfRangeError(f"Edge {e_idx}: vertex {v} out of bounds [0, {n_vertices - 1}]")
        edge_dict[(i, j)] = e_idx
        edge_dict[(j, i)] = e_idx

    face_edges: List[List[int]] = []
    for f_idx, face in enumerate(faces):
        used = []
        n = len(face)
        for k in range(n):
            v1, v2 = face[k], face[(k + 1) % n]
            if (v1, v2) not in edge_dict:
                raise PolytopeError(
                    f"Face {f_idx} uses segment ({v1},{v2}) which is not in edge list. "
                    f"Face vertices: {list(face)}")
            e_idx = edge_dict[(v1, v2)]
            if e_idx in used:
                raise PolytopeError(
                    f"Face {f_idx} uses edge {e_idx} twice. Face vertices: {list(face)}")
            used.append(e_idx)
        face_edges.append(used)

    return Polytope.from_boundaries(n_vertices, [[tuple(e) for e in edges], face_edges])


def hemicube() -> Polytope:
    """
    The hemicube {4,3}_3: the cube with antipodal elements identified.

    TOPOLOGY:
        V = 4, E = 6 (complete graph K4), F = 3 (the three 4-cycles of K4)
        chi = V - E + F = 1 (projective plane), non-orientable
    """
    edges = [(i, j) for i in range(4) for j in range(i + 1, 4)]
    faces = [[0, 1, 2, 3], [0, 1, 3, 2], [0, 2, 1, 3]]
    return from_faces(4, edges, faces)
