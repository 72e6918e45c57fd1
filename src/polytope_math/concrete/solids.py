"""
Named Concrete Polytopes
========================

Regular polytopes with standard coordinates, centered at the origin.

FAMILIES:
    build_point()                 R^0
    build_segment(length)         [-length/2, length/2]
    build_regular_polygon(p)      circumradius 1, vertex k at angle 2 pi k / p
    build_star_polygon(p, q)      {p/q}, vertex k at angle 2 pi k q / p
    build_simplex(n, edge)        iterated pyramid, edge length `edge`
    build_hypercube(n)            vertices (+-1, ..., +-1), edge 2
    build_orthoplex(n)            vertices +-e_i

POLYHEDRA:
    tetrahedron    (1,1,1), (1,-1,-1), (-1,1,-1), (-1,-1,1)
    cube           hypercube(3)
    octahedron     orthoplex(3)
    icosahedron    cyclic permutations of (0, +-1, +-PHI), edge 2
    dodecahedron   (+-1, +-1, +-1) and cyclic (0, +-1/PHI, +-PHI), via convex_hull
    great dodecahedron {5, 5/2}      icosahedron vertices, faces = vertex links
    small stellated dodecahedron {5/2, 5}  polar dual of the above
"""

from itertools import combinations
from typing import List, Tuple

import numpy as np

from ..spec.constants import EPS_CLOSE
from ..spec.errors import OutOfRangeError
from ..builders.polytopes import from_faces, point, polygon, segment
from .hull import convex_hull
from .realization import ConcretePolytope, with_coordinates

PHI = (1 + np.sqrt(5)) / 2


def build_point(coordinates=()) -> ConcretePolytope:
    return with_coordinates(point(), [coordinates])


def build_segment(length: float = 2.0) -> ConcretePolytope:
    return with_coordinates(segment(), [[-length / 2], [length / 2]])


def build_regular_polygon(p: int, radius: float = 1.0) -> ConcretePolytope:
    """Regular convex p-gon in the plane. Edge k joins vertices k and k + 1."""
    if p < 3:
        raise OutOfRangeError(f"A regular polygon needs p >= 3, got {p}")
    return build_star_polygon(p, 1, radius)


def build_star_polygon(p: int, q: int, radius: float = 1.0) -> ConcretePolytope:
    """
    Regular star polygon {p/q}: same abstract p-gon, vertices stepped by q.

    Example:
        build_star_polygon(5, 2) -> pentagram
    """
    if p < 3:
        raise OutOfRangeError(f"A star polygon needs p >= 3, got {p}")
    if q < 1 or 2 * q >= p or np.gcd(p, q) != 1:
        raise OutOfRangeError(f"{{{p}/{q}}} is not a regular star polygon (need 1 <= q < p/2, gcd 1)")
    angles = 2 * np.pi * q * np.arange(p) / p
    coords = radius * np.column_stack([np.cos(angles), np.sin(angles)])
    return with_coordinates(polygon(p), coords)


def build_simplex(n: int, edge: float = 2.0) -> ConcretePolytope:
    """
    Regular n-simplex in R^n.

    Each step lifts the base by a trailing 0 and puts the apex over the
    base centroid at the height that makes all new edges `edge` long.
    """
    if n < 0:
        raise OutOfRangeError(f"Concrete simplex rank must be >= 0, got {n}")
    result = build_point()
    for _ in range(n):
        R = result.circumradius()
        result = result.pyramid(height=np.sqrt(edge ** 2 - R ** 2))
    return result


def build_hypercube(n: int) -> ConcretePolytope:
    """The n-cube [-1, 1]^n: n extrusions of a point."""
    if n < 0:
        raise OutOfRangeError(f"Concrete hypercube rank must be >= 0, got {n}")
    result = build_point()
    for _ in range(n):
        result = result.prism(height=2.0)
    return result


def build_orthoplex(n: int) -> ConcretePolytope:
    """The n-orthoplex: vertices +-e_i. Built as a segment plus n - 1 bipyramids."""
    if n < 0:
        raise OutOfRangeError(f"Concrete orthoplex rank must be >= 0, got {n}")
    if n == 0:
        return build_point()
    result = build_segment(2.0)
    for _ in range(n - 1):
        result = result.bipyramid(height=1.0)
    return result


def _edges_at_distance(vertices: np.ndarray, length: float) -> List[Tuple[int, int]]:
    edges = []
    for i, j in combinations(range(len(vertices)), 2):
        d2 = np.sum((vertices[i] - vertices[j]) ** 2)
        if abs(d2 - length ** 2) < EPS_CLOSE:
            edges.append((i, j))
    return edges


def build_tetrahedron() -> ConcretePolytope:
    """
    Regular tetrahedron at alternating corners of the cube [-1, 1]^3.

    TOPOLOGY:
        V = 4, E = 6 (K4), F = 4 triangles, chi = 2
    """
    vertices = sorted([(1, 1, 1), (1, -1, -1), (-1, 1, -1), (-1, -1, 1)])
    edges = [(i, j) for i in range(4) for j in range(i + 1, 4)]
    faces = [[0, 1, 2], [0, 1, 3], [0, 2, 3], [1, 2, 3]]
    return with_coordinates(from_faces(4, edges, faces), vertices)


def build_cube() -> ConcretePolytope:
    return build_hypercube(3)


def build_octahedron() -> ConcretePolytope:
    return build_orthoplex(3)


def _icosahedron_data():
    """Sorted icosahedron vertices, edges (length 2) and adjacency sets."""
    points = []
    for a in (-1, 1):
        for b in (-PHI, PHI):
            points.extend([(0, a, b), (a, b, 0), (b, 0, a)])
    vertices = np.array(sorted(points), dtype=float)
    edges = _edges_at_distance(vertices, 2.0)
    if len(edges) != 30:
        raise ValueError(f"Expected 30 icosahedron edges, got {len(edges)}")

    neighbours = [set() for _ in range(12)]
    for i, j in edges:
        neighbours[i].add(j)
        neighbours[j].add(i)
    return vertices, edges, neighbours


def build_icosahedron() -> ConcretePolytope:
    """
    Regular icosahedron, edge length 2.

    TOPOLOGY:
        V = 12, E = 30, F = 20 triangles, chi = 2
        Faces are the triangles of the edge graph (it has no others).
    """
    vertices, edges, neighbours = _icosahedron_data()
    faces = [[i, j, k] for i, j, k in combinations(range(12), 3)
             if j in neighbours[i] and k in neighbours[i] and k in neighbours[j]]
    if len(faces) != 20:
        raise ValueError(f"Expected 20 icosahedron faces, got {len(faces)}")
    return with_coordinates(from_faces(12, edges, faces), vertices)


def build_dodecahedron() -> ConcretePolytope:
    """
    Regular dodecahedron, as the convex hull of its 20 vertices.

    TOPOLOGY:
        V = 20, E = 30, F = 12 pentagons, chi = 2
    """
    points = [(x, y, z) for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)]
    for a in (-1 / PHI, 1 / PHI):
        for b in (-PHI, PHI):
            points.extend([(0, a, b), (a, b, 0), (b, 0, a)])
    return convex_hull(np.array(sorted(points), dtype=float))


def build_great_dodecahedron() -> ConcretePolytope:
    """
    Great dodecahedron {5, 5/2}: icosahedron vertices and edges, one
    pentagon per vertex through its five neighbours.

    TOPOLOGY:
        V = 12, E = 30, F = 12, chi = -6 (orientable, genus 4)
    """
    vertices, edges, neighbours = _icosahedron_data()
    faces = []
    for v in range(12):
        ring = neighbours[v]
        # the neighbours of v form a 5-cycle in the edge graph
        cycle = [min(ring)]
        while len(cycle) < 5:
            step = sorted((neighbours[cycle[-1]] & ring) - set(cycle))
            cycle.append(step[0])
        faces.append(cycle)
    return with_coordinates(from_faces(12, edges, faces), vertices)


def build_small_stellated_dodecahedron() -> ConcretePolytope:
    """Small stellated dodecahedron {5/2, 5}: polar dual of the great dodecahedron."""
    return build_great_dodecahedron().dual()
