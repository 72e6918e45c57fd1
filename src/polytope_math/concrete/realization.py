"""
Concrete Polytopes
==================

An abstract Polytope plus one coordinate vector per vertex.

CONTRACT:
    - vertices: (V, d) float array, row i = coordinates of vertex i
    - total over rank-0 elements, one ambient dimension d for all rows
    - immutable (the array is read-only); transformations return new
      instances

Coordinates of higher elements are never stored: an element's geometry
is that of its vertex set (element_vertices()).

Concrete constructors reuse the abstract ones and place coordinates by the
vertex order documented in builders/constructors.py.
"""

import warnings
from typing import Callable, List, Optional

import numpy as np

from ..spec.constants import EPS_CLOSE, EPS_RANK
from ..spec.errors import (
    DimensionMismatchError,
    IncompleteMappingError,
    OutOfRangeError,
    PolytopeError,
)
from ..spec.structures import Polytope
from ..builders import constructors


def with_coordinates(polytope: Polytope, mapping) -> "ConcretePolytope":
    """
    Attach coordinates to every vertex of an abstract polytope.

    Args:
        polytope: Polytope
        mapping: dict {vertex_index: vector}, or a sequence/array of vectors
            in vertex order

    Returns:
        ConcretePolytope

    Raises:
        IncompleteMappingError: a vertex has no coordinates
        DimensionMismatchError: vectors differ in length
    """
    n_vertices = polytope.element_count(0) if polytope.rank >= 0 else 0

    if isinstance(mapping, dict):
        missing = [v for v in range(n_vertices) if v not in mapping]
        extra = [k for k in mapping if not (isinstance(k, (int, np.integer)) and 0 <= k < n_vertices)]
        rows = [mapping[v] for v in range(n_vertices) if v in mapping]
    else:
        rows = list(mapping)
        missing = list(range(len(rows), n_vertices))
        extra = list(range(n_vertices, len(rows)))
        rows = rows[:n_vertices]

    if missing:
        raise IncompleteMappingError(
            f"{len(missing)} of {n_vertices} vertices have no coordinates, "
            f"first missing: {missing[0]}")
    if extra:
        warnings.warn(
            f"Coordinate mapping has {len(extra)} entries that are not vertex indices "
            f"(first: {extra[0]}); they are ignored.",
            UserWarning
        )

    lengths = {np.atleast_1d(np.asarray(r, dtype=float)).shape[0] for r in rows}
    if len(lengths) > 1:
        raise DimensionMismatchError(f"Coordinate vectors have different lengths: {sorted(lengths)}")

    dim = lengths.pop() if lengths else 0
    vertices = np.array(rows, dtype=float).reshape(len(rows), dim)
    return ConcretePolytope(polytope, vertices)


def affine_frame(points: np.ndarray, tol: float = EPS_RANK):
    """
    Orthonormal frame of the affine hull of a point set.

    Returns:
        (origin, basis): origin = mean point, basis = (k, d) rows spanning
        the affine hull, k = affine dimension
    """
    origin = points.mean(axis=0)
    centered = points - origin
    if centered.size == 0:
        return origin, np.zeros((0, points.shape[1]))
    _, s, Vt = np.linalg.svd(centered, full_matrices=False)
    scale = max(1.0, float(s[0])) if s.size else 1.0
    k = int(np.sum(s > tol * scale))
    return origin, Vt[:k]


class ConcretePolytope:
    """
    A polytope with vertex coordinates.

    Construct with with_coordinates() or Polytope.with_coordinates();
    the constructor itself trusts its arguments.
    """

    def __init__(self, polytope: Polytope, vertices: np.ndarray):
        self.polytope = polytope
        self._vertices = np.array(vertices, dtype=float)
        self._vertices.flags.writeable = False

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def rank(self) -> int:
        return self.polytope.rank

    @property
    def dimension(self) -> int:
        """Ambient dimension d of the coordinate space."""
        return self._vertices.shape[1]

    @property
    def vertices(self) -> np.ndarray:
        """(V, d) read-only array of vertex coordinates."""
        return self._vertices

    def coordinates(self, vertex_index: int) -> np.ndarray:
        if vertex_index < 0 or vertex_index >= len(self._vertices):
            raise OutOfRangeError(
                f"Vertex {vertex_index} outside [0, {len(self._vertices) - 1}]")
        return self._vertices[vertex_index].copy()

    def element_coordinates(self, rank: int, index: int) -> np.ndarray:
        """Coordinates of the vertices of an element, in vertex order."""
        vertex_ids = sorted(self.polytope.element_vertices(rank, index))
        return self._vertices[vertex_ids]

    def centroid(self) -> np.ndarray:
        """Vertex centroid (mean of the vertex coordinates)."""
        return self._vertices.mean(axis=0)

    def affine_dimension(self) -> int:
        return affine_frame(self._vertices)[1].shape[0]

    def circumcenter(self) -> Optional[np.ndarray]:
        """
        Center of the sphere through all vertices, inside their affine hull.

        Returns None when the vertices are not cospherical.
        """
        origin, basis = affine_frame(self._vertices)
        local = (self._vertices - origin) @ basis.T
        if local.shape[1] == 0:
            return origin

        # |x_i - c|^2 = |x_0 - c|^2  ->  2 (x_i - x_0) . c = |x_i|^2 - |x_0|^2
        A = 2.0 * (local[1:] - local[0])
        b = np.sum(local[1:] ** 2, axis=1) - np.sum(local[0] ** 2)
        c_local, *_ = np.linalg.lstsq(A, b, rcond=None)

        radii = np.linalg.norm(local - c_local, axis=1)
        if np.max(radii) - np.min(radii) > EPS_CLOSE * max(1.0, float(np.max(radii))):
            return None
        return origin + c_local @ basis

    def circumradius(self) -> Optional[float]:
        """Radius of the circumsphere, or None if the vertices are not cospherical."""
        center = self.circumcenter()
        if center is None:
            return None
        return float(np.linalg.norm(self._vertices[0] - center)) if len(self._vertices) else 0.0

    def midpoint_abstraction(self) -> List[np.ndarray]:
        """
        Midpoint of every element: the centroid of its vertices.

        Returns:
            list over ranks 0 .. n, entry r a (count(r), d) array. Rank 0
            reproduces the vertices.
        """
        result = []
        for rank in range(0, self.rank + 1):
            result.append(np.array([
                self.element_coordinates(rank, i).mean(axis=0)
                for i in range(self.polytope.element_count(rank))
            ]).reshape(-1, self.dimension))
        return result

    def edge_lengths(self) -> np.ndarray:
        """Length of every edge, in edge order."""
        if self.rank < 1:
            return np.zeros(0)
        pairs = np.array([e.subelements for e in self.polytope.elements(1)])
        return np.linalg.norm(self._vertices[pairs[:, 0]] - self._vertices[pairs[:, 1]], axis=1)

    # -------------------------------------------------------------------------
    # Coordinate transformations
    # -------------------------------------------------------------------------

    def _check_vector(self, vector, what: str) -> np.ndarray:
        v = np.asarray(vector, dtype=float).reshape(-1)
        if v.shape[0] != self.dimension:
            raise DimensionMismatchError(
                f"{what} has length {v.shape[0]}, coordinates have {self.dimension}")
        return v

    def translate(self, offset) -> "ConcretePolytope":
        return ConcretePolytope(self.polytope, self._vertices + self._check_vector(offset, "Offset"))

    def scale(self, factor: float, center=None) -> "ConcretePolytope":
        """Scale about center (default: the vertex centroid)."""
        c = self.centroid() if center is None else self._check_vector(center, "Center")
        return ConcretePolytope(self.polytope, c + factor * (self._vertices - c))

    def transform(self, matrix) -> "ConcretePolytope":
        """
        Apply a linear map x -> M x (rotation, reflection, shear, embedding).

        Args:
            matrix: (d', d) array; d' may differ from d
        """
        M = np.asarray(matrix, dtype=float)
        if M.ndim != 2 or M.shape[1] != self.dimension:
            raise DimensionMismatchError(
                f"Matrix of shape {M.shape} cannot act on {self.dimension}-vectors")
        return ConcretePolytope(self.polytope, self._vertices @ M.T)

    # -------------------------------------------------------------------------
    # Concrete constructors
    # -------------------------------------------------------------------------

    def dual(self, radius: float = 1.0) -> "ConcretePolytope":
        """
        Polar reciprocal about the vertex centroid.

        Facet hyperplane {x : n.(x - c) = h} maps to the dual vertex
        c + n * radius^2 / h.

        Raises:
            DimensionMismatchError: the realization is not full-dimensional
                (rank != ambient dimension)
            PolytopeError: the centroid lies on a facet hyperplane
        """
        n = self.rank
        abstract_dual = constructors.dual(self.polytope)
        if n <= 0:
            return ConcretePolytope(abstract_dual, self._vertices)
        if n != self.dimension or self.affine_dimension() != n:
            raise DimensionMismatchError(
                f"Polar dual needs a full-dimensional realization: rank {n}, "
                f"ambient dimension {self.dimension}")

        c = self.centroid()
        dual_vertices = []
        for f in range(self.polytope.element_count(n - 1)):
            X = self.element_coordinates(n - 1, f)
            m = X.mean(axis=0)
            _, _, Vt = np.linalg.svd(X - m)
            normal = Vt[-1]
            h = float(normal @ (m - c))
            if h < 0:
                normal, h = -normal, -h
            if h < EPS_CLOSE:
                raise PolytopeError(f"Centroid lies on the hyperplane of facet {f}")
            dual_vertices.append(c + normal * radius ** 2 / h)

        return ConcretePolytope(abstract_dual, np.array(dual_vertices))

    def extrude(self, pull_in: Callable, push_out: Callable) -> "ConcretePolytope":
        """
        Prism from two vertex maps.

        Two replicas of the polytope are created by applying pull_in and
        push_out to every vertex (vertex i -> 2i and 2i + 1); the replicas
        are linked by higher elements.

        Example:
            point.extrude(lambda v: np.append(v, -1), lambda v: np.append(v, 1))
            -> segment [-1] .. [1]
        """
        rows = []
        for v in self._vertices:
            rows.append(np.asarray(pull_in(v), dtype=float).reshape(-1))
            rows.append(np.asarray(push_out(v), dtype=float).reshape(-1))
        if len({r.shape[0] for r in rows}) > 1:
            raise DimensionMismatchError("pull_in and push_out return vectors of different lengths")
        return ConcretePolytope(constructors.prism(self.polytope), np.array(rows))

    def prism(self, height: float = 2.0) -> "ConcretePolytope":
        """Right prism: copies at -height/2 and +height/2 in a new last coordinate."""
        half = height / 2.0
        return self.extrude(lambda v: np.append(v, -half), lambda v: np.append(v, half))

    def pyramid(self, apex=None, height: float = 1.0) -> "ConcretePolytope":
        """
        Pyramid in one dimension up. The base gets a trailing 0 coordinate.

        Args:
            apex: (d + 1)-vector, default centroid + height in the new axis
        """
        base = np.hstack([self._vertices, np.zeros((len(self._vertices), 1))])
        if apex is None:
            apex = np.append(self.centroid() if len(self._vertices) else np.zeros(self.dimension), height)
        apex = np.asarray(apex, dtype=float).reshape(-1)
        if apex.shape[0] != self.dimension + 1:
            raise DimensionMismatchError(
                f"Apex has length {apex.shape[0]}, expected {self.dimension + 1}")
        return ConcretePolytope(constructors.pyramid(self.polytope), np.vstack([base, apex]))

    def prism_product(self, other: "ConcretePolytope") -> "ConcretePolytope":
        """Cartesian product: vertex (i, j) at (p_i, q_j), index i * |Q_0| + j."""
        P, Q = self._vertices, other.vertices
        rows = [np.concatenate([p, q]) for p in P for q in Q]
        coords = np.array(rows).reshape(len(rows), self.dimension + other.dimension)
        return ConcretePolytope(constructors.prism_product(self.polytope, other.polytope), coords)

    def tegum(self, other: "ConcretePolytope") -> "ConcretePolytope":
        """
        Direct sum: (p - c_P, 0) then (0, q - c_Q), both centered on their
        vertex centroids.
        """
        P = self._vertices - self.centroid()
        Q = other.vertices - other.centroid()
        coords = np.vstack([
            np.hstack([P, np.zeros((len(P), other.dimension))]),
            np.hstack([np.zeros((len(Q), self.dimension)), Q]),
        ])
        return ConcretePolytope(constructors.tegum(self.polytope, other.polytope), coords)

    def bipyramid(self, height: float = 1.0) -> "ConcretePolytope":
        """Apexes at +-height over the vertex centroid (which moves to the origin)."""
        apexes = ConcretePolytope(_segment(), [[-height], [height]])
        return self.tegum(apexes)

    def compound(self, other: "ConcretePolytope") -> "ConcretePolytope":
        if other.dimension != self.dimension:
            raise DimensionMismatchError(
                f"Compound of {self.dimension}- and {other.dimension}-dimensional coordinates")
        return ConcretePolytope(constructors.compound(self.polytope, other.polytope),
                                np.vstack([self._vertices, other.vertices]))

    def minkowski_sum(self, other: "ConcretePolytope") -> "ConcretePolytope":
        from .hull import minkowski_sum
        return minkowski_sum(self, other)

    def __repr__(self) -> str:
        return (f"ConcretePolytope(rank={self.rank}, dimension={self.dimension}, "
                f"counts={self.polytope.element_count_per_rank()})")


def _segment() -> Polytope:
    from ..builders.polytopes import segment
    return segment()
