"""
Convex Hull Face Lattice
========================

Face lattice of the convex hull of a finite point set, as a
ConcretePolytope. Used by the Minkowski sum and by the named solids that
are easiest to state by their vertices.

ALGORITHM:
    1. Dedup points (rounded to HULL_DECIMALS), project onto their affine
       hull (dimension k).
    2. k = 0: a point. k = 1: a segment between the two extreme points.
    3. k >= 2: scipy ConvexHull in the k-dimensional frame.
       Qhull triangulates facets, so simplices are merged by rounded
       facet equation and each facet becomes the SET of hull vertices on
       its hyperplane.
    4. Faces of rank r: H & F for every (r + 1)-face H and facet F, kept
       when the vertex set has affine dimension exactly r.
       (Each facet of H is cut out by some facet of the whole polytope.)
    5. Subelements by vertex-set inclusion between consecutive ranks.

ORDER (deterministic):
    Vertices in input order. Faces of each rank sorted by their sorted
    vertex-index tuple.
"""

from typing import Dict, FrozenSet, List

import numpy as np
from scipy.spatial import ConvexHull

from ..spec.constants import EPS_HULL, EPS_RANK, HULL_DECIMALS
from ..spec.errors import DegenerateSumError, DimensionMismatchError, PolytopeError
from ..spec.structures import Polytope, debug_check
from .realization import ConcretePolytope, affine_frame


def _affine_dimension(points: np.ndarray) -> int:
    if len(points) <= 1:
        return 0
    centered = points - points[0]
    scale = max(1.0, float(np.max(np.abs(centered))))
    return int(np.linalg.matrix_rank(centered, tol=EPS_RANK * scale))


def _unique_points(points: np.ndarray) -> np.ndarray:
    """Drop repeated points (after rounding), keeping first occurrences in input order."""
    _, first = np.unique(np.round(points, HULL_DECIMALS), axis=0, return_index=True)
    return points[np.sort(first)]


def _facet_vertex_sets(hull: ConvexHull, local: np.ndarray,
                       hull_vertices: List[int]) -> List[FrozenSet[int]]:
    """Merge the triangulated hull facets by hyperplane; return vertex sets."""
    equations = np.unique(np.round(hull.equations, HULL_DECIMALS), axis=0)

    scale = max(1.0, float(np.max(np.abs(local))))
    candidates = local[hull_vertices]
    facets = set()
    for eq in equations:
        normal, offset = eq[:-1], eq[-1]
        distance = candidates @ normal + offset
        on_plane = frozenset(v for v, d in zip(hull_vertices, distance)
                             if abs(d) < EPS_HULL * scale)
        facets.add(on_plane)
    return list(facets)


def _sorted_faces(faces) -> List[FrozenSet[int]]:
    return sorted(faces, key=lambda s: tuple(sorted(s)))


def face_lattice(local: np.ndarray) -> Dict[int, List[FrozenSet[int]]]:
    """
    Faces of the convex hull of full-dimensional points, by rank.

    Args:
        local: (N, k) points spanning R^k, k >= 2, no duplicates

    Returns:
        {rank: list of vertex-index sets} for ranks 0 .. k - 1
    """
    k = local.shape[1]
    hull = ConvexHull(local)
    hull_vertices = sorted(int(v) for v in hull.vertices)

    facets = _facet_vertex_sets(hull, local, hull_vertices)
    faces = {k - 1: _sorted_faces(facets)}
    for r in range(k - 2, -1, -1):
        found = set()
        for H in faces[r + 1]:
            for F in facets:
                S = H & F
                if S and S != H and _affine_dimension(local[sorted(S)]) == r:
                    found.add(S)
        faces[r] = _sorted_faces(found)

    vertex_ids = sorted(v for (v,) in faces[0])
    if vertex_ids != hull_vertices:
        raise PolytopeError(
            f"Hull face lattice is inconsistent: {len(vertex_ids)} rank-0 faces, "
            f"{len(hull_vertices)} hull vertices. Points may be too noisy for "
            f"HULL_DECIMALS={HULL_DECIMALS}")
    return faces


def convex_hull(points) -> ConcretePolytope:
    """
    Convex hull of a point set as a concrete polytope.

    Args:
        points: (N, d) array, N >= 1

    Returns:
        ConcretePolytope of rank k = affine dimension of the points, with
        the extreme points (in input order) as vertices, in R^d
    """
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or len(pts) == 0:
        raise DimensionMismatchError(f"Expected a non-empty (N, d) array, got shape {pts.shape}")
    pts = _unique_points(pts)

    origin, basis = affine_frame(pts)
    k = basis.shape[0]
    local = (pts - origin) @ basis.T

    if k == 0:
        result = Polytope.assemble([[[]], [[0]]])
        return ConcretePolytope(debug_check(result, "convex_hull"), pts[:1])

    if k == 1:
        ends = sorted([int(np.argmin(local[:, 0])), int(np.argmax(local[:, 0]))])
        result = Polytope.assemble([[[]], [[0], [0]], [[0, 1]]])
        return ConcretePolytope(debug_check(result, "convex_hull"), pts[ends])

    faces = face_lattice(local)
    vertex_ids = [v for (v,) in faces[0]]

    ranks: List[List[List[int]]] = [[[]], [[0] for _ in vertex_ids]]
    for r in range(1, k):
        below = {S: i for i, S in enumerate(faces[r - 1])}
        ranks.append([[i for T, i in below.items() if T < S] for S in faces[r]])
    ranks.append([range(len(faces[k - 1]))])

    result = debug_check(Polytope.assemble(ranks), "convex_hull")
    return ConcretePolytope(result, pts[vertex_ids])


def minkowski_sum(P: ConcretePolytope, Q: ConcretePolytope) -> ConcretePolytope:
    """
    Minkowski sum P + Q = {p + q}.

    Vertices are the pairwise vertex sums that are extreme points of the
    result (first occurrence order, p-major).

    Raises:
        DimensionMismatchError: different ambient dimensions
        DegenerateSumError: the sum does not span the ambient dimension
            (fewer than d + 1 affinely independent points)
    """
    if P.dimension != Q.dimension:
        raise DimensionMismatchError(
            f"Minkowski sum of {P.dimension}- and {Q.dimension}-dimensional polytopes")

    d = P.dimension
    sums = (P.vertices[:, None, :] + Q.vertices[None, :, :]).reshape(-1, d)
    sums = _unique_points(sums)
    span = _affine_dimension(sums)
    if span < d:
        raise DegenerateSumError(
            f"Minkowski sum spans only {span} of {d} dimensions "
            f"({len(sums)} distinct points)")
    return convex_hull(sums)
