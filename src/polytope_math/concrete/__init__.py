"""
Concrete layer - coordinates on top of abstract polytopes.

EXPORTS:
- Realization: ConcretePolytope, with_coordinates
- Hull: convex_hull, minkowski_sum
- Named solids: build_* (point, segment, polygons, simplex, hypercube,
  orthoplex, Platonic and Kepler-Poinsot solids)
"""

# === Realization ===
from .realization import ConcretePolytope, with_coordinates

# === Hull ===
from .hull import convex_hull, minkowski_sum

# === Named solids ===
from .solids import (
    build_point,
    build_segment,
    build_regular_polygon,
    build_star_polygon,
    build_simplex,
    build_hypercube,
    build_orthoplex,
    build_tetrahedron,
    build_cube,
    build_octahedron,
    build_icosahedron,
    build_dodecahedron,
    build_great_dodecahedron,
    build_small_stellated_dodecahedron,
)
