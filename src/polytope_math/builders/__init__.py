"""
Constructors and named polytopes - build on operators and spec only.

EXPORTS:
- Constructors: dual, section, vertex_figure, join, pyramid, prism_product,
  prism, tegum, bipyramid, antiprism, lattice_antiprism, compound,
  split_compound, petrie_dual
- Named polytopes: nullitope, point, segment, polygon, simplex, hypercube,
  orthoplex, tetrahedron, cube, octahedron, hemicube, from_faces
"""

# === Constructors ===
from .constructors import (
    dual,
    section,
    vertex_figure,
    join,
    pyramid,
    prism_product,
    prism,
    tegum,
    bipyramid,
    antiprism,
    lattice_antiprism,
    compound,
    split_compound,
)
from .petrie import petrie_dual, petrie_polygons, canonical_cycle

# === Named polytopes ===
from .polytopes import (
    nullitope,
    point,
    segment,
    polygon,
    simplex,
    hypercube,
    orthoplex,
    tetrahedron,
    cube,
    octahedron,
    hemicube,
    from_faces,
)
