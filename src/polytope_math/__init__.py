"""
polytope_math - abstract and concrete polytopes
===============================================

Layers (imports only point down):
    analysis  -> operators -> spec
    builders  -> operators -> spec
    concrete  -> builders

Quick start:
    >>> from polytope_math import prism, segment, polygon, is_isomorphic
    >>> square = prism(segment())
    >>> square.element_count_per_rank()
    [1, 4, 4, 1]
    >>> is_isomorphic(square, polygon(4))
    True
"""

__version__ = "0.1.0"

from .spec import (
    Element,
    ElementList,
    Polytope,
    PolytopeError,
    OutOfRangeError,
    AxiomKind,
    AxiomViolation,
    NotIncidentError,
    RankMismatchError,
    PetrieUndefinedError,
    DegenerateSumError,
    IncompleteMappingError,
    DimensionMismatchError,
    InvalidChainError,
)
from .operators import FlagEngine, check_axioms, incidence_matrix
from .builders import (
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
    petrie_dual,
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
from .concrete import ConcretePolytope, with_coordinates, convex_hull, minkowski_sum
from .analysis import (
    find_isomorphism,
    is_isomorphic,
    euler_characteristic,
    schlafli_type,
    verify_polytope,
)
