"""Constants, error taxonomy and the core data structures."""

from .constants import (
    EPS_CLOSE,
    EPS_RANK,
    EPS_HULL,
    HULL_DECIMALS,
    NULLITOPE_RANK,
    MIN_COMPOUND_RANK,
    PETRIE_RANK,
)
from .errors import (
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
from .structures import Element, ElementList, Polytope
