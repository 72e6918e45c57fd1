"""
Error taxonomy
==============

Every failure is reported synchronously to the caller as one of these
exceptions. All derive from ValueError so callers that only care about
"bad input" can catch that.
"""

from enum import Enum
from typing import Iterable, Optional, Tuple


class PolytopeError(ValueError):
    """Base class for all polytope_math errors."""


class OutOfRangeError(PolytopeError, IndexError):
    """A rank or element index argument is outside the structure."""


class AxiomKind(Enum):
    MISSING_EXTREMA = "missing_extrema"
    UNEQUAL_CHAIN_LENGTH = "unequal_chain_length"
    DIAMOND_VIOLATION = "diamond_violation"
    DISCONNECTED = "disconnected"


class AxiomViolation(PolytopeError):
    """
    A structure fails one of the four polytope axioms.

    Attributes:
        kind: which axiom (AxiomKind)
        elements: offending elements as (rank, index) pairs. For a diamond
            violation this is [(rank_F, F), (rank_G, G)].
    """

    def __init__(self, kind: AxiomKind, message: str,
                 elements: Optional[Iterable[Tuple[int, int]]] = None):
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind
        self.elements = list(elements) if elements is not None else []


class NotIncidentError(PolytopeError):
    """Section requested between elements that are not incident."""


class RankMismatchError(PolytopeError):
    """Operands do not have the rank relationship the operation needs."""


class PetrieUndefinedError(PolytopeError):
    """The Petrie polygons of the input do not form a polytope."""


class DegenerateSumError(PolytopeError):
    """A Minkowski sum does not span its ambient space."""


class IncompleteMappingError(PolytopeError):
    """A coordinate mapping misses at least one vertex."""


class DimensionMismatchError(PolytopeError):
    """Coordinate vectors of different lengths were combined."""


class InvalidChainError(PolytopeError):
    """Flag traversal hit a broken chain (unvalidated structure)."""
