"""
Polytope Data Structures - THE critical piece
=============================================

Element, ElementList and Polytope (the abstract incidence structure).

STORAGE:
    A rank-n polytope is n + 2 ElementLists, one per rank -1 .. n.
    Elements refer to their neighbours by INDEX into the adjacent rank,
    never by reference. This keeps copies cheap and reindexing trivial
    (dual, sections).

LIFECYCLE:
    Built once, by from_subelements() / from_boundaries() (validated) or by
    a constructor in builders/ (trusted, debug re-validated). Never mutated
    afterwards: every transformation returns a new instance.

All public builders validate. Constructors use assemble(), which skips
validation unless DEBUG_VALIDATE is on.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Dict, FrozenSet, Iterable, Iterator, List, Sequence, Tuple

from . import constants
from .constants import NULLITOPE_RANK
from .errors import OutOfRangeError, PolytopeError


@dataclass(frozen=True)
class Element:
    """
    A single element: sorted index tuples into the ranks below and above.

    Empty subelements only at rank -1, empty superelements only at rank n
    (for a valid polytope).
    """
    subelements: Tuple[int, ...]
    superelements: Tuple[int, ...]


class ElementList:
    """Ordered, immutable sequence of same-rank elements."""

    __slots__ = ('rank', '_elements')

    def __init__(self, rank: int, elements: Iterable[Element]):
        self.rank = rank
        self._elements = tuple(elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, index: int) -> Element:
        return self._elements[index]

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ElementList):
            return NotImplemented
        return self.rank == other.rank and self._elements == other._elements

    def __hash__(self) -> int:
        return hash((self.rank, self._elements))

    def __repr__(self) -> str:
        return f"ElementList(rank={self.rank}, n={len(self._elements)})"

    def subelement_lists(self) -> List[Tuple[int, ...]]:
        """Subelement tuples of every element, in order."""
        return [e.subelements for e in self._elements]


class Polytope:
    """
    Abstract polytope: a ranked incidence structure.

    Ranks run from -1 (the nullitope) to n = self.rank (the whole polytope).
    Use the classmethod builders, not __init__, from outside the package.

    Example:
        >>> square = Polytope.from_boundaries(4, [[(0, 1), (1, 2), (2, 3), (3, 0)]])
        >>> square.element_count_per_rank()
        [1, 4, 4, 1]
    """

    def __init__(self, element_lists: Sequence[ElementList], is_compound: bool = False):
        self._lists = tuple(element_lists)
        self.is_compound = is_compound

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    @classmethod
    def assemble(cls, subelements_by_rank: Sequence[Sequence[Iterable[int]]],
                 is_compound: bool = False) -> "Polytope":
        """
        Build from subelement lists WITHOUT axiom validation.

        Args:
            subelements_by_rank: position k holds the elements of rank k - 1,
                each given as an iterable of indices into rank k - 2.
            is_compound: mark the result as a compound (connectedness waived)

        Returns:
            Polytope with superelements derived from the subelements.

        Raises:
            OutOfRangeError: a subelement index points outside the rank below,
                or the rank -1 element lists subelements
        """
        subs = [[tuple(sorted(set(s))) for s in rank_list]
                for rank_list in subelements_by_rank]
        if not subs:
            raise PolytopeError("A polytope needs at least the rank -1 element list")
        if any(subs[0]):
            raise OutOfRangeError(
                f"Rank -1 elements have no rank below, got subelements {subs[0]}")

        sups: List[List[List[int]]] = [[[] for _ in rank_list] for rank_list in subs]
        for pos in range(1, len(subs)):
            n_below = len(subs[pos - 1])
            for idx, sub in enumerate(subs[pos]):
                for s in sub:
                    if s < 0 or s >= n_below:
                        raise OutOfRangeError(
                            f"Element {idx} of rank {pos - 1} lists subelement {s}, "
                            f"rank {pos - 2} has only {n_below} elements")
                    sups[pos - 1][s].append(idx)

        lists = []
        for pos, rank_list in enumerate(subs):
            elements = [Element(sub, tuple(sups[pos][i])) for i, sub in enumerate(rank_list)]
            lists.append(ElementList(pos - 1, elements))
        return cls(lists, is_compound=is_compound)

    @classmethod
    def from_subelements(cls, subelements_by_rank: Sequence[Sequence[Iterable[int]]]) -> "Polytope":
        """
        Build from explicit subelement lists and validate.

        A disconnected structure is rejected here; compounds come from
        builders.compound().

        Args:
            subelements_by_rank: one list per rank -1 .. n. Rank -1 is
                normally [[]]; rank 0 lists [0] for every vertex.

        Raises:
            OutOfRangeError: bad subelement index, or subelements at rank -1
            AxiomViolation: the structure is not a polytope
        """
        polytope = cls.assemble(subelements_by_rank)
        polytope.validate(strict=True)
        return polytope

    @classmethod
    def from_boundaries(cls, n_vertices: int,
                        boundaries: Sequence[Sequence[Iterable[int]]]) -> "Polytope":
        """
        Build from vertex count and boundaries of ranks 1 .. n - 1.

        The nullitope and the top element are synthesized: the top covers
        every element of the highest listed rank (every vertex when no
        boundaries are given).

        Args:
            n_vertices: number of rank-0 elements
            boundaries: boundaries[k] lists the rank k + 1 elements, each as
                indices into rank k

        Example:
            triangle = Polytope.from_boundaries(3, [[(0, 1), (1, 2), (2, 0)]])
            segment  = Polytope.from_boundaries(2, [])
        """
        if n_vertices < 1:
            raise OutOfRangeError(f"Need at least one vertex, got {n_vertices}")
        ranks: List[List[Iterable[int]]] = [[()], [(0,)] * n_vertices]
        ranks.extend(list(b) for b in boundaries)
        ranks.append([range(len(ranks[-1]))])
        return cls.from_subelements(ranks)

    # -------------------------------------------------------------------------
    # Basic queries
    # -------------------------------------------------------------------------

    @property
    def rank(self) -> int:
        """Rank n of the polytope (its combinatorial dimension)."""
        return len(self._lists) - 2

    def _check_rank(self, rank: int) -> None:
        if rank < NULLITOPE_RANK or rank > self.rank:
            raise OutOfRangeError(f"Rank {rank} outside [-1, {self.rank}]")

    def _check_element(self, rank: int, index: int) -> None:
        self._check_rank(rank)
        count = len(self._lists[rank + 1])
        if index < 0 or index >= count:
            raise OutOfRangeError(f"Index {index} outside rank {rank} (has {count} elements)")

    def elements(self, rank: int) -> ElementList:
        """The ElementList of one rank."""
        self._check_rank(rank)
        return self._lists[rank + 1]

    def element(self, rank: int, index: int) -> Element:
        self._check_element(rank, index)
        return self._lists[rank + 1][index]

    def element_count(self, rank: int) -> int:
        self._check_rank(rank)
        return len(self._lists[rank + 1])

    def element_count_per_rank(self) -> List[int]:
        """Counts for ranks -1 .. n, e.g. [1, 4, 6, 4, 1] for a tetrahedron."""
        return [len(lst) for lst in self._lists]

    def subelements(self, rank: int, index: int) -> FrozenSet[int]:
        """Indices (into rank - 1) of the elements directly below (rank, index)."""
        self._check_element(rank, index)
        return frozenset(self._lists[rank + 1][index].subelements)

    def superelements(self, rank: int, index: int) -> FrozenSet[int]:
        """Indices (into rank + 1) of the elements directly above (rank, index)."""
        self._check_element(rank, index)
        return frozenset(self._lists[rank + 1][index].superelements)

    def closure_below(self, rank: int, index: int) -> Dict[int, FrozenSet[int]]:
        """All elements <= (rank, index), as {rank: indices}."""
        self._check_element(rank, index)
        levels = {rank: frozenset([index])}
        for r in range(rank, NULLITOPE_RANK, -1):
            lst = self._lists[r + 1]
            levels[r - 1] = frozenset(s for i in levels[r] for s in lst[i].subelements)
        return levels

    def closure_above(self, rank: int, index: int) -> Dict[int, FrozenSet[int]]:
        """All elements >= (rank, index), as {rank: indices}."""
        self._check_element(rank, index)
        levels = {rank: frozenset([index])}
        for r in range(rank, self.rank):
            lst = self._lists[r + 1]
            levels[r + 1] = frozenset(s for i in levels[r] for s in lst[i].superelements)
        return levels

    def element_vertices(self, rank: int, index: int) -> FrozenSet[int]:
        """Vertex indices of an element (empty for the nullitope)."""
        if rank < 0:
            self._check_element(rank, index)
            return frozenset()
        return self.closure_below(rank, index)[0]

    def is_incident(self, low_rank: int, low_index: int,
                    high_rank: int, high_index: int) -> bool:
        """True if (low_rank, low_index) <= (high_rank, high_index)."""
        self._check_element(low_rank, low_index)
        self._check_element(high_rank, high_index)
        if low_rank > high_rank:
            return False
        return low_index in self.closure_below(high_rank, high_index)[low_rank]

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, strict: bool = True) -> Tuple[bool, list]:
        """
        Check the four polytope axioms.

        Args:
            strict: If True, raise the first AxiomViolation found.

        Returns:
            (is_valid, list of AxiomViolation)

        Never mutates the structure; validating twice gives the same result.
        """
        from ..operators.axioms import check_axioms
        return check_axioms(self, strict=strict)

    def is_valid(self) -> bool:
        return self.validate(strict=False)[0]

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def section(self, low_rank: int, low_index: int,
                high_rank: int, high_index: int) -> "Polytope":
        """
        Sub-polytope of all elements between two incident elements.

        The low element becomes the new nullitope, the high element the new
        top, so the result has rank high_rank - low_rank - 1.

        Raises:
            OutOfRangeError: bad rank or index
            NotIncidentError: low element is not below the high element
        """
        from ..builders.constructors import section
        return section(self, low_rank, low_index, high_rank, high_index)

    def vertex_figure(self, vertex_index: int, dualize: bool = True) -> "Polytope":
        """
        Section between a vertex and the top element, dualized by default.

        Args:
            vertex_index: rank-0 index
            dualize: return dual(section) (default) or the plain section
        """
        from ..builders.constructors import vertex_figure
        return vertex_figure(self, vertex_index, dualize=dualize)

    def facet(self, index: int) -> "Polytope":
        """The facet (rank n - 1 element) as a polytope of its own."""
        return self.section(NULLITOPE_RANK, 0, self.rank - 1, index)

    def face(self, rank: int, index: int) -> "Polytope":
        """Any element as a polytope of its own (section over the nullitope)."""
        return self.section(NULLITOPE_RANK, 0, rank, index)

    # -------------------------------------------------------------------------
    # Flags
    # -------------------------------------------------------------------------

    @cached_property
    def flag_engine(self):
        from ..operators.flags import FlagEngine
        return FlagEngine(self)

    def flags(self):
        """Lazy iterator over all flags (tuples of n + 2 indices)."""
        return self.flag_engine.iter_flags()

    def flag_count(self) -> int:
        return self.flag_engine.flag_count()

    def is_orientable(self) -> bool:
        return self.flag_engine.is_orientable()

    # -------------------------------------------------------------------------
    # Concrete layer
    # -------------------------------------------------------------------------

    def with_coordinates(self, mapping):
        """
        Attach coordinates to every vertex.

        Args:
            mapping: sequence of vectors (one per vertex, in vertex order) or
                dict {vertex_index: vector}

        Returns:
            ConcretePolytope

        Raises:
            IncompleteMappingError: some vertex has no coordinates
            DimensionMismatchError: vectors differ in length
        """
        from ..concrete.realization import with_coordinates
        return with_coordinates(self, mapping)

    # -------------------------------------------------------------------------
    # Dunder
    # -------------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polytope):
            return NotImplemented
        return self._lists == other._lists

    def __hash__(self) -> int:
        return hash(self._lists)

    def __repr__(self) -> str:
        tag = ", compound" if self.is_compound else ""
        return f"Polytope(rank={self.rank}, counts={self.element_count_per_rank()}{tag})"


def debug_check(polytope: Polytope, context: str) -> Polytope:
    """
    Re-validate a constructor output when DEBUG_VALIDATE is on.

    A failure here is a defect in the constructor, not bad input, so it is
    reported as AssertionError.
    """
    if constants.DEBUG_VALIDATE:
        valid, violations = polytope.validate(strict=False)
        if not valid:
            raise AssertionError(f"{context} produced an invalid polytope: {violations[0]}")
    return polytope
