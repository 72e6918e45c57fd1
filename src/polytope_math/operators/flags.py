"""
Flag Engine
===========

A flag is a maximal chain: one element per rank -1 .. n, each a
subelement of the next. Stored as a tuple of n + 2 indices, position
r + 1 holding the rank-r element.

FLAGS ARE NEVER STORED on the polytope. They are produced lazily by a
depth-first chain extension, or counted without enumeration.

FLAG COUNT (no enumeration):
    chains(F) = sum(chains(H) for H in subs(F)),  chains(nullitope) = 1
    flag_count = chains(top)
    Branching varies by element, so a product of branching factors is NOT
    the flag count in general.

ADJACENCY:
    Flags Phi and Psi are i-adjacent (0 <= i < n) if they differ exactly at
    rank i. By the diamond condition every flag has exactly one i-adjacent
    flag: the other element between Phi[i-1] and Phi[i+1].

ORIENTABILITY:
    The flag graph (flags + adjacencies) is bipartite.
    Rank <= 1: orientable by definition.
"""

import warnings
from collections import deque
from typing import Callable, Dict, Iterable, Iterator, List, Tuple

from ..spec.constants import NULLITOPE_RANK
from ..spec.errors import InvalidChainError, OutOfRangeError

Flag = Tuple[int, ...]


class FlagEngine:
    """
    Flag queries for one polytope.

    The polytope is immutable, so the flag count is memoized on first use.
    """

    def __init__(self, polytope):
        self.polytope = polytope
        self._flag_count = None

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def iter_flags(self) -> Iterator[Flag]:
        """
        Yield every flag, depth-first over ranks 0 .. n.

        Not restartable mid-traversal; call again for a fresh iterator.

        Raises:
            InvalidChainError: a partial chain cannot be extended (broken
                structure) or the nullitope is not unique
        """
        p = self.polytope
        n = p.rank
        if p.element_count(NULLITOPE_RANK) != 1:
            raise InvalidChainError(
                f"Flag traversal needs a unique nullitope, found "
                f"{p.element_count(NULLITOPE_RANK)}")

        stack: List[Flag] = [(0,)]
        while stack:
            chain = stack.pop()
            rank = len(chain) - 2  # rank of the last element
            if rank == n:
                yield chain
                continue
            last = p.elements(rank)[chain[-1]]
            if not last.superelements:
                raise InvalidChainError(
                    f"Chain {chain} ends at element {chain[-1]} of rank {rank}: "
                    f"no superelement at rank {rank + 1}")
            # reversed so that flags come out in ascending index order
            for sup in reversed(last.superelements):
                stack.append(chain + (sup,))

    def flag_count(self) -> int:
        """Number of flags, by chain counting (no enumeration). Memoized."""
        if self._flag_count is None:
            p = self.polytope
            chains = [1] * p.element_count(NULLITOPE_RANK)
            for rank in range(0, p.rank + 1):
                chains = [sum(chains[s] for s in element.subelements)
                          for element in p.elements(rank)]
            self._flag_count = sum(chains)
        return self._flag_count

    def first_flag(self) -> Flag:
        """The flag with the smallest index at every rank (as extended greedily)."""
        return next(self.iter_flags())

    # -------------------------------------------------------------------------
    # Adjacency
    # -------------------------------------------------------------------------

    def adjacent(self, flag: Flag, i: int) -> Flag:
        """
        The i-adjacent flag: same elements except at rank i.

        Args:
            flag: tuple of n + 2 indices
            i: rank to change, in [0, n - 1]

        Raises:
            OutOfRangeError: i outside [0, n - 1] or flag of wrong length
            InvalidChainError: not exactly one replacement exists
        """
        p = self.polytope
        n = p.rank
        if len(flag) != n + 2:
            raise OutOfRangeError(f"Flag {flag} has length {len(flag)}, expected {n + 2}")
        if i < 0 or i >= n:
            raise OutOfRangeError(f"Flag change rank {i} outside [0, {n - 1}]")

        below = p.elements(i - 1)[flag[i]]
        above = p.elements(i + 1)[flag[i + 2]]
        candidates = set(below.superelements).intersection(above.subelements)
        candidates.discard(flag[i + 1])
        if len(candidates) != 1:
            raise InvalidChainError(
                f"Flag {flag}: {len(candidates)} alternatives at rank {i}, expected 1 "
                f"(diamond condition broken)")
        (other,) = candidates
        return flag[:i + 1] + (other,) + flag[i + 2:]

    def walk(self, flag: Flag, ranks: Iterable[int]) -> Flag:
        """Apply adjacent() for each rank in sequence."""
        for i in ranks:
            flag = self.adjacent(flag, i)
        return flag

    # -------------------------------------------------------------------------
    # Global properties
    # -------------------------------------------------------------------------

    def _colour_components(self) -> Tuple[bool, int]:
        """
        2-colour the flag graph by BFS.

        Returns:
            (bipartite, number of connected components of the flag graph)
        """
        n = self.polytope.rank
        colour: Dict[Flag, int] = {}
        bipartite = True
        components = 0

        for start in self.iter_flags():
            if start in colour:
                continue
            components += 1
            colour[start] = 0
            queue = deque([start])
            while queue:
                flag = queue.popleft()
                c = colour[flag]
                for i in range(n):
                    other = self.adjacent(flag, i)
                    if other not in colour:
                        colour[other] = 1 - c
                        queue.append(other)
                    elif colour[other] == c:
                        bipartite = False
        return bipartite, components

    def is_orientable(self) -> bool:
        """
        True iff the flag graph is bipartite.

        Rank <= 1 is orientable by definition. A structure that is not
        flag-connected (e.g. a compound) is orientable iff every component
        is; a UserWarning is issued in that case.
        """
        if self.polytope.rank <= 1:
            return True
        bipartite, components = self._colour_components()
        if components > 1:
            warnings.warn(
                f"Flag graph has {components} components; orientability was decided "
                f"per component.",
                UserWarning
            )
        return bipartite

    def is_flag_connected(self) -> bool:
        """True iff every flag is reachable from every other by adjacencies."""
        if self.polytope.rank <= 0:
            return True
        start = self.first_flag()
        seen = {start}
        queue = deque([start])
        while queue:
            flag = queue.popleft()
            for i in range(self.polytope.rank):
                other = self.adjacent(flag, i)
                if other not in seen:
                    seen.add(other)
                    queue.append(other)
        return len(seen) == self.flag_count()

    def flag_orbits(self, generators: Iterable[Callable[[Flag], Flag]]) -> List[List[Flag]]:
        """
        Partition the flags into orbits under a set of flag maps.

        Args:
            generators: callables flag -> flag (e.g. automorphisms acting on
                flags, or compositions of adjacent())

        Returns:
            list of orbits, each a sorted list of flags; orbits ordered by
            their smallest flag

        Example:
            even = [lambda f, i=i: engine.walk(f, (i, i + 1)) for i in range(n - 1)]
            len(engine.flag_orbits(even)) == 2   # for orientable polytopes
        """
        generators = list(generators)
        orbit_of: Dict[Flag, int] = {}
        orbits: List[List[Flag]] = []

        for start in self.iter_flags():
            if start in orbit_of:
                continue
            orbit_id = len(orbits)
            orbit_of[start] = orbit_id
            members = [start]
            queue = deque([start])
            while queue:
                flag = queue.popleft()
                for g in generators:
                    image = g(flag)
                    if image not in orbit_of:
                        orbit_of[image] = orbit_id
                        members.append(image)
                        queue.append(image)
            orbits.append(sorted(members))

        return sorted(orbits, key=lambda orbit: orbit[0])
