"""
Polytope Axioms
===============

The four axioms, checked in order:

    1. MISSING_EXTREMA       exactly one element at rank -1 and at rank n
    2. UNEQUAL_CHAIN_LENGTH  every element below n has a superelement,
                             every element above -1 has a subelement
                             (so every maximal chain visits all n + 2 ranks)
    3. DIAMOND_VIOLATION     exactly 2 elements between any F < G with
                             rank(G) - rank(F) = 2
    4. DISCONNECTED          for n >= 2 the proper part (ranks 0 .. n-1)
                             is connected (waived for compounds)

Axiom 1 + 2 together give "the extrema are incident to everything": a
chain can be extended from any element down to the unique minimum and up
to the unique maximum.

The diamond check uses the matrix identity from incidence.py:
    (A_{r+2} A_{r+1})[G, F] == 2 for every nonzero entry.
"""

from typing import List, Tuple

import numpy as np

from ..spec.constants import NULLITOPE_RANK
from ..spec.errors import AxiomKind, AxiomViolation
from .incidence import count_connected_components, diamond_matrix


def check_extrema(polytope) -> List[AxiomViolation]:
    n = polytope.rank
    violations = []
    for rank in sorted({NULLITOPE_RANK, n}):
        count = polytope.element_count(rank)
        if count != 1:
            violations.append(AxiomViolation(
                AxiomKind.MISSING_EXTREMA,
                f"rank {rank} has {count} elements, expected exactly 1",
                [(rank, i) for i in range(count)],
            ))
    return violations


def check_chain_lengths(polytope) -> List[AxiomViolation]:
    n = polytope.rank
    violations = []
    for rank in range(NULLITOPE_RANK, n + 1):
        for idx, element in enumerate(polytope.elements(rank)):
            if rank > NULLITOPE_RANK and not element.subelements:
                violations.append(AxiomViolation(
                    AxiomKind.UNEQUAL_CHAIN_LENGTH,
                    f"element {idx} of rank {rank} has no subelements; "
                    f"chains through it stop at rank {rank}",
                    [(rank, idx)],
                ))
            if rank < n and not element.superelements:
                violations.append(AxiomViolation(
                    AxiomKind.UNEQUAL_CHAIN_LENGTH,
                    f"element {idx} of rank {rank} has no superelements; "
                    f"chains through it stop at rank {rank}",
                    [(rank, idx)],
                ))
    return violations


def check_diamonds(polytope) -> List[AxiomViolation]:
    violations = []
    for upper in range(1, polytope.rank + 1):
        D = diamond_matrix(polytope, upper).tocoo()
        bad = np.where(D.data != 2)[0]
        for k in bad:
            g, f, between = int(D.row[k]), int(D.col[k]), int(D.data[k])
            violations.append(AxiomViolation(
                AxiomKind.DIAMOND_VIOLATION,
                f"{between} elements of rank {upper - 1} between element {f} of "
                f"rank {upper - 2} and element {g} of rank {upper}, expected 2",
                [(upper - 2, f), (upper, g)],
            ))
    return violations


def check_connectedness(polytope) -> List[AxiomViolation]:
    n = polytope.rank
    if n < 2 or polytope.is_compound:
        return []
    c = count_connected_components(polytope, 0, n - 1)
    if c != 1:
        return [AxiomViolation(
            AxiomKind.DISCONNECTED,
            f"proper part (ranks 0..{n - 1}) has {c} connected components",
        )]
    return []


def check_axioms(polytope, strict: bool = True) -> Tuple[bool, List[AxiomViolation]]:
    """
    Validate a polytope against the four axioms.

    Later checks assume the earlier ones, so checking stops at the first
    axiom with violations.

    Args:
        polytope: Polytope
        strict: If True, raise the first violation

    Returns:
        (is_valid, list of AxiomViolation)

    Raises:
        AxiomViolation: if strict and invalid
    """
    for check in (check_extrema, check_chain_lengths, check_diamonds, check_connectedness):
        violations = check(polytope)
        if violations:
            if strict:
                raise violations[0]
            return False, violations
    return True, []
