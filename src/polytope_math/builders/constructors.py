"""
Combinatorial Constructors
==========================

Every constructor is a pure function: valid polytope(s) in, NEW valid
polytope out. Inputs are never modified and the output shares no storage
with them.

PRECONDITIONS are checked before any output is allocated. POSTCONDITION
(the four axioms) holds by construction; DEBUG_VALIDATE re-checks it.

PAIR PRODUCTS (elements are pairs (F, G), F in P, G in Q):

    join(P, Q)           all pairs            rank = rF + rG + 1
    prism_product(P, Q)  rF >= 0 and rG >= 0   rank = rF + rG      + new nullitope
    tegum(P, Q)          F != top, G != top   rank = rF + rG + 1  + new top

    Covering relation in all three: (F', G) and (F, G') for F' in subs(F),
    G' in subs(G), whenever the pair is itself an element.

    Within one rank, pairs are listed by rank of F DESCENDING, then
    row-major (i over P, j over Q). For rank 0 this gives:
        join:    P's vertices, then Q's vertices
        prism:   vertex (i, j) at index i * |Q_0| + j
        tegum:   P's vertices, then Q's vertices
    The concrete layer relies on this order to place coordinates.

PROOF SKETCHES:
    dual        axioms are self-dual
    section     an interval of a polytope is a polytope
    join        intervals of the join are joins of intervals (diamonds are
                either diamonds of P, diamonds of Q, or the square
                {(F', G), (F, G')} between (F', G') and (F, G))
    prism/tegum dual pair: tegum(P, Q) = dual(prism_product(P*, Q*))
    antiprism   composition of the above
    compound    diamonds lie inside one component or contain an extremum
                with a gap of >= 3 ranks (needs rank >= 2)
"""

from typing import Dict, List, Tuple

from ..spec.constants import MIN_COMPOUND_RANK, NULLITOPE_RANK
from ..spec.errors import NotIncidentError, OutOfRangeError, RankMismatchError
from ..spec.structures import Polytope, debug_check
from ..operators.incidence import connected_components


# =============================================================================
# DUALITY AND SECTIONS
# =============================================================================

def dual(polytope: Polytope) -> Polytope:
    """
    Reverse the rank order: rank r -> rank n - 1 - r, subs <-> sups.

    Element order within a rank is kept, so vertex i of the dual is
    facet i of the input.
    """
    n = polytope.rank
    ranks = [[element.superelements for element in polytope.elements(n - k)]
             for k in range(n + 2)]
    result = Polytope.assemble(ranks, is_compound=polytope.is_compound)
    return debug_check(result, "dual")


def section(polytope: Polytope, low_rank: int, low_index: int,
            high_rank: int, high_index: int) -> Polytope:
    """
    All elements E with low <= E <= high, reindexed.

    The low element becomes rank -1, the high element rank
    high_rank - low_rank - 1. Relative order of the kept elements is
    preserved.

    Raises:
        OutOfRangeError: bad rank or index
        NotIncidentError: low is not <= high
    """
    polytope.element(low_rank, low_index)
    polytope.element(high_rank, high_index)

    if low_rank > high_rank:
        raise NotIncidentError(
            f"Low element has rank {low_rank} above high element rank {high_rank}")

    below_high = polytope.closure_below(high_rank, high_index)
    if low_index not in below_high[low_rank]:
        raise NotIncidentError(
            f"Element {low_index} of rank {low_rank} is not a subelement of "
            f"element {high_index} of rank {high_rank}")

    above_low = polytope.closure_above(low_rank, low_index)
    kept = {r: sorted(above_low[r] & below_high[r]) for r in range(low_rank, high_rank + 1)}
    new_index = {r: {old: new for new, old in enumerate(kept[r])}
                 for r in kept}

    ranks: List[List[List[int]]] = [[[]]]
    for r in range(low_rank + 1, high_rank + 1):
        lower = new_index[r - 1]
        layer = polytope.elements(r)
        ranks.append([[lower[s] for s in layer[i].subelements if s in lower]
                      for i in kept[r]])

    # the full interval is the whole polytope, compound or not
    whole = low_rank == NULLITOPE_RANK and high_rank == polytope.rank
    result = Polytope.assemble(ranks, is_compound=whole and polytope.is_compound)
    return debug_check(result, "section")


def vertex_figure(polytope: Polytope, vertex_index: int, dualize: bool = True) -> Polytope:
    """
    Section from a vertex to the top element, dualized by default.

    The plain section (dualize=False) has the edges at the vertex as its
    vertices.
    """
    n = polytope.rank
    if n < 0:
        raise OutOfRangeError("The nullitope has no vertices")
    figure = section(polytope, 0, vertex_index, n, 0)
    return dual(figure) if dualize else figure


# =============================================================================
# PAIR PRODUCTS
# =============================================================================

PairKey = Tuple[int, int, int, int]  # (rank_F, F, rank_G, G)


def _pair_subelements(P: Polytope, Q: Polytope, a: int, i: int, b: int, j: int,
                      index: Dict[PairKey, int]) -> List[int]:
    """Covered pairs (F', G) and (F, G') that exist in the product."""
    subs = []
    if a >= 0:
        for s in P.elements(a)[i].subelements:
            key = (a - 1, s, b, j)
            if key in index:
                subs.append(index[key])
    if b >= 0:
        for s in Q.elements(b)[j].subelements:
            key = (a, i, b - 1, s)
            if key in index:
                subs.append(index[key])
    return subs


def _pair_layer(P: Polytope, Q: Polytope, rank_pairs, index: Dict[PairKey, int]) -> List[List[int]]:
    """Build one output rank from the (rank_F, rank_G) pairs that land in it."""
    layer: List[List[int]] = []
    for a, b in rank_pairs:
        for i in range(P.element_count(a)):
            for j in range(Q.element_count(b)):
                subs = _pair_subelements(P, Q, a, i, b, j, index)
                index[(a, i, b, j)] = len(layer)
                layer.append(subs)
    return layer


def join(P: Polytope, Q: Polytope) -> Polytope:
    """
    Free join: every pair (F, G), rank rF + rG + 1.

    rank(join) = rank(P) + rank(Q) + 1. join(P, point) is the pyramid,
    join(P, nullitope) is P itself.
    """
    n, m = P.rank, Q.rank
    index: Dict[PairKey, int] = {}
    ranks = []
    for k in range(NULLITOPE_RANK, n + m + 2):
        pairs = [(a, k - 1 - a) for a in range(n, NULLITOPE_RANK - 1, -1)
                 if NULLITOPE_RANK <= k - 1 - a <= m]
        ranks.append(_pair_layer(P, Q, pairs, index))
    return debug_check(Polytope.assemble(ranks), "join")


def pyramid(polytope: Polytope) -> Polytope:
    """
    Join with a point: one new apex vertex (the LAST vertex), rank + 1.

    Every element F of P gives F and F + apex; P's top becomes the base
    facet.
    """
    from .polytopes import point
    return join(polytope, point())


def prism_product(P: Polytope, Q: Polytope) -> Polytope:
    """
    Cartesian (prism) product: pairs of non-null elements, rank rF + rG.

    rank = rank(P) + rank(Q). Vertex (i, j) has index i * |Q_0| + j.

    Raises:
        RankMismatchError: either operand is the nullitope
    """
    n, m = P.rank, Q.rank
    if n < 0 or m < 0:
        raise RankMismatchError(f"Prism product needs ranks >= 0, got {n} and {m}")

    index: Dict[PairKey, int] = {}
    ranks: List[List[List[int]]] = [[[]]]
    for k in range(0, n + m + 1):
        pairs = [(a, k - a) for a in range(n, -1, -1) if 0 <= k - a <= m]
        layer = _pair_layer(P, Q, pairs, index)
        if k == 0:
            layer = [[0] for _ in layer]
        ranks.append(layer)
    return debug_check(Polytope.assemble(ranks), "prism_product")


def prism(polytope: Polytope) -> Polytope:
    """
    Prism over P: product with a segment, rank + 1.

    Every element has a bottom copy (index 2i) and a top copy (2i + 1);
    vertex copies are joined by new edges.
    """
    from .polytopes import segment
    return prism_product(polytope, segment())


def tegum(P: Polytope, Q: Polytope) -> Polytope:
    """
    Tegum (direct sum): pairs of non-top elements, rank rF + rG + 1, plus
    a new top.

    rank = rank(P) + rank(Q), for equal or unequal ranks. Facets are
    (facet of P, facet of Q). Vertices: P's, then Q's.

    tegum(P, Q) is dual to prism_product(dual(P), dual(Q)).

    Raises:
        RankMismatchError: either operand is the nullitope
    """
    n, m = P.rank, Q.rank
    if n < 0 or m < 0:
        raise RankMismatchError(f"Tegum needs ranks >= 0, got {n} and {m}")

    index: Dict[PairKey, int] = {}
    ranks = []
    for k in range(NULLITOPE_RANK, n + m):
        pairs = [(a, k - 1 - a) for a in range(n - 1, NULLITOPE_RANK - 1, -1)
                 if NULLITOPE_RANK <= k - 1 - a <= m - 1]
        ranks.append(_pair_layer(P, Q, pairs, index))
    ranks.append([range(len(ranks[-1]))])
    return debug_check(Polytope.assemble(ranks), "tegum")


def bipyramid(polytope: Polytope) -> Polytope:
    """Tegum with a segment: two apexes (the last two vertices), rank + 1."""
    from .polytopes import segment
    return tegum(polytope, segment())


# =============================================================================
# ANTIPRISMS
# =============================================================================

def antiprism(polytope: Polytope) -> Polytope:
    """
    Compositional antiprism: dual(prism(dual(P))).

    Validity follows from dual and prism. Combinatorially this is the
    bipyramid over P; see lattice_antiprism() for the classical
    antiprism.
    """
    if polytope.rank < 0:
        raise RankMismatchError("Antiprism needs rank >= 0")
    return dual(prism(dual(polytope)))


def lattice_antiprism(polytope: Polytope) -> Polytope:
    """
    Classical antiprism from the face lattice.

    ELEMENTS:
        (F, G) with F <= G in P, rank rF - rG + n, plus a new top.
        (F, G) <= (F', G')  iff  F <= F' and G' <= G.

    The rank-n elements are the pairs (F, F): (nullitope, nullitope) and
    (top, top) are the two bases, the rest are the lateral facets.
    Vertices: (v, top) for every vertex v (the base copy of P) and
    (nullitope, facet) for every facet (the base copy of P*).

    Example:
        lattice_antiprism(square) -> [1, 8, 16, 10, 1]
    """
    n = polytope.rank
    if n < 0:
        raise RankMismatchError("Antiprism needs rank >= 0")

    below = {(b, j): polytope.closure_below(b, j)
             for b in range(NULLITOPE_RANK, n + 1)
             for j in range(polytope.element_count(b))}

    index: Dict[Tuple[int, int, int, int], int] = {}
    ranks = []
    for k in range(NULLITOPE_RANK, n + 1):
        layer: List[List[int]] = []
        for b in range(n, NULLITOPE_RANK - 1, -1):
            a = k - n + b
            if a < NULLITOPE_RANK or a > b:
                continue
            for j in range(polytope.element_count(b)):
                G = polytope.elements(b)[j]
                for i in sorted(below[(b, j)][a]):
                    subs = []
                    if a >= 0:
                        subs.extend(index[(a - 1, s, b, j)]
                                    for s in polytope.elements(a)[i].subelements)
                    if b < n:
                        subs.extend(index[(a, i, b + 1, s)]
                                    for s in G.superelements)
                    index[(a, i, b, j)] = len(layer)
                    layer.append(subs)
        ranks.append(layer)
    ranks.append([range(len(ranks[-1]))])
    return debug_check(Polytope.assemble(ranks), "lattice_antiprism")


# =============================================================================
# COMPOUNDS
# =============================================================================

def compound(P: Polytope, Q: Polytope) -> Polytope:
    """
    Disjoint union sharing only the nullitope and the top.

    Elements of ranks 0 .. n-1: P's first, then Q's. The result is marked
    is_compound (its proper part is disconnected by design).

    Raises:
        RankMismatchError: rank(P) != rank(Q), or rank < 2
    """
    n = P.rank
    if Q.rank != n:
        raise RankMismatchError(f"Compound needs equal ranks, got {P.rank} and {Q.rank}")
    if n < MIN_COMPOUND_RANK:
        raise RankMismatchError(
            f"Compound needs rank >= {MIN_COMPOUND_RANK}, got {n} "
            f"(lower-rank compounds break the diamond condition)")

    ranks: List[List[List[int]]] = [[[]]]
    for r in range(0, n):
        offset = 0 if r == 0 else P.element_count(r - 1)
        layer = [list(e.subelements) for e in P.elements(r)]
        layer.extend([s + offset for s in e.subelements] for e in Q.elements(r))
        ranks.append(layer)
    ranks.append([range(P.element_count(n - 1) + Q.element_count(n - 1))])
    return debug_check(Polytope.assemble(ranks, is_compound=True), "compound")


def split_compound(polytope: Polytope) -> List[Polytope]:
    """
    Components of a compound, each as a polytope of its own.

    A connected polytope (or rank < 2) comes back as [polytope].
    """
    n = polytope.rank
    if n < MIN_COMPOUND_RANK:
        return [polytope]
    components = connected_components(polytope, 0, n - 1)
    if len(components) == 1:
        return [polytope]

    parts = []
    for members in components:
        new_index = {r: {old: new for new, old in enumerate(members[r])} for r in members}
        ranks: List[List[List[int]]] = [[[]], [[0] for _ in members[0]]]
        for r in range(1, n):
            ranks.append([[new_index[r - 1][s] for s in polytope.elements(r)[i].subelements]
                          for i in members[r]])
        ranks.append([range(len(members[n - 1]))])
        parts.append(debug_check(Polytope.assemble(ranks), "split_compound"))
    return parts
