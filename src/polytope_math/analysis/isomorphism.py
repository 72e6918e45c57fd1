"""
Polytope Isomorphism
====================

P ~ Q iff there is a rank-preserving bijection of elements that preserves
incidence.

METHOD (flag maps):
    An isomorphism maps flags to flags and commutes with every adjacency:
        phi(Phi^i) = phi(Phi)^i
    So on a flag-connected polytope it is fixed by the image of ONE flag.
    Try every target flag for a base flag, grow the map by BFS along
    adjacencies, reject on the first inconsistency.

    Structures that are not flag-connected (compounds) are matched one
    flag component at a time, backtracking over the target components.

COST:
    O(flags^2 * n) for flag-connected inputs: fine for the polytopes this
    package builds, not meant for large 4-polytopes.
"""

from collections import deque
from typing import Dict, List, Optional

from ..spec.constants import NULLITOPE_RANK


def _grow(P_engine, Q_engine, start, target, flag_map, elem_map, elem_inv):
    """
    Extend the partial maps from start -> target along all adjacencies.

    Returns:
        (flag_map, elem_map, elem_inv) extended copies, or None on conflict
    """
    n = P_engine.polytope.rank
    flag_map, elem_map, elem_inv = dict(flag_map), dict(elem_map), dict(elem_inv)
    images = set(flag_map.values())
    if target in images:
        return None

    flag_map[start] = target
    images.add(target)
    queue = deque([(start, target)])
    while queue:
        f, g = queue.popleft()
        for r in range(NULLITOPE_RANK, n + 1):
            src, dst = (r, f[r + 1]), (r, g[r + 1])
            if elem_map.setdefault(src, dst) != dst or elem_inv.setdefault(dst, src) != src:
                return None
        for i in range(n):
            f_adj = P_engine.adjacent(f, i)
            g_adj = Q_engine.adjacent(g, i)
            if f_adj in flag_map:
                if flag_map[f_adj] != g_adj:
                    return None
                continue
            if g_adj in images:
                return None
            flag_map[f_adj] = g_adj
            images.add(g_adj)
            queue.append((f_adj, g_adj))
    return flag_map, elem_map, elem_inv


def _search(P_engine, Q_engine, P_flags, Q_flags, flag_map, elem_map, elem_inv):
    start = next((f for f in P_flags if f not in flag_map), None)
    if start is None:
        return elem_map

    used = set(flag_map.values())
    for target in Q_flags:
        if target in used:
            continue
        grown = _grow(P_engine, Q_engine, start, target, flag_map, elem_map, elem_inv)
        if grown is None:
            continue
        found = _search(P_engine, Q_engine, P_flags, Q_flags, *grown)
        if found is not None:
            return found
    return None


def find_isomorphism(P, Q) -> Optional[Dict[int, List[int]]]:
    """
    Find an incidence-preserving bijection P -> Q.

    Returns:
        {rank: images} with images[i] the index in Q of element i of P,
        for ranks -1 .. n; None if P and Q are not isomorphic.

    Example:
        >>> find_isomorphism(prism(segment()), polygon(4)) is not None
        True
    """
    counts = P.element_count_per_rank()
    if counts != Q.element_count_per_rank():
        return None

    n = P.rank
    if n <= 0:
        # nullitope or point: a single element per rank
        return {r: [0] for r in range(NULLITOPE_RANK, n + 1)}
    if P.flag_count() != Q.flag_count():
        return None

    P_flags = list(P.flags())
    Q_flags = list(Q.flags())
    elem_map = _search(P.flag_engine, Q.flag_engine, P_flags, Q_flags, {}, {}, {})
    if elem_map is None:
        return None

    mapping = {r: [None] * counts[r + 1] for r in range(NULLITOPE_RANK, n + 1)}
    for (r, i), (_, j) in elem_map.items():
        mapping[r][i] = j
    if any(None in images for images in mapping.values()):
        # some element lies in no flag; only possible for invalid input
        return None
    return mapping


def is_isomorphic(P, Q) -> bool:
    return find_isomorphism(P, Q) is not None
