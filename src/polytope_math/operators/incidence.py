"""
Incidence Matrices and Connectivity
===================================

Pure combinatorics - NO coordinates.

DEFINITIONS:
    A_r: (count(r), count(r-1)) 0/1 matrix, A_r[G, F] = 1 iff F is a
         subelement of G.

DIAMOND IDENTITY:
    (A_{r+2} A_{r+1})[G, F] = #{H : F < H < G}
    For a polytope every NONZERO entry equals 2.

    This is the unsigned analogue of exactness d_{r+1} d_r = 0: with an
    orientation the two paths through the diamond cancel, without one they
    add up to exactly 2.

COUNT IDENTITIES:
    sum(A_r) = number of (r-1, r) incidences
    Every rank-1 row of A_1 has exactly 2 entries (edges are dyads).

Matrices are scipy.sparse CSR: high-rank polytopes have very sparse
incidence.
"""

from collections import deque
from typing import Any, Dict, List, Tuple

import numpy as np
import scipy.sparse as sp

from ..spec.constants import NULLITOPE_RANK
from ..spec.errors import OutOfRangeError


def incidence_matrix(polytope, rank: int) -> sp.csr_matrix:
    """
    Build the 0/1 incidence matrix between rank and rank - 1.

    Args:
        polytope: Polytope
        rank: upper rank, in [0, n]

    Returns:
        A: (count(rank), count(rank - 1)) CSR matrix of int64

    PROPERTY:
        Row sums are subelement counts, column sums superelement counts.
    """
    if rank <= NULLITOPE_RANK or rank > polytope.rank:
        raise OutOfRangeError(f"Incidence matrix needs rank in [0, {polytope.rank}], got {rank}")

    upper = polytope.elements(rank)
    n_lower = polytope.element_count(rank - 1)

    rows, cols = [], []
    for i, element in enumerate(upper):
        rows.extend([i] * len(element.subelements))
        cols.extend(element.subelements)

    data = np.ones(len(rows), dtype=np.int64)
    return sp.csr_matrix((data, (rows, cols)), shape=(len(upper), n_lower))


def diamond_matrix(polytope, rank: int) -> sp.csr_matrix:
    """
    Count the elements between every incident pair two ranks apart.

    Args:
        rank: rank of the UPPER element G, in [1, n]

    Returns:
        D: (count(rank), count(rank - 2)) CSR matrix,
           D[G, F] = number of H with F < H < G
    """
    return incidence_matrix(polytope, rank) @ incidence_matrix(polytope, rank - 1)


def count_connected_components(polytope, low: int, high: int) -> int:
    """
    Count connected components of the incidence graph on ranks low .. high.

    Vertices of the graph are the elements with low <= rank <= high, edges
    are the sub/super relations between them.

    Args:
        low, high: inclusive rank window

    Returns:
        c: number of connected components (0 if the window is empty)

    NOTE:
        BFS over (rank, index) pairs; deque for O(1) popleft.
    """
    low = max(low, NULLITOPE_RANK)
    high = min(high, polytope.rank)
    if low > high:
        return 0

    visited = {r: [False] * polytope.element_count(r) for r in range(low, high + 1)}
    components = 0

    for start_rank in range(low, high + 1):
        for start in range(polytope.element_count(start_rank)):
            if visited[start_rank][start]:
                continue
            queue = deque([(start_rank, start)])
            visited[start_rank][start] = True
            while queue:
                r, i = queue.popleft()
                element = polytope.elements(r)[i]
                if r > low:
                    for s in element.subelements:
                        if not visited[r - 1][s]:
                            visited[r - 1][s] = True
                            queue.append((r - 1, s))
                if r < high:
                    for s in element.superelements:
                        if not visited[r + 1][s]:
                            visited[r + 1][s] = True
                            queue.append((r + 1, s))
            components += 1

    return components


def connected_components(polytope, low: int, high: int) -> List[Dict[int, List[int]]]:
    """
    Connected components of the incidence graph on ranks low .. high.

    Returns:
        list of {rank: sorted indices}, one dict per component, in order of
        first element found
    """
    low = max(low, NULLITOPE_RANK)
    high = min(high, polytope.rank)
    label = {r: [-1] * polytope.element_count(r) for r in range(low, high + 1)}
    components: List[Dict[int, List[int]]] = []

    for start_rank in range(low, high + 1):
        for start in range(polytope.element_count(start_rank)):
            if label[start_rank][start] >= 0:
                continue
            comp_id = len(components)
            members: Dict[int, List[int]] = {r: [] for r in range(low, high + 1)}
            queue = deque([(start_rank, start)])
            label[start_rank][start] = comp_id
            while queue:
                r, i = queue.popleft()
                members[r].append(i)
                element = polytope.elements(r)[i]
                neighbours = []
                if r > low:
                    neighbours.extend((r - 1, s) for s in element.subelements)
                if r < high:
                    neighbours.extend((r + 1, s) for s in element.superelements)
                for nr, ni in neighbours:
                    if label[nr][ni] < 0:
                        label[nr][ni] = comp_id
                        queue.append((nr, ni))
            components.append({r: sorted(v) for r, v in members.items()})

    return components


# =============================================================================
# UNIVERSAL VERIFICATION HELPERS
# =============================================================================

def verify_subelement_counts(polytope, rank: int, k: int = None) -> Dict[str, Any]:
    """
    Histogram of subelement counts at one rank.

    Typical invariants:
        - rank 1: every edge has exactly k=2 vertices
        - rank 2 of a {p, q} polyhedron: every face has k=p edges

    Args:
        rank: rank to inspect, in [0, n]
        k: expected count per element, or None to only report

    Returns:
        dict with:
            'valid': bool - all elements have exactly k subelements
                     (True when k is None and the histogram is uniform)
            'min', 'max': int
            'expected': k
            'histogram': {count: n_elements_with_that_count}
    """
    counts = np.asarray(incidence_matrix(polytope, rank).sum(axis=1)).ravel()
    if counts.size == 0:
        return {'valid': True, 'min': 0, 'max': 0, 'expected': k, 'histogram': {}}

    c_min, c_max = int(counts.min()), int(counts.max())
    unique, freq = np.unique(counts, return_counts=True)
    histogram = {int(u): int(c) for u, c in zip(unique, freq)}

    if k is None:
        valid = c_min == c_max
    else:
        valid = c_min == c_max == k

    return {
        'valid': valid,
        'min': c_min,
        'max': c_max,
        'expected': k,
        'histogram': histogram,
    }


def incidence_symmetry_errors(polytope) -> List[Tuple[int, int, int]]:
    """
    List (rank, index, sub) triples where sub/super storage disagrees.

    Always empty for structures built by Polytope.assemble(); used as a
    guard for hand-built element lists.
    """
    errors = []
    for rank in range(0, polytope.rank + 1):
        below = polytope.elements(rank - 1)
        for idx, element in enumerate(polytope.elements(rank)):
            for s in element.subelements:
                if idx not in below[s].superelements:
                    errors.append((rank, idx, s))
        for s_idx, element in enumerate(below):
            for sup in element.superelements:
                if s_idx not in polytope.elements(rank)[sup].subelements:
                    errors.append((rank, sup, s_idx))
    return errors
