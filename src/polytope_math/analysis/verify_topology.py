"""
Topology Verification Functions
===============================

Derived invariants and a one-call summary of a polytope.

EULER CHARACTERISTIC (proper faces):
    chi = sum_{r=0}^{n-1} (-1)^r N_r
    convex n-polytope: chi = 1 - (-1)^n   (2 for polyhedra, 0 for polygons)
    hemicube: chi = 4 - 6 + 3 = 1 (projective plane)

SCHLAFLI TYPE:
    [p_1, ..., p_{n-1}] where p_j is the number of j-faces in every section
    F_{j+1} / F_{j-2} (a polygon). None when some p_j varies (not
    equivelar).
"""

from typing import Any, Dict, List, Optional

from ..spec.errors import PolytopeError
from ..operators.incidence import verify_subelement_counts


def euler_characteristic(polytope) -> int:
    """Alternating count of proper faces, ranks 0 .. n - 1."""
    return sum((-1) ** r * polytope.element_count(r) for r in range(0, polytope.rank))


def schlafli_type(polytope) -> Optional[List[int]]:
    """
    Schlafli type of an equivelar polytope.

    Returns:
        list of n - 1 integers, [] for rank <= 1, None if not equivelar

    Example:
        schlafli_type(cube()) -> [4, 3]
    """
    n = polytope.rank
    result = []
    for j in range(1, n):
        sizes = set()
        for high in range(polytope.element_count(j + 1)):
            below = polytope.closure_below(j + 1, high)
            for low in below[j - 2]:
                above = polytope.closure_above(j - 2, low)
                sizes.add(len(above[j] & below[j]))
        if len(sizes) != 1:
            return None
        result.append(sizes.pop())
    return result


def verify_polytope(polytope) -> Dict[str, Any]:
    """
    Full check of a polytope.

    Returns:
        dict with:
            'rank', 'counts', 'is_compound'
            'valid': bool, 'violations': list of AxiomKind names
            'subelement_counts': {rank: histogram} for ranks 0 .. n
        and, only for valid input:
            'flag_count', 'flag_connected', 'orientable',
            'euler_characteristic', 'schlafli'
    """
    valid, violations = polytope.validate(strict=False)
    result: Dict[str, Any] = {
        'rank': polytope.rank,
        'counts': polytope.element_count_per_rank(),
        'is_compound': polytope.is_compound,
        'valid': valid,
        'violations': [v.kind.name for v in violations],
        'subelement_counts': {
            r: verify_subelement_counts(polytope, r)['histogram']
            for r in range(0, polytope.rank + 1)
        },
    }
    if not valid:
        return result

    engine = polytope.flag_engine
    result.update({
        'flag_count': engine.flag_count(),
        'flag_connected': engine.is_flag_connected(),
        'orientable': engine.is_orientable(),
        'euler_characteristic': euler_characteristic(polytope),
        'schlafli': schlafli_type(polytope),
    })
    return result


def print_summary(polytope, name: str = "Polytope") -> None:
    """Print verify_polytope() as a short report."""
    summary = verify_polytope(polytope)
    print(f"{name}: rank {summary['rank']}, counts {summary['counts']}")
    if not summary['valid']:
        print(f"  INVALID: {', '.join(summary['violations'])}")
        return
    print(f"  flags={summary['flag_count']}, connected={summary['flag_connected']}, "
          f"orientable={summary['orientable']}")
    print(f"  chi={summary['euler_characteristic']}, schlafli={summary['schlafli']}")


if __name__ == "__main__":
    from ..builders.polytopes import cube, hemicube, tetrahedron
    from ..builders.petrie import petrie_dual

    print("=" * 60)
    print("POLYTOPE SUMMARIES")
    print("=" * 60)
    for label, p in [("Tetrahedron", tetrahedron()),
                     ("Cube", cube()),
                     ("Hemicube", hemicube()),
                     ("Petrial of the tetrahedron", petrie_dual(tetrahedron()))]:
        try:
            print_summary(p, label)
        except PolytopeError as exc:
            print(f"{label}: {exc}")
