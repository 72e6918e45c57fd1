"""
Analysis functions - depend on operators layer.

Derived queries on finished polytopes. Layering:
    builders -> operators -> spec
    analysis -> operators -> spec

Includes:
- isomorphism: flag-map isomorphism test
- verify_topology: Euler characteristic, Schlafli type, summary dict
"""

from .isomorphism import find_isomorphism, is_isomorphic
from .verify_topology import (
    euler_characteristic,
    schlafli_type,
    verify_polytope,
    print_summary,
)
