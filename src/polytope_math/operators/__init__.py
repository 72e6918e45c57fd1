"""Incidence operators - incidence matrices, axioms, flags."""

from .incidence import (
    incidence_matrix,
    diamond_matrix,
    count_connected_components,
    connected_components,
    verify_subelement_counts,
    incidence_symmetry_errors,
)

from .axioms import check_axioms

from .flags import FlagEngine
