"""
polytope_math source tree
=========================

Modules:
    polytope_math - abstract and concrete polytope engine
    tests         - Test suite

Requirements:
    Python >= 3.9
    numpy >= 1.20
    scipy >= 1.11
"""

import sys

# Python version check (functools.cached_property, dict ordering)
if sys.version_info < (3, 9):
    raise ImportError(f"polytope_math requires Python >= 3.9, got {sys.version}")

# scipy version check (sparse incidence matrices, ConvexHull)
import scipy
_scipy_version = tuple(int(p) for p in scipy.__version__.split('.')[:2] if p.isdigit())
if _scipy_version < (1, 11):
    raise ImportError(f"polytope_math requires scipy >= 1.11, got {scipy.__version__}")

# numpy version check
import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"polytope_math requires numpy >= 1.20, got {np.__version__}")
