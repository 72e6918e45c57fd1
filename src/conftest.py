"""
Pytest Configuration
====================

Loaded by pytest before the test modules. Puts src/ on sys.path so
polytope_math imports without installation.

Usage:
    cd src
    pytest tests/ -v
"""

import sys
from pathlib import Path

import pytest


src_root = Path(__file__).parent
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))


@pytest.fixture
def debug_validation(monkeypatch):
    """Force constructor re-validation on, even under python -O."""
    from polytope_math.spec import constants
    monkeypatch.setattr(constants, "DEBUG_VALIDATE", True)
    return constants
