"""
symvec Utilities Module

Matrix routines for working with vectorized symmetric matrices and
sign-agreement indicators.

Key components:
- Vectorization helpers (vec, vech, ivech)
- Elimination, commutation and duplication matrices
- SPD test and safe matrix inverse
- Sign-agreement indicator and its empirical expectation
"""

import logging

# Set up module-level logger
logger = logging.getLogger("symvec.utils")

from .matrix_ops import (
    vec,
    vech,
    ivech,
    elimination_matrix,
    commutation_matrix,
    duplication_matrix,
    is_sympd,
    safe_inverse
)

from .indicators import (
    indicator,
    indicator_values,
    expected_indicator
)

__all__ = [
    # Matrix operations
    'vec',
    'vech',
    'ivech',
    'elimination_matrix',
    'commutation_matrix',
    'duplication_matrix',
    'is_sympd',
    'safe_inverse',

    # Indicators
    'indicator',
    'indicator_values',
    'expected_indicator'
]

logger.debug("symvec utils import complete")
