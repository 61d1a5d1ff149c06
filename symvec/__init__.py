# symvec/__init__.py
"""
symvec - Vectorization matrices and safe inverses for multivariate statistics

Small numerical helpers meant to be called from a statistical analysis
pipeline:
- Elimination, commutation and duplication matrices for vec/vech algebra
- Sign-agreement indicator and its empirical expectation
- Safe inverse: Cholesky for SPD matrices, pseudo-inverse otherwise

This module serves as the main entry point for the package.
"""

import logging
from typing import Union

from .version import __version__, __title__, __description__, __license__

from .core.config import initialize_config, get_config, set_config, reset_config
from .core.exceptions import (
    SymvecError,
    ParameterError,
    DimensionError,
    NumericError,
    SingularMatrixError,
    DataError,
    NonFiniteError,
    ConfigurationError,
    NumericWarning
)
from .utils.matrix_ops import (
    vec,
    vech,
    ivech,
    elimination_matrix,
    commutation_matrix,
    duplication_matrix,
    is_sympd,
    safe_inverse
)
from .utils.indicators import indicator, indicator_values, expected_indicator

# Set up package-wide logger
logger = logging.getLogger("symvec")


def get_version() -> str:
    """
    Return the version of symvec.

    Returns:
        str: Version string in format MAJOR.MINOR.PATCH
    """
    return __version__


def set_log_level(level: Union[str, int]) -> None:
    """
    Set the logging level for symvec.

    Args:
        level: Logging level, either as string ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
              or as an integer constant from the logging module
    """
    if isinstance(level, int):
        level = logging.getLevelName(level)
    set_config("logging", "log_level", level.upper())
    logger.info(f"Log level set to {level.upper()}")


# Initialize configuration and logging
initialize_config()

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
    'expected_indicator',

    # Exceptions
    'SymvecError',
    'ParameterError',
    'DimensionError',
    'NumericError',
    'SingularMatrixError',
    'DataError',
    'NonFiniteError',
    'ConfigurationError',
    'NumericWarning',

    # Configuration and logging
    'get_config',
    'set_config',
    'reset_config',
    'get_version',
    'set_log_level',

    # Version info
    '__version__',
]

logger.debug(f"symvec v{__version__} initialized")
