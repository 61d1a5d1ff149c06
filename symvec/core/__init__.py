"""
symvec Core Module

Foundations shared by the matrix routines: the exception hierarchy, type
aliases, input validation and configuration management.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("symvec.core")

from .exceptions import (
    SymvecError,
    ParameterError,
    DimensionError,
    NumericError,
    SingularMatrixError,
    DataError,
    NonFiniteError,
    ConfigurationError,
    SymvecWarning,
    NumericWarning
)

from .config import (
    ConfigManager,
    NumericalConfig,
    LoggingConfig,
    SymvecConfig,
    initialize_config,
    get_config,
    set_config,
    reset_config,
    get_config_manager,
    get_numerical_config
)

from .validation import (
    as_float_array,
    validate_dimension,
    validate_square_matrix,
    validate_vector,
    validate_numeric_array
)

__all__ = [
    # Exceptions
    'SymvecError',
    'ParameterError',
    'DimensionError',
    'NumericError',
    'SingularMatrixError',
    'DataError',
    'NonFiniteError',
    'ConfigurationError',
    'SymvecWarning',
    'NumericWarning',

    # Configuration
    'ConfigManager',
    'NumericalConfig',
    'LoggingConfig',
    'SymvecConfig',
    'initialize_config',
    'get_config',
    'set_config',
    'reset_config',
    'get_config_manager',
    'get_numerical_config',

    # Validation
    'as_float_array',
    'validate_dimension',
    'validate_square_matrix',
    'validate_vector',
    'validate_numeric_array'
]
