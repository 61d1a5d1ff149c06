# symvec/core/validation.py

"""
Validation utilities for symvec.

Shared input checks for the matrix routines: matrix orders, array shapes and
finiteness. Each validator returns the (possibly converted) input so it can be
used inline, and raises one of the exceptions from symvec.core.exceptions with
the offending array or parameter named in the message.
"""

import numbers
from typing import Any, Optional

import numpy as np
import pandas as pd

from symvec.core.exceptions import (
    NonFiniteError, raise_dimension_error, raise_parameter_error
)


def as_float_array(array: Any, array_name: str = "array") -> np.ndarray:
    """Convert array-like input (including pandas objects) to a float64 array.

    Args:
        array: Input to convert
        array_name: Name of the array for error messages

    Returns:
        np.ndarray: A new float64 array; the input is never modified

    Raises:
        TypeError: If array is None or cannot be interpreted as numeric data
    """
    if array is None:
        raise TypeError(f"{array_name} cannot be None")

    if isinstance(array, (pd.DataFrame, pd.Series)):
        array = array.to_numpy()

    try:
        return np.array(array, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise TypeError(f"{array_name} must contain numeric values: {e}") from e


def validate_dimension(n: Any, param_name: str = "n") -> int:
    """Validate a matrix order.

    Args:
        n: The order to validate
        param_name: Name of the parameter for error messages

    Returns:
        int: The validated order

    Raises:
        ParameterError: If n is not an integer or is smaller than 1
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise_parameter_error(
            f"{param_name} must be an integer, got {type(n).__name__}",
            param_name=param_name,
            param_value=n,
            constraint="integer >= 1"
        )

    if n < 1:
        raise_parameter_error(
            f"{param_name} must be at least 1, got {n}",
            param_name=param_name,
            param_value=n,
            constraint="integer >= 1"
        )

    return int(n)


def validate_square_matrix(matrix: np.ndarray, matrix_name: str = "matrix") -> np.ndarray:
    """Validate that a matrix is 2-dimensional and square.

    Raises:
        DimensionError: If matrix is not square
    """
    if matrix.ndim != 2:
        raise_dimension_error(
            f"{matrix_name} must be 2-dimensional, got {matrix.ndim} dimensions",
            array_name=matrix_name,
            expected_shape="square matrix",
            actual_shape=matrix.shape
        )

    if matrix.shape[0] != matrix.shape[1]:
        raise_dimension_error(
            f"{matrix_name} must be square, got shape {matrix.shape}",
            array_name=matrix_name,
            expected_shape=f"({matrix.shape[0]}, {matrix.shape[0]})",
            actual_shape=matrix.shape
        )

    return matrix


def validate_vector(
    vector: np.ndarray,
    expected_length: Optional[int] = None,
    vector_name: str = "vector"
) -> np.ndarray:
    """Validate that an array is a vector with the expected length.

    Row vectors (1, n) and column vectors (n, 1) are flattened to 1D.

    Args:
        vector: Vector to validate
        expected_length: Expected length, or None for any
        vector_name: Name of the vector for error messages

    Returns:
        np.ndarray: The validated 1D vector

    Raises:
        DimensionError: If vector is not a vector or has the wrong length
    """
    if vector.ndim == 2:
        if vector.shape[0] == 1 or vector.shape[1] == 1:
            vector = vector.ravel()
        else:
            raise_dimension_error(
                f"{vector_name} must be 1-dimensional or a column/row vector, got shape {vector.shape}",
                array_name=vector_name,
                expected_shape="1D vector",
                actual_shape=vector.shape
            )
    elif vector.ndim != 1:
        raise_dimension_error(
            f"{vector_name} must be 1-dimensional, got {vector.ndim} dimensions",
            array_name=vector_name,
            expected_shape="1D vector",
            actual_shape=vector.shape
        )

    if expected_length is not None and len(vector) != expected_length:
        raise_dimension_error(
            f"{vector_name} has length {len(vector)}, expected {expected_length}",
            array_name=vector_name,
            expected_shape=f"({expected_length},)",
            actual_shape=vector.shape
        )

    return vector


def validate_numeric_array(
    array: np.ndarray,
    array_name: str = "array",
    allow_inf: bool = False
) -> np.ndarray:
    """Validate that an array contains no NaN (and optionally no infinite) values.

    Args:
        array: Array to validate
        array_name: Name of the array for error messages
        allow_inf: Whether to allow infinite values

    Returns:
        np.ndarray: The validated array

    Raises:
        NonFiniteError: If array contains NaN, or infinite values when not allowed
    """
    nan_mask = np.isnan(array)
    if nan_mask.any():
        raise NonFiniteError(
            f"{array_name} contains NaN values",
            data_name=array_name,
            index=tuple(int(i) for i in np.argwhere(nan_mask)[0])
        )

    if not allow_inf:
        inf_mask = np.isinf(array)
        if inf_mask.any():
            raise NonFiniteError(
                f"{array_name} contains infinite values",
                data_name=array_name,
                index=tuple(int(i) for i in np.argwhere(inf_mask)[0])
            )

    return array
