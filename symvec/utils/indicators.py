# symvec/utils/indicators.py
"""
Sign-agreement indicator functions.

An observation r agrees with a sign pattern s when s_i * r_i >= 0 for every
component, so zeros agree with any sign. The indicator is 1 for agreement and
0 as soon as a single component has the opposite sign. Averaging the
indicator over the rows of an observation matrix gives the empirical
probability that an observation lies in the orthant described by s.

Functions:
    indicator: 0/1 sign-agreement indicator for a single observation
    indicator_values: Per-row indicator for an observation matrix
    expected_indicator: Mean indicator over all observations
"""

import logging

import numpy as np
from numba import jit

from symvec.core.exceptions import raise_dimension_error, warn_numeric
from symvec.core.types import ArrayLike, IndicatorVector, ObservationMatrix
from symvec.core.validation import (
    as_float_array, validate_numeric_array, validate_vector
)

# Set up module-level logger
logger = logging.getLogger("symvec.utils.indicators")


@jit(nopython=True, cache=True)
def _indicator_rows_numba(observations: np.ndarray, signs: np.ndarray) -> np.ndarray:
    """
    Numba-accelerated per-row sign-agreement indicator.

    Args:
        observations: N×n matrix of observations
        signs: Sign pattern of length n

    Returns:
        Integer vector of length N with 1 where the row agrees with signs
    """
    n_obs, n_vars = observations.shape
    result = np.ones(n_obs, dtype=np.int64)

    for t in range(n_obs):
        for i in range(n_vars):
            if signs[i] * observations[t, i] < 0:
                result[t] = 0
                break

    return result


def _prepare_signs(signs: ArrayLike) -> np.ndarray:
    signs = validate_vector(as_float_array(signs, "signs"), vector_name="signs")
    return validate_numeric_array(signs, "signs", allow_inf=True)


def indicator(r: ArrayLike, signs: ArrayLike) -> int:
    """
    Sign-agreement indicator for a single observation.

    Args:
        r: Observation, a vector of length n (row or column vector accepted)
        signs: Sign pattern, a vector of length n

    Returns:
        1 if signs[i] * r[i] >= 0 for every i, 0 otherwise

    Raises:
        DimensionError: If r and signs have different lengths
        NonFiniteError: If either input contains NaN

    Examples:
        >>> from symvec.utils.indicators import indicator
        >>> indicator([1, 2, -3], [1, 1, 1])
        0
        >>> indicator([1, 2, 3], [1, 1, 1])
        1
    """
    signs = _prepare_signs(signs)
    r = validate_vector(as_float_array(r, "r"), expected_length=signs.shape[0], vector_name="r")
    validate_numeric_array(r, "r", allow_inf=True)

    return int(_indicator_rows_numba(r.reshape(1, -1), signs)[0])


def indicator_values(observations: ObservationMatrix, signs: ArrayLike) -> IndicatorVector:
    """
    Per-row sign-agreement indicator for an observation matrix.

    Args:
        observations: N×n matrix (or DataFrame) with one observation per row.
            A non-empty 1D input is treated as a single observation.
        signs: Sign pattern, a vector of length n

    Returns:
        Integer vector of length N holding the indicator of each row

    Raises:
        DimensionError: If the number of columns differs from len(signs)
        NonFiniteError: If either input contains NaN
    """
    signs = _prepare_signs(signs)
    observations = as_float_array(observations, "observations")

    if observations.ndim == 1:
        if observations.size == 0:
            # An empty sequence means no observations at all
            observations = np.empty((0, signs.shape[0]))
        else:
            observations = observations.reshape(1, -1)

    if observations.ndim != 2 or observations.shape[1] != signs.shape[0]:
        raise_dimension_error(
            "Observation matrix must have one column per sign",
            array_name="observations",
            expected_shape=f"(N, {signs.shape[0]})",
            actual_shape=observations.shape
        )

    validate_numeric_array(observations, "observations", allow_inf=True)

    return _indicator_rows_numba(np.ascontiguousarray(observations), signs)


def expected_indicator(observations: ObservationMatrix, signs: ArrayLike) -> float:
    """
    Mean sign-agreement indicator over the rows of an observation matrix.

    With no observations the mean is undefined: the result is NaN and a
    NumericWarning is issued rather than an exception.

    Args:
        observations: N×n matrix (or DataFrame) with one observation per row
        signs: Sign pattern, a vector of length n

    Returns:
        The fraction of rows that agree with signs, or NaN when N = 0

    Raises:
        DimensionError: If the number of columns differs from len(signs)
        NonFiniteError: If either input contains NaN

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.indicators import expected_indicator
        >>> R = np.array([[1.0, 2.0], [-1.0, 2.0], [0.0, 3.0], [2.0, -1.0]])
        >>> expected_indicator(R, [1, 1])
        0.5
    """
    values = indicator_values(observations, signs)

    if values.shape[0] == 0:
        warn_numeric(
            "expected_indicator called with no observations, returning NaN",
            operation="expected_indicator",
            issue="empty_observations",
            value=0
        )
        return float("nan")

    result = float(values.mean())
    logger.debug(f"expected_indicator over {values.shape[0]} observations: {result}")
    return result
