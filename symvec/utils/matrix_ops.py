# symvec/utils/matrix_ops.py
"""
Matrix Operations Module

This module provides the vectorization matrices used in multivariate
statistics together with a safe matrix inverse. Throughout, vec stacks the
columns of a matrix and vech stacks the lower-triangular part column by
column, each column taken from its diagonal entry downwards. For a symmetric
n×n matrix A the three structured matrices satisfy

    L_n vec(A) = vech(A)        (elimination)
    K_n vec(A) = vec(A.T)       (commutation)
    D_n vech(A) = vec(A)        (duplication)

Functions:
    vec: Column-major vectorization of a matrix
    vech: Half-vectorization of a square matrix
    ivech: Inverse vech operation - convert vector to symmetric matrix
    elimination_matrix: Create an elimination matrix
    commutation_matrix: Create a commutation matrix
    duplication_matrix: Create a duplication matrix
    is_sympd: Check if a matrix is symmetric positive definite
    safe_inverse: Inverse for SPD matrices, pseudo-inverse otherwise
"""

import logging
from typing import Optional

import numpy as np
from numba import jit
from scipy import linalg
from scipy.linalg import lapack

from symvec.core.config import get_numerical_config
from symvec.core.exceptions import SingularMatrixError, raise_dimension_error
from symvec.core.types import (
    ArrayLike, Matrix, PermutationMatrix, SelectionMatrix, SymmetricMatrix, Vector
)
from symvec.core.validation import (
    as_float_array, validate_dimension, validate_numeric_array,
    validate_square_matrix, validate_vector
)

# Set up module-level logger
logger = logging.getLogger("symvec.utils.matrix_ops")


def _lower_indices(n: int):
    """Row and column indices of the lower triangle in vech order."""
    # triu_indices walks rows of the upper triangle, i.e. columns of the lower one
    cols, rows = np.triu_indices(n)
    return rows, cols


@jit(nopython=True, cache=True)
def _vech_numba(matrix: np.ndarray) -> np.ndarray:
    """
    Numba-accelerated implementation of vech operation.

    Args:
        matrix: Square matrix to vectorize

    Returns:
        Vector containing the lower triangular portion, column by column
    """
    n = matrix.shape[0]
    result = np.zeros(n * (n + 1) // 2)

    idx = 0
    for j in range(n):
        for i in range(j, n):
            result[idx] = matrix[i, j]
            idx += 1

    return result


def vec(matrix: ArrayLike) -> Vector:
    """
    Stack the columns of a matrix into a single vector.

    Args:
        matrix: 2D matrix of any shape

    Returns:
        Vector of length rows*cols in column-major order

    Raises:
        DimensionError: If the input is not 2-dimensional

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import vec
        >>> vec(np.array([[1, 2], [3, 4]]))
        array([1., 3., 2., 4.])
    """
    matrix = as_float_array(matrix, "matrix")

    if matrix.ndim != 2:
        raise_dimension_error(
            "Input must be a 2D matrix",
            array_name="matrix",
            expected_shape="(n, m)",
            actual_shape=matrix.shape
        )

    return matrix.ravel(order="F")


def vech(matrix: ArrayLike) -> Vector:
    """
    Vectorize the lower triangular portion of a square matrix.

    The lower-triangular elements are stacked column by column, each column
    starting at its diagonal entry. For a matrix of size n×n the resulting
    vector has length n(n+1)/2.

    Args:
        matrix: Square matrix to vectorize

    Returns:
        Vector containing the lower triangular portion of the matrix

    Raises:
        DimensionError: If the input matrix is not square

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import vech
        >>> A = np.array([[1, 2, 3], [2, 4, 5], [3, 5, 6]])
        >>> vech(A)
        array([1., 2., 3., 4., 5., 6.])
    """
    matrix = validate_square_matrix(as_float_array(matrix, "matrix"), "matrix")
    return _vech_numba(np.ascontiguousarray(matrix))


def ivech(vector: ArrayLike) -> SymmetricMatrix:
    """
    Inverse vech operation - convert vector to symmetric matrix.

    Takes a vector of length n(n+1)/2 holding the lower triangle in vech order
    and mirrors it across the diagonal.

    Args:
        vector: Vector to convert to a symmetric matrix

    Returns:
        Symmetric matrix constructed from the vector

    Raises:
        DimensionError: If the vector length is not a triangular number

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import ivech
        >>> ivech(np.array([1, 2, 3, 4, 5, 6]))
        array([[1., 2., 3.],
               [2., 4., 5.],
               [3., 5., 6.]])
    """
    vector = validate_vector(as_float_array(vector, "vector"), vector_name="vector")

    # n(n+1)/2 = m  =>  n = (-1 + sqrt(1 + 8m)) / 2
    m = vector.shape[0]
    n = int(round((-1 + np.sqrt(1 + 8 * m)) / 2))

    if n * (n + 1) // 2 != m:
        raise_dimension_error(
            "Vector length must be a triangular number (n(n+1)/2 for some integer n)",
            array_name="vector",
            expected_shape="(n(n+1)/2,)",
            actual_shape=vector.shape
        )

    rows, cols = _lower_indices(n)
    result = np.zeros((n, n))
    result[rows, cols] = vector
    result[cols, rows] = vector

    return result


def elimination_matrix(n: int) -> SelectionMatrix:
    """
    Create an elimination matrix.

    The elimination matrix L_n satisfies L_n vec(A) = vech(A) for any n×n
    matrix A. Row k selects the vec position of the k-th lower-triangular
    entry: for column j and row i >= j that is position j*n + i. Every entry
    is 0 or 1 and every row holds exactly one 1.

    Args:
        n: Dimension of the square matrix

    Returns:
        Elimination matrix of size (n(n+1)/2)×(n²)

    Raises:
        ParameterError: If n is not a positive integer

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import elimination_matrix, vec, vech
        >>> L = elimination_matrix(3)
        >>> L.shape
        (6, 9)
        >>> A = np.array([[1, 2, 3], [2, 4, 5], [3, 5, 6]])
        >>> np.allclose(L @ vec(A), vech(A))
        True
    """
    n = validate_dimension(n)
    n_vech = n * (n + 1) // 2

    rows, cols = _lower_indices(n)

    L = np.zeros((n_vech, n * n))
    L[np.arange(n_vech), cols * n + rows] = 1.0

    return L


def commutation_matrix(n: int, m: Optional[int] = None) -> PermutationMatrix:
    """
    Create a commutation matrix.

    The commutation matrix K_{n,m} satisfies K_{n,m} vec(A) = vec(A.T) for any
    n×m matrix A. With m omitted the square matrix K_n = K_{n,n} is returned,
    which is symmetric and its own inverse.

    Args:
        n: Number of rows in the original matrix
        m: Number of columns in the original matrix (defaults to n)

    Returns:
        Commutation matrix of size (nm)×(nm)

    Raises:
        ParameterError: If n or m is not a positive integer

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import commutation_matrix, vec
        >>> K = commutation_matrix(2, 3)
        >>> K.shape
        (6, 6)
        >>> A = np.array([[1, 2, 3], [4, 5, 6]])
        >>> np.allclose(K @ vec(A), vec(A.T))
        True
    """
    n = validate_dimension(n, "n")
    m = n if m is None else validate_dimension(m, "m")

    K = np.zeros((n * m, n * m))

    for i in range(n):
        for j in range(m):
            # Element (i, j) sits at j*n + i in vec(A) and at i*m + j in vec(A.T)
            K[i * m + j, j * n + i] = 1.0

    return K


def duplication_matrix(n: int) -> Matrix:
    """
    Create a duplication matrix.

    The duplication matrix D_n satisfies D_n vech(A) = vec(A) for any
    symmetric n×n matrix A. It is obtained from the elimination and
    commutation matrices as

        D_n = M L' (L M L')^{-1},   M = I + K_n,  L = L_n

    Args:
        n: Dimension of the symmetric matrix

    Returns:
        Duplication matrix of size (n²)×(n(n+1)/2)

    Raises:
        ParameterError: If n is not a positive integer
        SingularMatrixError: If L M L' cannot be inverted reliably

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import duplication_matrix, vec, vech
        >>> D = duplication_matrix(3)
        >>> D.shape
        (9, 6)
        >>> A = np.array([[1, 2, 3], [2, 4, 5], [3, 5, 6]])
        >>> np.allclose(D @ vech(A), vec(A))
        True
    """
    n = validate_dimension(n)

    L = elimination_matrix(n)
    K = commutation_matrix(n)
    M = np.eye(n * n) + K

    inner = L @ M @ L.T

    singular_values = linalg.svdvals(inner, check_finite=False)
    rcond = singular_values[-1] / singular_values[0]
    if not np.isfinite(rcond) or rcond < get_numerical_config().singular_rcond:
        raise SingularMatrixError(
            "L (I + K) L' is numerically singular",
            operation="duplication_matrix",
            rcond=float(rcond),
            context={"n": n}
        )

    try:
        inner_inv = linalg.inv(inner, check_finite=False)
    except linalg.LinAlgError as e:
        raise SingularMatrixError(
            "L (I + K) L' could not be inverted",
            operation="duplication_matrix",
            rcond=float(rcond),
            details=str(e),
            context={"n": n}
        ) from e

    return M @ L.T @ inner_inv


def _sympd_factor(matrix: Matrix, tol: Optional[float] = None) -> Optional[Matrix]:
    """Upper Cholesky factor of the symmetric part of a finite square matrix, or None if not SPD."""
    config = get_numerical_config()
    if tol is None:
        tol = config.sympd_tolerance

    scale = float(np.max(np.abs(matrix)))
    if scale == 0.0 or np.max(np.abs(matrix - matrix.T)) > tol * scale:
        return None

    sym = (matrix + matrix.T) / 2
    try:
        upper = linalg.cholesky(sym, lower=False, check_finite=False)
    except linalg.LinAlgError:
        return None

    # A singular PSD matrix can still factor through rounding; reject it by condition
    rcond, info = lapack.dpocon(upper, linalg.norm(sym, 1))
    if info != 0 or rcond < config.singular_rcond:
        return None

    return upper


def is_sympd(matrix: ArrayLike, tol: Optional[float] = None) -> bool:
    """
    Check if a matrix is symmetric positive definite.

    The matrix must be square, finite and symmetric within tolerance, its
    Cholesky decomposition must succeed and the reciprocal condition number
    estimated from that factor must not fall below numerical.singular_rcond.
    Symmetry is judged relative to the size of the entries, so the result
    does not change when the matrix is rescaled:

        max|M - M'| <= tol * max|M|

    Args:
        matrix: Matrix to check
        tol: Relative symmetry tolerance, defaults to the configured
            numerical.sympd_tolerance

    Returns:
        True if the matrix is symmetric positive definite, False otherwise

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import is_sympd
        >>> is_sympd(np.array([[2, 1], [1, 2]]))
        True
        >>> is_sympd(np.array([[1, 2], [2, 1]]))
        False
    """
    matrix = as_float_array(matrix, "matrix")

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1] or matrix.size == 0:
        return False

    if not np.isfinite(matrix).all():
        return False

    return _sympd_factor(matrix, tol) is not None


def safe_inverse(matrix: ArrayLike) -> Matrix:
    """
    Invert a matrix, falling back to the pseudo-inverse when it is not SPD.

    Symmetric positive definite matrices are inverted through the Cholesky
    factor computed by the SPD check. Any other square matrix, including
    singular ones, gets the Moore-Penrose pseudo-inverse, so this function
    never fails because of singularity.

    Args:
        matrix: Square matrix to invert

    Returns:
        The inverse (SPD input) or pseudo-inverse (otherwise)

    Raises:
        DimensionError: If the input matrix is not square
        NonFiniteError: If the input contains NaN or infinite values

    Examples:
        >>> import numpy as np
        >>> from symvec.utils.matrix_ops import safe_inverse
        >>> safe_inverse(np.array([[4.0, 0.0], [0.0, 2.0]]))
        array([[0.25, 0. ],
               [0.  , 0.5 ]])
        >>> safe_inverse(np.array([[1.0, 1.0], [1.0, 1.0]]))
        array([[0.25, 0.25],
               [0.25, 0.25]])
    """
    matrix = validate_square_matrix(as_float_array(matrix, "matrix"), "matrix")
    validate_numeric_array(matrix, "matrix")

    n = matrix.shape[0]
    if n == 0:
        return np.zeros((0, 0))

    upper = _sympd_factor(matrix)
    if upper is not None:
        logger.debug(f"safe_inverse: Cholesky inverse of {n}x{n} SPD matrix")
        inverse = linalg.cho_solve((upper, False), np.eye(n), check_finite=False)
        return (inverse + inverse.T) / 2

    logger.debug(f"safe_inverse: pseudo-inverse of {n}x{n} matrix that is not SPD")
    return linalg.pinv(matrix, rtol=get_numerical_config().pinv_rtol, check_finite=False)
