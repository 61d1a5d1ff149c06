# symvec/core/types.py

"""
Core type annotations for symvec.

Type aliases used across the package so signatures document whether an
argument is expected to be a vector, a general matrix or a matrix with extra
structure (symmetric, positive definite, 0/1 selection).
"""

from typing import List, Literal, Sequence, Union

import numpy as np
import pandas as pd

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array

# Specialized array types
SymmetricMatrix = np.ndarray  # Square matrix equal to its transpose
SelectionMatrix = np.ndarray  # 0/1 matrix with exactly one 1 per row
PermutationMatrix = np.ndarray  # 0/1 matrix with exactly one 1 per row and column
IndicatorVector = np.ndarray  # Integer vector of 0/1 values

# Inputs accepted where an array is expected
ArrayLike = Union[np.ndarray, Sequence[float], List[List[float]]]
ObservationMatrix = Union[np.ndarray, pd.DataFrame]  # N observations in rows

# Configuration types
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
