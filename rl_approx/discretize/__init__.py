"""
Discretization module for the rl_approx library.

This module converts continuous observations into bin indices so that
tabular algorithms can work on continuous state spaces.
"""

from rl_approx.discretize.errors import (
    BinningError,
    BinnerConfigError,
    OutOfRangeError,
    OutOfRangeLow,
    OutOfRangeHigh,
    DimensionMismatch,
    TypeCoercionFailure
)
from rl_approx.discretize.coerce import resolve_dtype, to_float, to_float_array
from rl_approx.discretize.binner import (
    ScalarBinner,
    VectorBinner,
    bin_all,
    equal_width_boundaries,
    locate
)

__all__ = [
    'BinningError',
    'BinnerConfigError',
    'OutOfRangeError',
    'OutOfRangeLow',
    'OutOfRangeHigh',
    'DimensionMismatch',
    'TypeCoercionFailure',
    'resolve_dtype',
    'to_float',
    'to_float_array',
    'ScalarBinner',
    'VectorBinner',
    'bin_all',
    'equal_width_boundaries',
    'locate'
]
