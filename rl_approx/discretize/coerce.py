"""
Explicit numeric coercion for the discretization module.

All numbers entering a binner pass through ``to_float_array`` exactly once.
The conversion is lossless or it fails: an element that would not survive a
round trip through the target dtype raises ``TypeCoercionFailure`` instead of
being silently rounded.
"""

from typing import Any, Union

import numpy as np

from rl_approx.config import get_settings
from rl_approx.discretize.errors import BinnerConfigError, TypeCoercionFailure

DTypeLike = Union[str, type, np.dtype, None]

# Canonical float types a binner may compute in
SUPPORTED_FLOAT_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))

# numpy kind codes accepted as input: bool, signed int, unsigned int, float
_NUMERIC_KINDS = "biuf"


def resolve_dtype(dtype: DTypeLike = None) -> np.dtype:
    """
    Resolve the canonical float dtype.

    Args:
        dtype: Requested dtype, or None to use the configured default

    Returns:
        The numpy dtype to compute in

    Raises:
        BinnerConfigError: If the dtype is not float32 or float64
    """
    if dtype is None:
        dtype = get_settings().float_dtype
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise BinnerConfigError(f"unknown dtype {dtype!r}") from e
    if resolved not in SUPPORTED_FLOAT_DTYPES:
        raise BinnerConfigError(
            f"canonical dtype must be float32 or float64, got {resolved.name}"
        )
    return resolved


def _is_lossless(source: np.ndarray, converted: np.ndarray) -> bool:
    """Check that every element of `source` survives the round trip."""
    with np.errstate(over="ignore", invalid="ignore"):
        restored = converted.astype(source.dtype)
    same = restored == source
    if source.dtype.kind == "f":
        # NaN never compares equal to itself but is carried over faithfully
        same |= np.isnan(source) & np.isnan(restored)
    return bool(np.all(same))


def to_float_array(values: Any, dtype: DTypeLike = None) -> np.ndarray:
    """
    Convert `values` to a new array of the canonical float dtype.

    Booleans, integers and floats are accepted when every element converts
    exactly. Complex numbers, strings, objects and ragged sequences are
    rejected.

    Args:
        values: Scalar or array-like of numbers
        dtype: Target float dtype, defaults to the configured one

    Returns:
        A freshly allocated array of the target dtype, same shape as the input

    Raises:
        TypeCoercionFailure: If the input is not real-numeric or would lose
            information in the conversion
    """
    target = resolve_dtype(dtype)
    try:
        source = np.asarray(values)
    except (TypeError, ValueError, OverflowError) as e:
        raise TypeCoercionFailure(type(values).__name__, target.name, str(e)) from e

    if source.dtype.kind not in _NUMERIC_KINDS:
        raise TypeCoercionFailure(
            source.dtype.name, target.name, "not a real numeric type"
        )

    with np.errstate(over="ignore", invalid="ignore"):
        converted = source.astype(target)

    if source.dtype.kind != "b" and not _is_lossless(source, converted):
        raise TypeCoercionFailure(
            source.dtype.name,
            target.name,
            "at least one element is not exactly representable"
        )
    return converted


def to_float(value: Any, dtype: DTypeLike = None) -> float:
    """
    Convert a single number with the same policy as ``to_float_array``.

    Raises:
        TypeCoercionFailure: If `value` is not a single real number or would
            lose information in the conversion
    """
    array = to_float_array(value, dtype)
    if array.size != 1:
        raise TypeCoercionFailure(
            f"array of shape {array.shape}", resolve_dtype(dtype).name,
            "expected a single number"
        )
    return array.reshape(()).item()
