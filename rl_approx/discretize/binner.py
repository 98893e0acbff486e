"""
Equal-width binning of continuous values.

A binner partitions ``[low, high)`` into a fixed number of equal-width
intervals and maps a value to the index of the interval containing it.
Intervals are left-closed and right-open, and ``high`` itself lies outside
the last one.

``VectorBinner`` holds one independent set of boundaries per dimension and
bins one coordinate per dimension. ``ScalarBinner`` is the one-dimensional
case built on the same boundaries and search.
"""

import math
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from rl_approx.discretize.coerce import DTypeLike, resolve_dtype, to_float, to_float_array
from rl_approx.discretize.errors import (
    BinnerConfigError,
    BinningError,
    DimensionMismatch,
    OutOfRangeError,
    OutOfRangeHigh,
    OutOfRangeLow
)
from rl_approx.logging import log_bin_failure, log_binner_built


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def equal_width_boundaries(low: np.floating, width: np.floating, interval_count: int) -> np.ndarray:
    """
    Build the boundaries of `interval_count` bins of `width` starting at `low`.

    Boundaries are accumulated by repeated addition, so the last one equals
    ``low + interval_count * width`` up to rounding.

    Args:
        low: First boundary
        width: Distance between consecutive boundaries
        interval_count: Number of bins

    Returns:
        Array of ``interval_count + 1`` boundaries in the dtype of `low`
    """
    boundaries = np.empty(interval_count + 1, dtype=np.result_type(low, width))
    boundaries[0] = low
    for j in range(interval_count):
        boundaries[j + 1] = boundaries[j] + width
    return boundaries


def locate(
    boundaries: np.ndarray,
    low: float,
    high: float,
    value: float,
    dimension: Optional[int] = None
) -> int:
    """
    Find the bin of `value` among equal-width `boundaries` covering ``[low, high)``.

    Args:
        boundaries: Increasing boundaries with ``boundaries[0] == low``
        low: Inclusive lower bound
        high: Exclusive upper bound
        value: The value to bin
        dimension: Dimension reported by a raised error, None for a scalar

    Returns:
        Bin index in ``[0, len(boundaries) - 2]``

    Raises:
        OutOfRangeLow: If ``value < low``
        OutOfRangeHigh: If ``value >= high``
        OutOfRangeError: If `value` is NaN
    """
    if np.isnan(value):
        raise OutOfRangeError(float(value), float(low), float(high), dimension)
    if value < low:
        raise OutOfRangeLow(float(value), float(low), float(high), dimension)
    if value >= high:
        raise OutOfRangeHigh(float(value), float(low), float(high), dimension)

    # Number of boundaries <= value, at least one since boundaries[0] == low
    j = int(np.searchsorted(boundaries, value, side="right")) - 1
    # Accumulated rounding can leave the last boundary just below high
    return min(j, len(boundaries) - 2)


class VectorBinner:
    """
    Equal-width binner with independent bounds per dimension.

    Each dimension ``d`` splits ``[low[d], high[d])`` into
    ``interval_counts[d]`` bins. Multi-dimensional inputs are read in
    row-major order: flat position ``d`` is binned against dimension ``d``.

    The binner is immutable after construction, and every array it returns
    is read-only.

    Args:
        interval_counts: Number of bins per dimension
        low: Inclusive lower bound per dimension
        high: Exclusive upper bound per dimension
        dtype: Canonical float type, float32 or float64; defaults to the
            ``RL_APPROX_FLOAT_DTYPE`` setting

    Raises:
        TypeCoercionFailure: If an input cannot be converted without loss
        DimensionMismatch: If the three inputs disagree in size
        BinnerConfigError: If a count is not a positive integer, a bound is
            not finite, or ``high <= low`` in some dimension
    """

    def __init__(self, interval_counts: Any, low: Any, high: Any, dtype: DTypeLike = None):
        self._dtype = resolve_dtype(dtype)

        counts = to_float_array(interval_counts, self._dtype).ravel()
        low = to_float_array(low, self._dtype).ravel()
        high = to_float_array(high, self._dtype).ravel()

        if low.size == 0:
            raise BinnerConfigError("a binner needs at least one dimension")
        if high.size != low.size:
            raise DimensionMismatch(low.size, high.size, "upper bounds")
        if counts.size != low.size:
            raise DimensionMismatch(low.size, counts.size, "interval counts")

        for d in range(low.size):
            n = counts[d]
            if not (np.isfinite(n) and n >= 1 and n == np.floor(n)):
                raise BinnerConfigError(
                    f"interval count in dimension {d} must be a positive integer, got {n}"
                )
            if not (np.isfinite(low[d]) and np.isfinite(high[d])):
                raise BinnerConfigError(
                    f"bounds in dimension {d} must be finite, got [{low[d]}, {high[d]})"
                )
            if not high[d] > low[d]:
                raise BinnerConfigError(
                    f"high must exceed low in dimension {d}, got [{low[d]}, {high[d]})"
                )

        with np.errstate(over="ignore"):
            widths = (high - low) / counts
        self._interval_counts = _read_only(counts.astype(np.int64))

        boundaries = []
        for d in range(low.size):
            if not (np.isfinite(widths[d]) and widths[d] > 0):
                raise BinnerConfigError(
                    f"bin width in dimension {d} is not representable in {self._dtype.name}"
                )
            bounds = equal_width_boundaries(low[d], widths[d], int(self._interval_counts[d]))
            if not np.all(np.diff(bounds) > 0):
                raise BinnerConfigError(
                    f"bins in dimension {d} are too narrow to separate in {self._dtype.name}"
                )
            boundaries.append(_read_only(bounds))

        self._low = _read_only(low)
        self._high = _read_only(high)
        self._widths = _read_only(widths)
        self._boundaries = tuple(boundaries)

        log_binner_built(
            self._interval_counts, self._low, self._high, self._widths, self._boundaries
        )

    @property
    def dtype(self) -> np.dtype:
        """Float type boundaries are computed in."""
        return self._dtype

    @property
    def num_dimensions(self) -> int:
        return self._low.size

    def __len__(self) -> int:
        return self.num_dimensions

    @property
    def interval_counts(self) -> np.ndarray:
        return self._interval_counts

    @property
    def low(self) -> np.ndarray:
        return self._low

    @property
    def high(self) -> np.ndarray:
        return self._high

    @property
    def num_states(self) -> int:
        """Number of distinct bin tuples, the size of the discrete space."""
        return math.prod(int(n) for n in self._interval_counts)

    def widths(self) -> np.ndarray:
        """Bin width per dimension."""
        return self._widths

    def bounds(self) -> Tuple[np.ndarray, ...]:
        """Boundary array per dimension, ``interval_counts[d] + 1`` values each."""
        return self._boundaries

    def _coerce_point(self, values: Any, what: str = "values") -> np.ndarray:
        points = to_float_array(values, self._dtype)
        if points.size != self.num_dimensions:
            raise DimensionMismatch(self.num_dimensions, points.size, what)
        return points

    def bin(self, values: Any) -> np.ndarray:
        """
        Bin one coordinate per dimension.

        Args:
            values: Array-like with exactly one element per dimension, in
                row-major order

        Returns:
            Integer array of bin indices with the same shape as `values`

        Raises:
            TypeCoercionFailure: If `values` cannot be converted without loss
            DimensionMismatch: If the number of values differs from the number
                of dimensions; no value is binned in that case
            OutOfRangeLow: If a value is below its dimension's low
            OutOfRangeHigh: If a value is at or above its dimension's high
        """
        try:
            points = self._coerce_point(values)
            flat = points.ravel()
            indices = np.empty(flat.size, dtype=np.int64)
            for d, value in enumerate(flat):
                indices[d] = locate(
                    self._boundaries[d], self._low[d], self._high[d], value, d
                )
        except BinningError as error:
            log_bin_failure(error, values)
            raise
        return indices.reshape(points.shape)

    def key(self, values: Any) -> Tuple[int, ...]:
        """Bin `values` and return the indices as a hashable tuple."""
        return tuple(int(i) for i in self.bin(values).ravel())

    def flat_index(self, values: Any) -> int:
        """
        Bin `values` and return a single row-major index into the discrete space.

        The result lies in ``[0, num_states - 1]``.
        """
        dims = tuple(int(n) for n in self._interval_counts)
        return int(np.ravel_multi_index(self.key(values), dims))

    def contains(self, values: Any) -> bool:
        """Whether every coordinate lies within its dimension's ``[low, high)``."""
        flat = self._coerce_point(values).ravel()
        return bool(np.all((flat >= self._low) & (flat < self._high)))

    def centers(self, indices: Any) -> np.ndarray:
        """
        Midpoints of the given bins, one per dimension.

        Args:
            indices: Integer bin indices, one per dimension, in row-major order

        Returns:
            Float array with the same shape as `indices`

        Raises:
            DimensionMismatch: If the number of indices differs from the number
                of dimensions
            BinnerConfigError: If an index is not an integer or is out of range
        """
        idx = np.asarray(indices)
        if idx.dtype.kind not in "iu":
            raise BinnerConfigError(f"bin indices must be integers, got {idx.dtype.name}")
        if idx.size != self.num_dimensions:
            raise DimensionMismatch(self.num_dimensions, idx.size, "bin indices")

        flat = idx.ravel()
        if np.any(flat < 0) or np.any(flat >= self._interval_counts):
            raise BinnerConfigError(
                f"bin indices {flat.tolist()} outside {self._interval_counts.tolist()}"
            )
        mids = [(b[j] + b[j + 1]) / 2 for b, j in zip(self._boundaries, flat)]
        return np.array(mids, dtype=self._dtype).reshape(idx.shape)

    def __repr__(self) -> str:
        return (f"VectorBinner(interval_counts={self._interval_counts.tolist()}, "
                f"low={self._low.tolist()}, high={self._high.tolist()})")


class ScalarBinner:
    """
    Equal-width binner over a single continuous dimension.

    Args:
        interval_count: Number of bins
        high: Exclusive upper bound
        low: Inclusive lower bound
        dtype: Canonical float type, defaults to the configured one

    Raises:
        TypeCoercionFailure: If an argument cannot be converted without loss
        BinnerConfigError: If the configuration is invalid
    """

    def __init__(self, interval_count: int, high: float, low: float, dtype: DTypeLike = None):
        self._binner = VectorBinner([interval_count], [low], [high], dtype)

    @property
    def dtype(self) -> np.dtype:
        return self._binner.dtype

    @property
    def interval_count(self) -> int:
        return int(self._binner.interval_counts[0])

    @property
    def low(self) -> float:
        return self._binner.low[0].item()

    @property
    def high(self) -> float:
        return self._binner.high[0].item()

    @property
    def width(self) -> float:
        return self._binner.widths()[0].item()

    def boundaries(self) -> np.ndarray:
        return self._binner.bounds()[0]

    def bin(self, value: float) -> int:
        """
        Return the index of the bin containing `value`.

        Raises:
            TypeCoercionFailure: If `value` is not a single number or cannot be
                converted without loss
            OutOfRangeLow: If ``value < low``
            OutOfRangeHigh: If ``value >= high``
        """
        try:
            return locate(
                self.boundaries(), self._binner.low[0], self._binner.high[0],
                to_float(value, self.dtype)
            )
        except BinningError as error:
            log_bin_failure(error, value)
            raise

    def center(self, index: int) -> float:
        """Midpoint of bin `index`."""
        return self._binner.centers([index])[0].item()

    def __repr__(self) -> str:
        return (f"ScalarBinner(interval_count={self.interval_count}, "
                f"high={self.high}, low={self.low})")


def bin_all(binner: VectorBinner, points: Sequence[Any]) -> np.ndarray:
    """
    Bin a batch of points with the same binner.

    Args:
        binner: The binner to apply
        points: Sequence of points, each with one value per dimension

    Returns:
        Integer array of shape ``(len(points), binner.num_dimensions)``

    Raises:
        BinningError: From the first point that cannot be binned
    """
    rows = [binner.bin(point).ravel() for point in points]
    if not rows:
        return np.empty((0, binner.num_dimensions), dtype=np.int64)
    return np.stack(rows)
