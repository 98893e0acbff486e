"""
Tabular function approximation over binned continuous inputs.

Inputs are discretized with a ``VectorBinner`` and each bin tuple holds one
value, so a tabular method can be applied to a continuous observation space.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

import numpy as np

from rl_approx.discretize import VectorBinner
from rl_approx.function_approx.base import FunctionApprox
from rl_approx.logging import get_logger

BinKey = Tuple[int, ...]


def average_weight(count: int) -> float:
    """Weight 1/n, which turns incremental updates into a running mean."""
    return 1.0 / count


@dataclass(frozen=True)
class BinnedTabular(FunctionApprox[Any]):
    """
    A table of values indexed by the bins of a ``VectorBinner``.

    Every observation falling in the same bin shares one value. Bins that
    were never updated evaluate to `default`. Observations outside the
    binner's range raise the binner's ``OutOfRangeError``.
    """

    binner: VectorBinner
    """Discretizes observations into bin keys"""

    values_map: Mapping[BinKey, float] = field(default_factory=dict)
    """Value stored per bin key"""

    counts_map: Mapping[BinKey, int] = field(default_factory=dict)
    """Number of samples seen per bin key"""

    count_to_weight_func: Callable[[int], float] = average_weight
    """Maps the sample count of a bin to the weight of the newest sample"""

    default: float = 0.0
    """Value of bins with no samples"""

    def key(self, x: Any) -> BinKey:
        return self.binner.key(x)

    def evaluate(self, x_values_seq: Iterable[Any]) -> np.ndarray:
        return np.array(
            [self.values_map.get(self.key(x), self.default) for x in x_values_seq],
            dtype=float
        )

    def update(self, xy_vals_seq: Iterable[Tuple[Any, float]]) -> 'BinnedTabular':
        """
        Move the value of each sample's bin towards the sample.

        The weight of the new sample is ``count_to_weight_func(n)`` where n is
        the number of samples the bin has seen including this one.
        """
        values_map: Dict[BinKey, float] = dict(self.values_map)
        counts_map: Dict[BinKey, int] = dict(self.counts_map)
        samples = 0
        for x, y in xy_vals_seq:
            k = self.key(x)
            counts_map[k] = counts_map.get(k, 0) + 1
            weight = self.count_to_weight_func(counts_map[k])
            values_map[k] = weight * y + (1 - weight) * values_map.get(k, self.default)
            samples += 1

        get_logger().debug({
            "event": "tabular_update",
            "samples": samples,
            "bins_visited": len(counts_map),
            "num_states": self.binner.num_states
        })
        return replace(self, values_map=values_map, counts_map=counts_map)

    def solve(
        self,
        xy_vals_seq: Iterable[Tuple[Any, float]],
        error_tolerance: Optional[float] = None
    ) -> 'BinnedTabular':
        """Set every bin seen in the data to the mean of its samples."""
        sums: Dict[BinKey, float] = {}
        counts_map: Dict[BinKey, int] = {}
        for x, y in xy_vals_seq:
            k = self.key(x)
            sums[k] = sums.get(k, 0.0) + y
            counts_map[k] = counts_map.get(k, 0) + 1
        values_map = {k: s / counts_map[k] for k, s in sums.items()}
        return replace(self, values_map=values_map, counts_map=counts_map)

    def _check_same_bins(self, other: 'BinnedTabular') -> None:
        """Raise if `other` discretizes its inputs differently."""
        mine, theirs = self.binner, other.binner
        if mine is theirs:
            return
        same = (
            mine.dtype == theirs.dtype
            and np.array_equal(mine.interval_counts, theirs.interval_counts)
            and np.array_equal(mine.low, theirs.low)
            and np.array_equal(mine.high, theirs.high)
        )
        if not same:
            raise ValueError(f"tables use different bins: {mine!r} and {theirs!r}")

    def within(self, other: 'BinnedTabular', tolerance: float) -> bool:
        if not isinstance(other, BinnedTabular):
            return False
        self._check_same_bins(other)
        keys = set(self.values_map) | set(other.values_map)
        return all(
            abs(self.values_map.get(k, self.default) - other.values_map.get(k, other.default))
            <= tolerance
            for k in keys
        )

    def __add__(self, other: 'BinnedTabular') -> 'BinnedTabular':
        self._check_same_bins(other)
        keys = set(self.values_map) | set(other.values_map)
        values_map = {
            k: self.values_map.get(k, self.default) + other.values_map.get(k, other.default)
            for k in keys
        }
        return replace(self, values_map=values_map, default=self.default + other.default)

    def __mul__(self, scalar: float) -> 'BinnedTabular':
        values_map = {k: scalar * v for k, v in self.values_map.items()}
        return replace(self, values_map=values_map, default=scalar * self.default)

    def __repr__(self) -> str:
        return (f"BinnedTabular(bins_filled={len(self.values_map)}/"
                f"{self.binner.num_states}, default={self.default})")
