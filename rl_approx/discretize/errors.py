"""
Exceptions raised by the discretization module.

Every failure carries enough context (offending value, dimension, valid range)
for the caller to report it without inspecting the binner.
"""

from typing import Optional


class BinningError(ValueError):
    """Base class for all discretization errors."""


class BinnerConfigError(BinningError):
    """Raised when a binner cannot be built from the given configuration."""


class OutOfRangeError(BinningError):
    """
    A value fell outside the configured ``[low, high)`` range.

    Attributes:
        value: The offending value
        low: Inclusive lower bound of the dimension
        high: Exclusive upper bound of the dimension
        dimension: Position of the dimension, or None for a scalar binner
    """

    reason = "out of range"

    def __init__(
        self,
        value: float,
        low: float,
        high: float,
        dimension: Optional[int] = None
    ):
        self.value = value
        self.low = low
        self.high = high
        self.dimension = dimension
        where = "" if dimension is None else f" in dimension {dimension}"
        super().__init__(
            f"value {value!r}{where} not in range [{low!r}, {high!r}): {self.reason}"
        )


class OutOfRangeLow(OutOfRangeError):
    """The value is strictly less than the lower bound."""

    reason = "below low"


class OutOfRangeHigh(OutOfRangeError):
    """The value is at or above the (exclusive) upper bound."""

    reason = "at or above high"


class DimensionMismatch(BinningError):
    """
    The number of values does not match the number of configured dimensions.

    Attributes:
        expected: Number of configured dimensions
        actual: Number of values received
    """

    def __init__(self, expected: int, actual: int, what: str = "values"):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"expected {expected} {what}, one per dimension, got {actual}"
        )


class TypeCoercionFailure(BinningError, TypeError):
    """
    Inputs could not be converted to the canonical float type without loss.

    Attributes:
        source: Name of the source dtype
        target: Name of the target dtype
    """

    def __init__(self, source: str, target: str, detail: str = ""):
        self.source = source
        self.target = target
        message = f"cannot convert {source} to {target} without loss"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
