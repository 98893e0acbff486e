"""
Base class for function approximation.

This module provides the abstract interface shared by the value-function
approximations in rl_approx. An approximation maps inputs of type X to real
numbers and is updated from (x, y) samples.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Iterable, Optional, Tuple

import numpy as np

# Type variables
X = TypeVar('X')  # Input type for function approximation
F = TypeVar('F', bound='FunctionApprox')  # Function approximation type


class FunctionApprox(ABC, Generic[X]):
    """
    Interface for function approximations.

    Implementations are immutable: `update`, `solve` and the arithmetic
    operators return new instances.
    """

    @abstractmethod
    def __add__(self: F, other: F) -> F:
        """
        Add two function approximations.

        Args:
            other: Another function approximation of the same type

        Returns:
            New function approximation representing the sum
        """
        pass

    @abstractmethod
    def __mul__(self: F, scalar: float) -> F:
        """
        Multiply a function approximation by a scalar.

        Args:
            scalar: A scalar value

        Returns:
            New function approximation representing the product
        """
        pass

    @abstractmethod
    def evaluate(self, x_values_seq: Iterable[X]) -> np.ndarray:
        """
        Compute expected value of y for each x in x_values_seq.

        Args:
            x_values_seq: Sequence of x values

        Returns:
            Array of predicted y values
        """
        pass

    def __call__(self, x_value: X) -> float:
        """
        Evaluate the function at a single point.

        Args:
            x_value: Input value

        Returns:
            Predicted output value
        """
        return self.evaluate([x_value]).item()

    @abstractmethod
    def update(self: F, xy_vals_seq: Iterable[Tuple[X, float]]) -> F:
        """
        Update parameters based on incremental (x, y) pairs.

        Args:
            xy_vals_seq: Sequence of (x, y) pairs

        Returns:
            Updated function approximation
        """
        pass

    @abstractmethod
    def solve(
        self: F,
        xy_vals_seq: Iterable[Tuple[X, float]],
        error_tolerance: Optional[float] = None
    ) -> F:
        """
        Fit parameters to the given data.

        This method assumes the entire data set of (x, y) pairs is available.

        Args:
            xy_vals_seq: Sequence of (x, y) pairs
            error_tolerance: Optional error tolerance for convergence

        Returns:
            Fitted function approximation
        """
        pass

    @abstractmethod
    def within(self: F, other: F, tolerance: float) -> bool:
        """
        Check if this function approximation is within tolerance of another.

        Args:
            other: Another function approximation of the same type
            tolerance: Tolerance for comparison

        Returns:
            True if within tolerance, False otherwise
        """
        pass
