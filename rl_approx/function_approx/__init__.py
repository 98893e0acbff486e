"""
Function approximation module for the rl_approx library.

This module provides classes for function approximation, which is used
to approximate value functions in reinforcement learning.
"""

from rl_approx.function_approx.base import FunctionApprox
from rl_approx.function_approx.tabular import BinnedTabular, average_weight

__all__ = [
    'FunctionApprox',
    'BinnedTabular',
    'average_weight'
]
