"""
Reinforcement learning approximation library.

This library discretizes continuous observation spaces with equal-width bins
so that tabular reinforcement learning methods can be applied to them.
"""

__version__ = '0.1.0'

# Import submodules to make them available through the package
from rl_approx import config
from rl_approx import logging
from rl_approx import discretize
from rl_approx import function_approx

__all__ = [
    'config',
    'logging',
    'discretize',
    'function_approx'
]
