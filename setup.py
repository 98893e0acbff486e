"""
Setup script for the rl_approx package.
"""

from setuptools import setup, find_packages

setup(
    name="rl_approx",
    version="0.1.0",
    description="Equal-width discretization of continuous spaces for tabular reinforcement learning",
    packages=find_packages(include=["rl_approx", "rl_approx.*"]),
    install_requires=[
        "numpy>=1.24.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
)
