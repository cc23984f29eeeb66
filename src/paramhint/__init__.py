"""Lexical type hint estimation for Python parameters."""

from paramhint.inference.estimator import HintEstimate, TypeHintEstimator

__version__ = "0.1.0"

__all__ = ["HintEstimate", "TypeHintEstimator", "__version__"]
