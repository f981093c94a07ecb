"""K-medoids clustering by parallel tempering over a cardinality-constrained quadratic model."""

__version__ = "0.1.0"

__all__ = ["__version__"]