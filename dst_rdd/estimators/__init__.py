"""Public API for the estimators subpackage.

This module reexports the primary estimator functions and result
containers for convenience.  Users may import these names directly
from :mod:`dst_rdd.estimators`.
"""

from .local_poly import ModelResult, build_design, fit_local_polynomial, polynomial_basis
from .sweep import sweep

__all__ = [
    "ModelResult",
    "build_design",
    "fit_local_polynomial",
    "polynomial_basis",
    "sweep",
]
