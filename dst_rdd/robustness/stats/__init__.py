"""Statistics helpers used by the estimators and robustness checks."""

from .mde import analytic_mde_from_se

__all__ = ["analytic_mde_from_se"]
