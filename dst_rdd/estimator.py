from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd

from dst_rdd.helpers.config import RddConfig
from dst_rdd.helpers.preparation import Observations
from dst_rdd.estimators.base import BaseEstimator
from dst_rdd.estimators.local_poly import ModelResult, fit_local_polynomial
from dst_rdd.estimators.sweep import sweep
from dst_rdd.robustness.placebo import donut_fit, placebo_cutoffs


class RddEstimator(BaseEstimator):
    """
    Thin façade over the actual estimator functions.

    Binds a :class:`RddConfig` so callers only pass the observation table
    and the cell of the grid they want.
    """

    def __init__(self, config: RddConfig) -> None:
        super().__init__(config.copy().validate())

    # ---------------------------------------------------------
    # Single model
    # ---------------------------------------------------------
    def fit(
        self,
        observations: Observations,
        outcome: str,
        bandwidth: int,
        degree: int,
    ) -> ModelResult:
        return fit_local_polynomial(observations, outcome, bandwidth, degree, self.config)

    # ---------------------------------------------------------
    # Grid of models
    # ---------------------------------------------------------
    def sweep(
        self,
        observations: Observations,
        outcomes: Optional[Iterable[str]] = None,
        bandwidths: Optional[Iterable[int]] = None,
        degrees: Optional[Iterable[int]] = None,
    ) -> List[ModelResult]:
        """Sweep the given grid, falling back to the configured one."""
        outcomes = list(outcomes if outcomes is not None else self.config.outcomes)
        bandwidths = list(bandwidths if bandwidths is not None else self.config.bandwidths)
        degrees = list(degrees if degrees is not None else self.config.degrees)
        self._log(f"Sweep over outcomes={outcomes} bandwidths={bandwidths} degrees={degrees}")
        return sweep(observations, outcomes, bandwidths, degrees, self.config)

    # ---------------------------------------------------------
    # Robustness
    # ---------------------------------------------------------
    def placebo(
        self,
        observations: Observations,
        outcome: str,
        bandwidth: int,
        degree: int = 1,
        shifts: Optional[Iterable[int]] = None,
    ) -> pd.DataFrame:
        shifts = list(shifts if shifts is not None else self.config.placebo_shifts)
        return placebo_cutoffs(observations, outcome, shifts, bandwidth, degree, self.config)

    def donut(
        self,
        observations: Observations,
        outcome: str,
        bandwidth: int,
        degree: int,
        donut: int,
    ) -> ModelResult:
        return donut_fit(observations, outcome, bandwidth, degree, donut, self.config)
