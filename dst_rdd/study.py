# dst_rdd/study.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from .helpers.config import RddConfig
from .helpers.preparation import Observations, load_observations
from .helpers.utils import get_logger, resolve_outcome
from .estimator import RddEstimator
from .estimators.local_poly import ModelResult
from .reporting.summary import results_frame

logger = get_logger(__name__)


@dataclass
class RddStudyResult:
    """Container for all outputs of an RddStudy run."""
    config: RddConfig
    data: Observations

    results: List[ModelResult] = field(default_factory=list)
    table: pd.DataFrame = field(default_factory=pd.DataFrame)

    # Robustness
    placebo: Optional[pd.DataFrame] = None


class RddStudy:
    """Orchestrates load -> sweep -> robustness for the DST crime analysis."""

    def __init__(self, config: RddConfig) -> None:
        self.config = config.copy().validate()
        self._estimator: Optional[RddEstimator] = None

    @property
    def estimator(self) -> RddEstimator:
        if self._estimator is None:
            raise RuntimeError("Estimator not initialised yet. Call .run().")
        return self._estimator

    def load(self) -> Observations:
        if not self.config.source:
            raise ValueError("RddConfig.source is required when no observations are given")
        return load_observations(self.config.source, self.config)

    def run(
        self,
        observations: Optional[Observations] = None,
        *,
        run_placebo: bool = False,
    ) -> RddStudyResult:
        """
        Run the full study pipeline.

        Parameters
        ----------
        observations : Observations, optional
            Pre-loaded table; if omitted it is read from ``config.source``.
        run_placebo : bool
            If True, estimate placebo cutoffs for the first configured
            outcome at the narrowest bandwidth with a linear fit.

        Returns
        -------
        RddStudyResult
            Container with the sweep results and robustness checks.
        """
        # 1) Load
        data = observations if observations is not None else self.load()

        # 2) Estimator
        self._estimator = RddEstimator(self.config)
        result = RddStudyResult(config=self.config, data=data)

        # 3) Sweep
        result.results = self.estimator.sweep(data)
        result.table = results_frame(result.results)

        # 4) Placebo cutoffs
        if run_placebo and self.config.placebo_shifts:
            outcome = resolve_outcome(self.config.outcomes[0])
            bandwidth = min(int(b) for b in self.config.bandwidths)
            result.placebo = self.estimator.placebo(data, outcome, bandwidth, degree=1)

        logger.info("[study] %d models fitted", len(result.results))
        return result
