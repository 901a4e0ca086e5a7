# dst_rdd/estimators/local_poly.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from ..errors import ModelNotIdentified, SchemaMismatch
from ..helpers.config import RddConfig
from ..helpers.preparation import Observations
from ..helpers.utils import functional_form_label, get_logger, resolve_outcome
from ..robustness.stats.mde import analytic_mde_from_se

logger = get_logger(__name__)

BASIS_PREFIX = "days"

LEVERAGE_TOL = 1e-8
_LEVERAGE_SCALED = ("HC2", "HC3")
_COLUMN_FIELDS = ("date_col", "running_col", "treat_col", "dow_col")

_ROW_NAMES = {
    "outcome_name": "outcome",
    "polynomial_degree": "degree",
    "point_estimate": "estimate",
    "standard_error": "se",
    "confidence_interval_low": "ci_low",
    "confidence_interval_high": "ci_high",
    "p_value": "p",
}


@dataclass(frozen=True)
class ModelResult:
    outcome_name: str
    bandwidth: int
    polynomial_degree: int
    point_estimate: float
    standard_error: float
    confidence_interval_low: float
    confidence_interval_high: float
    p_value: float
    significant: bool
    n_obs: int
    df_resid: float
    classical_standard_error: float
    cov_type: str
    mde: float
    donut: int = 0
    model: Any = field(default=None, repr=False, compare=False)

    @property
    def functional_form(self) -> str:
        return functional_form_label(self.polynomial_degree)

    def as_row(self) -> Dict[str, Any]:
        """Scalar fields under the short column names used in tables."""
        row = {
            _ROW_NAMES.get(f.name, f.name): getattr(self, f.name)
            for f in fields(self)
            if f.name != "model"
        }
        row["functional_form"] = self.functional_form
        return row


def polynomial_basis(running: pd.Series, degree: int, prefix: str = BASIS_PREFIX) -> pd.DataFrame:
    """Raw (non-orthogonal) powers 1..degree of the running variable."""
    d = int(degree)
    if d != degree or d < 1:
        raise ValueError(f"polynomial degree must be an integer >= 1, got {degree!r}")
    x = running.astype(float)
    return pd.DataFrame(
        {f"{prefix}_p{k}": x ** k for k in range(1, d + 1)},
        index=running.index,
    )


def build_design(
    window: pd.DataFrame,
    outcome: str,
    degree: int,
    config: RddConfig,
) -> Tuple[pd.DataFrame, str, List[str]]:
    """Expand the running variable and return ``(used, formula, rd_terms)``.

    The polynomial basis and its treatment interactions are materialised as
    columns, so the formula always has the same shape:
    ``y ~ days_p1..K + treated + days_p1..K_x_treated + C(dow) + covariates``.
    """
    cfg = config
    basis = polynomial_basis(window[cfg.running_col], degree)
    treat = window[cfg.treat_col].astype(float)
    inter = basis.mul(treat, axis=0)
    inter.columns = [f"{c}_x_{cfg.treat_col}" for c in basis.columns]

    d = pd.concat([window, basis, inter], axis=1)
    rd_terms = list(basis.columns) + [cfg.treat_col] + list(inter.columns)
    rhs = rd_terms + [f"C({cfg.dow_col})"] + list(cfg.covariates)
    formula = f"{outcome} ~ " + " + ".join(rhs)

    need = [outcome, cfg.running_col, cfg.treat_col, cfg.dow_col] + list(cfg.covariates)
    used = d.dropna(subset=[c for c in need if c in d.columns]).copy()
    return used, formula, rd_terms


def fit_local_polynomial(
    observations: Observations,
    outcome: str,
    bandwidth: int,
    degree: int,
    config: Optional[RddConfig] = None,
    *,
    donut: int = 0,
) -> ModelResult:
    """Sharp RDD estimate of the jump in ``outcome`` at the DST cutoff.

    Fits OLS on the rows within ``bandwidth`` days of the cutoff with a
    degree-``degree`` polynomial in the running variable on each side,
    weekday fixed effects and weather controls, and reports the
    ``treated`` coefficient with heteroskedasticity-robust inference.

    Parameters
    ----------
    observations : Observations
        Loaded daily table.
    outcome : str
        Outcome column or alias (``"property"``, ``"violent"``).
    bandwidth : int
        Half-width of the estimation window in days.
    degree : int
        Polynomial degree (1 = local linear).
    config : RddConfig, optional
        Inference options; defaults to the table's own config.
    donut : int, default 0
        Exclude rows with ``|days_from_cutoff| < donut``.

    Returns
    -------
    ModelResult

    Raises
    ------
    SchemaMismatch
        ``outcome`` is not a column of the table.
    ModelNotIdentified
        Too few rows, a rank-deficient design, or (for HC2/HC3) an
        observation with leverage 1 in the window.
    ValueError
        ``config`` names different schema columns than the table.
    """
    cfg = (config or observations.config).validate()
    if int(degree) != degree or int(degree) < 1:
        raise ValueError(f"polynomial degree must be an integer >= 1, got {degree!r}")
    bandwidth, degree = int(bandwidth), int(degree)

    col = resolve_outcome(outcome)
    if not observations.has_column(col):
        raise SchemaMismatch(f"unknown outcome column {col!r}", missing=[col])
    # windowing uses the table's own column names
    differ = [f for f in _COLUMN_FIELDS if getattr(cfg, f) != getattr(observations.config, f)]
    if differ:
        raise ValueError(f"config column names differ from the observation table: {differ}")
    absent = [c for c in cfg.covariates if not observations.has_column(c)]
    if absent:
        raise SchemaMismatch(f"unknown covariate columns {absent}", missing=absent)

    win = observations.window(bandwidth, donut=donut)
    used, formula, _ = build_design(win, col, degree, cfg)
    if used.empty:
        raise ModelNotIdentified(col, bandwidth, degree, n_obs=0, reason="no observations in window")

    model = smf.ols(formula, data=used)
    n_obs, n_params = model.exog.shape
    rank = int(np.linalg.matrix_rank(model.exog))
    if rank < n_params:
        raise ModelNotIdentified(
            col, bandwidth, degree, n_obs=n_obs, n_params=n_params,
            reason=f"design matrix has rank {rank}",
        )
    if n_obs - n_params < 1:
        raise ModelNotIdentified(
            col, bandwidth, degree, n_obs=n_obs, n_params=n_params,
            reason="no residual degrees of freedom",
        )

    logger.debug("[ESTIMATOR] Formula: %s (bw=%d, n=%d)", formula, bandwidth, n_obs)
    classical = model.fit()
    if cfg.cov_type in _LEVERAGE_SCALED:
        # HC2/HC3 divide by (1 - h); h is 1 only up to rounding
        h_max = float(np.max(classical.get_influence().hat_matrix_diag))
        if h_max >= 1.0 - LEVERAGE_TOL:
            raise ModelNotIdentified(
                col, bandwidth, degree, n_obs=n_obs, n_params=n_params,
                reason=f"leverage-1 observation (max h = {h_max:.10f}) under {cfg.cov_type}",
            )
    robust = model.fit(cov_type=cfg.cov_type, use_t=True)

    term = cfg.treat_col
    coef = float(robust.params[term])
    se = float(robust.bse[term])
    if not np.isfinite(se):
        raise ModelNotIdentified(
            col, bandwidth, degree, n_obs=n_obs, n_params=n_params,
            reason=f"{cfg.cov_type} standard error is not finite (leverage 1 observations)",
        )
    lo, hi = (float(v) for v in robust.conf_int(alpha=cfg.alpha).loc[term])
    p = float(robust.pvalues[term])
    df_resid = float(robust.df_resid)

    return ModelResult(
        outcome_name=col,
        bandwidth=bandwidth,
        polynomial_degree=degree,
        point_estimate=coef,
        standard_error=se,
        confidence_interval_low=lo,
        confidence_interval_high=hi,
        p_value=p,
        significant=bool(p < cfg.alpha),
        n_obs=int(n_obs),
        df_resid=df_resid,
        classical_standard_error=float(classical.bse[term]),
        cov_type=cfg.cov_type,
        mde=analytic_mde_from_se(se, df_resid, alpha=cfg.alpha, power=cfg.power),
        donut=int(donut),
        model=robust,
    )


__all__ = ["ModelResult", "polynomial_basis", "build_design", "fit_local_polynomial"]
