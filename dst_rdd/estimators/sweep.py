# dst_rdd/estimators/sweep.py
from __future__ import annotations

from typing import Iterable, List, Optional

from ..helpers.config import RddConfig
from ..helpers.preparation import Observations
from ..helpers.utils import get_logger, resolve_outcome, unique_sorted
from .local_poly import ModelResult, fit_local_polynomial

logger = get_logger(__name__)


def sweep(
    observations: Observations,
    outcomes: Iterable[str],
    bandwidths: Iterable[int],
    degrees: Iterable[int],
    config: Optional[RddConfig] = None,
) -> List[ModelResult]:
    """Fit every (outcome, bandwidth, degree) combination.

    Results are ordered by outcome as declared, then bandwidth ascending,
    then degree ascending.  A failing combination raises (the
    :class:`~dst_rdd.errors.ModelNotIdentified` names the triple); rows are
    never dropped silently.
    """
    cfg = config or observations.config
    outcome_list = list(dict.fromkeys(resolve_outcome(o) for o in outcomes))
    if not outcome_list:
        raise ValueError("at least one outcome is required")
    bw_list = unique_sorted(bandwidths, what="bandwidths")
    deg_list = unique_sorted(degrees, what="degrees")

    logger.info(
        "[sweep] %d outcomes x %d bandwidths x %d degrees",
        len(outcome_list), len(bw_list), len(deg_list),
    )
    results: List[ModelResult] = []
    for outcome in outcome_list:
        for bw in bw_list:
            for deg in deg_list:
                res = fit_local_polynomial(observations, outcome, bw, deg, cfg)
                logger.debug(
                    "[sweep] %s bw=%d deg=%d -> %.4f (SE %.4f, n=%d)",
                    outcome, bw, deg, res.point_estimate, res.standard_error, res.n_obs,
                )
                results.append(res)
    return results


__all__ = ["sweep"]
