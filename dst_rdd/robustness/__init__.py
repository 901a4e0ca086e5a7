"""
Robustness utilities for the DST regression discontinuity estimates.

This subpackage groups together checks that probe whether the jump
estimated at the DST cutoff is an artefact of the chosen window:

* :mod:`dst_rdd.robustness.placebo` re-estimates the model at fake
  cutoffs away from the real transition (where no effect should appear)
  and with a "donut" of days around the cutoff removed.
* :mod:`dst_rdd.robustness.stats` contains general statistics routines,
  currently the analytic minimum detectable effect.

Examples
--------
Placebo cutoffs one and two weeks away from the transition::

    from dst_rdd.robustness.placebo import placebo_cutoffs
    tbl = placebo_cutoffs(obs, "property", shifts=[-14, -7, 7, 14],
                          bandwidth=7, degree=1)
    print(tbl[["placebo_shift", "estimate", "p"]])

"""

from .stats.mde import analytic_mde_from_se

__all__ = ["analytic_mde_from_se"]
