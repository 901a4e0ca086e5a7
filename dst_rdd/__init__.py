"""
The :mod:`dst_rdd` package estimates the effect of the Daylight Savings
Time (DST) transition on daily crime rates with a sharp regression
discontinuity design (RDD).  The running variable is the number of days
from the spring clock change; the treatment effect is the jump in the
outcome at the transition, estimated by local polynomial regression with
heteroskedasticity-robust standard errors and swept over a grid of
bandwidths and polynomial degrees.

The package exposes three core classes:

``Observations``
    The read-only daily crime/weather table.  Built by
    :func:`dst_rdd.helpers.preparation.load_observations`, which reads a
    CSV from a path or URL, validates the schema and checks that the
    treatment flag agrees with the sign of the running variable.

``RddEstimator``
    Fits the local polynomial model for one (outcome, bandwidth, degree)
    cell, sweeps a whole grid, and runs placebo-cutoff and donut checks.
    See :class:`dst_rdd.estimator.RddEstimator`.

``RddStudy``
    A high-level orchestrator that wires together loading and estimation.
    Users instantiate this class with a configuration and call
    :meth:`dst_rdd.study.RddStudy.run` to obtain the results table.

References
----------
* Imbens and Lemieux (2008) and Lee and Lemieux (2010) describe local
  polynomial estimation of sharp discontinuities and the practice of
  reporting estimates across several bandwidths.

* Gelman and Imbens (2019) argue against high-order global polynomials;
  the default grid therefore stops at quadratic fits within a few weeks
  of the cutoff.

* MacKinnon and White (1985) propose the HC2/HC3 corrections used here
  for heteroskedasticity-robust inference in small samples.

"""

from .errors import DataUnavailable, ModelNotIdentified, RddError, SchemaMismatch
from .helpers.config import RddConfig
from .helpers.preparation import Observations, load_observations
from .helpers.utils import functional_form_label
from .estimators.local_poly import ModelResult, fit_local_polynomial
from .estimators.sweep import sweep
from .estimator import RddEstimator
from .study import RddStudy, RddStudyResult

__all__ = [
    "DataUnavailable",
    "ModelNotIdentified",
    "RddError",
    "SchemaMismatch",
    "RddConfig",
    "Observations",
    "load_observations",
    "functional_form_label",
    "ModelResult",
    "fit_local_polynomial",
    "sweep",
    "RddEstimator",
    "RddStudy",
    "RddStudyResult",
]
