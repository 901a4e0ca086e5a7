"""Error taxonomy for the DST regression discontinuity package.

Load-time failures are split between a source that cannot be read at all
(:class:`DataUnavailable`) and one that was read but does not look like an
observation table (:class:`SchemaMismatch`).  Fit-time failures raise
:class:`ModelNotIdentified`, which carries the outcome/bandwidth/degree
triple so a failing cell of a sweep can be diagnosed without re-running it.
"""

from __future__ import annotations

from typing import Optional, Sequence


class RddError(Exception):
    """Base class for every error raised by :mod:`dst_rdd`."""


class DataUnavailable(RddError):
    """The observation source could not be retrieved or parsed."""

    def __init__(self, source: object, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"could not load observations from {source!r}: {reason}")


class SchemaMismatch(RddError):
    """Expected columns are missing or the table breaks a data invariant."""

    def __init__(self, message: str, missing: Optional[Sequence[str]] = None) -> None:
        self.missing = list(missing or [])
        super().__init__(message)


class ModelNotIdentified(RddError):
    """Too few observations (or a rank-deficient design) to fit the model."""

    def __init__(
        self,
        outcome: str,
        bandwidth: int,
        degree: int,
        *,
        n_obs: int,
        n_params: Optional[int] = None,
        reason: str = "",
    ) -> None:
        self.outcome = outcome
        self.bandwidth = bandwidth
        self.degree = degree
        self.n_obs = n_obs
        self.n_params = n_params
        self.reason = reason
        msg = (
            f"model not identified for outcome={outcome!r}, bandwidth={bandwidth}, "
            f"degree={degree} (n_obs={n_obs}"
        )
        if n_params is not None:
            msg += f", n_params={n_params}"
        msg += ")"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


__all__ = ["RddError", "DataUnavailable", "SchemaMismatch", "ModelNotIdentified"]
