# dst_rdd/helpers/preparation.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union
from urllib.error import URLError

import numpy as np
import pandas as pd

from .config import RddConfig
from .defaults import DAY_NAMES
from .utils import get_logger, resolve_outcome
from ..errors import DataUnavailable, SchemaMismatch

logger = get_logger(__name__)

_TRUE_STRINGS = {"true", "t", "yes", "1", "1.0"}
_FALSE_STRINGS = {"false", "f", "no", "0", "0.0"}


# ----------------------------
# Basic helpers
# ----------------------------
def _required_columns(cfg: RddConfig) -> List[str]:
    outcomes = [resolve_outcome(o) for o in cfg.outcomes]
    cols = [cfg.date_col] + outcomes + list(cfg.covariates)
    cols += [cfg.running_col, cfg.treat_col, cfg.dow_col]
    return list(dict.fromkeys(cols))


def _coerce_treated(s: pd.Series, col: str) -> pd.Series:
    """Accept bool, 0/1 or TRUE/FALSE strings; return int 0/1."""
    if pd.api.types.is_bool_dtype(s):
        return s.astype(int)
    if pd.api.types.is_numeric_dtype(s):
        if s.isna().any() or not s.isin([0, 1]).all():
            raise SchemaMismatch(f"column {col!r} must only contain 0/1 values")
        return s.astype(int)
    lowered = s.astype(str).str.strip().str.lower()
    bad = ~lowered.isin(_TRUE_STRINGS | _FALSE_STRINGS)
    if bad.any():
        examples = sorted(set(s[bad].astype(str)))[:3]
        raise SchemaMismatch(f"column {col!r} has non-boolean values, e.g. {examples}")
    return lowered.isin(_TRUE_STRINGS).astype(int)


def treated_from_running(running: pd.Series, boundary: str = "treated") -> pd.Series:
    """Treatment indicator implied by the sign of the running variable.

    Under ``boundary="treated"`` day 0 is the first treated day; under
    ``"exclude"`` day 0 is not treated (and is dropped from estimation).
    """
    if boundary == "treated":
        return (running >= 0).astype(int)
    return (running > 0).astype(int)


def derive_running_variable(
    df: pd.DataFrame,
    cutoff: Union[str, pd.Timestamp],
    config: Optional[RddConfig] = None,
) -> pd.DataFrame:
    """Add running variable, treatment flag and weekday from the date column."""
    cfg = config or RddConfig()
    if cfg.date_col not in df.columns:
        raise SchemaMismatch(
            f"cannot derive the running variable without {cfg.date_col!r}",
            missing=[cfg.date_col],
        )
    out = df.copy()
    try:
        dates = pd.to_datetime(out[cfg.date_col])
        cut = pd.Timestamp(cutoff).normalize()
    except (ValueError, TypeError) as e:
        raise SchemaMismatch(f"could not parse dates for cutoff {cutoff!r}: {e}") from e

    out[cfg.running_col] = (dates.dt.normalize() - cut).dt.days.astype(int)
    out[cfg.treat_col] = treated_from_running(out[cfg.running_col], cfg.boundary)
    out[cfg.dow_col] = dates.dt.dayofweek.map(dict(enumerate(DAY_NAMES)))
    return out


def _read_source(source: Any) -> pd.DataFrame:
    if isinstance(source, pd.DataFrame):
        return source.copy()
    try:
        df = pd.read_csv(source)
    except (OSError, URLError, ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataUnavailable(source, f"{type(e).__name__}: {e}") from e
    if df.empty:
        raise DataUnavailable(source, "no rows")
    return df


# ----------------------------
# Observation table
# ----------------------------
class Observations:
    """
    Read-only daily observation table for one DST cutoff:
      - one row per date (unique),
      - signed integer running variable,
      - 0/1 treatment flag consistent with the running variable,
      - categorical weekday plus weather covariates.

    Build via :func:`load_observations`.  Accessors return copies, so fits
    never mutate the table shared across a session.
    """

    def __init__(self, frame: pd.DataFrame, config: Optional[RddConfig] = None) -> None:
        self.config = (config or RddConfig()).copy().validate()
        self._frame = self._prepare(frame)
        self.info: Dict[str, Any] = self._summarise()

    # ---------- validation / coercion
    def _prepare(self, frame: pd.DataFrame) -> pd.DataFrame:
        cfg = self.config
        missing = [c for c in _required_columns(cfg) if c not in frame.columns]
        if missing:
            raise SchemaMismatch(f"missing expected columns: {missing}", missing=missing)

        d = frame.copy()
        try:
            d[cfg.date_col] = pd.to_datetime(d[cfg.date_col])
        except (ValueError, TypeError) as e:
            raise SchemaMismatch(f"column {cfg.date_col!r} is not a date: {e}") from e

        running = pd.to_numeric(d[cfg.running_col], errors="coerce")
        if running.isna().any() or not np.allclose(running, np.round(running)):
            raise SchemaMismatch(f"column {cfg.running_col!r} must hold integers")
        d[cfg.running_col] = running.round().astype(int)
        d[cfg.treat_col] = _coerce_treated(d[cfg.treat_col], cfg.treat_col)
        dow = d[cfg.dow_col]
        d[cfg.dow_col] = dow.where(dow.isna(), dow.astype(str))

        dup = d[cfg.date_col].duplicated(keep=False)
        if dup.any():
            dates = sorted(d.loc[dup, cfg.date_col].dt.strftime("%Y-%m-%d").unique())[:3]
            raise SchemaMismatch(f"duplicate dates in observation table, e.g. {dates}")

        expected = treated_from_running(d[cfg.running_col], cfg.boundary)
        check = d[cfg.running_col] != 0 if cfg.boundary == "exclude" else slice(None)
        bad = d.loc[check]
        bad = bad[bad[cfg.treat_col] != expected.loc[bad.index]]
        if not bad.empty:
            raise SchemaMismatch(
                f"{len(bad)} rows have {cfg.treat_col!r} inconsistent with the sign of "
                f"{cfg.running_col!r} (boundary={cfg.boundary!r})"
            )

        return d.sort_values(cfg.date_col).reset_index(drop=True)

    def _summarise(self) -> Dict[str, Any]:
        cfg = self.config
        d = self._frame
        return {
            "obs": int(len(d)),
            "treated_rows": int(d[cfg.treat_col].sum()),
            "first_date": d[cfg.date_col].min(),
            "last_date": d[cfg.date_col].max(),
            "running_min": int(d[cfg.running_col].min()),
            "running_max": int(d[cfg.running_col].max()),
        }

    # ---------- accessors
    @property
    def frame(self) -> pd.DataFrame:
        return self._frame.copy()

    @property
    def running(self) -> pd.Series:
        return self._frame[self.config.running_col].copy()

    def __len__(self) -> int:
        return len(self._frame)

    def has_column(self, name: str) -> bool:
        return name in self._frame.columns

    def window(self, bandwidth: int, *, donut: int = 0) -> pd.DataFrame:
        """Rows with ``|running| <= bandwidth`` (and ``|running| >= donut``)."""
        b = int(bandwidth)
        if b != bandwidth or b < 1:
            raise ValueError(f"bandwidth must be a positive integer, got {bandwidth!r}")
        r = self._frame[self.config.running_col].abs()
        mask = r <= b
        if donut:
            mask &= r >= int(donut)
        if self.config.boundary == "exclude":
            mask &= r != 0
        return self._frame.loc[mask].copy()

    def recentred(self, shift: int) -> "Observations":
        """Placebo table: cutoff moved by ``shift`` days on one side only.

        Positive shifts keep the post-cutoff rows, negative shifts the
        pre-cutoff rows, so the real discontinuity never enters the window.
        """
        s = int(shift)
        if s == 0:
            raise ValueError("placebo shift must be non-zero")
        cfg = self.config
        d = self._frame
        side = d[d[cfg.running_col] >= 0] if s > 0 else d[d[cfg.running_col] < 0]
        side = side.copy()
        side[cfg.running_col] = side[cfg.running_col] - s
        side[cfg.treat_col] = treated_from_running(side[cfg.running_col], cfg.boundary)
        return Observations(side, cfg)


def load_observations(
    source: Union[str, pd.DataFrame, Any],
    config: Optional[RddConfig] = None,
    *,
    cutoff: Optional[Union[str, pd.Timestamp]] = None,
) -> Observations:
    """Read the merged crime/weather table from a path, URL or DataFrame.

    Raises
    ------
    DataUnavailable
        The source cannot be read or parsed.
    SchemaMismatch
        Expected columns are absent or a data invariant is violated.
    """
    cfg = config or RddConfig()
    cut = cutoff if cutoff is not None else cfg.cutoff
    df = _read_source(source)
    if cut is not None:
        df = derive_running_variable(df, cut, cfg)
    obs = Observations(df, cfg)
    logger.info(
        "[load] %d rows from %s to %s (running %d..%d, %d treated)",
        obs.info["obs"],
        obs.info["first_date"].date(),
        obs.info["last_date"].date(),
        obs.info["running_min"],
        obs.info["running_max"],
        obs.info["treated_rows"],
    )
    return obs


__all__ = [
    "Observations",
    "load_observations",
    "derive_running_variable",
    "treated_from_running",
]
