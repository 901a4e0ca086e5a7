# config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from .defaults import (
    BANDWIDTHS,
    BOUNDARY_MODES,
    COVARIATES,
    DATE_COL,
    DEGREES,
    DOW_COL,
    OUTCOMES,
    PLACEBO_SHIFTS,
    ROBUST_COV_TYPES,
    RUNNING_COL,
    TREAT_COL,
)


@dataclass
class RddConfig:
    # =========================
    # Source
    # =========================
    # Path or URL of the merged crime/weather CSV.  Not needed when an
    # Observations table is handed to the study directly.
    source: Optional[str] = None
    # If set (ISO date), the running variable, treatment flag and weekday
    # are derived from the date column instead of being read from the file.
    cutoff: Optional[str] = None

    # =========================
    # Schema
    # =========================
    date_col: str = DATE_COL
    running_col: str = RUNNING_COL
    treat_col: str = TREAT_COL
    dow_col: str = DOW_COL
    covariates: Tuple[str, ...] = COVARIATES

    # =========================
    # Sweep grid
    # =========================
    outcomes: Tuple[str, ...] = OUTCOMES
    bandwidths: Tuple[int, ...] = BANDWIDTHS
    degrees: Tuple[int, ...] = DEGREES

    # =========================
    # Inference
    # =========================
    cov_type: Literal["HC0", "HC1", "HC2", "HC3"] = "HC2"
    alpha: float = 0.05
    power: float = 0.80  # used for the analytic MDE only

    # Day 0 is the first treated day ("treated") or dropped ("exclude").
    boundary: Literal["treated", "exclude"] = "treated"

    # =========================
    # Robustness
    # =========================
    placebo_shifts: Tuple[int, ...] = PLACEBO_SHIFTS

    # =========================
    # Artifacts
    # =========================
    artifact_dir: Optional[str] = None

    def validate(self) -> "RddConfig":
        if self.cov_type not in ROBUST_COV_TYPES:
            raise ValueError(
                f"cov_type must be one of {ROBUST_COV_TYPES}, got {self.cov_type!r}"
            )
        if self.boundary not in BOUNDARY_MODES:
            raise ValueError(
                f"boundary must be one of {BOUNDARY_MODES}, got {self.boundary!r}"
            )
        if not 0.0 < float(self.alpha) < 1.0:
            raise ValueError(f"alpha must lie in (0, 1), got {self.alpha!r}")
        if not 0.0 < float(self.power) < 1.0:
            raise ValueError(f"power must lie in (0, 1), got {self.power!r}")
        return self

    def copy(self) -> "RddConfig":
        return RddConfig(
            source=self.source,
            cutoff=self.cutoff,
            date_col=self.date_col,
            running_col=self.running_col,
            treat_col=self.treat_col,
            dow_col=self.dow_col,
            covariates=tuple(self.covariates),
            outcomes=tuple(self.outcomes),
            bandwidths=tuple(self.bandwidths),
            degrees=tuple(self.degrees),
            cov_type=self.cov_type,
            alpha=self.alpha,
            power=self.power,
            boundary=self.boundary,
            placebo_shifts=tuple(self.placebo_shifts),
            artifact_dir=self.artifact_dir,
        )
