# summary.py
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..estimators.local_poly import ModelResult

TABLE_COLUMNS: List[str] = [
    "outcome",
    "bandwidth",
    "degree",
    "functional_form",
    "estimate",
    "se",
    "ci_low",
    "ci_high",
    "p",
    "significant",
    "n_obs",
    "mde",
]

# ================================
# Formatting helpers
# ================================

def _fmt_p(p: Optional[float]) -> str:
    if p is None or (isinstance(p, float) and (np.isnan(p) or np.isinf(p))):
        return "NA"
    return f"{p:.3f}" if p >= 0.001 else "<0.001"

def _stars(p: Optional[float]) -> str:
    if p is None or not np.isfinite(p):
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    return ""

def _ci_str(lo: float, hi: float) -> str:
    return f"[{lo:.3f}, {hi:.3f}]"

def _rule(title: str | None = None) -> None:
    line = "=" * 78
    if title:
        print(f"\n{line}\n{title}\n{line}")
    else:
        print(f"\n{line}")


# ================================
# Tables
# ================================

def results_frame(results: Iterable[ModelResult]) -> pd.DataFrame:
    """One row per model, in sweep order, with short column names."""
    rows = [r.as_row() for r in results]
    if not rows:
        return pd.DataFrame(columns=TABLE_COLUMNS)
    df = pd.DataFrame(rows)
    extra = [c for c in df.columns if c not in TABLE_COLUMNS]
    return df[TABLE_COLUMNS + extra]


def format_coefficient_table(frame: pd.DataFrame, *, digits: int = 3) -> str:
    """Fixed-width coefficient table, one block per bandwidth."""
    if frame is None or len(frame) == 0:
        return "(no results)"
    blocks: List[str] = []
    for bw, d in frame.groupby("bandwidth", sort=True):
        disp = pd.DataFrame(
            {
                "Outcome": d["outcome"].astype(str),
                "Form": d["functional_form"].astype(str),
                "Estimate": [f"{v:.{digits}f}{_stars(p)}" for v, p in zip(d["estimate"], d["p"])],
                "SE": [f"({v:.{digits}f})" for v in d["se"]],
                "95% CI": [_ci_str(lo, hi) for lo, hi in zip(d["ci_low"], d["ci_high"])],
                "p": [_fmt_p(p) for p in d["p"]],
                "N": d["n_obs"].astype(int),
            }
        )
        blocks.append(f"Bandwidth = {int(bw)} days\n" + disp.to_string(index=False))
    blocks.append("* p<0.05, ** p<0.01, *** p<0.001; robust standard errors in parentheses.")
    return "\n\n".join(blocks)


# ================================
# Print blocks
# ================================

def print_data_block(info: dict) -> None:
    _rule("OBSERVATIONS")
    obs = info.get("obs")
    treated = info.get("treated_rows")
    first = info.get("first_date")
    last = info.get("last_date")
    span = f"{pd.Timestamp(first).date()} .. {pd.Timestamp(last).date()}" if first is not None else "NA"
    print(f"Days: {obs} | Treated days: {treated} | Dates: {span}")
    print(f"Running variable: {info.get('running_min')} .. {info.get('running_max')}")


def print_sweep_block(frame: pd.DataFrame, *, cov_type: Optional[str] = None) -> None:
    title = "RDD estimates by bandwidth"
    if cov_type:
        title += f" ({cov_type} robust SE)"
    _rule(title)
    print(format_coefficient_table(frame))


def print_placebo_block(frame: Optional[pd.DataFrame], *, alpha: float = 0.05) -> None:
    _rule("Placebo cutoffs")
    if frame is None or len(frame) == 0:
        print("(not computed)")
        return
    for _, r in frame.sort_values("placebo_shift").iterrows():
        print(
            f" shift {int(r['placebo_shift']):+d}: {r['estimate']:+.3f} "
            f"{_ci_str(r['ci_low'], r['ci_high'])} p {_fmt_p(r['p'])}"
        )
    n_sig = int((frame["p"] < alpha).sum())
    print(f" {n_sig}/{len(frame)} placebo cutoffs significant at {alpha:.0%}.")


def print_sweep_summary(
    results: Sequence[ModelResult],
    *,
    info: Optional[dict] = None,
    placebo: Optional[pd.DataFrame] = None,
    alpha: float = 0.05,
) -> pd.DataFrame:
    """Print the report blocks and return the results table."""
    frame = results_frame(results)
    if info:
        print_data_block(info)
    cov = frame["cov_type"].iloc[0] if len(frame) and "cov_type" in frame.columns else None
    print_sweep_block(frame, cov_type=cov)
    if placebo is not None:
        print_placebo_block(placebo, alpha=alpha)
    return frame


__all__ = [
    "TABLE_COLUMNS",
    "results_frame",
    "format_coefficient_table",
    "print_data_block",
    "print_sweep_block",
    "print_placebo_block",
    "print_sweep_summary",
]
