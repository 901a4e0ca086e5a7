"""CLI helper to run the DST crime RDD study on a CSV dataset.

This script expects a CSV file (local path or URL) containing the merged
daily crime and weather table (date, property_crime_rate,
violent_crime_rate, average_temperature, rainfall_mm, days_from_cutoff,
treated, day_of_week).  It builds an `RddConfig`, runs the bandwidth
sweep, prints the coefficient tables and writes the results table and the
faceted bandwidth plot to the chosen artifact directory.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from dst_rdd.helpers.config import RddConfig
from dst_rdd.helpers.defaults import BANDWIDTHS, DEGREES, OUTCOMES, PLACEBO_SHIFTS
from dst_rdd.reporting.plotting import FIG, plot_bandwidth_sweep, plot_placebo
from dst_rdd.reporting.summary import print_sweep_summary
from dst_rdd.study import RddStudy


def _int_list(text: str) -> List[int]:
    return [int(x) for x in text.split(",") if x.strip()]


def _str_list(text: str) -> List[str]:
    return [x.strip() for x in text.split(",") if x.strip()]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the DST crime regression discontinuity study")
    parser.add_argument(
        "source",
        type=str,
        help="Path or URL of the merged crime/weather CSV",
    )
    parser.add_argument(
        "--cutoff",
        type=str,
        default=None,
        help="DST transition date (YYYY-MM-DD); derive the running variable from the date column",
    )
    parser.add_argument(
        "--outcomes",
        type=_str_list,
        default=list(OUTCOMES),
        help="Comma-separated outcome columns or aliases (property, violent)",
    )
    parser.add_argument(
        "--bandwidths",
        type=_int_list,
        default=list(BANDWIDTHS),
        help="Comma-separated bandwidths in days",
    )
    parser.add_argument(
        "--degrees",
        type=_int_list,
        default=list(DEGREES),
        help="Comma-separated polynomial degrees",
    )
    parser.add_argument(
        "--cov-type",
        type=str,
        default="HC2",
        choices=["HC0", "HC1", "HC2", "HC3"],
        help="Heteroskedasticity-robust covariance estimator",
    )
    parser.add_argument(
        "--alpha",
        type=float,
        default=0.05,
        help="Significance level for confidence intervals",
    )
    parser.add_argument(
        "--boundary",
        type=str,
        default="treated",
        choices=["treated", "exclude"],
        help="Treat the transition day as the first treated day, or drop it",
    )
    parser.add_argument(
        "--placebo-shifts",
        type=_int_list,
        default=None,
        help=f"Comma-separated placebo shifts in days (e.g. {','.join(map(str, PLACEBO_SHIFTS))})",
    )
    parser.add_argument(
        "--artifact-dir",
        type=str,
        default="./_artifacts",
        help="Directory for the results table and figures",
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not open figure windows",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every fitted model",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = RddConfig(
        source=args.source,
        cutoff=args.cutoff,
        outcomes=tuple(args.outcomes),
        bandwidths=tuple(args.bandwidths),
        degrees=tuple(args.degrees),
        cov_type=args.cov_type,
        alpha=args.alpha,
        boundary=args.boundary,
        placebo_shifts=tuple(args.placebo_shifts or ()),
        artifact_dir=args.artifact_dir,
    )

    out_dir = Path(args.artifact_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    FIG.default_save_dir = str(out_dir)
    FIG.show_default = not args.no_show

    result = RddStudy(cfg).run(run_placebo=bool(args.placebo_shifts))
    print_sweep_summary(
        result.results,
        info=result.data.info,
        placebo=result.placebo,
        alpha=cfg.alpha,
    )

    result.table.to_csv(out_dir / "sweep_results.csv", index=False)
    plot_bandwidth_sweep(result.table, save="bandwidth_sweep.png")
    if result.placebo is not None:
        result.placebo.to_csv(out_dir / "placebo_results.csv", index=False)
        plot_placebo(result.placebo, save="placebo_cutoffs.png")

    print(f"Artifacts written to {out_dir}")


if __name__ == "__main__":
    main()
