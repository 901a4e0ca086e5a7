"""Reporting utilities for the ``dst_rdd`` package.

This subpackage collects functions for tabulating and plotting the
results of a bandwidth sweep.  The :mod:`dst_rdd.reporting.summary`
module builds the coefficient tables and prints the report blocks; the
functions in :mod:`dst_rdd.reporting.plotting` produce matplotlib
figures for the faceted bandwidth sweep, the raw discontinuity and the
placebo cutoffs.

Users may import these functions directly from this subpackage.  For
example::

    from dst_rdd.reporting import results_frame, plot_bandwidth_sweep

"""

from .plotting import (
    FIG,
    FigFinalizer,
    PlotTheme,
    plot_bandwidth_sweep,
    plot_placebo,
    plot_rd_scatter,
    plot_sweep_panel,
)
from .summary import (
    format_coefficient_table,
    print_sweep_summary,
    results_frame,
)

__all__ = [
    "FIG",
    "FigFinalizer",
    "PlotTheme",
    "plot_bandwidth_sweep",
    "plot_placebo",
    "plot_rd_scatter",
    "plot_sweep_panel",
    "format_coefficient_table",
    "print_sweep_summary",
    "results_frame",
]
