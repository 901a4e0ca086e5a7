from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

import os
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from ..helpers.preparation import Observations
from ..helpers.utils import functional_form_label, resolve_outcome


# ================================
# Theme + Figure Finalizer
# ================================

@dataclass
class PlotTheme:
    """Global plotting theme used by FigFinalizer.
    Keep all aesthetic knobs here so individual plotting functions
    deal ONLY with the data drawing (artists) and not with styling.
    """
    figsize: Tuple[float, float] = (10.0, 6.0)
    dpi: int = 120

    # Fonts / sizing
    title_size: int = 16
    label_size: int = 13
    tick_size: int = 11
    legend_size: int = 11

    # Lines / grid
    grid: bool = True
    grid_style: str = "--"
    grid_alpha: float = 0.3

    # Reference lines
    zero_line: bool = True           # add y=0 horizontal

    # Layout
    tight_layout: bool = True

    # Colors
    palette: Sequence[str] = field(default_factory=lambda: [
        "#2563eb",  # blue
        "#ef4444",  # red
        "#10b981",  # emerald
        "#f59e0b",  # amber
        "#8b5cf6",  # violet
    ])


class FigFinalizer:
    """Centralizes figure creation and styling.

    Decorate a drawing function (it receives ``ax`` and ``palette`` and
    only draws artists); the wrapper creates the axes when needed and
    applies titles, labels, grid and legend from the theme::

        FIG = FigFinalizer()

        @FIG(xlabel="Bandwidth (days)")
        def plot_something(data, ax, palette):
            ax.plot(data["x"], data["y"], color=palette[0])

    Multi-panel figures are composed with :meth:`new_figure` and closed
    with :meth:`finalize`.
    """
    def __init__(self, theme: Optional[PlotTheme] = None, default_save_dir: Optional[str] = None, show_default: bool = True):
        self.theme = theme or PlotTheme()
        self.default_save_dir = default_save_dir
        self.show_default = show_default

    # ---------- low-level helpers ----------

    def new_figure(
        self,
        nrows: int = 1,
        ncols: int = 1,
        figsize: Optional[Tuple[float, float]] = None,
        sharex: bool = False,
        sharey: bool = False,
        squeeze: bool = True,
    ) -> Tuple[plt.Figure, Union[plt.Axes, np.ndarray]]:
        fig = plt.figure(figsize=figsize or self.theme.figsize, dpi=self.theme.dpi)
        axes = fig.subplots(nrows=nrows, ncols=ncols, sharex=sharex, sharey=sharey, squeeze=squeeze)
        return fig, axes

    def _apply_axes_style(self, ax: plt.Axes, *, title: Optional[str], xlabel: Optional[str], ylabel: Optional[str], legend: bool, legend_loc: str):
        if title is not None:
            ax.set_title(title, fontsize=self.theme.title_size)
        if xlabel is not None:
            ax.set_xlabel(xlabel, fontsize=self.theme.label_size)
        if ylabel is not None:
            ax.set_ylabel(ylabel, fontsize=self.theme.label_size)

        if self.theme.grid:
            ax.grid(True, linestyle=self.theme.grid_style, alpha=self.theme.grid_alpha)

        ax.tick_params(labelsize=self.theme.tick_size)

        if legend:
            handles, labels = ax.get_legend_handles_labels()
            if len(labels) > 0:
                ax.legend(handles, labels, loc=legend_loc, fontsize=self.theme.legend_size, frameon=False)

    def save_path(self, save: str) -> str:
        if self.default_save_dir and not os.path.isabs(save):
            os.makedirs(self.default_save_dir, exist_ok=True)
            return os.path.join(self.default_save_dir, save)
        return save

    def finalize(
        self,
        fig: plt.Figure,
        axes: Union[plt.Axes, Iterable[plt.Axes]],
        *,
        suptitle: Optional[str] = None,
        save: Optional[str] = None,
        show: Optional[bool] = None,
    ) -> plt.Figure:
        if self.theme.tight_layout:
            fig.tight_layout()

        # Suptitle after tight_layout
        if suptitle:
            fig.suptitle(suptitle, fontsize=self.theme.title_size, y=1.02)

        if save:
            fig.savefig(self.save_path(save), dpi=self.theme.dpi, bbox_inches="tight")

        if show if show is not None else self.show_default:
            plt.show()

        return fig

    def __call__(self, **preset_style):
        """Return a decorator that wraps a plotting function.

        The wrapped function should accept an `ax` kwarg and draw artists.
        It should NOT set titles/labels/legend; those are handled here.
        """
        def decorator(plot_func: Callable[..., Optional[Dict[str, Any]]]):
            def wrapper(
                *args,
                title: Optional[str] = None,
                xlabel: Optional[str] = None,
                ylabel: Optional[str] = None,
                legend: bool = True,
                legend_loc: str = "best",
                save: Optional[str] = None,
                show: Optional[bool] = None,
                ax: Optional[plt.Axes] = None,
                figsize: Optional[Tuple[float, float]] = None,
                palette: Optional[Sequence[str]] = None,
                **kwargs,
            ) -> Tuple[plt.Figure, plt.Axes, Dict[str, Any]]:
                created = False
                if ax is None:
                    fig, ax = self.new_figure(figsize=figsize)
                    created = True
                else:
                    fig = ax.get_figure()

                # Call-site values win over the decorator presets
                style = dict(title=None, xlabel=None, ylabel=None)
                style.update(preset_style)
                for key, val in (("title", title), ("xlabel", xlabel), ("ylabel", ylabel)):
                    if val is not None:
                        style[key] = val

                out = plot_func(*args, ax=ax, palette=(palette or self.theme.palette), **kwargs) or {}

                self._apply_axes_style(ax, legend=legend, legend_loc=legend_loc, **style)

                if created:
                    self.finalize(fig, ax, save=save, show=show)

                return fig, ax, out
            wrapper.__name__ = plot_func.__name__
            wrapper.__doc__ = plot_func.__doc__
            return wrapper
        return decorator


# Global instance used by plotting helpers below
FIG = FigFinalizer()


def _zero_line(ax: plt.Axes) -> None:
    if FIG.theme.zero_line:
        ax.axhline(0.0, color="0.25", linewidth=1, linestyle="--", alpha=0.6, zorder=0)


# ================================
# Data drawing functions
# ================================

@FIG(xlabel="Bandwidth (days)", ylabel="Estimated jump at cutoff")
def plot_sweep_panel(
    frame: pd.DataFrame,
    ax: plt.Axes,
    palette: Sequence[str],
    alpha_band: float = 0.15,
) -> Dict[str, Any]:
    """Point estimates with 95% CI bars and band vs bandwidth, one series per outcome.

    Expects the columns produced by :func:`dst_rdd.reporting.summary.results_frame`.
    """
    outcomes = list(dict.fromkeys(frame["outcome"]))
    for i, outcome in enumerate(outcomes):
        d = frame[frame["outcome"] == outcome].sort_values("bandwidth")
        x = d["bandwidth"].astype(float).values
        y = d["estimate"].astype(float).values
        lo = d["ci_low"].astype(float).values
        hi = d["ci_high"].astype(float).values
        color = palette[i % len(palette)]
        ax.errorbar(x, y, yerr=[y - lo, hi - y], fmt="o", color=color, capsize=4, linewidth=1.5, label=outcome)
        ax.plot(x, y, color=color, linewidth=1.2, alpha=0.6)
        ax.fill_between(x, lo, hi, color=color, alpha=alpha_band, linewidth=0)
    _zero_line(ax)
    return {"n_series": len(outcomes)}


@FIG(title="Placebo cutoffs", xlabel="Placebo shift (days from DST transition)", ylabel="Estimated jump")
def plot_placebo(
    frame: pd.DataFrame,
    ax: plt.Axes,
    palette: Sequence[str],
) -> Dict[str, Any]:
    """Placebo estimates with 95% CIs vs shift."""
    d = frame.sort_values("placebo_shift")
    x = d["placebo_shift"].astype(float).values
    y = d["estimate"].astype(float).values
    lo = d["ci_low"].astype(float).values
    hi = d["ci_high"].astype(float).values
    ax.errorbar(x, y, yerr=[y - lo, hi - y], fmt="o", color=palette[0], capsize=4, linewidth=2)
    _zero_line(ax)
    return {"n": len(d)}


@FIG(xlabel="Days from DST transition")
def plot_rd_scatter(
    observations: Observations,
    outcome: str,
    ax: plt.Axes,
    palette: Sequence[str],
    bandwidth: int = 28,
    degree: int = 1,
) -> Dict[str, Any]:
    """Daily outcome vs running variable with a polynomial fit on each side."""
    cfg = observations.config
    col = resolve_outcome(outcome)
    d = observations.window(bandwidth).dropna(subset=[col])
    x = d[cfg.running_col].astype(float).values
    y = d[col].astype(float).values
    treated = d[cfg.treat_col].astype(bool).values

    ax.scatter(x[~treated], y[~treated], s=18, color=palette[0], alpha=0.8, label="Before")
    ax.scatter(x[treated], y[treated], s=18, color=palette[1], alpha=0.8, label="After")

    for side, color in ((~treated, palette[0]), (treated, palette[1])):
        if side.sum() > degree:
            coefs = np.polyfit(x[side], y[side], deg=degree)
            grid = np.linspace(x[side].min(), x[side].max(), 100)
            ax.plot(grid, np.polyval(coefs, grid), color=color, linewidth=2)

    cut = 0.0 if cfg.boundary == "exclude" else -0.5
    ax.axvline(cut, color="0.2", linestyle="-", linewidth=1.2, alpha=0.7)
    ax.set_ylabel(col, fontsize=FIG.theme.label_size)
    return {"n": int(len(d))}


# ================================
# Composite helpers
# ================================

def plot_bandwidth_sweep(
    frame: pd.DataFrame,
    *,
    suptitle: Optional[str] = "Effect of DST by bandwidth",
    save: Optional[str] = None,
    show: Optional[bool] = None,
) -> plt.Figure:
    """Faceted sweep figure: one panel per functional form, shared y axis."""
    if frame is None or len(frame) == 0:
        raise ValueError("no results to plot")
    degrees = sorted(int(d) for d in frame["degree"].unique())
    fig, axes = FIG.new_figure(ncols=len(degrees), figsize=(5.5 * len(degrees), 5), sharey=True, squeeze=False)
    for j, deg in enumerate(degrees):
        ax = axes[0, j]
        plot_sweep_panel(
            frame[frame["degree"] == deg],
            ax=ax,
            title=functional_form_label(deg),
            legend=(j == 0),
        )
        if j > 0:
            ax.set_ylabel("")
    return FIG.finalize(fig, axes, suptitle=suptitle, save=save, show=show)


__all__ = [
    "PlotTheme",
    "FigFinalizer",
    "FIG",
    "plot_sweep_panel",
    "plot_placebo",
    "plot_rd_scatter",
    "plot_bandwidth_sweep",
]
