"""General utilities for the DST RDD toolkit.

This module collects helpers that do not naturally belong to the loader,
the estimators or the reporting layer: the degree-to-label mapping used in
tables and facet titles, outcome-name resolution and the logger factory
shared by every module.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional

from .defaults import OUTCOME_ALIASES

_FORM_LABELS = {1: "Linear", 2: "Quadratic", 3: "Cubic"}


def get_logger(name: str) -> logging.Logger:
    """Return the module logger.  Handlers are left to the application."""
    return logging.getLogger(name)


def functional_form_label(degree: int) -> str:
    """Human-readable name of a polynomial degree.

    >>> functional_form_label(2)
    'Quadratic'
    >>> functional_form_label(5)
    'Degree 5 Polynomial'
    """
    d = int(degree)
    if d < 1:
        raise ValueError(f"polynomial degree must be >= 1, got {degree!r}")
    return _FORM_LABELS.get(d, f"Degree {d} Polynomial")


def resolve_outcome(
    name: str,
    aliases: Optional[Mapping[str, str]] = None,
) -> str:
    """Map a short outcome alias (``"property"``) to its column name."""
    table = OUTCOME_ALIASES if aliases is None else aliases
    key = str(name).strip()
    return table.get(key.lower(), key)


def unique_sorted(values: Iterable[int], *, what: str) -> List[int]:
    """De-duplicate and sort a grid of positive integers."""
    out = set()
    for v in values:
        iv = int(v)
        if iv != v or iv < 1:
            raise ValueError(f"{what} must be positive integers, got {v!r}")
        out.add(iv)
    if not out:
        raise ValueError(f"at least one {what[:-1] if what.endswith('s') else what} is required")
    return sorted(out)


__all__ = ["get_logger", "functional_form_label", "resolve_outcome", "unique_sorted"]
