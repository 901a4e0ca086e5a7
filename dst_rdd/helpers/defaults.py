"""Default column names and estimation grids for the DST crime study.

The column names follow the merged crime/weather table published with the
blog post.  Users may override any of them through
:class:`dst_rdd.helpers.config.RddConfig`.
"""

from __future__ import annotations

from typing import Dict, Tuple

DATE_COL = "date"
RUNNING_COL = "days_from_cutoff"
TREAT_COL = "treated"
DOW_COL = "day_of_week"

COVARIATES: Tuple[str, ...] = ("rainfall_mm", "average_temperature")

# Short names accepted wherever an outcome is requested.
OUTCOME_ALIASES: Dict[str, str] = {
    "property": "property_crime_rate",
    "violent": "violent_crime_rate",
}

OUTCOMES: Tuple[str, ...] = ("property_crime_rate", "violent_crime_rate")

BANDWIDTHS: Tuple[int, ...] = (14, 21, 28)
DEGREES: Tuple[int, ...] = (1, 2)
PLACEBO_SHIFTS: Tuple[int, ...] = (-14, -7, 7, 14)

ROBUST_COV_TYPES: Tuple[str, ...] = ("HC0", "HC1", "HC2", "HC3")
BOUNDARY_MODES: Tuple[str, ...] = ("treated", "exclude")

DAY_NAMES: Tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

__all__ = [
    "DATE_COL",
    "RUNNING_COL",
    "TREAT_COL",
    "DOW_COL",
    "COVARIATES",
    "OUTCOME_ALIASES",
    "OUTCOMES",
    "BANDWIDTHS",
    "DEGREES",
    "PLACEBO_SHIFTS",
    "ROBUST_COV_TYPES",
    "BOUNDARY_MODES",
    "DAY_NAMES",
]
