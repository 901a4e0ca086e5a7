"""
Pytest configuration and shared fixtures.

The fixtures build a synthetic 60-day window around a DST transition on
2019-03-10 (30 days before, 30 days from the transition on), with varying
rainfall and temperature so the weather controls are identified.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from dst_rdd.helpers.config import RddConfig
from dst_rdd.helpers.defaults import DAY_NAMES
from dst_rdd.helpers.preparation import Observations

CUTOFF = "2019-03-10"
JUMP = 5.0
JUMP_BANDWIDTH = 21


def _base_frame(seed: int = 7) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2019-02-08", periods=60, freq="D")
    days = np.arange(-30, 30)
    rain = rng.gamma(1.5, 2.0, size=60).round(1)
    temp = 4.0 + 0.15 * days + rng.normal(0.0, 3.0, size=60)
    return pd.DataFrame(
        {
            "date": dates.strftime("%Y-%m-%d"),
            "days_from_cutoff": days,
            "treated": (days >= 0).astype(int),
            "day_of_week": [DAY_NAMES[d.dayofweek] for d in dates],
            "rainfall_mm": rain,
            "average_temperature": temp.round(2),
        }
    )


def _design(df: pd.DataFrame) -> np.ndarray:
    """Linear RDD design with weekday dummies and weather, built independently."""
    d = df["days_from_cutoff"].astype(float).values
    t = df["treated"].astype(float).values
    dow = pd.get_dummies(df["day_of_week"], drop_first=True, dtype=float).values
    return np.column_stack(
        [np.ones(len(df)), d, t, d * t, dow, df["rainfall_mm"].values, df["average_temperature"].values]
    )


@pytest.fixture
def daily_frame():
    """Heteroskedastic noise (variance grows with rainfall) and a modest jump."""
    df = _base_frame()
    rng = np.random.default_rng(11)
    noise = rng.normal(0.0, 1.0, size=len(df)) * (0.5 + df["rainfall_mm"].values)
    df["property_crime_rate"] = 120.0 + 2.0 * df["treated"] + 0.05 * df["days_from_cutoff"] + noise
    df["violent_crime_rate"] = 30.0 + 0.5 * rng.normal(0.0, 1.0, size=len(df)) + 0.1 * df["rainfall_mm"]
    return df


@pytest.fixture
def jump_frame():
    """+5 jump at the cutoff and noise orthogonal to the bandwidth-21 linear design.

    Inside the bandwidth-21 window the noise has no projection on any
    regressor, so the only signal the model can pick up is the jump.
    """
    df = _base_frame()
    rng = np.random.default_rng(3)
    noise = rng.normal(0.0, 1.0, size=len(df))
    inside = df["days_from_cutoff"].abs() <= JUMP_BANDWIDTH
    X = _design(df.loc[inside])
    e = noise[inside.values]
    beta, *_ = np.linalg.lstsq(X, e, rcond=None)
    noise[inside.values] = e - X @ beta
    df["property_crime_rate"] = 100.0 + JUMP * df["treated"] + noise
    df["violent_crime_rate"] = 25.0 + JUMP * df["treated"] + noise
    return df


@pytest.fixture
def config():
    return RddConfig()


@pytest.fixture
def observations(daily_frame, config):
    return Observations(daily_frame, config)


@pytest.fixture
def jump_observations(jump_frame, config):
    return Observations(jump_frame, config)


@pytest.fixture
def csv_path(tmp_path, daily_frame):
    path = tmp_path / "crime_weather.csv"
    daily_frame.to_csv(path, index=False)
    return path
