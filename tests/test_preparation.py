"""
Tests for dst_rdd.helpers.preparation.

Tests cover:
- Loading from a CSV path and from a DataFrame
- DataUnavailable for unreadable sources
- SchemaMismatch for missing columns and broken invariants
- Treatment flag coercion and consistency with the running variable
- Deriving the running variable from a cutoff date
- Bandwidth windows and the boundary-day convention
"""

import numpy as np
import pandas as pd
import pytest

from dst_rdd.errors import DataUnavailable, RddError, SchemaMismatch
from dst_rdd.helpers.config import RddConfig
from dst_rdd.helpers.preparation import (
    Observations,
    derive_running_variable,
    load_observations,
    treated_from_running,
)

from conftest import CUTOFF


class TestLoadObservations:
    """Tests for load_observations()."""

    def test_loads_csv_path(self, csv_path):
        obs = load_observations(str(csv_path))
        assert len(obs) == 60
        assert obs.info["obs"] == 60
        assert obs.info["treated_rows"] == 30
        assert obs.info["running_min"] == -30
        assert obs.info["running_max"] == 29

    def test_loads_dataframe(self, daily_frame):
        obs = load_observations(daily_frame)
        assert len(obs) == len(daily_frame)

    def test_dates_are_parsed_and_sorted(self, daily_frame):
        shuffled = daily_frame.sample(frac=1.0, random_state=0)
        obs = load_observations(shuffled)
        dates = obs.frame["date"]
        assert pd.api.types.is_datetime64_any_dtype(dates)
        assert dates.is_monotonic_increasing

    def test_missing_file_raises_data_unavailable(self, tmp_path):
        with pytest.raises(DataUnavailable):
            load_observations(str(tmp_path / "nope.csv"))

    def test_empty_file_raises_data_unavailable(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(DataUnavailable):
            load_observations(str(path))

    def test_header_only_file_raises_data_unavailable(self, tmp_path, daily_frame):
        path = tmp_path / "header.csv"
        daily_frame.head(0).to_csv(path, index=False)
        with pytest.raises(DataUnavailable, match="no rows"):
            load_observations(str(path))

    def test_missing_column_raises_schema_mismatch(self, daily_frame):
        with pytest.raises(SchemaMismatch) as exc:
            load_observations(daily_frame.drop(columns=["rainfall_mm"]))
        assert exc.value.missing == ["rainfall_mm"]

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(RddError):
            load_observations(str(tmp_path / "nope.csv"))

    def test_treated_accepts_true_false_strings(self, daily_frame):
        df = daily_frame.copy()
        df["treated"] = np.where(df["treated"] == 1, "TRUE", "FALSE")
        obs = load_observations(df)
        assert obs.frame["treated"].tolist() == daily_frame["treated"].tolist()

    def test_treated_rejects_other_values(self, daily_frame):
        df = daily_frame.copy()
        df["treated"] = df["treated"].astype(str)
        df.loc[0, "treated"] = "maybe"
        with pytest.raises(SchemaMismatch, match="non-boolean"):
            load_observations(df)

    def test_non_integer_running_variable(self, daily_frame):
        df = daily_frame.copy()
        df["days_from_cutoff"] = df["days_from_cutoff"] + 0.5
        with pytest.raises(SchemaMismatch, match="integers"):
            load_observations(df)


class TestInvariants:
    """The observation table must keep its data invariants."""

    def test_treated_consistent_with_running_variable(self, observations):
        d = observations.frame
        assert ((d["days_from_cutoff"] >= 0).astype(int) == d["treated"]).all()

    def test_inconsistent_treated_raises(self, daily_frame):
        df = daily_frame.copy()
        df.loc[df["days_from_cutoff"] == -3, "treated"] = 1
        with pytest.raises(SchemaMismatch, match="inconsistent"):
            load_observations(df)

    def test_duplicate_dates_raise(self, daily_frame):
        df = pd.concat([daily_frame, daily_frame.iloc[[5]]], ignore_index=True)
        with pytest.raises(SchemaMismatch, match="duplicate dates"):
            load_observations(df)

    def test_frame_is_a_copy(self, observations):
        d = observations.frame
        d.loc[:, "property_crime_rate"] = -1.0
        assert (observations.frame["property_crime_rate"] != -1.0).all()

    def test_missing_weekday_stays_missing(self, daily_frame):
        df = daily_frame.copy()
        df.loc[4, "day_of_week"] = None
        dow = load_observations(df).frame["day_of_week"]
        assert dow.isna().sum() == 1
        assert not dow.isin(["nan", "None"]).any()

    def test_loader_does_not_drop_rows(self, daily_frame):
        df = daily_frame.copy()
        df.loc[3, "property_crime_rate"] = np.nan
        obs = load_observations(df)
        assert len(obs) == len(df)


class TestDeriveRunningVariable:
    """Tests for building the running variable from dates."""

    def test_matches_fixture(self, daily_frame):
        raw = daily_frame.drop(columns=["days_from_cutoff", "treated", "day_of_week"])
        out = derive_running_variable(raw, CUTOFF)
        assert out["days_from_cutoff"].tolist() == daily_frame["days_from_cutoff"].tolist()
        assert out["treated"].tolist() == daily_frame["treated"].tolist()
        assert out["day_of_week"].tolist() == daily_frame["day_of_week"].tolist()

    def test_load_with_cutoff(self, daily_frame):
        raw = daily_frame.drop(columns=["days_from_cutoff", "treated", "day_of_week"])
        obs = load_observations(raw, cutoff=CUTOFF)
        assert obs.info["running_min"] == -30
        assert obs.info["treated_rows"] == 30

    def test_cutoff_from_config(self, daily_frame):
        raw = daily_frame.drop(columns=["days_from_cutoff", "treated", "day_of_week"])
        obs = load_observations(raw, RddConfig(cutoff=CUTOFF))
        assert obs.info["running_max"] == 29

    def test_requires_date_column(self, daily_frame):
        with pytest.raises(SchemaMismatch):
            derive_running_variable(daily_frame.drop(columns=["date"]), CUTOFF)


class TestWindow:
    """Bandwidth windows around the cutoff."""

    @pytest.mark.parametrize("bandwidth", [1, 5, 14, 21, 28, 100])
    def test_window_respects_bandwidth(self, observations, bandwidth):
        win = observations.window(bandwidth)
        assert (win["days_from_cutoff"].abs() <= bandwidth).all()
        expected = int((observations.running.abs() <= bandwidth).sum())
        assert len(win) == expected

    def test_window_rejects_bad_bandwidth(self, observations):
        with pytest.raises(ValueError):
            observations.window(0)
        with pytest.raises(ValueError):
            observations.window(2.5)

    def test_donut_drops_days_near_cutoff(self, observations):
        win = observations.window(10, donut=2)
        assert (win["days_from_cutoff"].abs() >= 2).all()
        assert len(win) == 21 - 3

    def test_exclude_boundary_drops_day_zero(self, daily_frame):
        df = daily_frame.copy()
        df["treated"] = treated_from_running(df["days_from_cutoff"], "exclude")
        obs = Observations(df, RddConfig(boundary="exclude"))
        win = obs.window(5)
        assert 0 not in set(win["days_from_cutoff"])
        assert len(win) == 10

    def test_exclude_boundary_still_checks_other_days(self, daily_frame):
        # day 0 is not checked under "exclude"; day 1 is
        df = daily_frame.copy()
        Observations(df, RddConfig(boundary="exclude"))
        df.loc[df["days_from_cutoff"] == 1, "treated"] = 0
        with pytest.raises(SchemaMismatch):
            Observations(df, RddConfig(boundary="exclude"))


class TestRecentred:
    """Placebo re-centring keeps one side of the real cutoff only."""

    def test_positive_shift_uses_post_rows(self, observations):
        fake = observations.recentred(7)
        assert len(fake) == 30
        assert fake.info["running_min"] == -7
        assert fake.info["treated_rows"] == 30 - 7

    def test_negative_shift_uses_pre_rows(self, observations):
        fake = observations.recentred(-7)
        assert len(fake) == 30
        assert fake.info["running_max"] == 6

    def test_zero_shift_rejected(self, observations):
        with pytest.raises(ValueError):
            observations.recentred(0)
