"""
Tests for the bandwidth/degree sweep.
"""

import pytest

from dst_rdd.errors import ModelNotIdentified
from dst_rdd.estimator import RddEstimator
from dst_rdd.estimators.sweep import sweep
from dst_rdd.helpers.config import RddConfig


def _tags(results):
    return [(r.outcome_name, r.bandwidth, r.polynomial_degree) for r in results]


def test_single_outcome_grid(jump_observations):
    results = sweep(jump_observations, ["property"], [14, 21, 28], [1, 2])
    assert len(results) == 6
    assert _tags(results) == [
        ("property_crime_rate", 14, 1),
        ("property_crime_rate", 14, 2),
        ("property_crime_rate", 21, 1),
        ("property_crime_rate", 21, 2),
        ("property_crime_rate", 28, 1),
        ("property_crime_rate", 28, 2),
    ]


def test_full_grid_is_cartesian_product(jump_observations):
    results = sweep(jump_observations, ["property", "violent"], [14, 21, 28], [1, 2])
    assert len(results) == 2 * 3 * 2
    outcomes = [r.outcome_name for r in results]
    assert outcomes[:6] == ["property_crime_rate"] * 6
    assert outcomes[6:] == ["violent_crime_rate"] * 6
    assert all(r.functional_form in ("Linear", "Quadratic") for r in results)


def test_grid_is_sorted_and_deduplicated(observations):
    results = sweep(observations, ["violent"], [28, 14, 28], [2, 1])
    assert _tags(results) == [
        ("violent_crime_rate", 14, 1),
        ("violent_crime_rate", 14, 2),
        ("violent_crime_rate", 28, 1),
        ("violent_crime_rate", 28, 2),
    ]


def test_outcomes_keep_declared_order(observations):
    results = sweep(observations, ["violent", "property"], [14], [1])
    assert [r.outcome_name for r in results] == ["violent_crime_rate", "property_crime_rate"]


def test_sweep_matches_single_fits(jump_observations):
    results = sweep(jump_observations, ["property"], [21], [1])
    assert results[0].point_estimate == pytest.approx(5.0, abs=1e-8)


def test_failing_cell_propagates(observations):
    with pytest.raises(ModelNotIdentified) as exc:
        sweep(observations, ["property"], [4, 14], [2])
    assert exc.value.bandwidth == 4
    assert exc.value.degree == 2


@pytest.mark.parametrize("bandwidths,degrees", [([], [1]), ([14], []), ([0], [1]), ([14], [1.5])])
def test_invalid_grids(observations, bandwidths, degrees):
    with pytest.raises(ValueError):
        sweep(observations, ["property"], bandwidths, degrees)


def test_estimator_sweep_uses_config_grid(observations):
    est = RddEstimator(RddConfig(outcomes=("property",), bandwidths=(21, 14), degrees=(1,)))
    results = est.sweep(observations)
    assert _tags(results) == [("property_crime_rate", 14, 1), ("property_crime_rate", 21, 1)]
