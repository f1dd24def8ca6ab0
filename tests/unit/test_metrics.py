"""Tests for error metrics over aligned series."""

import numpy as np
import pandas as pd
import pytest

from stepcal.errors import InvalidMetricKind
from stepcal.loss import CompartmentLossFunction, LossComponents, MetricKind, align, pointwise_errors, score
from tests.helpers import make_trajectory


def series(reference, candidate, compartment="S"):
    n = len(reference)
    return pd.DataFrame({
        "time": np.arange(n, dtype=float),
        "compartment": [compartment] * n,
        "reference": np.asarray(reference, dtype=float),
        "candidate": np.asarray(candidate, dtype=float),
    })


@pytest.fixture
def aligned():
    reference = make_trajectory([(0, 100, 0), (1, 90, 10)])
    candidate = make_trajectory([(0, 100, 0), (1, 95, 5)])
    return align(reference, candidate, ["S", "I"])


class TestMetricKind:

    @pytest.mark.parametrize("raw,expected", [
        ("MAE", MetricKind.MAE),
        ("mse", MetricKind.MSE),
        (" Mae ", MetricKind.MAE),
        (MetricKind.MSE, MetricKind.MSE),
    ])
    def test_parse(self, raw, expected):
        assert MetricKind.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["RMSE", "", None, 1])
    def test_parse_rejects(self, raw):
        with pytest.raises(InvalidMetricKind):
            MetricKind.parse(raw)

    def test_unknown_kind_rejected_by_score(self, aligned):
        with pytest.raises(InvalidMetricKind):
            score(aligned, "RMSE")


class TestScore:

    def test_mae_at_single_time(self, aligned):
        at_one = aligned[aligned["time"] == 1.0]
        assert score(at_one, "MAE") == pytest.approx(5.0)
        assert score(at_one, "MSE") == pytest.approx(25.0)

    def test_mean_over_all_rows(self, aligned):
        assert score(aligned, MetricKind.MAE) == pytest.approx(2.5)
        assert score(aligned, MetricKind.MSE) == pytest.approx(12.5)

    def test_identical_series_score_zero(self):
        s = series([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])
        assert score(s, "MAE") == 0.0
        assert score(s, "MSE") == 0.0

    def test_nan_rows_excluded_from_sum_and_count(self):
        s = series([1.0, np.nan, 3.0], [2.0, 5.0, 3.0])
        assert score(s, "MAE") == pytest.approx(0.5)

    def test_empty_and_all_nan_score_nan(self):
        assert np.isnan(score(series([], []), "MAE"))
        assert np.isnan(score(series([np.nan], [1.0]), "MSE"))

    def test_mse_penalizes_outliers_more_than_mae(self):
        ratios = []
        for outlier in (0.5, 1.0, 5.0):
            s = series([0.0] * 10, [0.1] * 9 + [outlier])
            ratios.append(score(s, "MSE") / score(s, "MAE"))
        assert ratios == sorted(ratios)
        assert ratios[-1] > ratios[0]

    def test_pointwise_errors(self):
        s = series([1.0, 4.0], [3.0, 1.0])
        assert pointwise_errors(s, "MAE").tolist() == [2.0, 3.0]
        assert pointwise_errors(s, "MSE").tolist() == [4.0, 9.0]


class TestCompartmentLossFunction:

    def test_breakdown(self, aligned):
        components = CompartmentLossFunction("MAE")(aligned)
        assert isinstance(components, LossComponents)
        assert components.total_loss == pytest.approx(2.5)
        assert components.n_points == 4
        assert components.per_compartment == pytest.approx({"I": 2.5, "S": 2.5})
        assert "TOTAL" in str(components)

    def test_worst_compartment(self):
        reference = make_trajectory([(0, 100, 0), (1, 90, 10)])
        candidate = make_trajectory([(0, 100, 0), (1, 95, 8)])
        loss_fn = CompartmentLossFunction("MSE")
        assert loss_fn.worst_compartment(align(reference, candidate, ["S", "I"])) == "S"

    def test_worst_compartment_on_empty_series(self):
        assert CompartmentLossFunction().worst_compartment(series([], [])) is None

    def test_report_verbosity(self, aligned, capsys):
        loss_fn = CompartmentLossFunction("MAE")
        components = loss_fn(aligned)
        loss_fn.report(components, iteration=3, verbosity=0)
        assert capsys.readouterr().out == ""
        loss_fn.report(components, iteration=3, verbosity=1)
        assert "Iter 003 | MAE" in capsys.readouterr().out
        loss_fn.report(components, iteration=3, verbosity=2)
        assert "Loss Breakdown (MAE)" in capsys.readouterr().out
