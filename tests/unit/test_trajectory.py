"""Tests for trajectory validation and replicate averaging."""

import numpy as np
import pandas as pd
import pytest

from stepcal.errors import SchemaError
from stepcal.utils.trajectory import (
    average_replicates,
    compartment_columns,
    restrict_compartments,
    to_long,
    validate_trajectory,
)
from tests.helpers import make_trajectory


class TestValidateTrajectory:

    def test_well_formed_passes_through(self):
        traj = make_trajectory([(0, 100, 0), (1, 90, 10)])
        assert validate_trajectory(traj, required=["S", "I"]) is traj

    def test_missing_time_column(self):
        traj = pd.DataFrame({"S": [1.0], "I": [0.0]})
        with pytest.raises(SchemaError, match="time"):
            validate_trajectory(traj)

    def test_missing_required_compartment(self):
        traj = make_trajectory([(0, 100, 0)])
        with pytest.raises(SchemaError, match="R"):
            validate_trajectory(traj, required=["S", "I", "R"])

    @pytest.mark.parametrize("times", [(0, 0), (1, 0)])
    def test_time_must_increase(self, times):
        traj = make_trajectory([(times[0], 100, 0), (times[1], 90, 10)])
        with pytest.raises(SchemaError, match="increasing"):
            validate_trajectory(traj)

    def test_rejects_non_finite(self):
        traj = make_trajectory([(0, 100, np.nan)])
        with pytest.raises(SchemaError, match="non-finite"):
            validate_trajectory(traj)

    def test_negative_population_only_rejected_for_counts(self):
        traj = make_trajectory([(0, -1, 0)])
        with pytest.raises(SchemaError, match="negative"):
            validate_trajectory(traj)
        validate_trajectory(traj, proportions=True)


def test_schema_error_is_value_error():
    assert issubclass(SchemaError, ValueError)


def test_compartment_columns_excludes_time():
    traj = make_trajectory([(0, 1, 2)])
    assert compartment_columns(traj) == ["S", "I"]


def test_restrict_compartments_names_the_side():
    traj = make_trajectory([(0, 1, 2)])
    with pytest.raises(SchemaError, match="absent from candidate"):
        restrict_compartments(traj, ["S", "R"], label="candidate")
    restricted = restrict_compartments(traj, ["I"])
    assert list(restricted.columns) == ["time", "I"]


def test_to_long_rounds_time_keys():
    traj = make_trajectory([(0.1 + 0.2, 1, 2)])
    long_df = to_long(traj, "value", time_decimals=9)
    assert set(long_df["compartment"]) == {"S", "I"}
    assert (long_df["time"] == 0.3).all()


class TestAverageReplicates:

    def test_single_replicate_is_copied(self):
        traj = make_trajectory([(0, 100, 0)])
        averaged = average_replicates([traj])
        pd.testing.assert_frame_equal(averaged, traj)
        assert averaged is not traj

    def test_entrywise_mean(self):
        a = make_trajectory([(0, 100, 0), (1, 80, 20)])
        b = make_trajectory([(0, 100, 0), (1, 90, 10)])
        averaged = average_replicates([a, b])
        assert averaged["S"].tolist() == [100.0, 85.0]
        assert averaged["I"].tolist() == [0.0, 15.0]
        assert list(averaged.columns) == ["time", "S", "I"]

    def test_drops_times_missing_from_a_replicate(self):
        a = make_trajectory([(0, 100, 0), (1, 80, 20)])
        b = make_trajectory([(0, 100, 0)])
        averaged = average_replicates([a, b])
        assert averaged["time"].tolist() == [0.0]

    def test_mismatched_compartments(self):
        a = make_trajectory([(0, 100, 0)])
        b = make_trajectory([(0, 100, 0)], compartments=("S", "R"))
        with pytest.raises(SchemaError):
            average_replicates([a, b])

    def test_empty_list(self):
        with pytest.raises(SchemaError):
            average_replicates([])
