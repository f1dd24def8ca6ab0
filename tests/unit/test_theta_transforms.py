"""Tests for free-parameter vectors and parameter merging."""

import numpy as np
import pytest

from stepcal.errors import BoundsError, UnknownParameterError
from stepcal.utils.theta_transforms import (
    ParameterVector,
    apply_theta,
    build_theta_structure,
    merge_parameters,
    theta_to_vector,
)


class TestParameterVector:

    def test_from_bounds(self):
        free = ParameterVector.from_bounds({"beta": (0.3, 0.1, 0.6), "gamma": (0.1, 0.05, 0.2)})
        assert free.names == ["beta", "gamma"]
        assert free.lower == {"beta": 0.1, "gamma": 0.05}
        assert free.upper == {"beta": 0.6, "gamma": 0.2}
        assert free.validate() is free

    def test_from_base_seeds_at_base_values(self):
        free = ParameterVector.from_base({"beta": 0.3, "gamma": 0.1}, {"gamma": (0.0, 1.0)})
        assert free.values == {"gamma": 0.1}

    def test_from_base_unknown_name(self):
        with pytest.raises(UnknownParameterError) as excinfo:
            ParameterVector.from_base({"beta": 0.3}, {"delta": (0.0, 1.0)})
        assert excinfo.value.names == ["delta"]

    def test_lower_above_upper(self):
        free = ParameterVector.from_bounds({"beta": (0.4, 0.5, 0.3)})
        with pytest.raises(BoundsError, match="exceeds upper bound"):
            free.validate()

    @pytest.mark.parametrize("initial", [0.05, 0.7])
    def test_initial_value_outside_box(self, initial):
        free = ParameterVector.from_bounds({"beta": (initial, 0.1, 0.6)})
        with pytest.raises(BoundsError, match="outside"):
            free.validate()

    def test_degenerate_box_is_allowed(self):
        ParameterVector.from_bounds({"beta": (0.3, 0.3, 0.3)}).validate()

    def test_nan_bound(self):
        with pytest.raises(BoundsError, match="NaN"):
            ParameterVector.from_bounds({"beta": (0.3, float("nan"), 0.6)}).validate()

    def test_missing_bounds(self):
        with pytest.raises(BoundsError, match="no bounds"):
            ParameterVector(values={"beta": 0.3}, lower={"beta": 0.1}).validate()

    def test_bounds_for_unknown_parameter(self):
        free = ParameterVector(values={"beta": 0.3}, lower={"beta": 0.1, "gamma": 0.0},
                               upper={"beta": 0.6, "gamma": 1.0})
        with pytest.raises(BoundsError, match="gamma"):
            free.validate()

    def test_with_values_keeps_bounds(self):
        free = ParameterVector.from_bounds({"beta": (0.3, 0.1, 0.6)})
        moved = free.with_values({"beta": 0.45})
        assert moved.values == {"beta": 0.45}
        assert moved.lower == free.lower
        assert free.values == {"beta": 0.3}


class TestMergeParameters:

    def test_overrides_replace_base_values(self):
        base = {"beta": 0.3, "gamma": 0.1}
        merged = merge_parameters(base, {"beta": 0.5})
        assert merged == {"beta": 0.5, "gamma": 0.1}
        assert base == {"beta": 0.3, "gamma": 0.1}

    def test_empty_override_is_a_copy(self):
        base = {"beta": 0.3}
        merged = merge_parameters(base, None)
        assert merged == base
        assert merged is not base

    def test_strict_rejects_unknown_names(self):
        with pytest.raises(UnknownParameterError) as excinfo:
            merge_parameters({"beta": 0.3}, {"beta": 0.4, "zeta": 1.0, "delta": 2.0})
        assert excinfo.value.names == ["delta", "zeta"]
        assert "delta, zeta" in str(excinfo.value)

    def test_permissive_drops_unknown_names(self):
        merged = merge_parameters({"beta": 0.3}, {"beta": 0.4, "zeta": 1.0}, strict=False)
        assert merged == {"beta": 0.4}

    def test_unknown_parameter_error_is_key_error(self):
        assert issubclass(UnknownParameterError, KeyError)


class TestThetaStructure:

    def test_structure(self):
        free = ParameterVector.from_bounds({"beta": (0.3, 0.1, 0.6), "gamma": (0.1, 0.05, 0.2)})
        structure = build_theta_structure(free)
        assert structure["names"] == ["beta", "gamma"]
        np.testing.assert_array_equal(structure["x0"], [0.3, 0.1])
        assert structure["bounds"] == [(0.1, 0.6), (0.05, 0.2)]
        assert structure["size"] == 2

    def test_structure_validates_bounds(self):
        with pytest.raises(BoundsError):
            build_theta_structure(ParameterVector.from_bounds({"beta": (0.4, 0.5, 0.3)}))

    def test_apply_and_convert_back(self):
        free = ParameterVector.from_bounds({"beta": (0.3, 0.1, 0.6)})
        structure = build_theta_structure(free)
        theta = np.array([0.42])
        assert apply_theta(theta, structure, {"beta": 0.3, "gamma": 0.1}) == {"beta": 0.42, "gamma": 0.1}
        assert theta_to_vector(theta, structure, free).values == {"beta": 0.42}
