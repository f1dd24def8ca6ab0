"""Shared fixtures for the test suite."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest

from stepcal.config import CalibrationConfig, SweepConfig
from stepcal.engines import DeterministicEngine, sir_model
from stepcal.utils import SimulationAdapter
from tests.helpers import CountingEngine

SIR_INITIAL = {"S": 990.0, "I": 10.0, "R": 0.0}
SIR_PARAMS = {"beta": 0.3, "gamma": 0.1}
DURATION = 60.0


@pytest.fixture
def model():
    return sir_model()


@pytest.fixture
def engine():
    return DeterministicEngine()


@pytest.fixture
def counting_engine():
    return CountingEngine()


@pytest.fixture
def initial_values():
    return dict(SIR_INITIAL)


@pytest.fixture
def base_parameters():
    return dict(SIR_PARAMS)


@pytest.fixture
def adapter(counting_engine, model, initial_values, base_parameters):
    return SimulationAdapter(counting_engine, model, initial_values, base_parameters)


@pytest.fixture
def quiet_calibration_config():
    return CalibrationConfig(verbosity=0)


@pytest.fixture
def quiet_sweep_config():
    return SweepConfig(verbosity=0)


@pytest.fixture(scope="session")
def coarse_reference():
    """SIR reference at step 0.5 with the base parameters."""
    return DeterministicEngine()(sir_model(), SIR_INITIAL, SIR_PARAMS, 0.5, DURATION)


@pytest.fixture(scope="session")
def fine_reference():
    """SIR reference at step 0.05 with the base parameters."""
    return DeterministicEngine()(sir_model(), SIR_INITIAL, SIR_PARAMS, 0.05, DURATION)
