from .errors import (
    StepCalibrationError,
    SchemaError,
    EmptyAlignmentError,
    InvalidMetricKind,
    InvalidStepError,
    UnknownParameterError,
    BoundsError,
    ResourceExhausted,
    CalibrationAborted,
    SweepAborted
)
from .loss import align, score, MetricKind, CompartmentLossFunction
from .utils import ParameterVector, SimulationAdapter, average_replicates, validate_trajectory
from .optimization import Calibrator, CalibrationResult, SensitivitySweeper, calibrate, sweep, run_sweep

__version__ = "0.1.0"

__all__ = [
    "StepCalibrationError",
    "SchemaError",
    "EmptyAlignmentError",
    "InvalidMetricKind",
    "InvalidStepError",
    "UnknownParameterError",
    "BoundsError",
    "ResourceExhausted",
    "CalibrationAborted",
    "SweepAborted",
    "align",
    "score",
    "MetricKind",
    "CompartmentLossFunction",
    "ParameterVector",
    "SimulationAdapter",
    "average_replicates",
    "validate_trajectory",
    "Calibrator",
    "CalibrationResult",
    "SensitivitySweeper",
    "calibrate",
    "sweep",
    "run_sweep"
]
