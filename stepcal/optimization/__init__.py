from .calibrator import Calibrator, CalibrationResult, build_objective, calibrate
from .sweep import SensitivitySweeper, StepSizeSweep, run_sweep, summarize_sweep, sweep

__all__ = [
    "Calibrator",
    "CalibrationResult",
    "build_objective",
    "calibrate",
    "SensitivitySweeper",
    "StepSizeSweep",
    "run_sweep",
    "summarize_sweep",
    "sweep"
]
