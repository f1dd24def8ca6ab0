from .calibration_config import BOUNDED_METHODS, CalibrationConfig, SweepConfig
from .model_config import ModelConfig

__all__ = [
    "BOUNDED_METHODS",
    "CalibrationConfig",
    "SweepConfig",
    "ModelConfig"
]
