"""Error types for step-size calibration."""


class StepCalibrationError(Exception):
    """Base exception for calibration pipeline errors."""


class SchemaError(StepCalibrationError, ValueError):
    """Trajectory is malformed or lacks a requested compartment."""


class EmptyAlignmentError(SchemaError):
    """Reference and candidate share no (time, compartment) rows."""


class InvalidMetricKind(StepCalibrationError, ValueError):
    """Unrecognized error metric."""


class InvalidStepError(StepCalibrationError, ValueError):
    """Non-positive step size or duration."""

    def __init__(self, message, step_size=None):
        super().__init__(message)
        self.step_size = step_size


class UnknownParameterError(StepCalibrationError, KeyError):
    """Parameter override names a parameter the base set does not have."""

    def __init__(self, names):
        self.names = sorted(names)
        super().__init__(f"Unknown parameter(s): {', '.join(self.names)}")

    def __str__(self):
        return self.args[0]


class BoundsError(StepCalibrationError, ValueError):
    """Malformed or violated parameter bounds."""


class ResourceExhausted(StepCalibrationError):
    """Engine refused a run that would exceed its step-count ceiling."""


class CalibrationAborted(StepCalibrationError):
    """Engine failure during calibration; carries the best point found so far."""

    def __init__(self, message, best_parameters=None, best_score=float("nan")):
        super().__init__(message)
        self.best_parameters = best_parameters
        self.best_score = best_score


class SweepAborted(StepCalibrationError):
    """Step-size sweep stopped early; carries the results computed before the failure."""

    def __init__(self, message, step_size=None, partial=None):
        super().__init__(message)
        self.step_size = step_size
        self.partial = partial
