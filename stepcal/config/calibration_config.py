# Libraries to import:
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import InvalidMetricKind

# Bounded scipy.optimize.minimize methods usable without an analytic gradient
BOUNDED_METHODS = ("L-BFGS-B", "TNC", "Powell", "Nelder-Mead")


@dataclass
class CalibrationConfig:
    """Configuration for calibration runs"""

    # Optimizer selection
    optimizer: str = "L-BFGS-B"

    # What is optimized vs. what is reported: the objective always uses
    # objective_metric; the caller's metric only scores the final fit
    objective_metric: str = "MSE"
    normalize: bool = True  # compare proportions, not counts

    # Optimization parameters
    gtol: float = 1e-8
    ftol: float = 1e-12
    eps: float = 1e-8  # finite-difference step
    maxiter: int = 200
    maxfun: int = 2000

    # Restart strategy
    num_restarts: int = 0
    restart_width: float = 0.25  # fraction of each bound range
    seed: int = 0

    # Objective value used when an evaluation is not finite
    nonfinite_penalty: float = 1e12

    time_decimals: int = 9
    verbosity: int = 1  # 0=silent, 1=summary, 2=per evaluation

    def __post_init__(self):
        if self.optimizer not in BOUNDED_METHODS:
            raise ValueError(f"Unknown optimizer: {self.optimizer} (choose from {', '.join(BOUNDED_METHODS)})")
        if self.objective_metric.upper() not in ("MAE", "MSE"):
            raise InvalidMetricKind(f"Unknown metric kind: {self.objective_metric!r}")
        if not 0.0 < self.restart_width <= 1.0:
            raise ValueError(f"restart_width must be in (0, 1], got {self.restart_width}")
        if self.num_restarts < 0:
            raise ValueError("num_restarts must be >= 0")

    def scipy_options(self):
        if self.optimizer == "L-BFGS-B":
            return {"gtol": self.gtol, "ftol": self.ftol, "eps": self.eps, "maxiter": self.maxiter, "maxfun": self.maxfun}
        elif self.optimizer == "TNC":
            return {"gtol": self.gtol, "ftol": self.ftol, "eps": self.eps, "maxfun": self.maxfun}
        elif self.optimizer == "Powell":
            return {"ftol": self.ftol, "maxiter": self.maxiter, "maxfev": self.maxfun}
        return {"fatol": self.ftol, "maxiter": self.maxiter, "maxfev": self.maxfun}


@dataclass
class SweepConfig:
    """Configuration for step-size sensitivity sweeps"""

    step_sizes: List[float] = field(default_factory=lambda: [0.05, 0.1, 0.2, 0.25, 0.5, 1.0])
    normalize: bool = True
    max_workers: Optional[int] = None  # None or 1 = sequential
    time_decimals: int = 9
    verbosity: int = 1
