# Libraries to import:
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass
class ModelConfig:
    """Configuration for the model, scenario and step sizes"""

    model_name: str = "SIR"  # "SIR" or "SEIR"

    initial_values: Dict[str, float] = None
    base_parameters: Dict[str, float] = None

    # Free parameters: name → (lower, upper); seeded at base_parameters
    free_bounds: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "beta": (0.05, 1.0),
        "gamma": (0.02, 0.5),
    })

    reference_step: float = 0.01  # smallest trustworthy step
    coarse_step: float = 1.0
    duration: float = 120.0

    replicates: int = 1
    seed: Optional[int] = None
    stochastic: bool = False

    # Reject parameter overrides that name unknown parameters
    strict_parameters: bool = True

    def __post_init__(self):
        if self.initial_values is None:
            if self.model_name == "SEIR":
                self.initial_values = {"S": 9990.0, "E": 0.0, "I": 10.0, "R": 0.0}
            else:
                self.initial_values = {"S": 9990.0, "I": 10.0, "R": 0.0}

        if self.base_parameters is None:
            self.base_parameters = {"beta": 0.3, "gamma": 0.1}
            if self.model_name == "SEIR":
                self.base_parameters["sigma"] = 0.2
