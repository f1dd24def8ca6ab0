# Libraries to import:
import copy
from typing import Any, Mapping, Optional, Protocol
import pandas as pd

from ..errors import InvalidStepError
from .theta_transforms import merge_parameters
from .trajectory import average_replicates, validate_trajectory


class Engine(Protocol):
    def __call__(self, model: Any, initial_values: Mapping[str, float], parameters: Mapping[str, float],
                 time_step: float, duration: float, **kwargs) -> pd.DataFrame:
        ...


def check_duration(duration: float, time_step: float = None):
    if duration is None or not duration > 0:
        raise InvalidStepError(f"duration must be > 0, got {duration}", step_size=time_step)


def check_step(time_step: float, duration: float):
    if time_step is None or not time_step > 0:
        raise InvalidStepError(f"time_step must be > 0, got {time_step}", step_size=time_step)
    check_duration(duration, time_step)


class SimulationAdapter:
    """
    Single point of contact with the simulation engine

    Merges a partial parameter override onto the base parameter set,
    validates the step size and the engine output, and averages replicate
    runs of stochastic engines entrywise.

    Args:
        engine: callable ``engine(model, initial_values, parameters, time_step, duration)``
        model: opaque model handle, passed through untouched
        initial_values: compartment → initial population
        base_parameters: full parameter set consumed by the engine
        strict: reject override names missing from ``base_parameters``
        replicates: engine runs averaged per call
        seed: when set, replicate ``i`` is run with ``seed=seed + i``
    """

    def __init__(self, engine: Engine, model, initial_values: Mapping[str, float],
                 base_parameters: Mapping[str, float], strict: bool = True,
                 replicates: int = 1, seed: Optional[int] = None):
        if replicates < 1:
            raise ValueError(f"replicates must be >= 1, got {replicates}")
        self.engine = engine
        self.model = model
        self.initial_values = dict(initial_values)
        self.base_parameters = dict(base_parameters)
        self.strict = strict
        self.replicates = replicates
        self.seed = seed

    @property
    def compartments(self):
        return list(self.initial_values)

    def merged_parameters(self, parameters: Optional[Mapping[str, float]] = None):
        return merge_parameters(self.base_parameters, parameters, strict=self.strict)

    def run(self, parameters: Optional[Mapping[str, float]] = None, time_step: float = None,
            duration: float = None) -> pd.DataFrame:
        """Run the engine with ``parameters`` overlaid on the base set; returns a Trajectory"""
        check_step(time_step, duration)
        full_params = self.merged_parameters(parameters)

        runs = []
        for i in range(self.replicates):
            kwargs = {} if self.seed is None else {"seed": self.seed + i}
            trajectory = self.engine(
                self.model,
                copy.deepcopy(self.initial_values),
                dict(full_params),
                float(time_step),
                float(duration),
                **kwargs,
            )
            runs.append(validate_trajectory(trajectory, required=self.compartments))

        return average_replicates(runs)
