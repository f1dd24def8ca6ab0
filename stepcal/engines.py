"""
Reference discrete-time compartmental engines

Minimal engines with exponential holding times, used by the example scripts
and the test suite to drive the calibration pipeline end to end. Each step
moves ``X * (1 - exp(-r * dt))`` individuals out of a compartment whose total
per-capita exit rate is ``r``, split across competing transitions in
proportion to their rates. Larger ``dt`` therefore distorts the trajectory
relative to the continuous-time process.
"""

# Libraries to import:
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple
import numpy as np
import pandas as pd
import torch

from .errors import InvalidStepError, ResourceExhausted, SchemaError
from .utils.trajectory import TIME_COLUMN

MAX_STEPS = 1_000_000

RateFn = Callable[[Dict[str, torch.Tensor], Mapping[str, float], torch.Tensor], torch.Tensor]


@dataclass(frozen=True)
class Transition:
    source: str
    target: str
    rate: RateFn  # per-capita rate given (state, parameters, total population)


@dataclass(frozen=True)
class CompartmentalModel:
    name: str
    compartments: Tuple[str, ...]
    transitions: Tuple[Transition, ...]


def sir_model() -> CompartmentalModel:
    return CompartmentalModel(
        name="SIR",
        compartments=("S", "I", "R"),
        transitions=(
            Transition("S", "I", lambda s, p, n: p["beta"] * s["I"] / n),
            Transition("I", "R", lambda s, p, n: torch.as_tensor(p["gamma"], dtype=torch.float64)),
        ),
    )


def seir_model() -> CompartmentalModel:
    return CompartmentalModel(
        name="SEIR",
        compartments=("S", "E", "I", "R"),
        transitions=(
            Transition("S", "E", lambda s, p, n: p["beta"] * s["I"] / n),
            Transition("E", "I", lambda s, p, n: torch.as_tensor(p["sigma"], dtype=torch.float64)),
            Transition("I", "R", lambda s, p, n: torch.as_tensor(p["gamma"], dtype=torch.float64)),
        ),
    )


MODELS = {"SIR": sir_model, "SEIR": seir_model}


class DeterministicEngine:
    """Expected-value chain: fractional flows, identical output for identical inputs"""

    def __init__(self, max_steps: int = MAX_STEPS):
        self.max_steps = max_steps

    def _check(self, model, initial_values, time_step, duration):
        if not time_step > 0:
            raise InvalidStepError(f"time_step must be > 0, got {time_step}", step_size=time_step)
        if not duration > 0:
            raise InvalidStepError(f"duration must be > 0, got {duration}", step_size=time_step)
        missing = [c for c in model.compartments if c not in initial_values]
        if missing:
            raise SchemaError(f"Initial values missing compartment(s): {', '.join(missing)}")
        n_steps = int(round(duration / time_step))
        if n_steps > self.max_steps:
            raise ResourceExhausted(
                f"time_step={time_step} needs {n_steps} steps over duration {duration}; "
                f"limit is {self.max_steps}"
            )
        return max(n_steps, 1)

    def _flows(self, model, state, parameters, time_step, generator):
        n = sum(state.values())
        n = torch.where(n > 0, n, torch.ones_like(n))
        rates = [tr.rate(state, parameters, n) for tr in model.transitions]

        flows = []
        for comp in model.compartments:
            idx = [i for i, tr in enumerate(model.transitions) if tr.source == comp]
            if not idx:
                continue
            total_rate = sum(rates[i] for i in idx)
            p_exit = 1.0 - torch.exp(-total_rate * time_step)
            leaving = self._draw(state[comp], p_exit, generator)
            for i in idx:
                share = torch.where(total_rate > 0, rates[i] / total_rate, torch.zeros_like(total_rate))
                flows.append((model.transitions[i], leaving * share))
        return flows

    def _draw(self, count, p_exit, generator):
        return count * p_exit

    def _round_flows(self, flows, generator):
        return flows

    def __call__(self, model: CompartmentalModel, initial_values: Mapping[str, float],
                 parameters: Mapping[str, float], time_step: float, duration: float,
                 seed: Optional[int] = None) -> pd.DataFrame:
        n_steps = self._check(model, initial_values, time_step, duration)
        generator = torch.Generator().manual_seed(seed) if seed is not None else torch.Generator()

        state = {c: torch.tensor(float(initial_values[c]), dtype=torch.float64) for c in model.compartments}
        history = np.empty((n_steps + 1, len(model.compartments)))
        history[0] = [state[c].item() for c in model.compartments]

        for k in range(1, n_steps + 1):
            flows = self._round_flows(self._flows(model, state, parameters, time_step, generator), generator)
            delta = {c: torch.zeros((), dtype=torch.float64) for c in model.compartments}
            for tr, amount in flows:
                delta[tr.source] = delta[tr.source] - amount
                delta[tr.target] = delta[tr.target] + amount
            state = {c: torch.clamp(state[c] + delta[c], min=0.0) for c in model.compartments}
            history[k] = [state[c].item() for c in model.compartments]

        times = np.round(np.arange(n_steps + 1) * time_step, 12)
        trajectory = pd.DataFrame(history, columns=list(model.compartments))
        trajectory.insert(0, TIME_COLUMN, times)
        return trajectory


class ChainBinomialEngine(DeterministicEngine):
    """Stochastic chain: binomial exits per compartment, multinomial-by-rate split"""

    def _draw(self, count, p_exit, generator):
        total = torch.round(count)
        p = torch.clamp(p_exit, 0.0, 1.0)
        return torch.binomial(total.reshape(1), p.reshape(1), generator=generator).reshape(())

    def _round_flows(self, flows, generator):
        # split each compartment's binomial exits sequentially so flows stay integer
        by_source = {}
        for tr, amount in flows:
            by_source.setdefault(tr.source, []).append((tr, amount))
        rounded = []
        for entries in by_source.values():
            if len(entries) == 1:
                rounded.extend(entries)
                continue
            remaining = sum(a for _, a in entries)
            for tr, amount in entries[:-1]:
                p = torch.where(remaining > 0, amount / remaining, torch.zeros_like(remaining))
                taken = torch.binomial(torch.round(remaining).reshape(1), torch.clamp(p, 0.0, 1.0).reshape(1), generator=generator).reshape(())
                rounded.append((tr, taken))
                remaining = remaining - taken
            rounded.append((entries[-1][0], remaining))
        return rounded
