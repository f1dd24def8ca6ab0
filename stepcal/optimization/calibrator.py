# Libraries to import:
import time as global_time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence
import numpy as np
import pandas as pd
from scipy.optimize import minimize

from ..config.calibration_config import CalibrationConfig
from ..errors import CalibrationAborted, EmptyAlignmentError, UnknownParameterError
from ..loss.alignment import align
from ..loss.base_loss import MetricKind, score
from ..utils.metrics import format_iter_report, print_calibration_table, print_restart_table
from ..utils.simulation_utils import SimulationAdapter, check_step
from ..utils.theta_transforms import (
    ParameterVector,
    apply_theta,
    build_theta_structure,
    theta_to_vector,
)
from ..utils.trajectory import restrict_compartments


class StopOptimization(Exception):
    pass


@dataclass
class CalibrationResult:
    """Outcome of one calibration run"""
    parameters: ParameterVector
    score: float  # reporting metric at the fitted point
    objective_score: float  # objective metric at the fitted point
    iterations: int
    evaluations: int
    converged: bool
    message: str
    metric: str
    objective_metric: str
    seed_values: Dict[str, float] = field(default_factory=dict)
    aligned: Optional[pd.DataFrame] = None
    history: Optional[pd.DataFrame] = None
    attempts: List[Dict] = field(default_factory=list)
    duration: float = 0.0

    def as_tuple(self):
        return self.parameters, self.score, self.iterations


def build_objective(adapter: SimulationAdapter, reference: pd.DataFrame, structure: Dict,
                    time_step: float, duration: float, compartments: Sequence[str],
                    kind: MetricKind, normalize: bool = True, time_decimals: int = 9):
    """
    Objective over the optimizer vector θ

    Each call merges θ onto the base parameters, runs a fresh simulation at
    ``time_step`` and scores it against ``reference``. Nothing is carried
    between calls.

    Returns:
        callable θ → (objective value, aligned series)
    """
    def evaluate(x_np):
        params = apply_theta(x_np, structure, adapter.base_parameters, strict=adapter.strict)
        candidate = adapter.run(params, time_step, duration)
        aligned = align(reference, candidate, compartments, normalize=normalize, time_decimals=time_decimals)
        return score(aligned, kind), aligned

    return evaluate


class Calibrator:
    """
    Bounded local calibration of free parameters against a fixed reference

    The objective metric (config.objective_metric, MSE by default) drives
    the optimizer; the caller's metric is only used to report the fit.
    """

    def __init__(self, adapter: SimulationAdapter, config: Optional[CalibrationConfig] = None):
        self.adapter = adapter
        self.config = config or CalibrationConfig()

    def calibrate(self, reference: pd.DataFrame, free: ParameterVector, time_step: float,
                  duration: float, compartments: Sequence[str], metric="MAE",
                  should_stop: Optional[Callable[[], bool]] = None) -> CalibrationResult:
        cfg = self.config
        verbose = cfg.verbosity >= 2

        # All validation happens before the first simulation
        structure = build_theta_structure(free)
        report_kind = MetricKind.parse(metric)
        objective_kind = MetricKind.parse(cfg.objective_metric)
        check_step(time_step, duration)
        # a free parameter must reach the engine, whatever the override policy
        unknown = set(free.names) - set(self.adapter.base_parameters)
        if unknown:
            raise UnknownParameterError(unknown)
        compartments = sorted(set(compartments))
        restrict_compartments(reference, compartments, label="reference")

        evaluate = build_objective(
            self.adapter, reference.copy(), structure, time_step, duration, compartments,
            objective_kind, normalize=cfg.normalize, time_decimals=cfg.time_decimals,
        )
        lower = np.array([b[0] for b in structure["bounds"]])
        upper = np.array([b[1] for b in structure["bounds"]])

        history = []
        best = {"x": None, "f": np.inf, "aligned": None}
        attempt_id = [0]

        def recorded(x_np):
            if should_stop is not None and should_stop():
                raise StopOptimization(f"Cancelled before evaluation {len(history)}")
            x_np = np.clip(np.asarray(x_np, dtype=float), lower, upper)
            try:
                value, aligned = evaluate(x_np)
            except Exception as exc:
                if best["x"] is None:
                    raise
                raise CalibrationAborted(
                    f"Simulation failed after {len(history)} evaluations: {exc}",
                    best_parameters=theta_to_vector(best["x"], structure, free),
                    best_score=best["f"],
                ) from exc

            history.append({"attempt": attempt_id[0], "evaluation": len(history), "objective": value,
                            **{n: float(x_np[i]) for i, n in enumerate(structure["names"])}})
            format_iter_report(len(history) - 1, value, dict(zip(structure["names"], x_np)),
                               kind=objective_kind.value, verbose=verbose)
            if not np.isfinite(value):
                return cfg.nonfinite_penalty
            if value < best["f"] or best["x"] is None:
                best.update({"x": x_np.copy(), "f": value, "aligned": aligned})
            return value

        start_time = global_time.time()
        x0 = structure["x0"]
        try:
            f0 = recorded(x0)
        except StopOptimization as stop:
            raise CalibrationAborted(str(stop)) from stop
        if best["x"] is None:
            raise EmptyAlignmentError(
                "Reference and candidate share no (time, compartment) rows at the seed point; "
                "check that both are sampled at coincident time instants"
            )

        if cfg.verbosity >= 1:
            print(f"\n{'='*70}")
            print(f"CALIBRATING {', '.join(structure['names'])} | optimizer={cfg.optimizer} | "
                  f"time_step={time_step} | seed {objective_kind.value}={f0:.6e}")
            print(f"{'='*70}")

        attempts = []
        stopped = None
        rng = np.random.default_rng(cfg.seed)
        try:
            for restart_idx in range(cfg.num_restarts + 1):
                attempt_id[0] = restart_idx
                if restart_idx == 0:
                    start, phase = x0, "Initial"
                else:
                    start, phase = self._restart_point(best["x"], lower, upper, rng), "Restart"
                evals_before = len(history)
                res = minimize(
                    recorded,
                    start,
                    method=cfg.optimizer,
                    bounds=structure["bounds"],
                    options=cfg.scipy_options(),
                )
                attempts.append({
                    "phase": phase,
                    "objective": float(res.fun),
                    "iterations": int(getattr(res, "nit", 0)),
                    "evaluations": len(history) - evals_before,
                    "converged": bool(res.success),
                    "message": str(res.message),
                })
        except StopOptimization as stop:
            stopped = str(stop)

        if stopped is not None or not attempts:
            message, converged = stopped or "", False
        else:
            best_attempt = min(attempts, key=lambda a: a["objective"])
            message, converged = best_attempt["message"], best_attempt["converged"]

        if cfg.verbosity >= 1 and len(attempts) > 1:
            print_restart_table(attempts)

        fitted = theta_to_vector(best["x"], structure, free)
        result = CalibrationResult(
            parameters=fitted,
            score=score(best["aligned"], report_kind),
            objective_score=float(best["f"]),
            iterations=sum(a["iterations"] for a in attempts),
            evaluations=len(history),
            converged=converged,
            message=message,
            metric=report_kind.value,
            objective_metric=objective_kind.value,
            seed_values=dict(free.values),
            aligned=best["aligned"],
            history=pd.DataFrame(history),
            attempts=attempts,
            duration=global_time.time() - start_time,
        )
        if cfg.verbosity >= 1:
            print_calibration_table(result)
        return result

    def _restart_point(self, base_x, lower, upper, rng):
        """Uniform perturbation around the best point, kept inside the box"""
        width = self.config.restart_width * (upper - lower)
        return np.clip(base_x + rng.uniform(-width, width), lower, upper)


def calibrate(reference, model, initial_values, base_parameters, free: ParameterVector,
              time_step, duration, compartments, metric="MAE", engine=None,
              config: Optional[CalibrationConfig] = None, replicates: int = 1,
              seed: Optional[int] = None, strict: bool = True,
              should_stop: Optional[Callable[[], bool]] = None) -> CalibrationResult:
    """Build a SimulationAdapter around ``engine`` and run a Calibrator"""
    if engine is None:
        raise ValueError("engine is required")
    free.validate()
    adapter = SimulationAdapter(engine, model, initial_values, base_parameters,
                                strict=strict, replicates=replicates, seed=seed)
    return Calibrator(adapter, config).calibrate(
        reference, free, time_step, duration, compartments, metric=metric, should_stop=should_stop,
    )
