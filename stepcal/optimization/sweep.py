# Libraries to import:
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, Mapping, Optional, Sequence, Tuple
import pandas as pd
from scipy.stats import spearmanr

from ..config.calibration_config import SweepConfig
from ..errors import SweepAborted
from ..loss.alignment import align
from ..loss.base_loss import MetricKind, score
from ..utils.metrics import print_sweep_table
from ..utils.simulation_utils import SimulationAdapter, check_duration
from ..utils.trajectory import restrict_compartments

SWEEP_COLUMNS = ["step_size", "score", "n_points"]


class StepSizeSweep:
    """
    Restartable lazy sequence of (step_size, score) pairs

    Every iteration re-runs the simulations; nothing is cached. Iteration
    stops with the adapter's error at the first step size that fails, after
    all earlier pairs have been yielded.
    """

    def __init__(self, sweeper: "SensitivitySweeper", reference, parameters, duration,
                 compartments, kind: MetricKind, step_sizes, should_stop=None):
        self.sweeper = sweeper
        self.reference = reference
        self.parameters = dict(parameters or {})
        self.duration = duration
        self.compartments = compartments
        self.kind = kind
        self.step_sizes = [float(s) for s in step_sizes]
        self.should_stop = should_stop

    def __len__(self):
        return len(self.step_sizes)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for step_size, value, _ in self.evaluate_all():
            yield step_size, value

    def evaluate_all(self) -> Iterator[Tuple[float, float, int]]:
        """Like iteration, but also yields the number of compared rows"""
        for step_size in self.step_sizes:
            if self.should_stop is not None and self.should_stop():
                return
            yield self.sweeper.evaluate(self.reference, self.parameters, step_size,
                                        self.duration, self.compartments, self.kind)


class SensitivitySweeper:
    """Error against a fixed reference across a grid of step sizes at fixed parameters"""

    def __init__(self, adapter: SimulationAdapter, config: Optional[SweepConfig] = None):
        self.adapter = adapter
        self.config = config or SweepConfig()

    def evaluate(self, reference, parameters, step_size, duration, compartments, kind):
        candidate = self.adapter.run(parameters, step_size, duration)
        aligned = align(reference, candidate, compartments, normalize=self.config.normalize,
                        time_decimals=self.config.time_decimals)
        value = score(aligned, kind)
        if self.config.verbosity >= 2:
            print(f"Step {step_size:<10.4g} | {kind.value}={value:.6e} | points={len(aligned)}")
        return step_size, value, int(len(aligned))

    def sweep(self, reference: pd.DataFrame, parameters: Optional[Mapping[str, float]], duration: float,
              compartments: Sequence[str], metric="MAE", step_sizes: Optional[Sequence[float]] = None,
              should_stop: Optional[Callable[[], bool]] = None) -> StepSizeSweep:
        kind = MetricKind.parse(metric)
        compartments = sorted(set(compartments))
        restrict_compartments(reference, compartments, label="reference")
        self.adapter.merged_parameters(parameters)
        check_duration(duration)
        if step_sizes is None:
            step_sizes = self.config.step_sizes
        return StepSizeSweep(self, reference.copy(), parameters, duration, compartments, kind,
                             step_sizes, should_stop=should_stop)

    def run_sweep(self, reference, parameters, duration, compartments, metric="MAE",
                  step_sizes=None, should_stop=None) -> pd.DataFrame:
        """
        Collect a sweep into a DataFrame (step_size, score, n_points)

        Runs step sizes on a thread pool when config.max_workers > 1; rows
        keep the input order. On failure raises SweepAborted carrying the
        failing step size and the rows computed before it.
        """
        lazy = self.sweep(reference, parameters, duration, compartments, metric, step_sizes, should_stop)
        rows = []
        workers = self.config.max_workers or 1
        try:
            if workers > 1:
                with ThreadPoolExecutor(max_workers=workers) as pool:
                    futures = [pool.submit(self._evaluate_guarded, lazy, s) for s in lazy.step_sizes]
                    try:
                        for fut in futures:
                            outcome = fut.result()
                            if outcome is None:
                                break
                            rows.append(outcome)
                    finally:
                        pool.shutdown(wait=True, cancel_futures=True)
            else:
                for outcome in lazy.evaluate_all():
                    rows.append(outcome)
        except Exception as exc:
            partial = pd.DataFrame(rows, columns=SWEEP_COLUMNS)
            failed = getattr(exc, "step_size", None)
            if failed is None and len(rows) < len(lazy.step_sizes):
                failed = lazy.step_sizes[len(rows)]
            raise SweepAborted(f"Sweep stopped at step size {failed}: {exc}",
                               step_size=failed, partial=partial) from exc

        df = pd.DataFrame(rows, columns=SWEEP_COLUMNS)
        if self.config.verbosity >= 1:
            print_sweep_table(df, lazy.kind.value, summarize_sweep(df))
        return df

    @staticmethod
    def _evaluate_guarded(lazy: StepSizeSweep, step_size):
        if lazy.should_stop is not None and lazy.should_stop():
            return None
        return lazy.sweeper.evaluate(lazy.reference, lazy.parameters, step_size,
                                     lazy.duration, lazy.compartments, lazy.kind)


def summarize_sweep(sweep_df: pd.DataFrame):
    """
    Trend of error against step size

    Returns:
        dict with spearman_rho (rank correlation of step size and score) and
        growth_ratio (score at the largest step over score at the smallest)
    """
    valid = sweep_df.dropna(subset=["score"]).sort_values("step_size")
    if len(valid) < 2:
        return {"spearman_rho": float("nan"), "growth_ratio": float("nan"), "n_steps": len(valid)}
    rho, _ = spearmanr(valid["step_size"], valid["score"])
    first, last = valid["score"].iloc[0], valid["score"].iloc[-1]
    growth = float(last / first) if first > 0 else float("nan")
    return {"spearman_rho": float(rho), "growth_ratio": growth, "n_steps": len(valid)}


def sweep(reference, model, initial_values, parameters, duration, compartments, metric="MAE",
          step_sizes: Optional[Sequence[float]] = None, engine=None, config: Optional[SweepConfig] = None,
          replicates: int = 1, seed: Optional[int] = None, strict: bool = True,
          should_stop: Optional[Callable[[], bool]] = None) -> StepSizeSweep:
    """Build a SimulationAdapter around ``engine`` and return a lazy StepSizeSweep"""
    if engine is None:
        raise ValueError("engine is required")
    adapter = SimulationAdapter(engine, model, initial_values, parameters,
                                strict=strict, replicates=replicates, seed=seed)
    return SensitivitySweeper(adapter, config).sweep(
        reference, None, duration, compartments, metric,
        None if step_sizes is None else list(step_sizes), should_stop=should_stop,
    )


def run_sweep(reference, model, initial_values, parameters, duration, compartments, metric="MAE",
              step_sizes: Optional[Sequence[float]] = None, engine=None, config: Optional[SweepConfig] = None,
              replicates: int = 1, seed: Optional[int] = None, strict: bool = True,
              should_stop: Optional[Callable[[], bool]] = None) -> pd.DataFrame:
    """Eager counterpart of ``sweep``: returns the DataFrame (step_size, score, n_points)"""
    if engine is None:
        raise ValueError("engine is required")
    adapter = SimulationAdapter(engine, model, initial_values, parameters,
                                strict=strict, replicates=replicates, seed=seed)
    return SensitivitySweeper(adapter, config).run_sweep(
        reference, None, duration, compartments, metric,
        None if step_sizes is None else list(step_sizes), should_stop=should_stop,
    )
