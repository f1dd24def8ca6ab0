# Libraries to import:
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Union
import numpy as np
import pandas as pd

from ..errors import InvalidMetricKind


class MetricKind(str, Enum):
    MAE = "MAE"
    MSE = "MSE"

    @classmethod
    def parse(cls, kind: Union["MetricKind", str]) -> "MetricKind":
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, str):
            try:
                return cls[kind.strip().upper()]
            except KeyError:
                pass
        raise InvalidMetricKind(f"Unknown metric kind: {kind!r} (expected 'MAE' or 'MSE')")


def pointwise_errors(series: pd.DataFrame, kind: Union[MetricKind, str]) -> pd.Series:
    """Per-row |ref - cand| or (ref - cand)^2; NaN where either side is NaN"""
    kind = MetricKind.parse(kind)
    diff = series["reference"].astype(float) - series["candidate"].astype(float)
    if kind is MetricKind.MAE:
        return diff.abs()
    return diff ** 2


def score(series: pd.DataFrame, kind: Union[MetricKind, str]) -> float:
    """
    Reduce an aligned series to a single error value

    Rows with a NaN difference are left out of both the sum and the count.
    An empty series (or one that is all NaN) scores NaN.
    """
    errors = pointwise_errors(series, kind).to_numpy(dtype=float)
    errors = errors[~np.isnan(errors)]
    if errors.size == 0:
        return float("nan")
    return float(errors.mean())


@dataclass
class LossComponents:
    """Container for loss function components"""
    total_loss: float
    kind: MetricKind
    n_points: int
    per_compartment: Dict[str, float] = field(default_factory=dict)

    def __str__(self):
        lines = [
            f"\nLoss Breakdown ({self.kind.value}):",
        ]
        for comp, val in self.per_compartment.items():
            lines.append(f"  {comp:20s}: {val:.6e}")
        lines.extend([
            f"  {'─' * 40}",
            f"  TOTAL:                {self.total_loss:.6e}",
            f"  Compared points:      {self.n_points}",
        ])
        return "\n".join(lines)


class LossFunction:
    """Base class for loss functions over aligned series"""

    def __init__(self, kind: Union[MetricKind, str] = MetricKind.MSE):
        self.kind = MetricKind.parse(kind)

    def __call__(self, series: pd.DataFrame) -> LossComponents:
        """Compute loss and return components"""
        raise NotImplementedError

    def report(self, components: LossComponents, iteration: int, verbosity: int = 1):
        """Print loss breakdown based on verbosity level"""
        if verbosity == 0:
            return
        elif verbosity == 1:
            print(f"Iter {iteration:03d} | {components.kind.value}: {components.total_loss:.6e}")
        elif verbosity >= 2:
            print(f"\n{'='*60}")
            print(f"Iteration {iteration}")
            print(components)
            print(f"{'='*60}")
