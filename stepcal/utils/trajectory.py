# Libraries to import:
import numpy as np
import pandas as pd
from typing import Iterable, List, Sequence

from ..errors import SchemaError

TIME_COLUMN = "time"


def compartment_columns(trajectory: pd.DataFrame) -> List[str]:
    return [c for c in trajectory.columns if c != TIME_COLUMN]


def validate_trajectory(trajectory: pd.DataFrame, required: Iterable[str] = (), proportions=False):
    """
    Check that a trajectory is well formed

    Args:
        trajectory: DataFrame with a time column plus one column per compartment
        required: compartment names that must be present
        proportions: skip the non-negative population check when values are shares

    Raises:
        SchemaError on a missing time column, missing compartments,
        non-increasing time values or non-finite / negative populations
    """
    if TIME_COLUMN not in trajectory.columns:
        raise SchemaError(f"Trajectory has no '{TIME_COLUMN}' column")

    missing = [c for c in required if c not in trajectory.columns]
    if missing:
        raise SchemaError(f"Trajectory is missing compartment(s): {', '.join(missing)}")

    times = trajectory[TIME_COLUMN].to_numpy(dtype=float)
    if len(times) > 1 and not np.all(np.diff(times) > 0):
        raise SchemaError("Trajectory time values must be strictly increasing")

    values = trajectory[compartment_columns(trajectory)].to_numpy(dtype=float)
    if not np.all(np.isfinite(values)):
        raise SchemaError("Trajectory contains non-finite values")
    if not proportions and np.any(values < 0):
        raise SchemaError("Trajectory contains negative populations")
    return trajectory


def restrict_compartments(trajectory: pd.DataFrame, compartments: Sequence[str], label="trajectory") -> pd.DataFrame:
    """Copy of ``trajectory`` holding only the time column and ``compartments``"""
    missing = [c for c in compartments if c not in trajectory.columns]
    if missing:
        raise SchemaError(f"Compartment(s) {', '.join(missing)} absent from {label}")
    return trajectory.loc[:, [TIME_COLUMN, *compartments]].copy()


def to_long(trajectory: pd.DataFrame, value_name: str, time_decimals: int = 9) -> pd.DataFrame:
    """Wide (time x compartment) frame to long rows keyed by (time, compartment)"""
    long_df = trajectory.melt(id_vars=TIME_COLUMN, var_name="compartment", value_name=value_name)
    long_df[TIME_COLUMN] = long_df[TIME_COLUMN].astype(float).round(time_decimals)
    return long_df


def average_replicates(trajectories: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """
    Entrywise mean of replicate trajectories

    Replicates are matched on time; a time point missing from any replicate is dropped.
    """
    if not trajectories:
        raise SchemaError("No replicate trajectories to average")
    if len(trajectories) == 1:
        return trajectories[0].copy()

    columns = list(trajectories[0].columns)
    for traj in trajectories[1:]:
        if sorted(traj.columns) != sorted(columns):
            raise SchemaError("Replicate trajectories have different compartments")

    stacked = pd.concat([t[columns] for t in trajectories], ignore_index=True)
    counts = stacked.groupby(TIME_COLUMN).size()
    complete = counts[counts == len(trajectories)].index
    averaged = stacked[stacked[TIME_COLUMN].isin(complete)].groupby(TIME_COLUMN, sort=True).mean()
    return averaged.reset_index()[columns]
