# Libraries to import:
import numpy as np
import pandas as pd
from typing import Iterable

from ..utils.trajectory import TIME_COLUMN, restrict_compartments, to_long

ALIGNED_COLUMNS = [TIME_COLUMN, "compartment", "reference", "candidate"]


def _resample_onto(candidate: pd.DataFrame, times: np.ndarray) -> pd.DataFrame:
    """Linear interpolation of every compartment onto ``times`` (inside the candidate's range only)"""
    cand_t = candidate[TIME_COLUMN].to_numpy(dtype=float)
    inside = times[(times >= cand_t.min()) & (times <= cand_t.max())] if len(cand_t) else times[:0]
    resampled = {TIME_COLUMN: inside}
    for comp in candidate.columns:
        if comp == TIME_COLUMN:
            continue
        resampled[comp] = np.interp(inside, cand_t, candidate[comp].to_numpy(dtype=float))
    return pd.DataFrame(resampled)


def _to_proportions(series: pd.DataFrame, column: str) -> pd.Series:
    totals = series.groupby(TIME_COLUMN)[column].transform("sum")
    return (series[column] / totals).where(totals != 0, np.nan)


def align(
    reference: pd.DataFrame,
    candidate: pd.DataFrame,
    compartments: Iterable[str],
    normalize: bool = False,
    resample: bool = False,
    time_decimals: int = 9,
) -> pd.DataFrame:
    """
    Join a reference and a candidate trajectory on (time, compartment)

    Only rows present in both trajectories survive (inner join). With
    ``normalize`` each side is divided by its own total at every time point,
    so the comparison is between proportions; a zero total gives NaN.
    ``resample`` interpolates the candidate onto the reference grid first.

    Returns:
        DataFrame with columns time, compartment, reference, candidate
    """
    compartments = sorted(set(compartments))
    ref = restrict_compartments(reference, compartments, label="reference")
    cand = restrict_compartments(candidate, compartments, label="candidate")

    if resample:
        cand = _resample_onto(cand, ref[TIME_COLUMN].to_numpy(dtype=float))

    aligned = to_long(ref, "reference", time_decimals).merge(
        to_long(cand, "candidate", time_decimals),
        on=[TIME_COLUMN, "compartment"],
        how="inner",
    )
    aligned = aligned.sort_values([TIME_COLUMN, "compartment"], kind="mergesort").reset_index(drop=True)
    aligned["reference"] = aligned["reference"].astype(float)
    aligned["candidate"] = aligned["candidate"].astype(float)

    if normalize and not aligned.empty:
        aligned["reference"] = _to_proportions(aligned, "reference")
        aligned["candidate"] = _to_proportions(aligned, "candidate")

    return aligned[ALIGNED_COLUMNS]
