"""Small hand-built trajectories for unit tests."""

from __future__ import annotations

import pandas as pd

from stepcal.utils.trajectory import TIME_COLUMN


def make_trajectory(rows: list[tuple], compartments: tuple[str, ...] = ("S", "I")) -> pd.DataFrame:
    """``rows`` are ``(time, value_1, value_2, ...)`` in ``compartments`` order."""
    return pd.DataFrame(rows, columns=[TIME_COLUMN, *compartments]).astype(float)
