# Libraries to import:
from typing import Dict, Optional
import pandas as pd
from ..loss.compartment_loss import CompartmentLossFunction
from ..optimization.sweep import summarize_sweep
from ..utils.metrics import print_calibration_table, print_sweep_table


def generate_calibration_report(result, true_params: Optional[Dict[str, float]] = None):
    """
    Print the parameter recovery table plus per-compartment error at the fitted point

    Args:
        result: CalibrationResult
        true_params: optional dict with known parameter values
    """
    print("\n" + "="*90)
    print("CALIBRATION REPORT")
    print("="*90)

    print_calibration_table(result, true_params=true_params)

    if result.aligned is not None and not result.aligned.empty:
        loss_fn = CompartmentLossFunction(result.metric)
        components = loss_fn(result.aligned)
        print(components)
        worst = loss_fn.worst_compartment(result.aligned)
        if worst is not None:
            print(f"  Largest error in compartment: {worst}")

    print("\n" + "="*90)


def generate_sweep_report(sweep_df: pd.DataFrame, metric="MSE"):
    """
    Print the step-size table with its trend summary

    Returns:
        summary dict from summarize_sweep
    """
    summary = summarize_sweep(sweep_df)
    print_sweep_table(sweep_df, metric=metric, summary=summary)
    return summary


def generate_full_calibration_report(result, sweep_df: Optional[pd.DataFrame] = None,
                                     true_params: Optional[Dict[str, float]] = None):
    """Calibration report followed by the sweep report when a sweep was run"""
    generate_calibration_report(result, true_params=true_params)
    summary = None
    if sweep_df is not None:
        summary = generate_sweep_report(sweep_df, metric=result.metric)
    return summary
