import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..utils.trajectory import TIME_COLUMN


def _prefixed(filename, prefix):
    return prefix + filename if prefix else filename


def save_alignment_plot(aligned: pd.DataFrame, filename="aligned_series.png", prefix="", title=None):
    """
    Reference vs. candidate per compartment, one panel each
    """
    filename = _prefixed(filename, prefix)
    compartments = sorted(aligned["compartment"].unique())
    if not compartments:
        return None

    n_cols = 2 if len(compartments) > 1 else 1
    n_rows = (len(compartments) + n_cols - 1) // n_cols
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(12, 4 * n_rows), squeeze=False)
    axes = axes.flatten()

    for ax, comp in zip(axes, compartments):
        rows = aligned[aligned["compartment"] == comp]
        ax.plot(rows[TIME_COLUMN], rows["reference"], color='#2c3e50', linewidth=2, label='Reference')
        ax.plot(rows[TIME_COLUMN], rows["candidate"], color='#e74c3c', linestyle='--', linewidth=1.5, label='Candidate')
        ax.set_title(f"Compartment {comp}", fontsize=12)
        ax.set_xlabel('Time')
        ax.grid(True, alpha=0.3)
        ax.legend()

    for ax in axes[len(compartments):]:
        ax.set_visible(False)

    if title:
        fig.suptitle(title, fontsize=14)
    fig.tight_layout()
    plt.savefig(filename)
    plt.close(fig)
    print(f"Saved: {filename}")
    return filename


def save_sensitivity_plot(sweep_df: pd.DataFrame, metric="MSE", filename="step_size_sensitivity.png", prefix=""):
    """
    Error vs. step size
    """
    filename = _prefixed(filename, prefix)
    if sweep_df.empty:
        return None

    data = sweep_df.sort_values("step_size")
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(data["step_size"], data["score"], marker='o', color='#2c3e50', linewidth=2)
    ax.set_xlabel('Step size')
    ax.set_ylabel(metric, fontsize=12, fontweight='bold')
    positive = data["score"].to_numpy(dtype=float)
    if np.all(positive[np.isfinite(positive)] > 0):
        ax.set_yscale('log')
    ax.grid(True, which="both", ls="-", alpha=0.2)
    ax.set_title('Error against reference vs. step size', fontsize=14)
    fig.tight_layout()
    plt.savefig(filename)
    plt.close(fig)
    print(f"Saved: {filename}")
    return filename


def save_convergence_plot(history: pd.DataFrame, filename="calibration_convergence.png", prefix=""):
    """
    Objective per evaluation with running best
    """
    filename = _prefixed(filename, prefix)
    if history is None or history.empty:
        return None

    objective = history["objective"].to_numpy(dtype=float)
    running_best = np.fmin.accumulate(np.where(np.isfinite(objective), objective, np.inf))

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(history["evaluation"], objective, marker='.', linestyle='', color='#95a5a6', label='Evaluation')
    ax.plot(history["evaluation"], running_best, color='#e74c3c', linewidth=2, label='Best so far')
    if np.all(objective[np.isfinite(objective)] > 0):
        ax.set_yscale('log')
    ax.set_xlabel('Evaluation')
    ax.set_ylabel('Objective')
    ax.grid(True, which="both", ls="-", alpha=0.2)
    ax.legend()
    ax.set_title('Calibration convergence', fontsize=14)
    fig.tight_layout()
    plt.savefig(filename)
    plt.close(fig)
    print(f"Saved: {filename}")
    return filename
