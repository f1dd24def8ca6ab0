from .plotting import (
    save_alignment_plot,
    save_sensitivity_plot,
    save_convergence_plot
)
from .reports import (
    generate_calibration_report,
    generate_sweep_report,
    generate_full_calibration_report
)

__all__ = [
    "save_alignment_plot",
    "save_sensitivity_plot",
    "save_convergence_plot",
    "generate_calibration_report",
    "generate_sweep_report",
    "generate_full_calibration_report"
]
