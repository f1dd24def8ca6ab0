from .trajectory import (
    TIME_COLUMN,
    compartment_columns,
    validate_trajectory,
    restrict_compartments,
    to_long,
    average_replicates
)
from .theta_transforms import (
    ParameterVector,
    build_theta_structure,
    merge_parameters,
    apply_theta,
    theta_to_vector
)
from .simulation_utils import Engine, SimulationAdapter, check_duration, check_step
from .metrics import (
    format_iter_report,
    print_calibration_table,
    print_sweep_table,
    print_restart_table
)
from .logger import RunLog, default_log_path, start_logging, stop_logging

__all__ = [
    "TIME_COLUMN",
    "compartment_columns",
    "validate_trajectory",
    "restrict_compartments",
    "to_long",
    "average_replicates",
    "ParameterVector",
    "build_theta_structure",
    "merge_parameters",
    "apply_theta",
    "theta_to_vector",
    "Engine",
    "SimulationAdapter",
    "check_duration",
    "check_step",
    "format_iter_report",
    "print_calibration_table",
    "print_sweep_table",
    "print_restart_table",
    "start_logging",
    "stop_logging",
    "RunLog",
    "default_log_path"
]
