#!/usr/bin/env python3
"""
Main calibration script

Generates a reference trajectory at the smallest step size, calibrates the
free parameters at the coarse step size, sweeps step sizes at the base
parameters, then prints reports and saves plots.
"""

# Libraries to import:
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stepcal.config import CalibrationConfig, ModelConfig, SweepConfig
from stepcal.engines import MODELS, ChainBinomialEngine, DeterministicEngine
from stepcal.optimization import Calibrator, SensitivitySweeper
from stepcal.utils import ParameterVector, SimulationAdapter, start_logging, stop_logging
from stepcal.visualization import (
    generate_full_calibration_report,
    save_alignment_plot,
    save_convergence_plot,
    save_sensitivity_plot,
)


def build_adapter(model_config: ModelConfig):
    """Engine, model handle and adapter from the model configuration"""
    if model_config.model_name not in MODELS:
        raise ValueError(f"Unknown model: {model_config.model_name}")
    model = MODELS[model_config.model_name]()
    engine = ChainBinomialEngine() if model_config.stochastic else DeterministicEngine()
    return SimulationAdapter(
        engine,
        model,
        model_config.initial_values,
        model_config.base_parameters,
        strict=model_config.strict_parameters,
        replicates=model_config.replicates,
        seed=model_config.seed,
    )


def run_calibration(calib_config: CalibrationConfig, sweep_config: SweepConfig, model_config: ModelConfig,
                    metric="MAE", output_prefix=""):
    """
    Reference → calibration → sweep workflow

    Returns:
        (CalibrationResult, sweep DataFrame)
    """
    adapter = build_adapter(model_config)
    compartments = list(model_config.initial_values)

    print("="*100)
    print(f"REFERENCE: {model_config.model_name} at time_step={model_config.reference_step}, "
          f"duration={model_config.duration}")
    print("="*100)
    reference = adapter.run(None, model_config.reference_step, model_config.duration)

    free = ParameterVector.from_base(model_config.base_parameters, model_config.free_bounds)
    result = Calibrator(adapter, calib_config).calibrate(
        reference, free, model_config.coarse_step, model_config.duration, compartments, metric=metric,
    )

    sweep_df = SensitivitySweeper(adapter, sweep_config).run_sweep(
        reference, None, model_config.duration, compartments, metric=metric,
    )

    generate_full_calibration_report(result, sweep_df, true_params=model_config.base_parameters)

    save_alignment_plot(result.aligned, prefix=output_prefix,
                        title=f"Fitted step {model_config.coarse_step} vs. reference step {model_config.reference_step}")
    save_convergence_plot(result.history, prefix=output_prefix)
    save_sensitivity_plot(sweep_df, metric=metric, prefix=output_prefix)

    return result, sweep_df


if __name__ == "__main__":
    logger = start_logging(prefix="run_calibration")
    try:
        calib_config = CalibrationConfig(num_restarts=2, verbosity=1)
        sweep_config = SweepConfig(step_sizes=[0.05, 0.1, 0.2, 0.25, 0.5, 1.0], max_workers=4)
        model_config = ModelConfig(model_name="SIR", reference_step=0.01, coarse_step=1.0, duration=120.0)

        result, sweep_df = run_calibration(calib_config, sweep_config, model_config)
        print("\nCalibration complete!")
    finally:
        stop_logging(logger)
