#!/usr/bin/env python3
"""
Example: how error grows with step size, deterministic vs. averaged stochastic runs
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stepcal.config import SweepConfig
from stepcal.engines import ChainBinomialEngine, DeterministicEngine, sir_model
from stepcal.errors import SweepAborted
from stepcal.optimization import SensitivitySweeper
from stepcal.utils import SimulationAdapter, start_logging, stop_logging
from stepcal.visualization import generate_sweep_report, save_sensitivity_plot

STEP_SIZES = [0.1, 0.2, 0.25, 0.5, 1.0, 2.0]

def main():
    logger = start_logging(prefix="step_size_sweep")

    try:
        model = sir_model()
        initial_values = {"S": 9_990.0, "I": 10.0, "R": 0.0}
        parameters = {"beta": 0.3, "gamma": 0.1}
        duration = 100.0

        scenarios = [
            ("Deterministic", SimulationAdapter(DeterministicEngine(), model, initial_values, parameters)),
            ("Chain binomial x10", SimulationAdapter(ChainBinomialEngine(), model, initial_values, parameters,
                                                     replicates=10, seed=12345)),
        ]

        summaries = []
        for scenario_name, adapter in scenarios:
            print(f"\n{'#'*100}")
            print(f"# SCENARIO: {scenario_name}")
            print(f"{'#'*100}")

            reference = adapter.run(None, 0.025, duration)
            sweeper = SensitivitySweeper(adapter, SweepConfig(step_sizes=STEP_SIZES, max_workers=4, verbosity=0))

            # Lazy iteration streams results as they are computed
            for step_size, value in sweeper.sweep(reference, None, duration, ["S", "I", "R"], metric="MSE"):
                print(f"  step {step_size:<6} -> MSE {value:.3e}")

            try:
                sweep_df = sweeper.run_sweep(reference, None, duration, ["S", "I", "R"], metric="MSE")
            except SweepAborted as exc:
                print(f"Sweep aborted at step {exc.step_size}; keeping {len(exc.partial)} rows")
                sweep_df = exc.partial

            summary = generate_sweep_report(sweep_df, metric="MSE")
            save_sensitivity_plot(sweep_df, metric="MSE", prefix=scenario_name.split()[0].lower() + "_")
            summaries.append((scenario_name, summary))

        print("\n" + "="*100)
        print("STEP-SIZE SENSITIVITY SUMMARY")
        print("="*100)
        for scenario_name, summary in summaries:
            print(f"{scenario_name:<30} | rho={summary['spearman_rho']:+.3f} | growth={summary['growth_ratio']:.2f}x")
        print("="*100)

    finally:
        stop_logging(logger)

if __name__ == "__main__":
    main()
