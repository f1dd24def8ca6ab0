# Libraries to import:
import math
import numpy as np


def format_iter_report(evaluation, objective, parameters, kind="MSE", verbose=True):
    """
    Format and print one objective evaluation

    Args:
        evaluation: evaluation counter within the current run
        objective: objective value at this point
        parameters: dict of free parameter values
        kind: objective metric name
        verbose: whether to print
    """
    if not verbose:
        return
    params_str = ", ".join(f"{k}={v:.6g}" for k, v in parameters.items())
    print(f"Eval {evaluation:03d} | {kind}={objective:.6e} | {params_str}")


def print_calibration_table(result, true_params=None):
    """
    Print parameter recovery table for a calibration result

    Args:
        result: CalibrationResult
        true_params: optional dict of known parameter values (synthetic scenarios)
    """
    print(f"\n>>> CALIBRATION PARAMETER RECOVERY <<<")
    print("="*90)
    print(f"{'PARAMETER':<12} | {'LOWER':<10} | {'UPPER':<10} | {'SEED':<12} | {'FITTED':<12} | {'TRUE':<12} | {'% DEV':<8}")
    print("-" * 90)
    fitted = result.parameters
    for name in fitted.names:
        seed_val = result.seed_values.get(name, float("nan"))
        o_val = fitted.values[name]
        t_str, d_str = "", ""
        if true_params and name in true_params:
            t_val = true_params[name]
            t_str = f"{t_val:<12.6f}"
            d_str = f"{((o_val - t_val) / t_val) * 100:>+7.2f}%" if t_val != 0 else ""
        print(f"{name:<12} | {fitted.lower[name]:<10.4g} | {fitted.upper[name]:<10.4g} | "
              f"{seed_val:<12.6f} | {o_val:<12.6f} | {t_str:<12} | {d_str}")
    print("-" * 90)
    print(f"  Objective ({result.objective_metric}): {result.objective_score:.6e}")
    print(f"  Reported  ({result.metric}):  {result.score:.6e}")
    print(f"  Iterations: {result.iterations} | Evaluations: {result.evaluations} | "
          f"Converged: {result.converged}")
    print(f"  Message: {result.message}")
    print("="*90)


def print_sweep_table(sweep_df, metric="MSE", summary=None):
    """
    Print step-size sensitivity table

    Args:
        sweep_df: DataFrame with step_size, score, n_points
        metric: metric name for the header
        summary: optional dict from summarize_sweep
    """
    print(f"\n>>> STEP-SIZE SENSITIVITY ({metric}) <<<")
    print("="*60)
    print(f"{'STEP SIZE':<12} | {'SCORE':<16} | {'POINTS':<10} | {'x BASE':<10}")
    print("-" * 60)
    base = None
    for _, row in sweep_df.iterrows():
        val = row["score"]
        if base is None and np.isfinite(val) and val > 0:
            base = val
        ratio = f"{val / base:<10.2f}" if base and np.isfinite(val) else ""
        print(f"{row['step_size']:<12.4g} | {val:<16.6e} | {int(row['n_points']):<10} | {ratio}")
    print("-" * 60)
    if summary:
        rho = summary.get("spearman_rho", float("nan"))
        growth = summary.get("growth_ratio", float("nan"))
        rho_str = "n/a" if math.isnan(rho) else f"{rho:+.3f}"
        growth_str = "n/a" if math.isnan(growth) else f"{growth:.2f}x"
        print(f"  Spearman rho (step vs error): {rho_str} | Largest/smallest step error: {growth_str}")
    print("="*60)


def print_restart_table(attempts):
    """
    Print comparison table across restart attempts

    Args:
        attempts: list of dicts with phase, objective, iterations, evaluations, converged
    """
    print(f"\n>>> RESTART COMPARISON <<<")
    print("="*80)
    print(f"{'ATTEMPT':<10} | {'PHASE':<10} | {'OBJECTIVE':<14} | {'ITERATIONS':<10} | {'EVALS':<8} | {'CONVERGED':<9}")
    print("-" * 80)
    for i, att in enumerate(attempts):
        print(f"{i:<10} | {att['phase']:<10} | {att['objective']:<14.6e} | {att['iterations']:<10} | "
              f"{att['evaluations']:<8} | {str(att['converged']):<9}")
    print("="*80)
    best = min(attempts, key=lambda a: a["objective"])
    print(f"\nBEST ATTEMPT: {attempts.index(best)} (Objective: {best['objective']:.6e})")
