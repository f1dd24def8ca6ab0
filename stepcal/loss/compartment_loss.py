import pandas as pd
from .base_loss import LossFunction, LossComponents, pointwise_errors, score

class CompartmentLossFunction(LossFunction):
    """
    Per-compartment loss decomposition

    Computes the metric separately for each compartment alongside the
    overall score. The overall score is the mean over every compared row,
    not the mean of the per-compartment scores, so compartments with more
    surviving rows weigh more.
    """

    def __call__(self, series: pd.DataFrame) -> LossComponents:
        errors = pointwise_errors(series, self.kind)
        valid = ~errors.isna()

        per_compartment = {}
        for comp, comp_errors in errors[valid].groupby(series.loc[valid, "compartment"], sort=True):
            per_compartment[str(comp)] = float(comp_errors.mean())

        return LossComponents(
            total_loss=score(series, self.kind),
            kind=self.kind,
            n_points=int(valid.sum()),
            per_compartment=per_compartment,
        )

    def worst_compartment(self, series: pd.DataFrame):
        """Compartment with the largest error, or None when nothing was compared"""
        components = self(series)
        if not components.per_compartment:
            return None
        return max(components.per_compartment.items(), key=lambda kv: kv[1])[0]
