from .alignment import align, ALIGNED_COLUMNS
from .base_loss import LossFunction, LossComponents, MetricKind, pointwise_errors, score
from .compartment_loss import CompartmentLossFunction

__all__ = [
    "align",
    "ALIGNED_COLUMNS",
    "LossFunction",
    "LossComponents",
    "MetricKind",
    "pointwise_errors",
    "score",
    "CompartmentLossFunction"
]
