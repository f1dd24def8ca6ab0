from .engines import CountingEngine, FailingEngine, ScaledEngine
from .trajectories import make_trajectory

__all__ = ["CountingEngine", "FailingEngine", "ScaledEngine", "make_trajectory"]
