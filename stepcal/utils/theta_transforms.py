# Libraries to import:
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple
import numpy as np

from ..errors import BoundsError, UnknownParameterError


@dataclass(frozen=True)
class ParameterVector:
    """Free (fitted) parameters with their box constraints"""
    values: Dict[str, float]
    lower: Dict[str, float] = field(default_factory=dict)
    upper: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_bounds(cls, entries: Mapping[str, Tuple[float, float, float]]) -> "ParameterVector":
        """Build from ``{name: (initial, lower, upper)}``"""
        return cls(
            values={k: float(v[0]) for k, v in entries.items()},
            lower={k: float(v[1]) for k, v in entries.items()},
            upper={k: float(v[2]) for k, v in entries.items()},
        )

    @classmethod
    def from_base(cls, base_parameters: Mapping[str, float], bounds: Mapping[str, Tuple[float, float]]) -> "ParameterVector":
        """Seed each bounded parameter at its base value"""
        unknown = set(bounds) - set(base_parameters)
        if unknown:
            raise UnknownParameterError(unknown)
        return cls.from_bounds({k: (base_parameters[k], lo, hi) for k, (lo, hi) in bounds.items()})

    @property
    def names(self) -> List[str]:
        return list(self.values)

    def validate(self) -> "ParameterVector":
        """Raise BoundsError for malformed boxes or out-of-box initial values"""
        for name, value in self.values.items():
            if name not in self.lower or name not in self.upper:
                raise BoundsError(f"Parameter '{name}' has no bounds")
            lo, hi = self.lower[name], self.upper[name]
            if any(math.isnan(x) for x in (value, lo, hi)):
                raise BoundsError(f"Parameter '{name}' has NaN value or bounds")
            if lo > hi:
                raise BoundsError(f"Parameter '{name}': lower bound {lo} exceeds upper bound {hi}")
            if not lo <= value <= hi:
                raise BoundsError(f"Parameter '{name}': initial value {value} outside [{lo}, {hi}]")
        extra = (set(self.lower) | set(self.upper)) - set(self.values)
        if extra:
            raise BoundsError(f"Bounds given for unknown parameter(s): {', '.join(sorted(extra))}")
        return self

    def with_values(self, values: Mapping[str, float]) -> "ParameterVector":
        return ParameterVector(values={k: float(values[k]) for k in self.names}, lower=dict(self.lower), upper=dict(self.upper))


def build_theta_structure(free: ParameterVector) -> Dict:
    """
    Decide where each free parameter lives in the optimizer vector θ

    Returns a dict:
        {
          'names': [...],
          'x0': ndarray of seed values,
          'bounds': [(lower, upper), ...],
          'size': number of free parameters
        }
    """
    free.validate()
    names = free.names
    return {
        "names": names,
        "x0": np.array([free.values[n] for n in names], dtype=float),
        "bounds": [(free.lower[n], free.upper[n]) for n in names],
        "size": len(names),
    }


def merge_parameters(base_parameters: Mapping[str, float], overrides: Optional[Mapping[str, float]], strict: bool = True) -> Dict[str, float]:
    """
    Overlay ``overrides`` on a copy of ``base_parameters``

    strict: reject names absent from the base set (UnknownParameterError);
    otherwise such names are dropped.
    """
    merged = dict(base_parameters)
    if not overrides:
        return merged
    unknown = set(overrides) - set(base_parameters)
    if unknown and strict:
        raise UnknownParameterError(unknown)
    for name, value in overrides.items():
        if name in merged:
            merged[name] = float(value)
    return merged


def apply_theta(theta, structure: Dict, base_parameters: Mapping[str, float], strict: bool = True) -> Dict[str, float]:
    """θ (numpy vector) → full parameter map"""
    overrides = {name: float(theta[i]) for i, name in enumerate(structure["names"])}
    return merge_parameters(base_parameters, overrides, strict=strict)


def theta_to_vector(theta, structure: Dict, free: ParameterVector) -> ParameterVector:
    return free.with_values({name: float(theta[i]) for i, name in enumerate(structure["names"])})
