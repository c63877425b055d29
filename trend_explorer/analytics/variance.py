"""
Noise variance initialisation for the local-level/local-trend model.

The heuristic treats most of the sample dispersion as observation noise and
lets level and slope drift slowly. Any callable matching
:class:`VariancePolicy` can replace it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol, Sequence

import numpy as np

OBSERVATION_NOISE_SCALE = 0.5
LEVEL_SHOCK_SCALE = 0.1
SLOPE_SHOCK_SCALE = 0.05


@dataclass(frozen=True)
class VarianceParameters:
    sigma2_epsilon: float  # observation noise
    sigma2_eta: float  # level shock
    sigma2_zeta: float  # slope shock

    @property
    def is_degenerate(self) -> bool:
        return self.sigma2_epsilon == 0 and self.sigma2_eta == 0 and self.sigma2_zeta == 0

    def to_dict(self) -> Dict[str, float]:
        return {
            "sigma2_epsilon": self.sigma2_epsilon,
            "sigma2_eta": self.sigma2_eta,
            "sigma2_zeta": self.sigma2_zeta,
        }


ZERO_VARIANCES = VarianceParameters(0.0, 0.0, 0.0)


class VariancePolicy(Protocol):
    def __call__(self, values: Sequence[float]) -> VarianceParameters:
        ...


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation; 0 for fewer than two values."""
    arr = np.asarray(values, dtype=float)
    if arr.size < 2:
        return 0.0
    return float(np.std(arr))


def heuristic_variances(values: Sequence[float]) -> VarianceParameters:
    sigma = population_std(values)
    return VarianceParameters(
        sigma2_epsilon=(OBSERVATION_NOISE_SCALE * sigma) ** 2,
        sigma2_eta=(LEVEL_SHOCK_SCALE * sigma) ** 2,
        sigma2_zeta=(SLOPE_SHOCK_SCALE * sigma) ** 2,
    )


__all__ = [
    "VarianceParameters",
    "VariancePolicy",
    "ZERO_VARIANCES",
    "population_std",
    "heuristic_variances",
]
