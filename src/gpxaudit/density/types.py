from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

import numpy as np
import pandas as pd

from gpxaudit.errors import ValidationError

DEFAULT_GRID_SIZE = 200
DEFAULT_FALLBACK_BANDWIDTH = 1.0
SILVERMAN_FACTOR = 1.06


@dataclass(frozen=True)
class DensityConfig:
    """
    Tunables for density estimation.

    grid_size is the number of evaluation points on the log-space grid.
    fallback_bandwidth replaces the Silverman estimate for fewer than two values
    and stands in for a zero spread.
    """

    grid_size: int = DEFAULT_GRID_SIZE
    fallback_bandwidth: float = DEFAULT_FALLBACK_BANDWIDTH
    silverman_factor: float = SILVERMAN_FACTOR

    def __post_init__(self) -> None:
        if isinstance(self.grid_size, bool) or not isinstance(self.grid_size, (int, np.integer)):
            raise ValidationError("grid_size must be an integer.")
        if self.grid_size < 1:
            raise ValidationError("grid_size must be >= 1.")
        if not (math.isfinite(self.fallback_bandwidth) and self.fallback_bandwidth > 0):
            raise ValidationError("fallback_bandwidth must be finite and positive.")
        if not (math.isfinite(self.silverman_factor) and self.silverman_factor > 0):
            raise ValidationError("silverman_factor must be finite and positive.")


@dataclass(frozen=True)
class KDEPoint:
    """One evaluation point: log-space position, its linear value, and the density."""

    x_log: float
    x_linear: float
    y: float


@dataclass(frozen=True)
class BandwidthRange:
    """Sensible interactive range for a log-space bandwidth."""

    h_min: float
    h_max: float
    step: float

    def contains(self, bandwidth: float) -> bool:
        return self.h_min <= bandwidth <= self.h_max


@dataclass(frozen=True)
class DensityCurve:
    """
    Density evaluated on a regular grid in natural-log space.

    Arrays share one length (the grid size, or 0 when no valid data was given):
      - x_log: grid positions, spanning exactly [min(ln data), max(ln data)].
      - x_linear: exp(x_log).
      - y: density values (>= 0).
    """

    x_log: np.ndarray
    x_linear: np.ndarray
    y: np.ndarray
    bandwidth: float

    def __post_init__(self) -> None:
        arrays = []
        for name in ("x_log", "x_linear", "y"):
            arr = np.array(getattr(self, name), dtype=float)
            if arr.ndim != 1:
                raise ValueError(f"{name} must be 1D, got shape {arr.shape}")
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
            arrays.append(arr)
        if not (len(arrays[0]) == len(arrays[1]) == len(arrays[2])):
            raise ValueError("x_log, x_linear and y must have the same length.")

    @classmethod
    def empty(cls, bandwidth: float) -> "DensityCurve":
        e = np.array([], dtype=float)
        return cls(x_log=e, x_linear=e, y=e, bandwidth=float(bandwidth))

    def __len__(self) -> int:
        return int(self.y.shape[0])

    def __getitem__(self, i: int) -> KDEPoint:
        return KDEPoint(x_log=float(self.x_log[i]), x_linear=float(self.x_linear[i]), y=float(self.y[i]))

    def __iter__(self) -> Iterator[KDEPoint]:
        for i in range(len(self)):
            yield self[i]

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def to_dataframe(self) -> pd.DataFrame:
        """Columns: x_log, x_linear, y."""
        return pd.DataFrame(
            {"x_log": self.x_log, "x_linear": self.x_linear, "y": self.y},
            columns=["x_log", "x_linear", "y"],
        )
