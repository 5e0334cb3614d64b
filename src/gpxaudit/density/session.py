from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .kde import silverman_bandwidth
from .kernel import check_bandwidth
from .pipeline import SeriesDensity, density_for_series
from .types import BandwidthRange, DensityConfig, DensityCurve, KDEPoint

logger = logging.getLogger(__name__)


class KDESession:
    """
    Caller-owned state for interactive re-estimation of one series.

    Holds the dataset, the current bandwidth and the last result. Changing the
    bandwidth recomputes the full estimate; nothing is cached outside the
    instance, so independent sessions never interfere.
    """

    def __init__(
        self,
        values,
        bandwidth: Optional[float] = None,
        *,
        config: Optional[DensityConfig] = None,
    ):
        self.config = config or DensityConfig()
        self._result: SeriesDensity = density_for_series(values, bandwidth, self.config)

    @property
    def result(self) -> SeriesDensity:
        return self._result

    @property
    def values(self) -> np.ndarray:
        return self._result.values

    @property
    def bandwidth(self) -> float:
        return self._result.bandwidth_log

    @property
    def curve(self) -> DensityCurve:
        return self._result.curve

    @property
    def peaks(self) -> List[KDEPoint]:
        return list(self._result.peaks)

    @property
    def bounds(self) -> Optional[BandwidthRange]:
        return self._result.bounds

    def default_bandwidth(self) -> float:
        return silverman_bandwidth(
            self.values,
            fallback=self.config.fallback_bandwidth,
            factor=self.config.silverman_factor,
        )

    def set_bandwidth(self, bandwidth: float) -> DensityCurve:
        """Re-estimate with a new log-space bandwidth and return the new curve."""
        h = check_bandwidth(bandwidth)
        logger.debug("KDESession: bandwidth %.6g -> %.6g", self.bandwidth, h)
        self._result = density_for_series(self.values, h, self.config)
        return self._result.curve

    def reset_bandwidth(self) -> DensityCurve:
        """Return to the Silverman bandwidth."""
        return self.set_bandwidth(self.default_bandwidth())

    def set_values(self, values, bandwidth: Optional[float] = None) -> DensityCurve:
        """Replace the dataset; bandwidth defaults to Silverman's rule for the new data."""
        self._result = density_for_series(values, bandwidth, self.config)
        return self._result.curve
