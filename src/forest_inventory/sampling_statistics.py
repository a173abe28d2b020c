"""
Sampling statistics for plot-based inventories.

Confidence intervals on per-acre means are built from between-plot variance
with the two-sided Student's t critical value:

    SE = sqrt(s² / n)
    CI = mean ± t(1 - α/2, n - 1) · SE
    sampling error % = 100 · (t · SE) / mean
"""
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING

import numpy as np
import pandas as pd
from scipy import stats

from .exceptions import AnalysisError, InsufficientDataError, validate_open_proportion
from .logging_config import get_logger
from .volume import VolumeEquation

if TYPE_CHECKING:
    from .inventory import ForestInventory

__all__ = [
    'ConfidenceInterval',
    'SamplingStatistics',
    'compute_confidence_interval',
    't_critical_value',
]

logger = get_logger(__name__)

MIN_OBSERVATIONS = 2


@dataclass
class ConfidenceInterval:
    """Confidence interval for a metric."""
    mean: float
    std_error: float
    lower: float
    upper: float
    confidence_level: float
    sample_size: int
    sampling_error_percent: float

    @property
    def margin(self) -> float:
        """Half-width of the interval."""
        return (self.upper - self.lower) / 2.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mean': self.mean,
            'std_error': self.std_error,
            'lower': self.lower,
            'upper': self.upper,
            'confidence_level': self.confidence_level,
            'sample_size': self.sample_size,
            'sampling_error_percent': self.sampling_error_percent,
        }


def t_critical_value(confidence: float, degrees_of_freedom: float) -> float:
    """Two-sided Student's t critical value.

    Args:
        confidence: Confidence level in (0, 1), e.g. 0.95
        degrees_of_freedom: Degrees of freedom (n - 1)

    Returns:
        Inverse CDF of t(df) at 1 - (1 - confidence) / 2

    Raises:
        AnalysisError: If the distribution cannot be evaluated
    """
    alpha = 1.0 - confidence
    try:
        t_value = float(stats.t.ppf(1.0 - alpha / 2.0, degrees_of_freedom, loc=0.0, scale=1.0))
    except (ValueError, ArithmeticError) as e:
        raise AnalysisError(str(e)) from e
    if not np.isfinite(t_value):
        raise AnalysisError(
            f"Student's t inverse CDF is undefined for df={degrees_of_freedom}, "
            f"confidence={confidence}"
        )
    return t_value


def compute_confidence_interval(values: Sequence[float],
                                confidence: float = 0.95) -> ConfidenceInterval:
    """Compute a confidence interval from a set of observations.

    Args:
        values: Observations (e.g. one per-acre value per plot)
        confidence: Confidence level in (0, 1)

    Returns:
        ConfidenceInterval for the mean of the values

    Raises:
        InsufficientDataError: If there are fewer than 2 observations
        InvalidParameterError: If confidence is outside (0, 1)
        AnalysisError: If the t distribution cannot be evaluated
    """
    validate_open_proportion(confidence, 'confidence')

    data = np.asarray(values, dtype=float)
    n = data.size
    if n < MIN_OBSERVATIONS:
        raise InsufficientDataError(
            f"Need at least {MIN_OBSERVATIONS} observations, got {n}"
        )

    mean = float(data.mean())
    variance = float(data.var(ddof=1))
    std_error = float(np.sqrt(variance / n))

    t_value = t_critical_value(confidence, n - 1)
    margin = t_value * std_error

    if abs(mean) > sys.float_info.epsilon:
        sampling_error_percent = (margin / mean) * 100.0
    else:
        sampling_error_percent = 0.0

    return ConfidenceInterval(
        mean=mean,
        std_error=std_error,
        lower=mean - margin,
        upper=mean + margin,
        confidence_level=confidence,
        sample_size=n,
        sampling_error_percent=sampling_error_percent,
    )


@dataclass
class SamplingStatistics:
    """Complete sampling statistics for the inventory."""
    tpa: ConfidenceInterval
    basal_area: ConfidenceInterval
    volume_cuft: ConfidenceInterval
    volume_bdft: ConfidenceInterval

    @classmethod
    def compute(cls, inventory: 'ForestInventory', confidence: float = 0.95,
                volume_equation: Optional[VolumeEquation] = None) -> "SamplingStatistics":
        """Compute sampling statistics from an inventory.

        Args:
            inventory: Inventory with at least two plots
            confidence: Confidence level in (0, 1), e.g. 0.95
            volume_equation: Volume coefficients; the default equation when omitted

        Raises:
            InsufficientDataError: If the inventory has fewer than 2 plots
        """
        n = inventory.num_plots()
        if n < MIN_OBSERVATIONS:
            raise InsufficientDataError(
                f"Need at least {MIN_OBSERVATIONS} plots for statistical analysis, got {n}"
            )
        validate_open_proportion(confidence, 'confidence')

        plots = inventory.plots
        result = cls(
            tpa=compute_confidence_interval(
                [p.trees_per_acre() for p in plots], confidence),
            basal_area=compute_confidence_interval(
                [p.basal_area_per_acre() for p in plots], confidence),
            volume_cuft=compute_confidence_interval(
                [p.volume_cuft_per_acre(volume_equation) for p in plots], confidence),
            volume_bdft=compute_confidence_interval(
                [p.volume_bdft_per_acre(volume_equation) for p in plots], confidence),
        )
        logger.debug("Sampling statistics for '%s' at %.0f%%: n=%d, BA %.1f ± %.1f",
                     inventory.name, confidence * 100.0, n,
                     result.basal_area.mean, result.basal_area.margin)
        return result

    def intervals(self) -> Dict[str, ConfidenceInterval]:
        """Intervals keyed by metric name, in display order."""
        return {
            'tpa': self.tpa,
            'basal_area': self.basal_area,
            'volume_cuft': self.volume_cuft,
            'volume_bdft': self.volume_bdft,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {name: ci.to_dict() for name, ci in self.intervals().items()}

    def to_dataframe(self) -> pd.DataFrame:
        """Intervals as a DataFrame indexed by metric name."""
        frame = pd.DataFrame.from_dict(self.to_dict(), orient='index')
        frame.index.name = 'metric'
        return frame
