"""
Unified analysis API that groups all analysis operations on an inventory.

Usage:
    >>> from forest_inventory import Analyzer, LogisticGrowth
    >>> analyzer = Analyzer(inventory)
    >>> metrics = analyzer.stand_metrics()
    >>> stats = analyzer.sampling_statistics(0.95)
    >>> projections = analyzer.project_growth(LogisticGrowth(0.03, 300.0, 0.005), 20)
"""
from typing import List, Optional

from .diameter_distribution import DiameterDistribution
from .growth import GrowthModel, GrowthProjection, project_growth
from .inventory import ForestInventory
from .sampling_statistics import SamplingStatistics
from .stand_metrics import StandMetrics, compute_stand_metrics
from .volume import VolumeEquation

__all__ = ['Analyzer']


class Analyzer:
    """Read-only view binding one inventory to the analysis operations.

    Attributes:
        inventory: The inventory being analyzed (never modified)
        volume_equation: Volume coefficients used for volume totals
    """

    __slots__ = ('_inventory', '_volume_equation')

    def __init__(self, inventory: ForestInventory,
                 volume_equation: Optional[VolumeEquation] = None):
        self._inventory = inventory
        self._volume_equation = volume_equation

    @property
    def inventory(self) -> ForestInventory:
        return self._inventory

    @property
    def volume_equation(self) -> Optional[VolumeEquation]:
        return self._volume_equation

    def stand_metrics(self) -> StandMetrics:
        """Compute stand-level metrics (TPA, BA, volume, QMD, species composition)."""
        return compute_stand_metrics(self._inventory, self._volume_equation)

    def sampling_statistics(self, confidence: float = 0.95) -> SamplingStatistics:
        """Compute sampling statistics at the given confidence level (e.g. 0.95)."""
        return SamplingStatistics.compute(self._inventory, confidence, self._volume_equation)

    def diameter_distribution(self, class_width: float = 2.0) -> DiameterDistribution:
        """Build a diameter distribution with the given class width in inches."""
        return DiameterDistribution.from_inventory(self._inventory, class_width)

    def project_growth(self, model: GrowthModel, years: int) -> List[GrowthProjection]:
        """Project stand growth over the given number of years using the specified model."""
        return project_growth(self._inventory, model, years, self._volume_equation)

    def __repr__(self) -> str:
        return f"Analyzer(inventory='{self._inventory.name}')"
