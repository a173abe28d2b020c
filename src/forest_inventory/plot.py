"""
Sample plot holding an ordered list of measured trees.

Every per-acre quantity is computed over live trees only.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .tree import Tree
from .tree_utils import calculate_basal_area_per_acre, calculate_quadratic_mean_diameter
from .volume import VolumeEquation

__all__ = ['Plot']


@dataclass
class Plot:
    """A sample plot in the forest inventory.

    Attributes:
        plot_id: Unique plot identifier
        plot_size_acres: Plot size in acres
        slope_percent: Slope percentage
        aspect_degrees: Aspect in degrees (0-360)
        elevation_ft: Elevation in feet
        trees: Trees measured on this plot
    """
    plot_id: int
    plot_size_acres: float
    slope_percent: Optional[float] = None
    aspect_degrees: Optional[float] = None
    elevation_ft: Optional[float] = None
    trees: List[Tree] = field(default_factory=list)

    def live_trees(self) -> List[Tree]:
        """Get only live trees on this plot."""
        return [t for t in self.trees if t.is_live()]

    def num_trees(self) -> int:
        """Number of measured trees of any status."""
        return len(self.trees)

    def trees_per_acre(self) -> float:
        """Live trees per acre for this plot."""
        return sum(t.expansion_factor for t in self.live_trees())

    def basal_area_per_acre(self) -> float:
        """Live basal area per acre for this plot (sq ft/acre)."""
        return calculate_basal_area_per_acre(self.live_trees())

    def volume_cuft_per_acre(self, equation: Optional[VolumeEquation] = None) -> float:
        """Live cubic foot volume per acre. Trees without height contribute nothing."""
        total = 0.0
        for tree in self.live_trees():
            volume = tree.volume_cuft(equation)
            if volume is not None:
                total += volume * tree.expansion_factor
        return total

    def volume_bdft_per_acre(self, equation: Optional[VolumeEquation] = None) -> float:
        """Live board foot volume per acre. Trees without height contribute nothing."""
        total = 0.0
        for tree in self.live_trees():
            volume = tree.volume_bdft(equation)
            if volume is not None:
                total += volume * tree.expansion_factor
        return total

    def quadratic_mean_diameter(self) -> float:
        """Expansion-factor-weighted QMD of live trees; 0.0 with no live trees."""
        return calculate_quadratic_mean_diameter(self.live_trees())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a nested plain dictionary."""
        return {
            'plot_id': self.plot_id,
            'plot_size_acres': self.plot_size_acres,
            'slope_percent': self.slope_percent,
            'aspect_degrees': self.aspect_degrees,
            'elevation_ft': self.elevation_ft,
            'trees': [t.to_dict() for t in self.trees],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Plot":
        """Build a plot from the mapping produced by ``to_dict``."""
        return cls(
            plot_id=int(data['plot_id']),
            plot_size_acres=float(data['plot_size_acres']),
            slope_percent=data.get('slope_percent'),
            aspect_degrees=data.get('aspect_degrees'),
            elevation_ft=data.get('elevation_ft'),
            trees=[Tree.from_dict(t) for t in data.get('trees', [])],
        )
