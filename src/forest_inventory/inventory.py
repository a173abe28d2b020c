"""
Forest inventory: a named, ordered collection of sample plots.

Stand-level means are simple arithmetic means of per-plot per-acre values;
plots are not weighted by size.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .plot import Plot
from .species import Species
from .volume import VolumeEquation

__all__ = ['ForestInventory']


@dataclass
class ForestInventory:
    """A complete forest inventory dataset.

    Attributes:
        name: Name or identifier for this inventory
        total_acres: Total area in acres, if known
        plots: All plots in the inventory
    """
    name: str
    total_acres: Optional[float] = None
    plots: List[Plot] = field(default_factory=list)

    def species_list(self) -> List[Species]:
        """Unique species across all trees, including dead ones, sorted by code."""
        unique: Dict[str, Species] = {}
        for plot in self.plots:
            for tree in plot.trees:
                unique.setdefault(tree.species.code, tree.species)
        return [unique[code] for code in sorted(unique)]

    def num_plots(self) -> int:
        """Total number of plots."""
        return len(self.plots)

    def num_trees(self) -> int:
        """Total number of measured trees."""
        return sum(p.num_trees() for p in self.plots)

    def _mean_over_plots(self, value: Callable[[Plot], float]) -> float:
        if not self.plots:
            return 0.0
        return sum(value(p) for p in self.plots) / len(self.plots)

    def mean_tpa(self) -> float:
        """Mean trees per acre across all plots."""
        return self._mean_over_plots(Plot.trees_per_acre)

    def mean_basal_area(self) -> float:
        """Mean basal area per acre across all plots (sq ft/acre)."""
        return self._mean_over_plots(Plot.basal_area_per_acre)

    def mean_volume_cuft(self, equation: Optional[VolumeEquation] = None) -> float:
        """Mean cubic foot volume per acre across all plots."""
        return self._mean_over_plots(lambda p: p.volume_cuft_per_acre(equation))

    def mean_volume_bdft(self, equation: Optional[VolumeEquation] = None) -> float:
        """Mean board foot volume per acre across all plots."""
        return self._mean_over_plots(lambda p: p.volume_bdft_per_acre(equation))

    def summary(self, equation: Optional[VolumeEquation] = None) -> Dict[str, Any]:
        """Quick summary of the inventory.

        Returns:
            Dictionary with name, counts and the four per-acre means
        """
        return {
            'name': self.name,
            'num_plots': self.num_plots(),
            'num_trees': self.num_trees(),
            'num_species': len(self.species_list()),
            'mean_tpa': self.mean_tpa(),
            'mean_basal_area': self.mean_basal_area(),
            'mean_volume_cuft': self.mean_volume_cuft(equation),
            'mean_volume_bdft': self.mean_volume_bdft(equation),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a nested plain dictionary."""
        return {
            'name': self.name,
            'total_acres': self.total_acres,
            'plots': [p.to_dict() for p in self.plots],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForestInventory":
        """Build an inventory from the mapping produced by ``to_dict``."""
        return cls(
            name=str(data.get('name', 'Unknown')),
            total_acres=data.get('total_acres'),
            plots=[Plot.from_dict(p) for p in data.get('plots', [])],
        )
