"""
Stand metrics calculator for forest inventory analysis.

Rolls live trees up into stand-level per-acre totals and a species
composition table. All values are means over plots, so a species absent from
a plot still counts that plot in its denominator.

Metrics include:
- Trees per acre (TPA)
- Basal Area (BA)
- Cubic and board foot volume per acre
- Quadratic Mean Diameter (QMD), averaged over plots
- Mean height of measured live trees
- Species composition sorted by basal area
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

import pandas as pd

from .logging_config import get_logger
from .species import Species
from .volume import VolumeEquation

if TYPE_CHECKING:
    from .inventory import ForestInventory

__all__ = [
    'SpeciesComposition',
    'StandMetrics',
    'compute_stand_metrics',
]

logger = get_logger(__name__)


@dataclass
class SpeciesComposition:
    """Per-species composition data."""
    species: Species
    tpa: float
    basal_area: float
    percent_tpa: float
    percent_basal_area: float
    mean_dbh: float
    mean_height: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'species': self.species.to_dict(),
            'tpa': self.tpa,
            'basal_area': self.basal_area,
            'percent_tpa': self.percent_tpa,
            'percent_basal_area': self.percent_basal_area,
            'mean_dbh': self.mean_dbh,
            'mean_height': self.mean_height,
        }


@dataclass
class StandMetrics:
    """Overall stand-level metrics.

    Attributes:
        total_tpa: Mean live trees per acre
        total_basal_area: Mean live basal area (sq ft/acre)
        total_volume_cuft: Mean cubic foot volume per acre
        total_volume_bdft: Mean board foot volume per acre
        quadratic_mean_diameter: Mean of per-plot QMD (inches)
        mean_height: Mean height of live trees with a height, or None
        num_species: Number of species among live trees
        species_composition: Composition rows, largest basal area first
    """
    total_tpa: float = 0.0
    total_basal_area: float = 0.0
    total_volume_cuft: float = 0.0
    total_volume_bdft: float = 0.0
    quadratic_mean_diameter: float = 0.0
    mean_height: Optional[float] = None
    num_species: int = 0
    species_composition: List[SpeciesComposition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a nested plain dictionary."""
        return {
            'total_tpa': self.total_tpa,
            'total_basal_area': self.total_basal_area,
            'total_volume_cuft': self.total_volume_cuft,
            'total_volume_bdft': self.total_volume_bdft,
            'quadratic_mean_diameter': self.quadratic_mean_diameter,
            'mean_height': self.mean_height,
            'num_species': self.num_species,
            'species_composition': [s.to_dict() for s in self.species_composition],
        }

    def species_dataframe(self) -> pd.DataFrame:
        """Species composition as a DataFrame, one row per species."""
        columns = ['code', 'common_name', 'tpa', 'percent_tpa', 'basal_area',
                   'percent_basal_area', 'mean_dbh', 'mean_height']
        records = [
            {
                'code': s.species.code,
                'common_name': s.species.common_name,
                'tpa': s.tpa,
                'percent_tpa': s.percent_tpa,
                'basal_area': s.basal_area,
                'percent_basal_area': s.percent_basal_area,
                'mean_dbh': s.mean_dbh,
                'mean_height': s.mean_height,
            }
            for s in self.species_composition
        ]
        return pd.DataFrame(records, columns=columns)


class _SpeciesAccumulator:
    """Running sums for one species across all live trees."""

    __slots__ = ('species', 'tpa_sum', 'ba_sum', 'dbh_weighted_sum',
                 'tree_count', 'height_sum', 'height_count')

    def __init__(self, species: Species):
        self.species = species
        self.tpa_sum = 0.0
        self.ba_sum = 0.0
        self.dbh_weighted_sum = 0.0
        self.tree_count = 0
        self.height_sum = 0.0
        self.height_count = 0


def compute_stand_metrics(
    inventory: 'ForestInventory',
    volume_equation: Optional[VolumeEquation] = None
) -> StandMetrics:
    """Compute stand-level metrics from a forest inventory.

    Args:
        inventory: Inventory to summarize
        volume_equation: Volume coefficients; the default equation when omitted

    Returns:
        StandMetrics; all zeros and an empty composition for an inventory
        without plots
    """
    num_plots = inventory.num_plots()
    if num_plots == 0:
        logger.debug("Inventory '%s' has no plots; returning empty stand metrics",
                     inventory.name)
        return StandMetrics()

    total_tpa = inventory.mean_tpa()
    total_ba = inventory.mean_basal_area()
    total_vol_cuft = inventory.mean_volume_cuft(volume_equation)
    total_vol_bdft = inventory.mean_volume_bdft(volume_equation)

    qmd = sum(p.quadratic_mean_diameter() for p in inventory.plots) / num_plots

    height_sum = 0.0
    height_count = 0
    species_data: Dict[str, _SpeciesAccumulator] = {}

    for plot in inventory.plots:
        for tree in plot.live_trees():
            if tree.height is not None:
                height_sum += tree.height
                height_count += 1

            acc = species_data.get(tree.species.code)
            if acc is None:
                acc = species_data[tree.species.code] = _SpeciesAccumulator(tree.species)
            acc.tpa_sum += tree.expansion_factor
            acc.ba_sum += tree.basal_area_per_acre()
            acc.dbh_weighted_sum += tree.dbh * tree.expansion_factor
            acc.tree_count += 1
            if tree.height is not None:
                acc.height_sum += tree.height
                acc.height_count += 1

    mean_height = height_sum / height_count if height_count > 0 else None

    composition = []
    for acc in species_data.values():
        tpa = acc.tpa_sum / num_plots
        ba = acc.ba_sum / num_plots
        composition.append(SpeciesComposition(
            species=acc.species,
            tpa=tpa,
            basal_area=ba,
            percent_tpa=(tpa / total_tpa) * 100.0 if total_tpa > 0 else 0.0,
            percent_basal_area=(ba / total_ba) * 100.0 if total_ba > 0 else 0.0,
            mean_dbh=acc.dbh_weighted_sum / acc.tpa_sum if acc.tpa_sum > 0 else 0.0,
            mean_height=acc.height_sum / acc.height_count if acc.height_count > 0 else None,
        ))

    # Stable: ties keep the order species were first encountered
    composition.sort(key=lambda s: s.basal_area, reverse=True)

    logger.debug("Stand metrics for '%s': %d plots, %d live species",
                 inventory.name, num_plots, len(composition))

    return StandMetrics(
        total_tpa=total_tpa,
        total_basal_area=total_ba,
        total_volume_cuft=total_vol_cuft,
        total_volume_bdft=total_vol_bdft,
        quadratic_mean_diameter=qmd,
        mean_height=mean_height,
        num_species=len(composition),
        species_composition=composition,
    )
