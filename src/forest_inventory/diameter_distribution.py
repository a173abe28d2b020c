"""
Diameter distribution of live trees in fixed-width DBH classes.

Classes are half-open [lower, upper) and start at the multiple of the class
width at or below the smallest live DBH. Empty classes are left out, so the
class list may have gaps.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING

import pandas as pd

from .exceptions import validate_positive
from .logging_config import get_logger

if TYPE_CHECKING:
    from .inventory import ForestInventory

__all__ = ['DiameterClass', 'DiameterDistribution']

logger = get_logger(__name__)


@dataclass
class DiameterClass:
    """A single diameter class in the distribution.

    Attributes:
        lower: Lower bound of the class (inclusive)
        upper: Upper bound of the class (exclusive)
        midpoint: Midpoint of the class
        tpa: Trees per acre in this class
        basal_area: Basal area per acre in this class
        tree_count: Number of measured trees in this class
    """
    lower: float
    upper: float
    midpoint: float
    tpa: float
    basal_area: float
    tree_count: int

    def contains(self, dbh: float) -> bool:
        return self.lower <= dbh < self.upper

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lower': self.lower,
            'upper': self.upper,
            'midpoint': self.midpoint,
            'tpa': self.tpa,
            'basal_area': self.basal_area,
            'tree_count': self.tree_count,
        }


@dataclass
class DiameterDistribution:
    """Diameter distribution for the stand.

    Attributes:
        class_width: Width of each diameter class in inches
        classes: Non-empty classes, ascending by lower bound
    """
    class_width: float
    classes: List[DiameterClass] = field(default_factory=list)

    @classmethod
    def from_inventory(cls, inventory: 'ForestInventory',
                       class_width: float = 2.0) -> "DiameterDistribution":
        """Build a diameter distribution from the inventory.

        Args:
            inventory: The forest inventory data
            class_width: Width of each diameter class in inches (commonly 2)

        Returns:
            Distribution with per-acre TPA and basal area by class

        Raises:
            InvalidParameterError: If class_width is not positive
        """
        validate_positive(class_width, 'class_width')

        num_plots = inventory.num_plots()
        if num_plots == 0:
            return cls(class_width=class_width)

        live_trees = [t for p in inventory.plots for t in p.live_trees()]
        if not live_trees:
            return cls(class_width=class_width)

        min_dbh = min(t.dbh for t in live_trees)
        max_dbh = max(t.dbh for t in live_trees)

        start = math.floor(min_dbh / class_width) * class_width
        end = (math.floor(max_dbh / class_width) + 1.0) * class_width

        classes = []
        lower = start
        while lower < end:
            upper = lower + class_width

            tpa_sum = 0.0
            ba_sum = 0.0
            count = 0
            for plot in inventory.plots:
                for tree in plot.live_trees():
                    if lower <= tree.dbh < upper:
                        tpa_sum += tree.expansion_factor
                        ba_sum += tree.basal_area_per_acre()
                        count += 1

            if count > 0:
                classes.append(DiameterClass(
                    lower=lower,
                    upper=upper,
                    midpoint=lower + class_width / 2.0,
                    tpa=tpa_sum / num_plots,
                    basal_area=ba_sum / num_plots,
                    tree_count=count,
                ))

            lower = upper

        logger.debug("Diameter distribution for '%s': %d classes of %.1f in.",
                     inventory.name, len(classes), class_width)
        return cls(class_width=class_width, classes=classes)

    def total_tpa(self) -> float:
        """Sum of per-acre TPA across classes."""
        return sum(c.tpa for c in self.classes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'class_width': self.class_width,
            'classes': [c.to_dict() for c in self.classes],
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Classes as a DataFrame, one row per class."""
        columns = ['lower', 'upper', 'midpoint', 'tpa', 'basal_area', 'tree_count']
        return pd.DataFrame([c.to_dict() for c in self.classes], columns=columns)
