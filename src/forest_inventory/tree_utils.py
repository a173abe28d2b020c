"""
Tree utility functions for forest inventory analysis.

Basal area and QMD formulas shared by trees, plots and stand summaries.
"""
import math
from typing import Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from .tree import Tree

__all__ = [
    'BASAL_AREA_FACTOR',
    'calculate_tree_basal_area',
    'calculate_basal_area_per_acre',
    'calculate_quadratic_mean_diameter',
]


# DBH in inches to basal area in square feet
# Formula: BA = pi * (DBH/2)^2 / 144 = pi * DBH^2 / 576
BASAL_AREA_FACTOR = math.pi / 576.0


def calculate_tree_basal_area(dbh: float) -> float:
    """Calculate basal area for a single tree.

    Cross-sectional stem area at 4.5 feet.
    Formula: BA = pi * (DBH/2)^2 / 144

    Args:
        dbh: Diameter at breast height in inches

    Returns:
        Basal area in square feet
    """
    return BASAL_AREA_FACTOR * dbh * dbh


def calculate_basal_area_per_acre(trees: Iterable['Tree']) -> float:
    """Sum expansion-factor-weighted basal area over a collection of trees.

    Args:
        trees: Tree objects with dbh and expansion_factor attributes

    Returns:
        Basal area in square feet per acre
    """
    return sum(calculate_tree_basal_area(t.dbh) * t.expansion_factor for t in trees)


def calculate_quadratic_mean_diameter(trees: Iterable['Tree']) -> float:
    """Calculate expansion-factor-weighted quadratic mean diameter.

    QMD = sqrt(sum(DBH² * EF) / sum(EF))

    Args:
        trees: Tree objects with dbh and expansion_factor attributes

    Returns:
        QMD in inches, or 0.0 when there are no trees
    """
    sum_dbh_squared = 0.0
    total_tpa = 0.0
    for tree in trees:
        sum_dbh_squared += tree.dbh ** 2 * tree.expansion_factor
        total_tpa += tree.expansion_factor

    if total_tpa == 0.0:
        return 0.0
    return math.sqrt(sum_dbh_squared / total_tpa)
