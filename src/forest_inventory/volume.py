"""
Volume equations for inventory trees.

Implements simplified combined-variable equations:
- Cubic feet:  V = b1 * DBH² * H
- Board feet (Scribner):  V = b1' * DBH² * H - b2 * DBH, zero below the
  minimum merchantable DBH

Both are reduced by the tree's defect fraction. Coefficient sets are
pluggable through ``VolumeEquation`` and can be loaded by name from
``cfg/volume_equations.yaml``.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .config_loader import VOLUME_EQUATIONS_FILE, get_config_loader
from .exceptions import ConfigurationError

__all__ = [
    'VolumeEquation',
    'DEFAULT_VOLUME_EQUATION',
]


@dataclass(frozen=True)
class VolumeEquation:
    """Configurable volume equation coefficients.

    Attributes:
        cuft_b1: Coefficient for cubic foot volume: V = cuft_b1 * DBH² * H
        bdft_b1: Coefficient for board foot volume: V = bdft_b1 * DBH² * H - bdft_b2 * DBH
        bdft_b2: Second coefficient for board foot volume
        bdft_min_dbh: Minimum DBH (inches) for board foot merchantability
    """
    cuft_b1: float = 0.002454
    bdft_b1: float = 0.01159
    bdft_b2: float = 4.0
    bdft_min_dbh: float = 6.0

    def cubic_volume(self, dbh: float, height: Optional[float],
                     defect: Optional[float] = None) -> Optional[float]:
        """Net cubic foot volume of one tree.

        Args:
            dbh: Diameter at breast height (inches)
            height: Total height (feet); None when not measured
            defect: Defect fraction (0-1); None means no defect

        Returns:
            Volume in cubic feet, or None when height is missing
        """
        if height is None:
            return None
        if dbh <= 0.0 or height <= 0.0:
            return 0.0
        gross_volume = self.cuft_b1 * dbh ** 2 * height
        return gross_volume * (1.0 - (defect or 0.0))

    def board_foot_volume(self, dbh: float, height: Optional[float],
                          defect: Optional[float] = None) -> Optional[float]:
        """Net Scribner board foot volume of one tree.

        Args:
            dbh: Diameter at breast height (inches)
            height: Total height (feet); None when not measured
            defect: Defect fraction (0-1); None means no defect

        Returns:
            Volume in board feet, or None when height is missing
        """
        if height is None:
            return None
        if dbh < self.bdft_min_dbh or height <= 0.0:
            return 0.0
        gross_volume = self.bdft_b1 * dbh ** 2 * height - self.bdft_b2 * dbh
        return max(gross_volume, 0.0) * (1.0 - (defect or 0.0))

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for easy access."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VolumeEquation":
        """Build an equation from a mapping, ignoring unrelated keys."""
        defaults = cls()
        return cls(
            cuft_b1=float(data.get('cuft_b1', defaults.cuft_b1)),
            bdft_b1=float(data.get('bdft_b1', defaults.bdft_b1)),
            bdft_b2=float(data.get('bdft_b2', defaults.bdft_b2)),
            bdft_min_dbh=float(data.get('bdft_min_dbh', defaults.bdft_min_dbh)),
        )

    @classmethod
    def from_config(cls, name: str = 'default',
                    filename: str = VOLUME_EQUATIONS_FILE) -> "VolumeEquation":
        """Load a named coefficient set from a configuration file.

        Args:
            name: Key under ``equations`` in the file
            filename: Configuration file (relative to cfg/ or absolute)

        Raises:
            ConfigurationError: If the named set does not exist
        """
        equations = get_config_loader().get_section(filename, 'equations')
        if name not in equations:
            raise ConfigurationError(
                f"Volume equation '{name}' not found. "
                f"Available equations: {sorted(equations.keys())}"
            )
        return cls.from_dict(equations[name])


DEFAULT_VOLUME_EQUATION = VolumeEquation()
