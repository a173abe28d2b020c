"""
Tree class representing a single measured sample tree.

Trees are immutable records. Per-tree quantities (basal area, volumes) are
recomputed on demand from the measurements.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .exceptions import InvalidDataError
from .species import Species
from .tree_utils import calculate_tree_basal_area
from .volume import DEFAULT_VOLUME_EQUATION, VolumeEquation

__all__ = ['Tree', 'TreeStatus', 'ValidationIssue']


class TreeStatus(str, Enum):
    """Status of a tree at the time of measurement."""

    LIVE = "Live"
    DEAD = "Dead"
    CUT = "Cut"
    MISSING = "Missing"

    @classmethod
    def from_string(cls, value: str) -> "TreeStatus":
        """Parse a status, accepting full names or one-letter aliases.

        Example:
            >>> TreeStatus.from_string("l")
            <TreeStatus.LIVE: 'Live'>

        Raises:
            InvalidDataError: If the text is not a known status
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if normalized in (member.value.lower(), member.value[0].lower()):
                return member
        raise InvalidDataError("tree status", f"unknown tree status '{value}'")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """A single rule violation found while validating a tree record."""
    plot_id: int
    tree_id: int
    field: str
    message: str
    row_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'plot_id': self.plot_id,
            'tree_id': self.tree_id,
            'row_index': self.row_index,
            'field': self.field,
            'message': self.message,
        }


@dataclass(frozen=True)
class Tree:
    """A single tree measurement record.

    Attributes:
        tree_id: Tree identifier within the plot
        plot_id: Plot this tree belongs to
        species: Species of the tree
        dbh: Diameter at breast height (inches)
        height: Total height (feet), if measured
        crown_ratio: Live crown ratio (0-1), if measured
        status: Live, Dead, Cut or Missing
        expansion_factor: Trees per acre represented by this sample tree
        age: Breast-height age, if cored
        defect: Defect fraction (0-1), if recorded
    """
    tree_id: int
    plot_id: int
    species: Species
    dbh: float
    height: Optional[float] = None
    crown_ratio: Optional[float] = None
    status: TreeStatus = TreeStatus.LIVE
    expansion_factor: float = 1.0
    age: Optional[int] = None
    defect: Optional[float] = None

    def is_live(self) -> bool:
        """Check if the tree is alive."""
        return self.status == TreeStatus.LIVE

    def basal_area_sqft(self) -> float:
        """Basal area of this tree in square feet."""
        return calculate_tree_basal_area(self.dbh)

    def basal_area_per_acre(self) -> float:
        """Basal area per acre represented by this tree (sq ft/acre)."""
        return self.basal_area_sqft() * self.expansion_factor

    def volume_cuft(self, equation: Optional[VolumeEquation] = None) -> Optional[float]:
        """Net cubic foot volume, or None when height was not measured.

        Args:
            equation: Volume coefficients; the default equation when omitted
        """
        equation = equation or DEFAULT_VOLUME_EQUATION
        return equation.cubic_volume(self.dbh, self.height, self.defect)

    def volume_bdft(self, equation: Optional[VolumeEquation] = None) -> Optional[float]:
        """Net Scribner board foot volume, or None when height was not measured.

        Args:
            equation: Volume coefficients; the default equation when omitted
        """
        equation = equation or DEFAULT_VOLUME_EQUATION
        return equation.board_foot_volume(self.dbh, self.height, self.defect)

    def validation_issues(self, row_index: Optional[int] = None) -> List[ValidationIssue]:
        """Collect every validation problem with this record.

        Args:
            row_index: Source row number, recorded on each issue

        Returns:
            List of issues; empty when the tree is valid
        """
        issues = []

        def add(field_name: str, message: str) -> None:
            issues.append(ValidationIssue(self.plot_id, self.tree_id, field_name,
                                          message, row_index))

        if not self.dbh > 0:
            add('dbh', f"DBH must be positive, got {self.dbh}")
        if not self.expansion_factor > 0:
            add('expansion_factor',
                f"Expansion factor must be positive, got {self.expansion_factor}")
        if self.height is not None and not self.height > 0:
            add('height', f"Height must be positive, got {self.height}")
        if self.crown_ratio is not None and not 0.0 <= self.crown_ratio <= 1.0:
            add('crown_ratio', f"Crown ratio must be between 0 and 1, got {self.crown_ratio}")
        if self.defect is not None and not 0.0 <= self.defect <= 1.0:
            add('defect', f"Defect must be between 0 and 1, got {self.defect}")
        return issues

    def validate(self) -> "Tree":
        """Validate the record, raising on the first problem.

        Returns:
            The tree itself, for chaining

        Raises:
            InvalidDataError: If any field is out of range
        """
        issues = self.validation_issues()
        if issues:
            issue = issues[0]
            raise InvalidDataError(
                f"tree {issue.tree_id} on plot {issue.plot_id}", issue.message
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            'tree_id': self.tree_id,
            'plot_id': self.plot_id,
            'species': self.species.to_dict(),
            'dbh': self.dbh,
            'height': self.height,
            'crown_ratio': self.crown_ratio,
            'status': self.status.value,
            'expansion_factor': self.expansion_factor,
            'age': self.age,
            'defect': self.defect,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tree":
        """Build a tree from the mapping produced by ``to_dict``."""
        return cls(
            tree_id=int(data['tree_id']),
            plot_id=int(data['plot_id']),
            species=Species.from_dict(data['species']),
            dbh=float(data['dbh']),
            height=_optional_float(data.get('height')),
            crown_ratio=_optional_float(data.get('crown_ratio')),
            status=TreeStatus.from_string(data.get('status', TreeStatus.LIVE)),
            expansion_factor=float(data['expansion_factor']),
            age=None if data.get('age') is None else int(data['age']),
            defect=_optional_float(data.get('defect')),
        )


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)
