"""
Species identity for inventory trees.

A species is identified by its code; the common name is carried for display
only and does not take part in equality or hashing.

Usage:
    from forest_inventory.species import Species

    df = Species("Douglas Fir", "DF")
    print(df)  # "Douglas Fir (DF)"
"""
from dataclasses import dataclass, field

__all__ = ['Species']


@dataclass(frozen=True)
class Species:
    """Immutable species value keyed on its code.

    Attributes:
        common_name: Display name (e.g. "Douglas Fir")
        code: Species code (e.g. "DF", "PSME")
    """
    common_name: str = field(compare=False)
    code: str

    def __str__(self) -> str:
        return f"{self.common_name} ({self.code})"

    def to_dict(self) -> dict:
        """Convert to a plain dictionary."""
        return {'common_name': self.common_name, 'code': self.code}

    @classmethod
    def from_dict(cls, data: dict) -> "Species":
        """Build a species from a ``{common_name, code}`` mapping."""
        return cls(common_name=str(data['common_name']), code=str(data['code']))
