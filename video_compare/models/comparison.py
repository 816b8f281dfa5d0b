"""
Comparison result data models.
"""

from dataclasses import dataclass, field
from typing import List, Optional


NOT_ENOUGH_DATA_MESSAGE = "Load Input A and B to compare."


@dataclass(frozen=True)
class ComparisonRow:
    """One compared field; ``equal`` is computed on the display strings."""
    label: str
    value_a: str
    value_b: str
    equal: bool


@dataclass(frozen=True)
class ResolutionLabel:
    """
    Combined resolution row.

    ``odd_dimensions`` flags an odd width or height on either side and is
    independent of whether the two resolutions are equal.
    """
    text: str
    value_a: str
    value_b: str
    equal: bool
    odd_dimensions: bool

    @property
    def display_text(self) -> str:
        if self.odd_dimensions:
            return f"{self.text} (odd dimensions detected)"
        return self.text


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing two descriptors."""
    rows: List[ComparisonRow] = field(default_factory=list)
    resolution_label: Optional[ResolutionLabel] = None
    message: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.resolution_label is not None

    @property
    def differences(self) -> List[ComparisonRow]:
        return [row for row in self.rows if not row.equal]

    @classmethod
    def not_enough_data(cls) -> 'ComparisonResult':
        return cls(message=NOT_ENOUGH_DATA_MESSAGE)
