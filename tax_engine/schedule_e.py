"""Schedule E (Supplemental Income and Loss) - Rental Real Estate.

Net income per property is rents received less every Schedule E expense
line, depreciation included. Losses are reported as negative amounts and
flow into total income unreduced.
"""

from dataclasses import dataclass, field
from typing import List

from .models import RentalProperty


@dataclass(frozen=True)
class ScheduleEResult:
    """Schedule E result for a single property."""
    address: str
    gross_income: float
    total_expenses: float
    net_income: float


@dataclass(frozen=True)
class ScheduleESummary:
    """Schedule E results across all properties."""
    properties: List[ScheduleEResult] = field(default_factory=list)

    @property
    def total_net_rental_income(self) -> float:
        return sum(p.net_income for p in self.properties)


class ScheduleECalculator:
    """Calculate Schedule E (Rental Income and Loss)."""

    def calculate_property(self, prop: RentalProperty) -> ScheduleEResult:
        """
        Calculate Schedule E for a single rental property.

        Args:
            prop: RentalProperty with income and expense data.

        Returns:
            ScheduleEResult with computed values.
        """
        total_expenses = prop.expenses.total
        return ScheduleEResult(
            address=prop.address,
            gross_income=prop.rental_income,
            total_expenses=total_expenses,
            net_income=prop.rental_income - total_expenses,
        )

    def calculate_all(self, properties: List[RentalProperty]) -> ScheduleESummary:
        """Calculate Schedule E for all rental properties."""
        results = [self.calculate_property(p) for p in properties]
        return ScheduleESummary(properties=results)
