"""Schedule A (Itemized Deductions) Calculator.

Handles the computation of itemized deductions including:
- Medical expenses (subject to 7.5% AGI floor)
- State and Local Taxes (SALT) with the $10,000 cap
- Mortgage and investment interest
- Charitable contributions
- Standard vs. Itemized comparison
"""

from typing import Optional

from .models import (
    FilingStatus, ItemizedDeductions, TaxpayerInfo, DeductionResult, round_dollars,
)
from .tax_tables import (
    TaxYearTables, get_tax_tables, MEDICAL_AGI_FLOOR_RATE, SALT_CAP,
)


class ScheduleACalculator:
    """Resolve the standard vs. itemized deduction for a return."""

    def __init__(
        self,
        filing_status: FilingStatus = FilingStatus.SINGLE,
        tables: Optional[TaxYearTables] = None,
    ):
        self.filing_status = filing_status
        self.tables = tables or get_tax_tables()

    def standard_deduction(self, taxpayer: TaxpayerInfo) -> float:
        """
        Base standard deduction plus one add-on per qualifying condition.

        Age 65+ and blindness each add one add-on for the filer and, when a
        spouse record is present, for the spouse.
        """
        deduction = self.tables.standard_deduction[self.filing_status]
        additional = self.tables.additional_deduction(self.filing_status)

        conditions = [taxpayer.age >= 65, taxpayer.is_blind]
        if taxpayer.spouse is not None:
            conditions += [taxpayer.spouse.age >= 65, taxpayer.spouse.is_blind]

        return deduction + additional * sum(1 for c in conditions if c)

    @staticmethod
    def salt_deduction(data: Optional[ItemizedDeductions]) -> float:
        """State/local/property taxes capped at the SALT ceiling."""
        if data is None:
            return 0.0
        return min(data.salt_uncapped, SALT_CAP)

    def itemized_deduction(self, data: Optional[ItemizedDeductions], agi: float) -> int:
        """
        Total itemized deductions.

        Args:
            data: Schedule A inputs, or None when nothing was itemized.
            agi: Adjusted Gross Income (needed for the medical floor).

        Returns:
            Rounded itemized total; 0 when there is no Schedule A data.
        """
        if data is None:
            return 0

        medical_floor = agi * MEDICAL_AGI_FLOOR_RATE
        medical = max(0, data.medical_expenses - medical_floor)

        total = (
            medical +
            self.salt_deduction(data) +
            data.mortgage_interest +
            data.investment_interest +
            data.charitable_cash + data.charitable_noncash +
            data.casualty_losses +
            data.other_deductions
        )
        return round_dollars(total)

    def calculate(
        self,
        taxpayer: TaxpayerInfo,
        data: Optional[ItemizedDeductions],
        agi: float,
    ) -> DeductionResult:
        """Pick the larger deduction; a tie keeps the standard deduction."""
        standard = self.standard_deduction(taxpayer)
        itemized = self.itemized_deduction(data, agi)
        is_itemized = itemized > standard

        return DeductionResult(
            standard_deduction=standard,
            itemized_deduction=itemized,
            salt_deduction=self.salt_deduction(data),
            amount=itemized if is_itemized else standard,
            is_itemized=is_itemized,
        )
