"""Schedule C (Profit or Loss From Business)."""

from typing import Optional

from .models import SelfEmploymentIncome
from .tax_tables import MEALS_DEDUCTION_RATE


class ScheduleCCalculator:
    """Calculate Schedule C net profit for a sole proprietorship."""

    @staticmethod
    def gross_income(business: SelfEmploymentIncome) -> float:
        """Line 7: gross receipts less returns and cost of goods sold."""
        return business.gross_receipts - business.returns - business.cost_of_goods_sold

    @staticmethod
    def total_expenses(business: SelfEmploymentIncome) -> float:
        """Line 28: total expenses with meals limited to 50%."""
        expenses = business.expenses
        return expenses.total - expenses.meals * (1 - MEALS_DEDUCTION_RATE)

    def net_profit(self, business: Optional[SelfEmploymentIncome]) -> float:
        """
        Line 31: net profit or (loss).

        Args:
            business: The Schedule C record, or None when there is no business.

        Returns:
            Net profit; negative for a loss, 0.0 when there is no business.
        """
        if business is None:
            return 0.0
        return self.gross_income(business) - self.total_expenses(business)
