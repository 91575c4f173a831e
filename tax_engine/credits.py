"""Nonrefundable credits: Child Tax Credit, education credits, Saver's Credit.

Each credit is computed on its own from AGI and the return; the engine
sums them.
"""

import math
from typing import List

from .models import (
    FilingStatus, TaxReturn, Dependent, EducationExpense, CreditsResult, round_dollars,
)
from .tax_tables import (
    TaxYearTables, PhaseoutRange,
    CTC_PER_CHILD, CTC_PHASEOUT_STEP, CTC_PHASEOUT_PER_STEP, CTC_PHASEOUT_THRESHOLD,
    AOTC_FULL_RATE_EXPENSES, AOTC_PARTIAL_RATE_EXPENSES, AOTC_PARTIAL_RATE, AOTC_MAX_CREDIT,
    LLC_RATE, LLC_MAX_EXPENSES, LLC_MAX_CREDIT,
    SAVERS_MAX_CONTRIBUTION, SAVERS_MAX_CONTRIBUTION_JOINT, SAVERS_MINIMUM_AGE,
)


def linear_phaseout(amount: float, agi: float, phaseout: PhaseoutRange) -> float:
    """Reduce a credit linearly from full at the start to zero at the end."""
    if agi <= phaseout.start:
        return amount
    if agi >= phaseout.end:
        return 0.0
    return amount * (phaseout.end - agi) / (phaseout.end - phaseout.start)


class CreditCalculator:
    """Calculate the credits for one filing status and tax year."""

    def __init__(self, filing_status: FilingStatus, tables: TaxYearTables):
        self.filing_status = filing_status
        self.tables = tables

    def child_tax_credit(self, dependents: List[Dependent], agi: float) -> float:
        """
        $2,000 per qualifying child, less $50 per $1,000 (or part) of AGI
        above the filing-status threshold.
        """
        num_children = sum(1 for d in dependents if d.is_qualifying_child_for_ctc)
        if num_children == 0:
            return 0.0

        credit = num_children * CTC_PER_CHILD
        threshold = CTC_PHASEOUT_THRESHOLD[self.filing_status]
        if agi > threshold:
            steps = math.ceil((agi - threshold) / CTC_PHASEOUT_STEP)
            credit -= steps * CTC_PHASEOUT_PER_STEP
        return max(0, credit)

    @staticmethod
    def aotc_base_credit(tuition: float) -> float:
        """American Opportunity Credit for one student before phase-out."""
        full = min(AOTC_FULL_RATE_EXPENSES, max(0.0, tuition))
        partial_expenses = min(
            AOTC_PARTIAL_RATE_EXPENSES, max(0.0, tuition - AOTC_FULL_RATE_EXPENSES)
        )
        return min(AOTC_MAX_CREDIT, full + partial_expenses * AOTC_PARTIAL_RATE)

    def education_credits(self, expenses: List[EducationExpense], agi: float) -> int:
        """
        American Opportunity Credit per first-four-years student plus one
        Lifetime Learning Credit for everyone else, each phased out by AGI.

        The Lifetime Learning base is the tuition summed across students,
        so its cap applies once per return.
        """
        if not expenses:
            return 0

        if self.filing_status.is_joint:
            aotc_range = self.tables.aotc_phaseout_joint
            llc_range = self.tables.llc_phaseout_joint
        else:
            aotc_range = self.tables.aotc_phaseout_single
            llc_range = self.tables.llc_phaseout_single

        total = 0.0
        for expense in expenses:
            if expense.is_first_four_years:
                base = self.aotc_base_credit(expense.tuition_and_fees)
                total += linear_phaseout(base, agi, aotc_range)

        llc_tuition = sum(e.tuition_and_fees for e in expenses if not e.is_first_four_years)
        if llc_tuition > 0:
            base = min(LLC_MAX_CREDIT, min(LLC_MAX_EXPENSES, llc_tuition) * LLC_RATE)
            total += linear_phaseout(base, agi, llc_range)

        return round_dollars(total)

    def savers_rate(self, agi: float) -> float:
        """Credit rate for the first AGI bracket whose ceiling covers AGI."""
        for max_agi, rate in self.tables.savers_brackets[self.filing_status]:
            if agi <= max_agi:
                return rate
        return 0.0

    def savers_credit(self, contributions: float, agi: float, age: int) -> int:
        """Retirement Savings Contributions Credit (Form 8880)."""
        if age < SAVERS_MINIMUM_AGE or contributions <= 0:
            return 0
        cap = (
            SAVERS_MAX_CONTRIBUTION_JOINT
            if self.filing_status.is_joint
            else SAVERS_MAX_CONTRIBUTION
        )
        return round_dollars(min(contributions, cap) * self.savers_rate(agi))

    def calculate(self, tax_return: TaxReturn, agi: float) -> CreditsResult:
        contributions = 0.0
        if tax_return.traditional_ira is not None:
            contributions += tax_return.traditional_ira.amount
        if tax_return.roth_ira is not None:
            contributions += tax_return.roth_ira.amount

        return CreditsResult(
            child_tax_credit=self.child_tax_credit(tax_return.dependents, agi),
            education_credits=self.education_credits(tax_return.education_expenses, agi),
            savers_credit=self.savers_credit(contributions, agi, tax_return.taxpayer.age),
        )
