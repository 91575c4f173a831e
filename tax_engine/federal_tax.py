"""Federal tax calculation for a single tax year.

Flow: total income -> adjustments -> AGI -> deduction (Schedule A) -> QBI
-> taxable income -> regular tax + AMT - credits -> + SE tax + Additional
Medicare Tax -> total tax -> refund or amount owed.
"""

import logging
from typing import Optional, Tuple

from .calculation_cache import CalculationCache
from .credits import CreditCalculator
from .form_8606 import Form8606Calculator
from .models import (
    FilingStatus, TaxReturn, TaxCalculation, CapitalGainsResult, DeductionResult,
    round_dollars,
)
from .schedule_a import ScheduleACalculator
from .schedule_c import ScheduleCCalculator
from .schedule_d import ScheduleDCalculator
from .schedule_e import ScheduleECalculator
from .tax_tables import (
    get_tax_tables, LATEST_TAX_YEAR,
    SE_INCOME_FACTOR, SE_MINIMUM_PROFIT, SE_SOCIAL_SECURITY_RATE, SE_MEDICARE_RATE,
    ADDITIONAL_MEDICARE_RATE, ADDITIONAL_MEDICARE_THRESHOLD,
    AMT_PHASEOUT_RATE, AMT_LOW_RATE, AMT_HIGH_RATE, QBI_RATE,
)

logger = logging.getLogger(__name__)


class FederalTaxCalculator:
    """Calculate federal income tax for one filing status and tax year."""

    def __init__(
        self,
        filing_status: FilingStatus = FilingStatus.SINGLE,
        tax_year: int = LATEST_TAX_YEAR,
    ):
        """
        Initialize the federal tax calculator.

        Args:
            filing_status: The taxpayer's filing status
            tax_year: Tax year whose tables apply
        """
        self.filing_status = filing_status
        self.tables = get_tax_tables(tax_year)
        self.tax_year = self.tables.tax_year
        self.brackets = self.tables.brackets[filing_status]

        self.schedule_a = ScheduleACalculator(filing_status, self.tables)
        self.schedule_c = ScheduleCCalculator()
        self.schedule_d = ScheduleDCalculator()
        self.schedule_e = ScheduleECalculator()
        self.credits = CreditCalculator(filing_status, self.tables)
        self.form_8606 = Form8606Calculator()

    def calculate_progressive_tax(self, taxable_income: float) -> Tuple[int, list]:
        """
        Calculate tax using progressive brackets.

        The sum is rounded once at the end, never per bracket.

        Args:
            taxable_income: Income after deductions

        Returns:
            Tuple of (total tax, breakdown by bracket)
        """
        if taxable_income <= 0:
            return 0, []

        total_tax = 0.0
        breakdown = []
        previous_limit = 0

        for upper_limit, rate in self.brackets:
            if taxable_income <= previous_limit:
                break

            bracket_income = min(taxable_income, upper_limit) - previous_limit
            if bracket_income > 0:
                bracket_tax = bracket_income * rate
                total_tax += bracket_tax
                breakdown.append({
                    'bracket': f"${previous_limit:,.0f} - ${upper_limit:,.0f}" if upper_limit != float('inf') else f"${previous_limit:,.0f}+",
                    'rate': rate,
                    'income': bracket_income,
                    'tax': bracket_tax
                })

            previous_limit = upper_limit

        return round_dollars(total_tax), breakdown

    def calculate_marginal_rate(self, taxable_income: float) -> float:
        """Marginal rate for the given taxable income."""
        for upper_limit, rate in self.brackets:
            if taxable_income <= upper_limit:
                return rate
        return self.brackets[-1][1]

    def calculate_self_employment_tax(self, net_profit: float) -> int:
        """
        Calculate self-employment tax.

        Args:
            net_profit: Schedule C net profit

        Returns:
            SE tax (Social Security up to the wage base plus uncapped Medicare)
        """
        if net_profit <= SE_MINIMUM_PROFIT:
            return 0

        net_se_earnings = net_profit * SE_INCOME_FACTOR
        ss_tax = min(net_se_earnings, self.tables.social_security_wage_base) * SE_SOCIAL_SECURITY_RATE
        medicare_tax = net_se_earnings * SE_MEDICARE_RATE

        return round_dollars(ss_tax + medicare_tax)

    def calculate_additional_medicare_tax(self, medicare_wages: float, net_profit: float) -> int:
        """
        Additional Medicare Tax (Form 8959).

        Wages above the threshold are taxed first; the threshold left over
        after wages applies to self-employment earnings.
        """
        threshold = ADDITIONAL_MEDICARE_THRESHOLD[self.filing_status]
        tax = max(0.0, medicare_wages - threshold) * ADDITIONAL_MEDICARE_RATE

        if net_profit > SE_MINIMUM_PROFIT:
            se_earnings = net_profit * SE_INCOME_FACTOR
            se_threshold = max(0.0, threshold - medicare_wages)
            tax += max(0.0, se_earnings - se_threshold) * ADDITIONAL_MEDICARE_RATE

        return round_dollars(tax)

    def alternative_minimum_taxable_income(self, agi: float, deduction: DeductionResult) -> float:
        """AMTI approximated as AGI plus the capped SALT when itemizing."""
        amti = agi
        if deduction.is_itemized:
            amti += deduction.salt_deduction
        return amti

    def amt_exemption(self, amti: float) -> float:
        """Exemption reduced 25 cents per dollar of AMTI over the threshold."""
        exemption = self.tables.amt_exemption[self.filing_status]
        threshold = self.tables.amt_phaseout_threshold[self.filing_status]
        if amti > threshold:
            exemption -= (amti - threshold) * AMT_PHASEOUT_RATE
        return max(0.0, exemption)

    def calculate_amt(self, agi: float, regular_tax: float, deduction: DeductionResult) -> int:
        """
        Alternative Minimum Tax (Form 6251), reported as the excess of the
        tentative minimum tax over regular tax and never negative.
        """
        amti = self.alternative_minimum_taxable_income(agi, deduction)
        amt_base = max(0.0, amti - self.amt_exemption(amti))

        rate_threshold = self.tables.amt_rate_threshold
        if amt_base <= rate_threshold:
            tentative = amt_base * AMT_LOW_RATE
        else:
            tentative = rate_threshold * AMT_LOW_RATE + (amt_base - rate_threshold) * AMT_HIGH_RATE

        return max(0, round_dollars(tentative - regular_tax))

    def calculate_qbi_deduction(self, qualified_business_income: float, taxable_before_qbi: float) -> int:
        """
        Qualified Business Income deduction (Form 8995).

        20% of QBI, limited to 20% of taxable income before the deduction.
        Above the threshold the deduction phases out across the phase-in
        range; the business carries no W-2 wages or property basis here.
        """
        if qualified_business_income <= 0 or taxable_before_qbi <= 0:
            return 0

        deduction = min(
            qualified_business_income * QBI_RATE,
            taxable_before_qbi * QBI_RATE,
        )

        if self.filing_status.is_joint:
            threshold = self.tables.qbi_threshold_joint
            phase_in = self.tables.qbi_phase_in_joint
        else:
            threshold = self.tables.qbi_threshold_single
            phase_in = self.tables.qbi_phase_in_single

        if taxable_before_qbi > threshold:
            reduction = min(1.0, (taxable_before_qbi - threshold) / phase_in)
            deduction *= 1 - reduction

        return round_dollars(deduction)

    def calculate_total_income(
        self,
        tax_return: TaxReturn,
        capital_gains: Optional[CapitalGainsResult] = None,
    ) -> int:
        """
        Total income from every source.

        A Schedule C loss does not reduce other income; rental losses do.
        """
        if capital_gains is None:
            capital_gains = self.schedule_d.calculate(tax_return.capital_gains)

        net_profit = self.schedule_c.net_profit(tax_return.self_employment)
        rentals = self.schedule_e.calculate_all(tax_return.rental_properties)

        total = (
            tax_return.total_wages +
            tax_return.total_interest +
            tax_return.total_ordinary_dividends +
            capital_gains.net +
            max(0.0, net_profit) +
            rentals.total_net_rental_income
        )
        return round_dollars(total)

    def calculate_adjustments(self, tax_return: TaxReturn) -> int:
        """Above-the-line deductions (Schedule 1 Part II)."""
        adjustments = 0.0

        net_profit = self.schedule_c.net_profit(tax_return.self_employment)
        if net_profit > SE_MINIMUM_PROFIT:
            adjustments += self.calculate_self_employment_tax(net_profit) * 0.5

        if tax_return.hsa is not None:
            adjustments += tax_return.hsa.contributions

        if tax_return.traditional_ira is not None and tax_return.traditional_ira.is_deductible:
            adjustments += tax_return.traditional_ira.amount

        adjustments += tax_return.above_the_line.student_loan_interest
        adjustments += tax_return.above_the_line.educator_expenses

        return round_dollars(adjustments)

    def calculate(self, tax_return: TaxReturn) -> TaxCalculation:
        """
        Calculate complete federal tax liability.

        Args:
            tax_return: Complete return input

        Returns:
            Complete tax calculation result
        """
        taxpayer = tax_return.taxpayer

        capital_gains = self.schedule_d.calculate(tax_return.capital_gains)
        total_income = self.calculate_total_income(tax_return, capital_gains)
        adjustments = self.calculate_adjustments(tax_return)
        agi = max(0, total_income - adjustments)

        deduction = self.schedule_a.calculate(taxpayer, tax_return.itemized_deductions, agi)
        taxable_before_qbi = max(0, agi - deduction.amount)

        net_profit = self.schedule_c.net_profit(tax_return.self_employment)
        qbi_deduction = self.calculate_qbi_deduction(max(0.0, net_profit), taxable_before_qbi)
        taxable_income = max(0, taxable_before_qbi - qbi_deduction)

        regular_tax, breakdown = self.calculate_progressive_tax(taxable_income)
        amt = self.calculate_amt(agi, regular_tax, deduction)
        tax_before_credits = regular_tax + amt

        credits = self.credits.calculate(tax_return, agi)
        tax_after_credits = max(0, tax_before_credits - credits.total)

        se_tax = self.calculate_self_employment_tax(net_profit)
        additional_medicare = self.calculate_additional_medicare_tax(
            tax_return.total_medicare_wages, net_profit
        )
        total_tax = tax_after_credits + se_tax + additional_medicare

        withheld = tax_return.total_federal_withheld
        estimated = tax_return.estimated_tax_payments

        basis = self.form_8606.calculate(tax_return.form_8606)

        return TaxCalculation(
            tax_year=self.tax_year,
            filing_status=self.filing_status,
            total_income=total_income,
            adjustments=adjustments,
            agi=agi,
            deduction=deduction.amount,
            is_itemized=deduction.is_itemized,
            qbi_deduction=qbi_deduction,
            taxable_income=taxable_income,
            regular_tax=regular_tax,
            amt=amt,
            tax_before_credits=tax_before_credits,
            child_tax_credit=credits.child_tax_credit,
            education_credits=credits.education_credits,
            savers_credit=credits.savers_credit,
            total_credits=credits.total,
            tax_after_credits=tax_after_credits,
            self_employment_tax=se_tax,
            additional_medicare_tax=additional_medicare,
            total_tax=total_tax,
            federal_withheld=withheld,
            estimated_payments=estimated,
            refund_or_owed=withheld + estimated - total_tax,
            short_term_capital_gain=capital_gains.short_term,
            long_term_capital_gain=capital_gains.long_term,
            disallowed_capital_loss=capital_gains.disallowed_loss,
            taxable_ira_conversion=basis.taxable_conversion if basis else 0.0,
            remaining_ira_basis=basis.remaining_basis if basis else 0,
            marginal_rate=self.calculate_marginal_rate(taxable_income),
            bracket_breakdown=tuple(breakdown),
        )


def _compute(tax_return: TaxReturn) -> TaxCalculation:
    calculator = FederalTaxCalculator(tax_return.filing_status, tax_return.tax_year)
    return calculator.calculate(tax_return)


def calculate_federal_tax(
    tax_return: TaxReturn,
    cache: Optional[CalculationCache] = None,
) -> TaxCalculation:
    """
    Calculate federal tax for a return, optionally through a cache.

    Args:
        tax_return: Complete return input
        cache: Cache owned by the caller; None always recomputes

    Returns:
        Tax calculation result
    """
    if cache is None:
        return _compute(tax_return)
    return cache.get_or_compute(tax_return, _compute)
