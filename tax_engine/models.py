"""Data models for tax return information."""

import math
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import List, Optional, Tuple
from enum import Enum


def round_dollars(amount: float) -> int:
    """Round to the nearest whole dollar, halves rounding up."""
    return int(math.floor(amount + 0.5))


class FilingStatus(Enum):
    """Tax filing status options."""
    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_SURVIVING_SPOUSE = "qualifying_surviving_spouse"

    @property
    def is_married(self) -> bool:
        """Married statuses for the additional standard deduction."""
        return self in (
            FilingStatus.MARRIED_FILING_JOINTLY,
            FilingStatus.MARRIED_FILING_SEPARATELY,
            FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
        )

    @property
    def is_joint(self) -> bool:
        """Statuses that use the joint-return thresholds."""
        return self in (
            FilingStatus.MARRIED_FILING_JOINTLY,
            FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
        )


@dataclass
class SpouseInfo:
    """Spouse details that affect the standard deduction."""
    name: str = ""
    age: int = 30
    is_blind: bool = False


@dataclass
class TaxpayerInfo:
    """Basic taxpayer information."""
    name: str = "Taxpayer"
    filing_status: FilingStatus = FilingStatus.SINGLE
    age: int = 30
    is_blind: bool = False
    spouse: Optional[SpouseInfo] = None


@dataclass
class Dependent:
    """A dependent claimed on the return."""
    name: str = ""
    relationship: str = ""
    birth_date: Optional[date] = None
    is_qualifying_child_for_ctc: bool = False
    months_lived_with_taxpayer: int = 12


@dataclass
class W2Data:
    """W-2 form data for wage and salary information."""
    employer_name: str = ""
    employer_ein: Optional[str] = None
    wages: float = 0.0  # Box 1: Wages, tips, other compensation
    federal_withheld: float = 0.0  # Box 2: Federal income tax withheld
    social_security_wages: float = 0.0  # Box 3
    social_security_tax: float = 0.0  # Box 4
    medicare_wages: float = 0.0  # Box 5
    medicare_tax: float = 0.0  # Box 6

    @property
    def wages_for_medicare(self) -> float:
        """Box 5 when reported, otherwise Box 1."""
        return self.medicare_wages if self.medicare_wages > 0 else self.wages


@dataclass
class Form1099Int:
    """1099-INT form data for interest income."""
    payer_name: str = ""
    interest_income: float = 0.0  # Box 1


@dataclass
class Form1099Div:
    """1099-DIV form data for dividend income."""
    payer_name: str = ""
    ordinary_dividends: float = 0.0  # Box 1a
    qualified_dividends: float = 0.0  # Box 1b


@dataclass
class CapitalGainTransaction:
    """A single Form 8949 sale."""
    description: str = ""
    date_acquired: Optional[date] = None
    date_sold: Optional[date] = None
    proceeds: float = 0.0
    cost_basis: float = 0.0
    is_long_term: bool = False

    @property
    def gain_loss(self) -> float:
        return self.proceeds - self.cost_basis


@dataclass
class ScheduleCExpenses:
    """Schedule C Part II expense lines."""
    advertising: float = 0.0  # Line 8
    car_and_truck: float = 0.0  # Line 9
    commissions: float = 0.0  # Line 10
    contract_labor: float = 0.0  # Line 11
    depletion: float = 0.0  # Line 12
    depreciation: float = 0.0  # Line 13
    employee_benefit_programs: float = 0.0  # Line 14
    insurance: float = 0.0  # Line 15
    interest: float = 0.0  # Line 16
    legal: float = 0.0  # Line 17
    office_expense: float = 0.0  # Line 18
    pension: float = 0.0  # Line 19
    rent_lease: float = 0.0  # Line 20
    repairs: float = 0.0  # Line 21
    supplies: float = 0.0  # Line 22
    taxes: float = 0.0  # Line 23
    travel: float = 0.0  # Line 24a
    meals: float = 0.0  # Line 24b (before the 50% limit)
    utilities: float = 0.0  # Line 25
    wages: float = 0.0  # Line 26
    other: float = 0.0  # Line 27a

    @property
    def total(self) -> float:
        """Sum of every expense line, meals at face value."""
        return sum(asdict(self).values())


@dataclass
class SelfEmploymentIncome:
    """Schedule C business."""
    business_name: str = ""
    business_code: str = ""
    gross_receipts: float = 0.0  # Line 1
    returns: float = 0.0  # Line 2
    cost_of_goods_sold: float = 0.0  # Line 4
    expenses: ScheduleCExpenses = field(default_factory=ScheduleCExpenses)


@dataclass
class RentalExpenses:
    """Schedule E expense lines for one property."""
    advertising: float = 0.0  # Line 5
    auto: float = 0.0  # Line 6
    cleaning: float = 0.0  # Line 7
    commissions: float = 0.0  # Line 8
    insurance: float = 0.0  # Line 9
    legal: float = 0.0  # Line 10
    management: float = 0.0  # Line 11
    mortgage_interest: float = 0.0  # Line 12
    repairs: float = 0.0  # Line 14
    supplies: float = 0.0  # Line 15
    taxes: float = 0.0  # Line 16
    utilities: float = 0.0  # Line 17
    depreciation: float = 0.0  # Line 18
    other: float = 0.0  # Line 19

    @property
    def total(self) -> float:
        return sum(asdict(self).values())


@dataclass
class RentalProperty:
    """Rental property for Schedule E."""
    address: str = ""
    property_type: str = "single-family"
    rental_income: float = 0.0  # Line 3: Rents received
    expenses: RentalExpenses = field(default_factory=RentalExpenses)


@dataclass
class AboveTheLineDeductions:
    """Schedule 1 Part II adjustments entered directly."""
    educator_expenses: float = 0.0
    student_loan_interest: float = 0.0


@dataclass
class HSAData:
    """Form 8889 contribution data."""
    contributions: float = 0.0
    is_family: bool = False


@dataclass
class TraditionalIRAContribution:
    amount: float = 0.0
    is_deductible: bool = False


@dataclass
class RothIRAContribution:
    amount: float = 0.0


@dataclass
class Form8606Data:
    """Inputs for Form 8606 (nondeductible IRAs and Roth conversions)."""
    nondeductible_contributions: float = 0.0  # Line 1
    prior_year_basis: float = 0.0  # Line 2
    conversions_to_roth: float = 0.0  # Line 8 / 16
    distributions: float = 0.0  # Line 7 (excluding conversions)
    year_end_balance: float = 0.0  # Line 6: value of all traditional IRAs on Dec 31


@dataclass
class ItemizedDeductions:
    """Schedule A inputs."""
    medical_expenses: float = 0.0
    state_taxes_paid: float = 0.0
    local_taxes_paid: float = 0.0
    real_estate_taxes: float = 0.0
    personal_property_taxes: float = 0.0
    mortgage_interest: float = 0.0
    investment_interest: float = 0.0
    charitable_cash: float = 0.0
    charitable_noncash: float = 0.0
    casualty_losses: float = 0.0
    other_deductions: float = 0.0

    @property
    def salt_uncapped(self) -> float:
        return (
            self.state_taxes_paid +
            self.local_taxes_paid +
            self.real_estate_taxes +
            self.personal_property_taxes
        )


@dataclass
class EducationExpense:
    """Form 8863 student line."""
    student_name: str = ""
    institution: str = ""
    tuition_and_fees: float = 0.0
    is_first_four_years: bool = False


@dataclass
class TaxReturn:
    """Complete tax return input for a single tax year."""
    taxpayer: TaxpayerInfo = field(default_factory=TaxpayerInfo)
    tax_year: int = 2025
    dependents: List[Dependent] = field(default_factory=list)

    # Income
    w2_forms: List[W2Data] = field(default_factory=list)
    form_1099_int: List[Form1099Int] = field(default_factory=list)
    form_1099_div: List[Form1099Div] = field(default_factory=list)
    capital_gains: List[CapitalGainTransaction] = field(default_factory=list)
    self_employment: Optional[SelfEmploymentIncome] = None
    rental_properties: List[RentalProperty] = field(default_factory=list)

    # Adjustments
    above_the_line: AboveTheLineDeductions = field(default_factory=AboveTheLineDeductions)
    hsa: Optional[HSAData] = None
    traditional_ira: Optional[TraditionalIRAContribution] = None
    roth_ira: Optional[RothIRAContribution] = None

    # Deductions and credits
    itemized_deductions: Optional[ItemizedDeductions] = None
    education_expenses: List[EducationExpense] = field(default_factory=list)
    form_8606: Optional[Form8606Data] = None

    # Payments
    estimated_tax_payments: float = 0.0

    @property
    def filing_status(self) -> FilingStatus:
        return self.taxpayer.filing_status

    @property
    def total_wages(self) -> float:
        return sum(w2.wages for w2 in self.w2_forms)

    @property
    def total_medicare_wages(self) -> float:
        return sum(w2.wages_for_medicare for w2 in self.w2_forms)

    @property
    def total_federal_withheld(self) -> float:
        """Calculate total federal tax withheld across W-2s."""
        return sum(w2.federal_withheld for w2 in self.w2_forms)

    @property
    def total_interest(self) -> float:
        return sum(f.interest_income for f in self.form_1099_int)

    @property
    def total_ordinary_dividends(self) -> float:
        return sum(f.ordinary_dividends for f in self.form_1099_div)


@dataclass(frozen=True)
class CapitalGainsResult:
    """Schedule D netting result."""
    short_term: float = 0.0
    long_term: float = 0.0
    disallowed_loss: float = 0.0  # Loss beyond the annual ceiling, not carried forward

    @property
    def net(self) -> float:
        return self.short_term + self.long_term


@dataclass(frozen=True)
class DeductionResult:
    """Standard vs. itemized decision."""
    standard_deduction: float
    itemized_deduction: float
    salt_deduction: float
    amount: float
    is_itemized: bool


@dataclass(frozen=True)
class CreditsResult:
    child_tax_credit: float = 0.0
    education_credits: float = 0.0
    savers_credit: float = 0.0

    @property
    def total(self) -> float:
        return self.child_tax_credit + self.education_credits + self.savers_credit


@dataclass(frozen=True)
class Form8606Result:
    """Form 8606 line values."""
    nondeductible_contributions: float  # Line 1
    prior_year_basis: float  # Line 2
    total_basis: float  # Line 3
    conversions: float
    distributions: float
    conversions_and_distributions: float
    year_end_balance: float
    total_pool: float
    basis_fraction: float
    nontaxable_conversion: int
    taxable_conversion: float
    remaining_basis: int


@dataclass(frozen=True)
class TaxCalculation:
    """Result of the federal calculation for one return.

    Immutable: a new instance is produced on every recomputation.
    """
    tax_year: int
    filing_status: FilingStatus
    total_income: int
    adjustments: int
    agi: int
    deduction: float
    is_itemized: bool
    qbi_deduction: int
    taxable_income: float
    regular_tax: int
    amt: int
    tax_before_credits: int
    child_tax_credit: float
    education_credits: float
    savers_credit: float
    total_credits: float
    tax_after_credits: float
    self_employment_tax: int
    additional_medicare_tax: int
    total_tax: float
    federal_withheld: float
    estimated_payments: float
    refund_or_owed: float

    # Review detail
    short_term_capital_gain: float = 0.0
    long_term_capital_gain: float = 0.0
    disallowed_capital_loss: float = 0.0
    taxable_ira_conversion: float = 0.0
    remaining_ira_basis: int = 0
    marginal_rate: float = 0.0
    bracket_breakdown: Tuple[dict, ...] = ()  # One dict per bracket reached

    @property
    def total_payments(self) -> float:
        return self.federal_withheld + self.estimated_payments

    @property
    def is_refund(self) -> bool:
        return self.refund_or_owed >= 0

    @property
    def effective_rate(self) -> float:
        if self.total_income <= 0:
            return 0.0
        return self.total_tax / self.total_income

    def to_dict(self) -> dict:
        """Plain dict for JSON and form-filling collaborators."""
        data = asdict(self)
        data["filing_status"] = self.filing_status.value
        return data
