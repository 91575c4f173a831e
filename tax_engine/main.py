"""Main entry point for the tax engine."""

import argparse
import logging
from datetime import date

from .config_loader import load_config, parse_filing_status
from .federal_tax import calculate_federal_tax
from .models import (
    FilingStatus, TaxpayerInfo, TaxReturn, W2Data, Form1099Int, Form1099Div,
    CapitalGainTransaction, SelfEmploymentIncome, ScheduleCExpenses,
    RentalProperty, RentalExpenses, Dependent, ItemizedDeductions,
    AboveTheLineDeductions, HSAData, EducationExpense,
    TraditionalIRAContribution, RothIRAContribution, Form8606Data,
)
from .report_generator import generate_full_report
from .validation import validate_tax_return


def build_demo_return() -> TaxReturn:
    """Sample married-filing-jointly household touching every calculator."""
    return TaxReturn(
        taxpayer=TaxpayerInfo(
            name="Alex Sample",
            filing_status=FilingStatus.MARRIED_FILING_JOINTLY,
            age=41,
        ),
        tax_year=2025,
        dependents=[
            Dependent(name="Child One", relationship="son",
                      birth_date=date(2014, 3, 2), is_qualifying_child_for_ctc=True),
            Dependent(name="Child Two", relationship="daughter",
                      birth_date=date(2017, 8, 19), is_qualifying_child_for_ctc=True),
        ],
        w2_forms=[
            W2Data(employer_name="Tech Corp Inc.", wages=145_000, federal_withheld=19_500),
        ],
        form_1099_int=[Form1099Int(payer_name="Sample Bank", interest_income=1_250)],
        form_1099_div=[Form1099Div(payer_name="Index Fund", ordinary_dividends=2_400,
                                   qualified_dividends=2_100)],
        capital_gains=[
            CapitalGainTransaction(
                description="100 sh XYZ", date_acquired=date(2021, 5, 3),
                date_sold=date(2025, 6, 12), proceeds=18_000, cost_basis=11_000,
                is_long_term=True,
            ),
            CapitalGainTransaction(
                description="50 sh ABC", date_acquired=date(2025, 1, 10),
                date_sold=date(2025, 9, 30), proceeds=4_000, cost_basis=6_500,
            ),
        ],
        self_employment=SelfEmploymentIncome(
            business_name="Weekend Consulting",
            gross_receipts=24_000,
            expenses=ScheduleCExpenses(office_expense=1_200, supplies=600, meals=800),
        ),
        rental_properties=[
            RentalProperty(
                address="123 Main St",
                rental_income=24_000,
                expenses=RentalExpenses(
                    management=2_400, taxes=3_600, insurance=1_200, repairs=1_500,
                    mortgage_interest=7_200, depreciation=10_909,
                ),
            ),
        ],
        above_the_line=AboveTheLineDeductions(student_loan_interest=1_800),
        hsa=HSAData(contributions=4_000, is_family=True),
        itemized_deductions=ItemizedDeductions(
            state_taxes_paid=9_000, real_estate_taxes=6_500,
            mortgage_interest=14_000, charitable_cash=3_000,
        ),
        education_expenses=[
            EducationExpense(student_name="Alex Sample", tuition_and_fees=3_000),
        ],
        traditional_ira=TraditionalIRAContribution(amount=7_000, is_deductible=False),
        roth_ira=RothIRAContribution(amount=0),
        form_8606=Form8606Data(
            nondeductible_contributions=7_000, conversions_to_roth=7_000,
        ),
        estimated_tax_payments=2_000,
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Tax Engine - Calculate federal income tax for one tax year"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML tax return profile"
    )
    parser.add_argument(
        "--demo", action="store_true",
        help="Run with sample demo data"
    )
    parser.add_argument(
        "--filing-status",
        choices=[
            "single", "married_jointly", "married_separately",
            "head_of_household", "qualifying_surviving_spouse",
        ],
        default=None,
        help="Tax filing status"
    )
    parser.add_argument(
        "--tax-year",
        type=int, choices=[2024, 2025], default=None,
        help="Target tax year (2024 or 2025)"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Show debug logging"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.demo:
        tax_return = build_demo_return()
    elif args.config:
        tax_return = load_config(args.config)
        if tax_return is None:
            return 1
        print(f"\nLoaded config: {args.config}")
        print(f"  Taxpayer: {tax_return.taxpayer.name}")
        print(f"  Filing status: {tax_return.filing_status.value}")
        print(f"  Tax year: {tax_return.tax_year}")
    else:
        parser.print_help()
        return 1

    # CLI overrides take precedence over config
    if args.filing_status:
        tax_return.taxpayer.filing_status = parse_filing_status(args.filing_status)
    if args.tax_year:
        tax_return.tax_year = args.tax_year

    issues = validate_tax_return(tax_return)
    if issues:
        print("\n  Input warnings:")
        for issue in issues:
            print(f"    {issue.field}: {issue.message}")

    calc = calculate_federal_tax(tax_return)
    print(generate_full_report(calc, tax_return.taxpayer.name))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
