"""Tax Summary Report Generator.

Generates a plain-text report mimicking the structure of Form 1040 from a
TaxCalculation.
"""

from .models import TaxCalculation


def fmt(amount: float) -> str:
    """Format amount as currency."""
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def _sep(char: str = "=", length: int = 72) -> str:
    return char * length


def _line(label: str, amount, width: int = 55) -> str:
    """Format a single line item."""
    return f"  {label:<{width}} {fmt(amount) if isinstance(amount, (int, float)) else amount:>15}"


def generate_federal_report(calc: TaxCalculation) -> str:
    """Generate a report mimicking Form 1040."""
    lines = []
    lines.append("")
    lines.append(_sep("=", 72))
    lines.append(f"  FORM 1040 - U.S. Individual Income Tax Return (Tax Year {calc.tax_year})")
    lines.append(_sep("=", 72))
    lines.append(f"  Filing Status: {calc.filing_status.value.replace('_', ' ').title()}")

    # Income section
    lines.append("\n  INCOME")
    lines.append("  " + "-" * 68)
    if calc.short_term_capital_gain or calc.long_term_capital_gain:
        lines.append(_line("  Short-Term Capital Gain (Loss)", calc.short_term_capital_gain))
        lines.append(_line("  Long-Term Capital Gain (Loss)", calc.long_term_capital_gain))
    if calc.disallowed_capital_loss > 0:
        lines.append(_line("  Capital Loss Over $3,000 Limit (not used)", calc.disallowed_capital_loss))
    lines.append(_line("9.   Total Income", calc.total_income))
    lines.append(_line("10.  Adjustments to Income", calc.adjustments))
    lines.append(_line("11.  Adjusted Gross Income (AGI)", calc.agi))

    # Deductions
    method = "ITEMIZED" if calc.is_itemized else "STANDARD"
    lines.append("")
    lines.append(f"  DEDUCTIONS ({method})")
    lines.append("  " + "-" * 68)
    lines.append(_line("12.  Deduction Amount", calc.deduction))
    if calc.qbi_deduction > 0:
        lines.append(_line("13.  Qualified Business Income Deduction", calc.qbi_deduction))

    # Tax computation
    lines.append("")
    lines.append("  TAX COMPUTATION")
    lines.append("  " + "-" * 68)
    lines.append(_line("15.  Taxable Income", calc.taxable_income))
    lines.append(_line("16.  Income Tax", calc.regular_tax))
    for b in calc.bracket_breakdown:
        lines.append(_line(f"       {b['rate'] * 100:.0f}% on {b['bracket']}", b['tax']))
    if calc.taxable_income > 0:
        lines.append(f"  Marginal Tax Rate: {calc.marginal_rate * 100:.0f}%")
    if calc.amt > 0:
        lines.append(_line("17.  Alternative Minimum Tax", calc.amt))
    lines.append(_line("18.  Tax Before Credits", calc.tax_before_credits))

    # Credits
    lines.append("")
    lines.append("  CREDITS")
    lines.append("  " + "-" * 68)
    if calc.child_tax_credit > 0:
        lines.append(_line("     Child Tax Credit", calc.child_tax_credit))
    if calc.education_credits > 0:
        lines.append(_line("     Education Credits", calc.education_credits))
    if calc.savers_credit > 0:
        lines.append(_line("     Retirement Savings Contributions Credit", calc.savers_credit))
    lines.append(_line("     Total Credits", calc.total_credits))
    lines.append(_line("22.  Tax After Credits", calc.tax_after_credits))

    # Other taxes
    if calc.self_employment_tax > 0 or calc.additional_medicare_tax > 0:
        lines.append("")
        lines.append("  OTHER TAXES")
        lines.append("  " + "-" * 68)
        if calc.self_employment_tax > 0:
            lines.append(_line("     Self-Employment Tax", calc.self_employment_tax))
        if calc.additional_medicare_tax > 0:
            lines.append(_line("     Additional Medicare Tax (0.9%)", calc.additional_medicare_tax))

    lines.append("\n  " + "-" * 68)
    lines.append(_line("24.  TOTAL TAX", calc.total_tax))

    # Payments
    lines.append("")
    lines.append("  PAYMENTS")
    lines.append("  " + "-" * 68)
    lines.append(_line("     Federal Tax Withheld", calc.federal_withheld))
    if calc.estimated_payments > 0:
        lines.append(_line("     Estimated Tax Payments", calc.estimated_payments))
    lines.append(_line("     Total Payments", calc.total_payments))

    # Refund or Amount Owed
    lines.append("\n  " + "=" * 68)
    if calc.is_refund:
        lines.append(_line("FEDERAL REFUND", calc.refund_or_owed))
    else:
        lines.append(_line("FEDERAL TAX OWED", abs(calc.refund_or_owed)))
    lines.append(f"  Effective Tax Rate: {calc.effective_rate * 100:.2f}%")

    # Form 8606
    if calc.taxable_ira_conversion or calc.remaining_ira_basis:
        lines.append("")
        lines.append("  FORM 8606 - Nondeductible IRAs")
        lines.append("  " + "-" * 68)
        lines.append(_line("     Taxable Part of Roth Conversion", calc.taxable_ira_conversion))
        lines.append(_line("     Basis Carried to Next Year", calc.remaining_ira_basis))

    return "\n".join(lines)


def generate_full_report(calc: TaxCalculation, taxpayer_name: str = "") -> str:
    """Federal report with a header line naming the taxpayer."""
    header = [_sep("#", 72), "  TAX RETURN SUMMARY"]
    if taxpayer_name:
        header.append(f"  Taxpayer: {taxpayer_name}")
    header.append(_sep("#", 72))
    return "\n".join(header) + generate_federal_report(calc) + "\n"
