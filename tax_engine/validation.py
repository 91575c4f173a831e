"""Input checks for a TaxReturn.

The calculators accept whatever they are given. These checks report
problems so the caller can surface them; nothing here raises.
"""

from dataclasses import dataclass, fields, is_dataclass
from datetime import date
from typing import List

from .models import CapitalGainTransaction, TaxReturn

LONG_TERM_HOLDING_DAYS = 365


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str


def holding_period_is_long_term(acquired: date, sold: date) -> bool:
    """Held more than one year (over 365 days)."""
    return (sold - acquired).days > LONG_TERM_HOLDING_DAYS


def _negative_amounts(record, path: str) -> List[ValidationIssue]:
    issues = []
    for f in fields(record):
        value = getattr(record, f.name)
        name = f"{path}.{f.name}"
        if is_dataclass(value):
            issues.extend(_negative_amounts(value, name))
        elif isinstance(value, list):
            for i, item in enumerate(value):
                if is_dataclass(item):
                    issues.extend(_negative_amounts(item, f"{name}[{i}]"))
        elif (
            isinstance(value, (int, float))
            and not isinstance(value, bool)
            and value < 0
        ):
            issues.append(ValidationIssue(name, "Amount must not be negative"))
    return issues


def _check_transaction(txn: CapitalGainTransaction, path: str) -> List[ValidationIssue]:
    issues = []
    if txn.date_acquired and txn.date_sold:
        if txn.date_sold < txn.date_acquired:
            issues.append(ValidationIssue(
                f"{path}.date_sold", "Sale date must not precede acquisition date"
            ))
        elif holding_period_is_long_term(txn.date_acquired, txn.date_sold) != txn.is_long_term:
            issues.append(ValidationIssue(
                f"{path}.is_long_term",
                "Long-term flag does not match the holding period",
            ))
    return issues


def validate_tax_return(tax_return: TaxReturn) -> List[ValidationIssue]:
    """
    Check the invariants a return must satisfy before calculation.

    Args:
        tax_return: The return to check.

    Returns:
        List of ValidationIssue; empty when the return is well formed.
    """
    issues = _negative_amounts(tax_return, "tax_return")

    for i, txn in enumerate(tax_return.capital_gains):
        issues.extend(_check_transaction(txn, f"tax_return.capital_gains[{i}]"))

    for i, dep in enumerate(tax_return.dependents):
        if not 0 <= dep.months_lived_with_taxpayer <= 12:
            issues.append(ValidationIssue(
                f"tax_return.dependents[{i}].months_lived_with_taxpayer",
                "Months must be between 0 and 12",
            ))

    return issues
