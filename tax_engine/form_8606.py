"""Form 8606 (Nondeductible IRAs) basis tracking and the pro-rata rule.

After-tax dollars ("basis") in traditional IRAs come out tax-free on a
Roth conversion only in proportion to the basis share of the combined
year-end pool. A conversion is never entirely tax-free while pre-tax
money sits in any traditional IRA at year end.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .models import Form8606Data, Form8606Result, round_dollars


class Form8606Calculator:
    """Calculate Form 8606 Parts I and II."""

    def calculate(self, data: Optional[Form8606Data]) -> Optional[Form8606Result]:
        """
        Apply the pro-rata rule to a year's conversions and distributions.

        The pool is the year-end balance plus everything taken out during
        the year (conversions and distributions), so a same-year
        contribute-then-convert is measured against the full balance. The
        basis fraction is capped at 1.

        Args:
            data: Form 8606 inputs, or None when the form is not needed.

        Returns:
            Form8606Result, or None when data is None.
        """
        if data is None:
            return None

        total_basis = data.nondeductible_contributions + data.prior_year_basis
        taken_out = data.conversions_to_roth + data.distributions
        total_pool = taken_out + data.year_end_balance
        basis_fraction = min(1.0, total_basis / total_pool) if total_pool > 0 else 0.0

        nontaxable = round_dollars(data.conversions_to_roth * basis_fraction)
        taxable = data.conversions_to_roth - nontaxable
        remaining_basis = round_dollars(max(0.0, total_basis - taken_out * basis_fraction))

        return Form8606Result(
            nondeductible_contributions=data.nondeductible_contributions,
            prior_year_basis=data.prior_year_basis,
            total_basis=total_basis,
            conversions=data.conversions_to_roth,
            distributions=data.distributions,
            conversions_and_distributions=taken_out,
            year_end_balance=data.year_end_balance,
            total_pool=total_pool,
            basis_fraction=basis_fraction,
            nontaxable_conversion=nontaxable,
            taxable_conversion=taxable,
            remaining_basis=remaining_basis,
        )


@dataclass
class BackdoorRothReview:
    """Outcome of reviewing a backdoor Roth conversion."""
    is_clean: bool
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ConversionStrategy:
    taxable_amount: float
    nontaxable_amount: float
    effective_taxable_share: float
    recommendation: str


def review_backdoor_roth(data: Form8606Data) -> BackdoorRothReview:
    """Flag pro-rata exposure in a backdoor Roth conversion."""
    result = Form8606Calculator().calculate(data)
    warnings = []
    recommendations = []

    if data.year_end_balance > 0 and data.conversions_to_roth > 0:
        warnings.append(
            f"You have ${data.year_end_balance:,.0f} in traditional IRAs at year end. "
            "Due to the pro-rata rule, only part of your Roth conversion is tax-free."
        )
        recommendations.append(
            "Consider rolling pre-tax traditional IRA money into an employer plan "
            "before converting, so the year-end balance is zero."
        )

    if result.taxable_conversion > 0 and data.conversions_to_roth == data.nondeductible_contributions:
        warnings.append(
            "Even though you converted exactly what you contributed, "
            f"${result.taxable_conversion:,.0f} of the conversion is taxable "
            "because of existing traditional IRA balances."
        )

    is_clean = data.year_end_balance == 0 and result.taxable_conversion == 0
    if is_clean:
        recommendations.append(
            "The entire conversion is tax-free: no traditional IRA balance remained at year end."
        )

    return BackdoorRothReview(
        is_clean=is_clean, warnings=warnings, recommendations=recommendations
    )


def conversion_strategy(
    conversion_amount: float,
    traditional_balance: float,
    existing_basis: float,
    new_contribution: float,
) -> ConversionStrategy:
    """
    Estimate how much of a planned conversion would be taxable.

    Args:
        conversion_amount: Amount to convert to Roth.
        traditional_balance: Year-end traditional IRA balance after the conversion.
        existing_basis: Basis carried from prior years.
        new_contribution: Nondeductible contribution made this year.

    Returns:
        ConversionStrategy with the taxable split and a recommendation.
    """
    result = Form8606Calculator().calculate(Form8606Data(
        nondeductible_contributions=new_contribution,
        prior_year_basis=existing_basis,
        conversions_to_roth=conversion_amount,
        year_end_balance=traditional_balance,
    ))
    share = result.taxable_conversion / conversion_amount if conversion_amount > 0 else 0.0

    if share == 0:
        recommendation = "Optimal: the entire conversion is tax-free."
    elif share < 0.1:
        recommendation = "Good: less than 10% of the conversion is taxable."
    elif share < 0.5:
        recommendation = "Moderate: consider reducing the traditional IRA balance first."
    else:
        recommendation = (
            "Not optimal: most of the conversion is taxable under the pro-rata rule. "
            "Consider rolling the traditional IRA into a 401(k) first."
        )

    return ConversionStrategy(
        taxable_amount=result.taxable_conversion,
        nontaxable_amount=result.nontaxable_conversion,
        effective_taxable_share=share,
        recommendation=recommendation,
    )
