"""Schedule D (Capital Gains and Losses) netting.

Transactions are bucketed by their long-term flag; the date-based holding
period is applied upstream (see validation.holding_period_is_long_term).
A net loss is limited to the annual ceiling. The disallowed remainder is
reported but not carried to a later year.
"""

from typing import Iterable

from .models import CapitalGainTransaction, CapitalGainsResult
from .tax_tables import CAPITAL_LOSS_LIMIT


class ScheduleDCalculator:
    """Net short- and long-term capital gains and losses."""

    def __init__(self, loss_limit: float = CAPITAL_LOSS_LIMIT):
        self.loss_limit = loss_limit

    def calculate(self, transactions: Iterable[CapitalGainTransaction]) -> CapitalGainsResult:
        """
        Sum gain/loss per bucket and apply the capital loss limit.

        When the combined result is a loss larger than the limit, the
        short-term bucket keeps its loss first (up to the limit) and the
        long-term bucket is set so that both buckets sum to exactly
        -limit.

        Args:
            transactions: Sales reported on Form 8949.

        Returns:
            CapitalGainsResult with the limited bucket totals.
        """
        short_term = 0.0
        long_term = 0.0
        for txn in transactions:
            if txn.is_long_term:
                long_term += txn.gain_loss
            else:
                short_term += txn.gain_loss

        net = short_term + long_term
        if net >= -self.loss_limit:
            return CapitalGainsResult(short_term=short_term, long_term=long_term)

        disallowed = -net - self.loss_limit
        if short_term < 0:
            short_term = max(short_term, -self.loss_limit)
        long_term = -self.loss_limit - short_term

        return CapitalGainsResult(
            short_term=short_term,
            long_term=long_term,
            disallowed_loss=disallowed,
        )
