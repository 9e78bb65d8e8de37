import logging
from typing import Optional

from scribe.core.common.enums import ModelTier
from scribe.core.errors import InsufficientFunds
from ..domain.interfaces import ILedger
from ..domain.models import BillingOutcome, PriceTable

logger = logging.getLogger(__name__)

class PriceGate:
    """
    Prices a run from its duration and model tier and debits the user once.
    The debit reference (normally the run id) makes re-invocation free.
    """

    def __init__(self, ledger: ILedger, price_table: Optional[PriceTable] = None):
        self.ledger = ledger
        self.price_table = price_table or PriceTable()

    def quote(self, duration_seconds: float, tier: ModelTier) -> int:
        return self.price_table.cost(duration_seconds, tier)

    def authorize(self, user_id: str, duration_seconds: float, tier: ModelTier, reference: str) -> BillingOutcome:
        """
        Charges ceil(duration / 60) * price_per_minute(tier).

        Raises:
            InsufficientFunds: balance does not cover the cost. Nothing is debited.
        """
        minutes = self.price_table.billable_minutes(duration_seconds)
        cost = self.quote(duration_seconds, tier)
        logger.info(f"Pricing {reference}: {duration_seconds:.1f}s -> {minutes} min x {tier.value} = {cost} credits")

        result = self.ledger.try_debit(
            user_id,
            cost,
            reference=reference,
            description=f"Transcription {minutes} min ({tier.value})"
        )
        if not result.ok:
            raise InsufficientFunds(required=cost, available=result.balance)

        return BillingOutcome(
            amount_charged=cost,
            model_tier=tier,
            billed_minutes=minutes,
            balance_after=result.balance
        )

    def refund(self, user_id: str, outcome: BillingOutcome, reference: str) -> int:
        """Returns a previous charge. Applied at most once per reference."""
        if outcome.amount_charged <= 0:
            return self.ledger.get_balance(user_id)
        logger.info(f"Refunding {outcome.amount_charged} credits to user {user_id} [{reference}]")
        return self.ledger.credit(
            user_id,
            outcome.amount_charged,
            reference=reference,
            description="Refund for failed transcription"
        )
