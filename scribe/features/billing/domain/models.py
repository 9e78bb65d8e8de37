# File: scribe/features/billing/domain/models.py
import math
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from scribe.core.common.enums import ModelTier

@dataclass(frozen=True)
class BillingOutcome:
    """
    Audit fact of the single debit made for a run.
    Survives later failures: moved funds are not implicitly rolled back.
    """
    amount_charged: int
    model_tier: ModelTier
    billed_minutes: int = 0
    balance_after: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount_charged": self.amount_charged,
            "model_tier": self.model_tier.value,
            "billed_minutes": self.billed_minutes,
            "balance_after": self.balance_after,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BillingOutcome":
        return cls(
            amount_charged=int(data["amount_charged"]),
            model_tier=ModelTier(data["model_tier"]),
            billed_minutes=int(data.get("billed_minutes", 0)),
            balance_after=data.get("balance_after"),
        )

@dataclass(frozen=True)
class DebitResult:
    ok: bool
    balance: int
    # True when the reference had already been applied and nothing moved this time
    replayed: bool = False

@dataclass(frozen=True)
class PriceTable:
    """
    Credits per started minute of audio, per model tier.
    """
    per_minute: Dict[ModelTier, int] = field(default_factory=lambda: {
        ModelTier.TINY: 1,
        ModelTier.BASE: 2,
        ModelTier.SMALL: 3,
        ModelTier.MEDIUM: 5,
        ModelTier.LARGE: 8,
    })

    def price_per_minute(self, tier: ModelTier) -> int:
        if tier not in self.per_minute:
            raise ValueError(f"No price configured for model tier '{tier}'")
        return self.per_minute[tier]

    @staticmethod
    def billable_minutes(duration_seconds: float) -> int:
        # Partial minutes round up. Sub-millisecond float noise is ignored.
        return math.ceil(round(duration_seconds, 3) / 60)

    def cost(self, duration_seconds: float, tier: ModelTier) -> int:
        return self.billable_minutes(duration_seconds) * self.price_per_minute(tier)

    @classmethod
    def from_settings(cls, settings) -> "PriceTable":
        return cls(per_minute={
            ModelTier.TINY: settings.PRICE_PER_MINUTE_TINY,
            ModelTier.BASE: settings.PRICE_PER_MINUTE_BASE,
            ModelTier.SMALL: settings.PRICE_PER_MINUTE_SMALL,
            ModelTier.MEDIUM: settings.PRICE_PER_MINUTE_MEDIUM,
            ModelTier.LARGE: settings.PRICE_PER_MINUTE_LARGE,
        })
