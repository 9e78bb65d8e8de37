from abc import ABC, abstractmethod
from .models import DebitResult

class ILedger(ABC):
    """
    Contract for the user balance store.
    Every mutation is keyed by a caller-chosen reference and applied at most once.
    """

    @abstractmethod
    def try_debit(self, user_id: str, amount: int, reference: str, description: str = "") -> DebitResult:
        """
        Atomically debits `amount` if the balance covers it.

        Returns:
            DebitResult(ok=True, balance_after) on success or when `reference` was already applied,
            DebitResult(ok=False, current_balance) when funds are insufficient.
        """
        pass

    @abstractmethod
    def credit(self, user_id: str, amount: int, reference: str, description: str = "") -> int:
        """Adds funds once per reference. Returns the balance afterwards."""
        pass

    @abstractmethod
    def get_balance(self, user_id: str) -> int:
        pass
