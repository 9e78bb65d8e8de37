from ..data.ledger import SqlLedger

def get_balance(user_id: str) -> int:
    """
    Standalone API: current balance of a user in credits (0 for unknown users).
    """
    return SqlLedger().get_balance(user_id)

def top_up(user_id: str, amount: int, operation_id: str) -> int:
    """
    Standalone API: adds credits to a user's account.
    `operation_id` deduplicates: replaying the same top-up adds nothing.
    """
    return SqlLedger().credit(user_id, amount, reference=f"topup:{operation_id}", description="Top-up")
