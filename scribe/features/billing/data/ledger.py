import logging
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from scribe.core.database.connection import SessionLocal
from ..domain.interfaces import ILedger
from ..domain.models import DebitResult
from .sql_models import AccountModel, LedgerEntryModel

logger = logging.getLogger(__name__)

class SqlLedger(ILedger):
    """
    Balance store backed by the accounts / ledger_entries tables.

    The debit is a single conditional UPDATE (balance >= amount), so two
    concurrent debits can never both pass a stale balance check. The unique
    reference on ledger_entries makes every operation idempotent.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def try_debit(self, user_id: str, amount: int, reference: str, description: str = "") -> DebitResult:
        if amount < 0:
            raise ValueError(f"Debit amount cannot be negative: {amount}")

        with self.session_factory() as db:
            if self._already_applied(db, reference):
                logger.info(f"Debit '{reference}' already applied for user {user_id}. Not charging again.")
                return DebitResult(ok=True, balance=self._balance(db, user_id), replayed=True)

            result = db.execute(
                update(AccountModel)
                .where(AccountModel.user_id == user_id, AccountModel.balance >= amount)
                .values(balance=AccountModel.balance - amount)
            )
            if result.rowcount != 1:
                db.rollback()
                balance = self._balance(db, user_id)
                logger.info(f"Debit of {amount} declined for user {user_id} (balance {balance}).")
                return DebitResult(ok=False, balance=balance)

            db.add(LedgerEntryModel(
                user_id=user_id,
                amount=-amount,
                reference=reference,
                description=description
            ))
            try:
                db.commit()
            except IntegrityError:
                # Lost the race on the same reference; the rollback undoes our UPDATE too.
                db.rollback()
                logger.warning(f"Concurrent debit '{reference}' detected for user {user_id}. Keeping the first one.")
                return DebitResult(ok=True, balance=self._balance(db, user_id), replayed=True)

            balance = self._balance(db, user_id)
            logger.info(f"Debited {amount} from user {user_id} [{reference}]. Balance: {balance}")
            return DebitResult(ok=True, balance=balance)

    def credit(self, user_id: str, amount: int, reference: str, description: str = "") -> int:
        if amount < 0:
            raise ValueError(f"Credit amount cannot be negative: {amount}")

        with self.session_factory() as db:
            if self._already_applied(db, reference):
                logger.info(f"Credit '{reference}' already applied for user {user_id}.")
                return self._balance(db, user_id)

            account = db.get(AccountModel, user_id)
            if account is None:
                account = AccountModel(user_id=user_id, balance=0)
                db.add(account)
                db.flush()

            db.execute(
                update(AccountModel)
                .where(AccountModel.user_id == user_id)
                .values(balance=AccountModel.balance + amount)
            )
            db.add(LedgerEntryModel(
                user_id=user_id,
                amount=amount,
                reference=reference,
                description=description
            ))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(f"Concurrent credit '{reference}' detected for user {user_id}.")

            return self._balance(db, user_id)

    def get_balance(self, user_id: str) -> int:
        with self.session_factory() as db:
            return self._balance(db, user_id)

    @staticmethod
    def _already_applied(db, reference: str) -> bool:
        return db.query(LedgerEntryModel.id).filter(LedgerEntryModel.reference == reference).first() is not None

    @staticmethod
    def _balance(db, user_id: str) -> int:
        balance = db.query(AccountModel.balance).filter(AccountModel.user_id == user_id).scalar()
        return int(balance or 0)
