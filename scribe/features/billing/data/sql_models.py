import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from scribe.core.database.base import Base

def utc_now():
    return datetime.now(timezone.utc)

class AccountModel(Base):
    """
    One balance per user, in integer credits.
    """
    __tablename__ = "accounts"

    user_id = Column(String, primary_key=True)
    balance = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    entries = relationship("LedgerEntryModel", back_populates="account", cascade="all, delete-orphan")

class LedgerEntryModel(Base):
    """
    Append-only movement log.
    `reference` is unique: the same operation can never be applied twice.
    """
    __tablename__ = "ledger_entries"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, ForeignKey("accounts.user_id"), nullable=False, index=True)

    amount = Column(Integer, nullable=False)  # Signed: debits are negative
    reference = Column(String, nullable=False, unique=True, index=True)
    description = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)

    account = relationship("AccountModel", back_populates="entries")
