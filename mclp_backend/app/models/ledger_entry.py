"""
Ledger Entry database model.

One row per credit or debit line in a caller's books.
"""

import uuid
from sqlalchemy import Column, String, Float, Date, DateTime, Enum, Text
from mclp_backend.app.db.session import Base
from mclp_backend.app.models.enums import LedgerCategory, PaymentType, enum_values


class LedgerEntry(Base):
    """
    Ledger Entry model ("Account" in the UI).

    Exactly one of credit / debit is positive; the validator enforces it
    before anything reaches this table.
    """
    __tablename__ = "ledger_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Ownership
    owner_id = Column(String(64), nullable=False, index=True)

    # Entry details
    date = Column(Date, nullable=False, index=True)
    item_name = Column(String(255), nullable=False)
    category = Column(
        Enum(LedgerCategory, values_callable=enum_values, native_enum=False, length=32),
        nullable=False,
        index=True
    )
    payment_type = Column(
        Enum(PaymentType, values_callable=enum_values, native_enum=False, length=32),
        nullable=False
    )

    # Financials
    credit = Column(Float, nullable=False, default=0)
    debit = Column(Float, nullable=False, default=0)
    description = Column(Text, nullable=False, default="")

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<LedgerEntry(id={self.id}, item='{self.item_name}', credit={self.credit}, debit={self.debit})>"
