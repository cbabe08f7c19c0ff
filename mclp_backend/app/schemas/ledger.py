"""
Ledger entry Pydantic schemas.

Defines request and response models for the accounts ledger.
"""

import datetime as dt
from typing import Optional
from pydantic import AliasChoices, Field, model_validator
from pydantic_core import PydanticCustomError
from mclp_backend.app.models.enums import LedgerCategory, PaymentType
from mclp_backend.app.schemas.common import CamelModel, NonEmptyStr

CREDIT_XOR_DEBIT_MESSAGE = "Either credit or debit must be greater than 0, but not both"

# "type" is the key older clients send for the payment type
_PAYMENT_TYPE_ALIASES = AliasChoices("paymentType", "payment_type", "type")


class LedgerEntryCreate(CamelModel):
    """Schema for creating a ledger entry."""
    date: dt.date = Field(..., description="Entry date")
    item_name: NonEmptyStr = Field(..., description="Item or counterparty name")
    category: LedgerCategory
    payment_type: PaymentType = Field(..., validation_alias=_PAYMENT_TYPE_ALIASES)
    credit: float = Field(default=0, ge=0, description="Amount received")
    debit: float = Field(default=0, ge=0, description="Amount paid out")
    description: str = Field(default="", max_length=2000)

    @model_validator(mode="after")
    def check_credit_xor_debit(self):
        """Exactly one side of the entry carries an amount."""
        if (self.credit > 0) == (self.debit > 0):
            raise PydanticCustomError("credit_xor_debit", CREDIT_XOR_DEBIT_MESSAGE, {"field": "credit"})
        return self


class LedgerEntryUpdate(CamelModel):
    """Schema for partially updating a ledger entry."""
    date: Optional[dt.date] = None
    item_name: Optional[NonEmptyStr] = None
    category: Optional[LedgerCategory] = None
    payment_type: Optional[PaymentType] = Field(default=None, validation_alias=_PAYMENT_TYPE_ALIASES)
    credit: Optional[float] = Field(default=None, ge=0)
    debit: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=2000)


class LedgerEntryResponse(CamelModel):
    """Schema for ledger entry response."""
    id: str
    owner_id: str
    date: dt.date
    item_name: str
    category: LedgerCategory
    payment_type: PaymentType
    credit: float
    debit: float
    description: str
    created_at: dt.datetime
