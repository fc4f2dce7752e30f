"""Bank accounts whose running balance the ledger maintains."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._common import new_id, utcnow


class BankAccount(SQLModel, table=True):
    """A bank account referenced by expenses, credits and fund transfers.

    ``balance`` is written only by the balance mutator. ``opening_balance`` keeps
    the operator-supplied starting value so the running balance can be
    reconciled against the live ledger rows.
    """

    __tablename__: ClassVar[str] = "bank_account"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    account_name: str = Field(nullable=False, max_length=128, index=True)
    bank_name: str = Field(default="", max_length=128)
    account_number: str = Field(default="", max_length=64)
    ifsc_code: Optional[str] = Field(default=None, max_length=32)
    opening_balance: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    balance: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
