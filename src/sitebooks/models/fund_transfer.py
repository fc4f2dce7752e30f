"""SQLModel definition for transfers between two bank accounts."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ._common import new_id, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .bank_account import BankAccount


class FundTransfer(SQLModel, table=True):
    """Money moved from one bank account to another."""

    __tablename__: ClassVar[str] = "fund_transfer"
    __table_args__ = (
        CheckConstraint("from_account_id <> to_account_id", name="ck_fund_transfer_distinct"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    from_account_id: str = Field(foreign_key="bank_account.id", nullable=False, index=True)
    to_account_id: str = Field(foreign_key="bank_account.id", nullable=False, index=True)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    date: dt.date = Field(nullable=False, index=True)
    description: str = Field(default="", max_length=500)
    created_by: str = Field(nullable=False, max_length=64)
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)

    from_account: Optional["BankAccount"] = Relationship(
        sa_relationship=relationship(
            "BankAccount", foreign_keys="[FundTransfer.from_account_id]"
        )
    )
    to_account: Optional["BankAccount"] = Relationship(
        sa_relationship=relationship("BankAccount", foreign_keys="[FundTransfer.to_account_id]")
    )
