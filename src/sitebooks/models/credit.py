"""SQLModel definition for credits (money received)."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ._common import new_id, utcnow
from .enums import PaymentMethod

if TYPE_CHECKING:  # pragma: no cover
    from .bank_account import BankAccount
    from .master_data import Site


class Credit(SQLModel, table=True):
    """Income received, optionally tagged to a site."""

    __tablename__: ClassVar[str] = "credit"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    date: dt.date = Field(nullable=False, index=True)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    payment_method: str = Field(default=PaymentMethod.CASH.value, max_length=16)
    bank_account_id: Optional[str] = Field(default=None, foreign_key="bank_account.id", index=True)
    description: str = Field(default="", max_length=500)
    # Free text label; the UI fills it with the site name when a site is picked.
    category: str = Field(default="", max_length=128)
    site_id: Optional[str] = Field(default=None, foreign_key="site.id", index=True)
    created_by: str = Field(nullable=False, max_length=64)
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: Optional[dt.datetime] = Field(default=None)

    bank_account: Optional["BankAccount"] = Relationship(
        sa_relationship=relationship("BankAccount")
    )
    site: Optional["Site"] = Relationship(sa_relationship=relationship("Site"))
