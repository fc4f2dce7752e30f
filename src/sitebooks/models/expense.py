"""SQLModel definition for site expenses."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ._common import new_id, utcnow
from .enums import PaymentMethod, PaymentStatus

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .bank_account import BankAccount
    from .master_data import Category, Site, Vendor


class Expense(SQLModel, table=True):
    """Money spent on a site, paid to a vendor, filed under a category."""

    __tablename__: ClassVar[str] = "expense"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    site_id: str = Field(foreign_key="site.id", nullable=False, index=True)
    vendor_id: str = Field(foreign_key="vendor.id", nullable=False, index=True)
    category_id: str = Field(foreign_key="category.id", nullable=False, index=True)
    date: dt.date = Field(nullable=False, index=True)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    description: str = Field(default="", max_length=500)
    payment_status: str = Field(default=PaymentStatus.UNPAID.value, max_length=16, index=True)
    payment_method: str = Field(default=PaymentMethod.CASH.value, max_length=16)
    # Only stored for bank transfers; cash expenses never touch an account.
    bank_account_id: Optional[str] = Field(default=None, foreign_key="bank_account.id", index=True)
    created_by: str = Field(nullable=False, max_length=64)
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: Optional[dt.datetime] = Field(default=None)

    site: Optional["Site"] = Relationship(sa_relationship=relationship("Site"))
    vendor: Optional["Vendor"] = Relationship(sa_relationship=relationship("Vendor"))
    category: Optional["Category"] = Relationship(sa_relationship=relationship("Category"))
    bank_account: Optional["BankAccount"] = Relationship(
        sa_relationship=relationship("BankAccount")
    )
