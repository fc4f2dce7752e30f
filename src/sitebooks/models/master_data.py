"""Reference dimensions owned by the master-data collaborator.

The ledger only reads these tables: they act as foreign keys for expenses and
credits and as grouping keys for reports.
"""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._common import new_id


class Site(SQLModel, table=True):
    """A construction site."""

    __tablename__: ClassVar[str] = "site"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    site_name: str = Field(nullable=False, max_length=128, index=True)
    location: Optional[str] = Field(default=None, max_length=255)
    manager_id: Optional[str] = Field(default=None, max_length=64)


class Vendor(SQLModel, table=True):
    __tablename__: ClassVar[str] = "vendor"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    name: str = Field(nullable=False, max_length=128, index=True)
    contact: Optional[str] = Field(default=None, max_length=128)
    gst_number: Optional[str] = Field(default=None, max_length=32)


class Category(SQLModel, table=True):
    """Expense category used for filtering and dashboard breakdowns."""

    __tablename__: ClassVar[str] = "category"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    category_name: str = Field(nullable=False, max_length=128, index=True)
