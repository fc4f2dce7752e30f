"""Enumerated values stored as plain strings on ledger rows."""

from __future__ import annotations

from enum import Enum


class PaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"
    PARTIAL = "partial"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"


class RecordKind(str, Enum):
    """Discriminator for rows merged into a report."""

    EXPENSE = "expense"
    CREDIT = "credit"
    TRANSFER = "transfer"


class TransferDirection(str, Enum):
    """Direction of a fund transfer relative to a filtered bank account."""

    IN = "in"
    OUT = "out"


class Role(str, Enum):
    ADMIN = "admin"
    SITE_MANAGER = "site_manager"
    VIEWER = "viewer"
