"""SQLModel table exports."""

from .bank_account import BankAccount
from .credit import Credit
from .enums import PaymentMethod, PaymentStatus, RecordKind, Role, TransferDirection
from .expense import Expense
from .fund_transfer import FundTransfer
from .master_data import Category, Site, Vendor

__all__ = [
    "BankAccount",
    "Category",
    "Credit",
    "Expense",
    "FundTransfer",
    "PaymentMethod",
    "PaymentStatus",
    "RecordKind",
    "Role",
    "Site",
    "TransferDirection",
    "Vendor",
]
