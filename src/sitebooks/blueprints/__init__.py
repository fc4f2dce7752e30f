"""Blueprint exports."""

from . import accounts, credits, expenses, fund_transfers, reports

__all__ = [
    "accounts",
    "credits",
    "expenses",
    "fund_transfers",
    "reports",
]
