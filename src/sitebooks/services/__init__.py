"""Application services: ledger writes, balance effects and reports."""

from .balances import BalanceDelta, BalanceMutator
from .filters import NO_FILTER, LedgerFilters, ReportFilters
from .ledger_service import CreditInput, ExpenseInput, FundTransferInput, LedgerService
from .principal import Principal
from .reconcile import AccountDrift, reconcile_accounts
from .reports import LedgerRow, ReportService, ReportSummary

__all__ = [
    "AccountDrift",
    "BalanceDelta",
    "BalanceMutator",
    "CreditInput",
    "ExpenseInput",
    "FundTransferInput",
    "LedgerFilters",
    "LedgerRow",
    "LedgerService",
    "NO_FILTER",
    "Principal",
    "ReportFilters",
    "ReportService",
    "ReportSummary",
    "reconcile_accounts",
]
