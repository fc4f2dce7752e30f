"""JSON-ready dictionaries for ledger records and reports.

Amounts are rendered as two-place decimal strings and dates as ISO-8601.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from .models import BankAccount, Credit, Expense, FundTransfer
from .models.enums import RecordKind
from .services.reconcile import AccountDrift
from .services.reports import AccountSummary, LedgerRow, ReportSummary, SiteSummary

_CENTS = Decimal("0.01")


def money(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return str(Decimal(value).quantize(_CENTS))


def iso(value: Optional[dt.date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def bank_account_to_dict(account: BankAccount) -> dict[str, Any]:
    return {
        "id": account.id,
        "account_name": account.account_name,
        "bank_name": account.bank_name,
        "account_number": account.account_number,
        "ifsc_code": account.ifsc_code,
        "opening_balance": money(account.opening_balance),
        "balance": money(account.balance),
        "created_at": iso(account.created_at),
    }


def expense_to_dict(expense: Expense) -> dict[str, Any]:
    return {
        "id": expense.id,
        "site_id": expense.site_id,
        "site_name": expense.site.site_name if expense.site else None,
        "vendor_id": expense.vendor_id,
        "vendor_name": expense.vendor.name if expense.vendor else None,
        "category_id": expense.category_id,
        "category_name": expense.category.category_name if expense.category else None,
        "date": iso(expense.date),
        "amount": money(expense.amount),
        "description": expense.description,
        "payment_status": expense.payment_status,
        "payment_method": expense.payment_method,
        "bank_account_id": expense.bank_account_id,
        "bank_account_name": expense.bank_account.account_name if expense.bank_account else None,
        "created_by": expense.created_by,
        "created_at": iso(expense.created_at),
        "updated_at": iso(expense.updated_at),
    }


def credit_to_dict(credit: Credit) -> dict[str, Any]:
    return {
        "id": credit.id,
        "date": iso(credit.date),
        "amount": money(credit.amount),
        "payment_method": credit.payment_method,
        "bank_account_id": credit.bank_account_id,
        "bank_account_name": credit.bank_account.account_name if credit.bank_account else None,
        "description": credit.description,
        "category": credit.category,
        "site_id": credit.site_id,
        "site_name": credit.site.site_name if credit.site else None,
        "created_by": credit.created_by,
        "created_at": iso(credit.created_at),
        "updated_at": iso(credit.updated_at),
    }


def fund_transfer_to_dict(transfer: FundTransfer, direction: Optional[str] = None) -> dict[str, Any]:
    payload = {
        "id": transfer.id,
        "from_account_id": transfer.from_account_id,
        "from_account_name": transfer.from_account.account_name if transfer.from_account else None,
        "to_account_id": transfer.to_account_id,
        "to_account_name": transfer.to_account.account_name if transfer.to_account else None,
        "amount": money(transfer.amount),
        "date": iso(transfer.date),
        "description": transfer.description,
        "created_by": transfer.created_by,
        "created_at": iso(transfer.created_at),
    }
    if direction is not None:
        payload["direction"] = direction
    return payload


_PAYLOAD_SERIALIZERS = {
    RecordKind.EXPENSE: expense_to_dict,
    RecordKind.CREDIT: credit_to_dict,
}


def row_to_dict(row: LedgerRow) -> dict[str, Any]:
    """Tagged report row: ``kind`` decides the shape of ``record``."""

    direction = row.direction.value if row.direction else None
    if row.kind is RecordKind.TRANSFER:
        record = fund_transfer_to_dict(row.payload, direction)  # type: ignore[arg-type]
    else:
        record = _PAYLOAD_SERIALIZERS[row.kind](row.payload)
    return {
        "kind": row.kind.value,
        "date": iso(row.date),
        "amount": money(row.amount),
        "direction": direction,
        "record": record,
    }


def site_summary_to_dict(summary: SiteSummary) -> dict[str, Any]:
    return {
        "site_id": summary.site_id,
        "site_name": summary.site_name,
        "received": money(summary.received),
        "expense": money(summary.expense),
        "balance": money(summary.balance),
    }


def account_summary_to_dict(summary: AccountSummary) -> dict[str, Any]:
    return {
        "account_id": summary.account_id,
        "account_name": summary.account_name,
        "credit": money(summary.credit),
        "expense": money(summary.expense),
        "transfer_in": money(summary.transfer_in),
        "transfer_out": money(summary.transfer_out),
        "balance": money(summary.balance),
    }


def report_to_dict(report: ReportSummary) -> dict[str, Any]:
    return {
        "expenses": [expense_to_dict(expense) for expense in report.expenses],
        "credits": [credit_to_dict(credit) for credit in report.credits],
        "transfers": [row_to_dict(row)["record"] for row in report.transfers],
        "rows": [row_to_dict(row) for row in report.rows],
        "totals": {
            "total_expenses": money(report.totals.total_expenses),
            "total_credits": money(report.totals.total_credits),
            "net": money(report.totals.net),
        },
        "site_summary": [site_summary_to_dict(item) for item in report.site_summary],
        "account_summary": [account_summary_to_dict(item) for item in report.account_summary],
    }


def dashboard_to_dict(stats: dict[str, Any]) -> dict[str, Any]:
    return {
        "today_total": money(stats["today_total"]),
        "month_total": money(stats["month_total"]),
        "unpaid_total": money(stats["unpaid_total"]),
        "sites_count": stats["sites_count"],
        "category_breakdown": [
            {**item, "total": money(item["total"])} for item in stats["category_breakdown"]
        ],
        "monthly_trend": [
            {"month": item["month"], "total": money(item["total"])} for item in stats["monthly_trend"]
        ],
    }


def drift_to_dict(report: AccountDrift) -> dict[str, Any]:
    return {
        "account_id": report.account_id,
        "account_name": report.account_name,
        "opening_balance": money(report.opening_balance),
        "balance": money(report.balance),
        "expected": money(report.expected),
        "drift": money(report.drift),
        "consistent": report.consistent,
    }
