"""Read-only report aggregation over expenses, credits and fund transfers."""

from __future__ import annotations

import datetime as dt
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Union

from sqlalchemy import func
from sqlmodel import Session, select

from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelBankAccountRepository,
    SQLModelCreditRepository,
    SQLModelExpenseRepository,
    SQLModelFundTransferRepository,
    SQLModelMasterDataRepository,
)
from ..logging_config import get_logger
from ..models import Category, Credit, Expense, FundTransfer, Site
from ..models.enums import PaymentMethod, PaymentStatus, RecordKind, TransferDirection
from .filters import LedgerFilters

logger = get_logger("services.reports")

ZERO = Decimal("0")
CASH_ACCOUNT_NAME = "Cash"

LedgerRecord = Union[Expense, Credit, FundTransfer]


@dataclass(slots=True)
class LedgerRow:
    """One merged report row; ``payload`` holds the kind-specific record."""

    kind: RecordKind
    date: dt.date
    amount: Decimal
    created_at: Optional[dt.datetime]
    payload: LedgerRecord
    direction: Optional[TransferDirection] = None


@dataclass(slots=True)
class ReportTotals:
    total_expenses: Decimal = ZERO
    total_credits: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.total_credits - self.total_expenses


@dataclass(slots=True)
class SiteSummary:
    site_id: str
    site_name: str
    received: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.received - self.expense


@dataclass(slots=True)
class AccountSummary:
    """Per-account flows; ``account_id`` is None for the cash pseudo-account."""

    account_id: Optional[str]
    account_name: str
    credit: Decimal = ZERO
    expense: Decimal = ZERO
    transfer_in: Decimal = ZERO
    transfer_out: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.credit + self.transfer_in - self.expense - self.transfer_out


@dataclass(slots=True)
class ReportSummary:
    filters: LedgerFilters
    expenses: list[Expense] = field(default_factory=list)
    credits: list[Credit] = field(default_factory=list)
    transfers: list[LedgerRow] = field(default_factory=list)
    rows: list[LedgerRow] = field(default_factory=list)
    totals: ReportTotals = field(default_factory=ReportTotals)
    site_summary: list[SiteSummary] = field(default_factory=list)
    account_summary: list[AccountSummary] = field(default_factory=list)


def transfer_direction(
    transfer: FundTransfer, account_id: Optional[str]
) -> Optional[TransferDirection]:
    """Direction of ``transfer`` relative to the filtered account, if any."""

    if not account_id:
        return None
    if transfer.to_account_id == account_id:
        return TransferDirection.IN
    if transfer.from_account_id == account_id:
        return TransferDirection.OUT
    return None


def build_rows(
    expenses: list[Expense],
    credits: list[Credit],
    transfers: list[FundTransfer],
    *,
    account_id: Optional[str] = None,
) -> list[LedgerRow]:
    """Tag every record with its kind and merge them newest first."""

    rows: list[LedgerRow] = []
    for expense in expenses:
        rows.append(
            LedgerRow(RecordKind.EXPENSE, expense.date, expense.amount, expense.created_at, expense)
        )
    for credit in credits:
        rows.append(
            LedgerRow(RecordKind.CREDIT, credit.date, credit.amount, credit.created_at, credit)
        )
    for transfer in transfers:
        rows.append(
            LedgerRow(
                RecordKind.TRANSFER,
                transfer.date,
                transfer.amount,
                transfer.created_at,
                transfer,
                direction=transfer_direction(transfer, account_id),
            )
        )
    rows.sort(key=_row_sort_key, reverse=True)
    return rows


def _row_sort_key(row: LedgerRow) -> tuple[dt.date, float]:
    stamp = row.created_at.timestamp() if row.created_at else 0.0
    return row.date, stamp


def compute_totals(rows: list[LedgerRow]) -> ReportTotals:
    """Expense/credit totals; transfers only count once they carry a direction."""

    totals = ReportTotals()
    for row in rows:
        if row.kind is RecordKind.EXPENSE:
            totals.total_expenses += row.amount
        elif row.kind is RecordKind.CREDIT:
            totals.total_credits += row.amount
        elif row.direction is TransferDirection.OUT:
            totals.total_expenses += row.amount
        elif row.direction is TransferDirection.IN:
            totals.total_credits += row.amount
    return totals


def site_summary(sites: list[Site], expenses: list[Expense], credits: list[Credit]) -> list[SiteSummary]:
    summaries: "OrderedDict[str, SiteSummary]" = OrderedDict(
        (site.id, SiteSummary(site.id, site.site_name)) for site in sites
    )
    for credit in credits:
        if credit.site_id in summaries:
            summaries[credit.site_id].received += credit.amount
    for expense in expenses:
        if expense.site_id in summaries:
            summaries[expense.site_id].expense += expense.amount
    return list(summaries.values())


def account_summary(
    accounts: list[Any],
    expenses: list[Expense],
    credits: list[Credit],
    transfers: list[FundTransfer],
) -> list[AccountSummary]:
    """Flows per bank account plus a trailing cash pseudo-account."""

    cash = AccountSummary(None, CASH_ACCOUNT_NAME)
    summaries: "OrderedDict[str, AccountSummary]" = OrderedDict(
        (account.id, AccountSummary(account.id, account.account_name)) for account in accounts
    )
    for credit in credits:
        if credit.payment_method == PaymentMethod.CASH.value:
            cash.credit += credit.amount
        elif credit.bank_account_id in summaries:
            summaries[credit.bank_account_id].credit += credit.amount
    for expense in expenses:
        if expense.payment_method == PaymentMethod.CASH.value:
            cash.expense += expense.amount
        elif expense.bank_account_id in summaries:
            summaries[expense.bank_account_id].expense += expense.amount
    for transfer in transfers:
        if transfer.from_account_id in summaries:
            summaries[transfer.from_account_id].transfer_out += transfer.amount
        if transfer.to_account_id in summaries:
            summaries[transfer.to_account_id].transfer_in += transfer.amount
    return [*summaries.values(), cash]


def _to_money(value: Any) -> Decimal:
    """Normalise driver sums (SQLite may hand back floats) to cents."""

    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def _month_start(day: dt.date, months_back: int = 0) -> dt.date:
    index = day.year * 12 + (day.month - 1) - months_back
    return dt.date(index // 12, index % 12 + 1, 1)


class ReportService:
    """Aggregations for the reports page and the dashboard."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory
        self.accounts = SQLModelBankAccountRepository(session_factory)
        self.expenses = SQLModelExpenseRepository(session_factory)
        self.credits = SQLModelCreditRepository(session_factory)
        self.transfers = SQLModelFundTransferRepository(session_factory)
        self.master_data = SQLModelMasterDataRepository(session_factory)

    def summary(self, filters: LedgerFilters) -> ReportSummary:
        """Build the filtered report from a single read session."""

        with self.session_factory() as session:
            expenses = self.expenses.search(
                site_id=filters.site_id,
                vendor_id=filters.vendor_id,
                category_id=filters.category_id,
                payment_status=filters.status_value,
                bank_account_id=filters.bank_account_id,
                start_date=filters.start_date,
                end_date=filters.end_date,
                session=session,
            )
            credits = self.credits.search(
                bank_account_id=filters.bank_account_id,
                site_id=filters.site_id,
                include_unsited=True,
                start_date=filters.start_date,
                end_date=filters.end_date,
                session=session,
            )
            transfers = self.transfers.search(
                account_id=filters.bank_account_id,
                start_date=filters.start_date,
                end_date=filters.end_date,
                session=session,
            )
            sites = self.master_data.list_sites(session=session)
            accounts = self.accounts.list_all(session=session)

        rows = build_rows(expenses, credits, transfers, account_id=filters.bank_account_id)
        report = ReportSummary(
            filters=filters,
            expenses=expenses,
            credits=credits,
            transfers=[row for row in rows if row.kind is RecordKind.TRANSFER],
            rows=rows,
            totals=compute_totals(rows),
            site_summary=site_summary(sites, expenses, credits),
            account_summary=account_summary(accounts, expenses, credits, transfers),
        )
        logger.debug(
            "Report built",
            extra={"rows": len(rows), "account_id": filters.bank_account_id},
        )
        return report

    def dashboard_stats(self, today: Optional[dt.date] = None) -> dict[str, Any]:
        """Headline expense figures for the dashboard."""

        today = today or dt.date.today()
        month_start = _month_start(today)
        trend_start = _month_start(today, 5)

        with self.session_factory() as session:
            today_total = self._sum_expenses(session, Expense.date == today)
            month_total = self._sum_expenses(
                session, Expense.date >= month_start, Expense.date <= today
            )
            unpaid_total = self._sum_expenses(
                session, Expense.payment_status == PaymentStatus.UNPAID.value
            )
            sites_count = session.exec(select(func.count()).select_from(Site)).one()

            breakdown_stmt = (
                select(Category.id, Category.category_name, func.sum(Expense.amount))
                .select_from(Expense)
                .join(Category, Category.id == Expense.category_id)
                .where(Expense.date >= month_start, Expense.date <= today)
                .group_by(Category.id, Category.category_name)
            )
            breakdown = [
                {"category_id": cat_id, "category_name": name, "total": _to_money(total)}
                for cat_id, name, total in session.exec(breakdown_stmt).all()
            ]

            recent = session.exec(
                select(Expense.date, Expense.amount).where(
                    Expense.date >= trend_start, Expense.date <= today
                )
            ).all()

        breakdown.sort(key=lambda item: item["total"], reverse=True)

        trend: "OrderedDict[str, Decimal]" = OrderedDict(
            (_month_start(today, back).strftime("%Y-%m"), ZERO) for back in range(5, -1, -1)
        )
        for day, amount in recent:
            trend[day.strftime("%Y-%m")] += _to_money(amount)

        return {
            "today_total": today_total,
            "month_total": month_total,
            "unpaid_total": unpaid_total,
            "sites_count": int(sites_count),
            "category_breakdown": breakdown,
            "monthly_trend": [{"month": month, "total": total} for month, total in trend.items()],
        }

    @staticmethod
    def _sum_expenses(session: Session, *conditions: Any) -> Decimal:
        statement = select(func.coalesce(func.sum(Expense.amount), 0)).where(*conditions)
        return _to_money(session.exec(statement).one())
