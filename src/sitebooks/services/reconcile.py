"""Recompute expected account balances from live ledger records."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models import BankAccount, Credit, Expense, FundTransfer
from .balances import (
    BalanceDelta,
    balance_effect_for_credit,
    balance_effect_for_expense,
    balance_effect_for_transfer,
)

logger = get_logger("services.reconcile")


@dataclass(frozen=True, slots=True)
class AccountDrift:
    account_id: str
    account_name: str
    opening_balance: Decimal
    balance: Decimal
    expected: Decimal

    @property
    def drift(self) -> Decimal:
        return self.balance - self.expected

    @property
    def consistent(self) -> bool:
        return self.drift == 0


def _live_effects(session: Session) -> Iterable[BalanceDelta]:
    for expense in session.exec(select(Expense)):
        yield from balance_effect_for_expense(expense)
    for credit in session.exec(select(Credit)):
        yield from balance_effect_for_credit(credit)
    for transfer in session.exec(select(FundTransfer)):
        yield from balance_effect_for_transfer(transfer)


def reconcile_accounts(session: Session) -> list[AccountDrift]:
    """Compare each stored balance with ``opening_balance`` plus record effects.

    Read-only. Accounts whose stored balance disagrees are logged at WARNING.
    """
    effects: dict[str, Decimal] = defaultdict(Decimal)
    for delta in _live_effects(session):
        effects[delta.account_id] += delta.amount

    results = []
    accounts = session.exec(select(BankAccount).order_by(BankAccount.account_name))  # type: ignore[arg-type]
    for account in accounts:
        opening = Decimal(account.opening_balance or 0)
        report = AccountDrift(
            account_id=account.id,
            account_name=account.account_name,
            opening_balance=opening,
            balance=Decimal(account.balance or 0),
            expected=opening + effects.get(account.id, Decimal("0")),
        )
        if not report.consistent:
            logger.warning(
                "Balance drift detected",
                extra={
                    "account_id": account.id,
                    "balance": str(report.balance),
                    "expected": str(report.expected),
                    "drift": str(report.drift),
                },
            )
        results.append(report)
    return results
