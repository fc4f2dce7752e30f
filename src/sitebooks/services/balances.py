"""Balance effects of ledger records and the mutator that applies them.

Every ledger record maps to a list of :class:`BalanceDelta` values: the signed
change it makes to each bank account it touches. Creating a record applies
its effect, deleting it applies the inverse, and updating it applies the
inverse of the stored version followed by the effect of the new version. All
of this runs on the caller's session so the record write and the balance
adjustment commit or roll back together.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from sqlmodel import Session

from ..errors import AccountNotFoundError
from ..infra.repositories.bank_account import SQLModelBankAccountRepository
from ..logging_config import get_logger
from ..models.credit import Credit
from ..models.enums import PaymentMethod, PaymentStatus
from ..models.expense import Expense
from ..models.fund_transfer import FundTransfer

logger = get_logger("services.balances")

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class BalanceDelta:
    """Signed change to one bank account."""

    account_id: str
    amount: Decimal

    def inverted(self) -> BalanceDelta:
        return BalanceDelta(self.account_id, -self.amount)


def _money(value: object) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def expense_affects_balance(expense: Expense) -> bool:
    """Paid bank-transfer expenses with an account draw the account down."""

    return (
        expense.payment_method == PaymentMethod.BANK_TRANSFER.value
        and expense.payment_status == PaymentStatus.PAID.value
        and bool(expense.bank_account_id)
    )


def credit_affects_balance(credit: Credit) -> bool:
    return credit.payment_method == PaymentMethod.BANK_TRANSFER.value and bool(
        credit.bank_account_id
    )


def balance_effect_for_expense(expense: Expense) -> list[BalanceDelta]:
    if not expense_affects_balance(expense):
        return []
    return [BalanceDelta(str(expense.bank_account_id), -_money(expense.amount))]


def balance_effect_for_credit(credit: Credit) -> list[BalanceDelta]:
    if not credit_affects_balance(credit):
        return []
    return [BalanceDelta(str(credit.bank_account_id), _money(credit.amount))]


def balance_effect_for_transfer(transfer: FundTransfer) -> list[BalanceDelta]:
    amount = _money(transfer.amount)
    return [
        BalanceDelta(transfer.from_account_id, -amount),
        BalanceDelta(transfer.to_account_id, amount),
    ]


def invert(effects: Iterable[BalanceDelta]) -> list[BalanceDelta]:
    """Return the effect that cancels ``effects``."""

    return [delta.inverted() for delta in effects]


def merge(effects: Iterable[BalanceDelta]) -> list[BalanceDelta]:
    """Collapse deltas per account, keeping first-seen order and dropping zeros."""

    totals: OrderedDict[str, Decimal] = OrderedDict()
    for delta in effects:
        totals[delta.account_id] = totals.get(delta.account_id, ZERO) + delta.amount
    return [BalanceDelta(account_id, amount) for account_id, amount in totals.items() if amount != ZERO]


class BalanceMutator:
    """Apply balance deltas to ``bank_account`` rows inside a caller's transaction."""

    def __init__(self, accounts: SQLModelBankAccountRepository):
        self.accounts = accounts

    def apply(
        self,
        session: Session,
        effects: Iterable[BalanceDelta],
        *,
        record_kind: str,
        record_id: Optional[str],
    ) -> list[BalanceDelta]:
        """Apply merged ``effects``; raise if any target account is missing.

        Negative resulting balances are legitimate (overdraft) and are not
        checked. On :class:`AccountNotFoundError` the caller's scope rolls back
        everything staged so far, including the record write.
        """
        applied = merge(effects)
        for delta in applied:
            if not self.accounts.increment_balance(session, delta.account_id, delta.amount):
                logger.warning(
                    "Balance update matched no account",
                    extra={"account_id": delta.account_id, "record_kind": record_kind, "record_id": record_id},
                )
                raise AccountNotFoundError(delta.account_id)
            logger.info(
                "Applied balance delta",
                extra={
                    "account_id": delta.account_id,
                    "delta": str(delta.amount),
                    "record_kind": record_kind,
                    "record_id": record_id,
                },
            )
        return applied
