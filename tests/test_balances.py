"""Unit tests for balance effects and the mutator."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from sitebooks.errors import AccountNotFoundError
from sitebooks.infra.repositories import SQLModelBankAccountRepository
from sitebooks.models import Credit, Expense, FundTransfer
from sitebooks.services.balances import (
    BalanceDelta,
    BalanceMutator,
    balance_effect_for_credit,
    balance_effect_for_expense,
    balance_effect_for_transfer,
    invert,
    merge,
)


def _expense(**overrides) -> Expense:
    values = dict(
        site_id="s",
        vendor_id="v",
        category_id="c",
        date=date(2024, 1, 1),
        amount=Decimal("200"),
        payment_status="paid",
        payment_method="bank_transfer",
        bank_account_id="acct-a",
        created_by="u",
    )
    values.update(overrides)
    return Expense(**values)


def test_paid_bank_transfer_expense_debits_account():
    assert balance_effect_for_expense(_expense()) == [BalanceDelta("acct-a", Decimal("-200"))]


@pytest.mark.parametrize(
    "overrides",
    [
        {"payment_status": "unpaid"},
        {"payment_status": "partial"},
        {"payment_method": "cash"},
        {"bank_account_id": None},
    ],
)
def test_expense_without_bank_effect(overrides):
    assert balance_effect_for_expense(_expense(**overrides)) == []


def test_credit_effect_requires_bank_transfer_and_account():
    credit = Credit(
        date=date(2024, 1, 2),
        amount=Decimal("500"),
        payment_method="bank_transfer",
        bank_account_id="acct-a",
        created_by="u",
    )
    assert balance_effect_for_credit(credit) == [BalanceDelta("acct-a", Decimal("500"))]

    credit.payment_method = "cash"
    assert balance_effect_for_credit(credit) == []


def test_transfer_effect_is_symmetric():
    transfer = FundTransfer(
        from_account_id="acct-a",
        to_account_id="acct-b",
        amount=Decimal("300"),
        date=date(2024, 1, 3),
        created_by="u",
    )
    effect = balance_effect_for_transfer(transfer)

    assert effect == [
        BalanceDelta("acct-a", Decimal("-300")),
        BalanceDelta("acct-b", Decimal("300")),
    ]
    assert sum(delta.amount for delta in effect) == 0
    assert merge(effect + invert(effect)) == []


def test_merge_collapses_per_account_in_first_seen_order():
    merged = merge(
        [
            BalanceDelta("b", Decimal("10")),
            BalanceDelta("a", Decimal("-5")),
            BalanceDelta("b", Decimal("-3")),
        ]
    )
    assert merged == [BalanceDelta("b", Decimal("7")), BalanceDelta("a", Decimal("-5"))]


def test_mutator_applies_in_database(session_factory, bank_account_factory, balance_of):
    account = bank_account_factory(opening_balance="100")
    mutator = BalanceMutator(SQLModelBankAccountRepository(session_factory))

    with session_factory() as session:
        mutator.apply(
            session,
            [BalanceDelta(account.id, Decimal("-250"))],
            record_kind="expense",
            record_id="x",
        )

    # Overdrafts are allowed.
    assert balance_of(account) == Decimal("-150")


def test_mutator_rejects_unknown_account(session_factory, bank_account_factory, balance_of):
    account = bank_account_factory(opening_balance="100")
    mutator = BalanceMutator(SQLModelBankAccountRepository(session_factory))

    with pytest.raises(AccountNotFoundError) as excinfo:
        with session_factory() as session:
            mutator.apply(
                session,
                [BalanceDelta(account.id, Decimal("-10")), BalanceDelta("missing", Decimal("10"))],
                record_kind="transfer",
                record_id="t",
            )

    assert excinfo.value.account_id == "missing"
    assert balance_of(account) == Decimal("100")


def test_mutator_keeps_cached_instance_fresh(session_factory, bank_account_factory):
    account = bank_account_factory(opening_balance="50")
    repo = SQLModelBankAccountRepository(session_factory)
    mutator = BalanceMutator(repo)

    with session_factory() as session:
        cached = repo.get_by_id(account.id, session=session)
        mutator.apply(
            session, [BalanceDelta(account.id, Decimal("25"))], record_kind="credit", record_id="c"
        )
        assert cached.balance == Decimal("75")
