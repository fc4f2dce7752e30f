"""Balance reconciliation against live ledger records."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import update

from sitebooks.models import BankAccount
from sitebooks.models.enums import PaymentMethod
from sitebooks.services.reconcile import reconcile_accounts


def test_balances_reconcile_after_ledger_activity(
    ledger, manager, admin, session_factory, bank_account_factory, expense_input, credit_input, transfer_input
):
    a = bank_account_factory("A", opening_balance="1000")
    b = bank_account_factory("B", opening_balance="10")
    expense = ledger.create_expense(
        manager, expense_input("200", method=PaymentMethod.BANK_TRANSFER, account=a)
    )
    ledger.create_credit(manager, credit_input("500", account=b))
    ledger.create_fund_transfer(manager, transfer_input(a, b, "300"))
    ledger.update_expense(
        manager, expense.id, expense_input("50", method=PaymentMethod.BANK_TRANSFER, account=b)
    )

    with session_factory() as session:
        results = reconcile_accounts(session)

    assert all(result.consistent for result in results)
    by_name = {result.account_name: result for result in results}
    assert by_name["A"].expected == Decimal("700")
    assert by_name["B"].expected == Decimal("760")


def test_drift_is_reported(session_factory, bank_account_factory, caplog):
    account = bank_account_factory("Tampered", opening_balance="100")
    with session_factory() as session:
        session.exec(
            update(BankAccount).where(BankAccount.id == account.id).values(balance=Decimal("90"))
        )

    with caplog.at_level("WARNING", logger="sitebooks"):
        with session_factory() as session:
            [result] = reconcile_accounts(session)

    assert result.drift == Decimal("-10")
    assert not result.consistent
    assert "Balance drift detected" in caplog.text
