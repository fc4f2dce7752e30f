"""SQLModel implementation of the bank account repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ...models.bank_account import BankAccount
from ._base import SQLModelRepository


class SQLModelBankAccountRepository(SQLModelRepository):
    """SQLModel-based bank account repository implementation."""

    def get_by_id(self, account_id: str, *, session: Optional[Session] = None) -> Optional[BankAccount]:
        """Retrieve an account by ID."""
        with self._scope(session) as s:
            return s.get(BankAccount, account_id)

    def list_all(self, *, session: Optional[Session] = None) -> list[BankAccount]:
        """List all accounts ordered by display name."""
        with self._scope(session) as s:
            statement = select(BankAccount).order_by(BankAccount.account_name)  # type: ignore
            return list(s.exec(statement).all())

    def create(self, account: BankAccount, *, session: Optional[Session] = None) -> BankAccount:
        """Persist a new account; the opening balance seeds the running balance."""
        with self._scope(session) as s:
            account.opening_balance = Decimal(account.opening_balance or 0)
            account.balance = account.opening_balance
            s.add(account)
            s.flush()
            s.refresh(account)
            return account

    def increment_balance(self, session: Session, account_id: str, delta: Decimal) -> bool:
        """Add ``delta`` to the stored balance in one UPDATE statement.

        The arithmetic happens in the database so concurrent writers serialize
        on the row instead of racing a read-modify-write. Returns False when no
        account row matched.
        """
        statement = (
            update(BankAccount)
            .where(BankAccount.id == account_id)  # type: ignore[arg-type]
            .values(balance=BankAccount.balance + delta)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount == 0:
            return False
        cached = session.identity_map.get(session.identity_key(BankAccount, account_id))
        if cached is not None:
            session.refresh(cached, ["balance"])
        return True

    def refresh_balance(self, account_id: str, *, session: Optional[Session] = None) -> Optional[Decimal]:
        """Read the authoritative balance straight from the table."""
        with self._scope(session) as s:
            statement = select(BankAccount.balance).where(BankAccount.id == account_id)
            value = s.exec(statement).first()
            return Decimal(value) if value is not None else None
