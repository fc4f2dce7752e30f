"""SQLModel implementation of the expense repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...models.expense import Expense
from ._base import SQLModelRepository


class SQLModelExpenseRepository(SQLModelRepository):
    """SQLModel-based expense repository implementation."""

    @staticmethod
    def _with_joins(statement):
        return statement.options(
            selectinload(Expense.site),  # type: ignore[arg-type]
            selectinload(Expense.vendor),  # type: ignore[arg-type]
            selectinload(Expense.category),  # type: ignore[arg-type]
            selectinload(Expense.bank_account),  # type: ignore[arg-type]
        )

    def get_by_id(self, expense_id: str, *, session: Optional[Session] = None) -> Optional[Expense]:
        """Retrieve an expense with its reference rows loaded."""
        with self._scope(session) as s:
            statement = self._with_joins(select(Expense).where(Expense.id == expense_id))
            return s.exec(statement).first()

    def search(
        self,
        *,
        site_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
        category_id: Optional[str] = None,
        payment_status: Optional[str] = None,
        bank_account_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        session: Optional[Session] = None,
    ) -> list[Expense]:
        """Expenses matching every supplied predicate, newest first."""
        with self._scope(session) as s:
            statement = select(Expense)

            if site_id:
                statement = statement.where(Expense.site_id == site_id)
            if vendor_id:
                statement = statement.where(Expense.vendor_id == vendor_id)
            if category_id:
                statement = statement.where(Expense.category_id == category_id)
            if payment_status:
                statement = statement.where(Expense.payment_status == payment_status)
            if bank_account_id:
                statement = statement.where(Expense.bank_account_id == bank_account_id)
            if start_date:
                statement = statement.where(Expense.date >= start_date)
            if end_date:
                statement = statement.where(Expense.date <= end_date)

            statement = self._with_joins(statement).order_by(
                Expense.date.desc(), Expense.created_at.desc()  # type: ignore[attr-defined]
            )
            return list(s.exec(statement).all())

    def add(self, expense: Expense, *, session: Session) -> Expense:
        """Stage a new or changed expense in the caller's unit of work."""
        session.add(expense)
        session.flush()
        return expense

    def delete(self, expense: Expense, *, session: Session) -> None:
        session.delete(expense)
        session.flush()
