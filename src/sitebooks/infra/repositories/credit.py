"""SQLModel implementation of the credit repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...models.credit import Credit
from ._base import SQLModelRepository


class SQLModelCreditRepository(SQLModelRepository):
    """SQLModel-based credit repository implementation."""

    @staticmethod
    def _with_joins(statement):
        return statement.options(
            selectinload(Credit.bank_account),  # type: ignore[arg-type]
            selectinload(Credit.site),  # type: ignore[arg-type]
        )

    def get_by_id(self, credit_id: str, *, session: Optional[Session] = None) -> Optional[Credit]:
        with self._scope(session) as s:
            statement = self._with_joins(select(Credit).where(Credit.id == credit_id))
            return s.exec(statement).first()

    def search(
        self,
        *,
        bank_account_id: Optional[str] = None,
        site_id: Optional[str] = None,
        include_unsited: bool = False,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        session: Optional[Session] = None,
    ) -> list[Credit]:
        """Credits matching the supplied predicates, newest first.

        With ``include_unsited`` the site predicate only narrows credits that
        carry a site; credits without one are always kept.
        """
        with self._scope(session) as s:
            statement = select(Credit)

            if bank_account_id:
                statement = statement.where(Credit.bank_account_id == bank_account_id)
            if site_id:
                if include_unsited:
                    statement = statement.where(
                        or_(Credit.site_id == site_id, Credit.site_id.is_(None))  # type: ignore[union-attr]
                    )
                else:
                    statement = statement.where(Credit.site_id == site_id)
            if start_date:
                statement = statement.where(Credit.date >= start_date)
            if end_date:
                statement = statement.where(Credit.date <= end_date)

            statement = self._with_joins(statement).order_by(
                Credit.date.desc(), Credit.created_at.desc()  # type: ignore[attr-defined]
            )
            return list(s.exec(statement).all())

    def add(self, credit: Credit, *, session: Session) -> Credit:
        session.add(credit)
        session.flush()
        return credit

    def delete(self, credit: Credit, *, session: Session) -> None:
        session.delete(credit)
        session.flush()
