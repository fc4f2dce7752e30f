"""SQLModel implementation of the fund transfer repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...models.fund_transfer import FundTransfer
from ._base import SQLModelRepository


class SQLModelFundTransferRepository(SQLModelRepository):
    """SQLModel-based fund transfer repository implementation."""

    @staticmethod
    def _with_joins(statement):
        return statement.options(
            selectinload(FundTransfer.from_account),  # type: ignore[arg-type]
            selectinload(FundTransfer.to_account),  # type: ignore[arg-type]
        )

    def get_by_id(
        self, transfer_id: str, *, session: Optional[Session] = None
    ) -> Optional[FundTransfer]:
        with self._scope(session) as s:
            statement = self._with_joins(select(FundTransfer).where(FundTransfer.id == transfer_id))
            return s.exec(statement).first()

    def search(
        self,
        *,
        account_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        session: Optional[Session] = None,
    ) -> list[FundTransfer]:
        """Transfers in the date range touching ``account_id`` on either side."""
        with self._scope(session) as s:
            statement = select(FundTransfer)

            if account_id:
                statement = statement.where(
                    or_(
                        FundTransfer.from_account_id == account_id,
                        FundTransfer.to_account_id == account_id,
                    )
                )
            if start_date:
                statement = statement.where(FundTransfer.date >= start_date)
            if end_date:
                statement = statement.where(FundTransfer.date <= end_date)

            statement = self._with_joins(statement).order_by(
                FundTransfer.date.desc(), FundTransfer.created_at.desc()  # type: ignore[attr-defined]
            )
            return list(s.exec(statement).all())

    def add(self, transfer: FundTransfer, *, session: Session) -> FundTransfer:
        session.add(transfer)
        session.flush()
        return transfer

    def delete(self, transfer: FundTransfer, *, session: Session) -> None:
        session.delete(transfer)
        session.flush()
