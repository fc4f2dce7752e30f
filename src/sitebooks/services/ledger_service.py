"""Create, update and delete ledger records together with their balance effects.

Each write runs inside one ``session_scope``: reference checks, the record
write and the balance adjustment either all commit or all roll back.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Type

from sqlmodel import Session, SQLModel

from ..errors import AccountNotFoundError, NotFoundError, ReferenceNotFoundError, ValidationError
from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelBankAccountRepository,
    SQLModelCreditRepository,
    SQLModelExpenseRepository,
    SQLModelFundTransferRepository,
    SQLModelMasterDataRepository,
)
from ..logging_config import get_logger
from ..models import BankAccount, Category, Credit, Expense, FundTransfer, Site, Vendor
from ..models._common import utcnow
from ..models.enums import PaymentMethod, PaymentStatus
from .balances import (
    BalanceMutator,
    balance_effect_for_credit,
    balance_effect_for_expense,
    balance_effect_for_transfer,
    invert,
)
from .filters import LedgerFilters
from .principal import Principal

logger = get_logger("services.ledger")

_EXPENSE_JOINS = ["site", "vendor", "category", "bank_account"]
_CREDIT_JOINS = ["site", "bank_account"]
_TRANSFER_JOINS = ["from_account", "to_account"]


@dataclass(slots=True)
class ExpenseInput:
    """Validated expense payload."""

    site_id: str
    vendor_id: str
    category_id: str
    date: dt.date
    amount: Decimal
    description: str = ""
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_method: PaymentMethod = PaymentMethod.CASH
    bank_account_id: Optional[str] = None


@dataclass(slots=True)
class CreditInput:
    """Validated credit payload."""

    date: dt.date
    amount: Decimal
    payment_method: PaymentMethod = PaymentMethod.CASH
    bank_account_id: Optional[str] = None
    description: str = ""
    category: str = ""
    site_id: Optional[str] = None


@dataclass(slots=True)
class FundTransferInput:
    """Validated fund transfer payload."""

    from_account_id: str
    to_account_id: str
    amount: Decimal
    date: dt.date
    description: str = ""


# Numeric(14, 2) leaves twelve integer digits.
MAX_AMOUNT = Decimal("1000000000000")


def _require_positive(amount: Decimal) -> None:
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be greater than zero", {"amount": ["Must be positive."]})
    if amount >= MAX_AMOUNT:
        raise ValidationError("Amount is too large", {"amount": ["Must be below 1,000,000,000,000."]})


def validate_expense_input(data: ExpenseInput) -> None:
    """Cross-field rules checked before any mutation is attempted."""

    _require_positive(data.amount)
    if (
        data.payment_method is PaymentMethod.BANK_TRANSFER
        and data.payment_status is PaymentStatus.PAID
        and not data.bank_account_id
    ):
        raise ValidationError(
            "A bank account is required for paid bank transfers",
            {"bank_account_id": ["Required when a bank transfer is marked paid."]},
        )


def validate_credit_input(data: CreditInput) -> None:
    _require_positive(data.amount)


def validate_transfer_input(data: FundTransferInput) -> None:
    _require_positive(data.amount)
    if data.from_account_id == data.to_account_id:
        raise ValidationError(
            "Source and destination accounts must differ",
            {"to_account_id": ["Must differ from the source account."]},
        )


class LedgerService:
    """Ledger gateway: every write takes an explicit :class:`Principal`."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory
        self.accounts = SQLModelBankAccountRepository(session_factory)
        self.expenses = SQLModelExpenseRepository(session_factory)
        self.credits = SQLModelCreditRepository(session_factory)
        self.transfers = SQLModelFundTransferRepository(session_factory)
        self.master_data = SQLModelMasterDataRepository(session_factory)
        self.mutator = BalanceMutator(self.accounts)

    # ------------------------------------------------------------------
    # Reference checks
    # ------------------------------------------------------------------

    def _require_reference(
        self, session: Session, model: Type[SQLModel], record_id: Optional[str], label: str
    ) -> None:
        if record_id and not self.master_data.exists(model, record_id, session=session):
            raise ReferenceNotFoundError(label, record_id)

    def _require_account(self, session: Session, account_id: Optional[str]) -> None:
        if account_id and session.get(BankAccount, account_id) is None:
            raise AccountNotFoundError(account_id)

    # ------------------------------------------------------------------
    # Bank accounts (read-only here; creation belongs to master data)
    # ------------------------------------------------------------------

    def list_bank_accounts(self) -> list[BankAccount]:
        return self.accounts.list_all()

    def get_bank_account(self, account_id: str) -> BankAccount:
        account = self.accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Bank account", account_id)
        return account

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def list_expenses(self, filters: LedgerFilters) -> list[Expense]:
        return self.expenses.search(
            site_id=filters.site_id,
            vendor_id=filters.vendor_id,
            category_id=filters.category_id,
            payment_status=filters.status_value,
            bank_account_id=filters.bank_account_id,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )

    def get_expense(self, expense_id: str) -> Expense:
        expense = self.expenses.get_by_id(expense_id)
        if expense is None:
            raise NotFoundError("Expense", expense_id)
        return expense

    def _check_expense_refs(self, session: Session, data: ExpenseInput) -> None:
        self._require_reference(session, Site, data.site_id, "Site")
        self._require_reference(session, Vendor, data.vendor_id, "Vendor")
        self._require_reference(session, Category, data.category_id, "Category")
        if data.payment_method is PaymentMethod.BANK_TRANSFER:
            self._require_account(session, data.bank_account_id)

    @staticmethod
    def _assign_expense(expense: Expense, data: ExpenseInput) -> None:
        expense.site_id = data.site_id
        expense.vendor_id = data.vendor_id
        expense.category_id = data.category_id
        expense.date = data.date
        expense.amount = data.amount
        expense.description = data.description
        expense.payment_status = data.payment_status.value
        expense.payment_method = data.payment_method.value
        expense.bank_account_id = (
            data.bank_account_id if data.payment_method is PaymentMethod.BANK_TRANSFER else None
        )

    def create_expense(self, principal: Principal, data: ExpenseInput) -> Expense:
        """Record an expense; a paid bank transfer draws down its account."""

        principal.require_writer()
        validate_expense_input(data)
        with self.session_factory() as session:
            self._check_expense_refs(session, data)
            expense = Expense(created_by=principal.user_id)  # type: ignore[call-arg]
            self._assign_expense(expense, data)
            self.expenses.add(expense, session=session)
            self.mutator.apply(
                session,
                balance_effect_for_expense(expense),
                record_kind="expense",
                record_id=expense.id,
            )
            session.refresh(expense, _EXPENSE_JOINS)
        logger.info("Expense created", extra={"expense_id": expense.id, "user_id": principal.user_id})
        return expense

    def update_expense(self, principal: Principal, expense_id: str, data: ExpenseInput) -> Expense:
        """Rewrite an expense: revert the stored effect, then apply the new one."""

        principal.require_writer()
        validate_expense_input(data)
        with self.session_factory() as session:
            expense = self.expenses.get_by_id(expense_id, session=session)
            if expense is None:
                raise NotFoundError("Expense", expense_id)
            self._check_expense_refs(session, data)
            previous = balance_effect_for_expense(expense)
            self._assign_expense(expense, data)
            expense.updated_at = utcnow()
            self.expenses.add(expense, session=session)
            self.mutator.apply(
                session,
                invert(previous) + balance_effect_for_expense(expense),
                record_kind="expense",
                record_id=expense.id,
            )
            session.refresh(expense, _EXPENSE_JOINS)
        logger.info("Expense updated", extra={"expense_id": expense_id, "user_id": principal.user_id})
        return expense

    def delete_expense(self, principal: Principal, expense_id: str) -> None:
        principal.require_admin()
        with self.session_factory() as session:
            expense = self.expenses.get_by_id(expense_id, session=session)
            if expense is None:
                raise NotFoundError("Expense", expense_id)
            reversal = invert(balance_effect_for_expense(expense))
            self.expenses.delete(expense, session=session)
            self.mutator.apply(session, reversal, record_kind="expense", record_id=expense_id)
        logger.info("Expense deleted", extra={"expense_id": expense_id, "user_id": principal.user_id})

    # ------------------------------------------------------------------
    # Credits
    # ------------------------------------------------------------------

    def list_credits(self, filters: LedgerFilters) -> list[Credit]:
        return self.credits.search(
            bank_account_id=filters.bank_account_id,
            site_id=filters.site_id,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )

    def get_credit(self, credit_id: str) -> Credit:
        credit = self.credits.get_by_id(credit_id)
        if credit is None:
            raise NotFoundError("Credit", credit_id)
        return credit

    def _check_credit_refs(self, session: Session, data: CreditInput) -> None:
        self._require_reference(session, Site, data.site_id, "Site")
        if data.payment_method is PaymentMethod.BANK_TRANSFER:
            self._require_account(session, data.bank_account_id)

    @staticmethod
    def _assign_credit(credit: Credit, data: CreditInput) -> None:
        credit.date = data.date
        credit.amount = data.amount
        credit.payment_method = data.payment_method.value
        credit.bank_account_id = (
            data.bank_account_id if data.payment_method is PaymentMethod.BANK_TRANSFER else None
        )
        credit.description = data.description
        credit.category = data.category
        credit.site_id = data.site_id or None

    def create_credit(self, principal: Principal, data: CreditInput) -> Credit:
        """Record money received; a bank transfer credits its account."""

        principal.require_writer()
        validate_credit_input(data)
        with self.session_factory() as session:
            self._check_credit_refs(session, data)
            credit = Credit(created_by=principal.user_id)  # type: ignore[call-arg]
            self._assign_credit(credit, data)
            self.credits.add(credit, session=session)
            self.mutator.apply(
                session,
                balance_effect_for_credit(credit),
                record_kind="credit",
                record_id=credit.id,
            )
            session.refresh(credit, _CREDIT_JOINS)
        logger.info("Credit created", extra={"credit_id": credit.id, "user_id": principal.user_id})
        return credit

    def update_credit(self, principal: Principal, credit_id: str, data: CreditInput) -> Credit:
        principal.require_writer()
        validate_credit_input(data)
        with self.session_factory() as session:
            credit = self.credits.get_by_id(credit_id, session=session)
            if credit is None:
                raise NotFoundError("Credit", credit_id)
            self._check_credit_refs(session, data)
            previous = balance_effect_for_credit(credit)
            self._assign_credit(credit, data)
            credit.updated_at = utcnow()
            self.credits.add(credit, session=session)
            self.mutator.apply(
                session,
                invert(previous) + balance_effect_for_credit(credit),
                record_kind="credit",
                record_id=credit.id,
            )
            session.refresh(credit, _CREDIT_JOINS)
        logger.info("Credit updated", extra={"credit_id": credit_id, "user_id": principal.user_id})
        return credit

    def delete_credit(self, principal: Principal, credit_id: str) -> None:
        principal.require_admin()
        with self.session_factory() as session:
            credit = self.credits.get_by_id(credit_id, session=session)
            if credit is None:
                raise NotFoundError("Credit", credit_id)
            reversal = invert(balance_effect_for_credit(credit))
            self.credits.delete(credit, session=session)
            self.mutator.apply(session, reversal, record_kind="credit", record_id=credit_id)
        logger.info("Credit deleted", extra={"credit_id": credit_id, "user_id": principal.user_id})

    # ------------------------------------------------------------------
    # Fund transfers
    # ------------------------------------------------------------------

    def list_fund_transfers(self, filters: LedgerFilters) -> list[FundTransfer]:
        return self.transfers.search(
            account_id=filters.bank_account_id,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )

    def get_fund_transfer(self, transfer_id: str) -> FundTransfer:
        transfer = self.transfers.get_by_id(transfer_id)
        if transfer is None:
            raise NotFoundError("Fund transfer", transfer_id)
        return transfer

    def create_fund_transfer(self, principal: Principal, data: FundTransferInput) -> FundTransfer:
        """Move money between two accounts: debit ``from``, credit ``to``."""

        principal.require_writer()
        validate_transfer_input(data)
        with self.session_factory() as session:
            self._require_account(session, data.from_account_id)
            self._require_account(session, data.to_account_id)
            transfer = FundTransfer(  # type: ignore[call-arg]
                from_account_id=data.from_account_id,
                to_account_id=data.to_account_id,
                amount=data.amount,
                date=data.date,
                description=data.description,
                created_by=principal.user_id,
            )
            self.transfers.add(transfer, session=session)
            self.mutator.apply(
                session,
                balance_effect_for_transfer(transfer),
                record_kind="transfer",
                record_id=transfer.id,
            )
            session.refresh(transfer, _TRANSFER_JOINS)
        logger.info(
            "Fund transfer created",
            extra={"transfer_id": transfer.id, "user_id": principal.user_id},
        )
        return transfer

    def delete_fund_transfer(self, principal: Principal, transfer_id: str) -> None:
        """Reverse both legs of a stored transfer, then remove it."""

        principal.require_admin()
        with self.session_factory() as session:
            transfer = self.transfers.get_by_id(transfer_id, session=session)
            if transfer is None:
                raise NotFoundError("Fund transfer", transfer_id)
            reversal = invert(balance_effect_for_transfer(transfer))
            self.transfers.delete(transfer, session=session)
            self.mutator.apply(session, reversal, record_kind="transfer", record_id=transfer_id)
        logger.info(
            "Fund transfer deleted",
            extra={"transfer_id": transfer_id, "user_id": principal.user_id},
        )
