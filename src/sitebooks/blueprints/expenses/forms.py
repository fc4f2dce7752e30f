"""Expense payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...models.enums import PaymentMethod, PaymentStatus
from ...services.ledger_service import ExpenseInput
from ..common import BaseForm


@dataclass(slots=True)
class ExpenseForm(BaseForm):
    """Validates an expense body and converts it into :class:`ExpenseInput`."""

    fields = (
        "site_id",
        "vendor_id",
        "category_id",
        "date",
        "amount",
        "description",
        "payment_status",
        "payment_method",
        "bank_account_id",
    )

    def to_input(self) -> ExpenseInput:
        """Validate the bound data; raise ``ValidationError`` listing every problem."""

        self.errors.clear()
        site_id = self._required_id("site_id", "Site")
        vendor_id = self._required_id("vendor_id", "Vendor")
        category_id = self._required_id("category_id", "Category")
        date = self._date("date")
        amount = self._amount()
        description = self._text("description")
        status = self._choice("payment_status", PaymentStatus, PaymentStatus.UNPAID)
        method = self._choice("payment_method", PaymentMethod, PaymentMethod.CASH)
        bank_account_id = self.raw_data.get("bank_account_id") or None

        if (
            method is PaymentMethod.BANK_TRANSFER
            and status is PaymentStatus.PAID
            and not bank_account_id
        ):
            self._add_error("bank_account_id", "Required when a bank transfer is marked paid.")

        self.raise_for_errors("Invalid expense")
        return ExpenseInput(
            site_id=site_id,  # type: ignore[arg-type]
            vendor_id=vendor_id,  # type: ignore[arg-type]
            category_id=category_id,  # type: ignore[arg-type]
            date=date,  # type: ignore[arg-type]
            amount=amount,  # type: ignore[arg-type]
            description=description,
            payment_status=status,
            payment_method=method,
            bank_account_id=bank_account_id,
        )
