"""Credit payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...models.enums import PaymentMethod
from ...services.ledger_service import CreditInput
from ..common import BaseForm


@dataclass(slots=True)
class CreditForm(BaseForm):
    fields = (
        "date",
        "amount",
        "payment_method",
        "bank_account_id",
        "description",
        "category",
        "site_id",
    )

    def to_input(self) -> CreditInput:
        self.errors.clear()
        date = self._date("date")
        amount = self._amount()
        method = self._choice("payment_method", PaymentMethod, PaymentMethod.CASH)
        bank_account_id = self.raw_data.get("bank_account_id") or None
        if method is PaymentMethod.BANK_TRANSFER and not bank_account_id:
            self._add_error("bank_account_id", "Required for bank transfers.")
        description = self._text("description")
        category = self._text("category", max_length=128)

        self.raise_for_errors("Invalid credit")
        return CreditInput(
            date=date,  # type: ignore[arg-type]
            amount=amount,  # type: ignore[arg-type]
            payment_method=method,
            bank_account_id=bank_account_id,
            description=description,
            category=category,
            site_id=self.raw_data.get("site_id") or None,
        )
