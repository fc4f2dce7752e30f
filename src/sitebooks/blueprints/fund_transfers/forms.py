"""Fund transfer payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...services.ledger_service import FundTransferInput
from ..common import BaseForm


@dataclass(slots=True)
class FundTransferForm(BaseForm):
    fields = ("from_account_id", "to_account_id", "amount", "date", "description")

    def to_input(self) -> FundTransferInput:
        """Reject self-transfers here so no balance is ever touched for them."""

        self.errors.clear()
        from_account_id = self._required_id("from_account_id", "Source account")
        to_account_id = self._required_id("to_account_id", "Destination account")
        amount = self._amount()
        date = self._date("date")
        description = self._text("description")
        if from_account_id and from_account_id == to_account_id:
            self._add_error("to_account_id", "Must differ from the source account.")

        self.raise_for_errors("Invalid fund transfer")
        return FundTransferInput(
            from_account_id=from_account_id,  # type: ignore[arg-type]
            to_account_id=to_account_id,  # type: ignore[arg-type]
            amount=amount,  # type: ignore[arg-type]
            date=date,  # type: ignore[arg-type]
            description=description,
        )
