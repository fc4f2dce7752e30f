"""Concrete repository implementations using SQLModel."""

from .bank_account import SQLModelBankAccountRepository
from .credit import SQLModelCreditRepository
from .expense import SQLModelExpenseRepository
from .fund_transfer import SQLModelFundTransferRepository
from .master_data import SQLModelMasterDataRepository

__all__ = [
    "SQLModelBankAccountRepository",
    "SQLModelCreditRepository",
    "SQLModelExpenseRepository",
    "SQLModelFundTransferRepository",
    "SQLModelMasterDataRepository",
]
