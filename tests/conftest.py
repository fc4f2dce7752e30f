"""Pytest configuration and shared fixtures for SiteBooks tests.

Every test gets its own temporary SQLite file, so repositories and services
run against a real database without touching the application data dir.
"""

from __future__ import annotations

import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import Session, create_engine

from sitebooks.infra.database import create_session_factory, init_database
from sitebooks.infra.repositories import SQLModelBankAccountRepository, SQLModelMasterDataRepository
from sitebooks.models import BankAccount, Category, Site, Vendor
from sitebooks.models.enums import PaymentMethod, PaymentStatus, Role
from sitebooks.services import (
    CreditInput,
    ExpenseInput,
    FundTransferInput,
    LedgerService,
    Principal,
    ReportService,
)

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    init_database(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """A plain session for direct assertions; committed on success."""

    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """The same transactional factory the application uses."""

    return create_session_factory(db_engine)


@pytest.fixture
def ledger(session_factory) -> LedgerService:
    return LedgerService(session_factory)


@pytest.fixture
def reports(session_factory) -> ReportService:
    return ReportService(session_factory)


# =============================================================================
# Principals
# =============================================================================


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id="admin-1", role=Role.ADMIN)


@pytest.fixture
def manager() -> Principal:
    return Principal(user_id="manager-1", role=Role.SITE_MANAGER)


@pytest.fixture
def viewer() -> Principal:
    return Principal(user_id="viewer-1", role=Role.VIEWER)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def master_data(session_factory) -> SQLModelMasterDataRepository:
    return SQLModelMasterDataRepository(session_factory)


@pytest.fixture
def site_factory(master_data):
    """Factory for creating construction sites."""

    def _create_site(site_name: str = "Tower A", location: str | None = "Pune") -> Site:
        return master_data.add(Site(site_name=site_name, location=location))

    return _create_site


@pytest.fixture
def vendor_factory(master_data):
    def _create_vendor(name: str = "Acme Cement", gst_number: str | None = None) -> Vendor:
        return master_data.add(Vendor(name=name, gst_number=gst_number))

    return _create_vendor


@pytest.fixture
def category_factory(master_data):
    def _create_category(category_name: str = "Materials") -> Category:
        return master_data.add(Category(category_name=category_name))

    return _create_category


@pytest.fixture
def bank_account_factory(session_factory):
    """Factory for creating bank accounts with an opening balance.

    Returns:
        Callable: Function that creates and persists BankAccount instances
    """
    repo = SQLModelBankAccountRepository(session_factory)

    def _create_account(
        account_name: str = "Main Account",
        opening_balance: Decimal | int | str = Decimal("0"),
        bank_name: str = "State Bank",
    ) -> BankAccount:
        account = BankAccount(
            account_name=account_name,
            bank_name=bank_name,
            account_number="000123",
            opening_balance=Decimal(str(opening_balance)),
        )
        return repo.create(account)

    return _create_account


@pytest.fixture
def balance_of(session_factory):
    """Read an account's stored balance straight from the table."""

    repo = SQLModelBankAccountRepository(session_factory)

    def _balance(account: BankAccount | str) -> Decimal | None:
        account_id = account if isinstance(account, str) else account.id
        return repo.refresh_balance(account_id)

    return _balance


@pytest.fixture
def refs(site_factory, vendor_factory, category_factory):
    """One site, vendor and category for expense inputs."""

    return {
        "site": site_factory(),
        "vendor": vendor_factory(),
        "category": category_factory(),
    }


@pytest.fixture
def expense_input(refs):
    """Build an :class:`ExpenseInput` against the shared reference rows."""

    def _build(
        amount: Decimal | str = "100",
        *,
        method: PaymentMethod = PaymentMethod.CASH,
        status: PaymentStatus = PaymentStatus.PAID,
        account: BankAccount | None = None,
        on: date = date(2024, 5, 10),
        site: Site | None = None,
    ) -> ExpenseInput:
        return ExpenseInput(
            site_id=(site or refs["site"]).id,
            vendor_id=refs["vendor"].id,
            category_id=refs["category"].id,
            date=on,
            amount=Decimal(str(amount)),
            description="Cement bags",
            payment_status=status,
            payment_method=method,
            bank_account_id=account.id if account else None,
        )

    return _build


@pytest.fixture
def credit_input():
    def _build(
        amount: Decimal | str = "100",
        *,
        method: PaymentMethod = PaymentMethod.BANK_TRANSFER,
        account: BankAccount | None = None,
        on: date = date(2024, 5, 11),
        site: Site | None = None,
    ) -> CreditInput:
        return CreditInput(
            date=on,
            amount=Decimal(str(amount)),
            payment_method=method,
            bank_account_id=account.id if account else None,
            description="Client milestone payment",
            category=site.site_name if site else "",
            site_id=site.id if site else None,
        )

    return _build


@pytest.fixture
def transfer_input():
    def _build(
        source: BankAccount,
        target: BankAccount,
        amount: Decimal | str = "100",
        on: date = date(2024, 5, 12),
    ) -> FundTransferInput:
        return FundTransferInput(
            from_account_id=source.id,
            to_account_id=target.id,
            amount=Decimal(str(amount)),
            date=on,
            description="Move funds",
        )

    return _build
