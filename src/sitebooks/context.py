"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelBankAccountRepository
from .services.ledger_service import LedgerService
from .services.reports import ReportService


@dataclass
class AppContext:
    """Everything a request handler or CLI command needs, built once."""

    # Configuration
    config: BaseConfig

    # Database
    engine: Engine
    session_factory: SessionFactory

    # Repositories
    account_repo: SQLModelBankAccountRepository

    # Services
    ledger: LedgerService
    reports: ReportService


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        account_repo=SQLModelBankAccountRepository(session_factory),
        ledger=LedgerService(session_factory),
        reports=ReportService(session_factory),
    )
