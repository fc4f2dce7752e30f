"""Read access to sites, vendors and categories."""

from __future__ import annotations

from typing import Optional, Type, TypeVar

from sqlmodel import Session, SQLModel, select

from ...models.master_data import Site
from ._base import SQLModelRepository

_Row = TypeVar("_Row", bound=SQLModel)


class SQLModelMasterDataRepository(SQLModelRepository):
    """Reference dimensions consumed as foreign keys by the ledger."""

    def exists(self, model: Type[_Row], record_id: str, *, session: Optional[Session] = None) -> bool:
        with self._scope(session) as s:
            return s.get(model, record_id) is not None

    def list_sites(self, *, session: Optional[Session] = None) -> list[Site]:
        with self._scope(session) as s:
            return list(s.exec(select(Site).order_by(Site.site_name)).all())  # type: ignore[arg-type]

    def add(self, row: _Row, *, session: Optional[Session] = None) -> _Row:
        """Insert a reference row (used by seeding and tests)."""
        with self._scope(session) as s:
            s.add(row)
            s.flush()
            s.refresh(row)
            return row
