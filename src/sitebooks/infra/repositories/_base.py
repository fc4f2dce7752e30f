"""Shared plumbing for session-aware repositories."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlmodel import Session

from ..database import SessionFactory


class SQLModelRepository:
    """Base for repositories that can join a caller's unit of work.

    Every method accepts an optional ``session``. When given, the work runs
    inside it and the caller owns commit/rollback; otherwise the repository
    opens its own transactional scope from the factory.
    """

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @contextmanager
    def _scope(self, session: Optional[Session] = None) -> Iterator[Session]:
        if session is not None:
            yield session
            return
        with self.session_factory() as own_session:
            yield own_session
