"""The authenticated caller passed explicitly into every ledger write."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ForbiddenError, UnauthorizedError
from ..models.enums import Role


@dataclass(frozen=True, slots=True)
class Principal:
    """Identity supplied by the external identity collaborator."""

    user_id: str
    role: Role = Role.VIEWER

    @classmethod
    def from_values(cls, user_id: str | None, role: str | None) -> Principal:
        """Build a principal from raw header values, rejecting missing or unknown ones."""

        if not user_id or not user_id.strip():
            raise UnauthorizedError("Missing user identity")
        try:
            parsed_role = Role((role or Role.VIEWER.value).strip().lower())
        except ValueError as exc:
            raise UnauthorizedError(f"Unknown role: {role}") from exc
        return cls(user_id=user_id.strip(), role=parsed_role)

    @property
    def can_write(self) -> bool:
        return self.role in (Role.ADMIN, Role.SITE_MANAGER)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def require_writer(self) -> None:
        if not self.can_write:
            raise ForbiddenError("Viewers cannot change ledger records")

    def require_admin(self) -> None:
        if not self.is_admin:
            raise ForbiddenError("Admins only")
