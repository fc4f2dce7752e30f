"""Exception hierarchy for ledger operations."""

from __future__ import annotations


class LedgerError(Exception):
    """Base error with a stable machine-readable code."""

    def __init__(self, message: str, code: str = "LEDGER_ERROR", status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Serialize the error in the API response shape."""
        return {"error": self.message, "code": self.code}


class ValidationError(LedgerError):
    """Raised for payload problems detected before any mutation."""

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message=message, code="INVALID_INPUT", status_code=422)
        self.errors = errors or {}

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        if self.errors:
            payload["fields"] = self.errors
        return payload


class NotFoundError(LedgerError):
    """Raised when a requested record does not exist."""

    def __init__(self, resource: str, record_id: str | None = None) -> None:
        label = f"{resource} {record_id}" if record_id else resource
        super().__init__(message=f"{label} not found", code="NOT_FOUND", status_code=404)
        self.resource = resource
        self.record_id = record_id


class AccountNotFoundError(NotFoundError):
    """Raised when a balance update targets a bank account that does not exist."""

    def __init__(self, account_id: str) -> None:
        super().__init__("Bank account", account_id)
        self.code = "ACCOUNT_NOT_FOUND"
        self.account_id = account_id


class ReferenceNotFoundError(LedgerError):
    """Raised when a site, vendor or category reference points nowhere."""

    def __init__(self, resource: str, record_id: str) -> None:
        super().__init__(
            message=f"{resource} {record_id} does not exist",
            code="INVALID_REFERENCE",
            status_code=422,
        )
        self.resource = resource
        self.record_id = record_id


class UnauthorizedError(LedgerError):
    """Raised when the caller carries no identity."""

    def __init__(self, reason: str = "Unauthorized") -> None:
        super().__init__(message=reason, code="UNAUTHORIZED", status_code=401)


class ForbiddenError(LedgerError):
    """Raised when the caller's role does not allow the action."""

    def __init__(self, reason: str = "You don't have permission") -> None:
        super().__init__(message=reason, code="FORBIDDEN", status_code=403)
