"""Request helpers shared by the JSON blueprints."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, ClassVar, Optional, TypeVar

from flask import request

from ..errors import ValidationError
from ..extensions import get_context
from ..services.filters import LedgerFilters
from ..services.ledger_service import MAX_AMOUNT, LedgerService
from ..services.principal import Principal
from ..services.reports import ReportService

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"

_E = TypeVar("_E", bound=Enum)


def current_principal() -> Principal:
    """Identity forwarded by the gateway in front of this service."""

    return Principal.from_values(
        request.headers.get(USER_ID_HEADER), request.headers.get(USER_ROLE_HEADER)
    )


def json_payload() -> Mapping[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


def request_filters() -> LedgerFilters:
    return LedgerFilters.from_mapping(request.args)


def ledger_service() -> LedgerService:
    return get_context().ledger


def report_service() -> ReportService:
    return get_context().reports


@dataclass(slots=True)
class BaseForm:
    """Collects raw string values and per-field errors for JSON bodies."""

    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    fields: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        """Create a form populated from request data."""

        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        self.raw_data = {}
        for key in self.fields:
            value = data.get(key)
            if value is None:
                value_str = ""
            elif isinstance(value, str):
                value_str = value
            else:
                value_str = str(value)
            self.raw_data[key] = value_str.strip()

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)

    def _text(self, key: str, *, max_length: int = 500) -> str:
        value = self.raw_data.get(key, "")
        if len(value) > max_length:
            self._add_error(key, f"Must be {max_length} characters or fewer.")
        return value

    def _required_id(self, key: str, label: str) -> Optional[str]:
        value = self.raw_data.get(key, "")
        if not value:
            self._add_error(key, f"{label} is required.")
            return None
        return value

    def _date(self, key: str) -> Optional[dt.date]:
        raw = self.raw_data.get(key, "")
        if not raw:
            self._add_error(key, "Date is required.")
            return None
        try:
            return dt.date.fromisoformat(raw[:10])
        except ValueError:
            self._add_error(key, "Enter a valid date (YYYY-MM-DD).")
            return None

    def _amount(self, key: str = "amount") -> Optional[Decimal]:
        raw = self.raw_data.get(key, "")
        if not raw:
            self._add_error(key, "Amount is required.")
            return None
        try:
            parsed = Decimal(raw)
        except InvalidOperation:
            self._add_error(key, "Enter a valid number for the amount.")
            return None
        if not parsed.is_finite() or parsed <= 0:
            self._add_error(key, "Amount must be greater than zero.")
            return None
        if parsed >= MAX_AMOUNT:
            self._add_error(key, "Amount must be below 1,000,000,000,000.")
            return None
        try:
            cents = parsed.quantize(Decimal("0.01"))
        except InvalidOperation:
            self._add_error(key, "Enter a valid number for the amount.")
            return None
        if parsed != cents:
            self._add_error(key, "Amount can have at most two decimal places.")
            return None
        return parsed

    def _choice(self, key: str, enum_cls: type[_E], default: _E) -> _E:
        raw = self.raw_data.get(key, "")
        if not raw:
            return default
        try:
            return enum_cls(raw.lower())
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            self._add_error(key, f"Must be one of: {allowed}.")
            return default

    def raise_for_errors(self, message: str) -> None:
        if self.errors:
            raise ValidationError(message, dict(self.errors))
