"""Enumerated filter record shared by ledger listings and reports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ..errors import ValidationError
from ..models.enums import PaymentStatus

NO_FILTER = "all"

# Query-string aliases accepted for the date bounds.
_START_KEYS = ("start_date", "date_from")
_END_KEYS = ("end_date", "date_to")


def normalize_filter_value(raw_value: Any) -> Optional[str]:
    """Return a nullable id, treating blanks and the ``all`` sentinel as None."""

    if raw_value is None:
        return None
    value = str(raw_value).strip()
    if not value or value.lower() == NO_FILTER:
        return None
    return value


def parse_iso_date(raw_value: Any, *, field: str) -> Optional[date]:
    """Parse an ISO-8601 date (a datetime string keeps only its date part)."""

    value = normalize_filter_value(raw_value)
    if value is None:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError as exc:
        raise ValidationError(
            f"Invalid {field}", {field: ["Enter a valid date (YYYY-MM-DD)."]}
        ) from exc


@dataclass(slots=True)
class LedgerFilters:
    """One optional field per recognized dimension; None means unfiltered."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    site_id: Optional[str] = None
    vendor_id: Optional[str] = None
    category_id: Optional[str] = None
    bank_account_id: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None

    @classmethod
    def from_mapping(cls, args: Mapping[str, Any]) -> LedgerFilters:
        """Build filters from query-string style data."""

        start_raw = next((args.get(key) for key in _START_KEYS if args.get(key)), None)
        end_raw = next((args.get(key) for key in _END_KEYS if args.get(key)), None)

        status_raw = normalize_filter_value(args.get("payment_status"))
        status: Optional[PaymentStatus] = None
        if status_raw is not None:
            try:
                status = PaymentStatus(status_raw.lower())
            except ValueError as exc:
                raise ValidationError(
                    "Invalid payment_status",
                    {"payment_status": [f"Unknown payment status: {status_raw}"]},
                ) from exc

        filters = cls(
            start_date=parse_iso_date(start_raw, field="start_date"),
            end_date=parse_iso_date(end_raw, field="end_date"),
            site_id=normalize_filter_value(args.get("site_id")),
            vendor_id=normalize_filter_value(args.get("vendor_id")),
            category_id=normalize_filter_value(args.get("category_id")),
            bank_account_id=normalize_filter_value(args.get("bank_account_id")),
            payment_status=status,
        )
        if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
            raise ValidationError(
                "Invalid date range", {"end_date": ["End date must not be before start date."]}
            )
        return filters

    @property
    def status_value(self) -> Optional[str]:
        return self.payment_status.value if self.payment_status else None


# Reports accept the same enumerated filter record as the ledger listings.
ReportFilters = LedgerFilters
