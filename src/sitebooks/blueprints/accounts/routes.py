"""Bank account routes (read-only)."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...serializers import bank_account_to_dict, drift_to_dict
from ...services.reconcile import reconcile_accounts
from ..common import ledger_service
from . import bp


@bp.get("")
def list_bank_accounts():
    return jsonify([bank_account_to_dict(account) for account in ledger_service().list_bank_accounts()])


@bp.get("/reconciliation")
def reconciliation():
    """Stored balance versus opening balance plus live record effects."""

    with get_context().session_factory() as session:
        reports = reconcile_accounts(session)
    return jsonify(
        {
            "consistent": all(report.consistent for report in reports),
            "accounts": [drift_to_dict(report) for report in reports],
        }
    )


@bp.get("/<account_id>")
def get_bank_account(account_id: str):
    return jsonify(bank_account_to_dict(ledger_service().get_bank_account(account_id)))
