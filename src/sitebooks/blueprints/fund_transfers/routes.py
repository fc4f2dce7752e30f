"""Fund transfer routes."""

from __future__ import annotations

from flask import jsonify

from ...serializers import fund_transfer_to_dict
from ...services.reports import transfer_direction
from ..common import current_principal, json_payload, ledger_service, request_filters
from . import bp
from .forms import FundTransferForm


@bp.get("")
def list_fund_transfers():
    """Transfers in range; with ``bank_account_id`` each carries its direction."""

    filters = request_filters()
    transfers = ledger_service().list_fund_transfers(filters)
    payload = []
    for transfer in transfers:
        direction = transfer_direction(transfer, filters.bank_account_id)
        payload.append(fund_transfer_to_dict(transfer, direction.value if direction else None))
    return jsonify(payload)


@bp.post("")
def create_fund_transfer():
    principal = current_principal()
    data = FundTransferForm.from_mapping(json_payload()).to_input()
    transfer = ledger_service().create_fund_transfer(principal, data)
    return jsonify(fund_transfer_to_dict(transfer)), 201


@bp.get("/<transfer_id>")
def get_fund_transfer(transfer_id: str):
    return jsonify(fund_transfer_to_dict(ledger_service().get_fund_transfer(transfer_id)))


@bp.delete("/<transfer_id>")
def delete_fund_transfer(transfer_id: str):
    principal = current_principal()
    ledger_service().delete_fund_transfer(principal, transfer_id)
    return jsonify({"message": "Fund transfer deleted and balances reversed"})
