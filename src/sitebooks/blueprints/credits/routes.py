"""Credit routes."""

from __future__ import annotations

from flask import jsonify

from ...serializers import credit_to_dict
from ..common import current_principal, json_payload, ledger_service, request_filters
from . import bp
from .forms import CreditForm


@bp.get("")
def list_credits():
    credits = ledger_service().list_credits(request_filters())
    return jsonify([credit_to_dict(credit) for credit in credits])


@bp.post("")
def create_credit():
    principal = current_principal()
    data = CreditForm.from_mapping(json_payload()).to_input()
    credit = ledger_service().create_credit(principal, data)
    return jsonify(credit_to_dict(credit)), 201


@bp.get("/<credit_id>")
def get_credit(credit_id: str):
    return jsonify(credit_to_dict(ledger_service().get_credit(credit_id)))


@bp.put("/<credit_id>")
def update_credit(credit_id: str):
    principal = current_principal()
    data = CreditForm.from_mapping(json_payload()).to_input()
    credit = ledger_service().update_credit(principal, credit_id, data)
    return jsonify(credit_to_dict(credit))


@bp.delete("/<credit_id>")
def delete_credit(credit_id: str):
    principal = current_principal()
    ledger_service().delete_credit(principal, credit_id)
    return jsonify({"message": "Credit deleted successfully"})
