"""Expense routes."""

from __future__ import annotations

from flask import jsonify

from ...serializers import expense_to_dict
from ..common import current_principal, json_payload, ledger_service, request_filters
from . import bp
from .forms import ExpenseForm


@bp.get("")
def list_expenses():
    """Expenses filtered by site, vendor, category, status, account and date range."""

    expenses = ledger_service().list_expenses(request_filters())
    return jsonify([expense_to_dict(expense) for expense in expenses])


@bp.post("")
def create_expense():
    principal = current_principal()
    data = ExpenseForm.from_mapping(json_payload()).to_input()
    expense = ledger_service().create_expense(principal, data)
    return jsonify(expense_to_dict(expense)), 201


@bp.get("/<expense_id>")
def get_expense(expense_id: str):
    return jsonify(expense_to_dict(ledger_service().get_expense(expense_id)))


@bp.put("/<expense_id>")
def update_expense(expense_id: str):
    principal = current_principal()
    data = ExpenseForm.from_mapping(json_payload()).to_input()
    expense = ledger_service().update_expense(principal, expense_id, data)
    return jsonify(expense_to_dict(expense))


@bp.delete("/<expense_id>")
def delete_expense(expense_id: str):
    principal = current_principal()
    ledger_service().delete_expense(principal, expense_id)
    return jsonify({"message": "Expense deleted successfully"})
