"""Report routes."""

from __future__ import annotations

from flask import jsonify, request

from ...serializers import dashboard_to_dict, report_to_dict
from ...services.filters import parse_iso_date
from ..common import report_service, request_filters
from . import bp


@bp.get("/summary")
def summary():
    """Joined ledger rows with totals, site summary and account summary."""

    report = report_service().summary(request_filters())
    return jsonify(report_to_dict(report))


@bp.get("/dashboard")
def dashboard():
    today = parse_iso_date(request.args.get("today"), field="today")
    return jsonify(dashboard_to_dict(report_service().dashboard_stats(today)))
