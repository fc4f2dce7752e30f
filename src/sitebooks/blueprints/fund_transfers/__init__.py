"""Fund transfers blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("fund_transfers", __name__, url_prefix="/fund-transfers")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
