"""SiteBooks application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .errors import LedgerError
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}

logger = get_logger("app")


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths registered on every app."""

    yield "sitebooks.blueprints.expenses"
    yield "sitebooks.blueprints.credits"
    yield "sitebooks.blueprints.fund_transfers"
    yield "sitebooks.blueprints.accounts"
    yield "sitebooks.blueprints.reports"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = _resolve_config(config_name)
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["SITEBOOKS_CONFIG"] = config_obj

    setup_logging(config_obj)

    _register_blueprints(app)
    _register_error_handlers(app)

    from .extensions import init_db

    init_db(app)
    _cli.init_app(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    logger.info("Application created", extra={"config": config_cls.__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    """Render every failure as a JSON body with ``error`` and ``code``."""

    @app.errorhandler(LedgerError)
    def _ledger_error(exc: LedgerError):
        logger.info("Request rejected", extra={"code": exc.code, "status": exc.status_code})
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        code = (exc.name or "error").upper().replace(" ", "_")
        return jsonify({"error": exc.description, "code": code}), exc.code or 500

    @app.errorhandler(IntegrityError)
    @app.errorhandler(OperationalError)
    def _store_conflict(exc: Exception):
        logger.warning("Store rejected write", extra={"error": str(exc)})
        return jsonify({"error": "The write conflicted with stored data", "code": "CONFLICT"}), 409

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error", "code": "INTERNAL_ERROR"}), 500


__all__ = ["create_app"]
