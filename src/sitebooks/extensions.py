"""Database and service wiring for the Flask app."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .context import AppContext, create_app_context

EXTENSION_KEY = "sitebooks"


def init_db(app: Flask) -> AppContext:
    """Create the engine, schema and services and attach them to ``app``."""

    config: BaseConfig = app.config["SITEBOOKS_CONFIG"]
    context = create_app_context(config)
    app.extensions[EXTENSION_KEY] = context
    return context


def get_context() -> AppContext:
    """Return the context bound to the active application."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:  # pragma: no cover - only when init_db was skipped
        raise RuntimeError("Database engine not initialized") from exc
