"""Flask CLI commands for SiteBooks."""

from __future__ import annotations

import sys

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("sitebooks-init-db")
    def sitebooks_init_db() -> None:
        """Create every table that does not exist yet."""

        from .extensions import get_context
        from .infra.database import init_database

        context = get_context()
        init_database(context.engine)
        click.echo(f"Database ready: {context.engine.url}")

    @app.cli.command("sitebooks-reconcile")
    def sitebooks_reconcile() -> None:
        """Compare stored balances with balances recomputed from live records."""

        from .extensions import get_context
        from .serializers import money
        from .services.reconcile import reconcile_accounts

        context = get_context()
        with context.session_factory() as session:
            reports = reconcile_accounts(session)

        drifted = [report for report in reports if not report.consistent]
        for report in reports:
            status = "ok" if report.consistent else f"DRIFT {money(report.drift)}"
            click.echo(
                f"{report.account_name}: balance={money(report.balance)} "
                f"expected={money(report.expected)} {status}"
            )
        if drifted:
            click.echo(f"{len(drifted)} account(s) out of balance", err=True)
            sys.exit(1)
        click.echo("All balances reconcile.")
