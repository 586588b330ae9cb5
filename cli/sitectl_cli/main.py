from __future__ import annotations

import typer

from .commands import provision_cmd


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="sitectl",
        help="Provision an nginx virtual host with HTTPS.",
        add_completion=False,
    )
    app.command()(provision_cmd.provision_site)
    return app


app = _build_app()
