"""Click CLI for running the bridge and checking tenant configuration."""

from __future__ import annotations

import json
import os
import sys

import click
import uvicorn
from pydantic import ValidationError

from src.auth.resolver import AuthResolver
from src.models import TenantAuth


@click.group()
def cli() -> None:
    """Roman broadcast bridge."""


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind.")
@click.option("--port", default=None, type=int, help="Port to listen on (default: $PORT or 8080).")
def serve(host: str, port: int | None) -> None:
    """Run the webhook server."""
    uvicorn.run(
        "src.server.app:create_app_from_env",
        factory=True,
        host=host,
        port=port or int(os.environ.get("PORT", "8080")),
        log_config=None,
    )


@cli.command("check-config")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
def check_config(config_path: str) -> None:
    """Validate a tenant configuration file."""
    try:
        entries = AuthResolver(config_path).load()
    except (json.JSONDecodeError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    output = []
    incomplete = 0
    for token, entry in entries.items():
        try:
            tenant = TenantAuth.model_validate(entry)
            output.append({
                "token": f"{token[:4]}...",
                "admins": len(tenant.admin_user_ids),
                "complete": True,
            })
        except ValidationError as exc:
            incomplete += 1
            output.append({
                "token": f"{token[:4]}...",
                "complete": False,
                "errors": [".".join(str(p) for p in e["loc"]) for e in exc.errors()],
            })
    click.echo(json.dumps(output, indent=2))
    if incomplete:
        sys.exit(1)


if __name__ == "__main__":
    cli()
