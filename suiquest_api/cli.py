"""
CLI entry point for SuiQuest API.
"""

import asyncio
import json
from typing import Any, Optional

import httpx
import structlog
import typer

from .bridge import SOURCE_CHAIN, WormholeClient, bridge_nft
from .config import get_settings
from .db import connect_database, mask_uri

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)

app = typer.Typer(
    name="suiquest",
    help="SuiQuest NFT game backend",
    add_completion=False,
)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Listen address (default: HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listen port (default: PORT)"),
) -> None:
    """
    Connect to MongoDB and start the HTTP server.
    """
    from .main import app as api_app, configure_logging, serve as serve_api

    settings = get_settings()
    overrides: dict[str, Any] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if overrides:
        settings = settings.model_copy(update=overrides)

    api_app.state.settings = settings
    configure_logging(settings)
    asyncio.run(serve_api(settings, api_app))


@app.command("check-db")
def check_db() -> None:
    """
    Check that DB_URI is reachable (exit status 1 if not).
    """
    settings = get_settings()

    async def _check() -> str:
        database = await connect_database(settings)
        name = database.name
        await database.close()
        return name

    name = asyncio.run(_check())
    typer.echo(f"✓ Connected to {mask_uri(settings.db_uri or '')} (database: {name})")


@app.command()
def bridge(
    nft_id: str = typer.Argument(..., help="NFT object id on Sui"),
    destination_chain: str = typer.Argument(..., help="Destination chain name"),
    bridge_url: Optional[str] = typer.Option(
        None,
        "--bridge-url",
        help="Transfer service URL (default: BRIDGE_URL)",
    ),
) -> None:
    """
    Bridge an NFT from Sui to another chain.
    """
    settings = get_settings()
    client = WormholeClient(bridge_url or settings.bridge_url, timeout=settings.external_timeout)

    async def _bridge() -> Any:
        try:
            return await bridge_nft(client, nft_id, destination_chain)
        finally:
            await client.close()

    typer.echo(f"Bridging {nft_id}: {SOURCE_CHAIN} -> {destination_chain}")
    try:
        result = asyncio.run(_bridge())
    except (httpx.HTTPError, ValueError) as e:
        typer.echo(f"✗ Transfer failed: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result, indent=2))


@app.command()
def version() -> None:
    """Show the API version."""
    from suiquest_api import __version__
    typer.echo(f"suiquest-api v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
