"""Command line entry point: ``guild-hall serve`` and ``guild-hall health``."""

import asyncio
import json

import typer
from rich import print

from guild_hall.services.config import get_config
from guild_hall.services.daemon_client import DaemonClient

app = typer.Typer(name="guild-hall", help="Guild Hall web layer for the daemon.", no_args_is_help=True)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
    log_level: str = typer.Option("info", "--log-level", help="Logging level"),
):
    """Run the HTTP API in the foreground."""
    from guild_hall.api.main import run_server

    run_server(host=host, port=port, log_level=log_level)


async def _fetch_health() -> dict:
    client = DaemonClient.from_config(get_config())
    try:
        return await client.health()
    finally:
        await client.close()


@app.command()
def health(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the daemon's health document."""
    status = asyncio.run(_fetch_health())

    if json_output:
        print(json.dumps(status, indent=2))
        return

    if status.get("status") == "offline":
        print("[dim]Daemon is not running[/dim]")
        raise typer.Exit(code=1)

    print(f"[bold green]Daemon is {status.get('status', 'up')}[/bold green]")
    for key, value in status.items():
        if key != "status":
            print(f"  {key}: {value}")


def main():
    app()


if __name__ == "__main__":
    main()
