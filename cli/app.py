from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer
import uvicorn

from cli.client import DashboardApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_snapshot
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: DashboardApiClient


app = typer.Typer(
    help="Run and inspect the gym environment dashboard.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Dashboard service URL (defaults to DASHBOARD_BASE_URL env or http://localhost:8000).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between status checks when waiting for a refresh.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Maximum seconds to wait for a refresh to finish.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(
        base_url=base_url,
        poll_interval=poll_interval,
        poll_timeout=timeout,
    )
    client = DashboardApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind."),
) -> None:
    """Run the dashboard service; polling starts with the application."""
    settings = get_settings()
    typer.echo(f"Serving dashboard on http://{host}:{port}/ui (feed: {settings.endpoint_url})")
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show the dashboard state of a running service."""
    state = _get_state(ctx)
    render_snapshot(state.client.get_snapshot())


@app.command("refresh")
def refresh_command(
    ctx: typer.Context,
    wait: bool = typer.Option(
        True,
        "--wait/--no-wait",
        help="Wait for the acquisition cycle to finish and display the result.",
    ),
) -> None:
    """Ask a running service to poll the feed now."""
    state = _get_state(ctx)
    accepted = state.client.request_refresh()
    if accepted:
        typer.secho("Refresh started.", fg=typer.colors.GREEN)
    else:
        typer.secho("A refresh is already in progress.", fg=typer.colors.YELLOW)

    if not wait:
        return

    result = state.client.wait_until_idle(
        interval=state.config.poll_interval,
        timeout=state.config.poll_timeout,
    )
    typer.echo()
    render_snapshot(result)
