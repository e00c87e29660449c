from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

_MESSAGE_COLORS = {
    "error": typer.colors.YELLOW,
    "advisory": typer.colors.BLUE,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _or_dash(value: Any) -> Any:
    return "--" if value is None else value


def render_snapshot(payload: Dict[str, Any]) -> None:
    echo_heading("Dashboard")
    echo_key_values(
        [
            ("state", payload.get("state")),
            ("source", payload.get("source")),
            ("busy", payload.get("busy")),
            ("last_updated", payload.get("last_updated")),
            ("endpoint", payload.get("endpoint_url")),
        ]
    )

    message = payload.get("message")
    if message:
        typer.echo()
        typer.secho(message, fg=_MESSAGE_COLORS.get(payload.get("message_kind") or "", None))

    current = payload.get("current") or {}
    typer.echo()
    echo_heading("Current")
    if current:
        echo_key_values(
            [
                ("timestamp", current.get("timestamp")),
                ("temperature", f"{_or_dash(current.get('temperature'))} C"),
                ("humidity", f"{_or_dash(current.get('humidity'))} %"),
                ("illuminance", f"{_or_dash(current.get('illuminance'))} lux"),
                ("motion", current.get("motion")),
            ]
        )
    else:
        typer.echo("No current values available.")

    readings = payload.get("readings") or []
    typer.echo()
    echo_heading("Readings")
    typer.echo(f"count: {len(readings)}")
    if readings:
        latest = readings[-1]
        typer.echo(
            f"latest: {latest.get('time')} {latest.get('temperature')} C {latest.get('humidity')} %"
        )

    schedule = payload.get("schedule") or []
    typer.echo()
    echo_heading("Schedule")
    if schedule:
        for day in schedule:
            typer.echo(f"{day.get('label')} ({day.get('weekday')})")
            for slot in day.get("slots") or []:
                marker = " [in use]" if slot.get("status") == "active" else ""
                typer.echo(f"  - {slot.get('time_range')} {slot.get('user')}{marker}")
    else:
        typer.echo("No schedule available.")
