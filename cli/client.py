from __future__ import annotations

import time
from typing import Any, Dict

import httpx
import typer

from cli.config import CLIConfig


class DashboardApiClient:
    """Minimal HTTP client for a running dashboard service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=30.0)

    def close(self) -> None:
        self._client.close()

    def get_snapshot(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/api/dashboard")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            self._handle_transport_error(exc)
        return response.json()

    def request_refresh(self) -> bool:
        try:
            response = self._client.post("/api/refresh")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            self._handle_transport_error(exc)
        accepted = response.json().get("accepted")
        if not isinstance(accepted, bool):
            raise typer.BadParameter("Unexpected response payload when requesting a refresh.")
        return accepted

    def wait_until_idle(self, interval: float, timeout: float) -> Dict[str, Any]:
        """Poll the snapshot until no acquisition cycle is in flight."""
        deadline = time.monotonic() + timeout
        last_payload: Dict[str, Any] | None = None
        while time.monotonic() <= deadline:
            last_payload = self.get_snapshot()
            if not last_payload.get("busy"):
                return last_payload
            time.sleep(interval)
        typer.secho(
            (
                f"Timed out after {timeout}s waiting for the refresh to finish. "
                f"Last state: {last_payload.get('state') if last_payload else 'unknown'}"
            ),
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    def _handle_transport_error(self, exc: httpx.TransportError) -> None:
        typer.secho(
            f"Could not reach the dashboard at {self._config.base_url}: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
