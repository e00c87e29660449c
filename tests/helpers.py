"""Payload builders shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
FEED_URL = "https://feed.test/macros/exec"


def feed_reading(moment: datetime, temperature: float = 22.5, humidity: int = 50) -> Dict[str, Any]:
    """A record shaped like the scripted endpoint's ``environmentData`` items."""
    return {
        "time": moment.strftime("%m/%d %H:%M"),
        "timestamp": int(moment.timestamp() * 1000),
        "temperature": temperature,
        "humidity": humidity,
        "illuminance": 120,
        "motion": 1,
        "aircon": None,
        "reservation": None,
        "reservationUser": "",
        "airconBar": 0,
        "reservationBar": 0,
    }


def canonical_payload(count: int, now: datetime = FIXED_NOW, with_current: bool = True) -> Dict[str, Any]:
    readings: List[Dict[str, Any]] = [
        feed_reading(now - timedelta(hours=count - 1 - index)) for index in range(count)
    ]
    payload: Dict[str, Any] = {"environmentData": readings}
    if with_current:
        payload["currentStatus"] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "temperature": 23.4,
            "humidity": 48,
            "illuminance": 130,
            "motion": 0,
        }
    return payload
