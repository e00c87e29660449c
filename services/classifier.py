"""Routes a decoded feed response to one of the acquisition outcomes."""

from __future__ import annotations

import json
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence, TypeVar

from pydantic import ValidationError

from app.schemas import CurrentStatus, Reading, time_label
from models.records import (
    Canonical,
    Compatibility,
    FetchOutcome,
    Malformed,
    RemoteError,
    UnexpectedShape,
)

COMPATIBILITY_SPACING = timedelta(minutes=5)

DEFAULT_TEMPERATURE = 25.0
DEFAULT_HUMIDITY = 50
DEFAULT_ILLUMINANCE = 100
DEFAULT_MOTION = 1

_TEMPERATURE_KEYS = ("temperature", "temp")
_HUMIDITY_KEYS = ("humidity", "hum")
_ILLUMINANCE_KEYS = ("illuminance", "light", "lux")
_MOTION_KEYS = ("motion",)

# Epoch values above this are milliseconds (roughly year 5138 in seconds).
_EPOCH_MS_THRESHOLD = 1e11

T = TypeVar("T")


def classify_body(body: str, now: datetime) -> FetchOutcome:
    """Decode ``body`` as JSON and classify it."""
    try:
        data = json.loads(body)
    except ValueError:
        return Malformed(reason="Response body is not valid JSON")
    except RecursionError:
        return Malformed(reason="Response body is nested too deeply")
    return classify_payload(data, now)


def classify_payload(data: Any, now: datetime) -> FetchOutcome:
    if isinstance(data, dict):
        error = data.get("error")
        if error:
            return RemoteError(reason=f"Remote endpoint error: {error}")
        readings = data.get("environmentData")
        if isinstance(readings, list):
            return _canonical(readings, data.get("currentStatus"))
        return UnexpectedShape(reason="Response object has no environmentData list")
    if isinstance(data, list):
        return _compatibility(data, now)
    return UnexpectedShape(
        reason=f"Unexpected response of type {type(data).__name__}"
    )


def _canonical(items: Sequence[Any], current_raw: Any) -> FetchOutcome:
    readings: List[Reading] = []
    for index, item in enumerate(items):
        try:
            readings.append(Reading.model_validate(item))
        except ValidationError:
            return UnexpectedShape(reason=f"environmentData[{index}] is not a valid reading")

    current: Optional[CurrentStatus] = None
    if current_raw is not None:
        try:
            current = CurrentStatus.model_validate(current_raw)
        except ValidationError:
            return UnexpectedShape(reason="currentStatus is not a valid status record")
    return Canonical(readings=readings, current=current)


def _compatibility(items: Sequence[Any], now: datetime) -> FetchOutcome:
    count = len(items)
    readings: List[Reading] = []
    for index, item in enumerate(items):
        # Scalars and nested arrays carry no named fields; they take the defaults.
        record = item if isinstance(item, Mapping) else {}
        slot = now - (count - index) * COMPATIBILITY_SPACING
        readings.append(coerce_record(record, slot, now))

    current = CurrentStatus.from_reading(readings[-1]) if readings else None
    return Compatibility(readings=readings, current=current)


def coerce_record(record: Mapping[str, Any], slot: datetime, now: datetime) -> Reading:
    """Coerce a loosely typed sensor record into a Reading.

    ``slot`` is the synthesized timestamp used when the record carries no
    usable ``timestamp`` of its own.
    """
    timestamp = _parse_timestamp(record.get("timestamp"), now) or slot
    return Reading(
        timestamp=timestamp,
        time=time_label(timestamp.astimezone(now.tzinfo) if now.tzinfo else timestamp),
        temperature=_first(record, _TEMPERATURE_KEYS, _to_float, DEFAULT_TEMPERATURE),
        humidity=_first(record, _HUMIDITY_KEYS, _to_int, DEFAULT_HUMIDITY),
        illuminance=_first(record, _ILLUMINANCE_KEYS, _to_int, DEFAULT_ILLUMINANCE),
        motion=_first(record, _MOTION_KEYS, _to_int, DEFAULT_MOTION),
    )


def _first(
    record: Mapping[str, Any],
    keys: Sequence[str],
    parse: Callable[[Any], Optional[T]],
    default: T,
) -> T:
    for key in keys:
        parsed = parse(record.get(key))
        if parsed is not None:
            return parsed
    return default


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _to_int(value: Any) -> Optional[int]:
    parsed = _to_float(value)
    if parsed is None:
        return None
    return int(parsed)


def _parse_timestamp(value: Any, now: datetime) -> Optional[datetime]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        seconds = value / 1000 if value > _EPOCH_MS_THRESHOLD else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    candidate = value.strip()
    if not candidate:
        return None
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=now.tzinfo or timezone.utc)
    return parsed
