"""Pydantic schemas shared by the acquisition services and the HTTP layer."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

TIME_LABEL_FORMAT = "%m/%d %H:%M"


def time_label(moment: datetime) -> str:
    return moment.strftime(TIME_LABEL_FORMAT)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _round_number(value: Any) -> Any:
    if isinstance(value, float):
        return round(value)
    return value


class DashboardState(str, Enum):
    """Lifecycle of the presentation state."""

    loading = "loading"
    live = "live"
    degraded = "degraded"


class DataSource(str, Enum):
    """Where the currently displayed dataset came from."""

    none = "none"
    live = "live"
    sample = "sample"


class MessageKind(str, Enum):
    advisory = "advisory"
    error = "error"


class SlotStatus(str, Enum):
    confirmed = "confirmed"
    active = "active"


class Reading(BaseModel):
    """A single timestamped environmental sample."""

    timestamp: datetime
    time: Optional[str] = Field(default=None, description="Display label, MM/DD HH:MM.")
    temperature: float
    humidity: int
    illuminance: int
    motion: int = 1
    aircon_active: Optional[bool] = None
    reserved: bool = False
    reservation_user: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _map_feed_markers(cls, data: Any) -> Any:
        # The scripted endpoint marks air conditioning and reservations with
        # chart offsets (``aircon: 30``, ``reservation: 10``) or null.
        if not isinstance(data, dict):
            return data
        mapped = dict(data)
        if "aircon_active" not in mapped and "aircon" in mapped:
            mapped["aircon_active"] = bool(mapped["aircon"])
        if "reserved" not in mapped and "reservation" in mapped:
            mapped["reserved"] = bool(mapped["reservation"])
        if "reservation_user" not in mapped and "reservationUser" in mapped:
            mapped["reservation_user"] = mapped["reservationUser"] or None
        return mapped

    @field_validator("humidity", "illuminance", "motion", mode="before")
    @classmethod
    def _round_integers(cls, value: Any) -> Any:
        return _round_number(value)

    @field_validator("timestamp")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        return _as_aware(value)

    @model_validator(mode="after")
    def _fill_time_label(self) -> "Reading":
        if not self.time:
            self.time = time_label(self.timestamp)
        return self


class CurrentStatus(BaseModel):
    """Latest values shown on the summary cards."""

    timestamp: datetime
    temperature: float
    humidity: int
    illuminance: int
    motion: int = 1

    @field_validator("humidity", "illuminance", "motion", mode="before")
    @classmethod
    def _round_integers(cls, value: Any) -> Any:
        return _round_number(value)

    @field_validator("timestamp")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        return _as_aware(value)

    @classmethod
    def from_reading(cls, reading: Reading) -> "CurrentStatus":
        return cls(
            timestamp=reading.timestamp,
            temperature=reading.temperature,
            humidity=reading.humidity,
            illuminance=reading.illuminance,
            motion=reading.motion,
        )


class ScheduleSlot(BaseModel):
    time_range: str = Field(..., description="Local time range, e.g. 09:00-11:00.")
    user: str
    status: SlotStatus = SlotStatus.confirmed


class ScheduleDay(BaseModel):
    day: date
    label: str = Field(..., description="Date label, MM/DD.")
    weekday: str
    slots: List[ScheduleSlot] = Field(default_factory=list)


class DashboardSnapshot(BaseModel):
    """Read-only view of the presentation state at one instant."""

    state: DashboardState
    source: DataSource
    busy: bool
    readings: List[Reading] = Field(default_factory=list)
    current: Optional[CurrentStatus] = None
    schedule: List[ScheduleDay] = Field(default_factory=list)
    message: Optional[str] = None
    message_kind: Optional[MessageKind] = None
    last_updated: Optional[datetime] = None
    clock: datetime
    endpoint_url: str


class RefreshResponse(BaseModel):
    accepted: bool = Field(
        ..., description="False when an acquisition cycle was already in flight."
    )
