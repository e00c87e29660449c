"""Sample data shown whenever the live feed cannot be used."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from app.schemas import (
    CurrentStatus,
    Reading,
    ScheduleDay,
    ScheduleSlot,
    SlotStatus,
    time_label,
)

SAMPLE_HOURS = 72
SCHEDULE_DAYS = 3
SAMPLE_RESERVATION_LABEL = "Sample booking"

# Local wall-clock hours, inclusive at both ends.
RESERVED_WINDOWS: Tuple[Tuple[int, int], ...] = ((9, 11), (14, 16), (18, 20))

_ACTIVE_SLOT = "18:00-20:00"
_DAILY_SLOTS: Tuple[Tuple[str, str], ...] = (
    ("09:00-11:00", "Personal training"),
    ("14:00-16:00", "Group lesson"),
    (_ACTIVE_SLOT, "Sample guest"),
)


def fractional_hour(moment: datetime) -> float:
    return moment.hour + moment.minute / 60


def is_reserved(moment: datetime) -> bool:
    """Return True when ``moment`` falls inside one of the reserved windows."""
    hour = fractional_hour(moment)
    return any(start <= hour <= end for start, end in RESERVED_WINDOWS)


def needs_aircon(reserved: bool, temperature: float, humidity: int) -> bool:
    return reserved and (temperature > 25 or humidity > 65)


@dataclass
class SampleDataset:
    readings: List[Reading]
    current: CurrentStatus
    schedule: List[ScheduleDay]


class SampleDataGenerator:
    """Builds randomized but consistently shaped sample data.

    Generation depends only on the ``now`` passed in and the random source, so
    it can be driven deterministically from tests with a seeded ``random.Random``.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def readings(self, now: datetime) -> List[Reading]:
        readings: List[Reading] = []
        # Step in UTC so DST changes do not shift the local hour of a sample.
        anchor = now.astimezone(timezone.utc)
        for hours_ago in range(SAMPLE_HOURS - 1, -1, -1):
            moment = (anchor - timedelta(hours=hours_ago)).astimezone(now.tzinfo)
            readings.append(self._sample_reading(moment))
        return readings

    def current_status(self, now: datetime) -> CurrentStatus:
        return CurrentStatus(
            timestamp=now,
            temperature=25.5,
            humidity=60,
            illuminance=150,
            motion=1,
        )

    def schedule(self, now: datetime) -> List[ScheduleDay]:
        days: List[ScheduleDay] = []
        for offset in range(SCHEDULE_DAYS):
            moment = now + timedelta(days=offset)
            days.append(
                ScheduleDay(
                    day=moment.date(),
                    label=moment.strftime("%m/%d"),
                    weekday=moment.strftime("%a"),
                    slots=_daily_slots(active_today=offset == 0),
                )
            )
        return days

    def dataset(self, now: datetime) -> SampleDataset:
        return SampleDataset(
            readings=self.readings(now),
            current=self.current_status(now),
            schedule=self.schedule(now),
        )

    def _sample_reading(self, moment: datetime) -> Reading:
        reserved = is_reserved(moment)
        if reserved:
            temperature = round(self._rng.uniform(24.0, 28.0), 1)
            humidity = round(self._rng.uniform(55.0, 70.0))
        else:
            temperature = round(self._rng.uniform(20.0, 23.0), 1)
            humidity = round(self._rng.uniform(45.0, 55.0))
        return Reading(
            timestamp=moment,
            time=time_label(moment),
            temperature=temperature,
            humidity=humidity,
            illuminance=self._rng.randrange(50, 250),
            motion=1,
            aircon_active=needs_aircon(reserved, temperature, humidity),
            reserved=reserved,
            reservation_user=SAMPLE_RESERVATION_LABEL if reserved else None,
        )


def _daily_slots(active_today: bool) -> List[ScheduleSlot]:
    slots: List[ScheduleSlot] = []
    for time_range, user in _DAILY_SLOTS:
        active = active_today and time_range == _ACTIVE_SLOT
        slots.append(
            ScheduleSlot(
                time_range=time_range,
                user=user,
                status=SlotStatus.active if active else SlotStatus.confirmed,
            )
        )
    return slots

