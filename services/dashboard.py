"""Acquisition and presentation state for the dashboard."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from functools import lru_cache
from typing import Callable, List, Optional, Set
from zoneinfo import ZoneInfo

from app.schemas import (
    CurrentStatus,
    DashboardSnapshot,
    DashboardState,
    DataSource,
    MessageKind,
    Reading,
    ScheduleDay,
)
from models.records import (
    Canonical,
    Compatibility,
    FetchFailure,
    FetchOutcome,
    UnexpectedShape,
)
from services.fallback import SampleDataGenerator
from services.feed import FeedClient
from settings import get_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def local_clock(timezone_name: Optional[str] = None) -> Clock:
    """Return a clock reading aware local time, in ``timezone_name`` if given."""
    if timezone_name:
        zone = ZoneInfo(timezone_name)
        return lambda: datetime.now(zone)
    return lambda: datetime.now().astimezone()


def failure_message(failure: FetchFailure) -> str:
    return f"Data fetch error: {failure.reason}. Showing sample data."


class DashboardController:
    """Owns the displayed dataset and the two timers that keep it current.

    One acquisition cycle runs at a time. A scheduled tick or manual refresh
    arriving while a cycle is in flight is skipped, and the dataset from the
    previous cycle stays visible until the new one resolves. All mutation
    happens on the event loop, so the busy flag is claimed without awaiting.
    """

    def __init__(
        self,
        feed: FeedClient,
        *,
        poll_interval: float = 300.0,
        clock_interval: float = 60.0,
        clock: Optional[Clock] = None,
        samples: Optional[SampleDataGenerator] = None,
    ) -> None:
        self.feed = feed
        self.poll_interval = poll_interval
        self.clock_interval = clock_interval
        self._clock = clock or local_clock()
        self._samples = samples or SampleDataGenerator()

        self._state = DashboardState.loading
        self._source = DataSource.none
        self._readings: List[Reading] = []
        self._current: Optional[CurrentStatus] = None
        self._schedule: List[ScheduleDay] = []
        self._message: Optional[str] = None
        self._message_kind: Optional[MessageKind] = None
        self._last_updated: Optional[datetime] = None
        self._now = self._clock()

        self._busy = False
        self._timers: List[asyncio.Task[None]] = []
        self._manual: Set[asyncio.Task[None]] = set()
        self.cycles_started = 0
        self.clock_ticks = 0

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def running(self) -> bool:
        return bool(self._timers)

    async def start(self) -> None:
        """Start the poll and clock timers; the first poll runs immediately."""
        if self._timers:
            return
        logger.info(
            "Starting dashboard timers (poll=%ss, clock=%ss)",
            self.poll_interval,
            self.clock_interval,
            extra={"endpoint": self.feed.endpoint_url},
        )
        self._timers = [
            asyncio.create_task(self._poll_loop(), name="dashboard-poll"),
            asyncio.create_task(self._clock_loop(), name="dashboard-clock"),
        ]

    async def stop(self) -> None:
        """Cancel both timers and any manual cycle, then release the HTTP client."""
        tasks = [*self._timers, *self._manual]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._timers = []
        self._manual.clear()
        await self.feed.aclose()
        logger.info("Dashboard timers stopped")

    async def refresh(self, trigger: str = "manual") -> bool:
        """Run one acquisition cycle now. Returns False if one is already running."""
        if not self._claim(trigger):
            return False
        await self._run_cycle(trigger)
        return True

    def request_refresh(self) -> bool:
        """Schedule a manual cycle on the running loop without waiting for it."""
        if not self._claim("manual"):
            return False
        task = asyncio.create_task(self._run_cycle("manual"))
        self._manual.add(task)
        task.add_done_callback(self._manual.discard)
        return True

    def apply(self, outcome: FetchOutcome) -> DashboardState:
        """Move the presentation state according to a classified outcome."""
        now = self._clock()
        if isinstance(outcome, Canonical):
            self._show_live(outcome.readings, outcome.current, now)
            self._message = None
            self._message_kind = None
            label = "canonical"
        elif isinstance(outcome, Compatibility):
            self._show_live(outcome.readings, outcome.current, now)
            self._message = outcome.advisory
            self._message_kind = MessageKind.advisory
            label = "compatibility"
        elif isinstance(outcome, FetchFailure):
            sample = self._samples.dataset(now)
            self._state = DashboardState.degraded
            self._source = DataSource.sample
            self._readings = sample.readings
            self._current = sample.current
            self._schedule = sample.schedule
            self._message = failure_message(outcome)
            self._message_kind = MessageKind.error
            label = outcome.kind.value
            logger.warning(
                "Falling back to sample data",
                extra={"outcome": label, "reason": outcome.reason},
            )
        else:
            raise TypeError(f"Unhandled acquisition outcome: {outcome!r}")

        self._last_updated = now
        logger.info(
            "Acquisition cycle resolved",
            extra={
                "outcome": label,
                "state": self._state.value,
                "reading_count": len(self._readings),
            },
        )
        return self._state

    def tick(self) -> datetime:
        """Advance the displayed wall clock."""
        self._now = self._clock()
        self.clock_ticks += 1
        return self._now

    def snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot(
            state=self._state,
            source=self._source,
            busy=self._busy,
            readings=list(self._readings),
            current=self._current,
            schedule=list(self._schedule),
            message=self._message,
            message_kind=self._message_kind,
            last_updated=self._last_updated,
            clock=self._now,
            endpoint_url=self.feed.endpoint_url,
        )

    def _claim(self, trigger: str) -> bool:
        if self._busy:
            logger.info("Acquisition cycle already in flight; skipping", extra={"trigger": trigger})
            return False
        self._busy = True
        return True

    async def _run_cycle(self, trigger: str) -> None:
        self.cycles_started += 1
        logger.debug("Acquisition cycle started", extra={"trigger": trigger})
        try:
            try:
                outcome = await self.feed.fetch(self._clock())
            except Exception as exc:
                logger.exception("Feed fetch raised", extra={"trigger": trigger})
                outcome = UnexpectedShape(
                    reason=f"Unreadable response ({type(exc).__name__})"
                )
            self.apply(outcome)
        finally:
            self._busy = False

    def _show_live(
        self,
        readings: List[Reading],
        current: Optional[CurrentStatus],
        now: datetime,
    ) -> None:
        self._state = DashboardState.live
        self._source = DataSource.live
        self._readings = readings
        self._current = current
        self._schedule = self._samples.schedule(now)

    async def _poll_loop(self) -> None:
        while True:
            try:
                await self.refresh(trigger="schedule")
            except Exception:
                logger.exception("Acquisition cycle crashed", extra={"trigger": "schedule"})
            await asyncio.sleep(self.poll_interval)

    async def _clock_loop(self) -> None:
        while True:
            await asyncio.sleep(self.clock_interval)
            self.tick()


@lru_cache
def build_default_controller() -> DashboardController:
    """Factory that wires the controller from environment settings."""
    settings = get_settings()
    feed = FeedClient(settings.endpoint_url, timeout=settings.request_timeout)
    return DashboardController(
        feed,
        poll_interval=settings.poll_interval,
        clock_interval=settings.clock_interval,
        clock=local_clock(settings.timezone),
    )
