"""Projection of readings onto the temperature/humidity line chart."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from app.schemas import Reading

CHART_STEP = 3
Y_DOMAIN = (0.0, 80.0)
Y_TICKS = (0, 20, 40, 60, 80)


@dataclass(slots=True)
class ChartPoint:
    x: float
    temperature_y: float
    humidity_y: float
    label: str
    temperature: float
    humidity: int
    reservation_user: Optional[str] = None


@dataclass(slots=True)
class ChartTick:
    y: float
    value: int


@dataclass(slots=True)
class ChartData:
    width: int
    height: int
    left: int
    bottom: int
    points: List[ChartPoint] = field(default_factory=list)
    ticks: List[ChartTick] = field(default_factory=list)

    @property
    def temperature_polyline(self) -> str:
        return " ".join(f"{p.x:.1f},{p.temperature_y:.1f}" for p in self.points)

    @property
    def humidity_polyline(self) -> str:
        return " ".join(f"{p.x:.1f},{p.humidity_y:.1f}" for p in self.points)

    @property
    def first_label(self) -> Optional[str]:
        return self.points[0].label if self.points else None

    @property
    def last_label(self) -> Optional[str]:
        return self.points[-1].label if self.points else None


def downsample(readings: Sequence[Reading], step: int = CHART_STEP) -> List[Reading]:
    """Keep every ``step``-th reading, starting with the first."""
    if step < 1:
        raise ValueError("step must be a positive integer")
    return list(readings[::step])


def build_chart(
    readings: Sequence[Reading],
    *,
    step: int = CHART_STEP,
    width: int = 360,
    height: int = 250,
    left: int = 30,
    bottom: int = 20,
) -> ChartData:
    chart = ChartData(width=width, height=height, left=left, bottom=bottom)
    plot_width = width - left
    plot_height = height - bottom
    low, high = Y_DOMAIN

    def project(value: float) -> float:
        clipped = min(max(value, low), high)
        return plot_height - (clipped - low) / (high - low) * plot_height

    chart.ticks = [ChartTick(y=project(value), value=value) for value in Y_TICKS]

    sampled = downsample(readings, step)
    count = len(sampled)
    for index, reading in enumerate(sampled):
        fraction = index / (count - 1) if count > 1 else 0.5
        chart.points.append(
            ChartPoint(
                x=left + fraction * plot_width,
                temperature_y=project(reading.temperature),
                humidity_y=project(reading.humidity),
                label=reading.time or "",
                temperature=reading.temperature,
                humidity=reading.humidity,
                reservation_user=reading.reservation_user,
            )
        )
    return chart
