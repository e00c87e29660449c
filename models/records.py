"""Tagged outcomes of a single acquisition cycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Optional, Union

from app.schemas import CurrentStatus, Reading

COMPATIBILITY_ADVISORY = "Live data received and converted from the compatibility format."


class FailureKind(str, Enum):
    network = "network"
    http = "http"
    malformed = "malformed"
    remote_error = "remote_error"
    unexpected_shape = "unexpected_shape"


@dataclass(slots=True)
class Canonical:
    """Payload with an ``environmentData`` list, taken as delivered."""

    readings: List[Reading]
    current: Optional[CurrentStatus] = None


@dataclass(slots=True)
class Compatibility:
    """Bare array of loosely typed records, coerced into readings."""

    readings: List[Reading]
    current: Optional[CurrentStatus] = None
    advisory: str = COMPATIBILITY_ADVISORY


@dataclass(slots=True)
class FetchFailure:
    """Any cycle that ends without usable live data."""

    reason: str
    kind: ClassVar[FailureKind]


@dataclass(slots=True)
class NetworkFailure(FetchFailure):
    kind = FailureKind.network


@dataclass(slots=True)
class HttpFailure(FetchFailure):
    status_code: int = 0
    kind = FailureKind.http


@dataclass(slots=True)
class Malformed(FetchFailure):
    kind = FailureKind.malformed


@dataclass(slots=True)
class RemoteError(FetchFailure):
    kind = FailureKind.remote_error


@dataclass(slots=True)
class UnexpectedShape(FetchFailure):
    kind = FailureKind.unexpected_shape


FetchOutcome = Union[Canonical, Compatibility, FetchFailure]
