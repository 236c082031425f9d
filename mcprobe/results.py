"""Result types shared by every probe, plus latency reconciliation."""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

DEFAULT_PING_MS = 100
MIN_PING_MS = 1
MAX_PING_MS = 1000


class Edition(str, Enum):
    JAVA = 'java'
    BEDROCK = 'bedrock'


class LatencySource(str, Enum):
    MEASURED = 'measured'
    QUERY_REPORTED = 'query_reported'
    DEFAULT = 'default'


@dataclass(frozen=True)
class ProbeTarget:
    host: str
    port: int

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class LatencyEstimate:
    value: int
    source: LatencySource


@dataclass(frozen=True)
class StatusResult:
    edition: Edition
    version: str
    online_players: int
    max_players: int
    description: str
    ping: int
    server_address: str
    favicon: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'version': self.version,
            'online_players': self.online_players,
            'max_players': self.max_players,
            'description': self.description,
            'ping': self.ping,
            'server_address': self.server_address,
            'edition': self.edition.value,
        }
        if self.favicon is not None:
            data['favicon'] = self.favicon
        return data


@dataclass(frozen=True)
class Success:
    result: StatusResult
    ok = True

    def to_dict(self) -> Dict[str, Any]:
        return {'success': True, 'data': self.result.to_dict()}


@dataclass(frozen=True)
class Failure:
    reason: str
    cause: Optional[str] = None
    ok = False

    def to_dict(self) -> Dict[str, Any]:
        body = {'success': False, 'message': self.reason}
        if self.cause is not None:
            body['error'] = self.cause
        return body


ProbeOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class DetectionOutcome:
    outcome: ProbeOutcome
    detected: bool = False
    edition: Optional[Edition] = None
    java_error: Optional[str] = None
    bedrock_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome.ok

    def to_dict(self) -> Dict[str, Any]:
        body = self.outcome.to_dict()
        if self.detected:
            body['detected'] = True
            body['edition'] = self.edition.value
        else:
            body['javaError'] = self.java_error
            body['bedrockError'] = self.bedrock_error
        return body


def clamp_ping(value, floor=MIN_PING_MS, ceiling=MAX_PING_MS) -> int:
    return int(max(floor, min(value, ceiling)))


def reported_latency(value) -> Optional[LatencyEstimate]:
    """Accept a ping reported inside a status payload only if it is a usable positive number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return LatencyEstimate(int(value), LatencySource.QUERY_REPORTED)


def reconcile_latency(*candidates: Optional[LatencyEstimate]) -> LatencyEstimate:
    """Pick the first available candidate, in priority order, and clamp it."""
    for candidate in candidates:
        if candidate is not None:
            return LatencyEstimate(clamp_ping(candidate.value), candidate.source)
    return LatencyEstimate(DEFAULT_PING_MS, LatencySource.DEFAULT)


def failure_cause(outcome) -> Optional[str]:
    if isinstance(outcome, Failure):
        return outcome.cause if outcome.cause is not None else outcome.reason
    if isinstance(outcome, BaseException):
        return str(outcome) or type(outcome).__name__
    return None
