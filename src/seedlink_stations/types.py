"""Core data model: query errors, handshake states, Target, StationRecord, QueryResult, ServiceConfig."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

DEFAULT_PORT = 18000
DEFAULT_TIMEOUT = 5.0
DEFAULT_REFRESH_INTERVAL = 300.0
DEFAULT_LISTEN_HOST = "127.0.0.1"
DEFAULT_LISTEN_PORT = 8087


class QueryError(str, Enum):
    """Per-target error kinds reported in a QueryResult."""

    ECONNREFUSED = "ECONNREFUSED"
    CATNOTIMPLEMENTED = "CATNOTIMPLEMENTED"


class HandshakeState(str, Enum):
    """States of the HELLO/CAT exchange with one server."""

    CONNECTING = "connecting"
    AWAITING_GREETING = "awaiting_greeting"
    AWAITING_LISTING = "awaiting_listing"
    DONE = "done"


@dataclass(frozen=True)
class Target:
    """One server to query; identifier is the raw host[:port] text and the cache key."""

    host: str
    port: int = DEFAULT_PORT
    identifier: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.port < 1 << 16:
            raise ValueError(f"port must be in 0..65535, got {self.port}")
        if not self.identifier:
            object.__setattr__(self, "identifier", f"{self.host}:{self.port}")


@dataclass(frozen=True)
class StationRecord:
    """One network/station/site row of a CAT listing."""

    network: str
    station: str
    site: str

    def to_payload(self) -> dict[str, str]:
        return {"network": self.network, "station": self.station, "site": self.site}


@dataclass(frozen=True)
class QueryResult:
    """Terminal outcome of one handshake; the unit stored in the cache."""

    target_id: str
    fetched_at: datetime
    stations: tuple[StationRecord, ...] = ()
    error: QueryError | None = None
    protocol_version: str | None = None
    server_identifier: str | None = None
    connected: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict[str, Any]:
        """Plain dict with the keys served by the HTTP front-end."""
        return {
            "host": self.target_id,
            "stations": [s.to_payload() for s in self.stations],
            "error": self.error.value if self.error is not None else None,
            "version": self.protocol_version,
            "identifier": self.server_identifier,
            "connected": self.connected,
            "requested": int(self.fetched_at.timestamp() * 1000),
        }


@dataclass(frozen=True)
class ServiceConfig:
    """Process configuration for the HTTP service."""

    listen_host: str = DEFAULT_LISTEN_HOST
    listen_port: int = DEFAULT_LISTEN_PORT
    socket_timeout: float = DEFAULT_TIMEOUT
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    default_port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = ("*",)

    def __post_init__(self) -> None:
        if self.socket_timeout <= 0:
            raise ValueError(f"socket_timeout must be > 0, got {self.socket_timeout}")
        if self.refresh_interval < 0:
            raise ValueError(f"refresh_interval must be >= 0, got {self.refresh_interval}")
