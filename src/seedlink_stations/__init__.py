"""seedlink-stations: discover the networks and stations a SeedLink server exposes via HELLO/CAT."""

__version__ = "0.1.0"

from .cache import ResultCache
from .client import CatalogHandshake, SeedLinkClient
from .errors import InvalidTargetError, SeedLinkStationsError
from .listing import find_terminator, parse_listing
from .orchestrator import QueryOrchestrator
from .targets import parse_target, parse_targets
from .types import HandshakeState, QueryError, QueryResult, ServiceConfig, StationRecord, Target

__all__ = [
    "__version__",
    "ResultCache",
    "CatalogHandshake",
    "SeedLinkClient",
    "InvalidTargetError",
    "SeedLinkStationsError",
    "find_terminator",
    "parse_listing",
    "QueryOrchestrator",
    "parse_target",
    "parse_targets",
    "HandshakeState",
    "QueryError",
    "QueryResult",
    "ServiceConfig",
    "StationRecord",
    "Target",
]
