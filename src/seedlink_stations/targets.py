"""Parse and validate host[:port] query targets."""

import re

from .errors import InvalidTargetError
from .types import DEFAULT_PORT, Target

# Host without colons or whitespace + optional :port (port may be empty -> default)
_TARGET_PATTERN = re.compile(r"^([^:\s]+)(?::(\S*))?$")


def parse_target(raw: str, default_port: int = DEFAULT_PORT) -> Target:
    """
    Parse a single ``host[:port]`` string into a Target.

    - The trimmed raw string is kept as the identifier (cache key).
    - A missing or empty port falls back to default_port.

    Raises InvalidTargetError for an empty host or a port outside 0..65535.
    """
    s = raw.strip()
    if not s:
        raise InvalidTargetError(raw, "Target cannot be empty")

    m = _TARGET_PATTERN.match(s)
    if not m:
        raise InvalidTargetError(raw, f"Malformed target: {raw!r}")

    host = m.group(1)
    port_str = m.group(2)
    if not port_str:
        port = default_port
    elif port_str.isdigit():
        port = int(port_str)
    else:
        raise InvalidTargetError(raw, "A submitted port is invalid")

    try:
        return Target(host=host, port=port, identifier=s)
    except ValueError:
        raise InvalidTargetError(raw, "A submitted port is invalid") from None


def parse_targets(raw: str, default_port: int = DEFAULT_PORT) -> list[Target]:
    """Parse a comma-separated list of targets, preserving order."""
    return [parse_target(part, default_port) for part in raw.split(",")]
