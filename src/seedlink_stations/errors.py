"""Exceptions for seedlink-stations: malformed query targets."""


class SeedLinkStationsError(Exception):
    """Base exception for seedlink-stations."""

    pass


class InvalidTargetError(SeedLinkStationsError):
    """Raised when a host[:port] target string cannot be parsed or has an invalid port."""

    def __init__(self, target: str, message: str | None = None) -> None:
        self.target = target
        self._msg = message or f"Invalid target: {target!r}"
        super().__init__(self._msg)
