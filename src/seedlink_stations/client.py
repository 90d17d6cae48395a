"""SeedLinkClient: HELLO/CAT station discovery over asyncio streams, driven by a sans-IO handshake."""

import asyncio
import logging
from datetime import datetime
from typing import Callable

from .cache import utcnow
from .listing import ENCODING, find_terminator, parse_listing
from .types import DEFAULT_TIMEOUT, HandshakeState, QueryError, QueryResult, StationRecord, Target

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
HELLO_COMMAND = b"HELLO" + CRLF
CAT_COMMAND = b"CAT" + CRLF
CAT_NOT_IMPLEMENTED = b"CAT command not implemented" + CRLF
READ_SIZE = 4096


class CatalogHandshake:
    """
    State machine for one HELLO/CAT exchange. Performs no I/O: the caller feeds
    connection events and received bytes, and sends whatever bytes are returned.
    Reaches DONE exactly once and then exposes a single finalized QueryResult.
    """

    def __init__(self, target_id: str, clock: Callable[[], datetime] = utcnow) -> None:
        self._target_id = target_id
        self._fetched_at = clock()
        self._state = HandshakeState.CONNECTING
        self._buffer = bytearray()
        self._stations: list[StationRecord] = []
        self._error: QueryError | None = None
        self._version: str | None = None
        self._identifier: str | None = None
        self._connected = False
        self._result: QueryResult | None = None

    @property
    def state(self) -> HandshakeState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state == HandshakeState.DONE

    @property
    def connected(self) -> bool:
        return self._connected

    def connection_made(self) -> bytes:
        """TCP connection is up; returns the HELLO command to send."""
        if self._state != HandshakeState.CONNECTING:
            raise RuntimeError(f"connection_made in state {self._state.value}")
        self._state = HandshakeState.AWAITING_GREETING
        return HELLO_COMMAND

    def data_received(self, data: bytes) -> bytes | None:
        """Append data to the buffer and advance; returns the next command to send, if any."""
        if self._state in (HandshakeState.CONNECTING, HandshakeState.DONE):
            raise RuntimeError(f"data_received in state {self._state.value}")
        self._connected = True
        self._buffer += data
        if self._state == HandshakeState.AWAITING_GREETING:
            return self._check_greeting()
        self._check_listing()
        return None

    def fail(self, error: QueryError) -> None:
        """Force the handshake into DONE with error; no-op once already done."""
        if self.done:
            return
        logger.debug("%s: %s in state %s", self._target_id, error.value, self._state.value)
        self._error = error
        self._finish()

    def result(self) -> QueryResult:
        if self._result is None:
            raise RuntimeError(f"handshake with {self._target_id} has not finished")
        return self._result

    def _check_greeting(self) -> bytes | None:
        # Version line + identifier line + whatever follows the second CRLF
        segments = bytes(self._buffer).split(CRLF)
        if len(segments) < 3:
            return None
        if len(segments) > 3 or segments[2]:
            logger.debug("%s: discarding data after greeting: %r", self._target_id, segments[2:])
        self._version = segments[0].decode(ENCODING, errors="replace")
        self._identifier = segments[1].decode(ENCODING, errors="replace")
        self._buffer.clear()
        self._state = HandshakeState.AWAITING_LISTING
        logger.debug("%s: greeting %r / %r, sending CAT", self._target_id, self._version, self._identifier)
        return CAT_COMMAND

    def _check_listing(self) -> None:
        if self._buffer == CAT_NOT_IMPLEMENTED:
            self.fail(QueryError.CATNOTIMPLEMENTED)
            return
        end = find_terminator(self._buffer)
        if end is None:
            return
        # Anything after the END line is dropped with the buffer
        self._stations = parse_listing(self._buffer[:end].decode(ENCODING, errors="replace"))
        logger.debug("%s: listing complete, %d stations", self._target_id, len(self._stations))
        self._finish()

    def _finish(self) -> None:
        self._state = HandshakeState.DONE
        self._buffer.clear()
        self._result = QueryResult(
            target_id=self._target_id,
            fetched_at=self._fetched_at,
            stations=tuple(self._stations),
            error=self._error,
            protocol_version=self._version,
            server_identifier=self._identifier,
            connected=self._connected,
        )


class SeedLinkClient:
    """
    Runs one CatalogHandshake against one target over a TCP connection.
    Connect and every read are bounded by timeout; fetch() never raises for
    network failures, it reports them as QueryResult.error.
    """

    def __init__(
        self,
        target: Target,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._target = target
        self._timeout = timeout
        self._clock = clock

    @property
    def target(self) -> Target:
        return self._target

    async def fetch(self) -> QueryResult:
        """Connect, run HELLO/CAT to a terminal state, close the socket, and return the result."""
        handshake = CatalogHandshake(self._target.identifier, clock=self._clock)
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self._target.host, self._target.port),
                self._timeout,
            )
        except (OSError, UnicodeError, asyncio.TimeoutError) as e:
            # UnicodeError: the idna codec rejects empty or over-long host labels
            logger.debug("Failed to connect to %s: %r", self._target.identifier, e)
            handshake.fail(QueryError.ECONNREFUSED)
            return handshake.result()

        try:
            await self._send(writer, handshake.connection_made())
            while not handshake.done:
                chunk = await asyncio.wait_for(reader.read(READ_SIZE), self._timeout)
                if not chunk:
                    logger.debug("%s closed the connection early", self._target.identifier)
                    handshake.fail(QueryError.ECONNREFUSED)
                    break
                reply = handshake.data_received(chunk)
                if reply is not None:
                    await self._send(writer, reply)
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug("Connection to %s failed: %r", self._target.identifier, e)
            handshake.fail(QueryError.ECONNREFUSED)
        finally:
            await self._close(writer)
        return handshake.result()

    async def _send(self, writer: asyncio.StreamWriter, data: bytes) -> None:
        writer.write(data)
        await writer.drain()

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.warning("Error closing connection to %s: %s", self._target.identifier, e)
