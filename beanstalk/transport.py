"""Byte-stream transport used by the client.

The protocol engine only needs a duplex stream with line and exact-length
reads. :class:`SocketStream` provides that over TCP; tests substitute any
object satisfying :class:`Stream`.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import random
import socket
import time
import typing as t

from ._validators import (
    validate_positive_finite_timeout,
    validate_retry_attempts,
    validate_retry_backoff,
    validate_retry_jitter,
)
from .errors import ConnectionClosedError, TransportError
from .protocol.constants import CRLF, MAX_LINE_LENGTH

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .config import ClientConfig

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_RETRIES: t.Final[int] = 1
DEFAULT_CONNECT_BACKOFF: t.Final[float] = 0.05
DEFAULT_CONNECT_JITTER: t.Final[float] = 0.2
MIN_RETRY_SLEEP: t.Final[float] = 0.001
READ_CHUNK_SIZE: t.Final[int] = 8192

_T = t.TypeVar("_T")


class Stream(t.Protocol):
    """Duplex byte stream consumed by the protocol engine."""

    def write(self, data: bytes) -> int:
        """Write all of *data* and return the number of bytes written."""
        ...

    def read_line(self, limit: int = MAX_LINE_LENGTH) -> bytes:
        """Return the next CRLF-terminated line without its terminator."""
        ...

    def read_exact(self, size: int) -> bytes:
        """Return exactly *size* bytes."""
        ...

    def close(self) -> None:
        """Release the underlying resource."""
        ...


@dc.dataclass(frozen=True, slots=True)
class RetryConfig:
    """Configuration for connection retry behaviour."""

    retries: int = DEFAULT_CONNECT_RETRIES
    backoff: float = DEFAULT_CONNECT_BACKOFF
    jitter: float = DEFAULT_CONNECT_JITTER

    def __post_init__(self) -> None:
        """Validate retry configuration values."""
        validate_retry_attempts(self.retries)
        validate_retry_backoff(self.backoff)
        validate_retry_jitter(self.jitter)


def calculate_retry_delay(attempt: int, backoff: float, jitter: float) -> float:
    """Return the sleep delay for a 0-based *attempt*.

    Never shorter than :data:`MIN_RETRY_SLEEP`.
    """
    delay = backoff * (attempt + 1)
    if jitter:
        factor = random.uniform(1.0 - jitter, 1.0 + jitter)  # noqa: S311
        delay *= factor
    return max(delay, MIN_RETRY_SLEEP)


def retry_with_backoff(
    func: t.Callable[[int], _T],
    *,
    retry_config: RetryConfig,
    on_failure: t.Callable[[int, OSError], None] | None = None,
    sleep: t.Callable[[float], None] = time.sleep,
) -> _T:
    """Call *func* until it succeeds or ``retry_config.retries`` attempts fail.

    The callable receives the 0-based attempt index. Only :class:`OSError`
    is retried; the last one is re-raised.
    """
    last_attempt = retry_config.retries - 1
    for attempt in range(retry_config.retries):
        try:
            return func(attempt)
        except OSError as exc:
            if on_failure is not None:
                on_failure(attempt, exc)
            if attempt == last_attempt:
                raise
            sleep(
                calculate_retry_delay(
                    attempt, retry_config.backoff, retry_config.jitter
                )
            )

    msg = "retry_with_backoff exhausted all attempts without a result"
    raise RuntimeError(msg)  # pragma: no cover


class SocketStream:
    """Buffered :class:`Stream` over a connected socket."""

    def __init__(self, sock: socket.socket, *, chunk_size: int = READ_CHUNK_SIZE) -> None:
        self._sock = sock
        self._chunk_size = chunk_size
        self._buffer = bytearray()

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        *,
        timeout: float,
        keepalive: bool = False,
    ) -> SocketStream:
        """Connect to *host*:*port*, waiting at most *timeout* seconds.

        The returned stream has no read timeout so ``reserve`` can block
        until a job arrives.
        """
        validate_positive_finite_timeout(timeout)
        sock = socket.create_connection((host, port), timeout=timeout)
        sock.settimeout(None)
        if keepalive:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
        return cls(sock)

    def _fill(self) -> None:
        try:
            chunk = self._sock.recv(self._chunk_size)
        except OSError as exc:
            msg = f"read failed: {exc}"
            raise TransportError(msg) from exc
        if not chunk:
            msg = "connection closed by server"
            raise ConnectionClosedError(msg)
        self._buffer.extend(chunk)

    def write(self, data: bytes) -> int:
        """Send all of *data*."""
        try:
            self._sock.sendall(data)
        except OSError as exc:
            msg = f"write failed: {exc}"
            raise TransportError(msg) from exc
        return len(data)

    def read_line(self, limit: int = MAX_LINE_LENGTH) -> bytes:
        """Return the next line, or the first *limit* bytes if it is longer."""
        start = 0
        while True:
            index = self._buffer.find(CRLF, start)
            if index != -1 and index <= limit:
                line = bytes(self._buffer[:index])
                del self._buffer[: index + len(CRLF)]
                return line
            if len(self._buffer) >= limit:
                line = bytes(self._buffer[:limit])
                del self._buffer[:limit]
                return line
            # A CR at the end of the buffer may pair with the next chunk.
            start = max(len(self._buffer) - 1, 0)
            self._fill()

    def read_exact(self, size: int) -> bytes:
        """Return exactly *size* bytes, reading as many chunks as needed."""
        while len(self._buffer) < size:
            self._fill()
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def close(self) -> None:
        """Close the socket."""
        self._buffer.clear()
        self._sock.close()


def connect_stream(config: ClientConfig) -> Stream:
    """Open a :class:`SocketStream` described by *config*.

    Failed attempts are retried per ``config.retry`` and logged at debug
    level; the final failure is raised as :class:`TransportError`.
    """
    address = f"{config.host}:{config.port}"

    def attempt_connect(attempt: int) -> SocketStream:
        return SocketStream.open(
            config.host,
            config.port,
            timeout=config.timeout,
            keepalive=config.persistent,
        )

    def log_failure(attempt: int, exc: OSError) -> None:
        logger.debug(
            "connect attempt %d/%d to %s failed: %s",
            attempt + 1,
            config.retry.retries,
            address,
            exc,
        )

    try:
        return retry_with_backoff(
            attempt_connect, retry_config=config.retry, on_failure=log_failure
        )
    except OSError as exc:
        msg = f"{exc.errno}: {exc.strerror or exc}" if exc.errno else str(exc)
        raise TransportError(msg) from exc


__all__ = [
    "DEFAULT_CONNECT_BACKOFF",
    "DEFAULT_CONNECT_JITTER",
    "DEFAULT_CONNECT_RETRIES",
    "MIN_RETRY_SLEEP",
    "READ_CHUNK_SIZE",
    "RetryConfig",
    "SocketStream",
    "Stream",
    "calculate_retry_delay",
    "connect_stream",
    "retry_with_backoff",
]
