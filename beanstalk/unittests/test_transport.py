"""Unit tests for the socket transport and connect retries."""

from __future__ import annotations

import socket
import typing as t

import pytest

from beanstalk import transport
from beanstalk.config import ClientConfig
from beanstalk.errors import ConnectionClosedError, TransportError
from beanstalk.transport import RetryConfig, SocketStream

from ._stream_helpers import ScriptedStream

if t.TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def stream() -> Iterator[ScriptedStream]:
    scripted = ScriptedStream(chunk_size=4)
    yield scripted
    scripted.close()


def test_read_line_strips_terminator(stream: ScriptedStream) -> None:
    """Lines are returned without CRLF and consumed one at a time."""
    stream.feed(b"USING a\r\nUSING b\r\n")
    assert stream.read_line() == b"USING a"
    assert stream.read_line() == b"USING b"


def test_read_line_terminator_split_across_chunks(stream: ScriptedStream) -> None:
    """A CR and LF arriving in different chunks still end the line."""
    stream.feed(b"abc\r")
    stream.feed(b"\nrest\r\n")
    assert stream.read_line() == b"abc"
    assert stream.read_line() == b"rest"


def test_read_line_bounded(stream: ScriptedStream) -> None:
    """Lines longer than the limit are returned up to the limit."""
    stream.feed(b"0123456789\r\n")
    assert stream.read_line(limit=6) == b"012345"
    assert stream.read_line(limit=6) == b"6789"


def test_read_line_end_of_stream(stream: ScriptedStream) -> None:
    """A partial line followed by EOF raises ConnectionClosedError."""
    stream.feed(b"partial")
    stream.hang_up()
    with pytest.raises(ConnectionClosedError, match="closed by server"):
        stream.read_line()


def test_read_exact_loops_over_chunks(stream: ScriptedStream) -> None:
    """read_exact keeps reading until the requested size is available."""
    stream.feed(b"0123456789AB")
    assert stream.read_exact(10) == b"0123456789"
    assert stream.read_exact(2) == b"AB"


def test_read_exact_end_of_stream(stream: ScriptedStream) -> None:
    """EOF before the requested size raises ConnectionClosedError."""
    stream.feed(b"abc")
    stream.hang_up()
    with pytest.raises(ConnectionClosedError):
        stream.read_exact(5)


def test_socket_stream_write_sends_everything() -> None:
    """write sends all bytes and reports the count."""
    left, right = socket.socketpair()
    stream = SocketStream(left)
    try:
        assert stream.write(b"stats\r\n") == 7
        assert right.recv(16) == b"stats\r\n"
    finally:
        stream.close()
        right.close()


def test_socket_stream_write_failure_wrapped() -> None:
    """OS errors while writing become TransportError."""
    left, right = socket.socketpair()
    stream = SocketStream(left)
    stream.close()
    right.close()
    with pytest.raises(TransportError, match="write failed"):
        stream.write(b"stats\r\n")


def test_open_connects_without_read_timeout() -> None:
    """Opened streams block indefinitely on reads."""
    listener = socket.create_server(("127.0.0.1", 0))
    host, port = listener.getsockname()[:2]
    try:
        stream = SocketStream.open(host, port, timeout=1.0, keepalive=True)
        try:
            sock = stream._sock
            assert sock.gettimeout() is None
            assert sock.getsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE) != 0
        finally:
            stream.close()
    finally:
        listener.close()


def test_calculate_retry_delay_without_jitter() -> None:
    """Delay grows linearly with the attempt index."""
    assert transport.calculate_retry_delay(0, 0.1, 0.0) == pytest.approx(0.1)
    assert transport.calculate_retry_delay(2, 0.1, 0.0) == pytest.approx(0.3)


def test_calculate_retry_delay_has_floor() -> None:
    """Delays never drop below MIN_RETRY_SLEEP."""
    assert transport.calculate_retry_delay(0, 0.0, 0.0) == transport.MIN_RETRY_SLEEP


def test_retry_with_backoff_retries_os_errors() -> None:
    """OS errors are retried until an attempt succeeds."""
    attempts: list[int] = []
    sleeps: list[float] = []

    def flaky(attempt: int) -> str:
        attempts.append(attempt)
        if attempt < 2:
            raise ConnectionRefusedError
        return "ok"

    result = transport.retry_with_backoff(
        flaky,
        retry_config=RetryConfig(retries=3, backoff=0.5, jitter=0.0),
        sleep=sleeps.append,
    )
    assert result == "ok"
    assert attempts == [0, 1, 2]
    assert sleeps == [pytest.approx(0.5), pytest.approx(1.0)]


def test_retry_with_backoff_reraises_last_error() -> None:
    """The final failure propagates once retries are exhausted."""
    failures: list[int] = []

    def refuse(attempt: int) -> None:
        raise ConnectionRefusedError(111, "Connection refused")

    with pytest.raises(ConnectionRefusedError):
        transport.retry_with_backoff(
            refuse,
            retry_config=RetryConfig(retries=2, backoff=0.0, jitter=0.0),
            on_failure=lambda attempt, exc: failures.append(attempt),
            sleep=lambda _delay: None,
        )
    assert failures == [0, 1]


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({"retries": 0}, "retries must"),
        ({"backoff": -0.1}, "backoff must"),
        ({"backoff": float("nan")}, "backoff must"),
        ({"jitter": 1.1}, "jitter must"),
        ({"jitter": float("nan")}, "jitter must"),
    ],
)
def test_retry_config_validates(kwargs: dict[str, t.Any], match: str) -> None:
    """Invalid retry settings are rejected at construction."""
    with pytest.raises(ValueError, match=match):
        RetryConfig(**kwargs)


def test_connect_stream_wraps_refusal() -> None:
    """An unreachable server raises TransportError carrying errno and reason."""
    listener = socket.create_server(("127.0.0.1", 0))
    port = listener.getsockname()[1]
    listener.close()
    config = ClientConfig(port=port, retry=RetryConfig(retries=1))
    with pytest.raises(TransportError) as excinfo:
        transport.connect_stream(config)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert str(excinfo.value).startswith(f"{excinfo.value.__cause__.errno}: ")
