"""Reading one reply and mapping it to a typed result per command family."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t

from beanstalk.errors import MalformedResponseError

from .constants import CRLF, MAX_LINE_LENGTH, Status
from .responses import StatusLine
from .results import Failure, Job, Ok, Result, Stats
from .stats import decode_list, decode_stats

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from beanstalk.transport import Stream

logger = logging.getLogger(__name__)

_T = t.TypeVar("_T")

Builder = t.Callable[[StatusLine, "Stream"], _T]


@dc.dataclass(frozen=True, slots=True)
class ResponseSpec(t.Generic[_T]):
    """Success statuses of one command family and how to build their payload.

    Any status missing from *success* is a failure.
    """

    name: str
    success: t.Mapping[Status, Builder[_T]]


def read_body(stream: Stream, length: int) -> bytes:
    """Read a *length*-byte body and strip its CRLF terminator."""
    data = stream.read_exact(length + len(CRLF))
    if data[length:] != CRLF:
        msg = f"body of {length} bytes is not terminated by CRLF"
        raise MalformedResponseError(msg)
    return data[:length]


def read_response(stream: Stream, spec: ResponseSpec[_T]) -> Result[_T]:
    """Read one status line from *stream* and dispatch it through *spec*.

    Transport errors raised by *stream* propagate. Everything the server
    says, including unknown tokens and malformed fields, becomes a result.
    """
    line = StatusLine.parse(stream.read_line(MAX_LINE_LENGTH))
    builder = spec.success.get(line.status)
    if builder is None:
        logger.debug("%s answered %r", spec.name, line.raw)
        return Failure(line.status, line.token)
    try:
        return Ok(builder(line, stream))
    except MalformedResponseError as exc:
        logger.debug("%s: %s", spec.name, exc)
        return Failure(Status.UNKNOWN, line.raw)


def _success(line: StatusLine, stream: Stream) -> None:
    return None


def _first_int(line: StatusLine, stream: Stream) -> int:
    return line.int_field(0)


def _tube(line: StatusLine, stream: Stream) -> str:
    return line.field(0)


def _job(line: StatusLine, stream: Stream) -> Job:
    job_id = line.int_field(0)
    return Job(job_id, read_body(stream, line.int_field(1)))


def _stats(line: StatusLine, stream: Stream) -> Stats:
    return decode_stats(read_body(stream, line.int_field(0)))


def _names(line: StatusLine, stream: Stream) -> list[str]:
    return decode_list(read_body(stream, line.int_field(0)))


PUT: t.Final[ResponseSpec[int]] = ResponseSpec(
    "put", {Status.INSERTED: _first_int, Status.BURIED: _first_int}
)
USE: t.Final[ResponseSpec[str]] = ResponseSpec("use", {Status.USING: _tube})
PAUSE_TUBE: t.Final[ResponseSpec[None]] = ResponseSpec(
    "pause-tube", {Status.PAUSED: _success}
)
RESERVE: t.Final[ResponseSpec[Job]] = ResponseSpec("reserve", {Status.RESERVED: _job})
DELETE: t.Final[ResponseSpec[None]] = ResponseSpec("delete", {Status.DELETED: _success})
RELEASE: t.Final[ResponseSpec[None]] = ResponseSpec(
    "release", {Status.RELEASED: _success, Status.BURIED: _success}
)
BURY: t.Final[ResponseSpec[None]] = ResponseSpec("bury", {Status.BURIED: _success})
TOUCH: t.Final[ResponseSpec[None]] = ResponseSpec("touch", {Status.TOUCHED: _success})
WATCH: t.Final[ResponseSpec[int]] = ResponseSpec("watch", {Status.WATCHING: _first_int})
IGNORE: t.Final[ResponseSpec[int]] = ResponseSpec(
    "ignore", {Status.WATCHING: _first_int}
)
PEEK: t.Final[ResponseSpec[Job]] = ResponseSpec("peek", {Status.FOUND: _job})
KICK: t.Final[ResponseSpec[int]] = ResponseSpec("kick", {Status.KICKED: _first_int})
KICK_JOB: t.Final[ResponseSpec[None]] = ResponseSpec(
    "kick-job", {Status.KICKED: _success}
)
STATS: t.Final[ResponseSpec[Stats]] = ResponseSpec("stats", {Status.OK: _stats})
LIST: t.Final[ResponseSpec[list[str]]] = ResponseSpec("list", {Status.OK: _names})
LIST_TUBE_USED: t.Final[ResponseSpec[str]] = ResponseSpec(
    "list-tube-used", {Status.USING: _tube}
)


__all__ = [
    "BURY",
    "DELETE",
    "IGNORE",
    "KICK",
    "KICK_JOB",
    "LIST",
    "LIST_TUBE_USED",
    "PAUSE_TUBE",
    "PEEK",
    "PUT",
    "RELEASE",
    "RESERVE",
    "STATS",
    "TOUCH",
    "USE",
    "WATCH",
    "ResponseSpec",
    "read_body",
    "read_response",
]
