"""Wire-level constants and the status vocabulary of the beanstalkd protocol."""

from __future__ import annotations

import enum
import typing as t

MIN_PRIORITY: t.Final[int] = 0
MAX_PRIORITY: t.Final[int] = 4294967295
DEFAULT_PRIORITY: t.Final[int] = 1024

DEFAULT_HOST: t.Final[str] = "127.0.0.1"
DEFAULT_PORT: t.Final[int] = 11300
DEFAULT_TUBE: t.Final[str] = "default"
MAX_TUBE_NAME_LENGTH: t.Final[int] = 200

CRLF: t.Final[bytes] = b"\r\n"
MAX_LINE_LENGTH: t.Final[int] = 16384


class Status(enum.StrEnum):
    """Status tokens the server answers with.

    ``UNKNOWN`` stands in for any token outside the vocabulary; the literal
    token is carried separately by :class:`~beanstalk.protocol.responses.StatusLine`.
    """

    INSERTED = "INSERTED"
    BURIED = "BURIED"
    EXPECTED_CRLF = "EXPECTED_CRLF"
    JOB_TOO_BIG = "JOB_TOO_BIG"
    DRAINING = "DRAINING"
    USING = "USING"
    PAUSED = "PAUSED"
    NOT_FOUND = "NOT_FOUND"
    RESERVED = "RESERVED"
    DEADLINE_SOON = "DEADLINE_SOON"
    TIMED_OUT = "TIMED_OUT"
    DELETED = "DELETED"
    RELEASED = "RELEASED"
    TOUCHED = "TOUCHED"
    NOT_TOUCHED = "NOT_TOUCHED"
    WATCHING = "WATCHING"
    NOT_IGNORED = "NOT_IGNORED"
    FOUND = "FOUND"
    KICKED = "KICKED"
    OK = "OK"
    OUT_OF_MEMORY = "OUT_OF_MEMORY"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_FORMAT = "BAD_FORMAT"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, token: str) -> Status:
        """Return the member named *token*, or :attr:`UNKNOWN`."""
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN


class JobState(enum.StrEnum):
    """Server-side job states.

    The server owns these transitions::

        put (delay=0) -> ready      put (delay>0) -> delayed -> ready
        ready -> reserved -> deleted | ready (release) | buried (bury)
        reserved -> reserved (touch extends the ttr)
        buried -> ready (kick)

    ``release`` may answer ``BURIED`` instead of ``RELEASED`` when the
    server buries the job, which is why both count as success. The client
    never caches a job's state.
    """

    READY = "ready"
    DELAYED = "delayed"
    RESERVED = "reserved"
    BURIED = "buried"
    DELETED = "deleted"


__all__ = [
    "CRLF",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_PRIORITY",
    "DEFAULT_TUBE",
    "MAX_LINE_LENGTH",
    "MAX_PRIORITY",
    "MAX_TUBE_NAME_LENGTH",
    "MIN_PRIORITY",
    "JobState",
    "Status",
]
