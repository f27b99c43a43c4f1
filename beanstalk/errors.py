"""Exception hierarchy for the beanstalk client."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .protocol.constants import Status


class BeanstalkError(Exception):
    """Base class for all errors raised by the beanstalk client."""


class NotConnectedError(BeanstalkError):
    """Raised when a command is issued on a client without a connection."""


class TransportError(BeanstalkError):
    """Raised when connecting to, writing to or reading from the server fails."""


class ConnectionClosedError(TransportError):
    """Raised when the server closes the stream before a reply is complete."""


class MalformedResponseError(BeanstalkError):
    """Raised when a recognised status line carries unusable fields."""


class CommandFailedError(BeanstalkError):
    """Raised by :meth:`Failure.unwrap` for a failed command."""

    def __init__(self, status: Status, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


__all__ = [
    "BeanstalkError",
    "CommandFailedError",
    "ConnectionClosedError",
    "MalformedResponseError",
    "NotConnectedError",
    "TransportError",
]
