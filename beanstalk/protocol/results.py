"""Tagged results returned by client commands."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from beanstalk.errors import CommandFailedError

from .constants import Status

_T = t.TypeVar("_T")

StatsValue = int | float | str
Stats = dict[str | int, StatsValue]


@dc.dataclass(frozen=True, slots=True)
class Job:
    """A job returned by ``reserve`` or one of the ``peek`` commands."""

    id: int
    body: bytes

    def text(self, encoding: str = "utf-8") -> str:
        """Return the body decoded with *encoding*."""
        return self.body.decode(encoding)


@dc.dataclass(frozen=True, slots=True)
class Ok(t.Generic[_T]):
    """Successful outcome carrying the command's typed payload."""

    value: _T

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> _T:
        """Return the payload."""
        return self.value


@dc.dataclass(frozen=True, slots=True)
class Failure:
    """Failed outcome carrying the status the server answered with.

    ``message`` holds the literal token, so unrecognised replies
    (``status is Status.UNKNOWN``) remain diagnosable.
    """

    status: Status
    message: str

    def __bool__(self) -> bool:
        return False

    def unwrap(self) -> t.NoReturn:
        """Raise :class:`~beanstalk.errors.CommandFailedError`."""
        raise CommandFailedError(self.status, self.message)


Result = Ok[_T] | Failure


__all__ = ["Failure", "Job", "Ok", "Result", "Stats", "StatsValue"]
