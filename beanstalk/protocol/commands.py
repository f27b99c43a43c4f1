"""Encoding of client commands into wire bytes."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from beanstalk._validators import validate_unsigned

from .constants import CRLF, MAX_PRIORITY, MAX_TUBE_NAME_LENGTH, MIN_PRIORITY

Argument = int | str


def validate_priority(priority: int) -> None:
    """Ensure *priority* fits the unsigned 32-bit priority range."""
    validate_unsigned(priority, name="priority")
    if not (MIN_PRIORITY <= priority <= MAX_PRIORITY):
        msg = f"priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
        raise ValueError(msg)


def validate_tube_name(tube: str) -> None:
    """Reject tube names that would break the line framing."""
    if not isinstance(tube, str):
        msg = f"tube name must be a string, not {type(tube).__name__}"
        raise TypeError(msg)
    if not tube:
        msg = "tube name must not be empty"
        raise ValueError(msg)
    if len(tube.encode("utf-8")) > MAX_TUBE_NAME_LENGTH:
        msg = f"tube name must be at most {MAX_TUBE_NAME_LENGTH} bytes"
        raise ValueError(msg)
    if any(char.isspace() for char in tube):
        msg = f"tube name must not contain whitespace: {tube!r}"
        raise ValueError(msg)


def _format_argument(arg: Argument) -> bytes:
    # Integers are unsigned fields; strings are tube names.
    if isinstance(arg, str):
        validate_tube_name(arg)
        return arg.encode("utf-8")
    validate_unsigned(arg, name="argument")
    return str(arg).encode("ascii")


def _as_bytes(body: bytes | str) -> bytes:
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


@dc.dataclass(frozen=True, slots=True)
class Command:
    """A protocol verb with its arguments and an optional job body.

    When *body* is set the declared byte length is appended to the
    arguments and the raw body follows the command line::

        >>> Command("put", (0, 0, 100), b"test").encode()
        b'put 0 0 100 4\\r\\ntest\\r\\n'
    """

    verb: str
    args: tuple[Argument, ...] = ()
    body: bytes | None = None

    def encode(self) -> bytes:
        """Return the exact bytes to write for this command."""
        parts = [self.verb.encode("ascii")]
        parts.extend(_format_argument(arg) for arg in self.args)
        if self.body is None:
            return b" ".join(parts) + CRLF
        parts.append(str(len(self.body)).encode("ascii"))
        return b" ".join(parts) + CRLF + self.body + CRLF

    @classmethod
    def with_body(
        cls, verb: str, args: t.Iterable[Argument], body: bytes | str
    ) -> Command:
        """Build a body-bearing command, encoding ``str`` bodies as UTF-8."""
        return cls(verb, tuple(args), _as_bytes(body))


__all__ = ["Argument", "Command", "validate_priority", "validate_tube_name"]
