"""Tokenizing of response status lines."""

from __future__ import annotations

import dataclasses as dc

from beanstalk.errors import MalformedResponseError

from .constants import Status


@dc.dataclass(frozen=True, slots=True)
class StatusLine:
    """One response line split into its status token and positional fields."""

    status: Status
    token: str
    fields: tuple[str, ...] = ()
    raw: str = ""

    @classmethod
    def parse(cls, raw: bytes) -> StatusLine:
        """Tokenize *raw* on single spaces.

        Never raises: an empty or unrecognised token yields
        :attr:`Status.UNKNOWN` with the literal token preserved.
        """
        text = raw.decode("utf-8", errors="replace")
        token, *fields = text.split(" ")
        return cls(Status.parse(token), token, tuple(fields), text)

    def field(self, index: int) -> str:
        """Return positional field *index* or raise :class:`MalformedResponseError`."""
        try:
            value = self.fields[index]
        except IndexError:
            msg = f"{self.token} response is missing field {index}: {self.raw!r}"
            raise MalformedResponseError(msg) from None
        if not value:
            msg = f"{self.token} response has an empty field {index}: {self.raw!r}"
            raise MalformedResponseError(msg)
        return value

    def int_field(self, index: int) -> int:
        """Return positional field *index* as an unsigned integer."""
        value = self.field(index)
        if not (value.isascii() and value.isdigit()):
            msg = f"{self.token} response field {index} is not a number: {value!r}"
            raise MalformedResponseError(msg)
        return int(value)


__all__ = ["StatusLine"]
