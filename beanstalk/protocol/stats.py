"""Decoder for the YAML subset used by ``stats*`` and ``list-*`` replies.

The server only ever emits a flat list::

    ---
    - default
    - emails

or a flat mapping of scalars::

    ---
    current-jobs-urgent: 2
    pause: 0

This module handles exactly those two shapes. It is not a YAML parser.
"""

from __future__ import annotations

import re

from .results import Stats, StatsValue

_INTEGER = re.compile(r"[+-]?[0-9]+")
_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_LIST_MARKER = "- "


def coerce_scalar(text: str) -> StatsValue:
    """Convert *text* to ``int`` or ``float`` when it is a numeric literal."""
    if _INTEGER.fullmatch(text):
        return int(text)
    if _NUMBER.fullmatch(text):
        return float(text)
    return text


def decode_stats(payload: bytes) -> Stats:
    """Decode a ``stats``/``list`` payload into an ordered mapping.

    The first line (the ``---`` document marker) is always dropped. List
    entries and lines without a ``:`` are keyed by their 0-based position
    among the remaining lines. Later duplicate keys overwrite earlier ones.
    """
    lines = payload.decode("utf-8", errors="replace").split("\n")[1:]
    result: Stats = {}
    for index, line in enumerate(lines):
        line = line.rstrip("\r")
        if not line:
            continue
        key: str | int = index
        if line.startswith(_LIST_MARKER):
            value = line[len(_LIST_MARKER) :]
        elif ":" in line:
            key, _, value = line.partition(":")
            value = value.removeprefix(" ")
        else:
            value = line
        result[key] = coerce_scalar(value)
    return result


def decode_list(payload: bytes) -> list[str]:
    """Decode a ``list-*`` payload into names, in server order.

    Entries are returned verbatim; unlike :func:`decode_stats` nothing is
    coerced, so a tube named ``007`` stays ``"007"``.
    """
    names: list[str] = []
    for line in payload.decode("utf-8", errors="replace").split("\n")[1:]:
        line = line.rstrip("\r")
        if line:
            names.append(line.removeprefix(_LIST_MARKER))
    return names


__all__ = ["coerce_scalar", "decode_list", "decode_stats"]
