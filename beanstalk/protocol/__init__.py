"""Protocol engine: command encoding, reply dispatch and stats decoding."""

from .commands import Command, validate_priority, validate_tube_name
from .constants import (
    CRLF,
    DEFAULT_PRIORITY,
    DEFAULT_TUBE,
    MAX_LINE_LENGTH,
    MAX_PRIORITY,
    MAX_TUBE_NAME_LENGTH,
    MIN_PRIORITY,
    JobState,
    Status,
)
from .dispatch import ResponseSpec, read_body, read_response
from .responses import StatusLine
from .results import Failure, Job, Ok, Result, Stats, StatsValue
from .stats import coerce_scalar, decode_list, decode_stats

__all__ = [
    "CRLF",
    "DEFAULT_PRIORITY",
    "DEFAULT_TUBE",
    "MAX_LINE_LENGTH",
    "MAX_PRIORITY",
    "MAX_TUBE_NAME_LENGTH",
    "MIN_PRIORITY",
    "Command",
    "Failure",
    "Job",
    "JobState",
    "Ok",
    "ResponseSpec",
    "Result",
    "Stats",
    "StatsValue",
    "Status",
    "StatusLine",
    "coerce_scalar",
    "decode_list",
    "decode_stats",
    "read_body",
    "read_response",
    "validate_priority",
    "validate_tube_name",
]
