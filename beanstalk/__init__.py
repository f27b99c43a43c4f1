"""A minimal client for the beanstalkd work queue.

The protocol engine lives in :mod:`beanstalk.protocol`; :class:`Client`
sequences it over a TCP connection::

    with Client(ClientConfig(host="127.0.0.1")) as client:
        client.use("emails")
        job_id = client.put(DEFAULT_PRIORITY, 0, 60, b"payload").unwrap()
"""

from __future__ import annotations

from .client import Client
from .config import ClientConfig
from .errors import (
    BeanstalkError,
    CommandFailedError,
    ConnectionClosedError,
    MalformedResponseError,
    NotConnectedError,
    TransportError,
)
from .protocol import (
    DEFAULT_PRIORITY,
    DEFAULT_TUBE,
    MAX_PRIORITY,
    MIN_PRIORITY,
    Failure,
    Job,
    JobState,
    Ok,
    Result,
    Stats,
    Status,
    decode_stats,
)
from .transport import RetryConfig, SocketStream, Stream

__all__ = [
    "DEFAULT_PRIORITY",
    "DEFAULT_TUBE",
    "MAX_PRIORITY",
    "MIN_PRIORITY",
    "BeanstalkError",
    "Client",
    "ClientConfig",
    "CommandFailedError",
    "ConnectionClosedError",
    "Failure",
    "Job",
    "JobState",
    "MalformedResponseError",
    "NotConnectedError",
    "Ok",
    "Result",
    "RetryConfig",
    "SocketStream",
    "Stats",
    "Status",
    "Stream",
    "TransportError",
    "decode_stats",
]
