"""Client configuration."""

from __future__ import annotations

import dataclasses as dc
import math
import os
import typing as t

from ._validators import validate_positive_finite_timeout
from .protocol.constants import DEFAULT_HOST, DEFAULT_PORT
from .transport import RetryConfig

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import logging

BEANSTALK_HOST_ENV = "BEANSTALK_HOST"
BEANSTALK_PORT_ENV = "BEANSTALK_PORT"
BEANSTALK_TIMEOUT_ENV = "BEANSTALK_TIMEOUT"  # connect timeout in seconds
BEANSTALK_PERSISTENT_ENV = "BEANSTALK_PERSISTENT"

DEFAULT_CONNECT_TIMEOUT: t.Final[float] = 1.0
DEFAULT_MAX_ERRORS: t.Final[int] = 200

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dc.dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable connection settings for :class:`~beanstalk.client.Client`.

    Attributes
    ----------
    host, port:
        Address of the beanstalkd server.
    persistent:
        Keep the TCP connection alive between commands (``SO_KEEPALIVE``).
    timeout:
        Seconds to wait while establishing the connection. Reads never time
        out so that ``reserve`` can block.
    max_errors:
        Capacity of the client's error history.
    logger:
        Logger receiving every recorded error. Defaults to the
        ``beanstalk.client`` logger.
    retry:
        Retry policy applied to connection attempts.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    persistent: bool = True
    timeout: float = DEFAULT_CONNECT_TIMEOUT
    max_errors: int = DEFAULT_MAX_ERRORS
    logger: logging.Logger | None = None
    retry: RetryConfig = dc.field(default_factory=RetryConfig)

    def __post_init__(self) -> None:
        """Validate values to catch misconfiguration early."""
        if not self.host:
            msg = "host must not be empty"
            raise ValueError(msg)
        if isinstance(self.port, bool) or not (0 < self.port < 65536):
            msg = f"port must be between 1 and 65535, got {self.port!r}"
            raise ValueError(msg)
        validate_positive_finite_timeout(self.timeout)
        if self.max_errors < 1:
            msg = "max_errors must be positive"
            raise ValueError(msg)

    @classmethod
    def from_env(
        cls,
        environ: t.Mapping[str, str] | None = None,
        **overrides: t.Any,  # noqa: ANN401
    ) -> ClientConfig:
        """Build a configuration from ``BEANSTALK_*`` environment variables.

        Explicit *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, t.Any] = {}
        if host := env.get(BEANSTALK_HOST_ENV):
            values["host"] = host
        if (port := env.get(BEANSTALK_PORT_ENV)) is not None:
            values["port"] = _parse_port(port)
        if (timeout := env.get(BEANSTALK_TIMEOUT_ENV)) is not None:
            values["timeout"] = _parse_timeout(timeout)
        if (persistent := env.get(BEANSTALK_PERSISTENT_ENV)) is not None:
            values["persistent"] = _parse_flag(persistent)
        values.update(overrides)
        return cls(**values)


def _parse_port(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        msg = f"invalid {BEANSTALK_PORT_ENV}: {raw!r}"
        raise ValueError(msg) from None


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        timeout = math.nan
    if not (timeout > 0 and math.isfinite(timeout)):
        msg = f"invalid {BEANSTALK_TIMEOUT_ENV}: {raw!r}"
        raise ValueError(msg)
    return timeout


def _parse_flag(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    msg = f"invalid {BEANSTALK_PERSISTENT_ENV}: {raw!r}"
    raise ValueError(msg)


__all__ = [
    "BEANSTALK_HOST_ENV",
    "BEANSTALK_PERSISTENT_ENV",
    "BEANSTALK_PORT_ENV",
    "BEANSTALK_TIMEOUT_ENV",
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_MAX_ERRORS",
    "ClientConfig",
]
