"""Client for the beanstalkd work queue."""

from __future__ import annotations

import contextlib
import logging
import typing as t
from collections import deque

from .config import ClientConfig
from .errors import BeanstalkError, NotConnectedError, TransportError
from .protocol import dispatch
from .protocol.commands import Command, validate_priority
from .protocol.results import Failure, Job, Result, Stats
from .transport import Stream, connect_stream

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import types

logger = logging.getLogger(__name__)

_T = t.TypeVar("_T")

Connector = t.Callable[[ClientConfig], Stream]


class Client:
    """One connection to a beanstalkd server and its command surface.

    Commands run strictly one at a time: each writes a request and reads
    exactly one reply. A client must not be shared between threads; give
    each worker its own client.

    Connection policy is fail fast. Commands issued while disconnected raise
    :class:`~beanstalk.errors.NotConnectedError`; call :meth:`connect` (or
    use the client as a context manager) first. A transport failure during a
    command closes the connection and propagates as
    :class:`~beanstalk.errors.TransportError`.

    Negative server replies (``NOT_FOUND``, ``TIMED_OUT``, ...) are returned
    as :class:`~beanstalk.protocol.results.Failure` values, never raised.
    Every failure is recorded in :meth:`errors` and logged.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        connector: Connector | None = None,
    ) -> None:
        """Create a disconnected client for *config*.

        Parameters
        ----------
        config:
            Connection settings. Defaults to ``ClientConfig()``.
        connector:
            Callable opening the byte stream. Defaults to
            :func:`~beanstalk.transport.connect_stream`.
        """
        self.config = config if config is not None else ClientConfig()
        self._connector = connector or connect_stream
        self._stream: Stream | None = None
        self._errors: deque[str] = deque(maxlen=self.config.max_errors)
        self._logger = self.config.logger or logger

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------
    @property
    def connected(self) -> bool:
        """Return ``True`` while a stream is open."""
        return self._stream is not None

    def connect(self) -> None:
        """Open a connection, replacing any existing one."""
        if self._stream is not None:
            self.disconnect()
        try:
            self._stream = self._connector(self.config)
        except TransportError as exc:
            self._record(str(exc), level=logging.ERROR)
            raise
        self._logger.debug("connected to %s:%d", self.config.host, self.config.port)

    def disconnect(self) -> bool:
        """Send ``quit`` and close the connection. Safe to call repeatedly."""
        stream, self._stream = self._stream, None
        if stream is None:
            return True
        try:
            stream.write(Command("quit").encode())
        except TransportError as exc:
            self._logger.debug("quit failed during disconnect: %s", exc)
        finally:
            stream.close()
        return True

    def __enter__(self) -> Client:
        """Connect when entering a context."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Disconnect when leaving a context."""
        self.disconnect()

    def __del__(self) -> None:
        with contextlib.suppress(Exception):
            self.disconnect()

    # ------------------------------------------------------------------
    # Error history
    # ------------------------------------------------------------------
    def errors(self) -> list[str]:
        """Return recorded error messages, oldest first."""
        return list(self._errors)

    def _record(self, message: str, *, level: int = logging.WARNING) -> None:
        self._errors.append(message)
        self._logger.log(level, "beanstalk error: %s", message)

    # ------------------------------------------------------------------
    # Round trip
    # ------------------------------------------------------------------
    def _execute(self, command: Command, spec: dispatch.ResponseSpec[_T]) -> Result[_T]:
        stream = self._stream
        if stream is None:
            msg = f"not connected while sending {command.verb!r}"
            raise NotConnectedError(msg)
        payload = command.encode()
        try:
            stream.write(payload)
            result = dispatch.read_response(stream, spec)
        except BeanstalkError as exc:
            self._record(f"{command.verb}: {exc}", level=logging.ERROR)
            self._drop_stream()
            raise
        if isinstance(result, Failure):
            self._record(result.message)
        return result

    def _drop_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            with contextlib.suppress(OSError):
                stream.close()

    # ------------------------------------------------------------------
    # Producer commands
    # ------------------------------------------------------------------
    def put(self, priority: int, delay: int, ttr: int, body: bytes | str) -> Result[int]:
        """Insert a job into the used tube and return its id.

        Jobs with smaller *priority* values are reserved first; 0 is the most
        urgent. The job stays delayed for *delay* seconds and a worker has
        *ttr* seconds to run it once reserved. ``BURIED <id>`` (the server
        ran out of memory growing its queue) also yields the id.
        """
        validate_priority(priority)
        command = Command.with_body("put", (priority, delay, ttr), body)
        return self._execute(command, dispatch.PUT)

    def use(self, tube: str) -> Result[str]:
        """Direct subsequent ``put`` commands to *tube*."""
        return self._execute(Command("use", (tube,)), dispatch.USE)

    choose = use
    use_tube = use

    def pause_tube(self, tube: str, delay: int) -> Result[None]:
        """Hold back reservations from *tube* for *delay* seconds."""
        return self._execute(Command("pause-tube", (tube, delay)), dispatch.PAUSE_TUBE)

    # ------------------------------------------------------------------
    # Worker commands
    # ------------------------------------------------------------------
    def reserve(self, timeout: int | None = None) -> Result[Job]:
        """Reserve a job from the watched tubes.

        Without *timeout* this blocks until a job is available. With a
        *timeout* (0 returns immediately) the server answers ``TIMED_OUT``
        when none arrives in time.
        """
        if timeout is None:
            command = Command("reserve")
        else:
            command = Command("reserve-with-timeout", (timeout,))
        return self._execute(command, dispatch.RESERVE)

    def delete(self, job_id: int) -> Result[None]:
        """Remove a job from the server entirely."""
        return self._execute(Command("delete", (job_id,)), dispatch.DELETE)

    def release(self, job_id: int, priority: int, delay: int) -> Result[None]:
        """Put a reserved job back into the ready (or delayed) queue."""
        validate_priority(priority)
        return self._execute(
            Command("release", (job_id, priority, delay)), dispatch.RELEASE
        )

    def bury(self, job_id: int, priority: int) -> Result[None]:
        """Bury a reserved job with a new *priority* until it is kicked."""
        validate_priority(priority)
        return self._execute(Command("bury", (job_id, priority)), dispatch.BURY)

    def touch(self, job_id: int) -> Result[None]:
        """Request more time to work on a reserved job."""
        return self._execute(Command("touch", (job_id,)), dispatch.TOUCH)

    def watch(self, tube: str) -> Result[int]:
        """Add *tube* to the watch list and return the number of watched tubes."""
        return self._execute(Command("watch", (tube,)), dispatch.WATCH)

    def ignore(self, tube: str) -> Result[int]:
        """Remove *tube* from the watch list.

        Fails with ``NOT_IGNORED`` when *tube* is the last watched tube.
        """
        return self._execute(Command("ignore", (tube,)), dispatch.IGNORE)

    # ------------------------------------------------------------------
    # Other commands
    # ------------------------------------------------------------------
    def peek(self, job_id: int) -> Result[Job]:
        """Inspect a job by id."""
        return self._execute(Command("peek", (job_id,)), dispatch.PEEK)

    def peek_ready(self) -> Result[Job]:
        """Inspect the next ready job in the used tube."""
        return self._execute(Command("peek-ready"), dispatch.PEEK)

    def peek_delayed(self) -> Result[Job]:
        """Inspect the delayed job with the shortest delay left."""
        return self._execute(Command("peek-delayed"), dispatch.PEEK)

    def peek_buried(self) -> Result[Job]:
        """Inspect the next buried job in the used tube."""
        return self._execute(Command("peek-buried"), dispatch.PEEK)

    def kick(self, bound: int) -> Result[int]:
        """Move up to *bound* jobs to the ready queue and return how many moved.

        Only buried jobs are kicked when there are any, otherwise delayed ones.
        """
        return self._execute(Command("kick", (bound,)), dispatch.KICK)

    def kick_job(self, job_id: int) -> Result[None]:
        """Kick a single buried or delayed job."""
        return self._execute(Command("kick-job", (job_id,)), dispatch.KICK_JOB)

    # ------------------------------------------------------------------
    # Stats commands
    # ------------------------------------------------------------------
    def stats_job(self, job_id: int) -> Result[Stats]:
        """Return the statistics mapping for one job."""
        return self._execute(Command("stats-job", (job_id,)), dispatch.STATS)

    def stats_tube(self, tube: str) -> Result[Stats]:
        """Return the statistics mapping for *tube*."""
        return self._execute(Command("stats-tube", (tube,)), dispatch.STATS)

    def stats(self) -> Result[Stats]:
        """Return server-wide statistics."""
        return self._execute(Command("stats"), dispatch.STATS)

    def list_tubes(self) -> Result[list[str]]:
        """Return the names of all existing tubes as a list, in server order."""
        return self._execute(Command("list-tubes"), dispatch.LIST)

    def list_tube_used(self) -> Result[str]:
        """Return the name of the tube used by ``put``."""
        return self._execute(Command("list-tube-used"), dispatch.LIST_TUBE_USED)

    list_tube_chosen = list_tube_used

    def list_tubes_watched(self) -> Result[list[str]]:
        """Return the names of the watched tubes as a list."""
        return self._execute(Command("list-tubes-watched"), dispatch.LIST)


__all__ = ["Client", "Connector"]
