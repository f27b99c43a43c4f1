"""In-memory :class:`~beanstalk.transport.Stream` doubles for unit tests."""

from __future__ import annotations

import socket
import typing as t

from beanstalk.config import ClientConfig
from beanstalk.transport import SocketStream


class ScriptedStream(SocketStream):
    """Stream replaying canned server bytes and capturing client writes.

    Reads go through the real :class:`SocketStream` buffering over one end
    of a socket pair, so chunking behaviour matches production. Closing the
    server end produces end-of-stream.
    """

    def __init__(self, replies: bytes = b"", *, chunk_size: int = 8192) -> None:
        client_end, self.server_end = socket.socketpair()
        super().__init__(client_end, chunk_size=chunk_size)
        self.written = bytearray()
        self.closed = False
        if replies:
            self.feed(replies)

    def feed(self, data: bytes) -> None:
        """Queue *data* as if the server had sent it."""
        self.server_end.sendall(data)

    def hang_up(self) -> None:
        """Close the server end so further reads hit end-of-stream."""
        self.server_end.close()

    def write(self, data: bytes) -> int:
        self.written.extend(data)
        return len(data)

    def close(self) -> None:
        self.closed = True
        super().close()
        self.server_end.close()


def connector_for(stream: ScriptedStream) -> t.Callable[[ClientConfig], ScriptedStream]:
    """Return a client connector that always hands out *stream*."""

    def connect(config: ClientConfig) -> ScriptedStream:
        return stream

    return connect
