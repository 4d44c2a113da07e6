import ssl
from typing import List

from .._models import Origin
from .base import NetworkBackend, NetworkStream


class MockStream(NetworkStream):
    """
    Replays a fixed list of byte chunks, then signals end-of-stream.
    Everything written to the stream is kept in `written`.
    """

    def __init__(self, buffer: List[bytes]) -> None:
        self._current_buffer = list(buffer)
        self.written: List[bytes] = []
        self.tls = False
        self.server_hostname = None
        self.closed = False

    def read(self, max_bytes: int) -> bytes:
        if not self._current_buffer:
            return b""
        return self._current_buffer.pop(0)

    def write(self, buffer: bytes) -> None:
        self.written.append(buffer)

    def close(self) -> None:
        self.closed = True

    def start_tls(
        self, ssl_context: ssl.SSLContext, server_hostname: bytes = None
    ) -> NetworkStream:
        self.tls = True
        self.server_hostname = server_hostname
        return self


class MockBackend(NetworkBackend):
    """
    A network backend that hands out a fresh `MockStream` over the same
    canned response for every connection.

    The origins connected to and the streams created are recorded, so that
    tests can inspect the bytes that were sent.
    """

    def __init__(self, buffer: List[bytes]) -> None:
        self._buffer = buffer
        self.origins: List[Origin] = []
        self.streams: List[MockStream] = []

    def connect(self, origin: Origin) -> NetworkStream:
        stream = MockStream(self._buffer)
        self.origins.append(origin)
        self.streams.append(stream)
        return stream

    @property
    def sent(self) -> bytes:
        """
        All bytes written on the most recently opened stream.
        """
        return b"".join(self.streams[-1].written)
