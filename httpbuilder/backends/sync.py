import logging
import socket
import ssl

from .._exceptions import (
    CertificateError,
    ConnectError,
    ReadError,
    WriteError,
    map_exceptions,
)
from .._models import Origin
from .base import NetworkBackend, NetworkStream

logger = logging.getLogger(__name__)


class SyncStream(NetworkStream):
    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def read(self, max_bytes: int) -> bytes:
        with map_exceptions({OSError: ReadError}):
            return self._sock.recv(max_bytes)

    def write(self, buffer: bytes) -> None:
        if not buffer:
            return

        with map_exceptions({OSError: WriteError}):
            self._sock.sendall(buffer)

    def close(self) -> None:
        self._sock.close()

    def start_tls(
        self, ssl_context: ssl.SSLContext, server_hostname: bytes = None
    ) -> NetworkStream:
        # Certificate failures, including a hostname mismatch, are raised
        # during the handshake, before the caller can write anything.
        exc_map = {ssl.SSLCertVerificationError: CertificateError, OSError: ConnectError}
        hostname = None if server_hostname is None else server_hostname.decode("ascii")
        try:
            with map_exceptions(exc_map):
                sock = ssl_context.wrap_socket(self._sock, server_hostname=hostname)
        except ConnectError:
            self._sock.close()
            raise
        logger.debug("TLS established with %s, %s", hostname, sock.version())
        return SyncStream(sock)


class SyncBackend(NetworkBackend):
    def connect(self, origin: Origin) -> SyncStream:
        address = (origin.host.decode("ascii"), origin.port)
        # Hostnames that can not be IDNA encoded fail with UnicodeError.
        with map_exceptions({OSError: ConnectError, UnicodeError: ConnectError}):
            sock = socket.create_connection(address)
        return SyncStream(sock)
