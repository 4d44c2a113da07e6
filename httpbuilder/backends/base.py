import ssl

from .._models import Origin


class NetworkStream:
    def read(self, max_bytes: int) -> bytes:
        raise NotImplementedError()  # pragma: nocover

    def write(self, buffer: bytes) -> None:
        raise NotImplementedError()  # pragma: nocover

    def close(self) -> None:
        raise NotImplementedError()  # pragma: nocover

    def start_tls(
        self, ssl_context: ssl.SSLContext, server_hostname: bytes = None
    ) -> "NetworkStream":
        raise NotImplementedError()  # pragma: nocover


class NetworkBackend:
    def connect(self, origin: Origin) -> NetworkStream:
        raise NotImplementedError()  # pragma: nocover
