import contextlib
from typing import Dict, Iterator, Type

__all__ = [
    "HTTPBuilderError",
    "InvalidURL",
    "UnsupportedProtocol",
    "ConnectionNotAvailable",
    "FileIOError",
    "NetworkError",
    "ConnectError",
    "CertificateError",
    "TransmissionError",
    "WriteError",
    "ReadError",
    "ProtocolError",
    "LocalProtocolError",
    "RemoteProtocolError",
    "ConnectionClosing",
]

ExceptionMapping = Dict[Type[Exception], Type[Exception]]


@contextlib.contextmanager
def map_exceptions(map: ExceptionMapping) -> Iterator[None]:
    try:
        yield
    except Exception as exc:  # noqa: PIE786
        for from_exc, to_exc in map.items():
            if isinstance(exc, from_exc):
                raise to_exc(exc) from exc
        raise  # pragma: nocover


class HTTPBuilderError(Exception):
    pass


class InvalidURL(HTTPBuilderError):
    pass


class UnsupportedProtocol(HTTPBuilderError):
    pass


class ConnectionNotAvailable(HTTPBuilderError):
    pass


class FileIOError(HTTPBuilderError):
    pass


class NetworkError(HTTPBuilderError):
    pass


class ConnectError(NetworkError):
    pass


class CertificateError(ConnectError):
    pass


class TransmissionError(NetworkError):
    pass


class WriteError(TransmissionError):
    pass


class ReadError(TransmissionError):
    pass


class ProtocolError(TransmissionError):
    pass


class LocalProtocolError(ProtocolError):
    pass


class RemoteProtocolError(ProtocolError):
    pass


class ConnectionClosing(Exception):
    """
    Raised by `HTTP11Connection.handle_request()` when the response head says
    the server is going to close the connection once the response is complete.

    This is not a failure. The response is complete and readable, it is
    attached as `.response`, and the connection can not be used for any
    further requests.
    """

    def __init__(self, response) -> None:
        super().__init__("Server indicated the connection will be closed.")
        self.response = response
