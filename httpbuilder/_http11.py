import enum
import logging
from types import TracebackType
from typing import Callable, Iterator, Type, Union

import h11

from ._exceptions import (
    ConnectionClosing,
    ConnectionNotAvailable,
    LocalProtocolError,
    RemoteProtocolError,
)
from ._models import Origin, Request, Response
from .backends.base import NetworkStream

logger = logging.getLogger(__name__)

H11Event = Union[
    h11.Request,
    h11.Response,
    h11.InformationalResponse,
    h11.Data,
    h11.EndOfMessage,
    h11.ConnectionClosed,
]


class HTTPConnectionState(enum.IntEnum):
    NEW = 0
    ACTIVE = 1
    IDLE = 2
    CLOSED = 3


def serialize_request(request: Request) -> bytes:
    """
    Render a request as the bytes that would be sent on the wire.
    """
    h11_state = h11.Connection(our_role=h11.CLIENT)
    try:
        parts = [
            h11_state.send(
                h11.Request(
                    method=request.method,
                    target=request.url.target,
                    headers=request.headers,
                )
            )
        ]
        parts += [h11_state.send(h11.Data(data=chunk)) for chunk in request.stream]
        parts.append(h11_state.send(h11.EndOfMessage()))
    except h11.LocalProtocolError as exc:
        raise LocalProtocolError(exc) from None
    return b"".join(parts)


def keep_alive(event: h11.Response) -> bool:
    """
    Return `False` if the response head says that the server will close the
    connection once the response body has been sent.
    """
    tokens = set()
    for name, value in event.headers:
        if name == b"connection":
            tokens.update(token.strip() for token in value.lower().split(b","))
    if b"close" in tokens:
        return False
    if event.http_version < b"1.1":
        return b"keep-alive" in tokens
    return True


class HTTP11Connection:
    READ_NUM_BYTES = 64 * 1024

    def __init__(self, origin: Origin, stream: NetworkStream) -> None:
        self._origin = origin
        self._network_stream = stream
        self._state = HTTPConnectionState.NEW
        self._request_count = 0
        self._h11_state = h11.Connection(our_role=h11.CLIENT)

    def handle_request(self, request: Request) -> Response:
        """
        Send a request and return the response, once the response headers
        have been received. The body is read as the response stream is
        iterated.

        Raises `ConnectionClosing`, carrying the response, if the server has
        indicated that it will close the connection after this response.
        """
        if not self.can_handle_request(request.url.origin):
            raise RuntimeError(
                f"Attempted to send request to {request.url.origin} on connection to {self._origin}"
            )

        if self._state in (HTTPConnectionState.NEW, HTTPConnectionState.IDLE):
            self._request_count += 1
            self._state = HTTPConnectionState.ACTIVE
        else:
            raise ConnectionNotAvailable()

        try:
            self._send_request_headers(request)
            self._send_request_body(request)
            logger.debug(
                "send_request method=%r target=%r", request.method, request.url.target
            )
            event = self._receive_response_headers()
        except BaseException as exc:
            self.close()
            raise exc

        http_version = b"HTTP/" + event.http_version
        logger.debug(
            "receive_response_headers http_version=%r status=%d",
            http_version,
            event.status_code,
        )
        response = Response(
            status=event.status_code,
            # h11 version 0.11+ supports a `raw_items` interface to get the
            # raw header casing, rather than the enforced lowercase headers.
            headers=event.headers.raw_items(),
            content=HTTPConnectionByteStream(
                iterator=self._receive_response_body(),
                close_func=self._response_closed,
            ),
            extensions={
                "http_version": http_version,
                "reason_phrase": event.reason,
            },
        )
        if not keep_alive(event):
            logger.debug("server indicated connection close")
            raise ConnectionClosing(response)
        return response

    def can_handle_request(self, origin: Origin) -> bool:
        return origin == self._origin

    # Sending the request...

    def _send_request_headers(self, request: Request) -> None:
        try:
            event = h11.Request(
                method=request.method,
                target=request.url.target,
                headers=request.headers,
            )
        except h11.LocalProtocolError as exc:
            raise LocalProtocolError(exc) from None
        self._send_event(event)

    def _send_request_body(self, request: Request) -> None:
        for chunk in request.stream:
            event = h11.Data(data=chunk)
            self._send_event(event)

        event = h11.EndOfMessage()
        self._send_event(event)

    def _send_event(self, event: H11Event) -> None:
        try:
            bytes_to_send = self._h11_state.send(event)
        except h11.LocalProtocolError as exc:
            raise LocalProtocolError(exc) from None
        self._network_stream.write(bytes_to_send)

    # Receiving the response...

    def _receive_response_headers(self) -> h11.Response:
        while True:
            event = self._receive_event()
            if isinstance(event, h11.Response):
                return event
            if isinstance(event, h11.ConnectionClosed):
                raise RemoteProtocolError("Server disconnected without sending a response.")

    def _receive_response_body(self) -> Iterator[bytes]:
        while True:
            event = self._receive_event()
            if isinstance(event, h11.Data):
                yield bytes(event.data)
            elif isinstance(event, (h11.EndOfMessage, h11.PAUSED)):
                break

    def _receive_event(self) -> H11Event:
        while True:
            try:
                event = self._h11_state.next_event()
            except h11.RemoteProtocolError as exc:
                raise RemoteProtocolError(exc) from None

            if event is h11.NEED_DATA:
                data = self._network_stream.read(self.READ_NUM_BYTES)
                self._h11_state.receive_data(data)
            else:
                return event

    def _response_closed(self) -> None:
        if (
            self._h11_state.our_state is h11.DONE
            and self._h11_state.their_state is h11.DONE
        ):
            self._state = HTTPConnectionState.IDLE
            self._h11_state.start_next_cycle()
        else:
            self.close()

    # Once the connection is no longer required...

    def close(self) -> None:
        if self._state != HTTPConnectionState.CLOSED:
            logger.debug("close_connection origin=%s", self._origin)
            self._state = HTTPConnectionState.CLOSED
            self._network_stream.close()

    def is_idle(self) -> bool:
        return self._state == HTTPConnectionState.IDLE

    def is_closed(self) -> bool:
        return self._state == HTTPConnectionState.CLOSED

    def info(self) -> str:
        origin = str(self._origin)
        return f"{origin!r}, HTTP/1.1, {self._state.name}, Request Count: {self._request_count}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        origin = str(self._origin)
        return f"<{class_name} [{origin!r}, {self._state.name}, Request Count: {self._request_count}]>"

    # These context managers are not used in the standard flow, but are
    # useful for testing or working with connection instances directly.

    def __enter__(self) -> "HTTP11Connection":
        return self

    def __exit__(
        self,
        exc_type: Type[BaseException] = None,
        exc_value: BaseException = None,
        traceback: TracebackType = None,
    ) -> None:
        self.close()


class HTTPConnectionByteStream:
    def __init__(self, iterator: Iterator[bytes], close_func: Callable) -> None:
        self._iterator = iterator
        self._close_func = close_func

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._iterator:
            yield chunk

    def close(self) -> None:
        self._close_func()
