import logging
import os
import sys
from types import TracebackType
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Type, Union
from urllib.parse import urlencode

from ._connection import open_connection
from ._exceptions import (
    ConnectionClosing,
    FileIOError,
    LocalProtocolError,
    map_exceptions,
)
from ._http11 import HTTP11Connection, serialize_request
from ._models import URL, Request, Response

if TYPE_CHECKING:  # pragma: nocover
    from ._client import Client

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class RequestBuilder:
    """
    A request draft that is configured by chaining calls, and sent by one
    of the `as_*()` methods.

        text = httpbuilder.get("https://www.example.com/").param("q", "1").as_string()

    Every `as_*()` call sends a new request over a new connection. The
    connection used by the most recent request is held on the builder until
    `close()` is called, or the builder is used as a context manager.

    Builders are not safe to share between threads.
    """

    def __init__(self, method: str, url: str, *, client: "Client") -> None:
        self._method = method
        self._url = url
        self._client = client
        self._headers: Dict[str, Tuple[str, str]] = {}
        self._params: Dict[str, Any] = {}
        # None means that no body has been set, which is different to an
        # empty body. Only an unset body is replaced by form parameters.
        self._body: Optional[bytes] = None
        self._connection: Optional[HTTP11Connection] = None

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    # Configuring the request...

    def header(self, key: str, value: Union[str, bytes]) -> "RequestBuilder":
        self._headers[key.lower()] = (key, value)
        return self

    def param(self, key: str, value: Any) -> "RequestBuilder":
        self._params[key] = value
        return self

    def body(self, data: Union[str, bytes, bytearray]) -> "RequestBuilder":
        if isinstance(data, str):
            self._body = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray)):
            self._body = bytes(data)
        else:
            logger.debug("Ignoring request body of type %s", type(data).__name__)
        return self

    # Sending the request...

    def build_request(self) -> Request:
        """
        Return the request that the next `as_*()` call will send.

        Parameters are added to the query string for GET requests, or sent
        as a form-encoded body for POST requests that have no body set.
        Parameters on PUT and DELETE requests are not sent.
        """
        query = urlencode(sorted(self._params.items()))
        url = self._url
        content = self._body
        headers = {"user-agent": ("User-Agent", self._client.user_agent)}
        headers.update(self._client.headers)
        headers.update(self._headers)

        if self._method == "GET" and query:
            url += ("&" if "?" in url else "?") + query
        elif self._method == "POST" and content is None and query:
            headers["content-type"] = ("Content-Type", FORM_CONTENT_TYPE)
            content = query.encode("ascii")

        # Header values go out as UTF-8, names must be plain ASCII.
        with map_exceptions({UnicodeEncodeError: LocalProtocolError}):
            items = [
                (name.encode("ascii"), value.encode("utf-8") if isinstance(value, str) else value)
                for name, value in headers.values()
            ]

        return Request(
            method=self._method,
            url=URL(url),
            headers=items,
            content=content,
        )

    def _send(self) -> Response:
        request = self.build_request()
        if logger.isEnabledFor(logging.DEBUG) or self._client.debug:
            dump = serialize_request(request)
            logger.debug("request:\n%s", dump.decode("latin-1"))
            if self._client.debug:
                sys.stdout.write(dump.decode("latin-1"))
                sys.stdout.flush()

        self.close()
        self._connection = open_connection(
            request.url,
            ssl_context=self._client.ssl_context,
            network_backend=self._client.network_backend,
        )
        try:
            response = self._connection.handle_request(request)
        except ConnectionClosing as signal:
            response = signal.response
        return response

    # Reading the response...

    def as_response(self) -> Response:
        """
        Send the request and return the response with its body unread.
        The caller is responsible for closing the response.
        """
        return self._send()

    def as_bytes(self) -> bytes:
        response = self._send()
        try:
            return response.read()
        finally:
            response.close()

    def as_string(self) -> str:
        """
        Send the request and return the response body as text, decoded with
        the charset given in the Content-Type header, or UTF-8.
        """
        response = self._send()
        try:
            content = response.read()
        finally:
            response.close()
        if not content:
            return ""
        encoding = response.charset_encoding or "utf-8"
        try:
            return content.decode(encoding, errors="replace")
        except LookupError:
            return content.decode("utf-8", errors="replace")

    def as_file(self, path: Union[str, "os.PathLike[str]"]) -> None:
        """
        Send the request and write the response body to `path`.

        The file is created, or truncated, before the request is sent.
        Raises `FileIOError` if the file can not be created or written.
        """
        with map_exceptions({OSError: FileIOError}):
            file = open(path, "wb")
        with file:
            response = self._send()
            try:
                for chunk in response.iter_stream():
                    with map_exceptions({OSError: FileIOError}):
                        file.write(chunk)
            finally:
                response.close()

    # Releasing the connection...

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> "RequestBuilder":
        return self

    def __exit__(
        self,
        exc_type: Type[BaseException] = None,
        exc_value: BaseException = None,
        traceback: TracebackType = None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} [{self._method} {self._url!r}]>"
