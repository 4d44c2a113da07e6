import email.message
from types import TracebackType
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Type, Union
from urllib.parse import quote, urlsplit

from ._exceptions import InvalidURL, map_exceptions

__all__ = [
    "ByteStream",
    "Origin",
    "URL",
    "Request",
    "Response",
]


# Functions for typechecking...


def enforce_bytes(value: Union[bytes, str], *, name: str) -> bytes:
    """
    Any arguments that are ultimately represented as bytes can be specified
    either as bytes or as strings.

    However we enforce that any string arguments must only contain characters in
    the plain ASCII range. chr(0)...chr(127). If you need to use characters
    outside that range then be precise, and use a byte-wise argument.
    """
    if isinstance(value, str):
        try:
            return value.encode("ascii")
        except UnicodeEncodeError:
            raise TypeError(f"{name} strings may not include unicode characters.")
    elif isinstance(value, bytes):
        return value

    seen_type = type(value).__name__
    raise TypeError(f"{name} must be bytes or str, but got {seen_type}.")


def enforce_url(value: Union["URL", bytes, str], *, name: str) -> "URL":
    """
    Type check for URL parameters.
    """
    if isinstance(value, (bytes, str)):
        return URL(value)
    elif isinstance(value, URL):
        return value

    seen_type = type(value).__name__
    raise TypeError(f"{name} must be a URL, bytes, or str, but got {seen_type}.")


def enforce_headers(
    value: Union[dict, list] = None, *, name: str
) -> List[Tuple[bytes, bytes]]:
    """
    Convienence function that ensure all items in request or response headers
    are either bytes or strings in the plain ASCII range.
    """
    if value is None:
        return []
    elif isinstance(value, (list, tuple)):
        return [
            (
                enforce_bytes(k, name="header name"),
                enforce_bytes(v, name="header value"),
            )
            for k, v in value
        ]
    elif isinstance(value, dict):
        return [
            (
                enforce_bytes(k, name="header name"),
                enforce_bytes(v, name="header value"),
            )
            for k, v in value.items()
        ]

    seen_type = type(value).__name__
    raise TypeError(f"{name} must be a list, but got {seen_type}.")


def enforce_stream(
    value: Union[bytes, Iterable[bytes], None], *, name: str
) -> Iterable[bytes]:
    if value is None:
        return ByteStream(b"")
    elif isinstance(value, bytes):
        return ByteStream(value)
    return value


# Schemes that we can open connections for, and the port used when the
# URL does not include one.
DEFAULT_PORTS = {
    b"http": 80,
    b"https": 443,
}


def has_port(authority: Union[bytes, str]) -> bool:
    """
    Return `True` if a `host[:port]` string includes a port.

    The last colon has to come after any closing bracket, so that IPv6
    literals such as `[::1]` are not mistaken for a host with a port.
    """
    if isinstance(authority, bytes):
        return authority.rfind(b":") > authority.rfind(b"]")
    return authority.rfind(":") > authority.rfind("]")


def include_request_headers(
    headers: List[Tuple[bytes, bytes]],
    *,
    url: "URL",
    method: bytes,
    content: Optional[bytes],
) -> List[Tuple[bytes, bytes]]:
    headers_set = set([k.lower() for k, v in headers])

    if b"host" not in headers_set:
        headers = [(b"Host", url.authority)] + headers

    if b"content-length" not in headers_set and b"transfer-encoding" not in headers_set:
        if content is not None:
            content_length = str(len(content)).encode("ascii")
            headers += [(b"Content-Length", content_length)]
        elif method in (b"POST", b"PUT"):
            headers += [(b"Content-Length", b"0")]

    return headers


# Interfaces for byte streams...


class ByteStream:
    """
    A container for non-streaming content, that supports stream iteration.
    """

    def __init__(self, content: bytes) -> None:
        self._content = content

    def __iter__(self) -> Iterator[bytes]:
        if self._content:
            yield self._content

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} [{len(self._content)} bytes]>"


class Origin:
    def __init__(self, scheme: bytes, host: bytes, port: int) -> None:
        self.scheme = scheme
        self.host = host
        self.port = port

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Origin)
            and self.scheme == other.scheme
            and self.host == other.host
            and self.port == other.port
        )

    def __str__(self) -> str:
        scheme = self.scheme.decode("ascii")
        host = self.host.decode("ascii")
        if ":" in host:
            host = f"[{host}]"
        port = str(self.port)
        return f"{scheme}://{host}:{port}"


class URL:
    """
    Represents the URL against which an HTTP request is made.

    >>> url = httpbuilder.URL("https://www.example.com:8443/search?q=1")
    >>> url.scheme, url.host, url.port, url.target
    (b'https', b'www.example.com', 8443, b'/search?q=1')

    `authority` is the `host[:port]` portion exactly as it appeared in the
    URL, and is what gets sent in the `Host` header. Any userinfo and
    fragment components are dropped.

    Raises `InvalidURL` if the string can not be parsed, has no host, or has
    a malformed port.
    """

    def __init__(self, url: Union[bytes, str]) -> None:
        if isinstance(url, bytes):
            with map_exceptions({UnicodeDecodeError: InvalidURL}):
                url = url.decode("ascii")

        with map_exceptions({ValueError: InvalidURL}):
            parsed = urlsplit(url)

        authority = parsed.netloc.rpartition("@")[2]
        if not authority:
            raise InvalidURL(f"No host included in URL {url!r}.")

        host, port = authority, None
        if has_port(authority):
            host, _, port_str = authority.rpartition(":")
            if port_str:
                if not port_str.isdigit() or int(port_str) > 65535:
                    raise InvalidURL(f"Invalid port {port_str!r} in URL {url!r}.")
                port = int(port_str)
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        if not host:
            raise InvalidURL(f"No host included in URL {url!r}.")

        path = quote(parsed.path, safe="/%:@!$&'()*+,;=~") or "/"
        query = quote(parsed.query, safe="/%:@!$&'()*+,;=~?")
        target = path + ("?" + query if query else "")

        with map_exceptions({UnicodeEncodeError: InvalidURL}):
            self.scheme: bytes = parsed.scheme.lower().encode("ascii")
            self.host: bytes = host.encode("ascii")
            self.authority: bytes = authority.encode("ascii")
        self.port: Optional[int] = port
        self.target: bytes = target.encode("ascii")

    @property
    def origin(self) -> Origin:
        port = self.port if self.port is not None else DEFAULT_PORTS.get(self.scheme)
        return Origin(scheme=self.scheme, host=self.host, port=port)

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, URL)
            and other.scheme == self.scheme
            and other.host == self.host
            and other.port == self.port
            and other.target == self.target
        )

    def __bytes__(self) -> bytes:
        return b"%b://%b%b" % (self.scheme, self.authority, self.target)

    def __str__(self) -> str:
        return bytes(self).decode("ascii")

    def __repr__(self):
        return f"{self.__class__.__name__}(scheme={self.scheme!r}, host={self.host!r}, port={self.port!r}, target={self.target!r})"


class Request:
    def __init__(
        self,
        method: Union[bytes, str],
        url: Union[URL, bytes, str],
        *,
        headers: Union[dict, list] = None,
        content: Optional[bytes] = None,
    ) -> None:
        self.method: bytes = enforce_bytes(method, name="method")
        self.url: URL = enforce_url(url, name="url")
        self.headers: List[Tuple[bytes, bytes]] = include_request_headers(
            enforce_headers(headers, name="headers"),
            url=self.url,
            method=self.method,
            content=content,
        )
        self.stream: Iterable[bytes] = enforce_stream(content, name="content")

    def __repr__(self):
        return f"<{self.__class__.__name__} [{self.method!r}]>"


class Response:
    """
    An HTTP response, with the body available as a stream.

    Attributes:
        status: The HTTP status code of the response.
        headers: The HTTP response headers, as a list of two-tuples of bytes.
        stream: The content of the response body.
        extensions: `http_version` and `reason_phrase`.
    """

    def __init__(
        self,
        status: int,
        *,
        headers: Union[dict, list] = None,
        content: Union[bytes, Iterable[bytes]] = None,
        extensions: dict = None,
    ) -> None:
        self.status: int = status
        self.headers: List[Tuple[bytes, bytes]] = enforce_headers(
            headers, name="headers"
        )
        self.stream: Iterable[bytes] = enforce_stream(content, name="content")
        self.extensions: dict = {} if extensions is None else extensions

        self._stream_consumed = False

    @property
    def content(self) -> bytes:
        if not hasattr(self, "_content"):
            raise RuntimeError(
                "Attempted to access 'response.content' on a streaming response. "
                "Call 'response.read()' first."
            )
        return self._content

    @property
    def charset_encoding(self) -> Optional[str]:
        """
        Return the encoding, as specified by the Content-Type header.
        """
        for key, value in self.headers:
            if key.lower() == b"content-type":
                message = email.message.Message()
                message["content-type"] = value.decode("latin-1")
                charset = message.get_content_charset()
                return charset.strip("'\"") if charset else None
        return None

    def __repr__(self):
        return f"<{self.__class__.__name__} [{self.status}]>"

    def read(self) -> bytes:
        if not hasattr(self, "_content"):
            self._content = b"".join([part for part in self.iter_stream()])
        return self._content

    def iter_stream(self) -> Iterator[bytes]:
        if self._stream_consumed:
            raise RuntimeError(
                "Attempted to call 'for ... in response.iter_stream()' more than once."
            )
        self._stream_consumed = True
        for chunk in self.stream:
            yield chunk

    def close(self) -> None:
        if hasattr(self.stream, "close"):
            self.stream.close()

    def __enter__(self) -> "Response":
        return self

    def __exit__(
        self,
        exc_type: Type[BaseException] = None,
        exc_value: BaseException = None,
        traceback: TracebackType = None,
    ) -> None:
        self.close()
