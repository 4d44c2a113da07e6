import ssl
from typing import Dict, Tuple

from ._builder import RequestBuilder
from .backends.base import NetworkBackend

METHODS = ("GET", "POST", "PUT", "DELETE")


class Client:
    """
    Configuration shared by the request builders that it creates.

    Arguments:
        debug: Write each outgoing request to standard output before it is sent.
        ssl_context: The SSL context used for "https" connections. Defaults to
                     `default_ssl_context()`. Certificate and hostname
                     verification are whatever this context enforces, so a
                     context with `check_hostname = False` disables the
                     hostname check.
        network_backend: The backend used to open connections. Defaults to
                         `SyncBackend()`.
        headers: Headers included in every request, unless a builder
                 overrides them.
        user_agent: The default "User-Agent" header.
    """

    def __init__(
        self,
        *,
        debug: bool = False,
        ssl_context: ssl.SSLContext = None,
        network_backend: NetworkBackend = None,
        headers: Dict[str, str] = None,
        user_agent: str = None,
    ) -> None:
        from . import __version__

        self.debug = debug
        self.ssl_context = ssl_context
        self.network_backend = network_backend
        self.headers: Dict[str, Tuple[str, str]] = {
            key.lower(): (key, value) for key, value in (headers or {}).items()
        }
        self.user_agent = (
            f"httpbuilder/{__version__}" if user_agent is None else user_agent
        )

    def get(self, url: str) -> RequestBuilder:
        return self._create_builder("GET", url)

    def post(self, url: str) -> RequestBuilder:
        return self._create_builder("POST", url)

    def put(self, url: str) -> RequestBuilder:
        return self._create_builder("PUT", url)

    def delete(self, url: str) -> RequestBuilder:
        return self._create_builder("DELETE", url)

    def _create_builder(self, method: str, url: str) -> RequestBuilder:
        assert method in METHODS
        return RequestBuilder(method, url, client=self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} [debug={self.debug}]>"
