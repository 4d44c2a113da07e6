import logging
import ssl
from typing import Union

from ._exceptions import UnsupportedProtocol
from ._http11 import HTTP11Connection
from ._models import URL, enforce_url
from ._ssl import default_ssl_context
from .backends.base import NetworkBackend
from .backends.sync import SyncBackend

logger = logging.getLogger(__name__)


def open_connection(
    url: Union[URL, bytes, str],
    *,
    ssl_context: ssl.SSLContext = None,
    network_backend: NetworkBackend = None,
) -> HTTP11Connection:
    """
    Open a new connection to the origin of the given URL.

    Plain TCP is used for "http" URLs. For "https" URLs the connection is
    upgraded to TLS, and the server certificate is verified against the
    URL's hostname before this function returns.

    Verification is performed by `ssl_context`. The default context checks
    both the certificate chain and the hostname. A caller-supplied context
    with `check_hostname = False` or `verify_mode = ssl.CERT_NONE` skips
    those checks, and no `CertificateError` is raised.

    When the URL has no port the scheme's default port is used, see
    `DEFAULT_PORTS`.

    Raises `ConnectError` if the connection can not be established,
    `CertificateError` if certificate verification fails, and
    `UnsupportedProtocol` for schemes other than "http" and "https".
    """
    url = enforce_url(url, name="url")
    origin = url.origin
    if origin.scheme not in (b"http", b"https"):
        raise UnsupportedProtocol(
            f"Request URL has an unsupported protocol '{origin.scheme.decode('ascii')}://'."
        )
    if network_backend is None:
        network_backend = SyncBackend()

    stream = network_backend.connect(origin)
    if origin.scheme == b"https":
        if ssl_context is None:
            ssl_context = default_ssl_context()
        stream = stream.start_tls(ssl_context, server_hostname=origin.host)
    logger.debug("connected origin=%s tls=%s", origin, origin.scheme == b"https")

    return HTTP11Connection(origin=origin, stream=stream)
