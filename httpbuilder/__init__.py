from ._api import delete, get, post, put
from ._builder import RequestBuilder
from ._client import Client
from ._connection import open_connection
from ._exceptions import *
from ._http11 import HTTP11Connection, serialize_request
from ._models import *
from ._models import has_port
from ._ssl import default_ssl_context

__all__ = [
    "get",
    "post",
    "put",
    "delete",
    "Client",
    "RequestBuilder",
    "open_connection",
    "has_port",
    "HTTP11Connection",
    "serialize_request",
    "default_ssl_context",
]
__all__ += _models.__all__
__all__ += _exceptions.__all__

__version__ = "0.1.0"


__locals = locals()
for __name in __all__:
    if not __name.startswith("__"):
        setattr(__locals[__name], "__module__", "httpbuilder")  # noqa
