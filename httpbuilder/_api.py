from ._builder import RequestBuilder
from ._client import Client


def get(url: str, *, client: Client = None) -> RequestBuilder:
    """
    Start building a GET request.

        text = httpbuilder.get("https://www.example.com/").as_string()

    Arguments:
        url: The URL to send the request to. Parameters set with `.param()`
             are appended to its query string.
        client: The `Client` whose configuration the request uses. A `Client()`
                with default settings is used if none is given.

    Returns:
        An instance of `httpbuilder.RequestBuilder`.
    """
    return (Client() if client is None else client).get(url)


def post(url: str, *, client: Client = None) -> RequestBuilder:
    """
    Start building a POST request. Parameters set with `.param()` are sent as
    a form-encoded body, unless a body is set with `.body()`.
    """
    return (Client() if client is None else client).post(url)


def put(url: str, *, client: Client = None) -> RequestBuilder:
    return (Client() if client is None else client).put(url)


def delete(url: str, *, client: Client = None) -> RequestBuilder:
    return (Client() if client is None else client).delete(url)
