import logging

import httpbuilder
from httpbuilder import Client
from httpbuilder.backends.mock import MockBackend


RESPONSE = [
    b"HTTP/1.1 200 OK\r\n",
    b"Content-Type: text/plain\r\n",
    b"Content-Length: 13\r\n",
    b"\r\n",
    b"Hello, world!",
]


def test_client_factories():
    client = Client(network_backend=MockBackend(RESPONSE))
    assert client.get("http://example.test/").method == "GET"
    assert client.post("http://example.test/").method == "POST"
    assert client.put("http://example.test/").method == "PUT"
    assert client.delete("http://example.test/").method == "DELETE"
    assert repr(client) == "<Client [debug=False]>"


def test_module_level_factories():
    for factory, method in [
        (httpbuilder.get, "GET"),
        (httpbuilder.post, "POST"),
        (httpbuilder.put, "PUT"),
        (httpbuilder.delete, "DELETE"),
    ]:
        builder = factory("http://example.test/")
        assert isinstance(builder, httpbuilder.RequestBuilder)
        assert builder.method == method
        builder.close()


def test_default_client_settings():
    client = Client()
    assert not client.debug
    assert client.ssl_context is None
    assert client.network_backend is None
    assert client.headers == {}
    assert client.user_agent == f"httpbuilder/{httpbuilder.__version__}"


def test_debug_dumps_request(capsys):
    client = Client(debug=True, network_backend=MockBackend(RESPONSE))
    client.post("http://example.test/submit").param("a", "x").as_string()

    out = capsys.readouterr().out
    assert out.startswith("POST /submit HTTP/1.1\r\nHost: example.test\r\n")
    assert "Content-Type: application/x-www-form-urlencoded\r\n" in out
    assert out.endswith("\r\n\r\na=x")


def test_debug_is_off_by_default(capsys):
    client = Client(network_backend=MockBackend(RESPONSE))
    client.get("http://example.test/").as_string()

    assert capsys.readouterr().out == ""


def test_debug_logging(caplog):
    client = Client(network_backend=MockBackend(RESPONSE))
    with caplog.at_level(logging.DEBUG, logger="httpbuilder"):
        client.get("http://example.test/api").as_string()

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("request:\nGET /api HTTP/1.1") for message in messages)
    assert "connected origin=http://example.test:80 tls=False" in messages
    assert "close_connection origin=http://example.test:80" not in messages


def test_unsupported_body_is_logged(caplog):
    client = Client(network_backend=MockBackend(RESPONSE))
    with caplog.at_level(logging.DEBUG, logger="httpbuilder"):
        client.post("http://example.test/").body(42)

    assert "Ignoring request body of type int" in [
        record.getMessage() for record in caplog.records
    ]

