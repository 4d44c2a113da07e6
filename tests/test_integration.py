import json
import ssl

import pytest

import httpbuilder


def test_get(httpbin):
    with httpbuilder.get(httpbin.url + "/get") as builder:
        text = builder.param("q", "1").param("q", "2").as_string()
    assert json.loads(text)["args"] == {"q": "2"}


def test_post_form(httpbin):
    with httpbuilder.post(httpbin.url + "/post") as builder:
        data = builder.param("b", "y").param("a", "x").as_bytes()
    assert json.loads(data)["form"] == {"a": "x", "b": "y"}


def test_as_file(httpbin, tmp_path):
    path = tmp_path / "robots.txt"
    with httpbuilder.get(httpbin.url + "/robots.txt") as builder:
        builder.as_file(path)
        content = builder.as_bytes()
    assert path.read_bytes() == content


def test_as_response(httpbin):
    with httpbuilder.delete(httpbin.url + "/status/404") as builder:
        with builder.as_response() as response:
            assert response.status == 404


def test_ssl_request(httpbin_secure):
    ssl_context = ssl.create_default_context()
    ssl_context.check_hostname = False
    ssl_context.verify_mode = ssl.CERT_NONE
    client = httpbuilder.Client(ssl_context=ssl_context)
    with client.get(httpbin_secure.url + "/get") as builder:
        with builder.as_response() as response:
            assert response.status == 200


def test_ssl_request_with_default_context(httpbin_secure):
    # The test server's certificate is not signed by a CA in the system
    # trust store, so verification fails during the handshake.
    with httpbuilder.get(httpbin_secure.url + "/get") as builder:
        with pytest.raises(httpbuilder.CertificateError):
            builder.as_bytes()
