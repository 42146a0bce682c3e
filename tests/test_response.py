"""Tests for ResponseCapture."""

import base64
import logging

import pytest

from apigateway_proxy.exceptions import ResponseFinalizedError
from apigateway_proxy.response import ResponseCapture


def test_defaults():
    """Nothing written: 200 with an empty plain body."""
    response = ResponseCapture().finalize()

    assert response.status_code == 200
    assert response.body == ""
    assert response.is_base64_encoded is False
    assert response.headers == {"Content-Length": "0"}


def test_status_headers_body():
    w = ResponseCapture()
    w.set_header("Content-Type", "application/json")
    w.set_status(418)
    w.write(b'"Hello World"')

    assert w.finalize().to_lambda_response() == {
        "statusCode": 418,
        "headers": {"Content-Type": "application/json", "Content-Length": "13"},
        "multiValueHeaders": {"Content-Type": ["application/json"], "Content-Length": ["13"]},
        "body": '"Hello World"',
        "isBase64Encoded": False,
    }


def test_writes_accumulate():
    w = ResponseCapture()
    assert w.write(b"Hello, ") == 7
    w.write("wörld")

    assert w.finalize().body == "Hello, wörld"


def test_set_header_last_write_wins():
    w = ResponseCapture()
    w.set_header("X-Foo", "a")
    w.set_header("x-foo", "b")

    response = w.finalize()
    assert response.headers["x-foo"] == "b"
    assert response.multi_value_headers["x-foo"] == ["b"]
    assert "X-Foo" not in response.headers


def test_add_header_keeps_values():
    """Multi-value headers are kept in multiValueHeaders; headers holds the last."""
    w = ResponseCapture()
    w.add_header("Set-Cookie", "a=1")
    w.add_header("Set-Cookie", "b=2")

    response = w.finalize()
    assert response.headers["Set-Cookie"] == "b=2"
    assert response.multi_value_headers["Set-Cookie"] == ["a=1", "b=2"]


def test_content_length_from_body():
    w = ResponseCapture()
    w.write("wörld")

    assert w.finalize().headers["Content-Length"] == "6"


def test_content_length_set_by_handler():
    """A Content-Length set by the handler is left alone."""
    w = ResponseCapture()
    w.set_header("content-length", "42")
    w.write(b"ok")

    response = w.finalize()
    assert response.multi_value_headers == {"content-length": ["42"]}


def test_headers_property_is_a_copy():
    """Changing the returned headers does not change the response."""
    w = ResponseCapture()
    w.set_header("X-Foo", "a")
    w.headers.set("X-Foo", "b")
    w.headers.add("X-Bar", "c")

    assert w.headers.get_all("X-Foo") == ["a"]
    response = w.finalize()
    assert response.headers["X-Foo"] == "a"
    assert "X-Bar" not in response.headers


def test_first_write_fixes_status(caplog):
    """set_status after a write is ignored."""
    w = ResponseCapture()
    w.write(b"ok")
    with caplog.at_level(logging.WARNING, logger="apigateway_proxy.response"):
        w.set_status(500)

    assert w.finalize().status_code == 200
    assert "Superfluous set_status call ignored" in caplog.text


def test_first_status_wins():
    w = ResponseCapture()
    w.set_status(201)
    w.set_status(404)

    assert w.status_code == 201


def test_binary_body_is_base64():
    """Bytes that are not UTF-8 are base64-encoded."""
    w = ResponseCapture()
    w.write(b"\x89PNG\r\n\x1a\n\xff")

    response = w.finalize()
    assert response.is_base64_encoded is True
    assert base64.b64decode(response.body) == b"\x89PNG\r\n\x1a\n\xff"


def test_mark_binary():
    """A body marked binary is base64-encoded even when it is valid UTF-8."""
    w = ResponseCapture()
    w.set_header("Content-Type", "application/octet-stream")
    w.write(b"hello world\n")
    w.mark_binary()

    response = w.finalize()
    assert response.is_base64_encoded is True
    assert response.body == "aGVsbG8gd29ybGQK"


def test_finalize_idempotent():
    """Finalizing twice returns the same rendered value."""
    w = ResponseCapture()
    w.set_status(201)
    w.write(b"\xff\xfe")

    first = w.finalize()
    second = w.finalize()
    assert second is first
    assert second.to_lambda_response() == first.to_lambda_response()
    assert w.finalized


@pytest.mark.parametrize(
    "call",
    [
        lambda w: w.write(b"late"),
        lambda w: w.set_status(500),
        lambda w: w.set_header("X-Late", "1"),
        lambda w: w.add_header("X-Late", "1"),
        lambda w: w.mark_binary(),
    ],
)
def test_writes_after_finalize_raise(call):
    w = ResponseCapture()
    w.finalize()

    with pytest.raises(ResponseFinalizedError):
        call(w)
