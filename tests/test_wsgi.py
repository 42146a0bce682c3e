"""Tests for running WSGI applications behind the Gateway."""

import json

from apigateway_proxy import DefaultProxy, Gateway, WSGIHandler
from apigateway_proxy.context import Context
from apigateway_proxy.events import ProxyEvent
from apigateway_proxy.wsgi import build_environ
from tests.utils import make_event


def environ_app(environ, start_response):
    """Return the interesting parts of the environ as JSON."""
    payload = environ["wsgi.input"].read()
    body = json.dumps(
        {
            "method": environ["REQUEST_METHOD"],
            "path": environ["PATH_INFO"],
            "query": environ["QUERY_STRING"],
            "server": environ["SERVER_NAME"],
            "remote": environ["REMOTE_ADDR"],
            "content_type": environ["CONTENT_TYPE"],
            "content_length": environ["CONTENT_LENGTH"],
            "stage": environ.get("HTTP_X_STAGE"),
            "foo": environ.get("HTTP_X_FOO"),
            "body": payload.decode("utf-8"),
        }
    ).encode("utf-8")
    start_response("201 Created", [("Content-Type", "application/json"), ("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
    return [body]


def test_wsgi_app_behind_gateway():
    gateway = Gateway(WSGIHandler(environ_app), proxy=DefaultProxy("api.example.com"))
    event = make_event(
        "POST",
        "/pets",
        body='{ "name": "Tobi" }',
        query={"order": "desc"},
        headers={"Content-Type": "application/json"},
        multi_headers={"Content-Type": ["application/json"], "X-Foo": ["a", "b"]},
        stage="prod",
        source_ip="1.2.3.4",
    )

    response = gateway.serve(event)

    assert response["statusCode"] == 201
    assert response["multiValueHeaders"]["Set-Cookie"] == ["a=1", "b=2"]
    assert json.loads(response["body"]) == {
        "method": "POST",
        "path": "/pets",
        "query": "order=desc",
        "server": "api.example.com",
        "remote": "1.2.3.4",
        "content_type": "application/json",
        "content_length": "18",
        "stage": "prod",
        "foo": "a,b",
        "body": '{ "name": "Tobi" }',
    }


def test_write_callable_and_close():
    """Bodies written through write() and iterable close() are both honoured."""
    closed = []

    class Result:
        def __iter__(self):
            yield b" world"

        def close(self):
            closed.append(True)

    def app(environ, start_response):
        write = start_response("200 OK", [("Content-Type", "text/plain")])
        write(b"hello")
        return Result()

    response = Gateway(WSGIHandler(app)).serve(make_event("GET", "/"))

    assert response["body"] == "hello world"
    assert response["headers"] == {"Content-Type": "text/plain", "Content-Length": "11"}
    assert closed == [True]


def test_empty_body_sets_status():
    def app(environ, start_response):
        start_response("204 No Content", [])
        return []

    response = Gateway(WSGIHandler(app)).serve(make_event("DELETE", "/pets/1"))

    assert response["statusCode"] == 204
    assert response["body"] == ""


def test_build_environ_host_with_port():
    request = DefaultProxy("localhost:3000").transform(
        Context.background(), ProxyEvent.model_validate(make_event("GET", "/"))
    )

    environ = build_environ(request)

    assert environ["SERVER_NAME"] == "localhost"
    assert environ["SERVER_PORT"] == "3000"
    assert environ["apigateway.context"] is request.context


def test_build_environ_path_info_is_decoded():
    """PATH_INFO carries the percent-decoded path."""
    request = DefaultProxy().transform(
        Context.background(), ProxyEvent.model_validate(make_event("GET", "/pets/luna%20lovegood/caf%C3%A9"))
    )

    environ = build_environ(request)

    assert environ["PATH_INFO"] == "/pets/luna lovegood/cafÃ©"
    assert environ["PATH_INFO"].encode("latin-1").decode("utf-8") == "/pets/luna lovegood/café"
