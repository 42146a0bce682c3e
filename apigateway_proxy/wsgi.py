"""
WSGI bridge: run a PEP 3333 application as a Gateway handler.

    from flask import Flask

    app = Flask(__name__)
    lambda_handler = create_lambda_handler(WSGIHandler(app))
"""

import io
import sys
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote_to_bytes

from apigateway_proxy.request import Request
from apigateway_proxy.response import ResponseWriter

WSGIApp = Callable[[Dict[str, Any], Callable[..., Any]], Iterable[bytes]]


def build_environ(request: Request) -> Dict[str, Any]:
    """WSGI environ for a request."""
    host = request.host or "localhost"
    server_name, _, port = host.partition(":")
    payload = request.read()

    environ: Dict[str, Any] = {
        "REQUEST_METHOD": request.method,
        "SCRIPT_NAME": "",
        "PATH_INFO": unquote_to_bytes(request.path).decode("latin-1"),
        "QUERY_STRING": request.url.query,
        "SERVER_NAME": server_name,
        "SERVER_PORT": port or "443",
        "SERVER_PROTOCOL": "HTTP/1.1",
        "REMOTE_ADDR": request.remote_addr,
        "CONTENT_LENGTH": request.headers.get("Content-Length") or str(len(payload)),
        "CONTENT_TYPE": request.headers.get("Content-Type", ""),
        "wsgi.version": (1, 0),
        "wsgi.url_scheme": "https",
        "wsgi.input": io.BytesIO(payload),
        "wsgi.errors": sys.stderr,
        "wsgi.multithread": False,
        "wsgi.multiprocess": False,
        "wsgi.run_once": False,
        "apigateway.context": request.context,
    }
    for name, value in request.headers.to_multi_dict().items():
        key = "HTTP_" + name.upper().replace("-", "_")
        if key in ("HTTP_CONTENT_TYPE", "HTTP_CONTENT_LENGTH"):
            continue
        environ[key] = ",".join(value)
    return environ


class WSGIHandler:
    """Gateway handler that delegates to a WSGI application."""

    def __init__(self, app: WSGIApp):
        self.app = app

    def __call__(self, w: ResponseWriter, request: Request) -> None:
        started: List[Tuple[str, List[Tuple[str, str]]]] = []
        sent = False

        def flush_headers() -> None:
            nonlocal sent
            if sent or not started:
                return
            status, response_headers = started[0]
            for name, value in response_headers:
                w.add_header(name, value)
            w.set_status(int(status.split(" ", 1)[0]))
            sent = True

        def start_response(
            status: str,
            response_headers: List[Tuple[str, str]],
            exc_info: Optional[Any] = None,
        ) -> Callable[[bytes], Any]:
            if exc_info is not None and sent:
                raise exc_info[1].with_traceback(exc_info[2])
            started[:] = [(status, response_headers)]
            return write

        def write(data: bytes) -> None:
            flush_headers()
            w.write(data)

        result = self.app(build_environ(request), start_response)
        try:
            for chunk in result:
                if chunk:
                    write(chunk)
            flush_headers()
        finally:
            close = getattr(result, "close", None)
            if close is not None:
                close()
