"""
Request handed to handler code.

Built by a Proxy from an API Gateway event; handlers read it like any other
HTTP request object and never see the event itself.
"""

import copy
import io
import json
import re
from typing import Any, Dict, List, Optional

from apigateway_proxy.context import Context
from apigateway_proxy.datastructures import URL, Address, Headers
from apigateway_proxy.exceptions import RequestConstructionError

# RFC 7230 token
METHOD_REGEX = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

# Characters allowed in a URL authority (RFC 3986 reg-name, IP literal and port)
HOST_REGEX = re.compile(r"^[A-Za-z0-9\-._~%!$&'()*+,;=:\[\]]*$")


class Request:
    """
    HTTP request assembled from a gateway event.

    The proxy owns it while the enrichment steps run; once handed to the
    handler it is never mutated by the proxy again.
    """

    def __init__(
        self,
        method: str,
        url: URL,
        body: bytes = b"",
        host: str = "",
        headers: Optional[Headers] = None,
        remote_addr: str = "",
        context: Optional[Context] = None,
    ):
        self.method = method
        self.url = url
        self.host = host or url.host
        self.headers = headers if headers is not None else Headers()
        self.remote_addr = remote_addr
        self.body = io.BytesIO(body)
        self._payload = body
        self._context = context if context is not None else Context.background()

    @property
    def context(self) -> Context:
        """Execution context of the request."""
        return self._context

    def with_context(self, ctx: Context) -> "Request":
        """Shallow copy of the request carrying ``ctx``."""
        clone = copy.copy(self)
        clone._context = ctx
        return clone

    @property
    def path(self) -> str:
        return self.url.path

    @property
    def query_params(self) -> Dict[str, List[str]]:
        """Query string parameters (every value of every key)."""
        return self.url.query_params

    @property
    def client(self) -> Address:
        """Client address from the gateway's caller identity."""
        return Address(host=self.remote_addr or None)

    @property
    def body_size(self) -> int:
        """Length in bytes of the decoded body."""
        return len(self._payload)

    @property
    def content_length(self) -> Optional[int]:
        value = self.headers.get("Content-Length")
        return int(value) if value is not None else None

    def read(self) -> bytes:
        """Read the remaining body."""
        return self.body.read()

    def json(self) -> Any:
        """Parse the request body as JSON; None for an empty body."""
        if not self._payload:
            return None
        return json.loads(self._payload)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(method={self.method!r}, url={str(self.url)!r})"


def new_request(method: str, url: URL, body: bytes, host: str = "") -> Request:
    """
    Assemble a request from its method, URL and body.

    An empty method means GET. Raises RequestConstructionError when the method
    is not a valid HTTP token or the host cannot appear in a URL authority.
    """
    method = method or "GET"
    if not METHOD_REGEX.match(method):
        raise RequestConstructionError(f"invalid method {method!r}")

    host = host or url.host
    if not HOST_REGEX.match(host):
        raise RequestConstructionError(f"invalid host {host!r} in URL {str(url)!r}")

    return Request(method=method, url=url._replace(host=host), body=body, host=host)
