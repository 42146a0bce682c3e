"""
Stages that turn a ProxyEvent into a Request.

Path normalization, URL composition and body decoding are plain functions.
The enrichment steps run on a RequestBuilder in the order given by a tuple of
Step tags; DEFAULT_STEPS is the one order every proxy uses.
"""

import base64
import binascii
import logging
import re
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit

from apigateway_proxy.context import TRACE_ID_KEY, Context, with_request_context
from apigateway_proxy.datastructures import URL
from apigateway_proxy.events import ProxyEvent
from apigateway_proxy.exceptions import (
    BodyDecodeError,
    MalformedPathError,
    NoTransformDefinedError,
)
from apigateway_proxy.request import Request, new_request

logger = logging.getLogger(__name__)

# "%" not followed by two hex digits
INVALID_ESCAPE_REGEX = re.compile(r"%(?![0-9A-Fa-f]{2})")
CONTROL_CHAR_REGEX = re.compile(r"[\x00-\x1f\x7f]")


def normalize_path(path: str, base_path: str) -> str:
    """
    Strip the base path out of the path.

    Lets the same handler routing serve both the default "execute-api"
    endpoint and a custom domain with a base path mapping. Only the first
    textual occurrence of the base path is removed.

    Example:
        normalize_path("/pets/123", "pets") -> "/123"
    """
    if path == "/" or base_path == "":
        return path

    if path.startswith("/" + base_path):
        path = path.replace(base_path, "", 1)
    while path.startswith("//"):
        path = path[1:]

    return path


def compose_url(path: str, query: Mapping[str, Sequence[str]], host: str = "") -> URL:
    """
    Build the request URL from the event path, its query string and a host.

    Query values found on the path are kept and the event's values are added
    after them. Keys are encoded in sorted order, values in encounter order.
    Leading slashes are collapsed so the first segment is never read as a host.
    """
    if CONTROL_CHAR_REGEX.search(path):
        raise MalformedPathError(f"invalid control character in path {path!r}")
    if INVALID_ESCAPE_REGEX.search(path):
        raise MalformedPathError(f"invalid URL escape in path {path!r}")
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    try:
        parts = urlsplit(path)
    except ValueError as exc:
        raise MalformedPathError(f"parsing path {path!r}: {exc}") from exc

    merged: Dict[str, List[str]] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        merged.setdefault(key, []).append(value)
    for key, values in query.items():
        merged.setdefault(key, []).extend(values)

    encoded = urlencode(sorted(merged.items(), key=lambda item: item[0]), doseq=True)
    return URL(path=parts.path or "/", query=encoded, host=host, fragment=parts.fragment)


def decode_body(body: str, is_base64: bool) -> bytes:
    """Request payload from the event body, base64-decoded when flagged."""
    if not is_base64:
        try:
            return body.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise BodyDecodeError(f"encoding body as UTF-8: {exc}") from exc
    try:
        # line breaks are allowed between base64 groups
        return base64.b64decode(body.replace("\r", "").replace("\n", ""), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BodyDecodeError(f"decoding base64 body: {exc}") from exc


class Step(Enum):
    """Enrichment steps applied to an assembled request."""

    ATTACH_CONTEXT = "attach_context"
    REMOTE_ADDR = "remote_addr"
    HEADER_FIELDS = "header_fields"
    CONTENT_LENGTH = "content_length"
    CUSTOM_HEADERS = "custom_headers"
    TRACE_HEADER = "trace_header"


DEFAULT_STEPS = (
    Step.ATTACH_CONTEXT,
    Step.REMOTE_ADDR,
    Step.HEADER_FIELDS,
    Step.CONTENT_LENGTH,
    Step.CUSTOM_HEADERS,
    Step.TRACE_HEADER,
)


class RequestBuilder:
    """
    Builds one Request from one event.

    Usage:
        builder = RequestBuilder(ctx, event)
        builder.strip_base_path("pets")
        builder.create_request(host="api.example.com")
        request = builder.apply(DEFAULT_STEPS)
    """

    def __init__(self, ctx: Context, event: ProxyEvent):
        self.context = ctx
        self.event = event
        self.path = event.path
        self.request: Optional[Request] = None

    def strip_base_path(self, base_path: str) -> None:
        """Must run before create_request()."""
        self.path = normalize_path(self.event.path, base_path)

    def resolve_host(self, host: str) -> str:
        """Configured host, or the event's Host header when none is configured."""
        if host:
            return host
        for name, values in self.event.header_fields().items():
            if name.lower() == "host" and values:
                return values[0]
        return ""

    def create_request(self, host: str = "") -> Request:
        url = compose_url(self.path, self.event.query(), self.resolve_host(host))
        body = decode_body(self.event.body, self.event.is_base64_encoded)
        self.request = new_request(self.event.http_method, url, body)
        return self.request

    def apply(self, steps: Sequence[Step]) -> Request:
        """Run the enrichment steps in order and return the finished request."""
        if not steps:
            raise NoTransformDefinedError("no transform steps defined")
        if self.request is None:
            self.create_request()

        for step in steps:
            if step is Step.ATTACH_CONTEXT:
                self.attach_context()
            elif step is Step.REMOTE_ADDR:
                self.set_remote_addr()
            elif step is Step.HEADER_FIELDS:
                self.set_header_fields()
            elif step is Step.CONTENT_LENGTH:
                self.set_content_length()
            elif step is Step.CUSTOM_HEADERS:
                self.set_custom_headers()
            elif step is Step.TRACE_HEADER:
                self.set_trace_header()
            else:  # pragma: no cover
                raise ValueError(f"unknown step {step!r}")

        assert self.request is not None
        return self.request

    def attach_context(self) -> None:
        """Attach the event's request context to the request's execution context."""
        assert self.request is not None
        ctx = with_request_context(self.context, self.event.request_context)
        self.request = self.request.with_context(ctx)

    def set_remote_addr(self) -> None:
        assert self.request is not None
        self.request.remote_addr = self.event.request_context.identity.source_ip or ""

    def set_header_fields(self) -> None:
        """Copy every header value, one entry per value."""
        assert self.request is not None
        for name, values in self.event.header_fields().items():
            for value in values:
                self.request.headers.add(name, value)

    def set_content_length(self) -> None:
        """Set Content-Length from the decoded body unless already present."""
        assert self.request is not None
        if not self.request.headers.get("Content-Length"):
            self.request.headers.set("Content-Length", str(self.request.body_size))

    def set_custom_headers(self) -> None:
        """X-Request-Id and X-Stage always come from the request context."""
        assert self.request is not None
        rc = self.event.request_context
        self.request.headers.set("X-Request-Id", rc.request_id)
        self.request.headers.set("X-Stage", rc.stage)

    def set_trace_header(self) -> None:
        assert self.request is not None
        trace_id = self.context.value(TRACE_ID_KEY)
        if trace_id is not None:
            self.request.headers.set("X-Amzn-Trace-Id", str(trace_id))
        else:
            logger.debug("No trace id in context, skipping X-Amzn-Trace-Id")
