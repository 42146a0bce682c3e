"""
Errors raised while translating gateway events into requests.

Every transform error derives from ProxyError so a caller can translate the
whole family into its own failure signal (e.g. a synthesized 502 response).
"""


class ProxyError(Exception):
    """
    Base class for errors raised by a Proxy transform.

    A transform error is terminal for the invocation: no response envelope is
    produced and nothing is retried.
    """


class MalformedPathError(ProxyError):
    """The event path cannot be parsed as a URL reference."""


class BodyDecodeError(ProxyError):
    """The event body is flagged as base64 but is not valid base64."""


class RequestConstructionError(ProxyError):
    """The method or URL cannot form a valid HTTP request."""


class NoTransformDefinedError(ProxyError):
    """A request builder was asked to apply an empty step sequence."""


class ResponseFinalizedError(RuntimeError):
    """
    A ResponseCapture was written to after finalize().

    This is a programming error in the handler, not a recoverable condition.
    """
