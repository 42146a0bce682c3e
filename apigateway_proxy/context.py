"""
Execution context carried by a request.

A Context is an immutable key/value mapping passed explicitly from the
gateway to the proxy and on to the request. Deriving a context never changes
the parent, so a context can be shared freely between invocations.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Hashable, Iterator, Mapping, Optional, Tuple

from apigateway_proxy.events import RequestContext


class ContextKey(Enum):
    """Keys owned by this package, so they never collide with caller keys."""

    REQUEST_CONTEXT = "request-context"
    LAMBDA_CONTEXT = "lambda-context"


TRACE_ID_KEY = "x-amzn-trace-id"
"""Key under which the X-Ray trace id is looked up."""


class Context(Mapping[Hashable, Any]):
    """Immutable mapping of request-scoped values."""

    def __init__(self, values: Optional[Mapping[Hashable, Any]] = None):
        self._values = MappingProxyType(dict(values or {}))

    @classmethod
    def background(cls) -> "Context":
        """Empty root context."""
        return cls()

    def with_value(self, key: Hashable, value: Any) -> "Context":
        """Return a derived context where ``key`` maps to ``value``."""
        return Context({**self._values, key: value})

    def value(self, key: Hashable, default: Any = None) -> Any:
        return self._values.get(key, default)

    def lookup(self, key: Hashable) -> Tuple[Any, bool]:
        """Return ``(value, True)`` when ``key`` is present, else ``(None, False)``."""
        if key in self._values:
            return self._values[key], True
        return None, False

    def __getitem__(self, key: Hashable) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({dict(self._values)!r})"


def with_request_context(ctx: Context, request_context: RequestContext) -> Context:
    """Derive a context carrying the gateway's request context."""
    return ctx.with_value(ContextKey.REQUEST_CONTEXT, request_context)


def request_context(ctx: Context) -> Tuple[Optional[RequestContext], bool]:
    """Return the RequestContext stored in ``ctx`` and whether it was present."""
    value, ok = ctx.lookup(ContextKey.REQUEST_CONTEXT)
    if not ok or not isinstance(value, RequestContext):
        return None, False
    return value, True


def lambda_context(ctx: Context) -> Tuple[Any, bool]:
    """Return the Lambda runtime context object stored in ``ctx``, if any."""
    return ctx.lookup(ContextKey.LAMBDA_CONTEXT)
