"""
Proxies transform an API Gateway event and an execution context into a Request.
"""

import logging
from typing import Callable, Tuple

from typing_extensions import Annotated, Doc

from apigateway_proxy.context import Context
from apigateway_proxy.events import ProxyEvent
from apigateway_proxy.request import Request
from apigateway_proxy.transforms import DEFAULT_STEPS, RequestBuilder, Step

logger = logging.getLogger(__name__)


class Proxy:
    """Base class for event-to-request transforms."""

    steps: Tuple[Step, ...] = DEFAULT_STEPS

    def transform(self, ctx: Context, event: ProxyEvent) -> Request:
        raise NotImplementedError()  # pragma: no cover

    def __call__(self, ctx: Context, event: ProxyEvent) -> Request:
        return self.transform(ctx, event)


class ProxyFunc(Proxy):
    """
    Adapter to use an ordinary function as a Proxy.

    Example:
        def my_proxy(ctx, event):
            return DefaultProxy("api.example.com").transform(ctx, event)

        gateway = Gateway(handler, proxy=ProxyFunc(my_proxy))
    """

    def __init__(self, func: Callable[[Context, ProxyEvent], Request]):
        self.func = func

    def transform(self, ctx: Context, event: ProxyEvent) -> Request:
        return self.func(ctx, event)


class DefaultProxy(Proxy):
    """
    Proxy for API Gateway events that keeps the event path as is.

    The request host is the configured one, or the event's Host header when no
    host is configured.
    """

    def __init__(
        self,
        host: Annotated[
            str,
            Doc(
                """
                Host set on every request. When empty, the event's `Host` header
                is used instead.
                """
            ),
        ] = "",
    ):
        self._host = host

    @property
    def host(self) -> str:
        return self._host

    def transform(self, ctx: Context, event: ProxyEvent) -> Request:
        """Return a new Request created from the given event."""
        builder = RequestBuilder(ctx, event)
        builder.create_request(self._host)
        return self._finish(builder)

    def _finish(self, builder: RequestBuilder) -> Request:
        request = builder.apply(self.steps)
        logger.debug(
            "Transformed event into request",
            extra={
                "request_id": builder.event.request_context.request_id,
                "method": request.method,
                "url": str(request.url),
            },
        )
        return request


class StripBasePathProxy(DefaultProxy):
    """
    Proxy that strips a base path mapping from the event path first.

    Example:
        proxy = StripBasePathProxy("api.example.com", "pets")
        # "/pets/123" is routed as "/123"
    """

    def __init__(
        self,
        host: Annotated[str, Doc("Host set on every request.")] = "",
        base_path: Annotated[
            str,
            Doc(
                """
                Base path mapping of the custom domain, without slashes
                (e.g. `pets` for `https://api.example.com/pets`).
                """
            ),
        ] = "",
    ):
        super().__init__(host)
        self._base_path = base_path

    @property
    def base_path(self) -> str:
        return self._base_path

    def transform(self, ctx: Context, event: ProxyEvent) -> Request:
        builder = RequestBuilder(ctx, event)
        builder.strip_base_path(self._base_path)
        builder.create_request(self._host)
        return self._finish(builder)

