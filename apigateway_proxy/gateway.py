"""
Gateway: serves API Gateway events with an ordinary HTTP handler.

Proxies each event into a Request, runs the handler against a fresh
ResponseCapture and returns the finalized envelope to the Lambda runtime.
"""

import logging
import os
from typing import Any, Callable, Mapping, Optional, Union

from apigateway_proxy.config import ProxySettings, proxy_from_settings
from apigateway_proxy.context import TRACE_ID_KEY, Context, ContextKey
from apigateway_proxy.events import ProxyEvent
from apigateway_proxy.exceptions import ProxyError
from apigateway_proxy.proxy import DefaultProxy, Proxy
from apigateway_proxy.response import ResponseCapture
from apigateway_proxy.types import Handler, LambdaResponse

logger = logging.getLogger(__name__)

TRACE_ID_ENV_VAR = "_X_AMZN_TRACE_ID"
"""Environment variable where the Lambda runtime exposes the X-Ray trace id."""


class Gateway:
    """
    Mimics an HTTP server for Lambda: event in, handler call, envelope out.

    Example:
        def hello(w, r):
            w.set_header("Content-Type", "application/json")
            w.write(b'"Hello World"')

        gateway = Gateway(hello, proxy=DefaultProxy("api.example.com"))

        def lambda_handler(event, context):
            return gateway.serve(event, context)
    """

    def __init__(self, handler: Handler, proxy: Optional[Proxy] = None):
        self.handler = handler
        self.proxy = proxy if proxy is not None else DefaultProxy()

    def new_context(self, lambda_context: Any = None) -> Context:
        """Execution context for one invocation."""
        ctx = Context.background()
        if lambda_context is not None:
            ctx = ctx.with_value(ContextKey.LAMBDA_CONTEXT, lambda_context)
        trace_id = os.environ.get(TRACE_ID_ENV_VAR)
        if trace_id:
            ctx = ctx.with_value(TRACE_ID_KEY, trace_id)
        return ctx

    def serve(
        self,
        event: Union[ProxyEvent, Mapping[str, Any]],
        lambda_context: Any = None,
    ) -> LambdaResponse:
        """
        Handle one event.

        Transform errors are logged and re-raised: no envelope is produced and
        the Lambda runtime reports the failure.
        """
        proxy_event = event if isinstance(event, ProxyEvent) else ProxyEvent.model_validate(event)
        request_id = proxy_event.request_context.request_id

        try:
            request = self.proxy.transform(self.new_context(lambda_context), proxy_event)
        except ProxyError as exc:
            logger.error(
                f"Failed to transform event: {exc}",
                extra={"request_id": request_id, "error_type": type(exc).__name__},
            )
            raise

        w = ResponseCapture()
        self.handler(w, request)
        response = w.finalize()

        logger.info(
            "Request handled",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
            },
        )
        return response.to_lambda_response()

    def __call__(
        self,
        event: Union[ProxyEvent, Mapping[str, Any]],
        lambda_context: Any = None,
    ) -> LambdaResponse:
        return self.serve(event, lambda_context)


def create_lambda_handler(
    handler: Handler,
    proxy: Optional[Proxy] = None,
    settings: Optional[ProxySettings] = None,
) -> Callable[..., LambdaResponse]:
    """
    Create a Lambda handler function serving ``handler``.

    Without an explicit proxy, one is built from ProxySettings (environment).

    Usage:
        def app(w, r):
            w.write(b"hello")

        lambda_handler = create_lambda_handler(app)
    """
    settings = settings if settings is not None else ProxySettings()
    logging.getLogger("apigateway_proxy").setLevel(settings.log_level.upper())
    gateway = Gateway(handler, proxy if proxy is not None else proxy_from_settings(settings))

    def lambda_handler(event: Mapping[str, Any], context: Optional[Any] = None) -> LambdaResponse:
        return gateway.serve(event, context)

    return lambda_handler
