"""
apigateway-proxy - serve API Gateway proxy events with ordinary HTTP handlers.
"""

from apigateway_proxy.config import ProxySettings as ProxySettings
from apigateway_proxy.config import proxy_from_settings as proxy_from_settings
from apigateway_proxy.context import TRACE_ID_KEY as TRACE_ID_KEY
from apigateway_proxy.context import Context as Context
from apigateway_proxy.context import request_context as request_context
from apigateway_proxy.events import ProxyEvent as ProxyEvent
from apigateway_proxy.events import ProxyResponse as ProxyResponse
from apigateway_proxy.events import RequestContext as RequestContext
from apigateway_proxy.gateway import Gateway as Gateway
from apigateway_proxy.gateway import create_lambda_handler as create_lambda_handler
from apigateway_proxy.proxy import DefaultProxy as DefaultProxy
from apigateway_proxy.proxy import Proxy as Proxy
from apigateway_proxy.proxy import ProxyFunc as ProxyFunc
from apigateway_proxy.proxy import StripBasePathProxy as StripBasePathProxy
from apigateway_proxy.request import Request as Request
from apigateway_proxy.response import ResponseCapture as ResponseCapture
from apigateway_proxy.wsgi import WSGIHandler as WSGIHandler

from .exceptions import BodyDecodeError as BodyDecodeError
from .exceptions import MalformedPathError as MalformedPathError
from .exceptions import NoTransformDefinedError as NoTransformDefinedError
from .exceptions import ProxyError as ProxyError
from .exceptions import RequestConstructionError as RequestConstructionError
from .exceptions import ResponseFinalizedError as ResponseFinalizedError

__version__ = "0.1.0"
