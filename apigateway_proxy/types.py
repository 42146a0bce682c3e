"""
Wire types for API Gateway proxy events and responses.

The event and response dicts exchanged with the Lambda runtime, plus the
handler signature the gateway drives.
"""

from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Literal,
    Optional,
    TypedDict,
)

HttpMethod = Literal[
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "OPTIONS",
    "PATCH",
]
"""HTTP methods supported by API Gateway."""


class RequestIdentityDict(TypedDict, total=False):
    """Caller identity as sent by API Gateway (only the commonly used fields)."""

    sourceIp: str
    userAgent: Optional[str]
    user: Optional[str]
    userArn: Optional[str]


class RequestContextDict(TypedDict, total=False):
    """API Gateway v1.0 request context."""

    accountId: str
    resourceId: str
    stage: str
    requestId: str
    identity: RequestIdentityDict
    authorizer: Optional[Dict[str, Any]]
    apiId: str
    resourcePath: str
    httpMethod: str


class LambdaEvent(TypedDict, total=False):
    """
    API Gateway REST API (v1.0) proxy integration event.

    API Gateway sends both the single-value and the multi-value variants of
    the query string and headers. Either may be null.
    """

    resource: str
    path: str
    httpMethod: HttpMethod

    headers: Optional[Dict[str, str]]
    multiValueHeaders: Optional[Dict[str, List[str]]]
    queryStringParameters: Optional[Dict[str, str]]
    multiValueQueryStringParameters: Optional[Dict[str, List[str]]]
    pathParameters: Optional[Dict[str, str]]
    stageVariables: Optional[Dict[str, str]]

    body: Optional[str]
    isBase64Encoded: bool

    requestContext: RequestContextDict


class LambdaResponse(TypedDict):
    """API Gateway proxy response envelope."""

    statusCode: int
    headers: Dict[str, str]
    multiValueHeaders: Dict[str, List[str]]
    body: str
    isBase64Encoded: bool


if TYPE_CHECKING:
    from apigateway_proxy.request import Request
    from apigateway_proxy.response import ResponseWriter

Handler = Callable[["ResponseWriter", "Request"], None]
"""Synchronous handler that reads a request and writes into a response writer."""
