"""Test utilities and helper functions."""

from typing import Dict, List, Optional

from apigateway_proxy.types import HttpMethod, LambdaEvent


def make_event(
    method: HttpMethod = "GET",
    path: str = "/",
    body: Optional[str] = None,
    query: Optional[Dict[str, str]] = None,
    multi_query: Optional[Dict[str, List[str]]] = None,
    headers: Optional[Dict[str, str]] = None,
    multi_headers: Optional[Dict[str, List[str]]] = None,
    is_base64: bool = False,
    request_id: str = "",
    stage: str = "",
    source_ip: Optional[str] = None,
) -> LambdaEvent:
    """Create API Gateway v1 Lambda event (nulls where API Gateway sends nulls)."""
    return {
        "resource": "/{proxy+}",
        "httpMethod": method,
        "path": path,
        "headers": headers,
        "multiValueHeaders": multi_headers,
        "queryStringParameters": query,
        "multiValueQueryStringParameters": multi_query,
        "pathParameters": None,
        "stageVariables": None,
        "body": body,
        "isBase64Encoded": is_base64,
        "requestContext": {
            "requestId": request_id,
            "stage": stage,
            "identity": {"sourceIp": source_ip, "user": None},
        },
    }
