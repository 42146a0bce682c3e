"""
Pydantic models for the API Gateway v1 (REST API) proxy integration.

Reference: https://docs.aws.amazon.com/apigateway/latest/developerguide/set-up-lambda-proxy-integrations.html

Field names are snake_case in Python and camelCase on the wire. API Gateway
sends ``null`` for absent maps and for most identity fields, so every model
reads ``null`` as the field default.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from apigateway_proxy.types import LambdaResponse


class GatewayModel(BaseModel):
    """Immutable camelCase model shared by every gateway structure."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name is not None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class Identity(GatewayModel):
    """Caller identity of the request context."""

    source_ip: Optional[str] = None
    user_agent: Optional[str] = None
    user: Optional[str] = None
    user_arn: Optional[str] = None
    caller: Optional[str] = None
    api_key: Optional[str] = None
    account_id: Optional[str] = None
    cognito_identity_pool_id: Optional[str] = None
    cognito_identity_id: Optional[str] = None
    cognito_authentication_type: Optional[str] = None
    cognito_authentication_provider: Optional[str] = None


class RequestContext(GatewayModel):
    """
    Gateway metadata about the caller and the invocation.

    Attached to every request built by a proxy; handler code retrieves it with
    ``apigateway_proxy.context.request_context(request.context)``.
    """

    account_id: str = ""
    resource_id: str = ""
    stage: str = ""
    request_id: str = ""
    identity: Identity = Field(default_factory=Identity)
    authorizer: Dict[str, Any] = Field(default_factory=dict)
    api_id: str = ""
    resource_path: str = ""
    http_method: str = ""
    domain_name: str = ""
    path: str = ""
    protocol: str = ""


class ProxyEvent(GatewayModel):
    """
    Event delivered by API Gateway for one inbound request.

    Build it from the raw runtime dict with ``ProxyEvent.model_validate(event)``.
    """

    resource: str = ""
    path: str = ""
    http_method: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    multi_value_headers: Dict[str, List[str]] = Field(default_factory=dict)
    query_string_parameters: Dict[str, str] = Field(default_factory=dict)
    multi_value_query_string_parameters: Dict[str, List[str]] = Field(default_factory=dict)
    path_parameters: Dict[str, str] = Field(default_factory=dict)
    stage_variables: Dict[str, str] = Field(default_factory=dict)
    body: str = ""
    is_base64_encoded: bool = False
    request_context: RequestContext = Field(default_factory=RequestContext)

    def query(self) -> Dict[str, List[str]]:
        """
        Effective multi-value query string.

        The multi-value map is authoritative; single-value keys missing from it
        are folded in as one-element lists.
        """
        merged = {key: list(values) for key, values in self.multi_value_query_string_parameters.items()}
        for key, value in self.query_string_parameters.items():
            merged.setdefault(key, [value])
        return merged

    def header_fields(self) -> Dict[str, List[str]]:
        """Effective multi-value headers, folded the same way as ``query()``."""
        merged = {name: list(values) for name, values in self.multi_value_headers.items()}
        present = {name.lower() for name in merged}
        for name, value in self.headers.items():
            if name.lower() not in present:
                merged[name] = [value]
                present.add(name.lower())
        return merged


class ProxyResponse(GatewayModel):
    """Response envelope returned to API Gateway."""

    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    multi_value_headers: Dict[str, List[str]] = Field(default_factory=dict)
    body: str = ""
    is_base64_encoded: bool = False

    def to_lambda_response(self) -> LambdaResponse:
        """Convert to API Gateway Lambda response format."""
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
