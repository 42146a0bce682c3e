"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace

import pytest

from apigateway_proxy.context import Context
from apigateway_proxy.events import ProxyEvent
from tests.utils import make_event


@pytest.fixture
def ctx() -> Context:
    return Context.background()


@pytest.fixture
def pets_event() -> ProxyEvent:
    """POST /pets with a JSON body, as API Gateway sends it."""
    return ProxyEvent.model_validate(
        make_event(
            "POST",
            "/pets",
            body='{ "name": "Tobi" }',
            headers={"Content-Type": "application/json", "X-Foo": "bar"},
            multi_headers={"Content-Type": ["application/json"], "X-Foo": ["bar"]},
            request_id="1234",
            stage="prod",
            source_ip="1.2.3.4",
        )
    )


@pytest.fixture
def lambda_context() -> SimpleNamespace:
    return SimpleNamespace(aws_request_id="test-request-id", function_name="pets", memory_limit_in_mb=128)
