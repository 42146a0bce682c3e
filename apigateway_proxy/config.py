"""
Proxy settings.

Loads configuration from environment variables (prefix ``APIGW_``) with
pydantic-settings, e.g. ``APIGW_HOST=api.example.com APIGW_BASE_PATH=pets``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from apigateway_proxy.proxy import DefaultProxy, Proxy, StripBasePathProxy


class ProxySettings(BaseSettings):
    """Per-deployment proxy configuration, read once at cold start."""

    host: str = Field(default="", description="Host set on every request; empty to use the Host header")
    base_path: str = Field(default="", description="Base path mapping stripped from event paths")
    log_level: str = Field(default="INFO", description="Level of the apigateway_proxy logger")

    model_config = SettingsConfigDict(env_prefix="APIGW_", frozen=True, extra="ignore")


def proxy_from_settings(settings: ProxySettings) -> Proxy:
    """StripBasePathProxy when a base path is configured, DefaultProxy otherwise."""
    if settings.base_path:
        return StripBasePathProxy(host=settings.host, base_path=settings.base_path)
    return DefaultProxy(host=settings.host)
