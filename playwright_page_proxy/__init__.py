"""
Page proxy plugin for Playwright.

Routes the requests of individual pages through HTTP/HTTPS/SOCKS proxies
by intercepting them and replaying them with httpx.
"""

from .models import (
    UNSET,
    HttpMethod,
    ProxiedResponse,
    ProxyURL,
    RequestOverrides,
    PageProxyConfig,
    GlobalProxyConfig,
    InterceptedRequest,
)
from .exceptions import (
    PageProxyError,
    ConfigError,
    ProxyError,
    ProxyTimeoutError,
    LookupTimeoutError,
    ParseError,
    NetworkError,
)
from .dispatcher import ProxyDispatcher, get_proxied_response
from .registry import PageProxyRegistry
from .coordinator import InterceptionCoordinator
from .interception import RouteRequestView
from .lookup import lookup
from .plugin import PageProxyPlugin
from .page import ProxyPage
from .tools import parse_proxy

__version__ = "0.1.0"

__all__ = [
    "PageProxyPlugin",
    "ProxyPage",
    "lookup",
    "get_proxied_response",
    "ProxyDispatcher",
    "PageProxyRegistry",
    "InterceptionCoordinator",
    "RouteRequestView",
    "parse_proxy",
    "UNSET",
    "HttpMethod",
    "ProxiedResponse",
    "ProxyURL",
    "RequestOverrides",
    "PageProxyConfig",
    "GlobalProxyConfig",
    "InterceptedRequest",
    "PageProxyError",
    "ConfigError",
    "ProxyError",
    "ProxyTimeoutError",
    "LookupTimeoutError",
    "ParseError",
    "NetworkError",
]
