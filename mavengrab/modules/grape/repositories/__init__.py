from .proxy import NoProxySelector, ProxySelector, StaticProxySelector, proxy_selector_from_settings
from .registry import RepositoryRegistry, parse_repository_spec

__all__ = [
    "NoProxySelector",
    "ProxySelector",
    "StaticProxySelector",
    "proxy_selector_from_settings",
    "RepositoryRegistry",
    "parse_repository_spec",
]
