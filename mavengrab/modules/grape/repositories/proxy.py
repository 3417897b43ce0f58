"""Proxy selection for repositories registered without explicit proxy settings."""

from __future__ import annotations

import fnmatch
from typing import Iterable, Optional, Protocol, Tuple

from mavengrab.modules.grape.domain import ProxyConfig, Repository


class ProxySelector(Protocol):
    def get_proxy(self, repository: Repository) -> Optional[ProxyConfig]:
        ...


class NoProxySelector:
    def get_proxy(self, repository: Repository) -> Optional[ProxyConfig]:
        return None


class StaticProxySelector:
    """Routes every repository through one proxy unless its host is exempt.

    ``non_proxy_hosts`` accepts shell-style patterns such as ``*.internal``.
    """

    def __init__(self, proxy: ProxyConfig, non_proxy_hosts: Iterable[str] = ()) -> None:
        self.proxy = proxy
        self.non_proxy_hosts: Tuple[str, ...] = tuple(h.strip().lower() for h in non_proxy_hosts if h.strip())

    def get_proxy(self, repository: Repository) -> Optional[ProxyConfig]:
        host = repository.host.lower()
        if any(fnmatch.fnmatch(host, pattern) for pattern in self.non_proxy_hosts):
            return None
        return self.proxy


def proxy_selector_from_settings(proxy_url: Optional[str], non_proxy_hosts: Iterable[str] = ()) -> ProxySelector:
    if not proxy_url:
        return NoProxySelector()
    return StaticProxySelector(ProxyConfig.from_url(proxy_url), non_proxy_hosts)
