"""Remote repository descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional
from urllib.parse import urlsplit

from .constants import DEFAULT_LAYOUT


@dataclass(frozen=True)
class ProxyConfig:
    host: str
    port: int
    scheme: str = "http"
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def url(self) -> str:
        auth = ""
        if self.username:
            auth = self.username
            if self.password:
                auth = f"{auth}:{self.password}"
            auth = f"{auth}@"
        return f"{self.scheme}://{auth}{self.host}:{self.port}"

    @classmethod
    def from_url(cls, url: str) -> "ProxyConfig":
        parts = urlsplit(url)
        if not parts.hostname:
            raise ValueError(f"Invalid proxy url: {url}")
        scheme = parts.scheme or "http"
        port = parts.port or (443 if scheme == "https" else 80)
        return cls(
            host=parts.hostname,
            port=port,
            scheme=scheme,
            username=parts.username,
            password=parts.password,
        )


@dataclass(frozen=True)
class Repository:
    """A remote Maven repository; equal when id, layout and url match."""

    id: str
    url: str
    layout: str = DEFAULT_LAYOUT
    name: Optional[str] = field(default=None, compare=False)
    proxy: Optional[ProxyConfig] = field(default=None, compare=False)

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname or ""

    def with_proxy(self, proxy: Optional[ProxyConfig]) -> "Repository":
        return replace(self, proxy=proxy)

    def as_dict(self) -> dict:
        payload = {"id": self.id, "name": self.display_name, "url": self.url, "layout": self.layout}
        if self.proxy is not None:
            payload["proxy"] = f"{self.proxy.scheme}://{self.proxy.host}:{self.proxy.port}"
        return payload
