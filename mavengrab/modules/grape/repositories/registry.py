"""Ordered, deduplicated registry of remote repositories."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional, Sequence

from mavengrab.modules.grape.domain import DEFAULT_LAYOUT, Repository
from mavengrab.modules.grape.exceptions import InvalidRepositoryError

from .proxy import NoProxySelector, ProxySelector

log = logging.getLogger(__name__)


def parse_repository_spec(spec: str) -> Repository:
    """Build a repository from an ``id=url`` string."""
    repo_id, sep, url = spec.partition("=")
    repo_id, url = repo_id.strip(), url.strip()
    if not sep or not repo_id or not url:
        raise InvalidRepositoryError(f"Repository must be given as 'id=url', got {spec!r}")
    return Repository(id=repo_id, url=url.rstrip("/"), layout=DEFAULT_LAYOUT)


class RepositoryRegistry:
    """Repositories in search order: index 0 is searched first.

    Each registration goes to the front of the list, so the most recently
    registered repository has the highest priority.
    """

    def __init__(
        self,
        proxy_selector: Optional[ProxySelector] = None,
        repositories: Sequence[Repository] = (),
    ) -> None:
        self.proxy_selector = proxy_selector or NoProxySelector()
        self._repositories: List[Repository] = []
        self._lock = threading.RLock()
        self.register_in_priority_order(repositories)

    def register(self, repository: Repository) -> bool:
        """Insert at highest priority; returns False when already registered."""
        with self._lock:
            if repository in self._repositories:
                log.debug("Repository %s (%s) already registered", repository.id, repository.url)
                return False
            if repository.proxy is None:
                repository = repository.with_proxy(self.proxy_selector.get_proxy(repository))
            self._repositories.insert(0, repository)
            log.info("Registered repository %s -> %s", repository.id, repository.url)
            return True

    def register_in_priority_order(self, repositories: Iterable[Repository]) -> None:
        """Register a list given highest priority first.

        ``register`` prepends, so the list is walked in reverse to keep the
        first entry on top.
        """
        with self._lock:
            for repository in reversed(list(repositories)):
                self.register(repository)

    def as_ordered_list(self) -> List[Repository]:
        with self._lock:
            return list(self._repositories)

    def __contains__(self, repository: object) -> bool:
        with self._lock:
            return repository in self._repositories

    def __len__(self) -> int:
        with self._lock:
            return len(self._repositories)
