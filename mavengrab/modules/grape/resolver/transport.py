"""HTTP transport that downloads repository resources into a local repository."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import httpx

from mavengrab.modules.grape.domain import (
    DependencyCoordinate,
    Repository,
    TransferEvent,
    TransferKind,
)
from mavengrab.modules.grape.exceptions import ArtifactNotFoundError
from mavengrab.modules.grape.progress import NoOpProgressReporter, ProgressReporter

PROGRESS_CHUNK = 65536


class RepositoryTransport:
    """Download artifacts and metadata from Maven-layout repositories.

    Files land in ``local_repository`` using the same layout, and an existing
    local file is reused without contacting any repository.
    """

    def __init__(
        self,
        local_repository: Path,
        *,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
        listener: Optional[ProgressReporter] = None,
    ) -> None:
        self.local_repository = Path(local_repository)
        self.timeout = timeout
        self.listener: ProgressReporter = listener or NoOpProgressReporter()
        self.log = logging.getLogger(self.__class__.__name__)
        self._client = client
        self._clients: Dict[Optional[str], httpx.Client] = {}

    # ------------------------------------------------------------------ urls and paths
    @staticmethod
    def artifact_url(repository: Repository, coords: DependencyCoordinate) -> str:
        return f"{repository.url.rstrip('/')}/{'/'.join(coords.path_segments)}"

    @staticmethod
    def metadata_url(repository: Repository, group: str, module: str) -> str:
        return f"{repository.url.rstrip('/')}/{group.replace('.', '/')}/{module}/maven-metadata.xml"

    def local_path(self, coords: DependencyCoordinate) -> Path:
        return self.local_repository.joinpath(*coords.path_segments)

    def _client_for(self, repository: Repository) -> httpx.Client:
        if self._client is not None:
            return self._client
        proxy_url = repository.proxy.url if repository.proxy else None
        client = self._clients.get(proxy_url)
        if client is None:
            client = httpx.Client(timeout=self.timeout, proxy=proxy_url, follow_redirects=True)
            self._clients[proxy_url] = client
        return client

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()

    # ------------------------------------------------------------------ artifacts
    def fetch(
        self,
        coords: DependencyCoordinate,
        repositories: Sequence[Repository],
    ) -> Tuple[Path, Optional[str]]:
        """Return the local file for ``coords`` and the id of the repository it came from.

        The id is None when the file was already in the local repository.
        """
        target = self.local_path(coords)
        if target.exists():
            self.log.debug("Reusing cached artifact %s -> %s", coords, target)
            return target, None

        attempts: List[str] = []
        errors: List[str] = []
        for repository in repositories:
            url = self.artifact_url(repository, coords)
            try:
                if self._download(repository, url, target):
                    return target, repository.id
                attempts.append(f"{repository.id}: not found")
            except httpx.HTTPError as exc:
                attempts.append(f"{repository.id}: {exc}")
                errors.append(repository.id)
        raise ArtifactNotFoundError(str(coords), attempts, errors)

    def fetch_optional(
        self,
        coords: DependencyCoordinate,
        repositories: Sequence[Repository],
    ) -> Optional[Path]:
        try:
            return self.fetch(coords, repositories)[0]
        except ArtifactNotFoundError as exc:
            if exc.errors:
                raise
            return None

    def _download(self, repository: Repository, url: str, target: Path) -> bool:
        client = self._client_for(repository)
        self._emit(TransferKind.INITIATED, url, repository)
        start_time = time.time()
        downloaded = 0
        partial = target.with_name(target.name + ".part")
        try:
            with client.stream("GET", url) as response:
                if response.status_code == 404:
                    return False
                response.raise_for_status()
                total = int(response.headers.get("content-length") or 0)
                self._emit(TransferKind.STARTED, url, repository, total=total)
                partial.parent.mkdir(parents=True, exist_ok=True)
                with open(partial, "wb") as fh:
                    for chunk in response.iter_bytes(PROGRESS_CHUNK):
                        if not chunk:
                            continue
                        fh.write(chunk)
                        downloaded += len(chunk)
                        self._emit(TransferKind.PROGRESSED, url, repository, downloaded, total)
            partial.replace(target)
        except httpx.HTTPError as exc:
            partial.unlink(missing_ok=True)
            self._emit(TransferKind.FAILED, url, repository, downloaded, error=exc)
            raise
        elapsed = max(time.time() - start_time, 1e-3)
        self._emit(TransferKind.SUCCEEDED, url, repository, downloaded, downloaded, elapsed=elapsed)
        self.log.info("Downloaded %s from %s -> %s (%d bytes, %.2fs)", url, repository.id, target, downloaded, elapsed)
        return True

    # ------------------------------------------------------------------ metadata
    def fetch_metadata(
        self,
        group: str,
        module: str,
        repositories: Sequence[Repository],
    ) -> List[bytes]:
        """Metadata documents from every repository that has one."""
        documents: List[bytes] = []
        for repository in repositories:
            url = self.metadata_url(repository, group, module)
            client = self._client_for(repository)
            self._emit(TransferKind.INITIATED, url, repository)
            try:
                response = client.get(url)
                if response.status_code == 404:
                    continue
                response.raise_for_status()
            except httpx.HTTPError as exc:
                self._emit(TransferKind.FAILED, url, repository, error=exc)
                self.log.warning("Could not read metadata %s from %s: %s", url, repository.id, exc)
                continue
            self._emit(TransferKind.SUCCEEDED, url, repository, len(response.content), len(response.content))
            documents.append(response.content)
        return documents

    def _emit(
        self,
        kind: TransferKind,
        url: str,
        repository: Repository,
        transferred: int = 0,
        total: int = 0,
        *,
        elapsed: float = 0.0,
        error: Optional[BaseException] = None,
    ) -> None:
        self.listener.on_transfer(
            TransferEvent(
                kind=kind,
                resource_url=url,
                repository_id=repository.id,
                transferred=transferred,
                total=total,
                elapsed=elapsed,
                error=error,
            )
        )
