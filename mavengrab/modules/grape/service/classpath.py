"""Load path that receives the files produced by a grab."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import List


class ClassPath:
    """Ordered, deduplicated list of file URIs."""

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._urls: List[str] = []
        self._lock = threading.Lock()

    def add_url(self, url: str) -> None:
        with self._lock:
            if url not in self._urls:
                self._urls.append(url)

    def add_file(self, path: Path) -> str:
        """Add a file as a ``file:`` URI; relative paths raise ValueError."""
        url = Path(path).as_uri()
        self.add_url(url)
        return url

    @property
    def urls(self) -> List[str]:
        with self._lock:
            return list(self._urls)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
