"""Transfer events emitted while downloading repository resources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TransferKind(str, Enum):
    INITIATED = "initiated"
    STARTED = "started"
    PROGRESSED = "progressed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class TransferEvent:
    kind: TransferKind
    resource_url: str
    repository_id: str
    transferred: int = 0
    total: int = 0
    elapsed: float = 0.0
    error: Optional[BaseException] = None

    @property
    def resource_name(self) -> str:
        return self.resource_url.rstrip("/").rsplit("/", 1)[-1]
