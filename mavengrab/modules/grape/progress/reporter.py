"""Progress reporters observing repository transfers during a resolve call."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional, Protocol

from mavengrab.modules.grape.domain import TransferEvent, TransferKind

log = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    def on_transfer(self, event: TransferEvent) -> None:
        ...

    def finished(self) -> None:
        ...


class NoOpProgressReporter:
    """Reporter that ignores every event."""

    def on_transfer(self, event: TransferEvent) -> None:
        return None

    def finished(self) -> None:
        return None


class SummaryProgressReporter:
    """Terse reporter: one notice once resolution takes a while, then a summary.

    Nothing is logged for resolutions that finish within ``initial_delay``
    seconds, so cached grabs stay quiet.
    """

    def __init__(
        self,
        *,
        initial_delay: float = 2.0,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.initial_delay = initial_delay
        self.interval = interval
        self._clock = clock
        self.log = logger or log
        self._reset()

    def _reset(self) -> None:
        self._start: Optional[float] = None
        self._last_progress: Optional[float] = None
        self._started = False
        self._downloads = 0
        self._bytes = 0

    def on_transfer(self, event: TransferEvent) -> None:
        now = self._clock()
        if self._start is None:
            self._start = now
        if event.kind is TransferKind.SUCCEEDED:
            self._downloads += 1
            self._bytes += event.transferred
        self._report_progress(now)

    def _report_progress(self, now: float) -> None:
        if self._start is None or now - self._start < self.initial_delay:
            return
        if not self._started:
            self._started = True
            self._last_progress = now
            self.log.info("Resolving dependencies..")
        elif self._last_progress is not None and now - self._last_progress >= self.interval:
            self._last_progress = now
            self.log.info("Resolving dependencies.. %d downloaded", self._downloads)

    def finished(self) -> None:
        if self._started and self._start is not None:
            self.log.info(
                "Resolved dependencies: %d downloaded (%d bytes) in %.1fs",
                self._downloads,
                self._bytes,
                self._clock() - self._start,
            )
        self._reset()


class DetailedProgressReporter:
    """Reports every download with progress in 10% steps and transfer rate."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or log
        self._next_percent: Dict[str, int] = {}

    def on_transfer(self, event: TransferEvent) -> None:
        if event.kind is TransferKind.STARTED:
            self._next_percent[event.resource_url] = 10
            self.log.info("Downloading: %s (%s)", event.resource_url, event.repository_id)
        elif event.kind is TransferKind.PROGRESSED:
            self._report_percent(event)
        elif event.kind is TransferKind.SUCCEEDED:
            self._next_percent.pop(event.resource_url, None)
            elapsed = max(event.elapsed, 1e-3)
            self.log.info(
                "Downloaded: %s (%d bytes at %.1f KB/s)",
                event.resource_url,
                event.transferred,
                event.transferred / 1024 / elapsed,
            )
        elif event.kind is TransferKind.FAILED:
            self._next_percent.pop(event.resource_url, None)
            self.log.warning("Download failed: %s (%s): %s", event.resource_url, event.repository_id, event.error)

    def _report_percent(self, event: TransferEvent) -> None:
        if not event.total:
            return
        next_percent = self._next_percent.get(event.resource_url, 10)
        percent = int(event.transferred * 100 / event.total)
        if percent < next_percent or percent >= 100:
            return
        self.log.info(
            "Download progress %s %s%% (%d/%d bytes)",
            event.resource_name,
            percent,
            event.transferred,
            event.total,
        )
        self._next_percent[event.resource_url] = (percent // 10 + 1) * 10

    def finished(self) -> None:
        self._next_percent.clear()


def create_progress_reporter(
    report_downloads: bool,
    *,
    initial_delay: float = 2.0,
    interval: float = 1.0,
) -> ProgressReporter:
    if report_downloads:
        return DetailedProgressReporter()
    return SummaryProgressReporter(initial_delay=initial_delay, interval=interval)
