import logging

import httpx

from mavengrab.modules.grape import create_grape_engine
from mavengrab.modules.grape.domain import TransferEvent, TransferKind
from mavengrab.modules.grape.progress import (
    DetailedProgressReporter,
    SummaryProgressReporter,
    create_progress_reporter,
)

from conftest import build_settings


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _event(kind, transferred=0, total=0):
    return TransferEvent(kind, "https://central.test/maven2/g/m/1/m-1.jar", "central", transferred, total, elapsed=1.0)


def test_summary_reporter_quiet_for_fast_resolutions(caplog):
    clock = FakeClock()
    reporter = SummaryProgressReporter(initial_delay=2.0, clock=clock)

    with caplog.at_level(logging.INFO):
        reporter.on_transfer(_event(TransferKind.INITIATED))
        clock.now = 0.5
        reporter.on_transfer(_event(TransferKind.SUCCEEDED, 10, 10))
        reporter.finished()

    assert caplog.records == []


def test_summary_reporter_reports_slow_resolutions(caplog):
    clock = FakeClock()
    reporter = SummaryProgressReporter(initial_delay=2.0, interval=1.0, clock=clock)

    with caplog.at_level(logging.INFO):
        reporter.on_transfer(_event(TransferKind.INITIATED))
        clock.now = 2.5
        reporter.on_transfer(_event(TransferKind.SUCCEEDED, 2048, 2048))
        clock.now = 4.0
        reporter.on_transfer(_event(TransferKind.INITIATED))
        reporter.finished()

    messages = [record.getMessage() for record in caplog.records]
    assert messages[0] == "Resolving dependencies.."
    assert messages[1] == "Resolving dependencies.. 1 downloaded"
    assert messages[-1].startswith("Resolved dependencies: 1 downloaded (2048 bytes)")


def test_detailed_reporter_logs_each_download(caplog):
    reporter = DetailedProgressReporter()

    with caplog.at_level(logging.INFO):
        reporter.on_transfer(_event(TransferKind.STARTED, 0, 100))
        reporter.on_transfer(_event(TransferKind.PROGRESSED, 55, 100))
        reporter.on_transfer(_event(TransferKind.PROGRESSED, 58, 100))
        reporter.on_transfer(_event(TransferKind.SUCCEEDED, 100, 100))
        reporter.on_transfer(_event(TransferKind.FAILED))
        reporter.finished()

    messages = [record.getMessage() for record in caplog.records]
    assert messages[0].startswith("Downloading: https://central.test/maven2/g/m/1/m-1.jar")
    assert messages[1] == "Download progress m-1.jar 55% (55/100 bytes)"
    assert messages[2].startswith("Downloaded: ")
    assert caplog.records[3].levelno == logging.WARNING


def test_reporter_selected_by_configuration():
    assert isinstance(create_progress_reporter(True), DetailedProgressReporter)
    assert isinstance(create_progress_reporter(False), SummaryProgressReporter)


def test_engine_feeds_transfer_events_to_reporter(tmp_path, server):
    server.add_artifact("com.example", "lib", "1.0")

    class Recorder:
        def __init__(self):
            self.kinds = []
            self.finished_calls = 0

        def on_transfer(self, event):
            self.kinds.append(event.kind)

        def finished(self):
            self.finished_calls += 1

    recorder = Recorder()
    engine = create_grape_engine(build_settings(tmp_path), client=server.client(), reporter=recorder)

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert TransferKind.SUCCEEDED in recorder.kinds
    assert recorder.finished_calls == 1
