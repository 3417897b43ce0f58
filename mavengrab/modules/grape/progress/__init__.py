from .reporter import (
    DetailedProgressReporter,
    NoOpProgressReporter,
    ProgressReporter,
    SummaryProgressReporter,
    create_progress_reporter,
)

__all__ = [
    "DetailedProgressReporter",
    "NoOpProgressReporter",
    "ProgressReporter",
    "SummaryProgressReporter",
    "create_progress_reporter",
]
