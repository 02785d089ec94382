"""Export observability — structured events for each export run.

Quick Start:
    >>> from folio.observability import EventLog, ExportCollector
    >>> log = EventLog()
    >>> collector = ExportCollector(log)
    >>> # Pass collector to SiteExporter; inspect log.query(...) afterwards

"""

from folio.observability.collector import ExportCollector
from folio.observability.events import (
    AssetsMissing,
    ExportEvent,
    PageWritten,
    ProjectSkipped,
    StageCompleted,
    now_ns,
)
from folio.observability.log import EventLog

__all__ = [
    "AssetsMissing",
    "EventLog",
    "ExportCollector",
    "ExportEvent",
    "PageWritten",
    "ProjectSkipped",
    "StageCompleted",
    "now_ns",
]
