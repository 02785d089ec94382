"""Event log — the record an export run is summarised from.

Milestones (stage completions, skipped projects, a missing asset
directory) are few per run and are all kept: the export result and the
stderr summary are read back from them.  ``PageWritten`` events grow with
the size of the portfolio, so only the newest ``max_pages`` are retained.

Thread Safety:
    Appends and reads take a ``threading.Lock``; worker threads append
    while the exporter reads.

"""

import threading
from collections import deque

from folio.observability.events import ExportEvent, PageWritten


def _timestamp(event: ExportEvent) -> int:
    return event.timestamp_ns


class EventLog:
    """Export events, returned in timestamp order.

    Args:
        max_pages: Page events to retain; older ones are discarded.

    """

    __slots__ = ("_lock", "_milestones", "_pages")

    def __init__(self, max_pages: int = 10_000) -> None:
        self._milestones: list[ExportEvent] = []
        self._pages: deque[PageWritten] = deque(maxlen=max_pages)
        self._lock = threading.Lock()

    def append(self, event: ExportEvent) -> None:
        with self._lock:
            if isinstance(event, PageWritten):
                self._pages.append(event)
            else:
                self._milestones.append(event)

    def query(
        self,
        event_type: type | None = None,
        *,
        since_ns: int = 0,
    ) -> list[ExportEvent]:
        """Events of ``event_type`` (all types if omitted), oldest first.

        Args:
            event_type: Only return events of this type.
            since_ns: Only return events stamped at or after this time.

        """
        with self._lock:
            if event_type is PageWritten:
                candidates: list[ExportEvent] = list(self._pages)
            elif event_type is None:
                candidates = [*self._milestones, *self._pages]
            else:
                candidates = list(self._milestones)

        matches = [
            event
            for event in candidates
            if (event_type is None or isinstance(event, event_type))
            and event.timestamp_ns >= since_ns
        ]
        # Workers stamp events before taking the lock.
        matches.sort(key=_timestamp)
        return matches
