"""Export collector — the exporter's single sink for events and warnings.

Records structured events into an :class:`EventLog`, echoes the
operator-relevant ones (warnings, skips) to stderr, and reads the current
run's skips and stage timings back out of the log.

Thread Safety:
    Recording delegates to ``EventLog``, which is internally locked.  Safe
    for concurrent use from the exporter's worker threads.  ``begin_run``
    is called once per export, before any worker starts.

"""

from __future__ import annotations

import sys

from folio.observability.events import (
    AssetsMissing,
    ExportStage,
    PageWritten,
    ProjectSkipped,
    StageCompleted,
    now_ns,
)
from folio.observability.log import EventLog


class ExportCollector:
    """Records export events.

    Args:
        log: The EventLog to store events in (a fresh one by default).
        quiet: Suppress progress lines, warnings, and the summary on stderr.

    """

    __slots__ = ("_log", "_quiet", "_run_started_ns")

    def __init__(
        self,
        log: EventLog | None = None,
        *,
        quiet: bool = False,
    ) -> None:
        self._log = log if log is not None else EventLog()
        self._quiet = quiet
        self._run_started_ns = now_ns()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    @property
    def quiet(self) -> bool:
        return self._quiet

    def echo(self, text: str) -> None:
        """Print ``text`` to stderr unless quiet."""
        if not self._quiet:
            print(text, file=sys.stderr)

    def info(self, message: str) -> None:
        """Print a progress line."""
        self.echo(f"  {message}")

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def begin_run(self) -> None:
        """Start a new export; later reads ignore events from earlier runs."""
        self._run_started_ns = now_ns()

    def record_stage(
        self,
        stage: ExportStage,
        *,
        files_written: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            StageCompleted(
                stage=stage,
                files_written=files_written,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_page(self, path: str, *, size_bytes: int, duration_ms: float) -> None:
        self._log.append(
            PageWritten(
                path=path,
                size_bytes=size_bytes,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_skip(self, slug: str, reason: str) -> None:
        """Record a skipped project and warn about it."""
        event = ProjectSkipped(slug=slug, reason=reason, timestamp_ns=now_ns())
        self._log.append(event)
        self.info(f"Skipped {event.path}: {reason}")

    def record_assets_missing(self, path: str) -> None:
        """Record a missing asset directory and warn about it."""
        self._log.append(AssetsMissing(path=path, timestamp_ns=now_ns()))
        self.info(f"Warning: static directory {path} not found, no assets copied")

    # ------------------------------------------------------------------
    # Current run
    # ------------------------------------------------------------------

    def skipped_slugs(self) -> list[str]:
        """Slugs skipped since :meth:`begin_run`, in the order they were skipped."""
        events = self._log.query(ProjectSkipped, since_ns=self._run_started_ns)
        return [event.slug for event in events]  # type: ignore[union-attr]

    def completed_stages(self) -> list[StageCompleted]:
        """Stages completed since :meth:`begin_run`, in pipeline order."""
        return self._log.query(StageCompleted, since_ns=self._run_started_ns)  # type: ignore[return-value]
