"""Export event model.

Every event is a frozen dataclass with a monotonic ``timestamp_ns`` plus
fields describing one thing the exporter did (or declined to do).

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal

type ExportStage = Literal["reset", "assets", "index", "projects", "pages", "admin"]


@dataclass(frozen=True, slots=True)
class StageCompleted:
    """An export stage finished.

    Attributes:
        stage: Which pipeline stage.
        files_written: Files the stage produced.
        duration_ms: Time spent in the stage.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    stage: ExportStage
    files_written: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PageWritten:
    """A rendered page was written to the output tree."""

    path: str
    size_bytes: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ProjectSkipped:
    """A project listed on the index could not be rendered and was skipped.

    Attributes:
        slug: The listed project's slug.
        reason: Why it was skipped.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    slug: str
    reason: str
    timestamp_ns: int

    @property
    def path(self) -> str:
        """Permalink the page would have had."""
        return f"/project/{self.slug}/"


@dataclass(frozen=True, slots=True)
class AssetsMissing:
    """The static asset directory did not exist; nothing was copied."""

    path: str
    timestamp_ns: int


type ExportEvent = StageCompleted | PageWritten | ProjectSkipped | AssetsMissing


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
