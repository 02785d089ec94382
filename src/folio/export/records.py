"""Export records — what an export run wrote."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from folio._types import ExportKind


@dataclass(frozen=True, slots=True)
class ExportedFile:
    """Record of a single file written during export.

    Attributes:
        source_path: Logical URL path (e.g., ``"/project/alpha/"``).
        output_path: Absolute filesystem path to the written file.
        source_type: Category of the exported file.
        size_bytes: Size of the written file in bytes.
        duration_ms: Time taken to render and write this file.

    """

    source_path: str
    output_path: Path
    source_type: ExportKind
    size_bytes: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Aggregate result of a completed export.

    A run either returns this (completed) or raises ExportError (failed);
    there is no partial result.

    Attributes:
        files: All files written during export, in pipeline order.
        total_pages: Number of HTML pages written (index, projects, pages, admin).
        total_assets: Number of static asset files copied.
        skipped: Slugs of projects listed on the index but not exported.
        duration_ms: Total wall-clock time for the export.
        output_dir: Absolute path to the output directory.

    """

    files: tuple[ExportedFile, ...]
    total_pages: int
    total_assets: int
    skipped: tuple[str, ...]
    duration_ms: float
    output_dir: Path
