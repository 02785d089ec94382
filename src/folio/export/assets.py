"""Asset handling — verbatim copy of the static asset directory.

Copies every file under the site's ``static/`` directory into
``output/static/``, preserving directory structure and bytes.
"""

from __future__ import annotations

import shutil
import time
from pathlib import Path

from folio.export.records import ExportedFile


def copy_assets(
    static_path: Path,
    output_dir: Path,
) -> tuple[ExportedFile, ...] | None:
    """Recursively copy static assets to ``output_dir/static/``.

    Files are copied in sorted path order so repeated exports walk the
    tree identically.

    Args:
        static_path: Source directory (e.g., ``site_root/static/``).
        output_dir: Root export output directory.

    Returns:
        Tuple of :class:`ExportedFile` entries, one per copied file, or
        ``None`` when ``static_path`` is not a directory.

    """
    if not static_path.is_dir():
        return None

    dest_root = output_dir / "static"
    dest_root.mkdir(parents=True, exist_ok=True)
    results: list[ExportedFile] = []

    for src_file in sorted(static_path.rglob("*")):
        if not src_file.is_file():
            continue

        t0 = time.perf_counter()

        relative = src_file.relative_to(static_path)
        dest_file = dest_root / relative
        dest_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_file, dest_file)

        size = dest_file.stat().st_size
        elapsed = (time.perf_counter() - t0) * 1000

        results.append(ExportedFile(
            source_path=f"/static/{relative.as_posix()}",
            output_path=dest_file,
            source_type="asset",
            size_bytes=size,
            duration_ms=elapsed,
        ))

    return tuple(results)
