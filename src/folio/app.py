"""Folio app — the ``build`` entry point.

Wires configuration, the content store, the renderer, and the exporter
together for one static export.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from folio.config_loader import load_config

if TYPE_CHECKING:
    from folio.export.records import ExportResult
    from folio.observability.collector import ExportCollector


def build(
    root: str | Path = ".",
    *,
    collector: ExportCollector | None = None,
    **kwargs: object,
) -> ExportResult:
    """Export the portfolio as static HTML files.

    Reads every project, block and page from the content store, renders
    them through the theme templates, and writes a static site to the
    configured output directory.

    Args:
        root: Path to the site root directory.
        collector: Event sink for the run (a fresh one by default).
        **kwargs: Override FolioConfig fields.

    Returns:
        The completed export's result.

    Raises:
        ConfigError: If configuration is invalid or no database URL is set.
        StoreError: If the content store cannot be reached.
        ExportError: If rendering or writing fails.

    """
    from folio.export.static import SiteExporter
    from folio.observability.collector import ExportCollector
    from folio.render.templates import KidaRenderer
    from folio.store.repository import ContentStore
    from folio.theme import get_template_dirs

    config = load_config(Path(root), **kwargs)
    collector = collector if collector is not None else ExportCollector()
    database_url = config.require_database_url()

    renderer = KidaRenderer(get_template_dirs(config))
    store = ContentStore.from_url(
        database_url,
        pool_size=config.pool_size,
        pool_timeout=config.pool_timeout,
    )
    try:
        collector.info(f"Exporting to {config.output_path}")
        result = SiteExporter(store, renderer, config, collector).export()
    finally:
        store.close()

    _print_export_summary(result, collector)
    return result


def _print_export_summary(result: ExportResult, collector: ExportCollector) -> None:
    """Print export completion summary to stderr (nothing when quiet)."""
    lines = [
        "",
        "─" * 41,
        f"  Exported {result.total_pages} page{'s' if result.total_pages != 1 else ''}",
    ]
    if result.total_assets > 0:
        lines.append(
            f"  Copied {result.total_assets} asset{'s' if result.total_assets != 1 else ''}"
        )
    if result.skipped:
        lines.append(f"  Skipped {len(result.skipped)}: {', '.join(result.skipped)}")
    stages = collector.completed_stages()
    if stages:
        lines.append("  Stages: " + ", ".join(f"{s.stage} {s.duration_ms:.0f}ms" for s in stages))
    lines.append(f"  Output: {result.output_dir}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    collector.echo("\n".join(lines))
