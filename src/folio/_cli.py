"""Folio CLI — folio build.

Entry point for the ``folio`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the folio CLI."""
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Export a database-backed portfolio as a static site.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # folio build
    build_parser = subparsers.add_parser(
        "build",
        help="Export the portfolio as static HTML files",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    build_parser.add_argument("--output", default=None, help="Output directory (default: dist)")
    build_parser.add_argument("--static-dir", default=None, help="Static asset directory")
    build_parser.add_argument("--templates-dir", default=None, help="Template override directory")
    build_parser.add_argument("--admin-url", default=None, help="External admin application URL")
    build_parser.add_argument("--database-url", default=None, help="Content store URL")
    build_parser.add_argument(
        "--workers", type=int, default=None, help="Threads rendering project pages",
    )
    build_parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress progress output",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from folio import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from folio._errors import FolioError
    from folio.app import build
    from folio.observability.collector import ExportCollector

    if args.command == "build":
        try:
            build(
                root=args.root,
                collector=ExportCollector(quiet=args.quiet),
                output=args.output,
                static_dir=args.static_dir,
                templates_dir=args.templates_dir,
                admin_url=args.admin_url,
                database_url=args.database_url,
                workers=args.workers,
            )
        except FolioError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
