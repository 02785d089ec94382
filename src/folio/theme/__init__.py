"""Folio theme loader — fallback chain for templates.

User templates (``templates/``) take priority.  When a template is not found
in the user directory, Kida falls through to the bundled default theme.

"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.config import FolioConfig


def bundled_templates_path() -> Path:
    """Return the absolute path to the bundled default templates."""
    return Path(__file__).parent / "default" / "templates"


def get_template_dirs(config: FolioConfig) -> list[Path]:
    """Return template directories in priority order.

    Returns:
        ``[user_templates_dir, bundled_default_templates]``, with the user
        directory left out when it does not exist.

    """
    bundled = bundled_templates_path()
    user_dir = config.templates_path

    dirs: list[Path] = []
    if user_dir.is_dir() and user_dir != bundled:
        dirs.append(user_dir)
    dirs.append(bundled)
    return dirs
