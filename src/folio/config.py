"""Folio configuration.

FolioConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from folio._errors import ConfigError

DEFAULT_ADMIN_URL = "https://artist-portfolio.shuttleapp.rs/admin"


@dataclass(frozen=True, slots=True)
class FolioConfig:
    """Configuration for a folio export.

    Attributes:
        root: Path to the site root directory (contains static/, templates/).
              Always resolved to an absolute path on construction.
        database_url: SQLAlchemy URL of the content store.
        output: Output directory for the static export.
        static_dir: Directory containing static assets, copied verbatim.
        templates_dir: Directory of user templates overriding the bundled theme.
        admin_url: External admin application the exported
            ``admin/index.html`` redirects to.
        workers: Threads rendering project pages (1 = sequential).
        pool_size: Maximum open connections to the content store.
        pool_timeout: Seconds to wait for a pooled connection before failing.

    """

    root: Path = field(default_factory=Path.cwd)
    database_url: str | None = None
    output: Path = field(default_factory=lambda: Path("dist"))
    static_dir: str = "static"
    templates_dir: str = "templates"
    admin_url: str = DEFAULT_ADMIN_URL
    workers: int = 1
    pool_size: int = 5
    pool_timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if self.workers < 1:
            msg = f"workers must be at least 1, got {self.workers}"
            raise ConfigError(msg)
        if self.pool_size < 1:
            msg = f"pool_size must be at least 1, got {self.pool_size}"
            raise ConfigError(msg)

    @property
    def static_path(self) -> Path:
        """Absolute path to static assets directory."""
        return self.root / self.static_dir

    @property
    def templates_path(self) -> Path:
        """Absolute path to user templates directory."""
        return self.root / self.templates_dir

    @property
    def output_path(self) -> Path:
        """Absolute path to output directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    def require_database_url(self) -> str:
        """Return the database URL or raise ConfigError if none is set."""
        if not self.database_url:
            msg = (
                "No database URL configured. Set DATABASE_URL, add it to "
                "folio.yaml, or pass --database-url."
            )
            raise ConfigError(msg)
        return self.database_url
