"""Engine construction — one bounded connection pool per store."""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import QueuePool


def _is_memory_sqlite(url: URL) -> bool:
    if url.get_backend_name() != "sqlite":
        return False
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


def create_store_engine(
    url: str,
    *,
    pool_size: int = 5,
    pool_timeout: float = 30.0,
) -> sa.Engine:
    """Create an engine whose pool queues callers instead of failing.

    The engine gets a ``QueuePool`` of ``pool_size`` connections and no
    overflow; a caller that finds it exhausted waits up to
    ``pool_timeout`` seconds, then fails with ``sqlalchemy.exc.TimeoutError``.
    In-memory SQLite keeps SQLAlchemy's single-connection pool, since every
    new connection would open a different empty database.
    """
    parsed = make_url(url)
    kwargs: dict = {"pool_pre_ping": True}
    if not _is_memory_sqlite(parsed):
        kwargs.update(
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
        )
    return sa.create_engine(parsed, **kwargs)
