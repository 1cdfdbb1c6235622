"""SQLite-backed bitlink cache implementing CachePort."""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from bitcli.config import user_cache_dir
from bitcli.core.models import Bitlink


if TYPE_CHECKING:
    from types import TracebackType

    from bitcli.core.models import ShortenRequest


logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS shorten (
  id TEXT NOT NULL UNIQUE,
  link TEXT NOT NULL,
  long_url TEXT NOT NULL,
  domain TEXT,
  group_guid TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS ix_shorten
ON shorten (group_guid, domain, long_url);
"""

# NULL domains are distinct for the unique index, hence the explicit IS check
_SELECT = """
SELECT id, link, long_url
FROM shorten
WHERE group_guid = :group_guid AND domain IS :domain AND long_url = :long_url
"""

_INSERT = """
INSERT OR IGNORE INTO shorten (id, link, long_url, domain, group_guid)
SELECT :id, :link, :long_url, :domain, :group_guid
WHERE NOT EXISTS (
  SELECT 1 FROM shorten
  WHERE group_guid = :group_guid AND domain IS :domain AND long_url = :long_url
)
"""


class BitlinkCache:
    """Local bitlink cache stored in a single SQLite file.

    Entries are keyed by (group GUID, domain, long URL) and are only ever
    inserted, never updated or deleted. Storage errors are logged and
    reported as a miss or a non-insert, so a broken cache never fails a
    shorten operation.

    One connection is shared by all threads; an internal lock serialises
    access, so callers need no locking of their own.

    Attributes:
        path: Location of the database file.
    """

    DEFAULT_NAME = "bitlinks"

    def __init__(self, path: Path, connection: sqlite3.Connection) -> None:
        """Wrap an open connection. Use open() to create a cache."""
        self.path = path
        self._conn = connection
        self._lock = threading.Lock()

    @classmethod
    def open(
        cls, name: str, cache_dir: str | os.PathLike[str] | None = None
    ) -> BitlinkCache | None:
        """Open (creating if needed) the cache database ``<cache_dir>/<name>.db``.

        Args:
            name: Base name of the database file.
            cache_dir: Directory holding the cache. None selects the platform
                cache directory; an empty string disables caching.

        Returns:
            The cache, or None if caching is disabled or unavailable.
        """
        if cache_dir is None:
            directory = user_cache_dir()
        elif not os.fspath(cache_dir):
            logger.debug("caching disabled by an empty cache directory")
            return None
        else:
            directory = Path(cache_dir).expanduser()

        if not directory.is_dir():
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning("cannot create cache directory %s: %s", directory, e)
                return None

        if not directory.is_dir():
            logger.warning("cache directory %s is not a directory", directory)
            return None

        path = directory / f"{name}.db"
        logger.debug("using cache %s", path)

        try:
            conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
        except sqlite3.Error as e:
            logger.warning("cannot open cache %s: %s", path, e)
            return None

        try:
            conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            logger.warning("cannot create cache schema in %s: %s", path, e)
            conn.close()
            return None

        return cls(path, conn)

    def get(self, request: ShortenRequest) -> Bitlink | None:
        """Look up the bitlink cached for a request.

        Args:
            request: The shorten request used as the key.

        Returns:
            The cached bitlink, or None on a miss or a storage error.
        """
        try:
            with self._lock:
                row = self._conn.execute(_SELECT, _key(request)).fetchone()
        except sqlite3.Error as e:
            logger.warning("cache lookup failed for %s: %s", request.long_url, e)
            return None

        if row is None:
            return None

        id_, link, long_url = row
        return Bitlink(short_url=link, id=id_, long_url=long_url)

    def set(self, request: ShortenRequest, bitlink: Bitlink) -> bool:
        """Insert a bitlink unless the key (or the bitlink id) is already cached.

        Args:
            request: The shorten request used as the key.
            bitlink: The bitlink created for it.

        Returns:
            True if a row was inserted, False if an entry already existed or
            the write failed.
        """
        params = _key(request) | {"id": bitlink.id, "link": bitlink.short_url}
        try:
            with self._lock:
                inserted = self._conn.execute(_INSERT, params).rowcount
        except sqlite3.Error as e:
            logger.warning("cache write failed for %s: %s", request.long_url, e)
            return False

        return inserted == 1

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()

    def __enter__(self) -> BitlinkCache:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the cache."""
        self.close()


def _key(request: ShortenRequest) -> dict[str, str | None]:
    return {
        "group_guid": request.group_id,
        "domain": request.domain,
        "long_url": request.long_url,
    }
