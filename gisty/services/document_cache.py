"""On-disk gist cache, one JSON file per gist id."""

import hashlib
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from gisty.models.schemas import GistDocument

logger = logging.getLogger(__name__)

CACHE_SUFFIX = ".json"


class DocumentCache:
    """
    Persistent gist cache rooted at a directory.

    Entries never expire and are never evicted. They only go away through
    invalidate()/clear() or when the directory is removed externally.
    Writers are not synchronized here; GistService serializes them per id.
    """

    def __init__(self, cache_dir: str | Path, log: logging.Logger | None = None):
        self._dir = Path(cache_dir)
        self._log = log or logger
        self.enabled = True
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._log.warning(f"creating cache dir: {e}")
            self.enabled = False

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, gist_id: str) -> Path:
        """Cache file for a gist id. Ids are hashed so any string is path-safe."""
        digest = hashlib.sha256(gist_id.encode("utf-8")).hexdigest()
        return self._dir / f"{digest}{CACHE_SUFFIX}"

    def lookup(self, gist_id: str) -> GistDocument | None:
        """
        Return the cached gist, or None on a miss.

        An entry that cannot be read or decoded counts as a miss.
        """
        path = self.path_for(gist_id)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            self._log.warning(f"reading from cache: {e}")
            return None

        try:
            return GistDocument.model_validate_json(data)
        except ValidationError as e:
            self._log.warning(f"decoding cached gist '{gist_id}': {e}")
            return None

    def store(self, gist_id: str, document: GistDocument) -> Path:
        """Write the gist under its id, replacing any previous entry."""
        path = self.path_for(gist_id)
        fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=".tmp-", suffix=CACHE_SUFFIX)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document.model_dump_json())
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        return path

    def invalidate(self, gist_id: str) -> bool:
        """Delete the entry for a gist id. Returns False if there was none."""
        try:
            self.path_for(gist_id).unlink()
        except FileNotFoundError:
            return False
        return True

    def clear(self) -> int:
        """Delete every entry and return how many were removed."""
        removed = 0
        for path in self._dir.glob(f"*{CACHE_SUFFIX}"):
            if path.name.startswith(".tmp-"):
                continue
            path.unlink(missing_ok=True)
            removed += 1
        return removed

    def stats(self) -> dict:
        """Return cache statistics."""
        size = 0
        if self.enabled:
            size = sum(
                1 for p in self._dir.glob(f"*{CACHE_SUFFIX}") if not p.name.startswith(".tmp-")
            )
        return {
            "enabled": self.enabled,
            "directory": str(self._dir),
            "size": size,
        }
