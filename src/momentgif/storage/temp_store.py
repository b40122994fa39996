"""Temporary file lifecycle management."""

import logging
import time
import uuid
from pathlib import Path

from momentgif.config import get_settings

logger = logging.getLogger(__name__)

OUTPUT_PREFIX = "LivePhoto-"
OUTPUT_SUFFIX = ".gif"


class TempFileManager:
    """Hands out collision-free temp paths for transferred sources and GIF outputs."""

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir or get_settings().temp_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.sources_dir = self.base_dir / "sources"
        self.sources_dir.mkdir(parents=True, exist_ok=True)
        self._files: dict[Path, float] = {}

    def source_path(self, suffix: str = ".mov") -> Path:
        """Reserve a fresh path for transferred video bytes."""
        if suffix and not suffix.startswith("."):
            suffix = f".{suffix}"
        path = self.sources_dir / f"{uuid.uuid4()}{suffix}"
        self._files[path] = time.time()
        return path

    def output_path(self) -> Path:
        """Reserve a fresh path for a GIF output."""
        path = self.base_dir / f"{OUTPUT_PREFIX}{uuid.uuid4()}{OUTPUT_SUFFIX}"
        self._files[path] = time.time()
        return path

    def remove(self, path: Path) -> None:
        """Delete a temp file handed out by this manager."""
        self._files.pop(path, None)
        if path.exists():
            path.unlink(missing_ok=True)
            logger.debug("Removed temp file %s", path)

    def cleanup_expired(self, ttl_seconds: int | None = None) -> int:
        """Delete every tracked temp file older than the TTL."""
        ttl = ttl_seconds if ttl_seconds is not None else get_settings().temp_file_ttl_seconds
        now = time.time()
        expired = [p for p, created in self._files.items() if now - created > ttl]
        for path in expired:
            self.remove(path)
        if expired:
            logger.info(f"Cleaned up {len(expired)} expired temp files")
        return len(expired)

    @property
    def tracked(self) -> list[Path]:
        return list(self._files)
