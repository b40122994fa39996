"""Photo library sinks that finished GIFs are saved into."""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from momentgif.config import get_settings

logger = logging.getLogger(__name__)


class LibrarySink(ABC):
    """Destination that imports a finished GIF into a photo library."""

    @abstractmethod
    def save(self, path: Path) -> Path:
        """Import the file at ``path``; return where the library stored it.

        Must not modify or move the source file. Raises OSError on failure.
        """
        ...


class DirectoryLibrarySink(LibrarySink):
    """Copies GIFs into a library directory."""

    def __init__(self, root: Path | None = None):
        self.root = Path(root or get_settings().saved_dir)

    def save(self, path: Path) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.root / path.name
        if target.exists():
            raise FileExistsError(f"{target} is already in the library")
        shutil.copy2(path, target)
        logger.info(f"Saved {path.name} to library {self.root}")
        return target
