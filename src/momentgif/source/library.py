"""Photo library access: capture enumeration and chunked resource transfer."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

from PIL import Image

from momentgif.config import get_settings
from momentgif.models.capture import AssetResource, Capture, ResourceType

logger = logging.getLogger(__name__)


class MediaLibrary(ABC):
    """Abstract photo library the converter reads captures from."""

    @abstractmethod
    def list_captures(self) -> list[Capture]:
        """Return the Live Photo captures in the library, newest first."""
        ...

    @abstractmethod
    def resources(self, capture_id: str) -> list[AssetResource]:
        """Return every resource stored for a capture (empty if unknown)."""
        ...

    @abstractmethod
    def request_data(
        self, resource: AssetResource, allow_network: bool = True
    ) -> Iterator[bytes]:
        """Yield the resource's bytes in chunks.

        May raise any exception when the transfer fails part way; callers
        treat every failure as a failed transfer.
        """
        ...

    def get_capture(self, capture_id: str) -> Capture | None:
        for capture in self.list_captures():
            if capture.capture_id == capture_id:
                return capture
        return None


class FileSystemLibrary(MediaLibrary):
    """A directory of exported Live Photos.

    A capture is a still (``IMG_0001.HEIC``) and a video sharing its stem
    (``IMG_0001.MOV``). The stem is the capture id.
    """

    def __init__(
        self,
        root: Path | None = None,
        chunk_size: int | None = None,
    ):
        settings = get_settings()
        self.root = Path(root or settings.library_dir)
        self.chunk_size = chunk_size or settings.transfer_chunk_size
        self.still_extensions = {e.lower() for e in settings.still_extensions}
        self.video_extensions = {e.lower() for e in settings.video_extensions}

    def _group_by_stem(self) -> dict[str, list[Path]]:
        groups: dict[str, list[Path]] = {}
        if not self.root.is_dir():
            return groups
        for path in sorted(self.root.iterdir()):
            if not path.is_file():
                continue
            ext = path.suffix.lstrip(".").lower()
            if ext in self.still_extensions or ext in self.video_extensions:
                groups.setdefault(path.stem, []).append(path)
        return groups

    def _split(self, paths: list[Path]) -> tuple[list[Path], list[Path]]:
        stills = [p for p in paths if p.suffix.lstrip(".").lower() in self.still_extensions]
        videos = [p for p in paths if p.suffix.lstrip(".").lower() in self.video_extensions]
        return stills, videos

    def list_captures(self) -> list[Capture]:
        captures = []
        for stem, paths in self._group_by_stem().items():
            stills, videos = self._split(paths)
            if not stills or not videos:
                continue
            still = stills[0]
            width, height = self._pixel_size(still)
            captures.append(
                Capture(
                    capture_id=stem,
                    still_path=str(still),
                    video_path=str(videos[0]),
                    created_at=datetime.fromtimestamp(still.stat().st_mtime, tz=UTC),
                    pixel_width=width,
                    pixel_height=height,
                )
            )
        captures.sort(key=lambda c: c.created_at, reverse=True)
        return captures

    def resources(self, capture_id: str) -> list[AssetResource]:
        paths = self._group_by_stem().get(capture_id, [])
        stills, videos = self._split(paths)
        video_type = ResourceType.PAIRED_VIDEO if stills else ResourceType.VIDEO
        resources = []
        for path in stills:
            resources.append(self._resource(capture_id, path, ResourceType.PHOTO))
        for path in videos:
            resources.append(self._resource(capture_id, path, video_type))
        return resources

    def request_data(
        self, resource: AssetResource, allow_network: bool = True
    ) -> Iterator[bytes]:
        # Local files never need the network; the flag is part of the contract.
        with open(resource.path, "rb") as f:
            while True:
                chunk = f.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk

    @staticmethod
    def _resource(capture_id: str, path: Path, rtype: ResourceType) -> AssetResource:
        return AssetResource(
            capture_id=capture_id,
            type=rtype,
            filename=path.name,
            path=str(path),
            size_bytes=path.stat().st_size,
        )

    @staticmethod
    def _pixel_size(still: Path) -> tuple[int | None, int | None]:
        try:
            with Image.open(still) as im:
                return im.size
        except OSError:
            logger.debug("Could not read pixel size of %s", still)
            return None, None
