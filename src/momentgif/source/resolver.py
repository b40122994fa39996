"""Source resolution: capture id -> locally seekable, decodable video."""

import logging
from pathlib import Path

import cv2
import numpy as np

from momentgif.models.capture import AssetResource, ResourceType
from momentgif.models.errors import SourceUnavailable, TransferFailed
from momentgif.source.library import MediaLibrary
from momentgif.storage.temp_store import TempFileManager

logger = logging.getLogger(__name__)


class SourceHandle:
    """Time-addressable video asset backed by a local temp file.

    Owned by exactly one conversion; release it (or use it as a context
    manager) when the conversion ends.
    """

    def __init__(self, path: Path, capture_id: str, capture: cv2.VideoCapture):
        self.path = path
        self.capture_id = capture_id
        self._cap = capture
        self.fps = capture.get(cv2.CAP_PROP_FPS) or 0.0
        self.frame_count = int(capture.get(cv2.CAP_PROP_FRAME_COUNT))
        self.width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self._next_index = 0
        self.released = False

    @classmethod
    def open(cls, path: Path, capture_id: str) -> "SourceHandle":
        cap = cv2.VideoCapture(str(path))
        if not cap.isOpened():
            cap.release()
            raise SourceUnavailable(
                f"Video companion of capture '{capture_id}' is not decodable",
                details={"capture_id": capture_id, "path": str(path)},
            )
        return cls(path, capture_id, cap)

    @property
    def duration(self) -> float:
        """Clip duration in seconds (0.0 when the container reports nothing usable)."""
        if self.fps <= 0 or self.frame_count <= 0:
            return 0.0
        return self.frame_count / self.fps

    def frame_at(self, seconds: float) -> np.ndarray | None:
        """Decode the BGR frame nearest to ``seconds``; None if it cannot be decoded."""
        if self.released or self.frame_count <= 0 or self.fps <= 0:
            return None
        index = min(self.frame_count - 1, max(0, int(round(seconds * self.fps))))

        if index < self._next_index:
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, index)
        else:
            # Grabbing forward is exact for short clips and avoids keyframe seeks
            for _ in range(index - self._next_index):
                if not self._cap.grab():
                    self._next_index = index + 1
                    return None
        ret, frame = self._cap.read()
        self._next_index = index + 1
        if not ret or frame is None:
            return None
        return frame

    def release(self) -> None:
        if not self.released:
            self._cap.release()
            self.released = True

    def __enter__(self) -> "SourceHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class SourceResolver:
    """Locates a capture's paired video and materializes it as a SourceHandle."""

    def __init__(self, library: MediaLibrary, temp_store: TempFileManager | None = None):
        self.library = library
        self.temp_store = temp_store or TempFileManager()

    def resolve(self, capture_id: str) -> SourceHandle:
        """Transfer the capture's video companion to a temp file and open it."""
        resource = self.select_video_resource(capture_id)
        path = self.temp_store.source_path(f".{resource.extension or 'mov'}")
        self.transfer(resource, path)
        try:
            handle = SourceHandle.open(path, capture_id)
        except SourceUnavailable:
            self.temp_store.remove(path)
            raise
        logger.info(
            "Resolved capture %s: %.2fs, %dx%d @ %.2ffps",
            capture_id,
            handle.duration,
            handle.width,
            handle.height,
            handle.fps,
        )
        return handle

    def select_video_resource(self, capture_id: str) -> AssetResource:
        """Pick the paired video resource, never the still."""
        resources = self.library.resources(capture_id)
        for resource in resources:
            if resource.type == ResourceType.PAIRED_VIDEO:
                return resource
        raise SourceUnavailable(
            f"No video companion found for capture '{capture_id}'",
            details={"capture_id": capture_id, "resources": [r.type.value for r in resources]},
        )

    def transfer(self, resource: AssetResource, path: Path) -> int:
        """Copy every chunk of the resource into ``path``. Returns bytes written."""
        written = 0
        try:
            with open(path, "wb") as f:
                for chunk in self.library.request_data(resource, allow_network=True):
                    f.write(chunk)
                    written += len(chunk)
        except Exception as e:
            self.temp_store.remove(path)
            raise TransferFailed(
                f"Failed to transfer video of capture '{resource.capture_id}': {e}",
                details={"capture_id": resource.capture_id, "error": str(e)},
            ) from e
        logger.debug("Transferred %d bytes of %s to %s", written, resource.filename, path)
        return written
