"""Shared test fixtures and test media generators."""

import tempfile
from pathlib import Path

import cv2
import numpy as np
import pytest

from momentgif.models.options import ConversionOptions
from momentgif.source.library import FileSystemLibrary


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every settings-derived directory at a per-test location."""
    monkeypatch.setenv("MOMENTGIF_LIBRARY_DIR", str(tmp_path / "library"))
    monkeypatch.setenv("MOMENTGIF_SAVED_DIR", str(tmp_path / "saved"))
    monkeypatch.setenv("MOMENTGIF_TEMP_DIR", str(tmp_path / "temp"))
    (tmp_path / "library").mkdir()
    return tmp_path


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def library_dir(isolated_settings):
    return isolated_settings / "library"


@pytest.fixture
def library(library_dir):
    return FileSystemLibrary(library_dir)


@pytest.fixture
def default_options():
    return ConversionOptions(frame_rate=10, loop_count=0, quality=0.7, scale=1.0)


def generate_test_video(
    path: Path,
    frames: int = 90,
    fps: float = 30.0,
    width: int = 160,
    height: int = 120,
    motion: bool = True,
) -> Path:
    """Generate a small test MP4 video."""
    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
    writer = cv2.VideoWriter(str(path), fourcc, fps, (width, height))
    for i in range(frames):
        frame = np.zeros((height, width, 3), dtype=np.uint8)
        if motion:
            x = int((i / frames) * (width - 40))
            cv2.rectangle(frame, (x, 30), (x + 40, 90), (0, 255, 0), -1)
        else:
            cv2.rectangle(frame, (50, 30), (110, 90), (100, 100, 100), -1)
        writer.write(frame)
    writer.release()
    return path


def generate_still(path: Path, width: int = 160, height: int = 120) -> Path:
    """Write a still image for a capture."""
    image = np.full((height, width, 3), (40, 90, 200), dtype=np.uint8)
    cv2.imwrite(str(path), image)
    return path


def make_live_photo(
    library_dir: Path, stem: str = "IMG_0001", frames: int = 90, **video_kwargs
) -> tuple[Path, Path]:
    """Create a still + paired video capture in a library directory."""
    still = generate_still(library_dir / f"{stem}.jpg")
    video = generate_test_video(library_dir / f"{stem}.mp4", frames=frames, **video_kwargs)
    return still, video


def make_frame_image(seed: int = 0, width: int = 160, height: int = 120) -> np.ndarray:
    """A colorful BGR frame that quantizes to a full palette."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


class FakeSource:
    """In-memory stand-in for SourceHandle with scripted decode failures."""

    def __init__(
        self,
        duration: float,
        fail_at: set[int] | None = None,
        frame_rate: int = 10,
        width: int = 160,
        height: int = 120,
        raise_on_fail: bool = False,
        path: Path | None = None,
    ):
        self.duration = duration
        self.fail_at = fail_at or set()
        self.frame_rate = frame_rate
        self.width = width
        self.height = height
        self.raise_on_fail = raise_on_fail
        self.path = path or Path(tempfile.gettempdir()) / "momentgif-fake-source.mov"
        self.requested: list[float] = []
        self.released = False
        self._calls = 0

    def frame_at(self, seconds: float) -> np.ndarray | None:
        index = self._calls
        self._calls += 1
        self.requested.append(seconds)
        if index in self.fail_at:
            if self.raise_on_fail:
                raise RuntimeError(f"corrupt sample at {seconds}")
            return None
        return make_frame_image(index, self.width, self.height)

    def release(self) -> None:
        self.released = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()


class FakeResolver:
    """Resolver returning a prepared FakeSource."""

    def __init__(self, source: FakeSource):
        self.source = source
        self.resolved: list[str] = []

    def resolve(self, capture_id: str) -> FakeSource:
        self.resolved.append(capture_id)
        return self.source
