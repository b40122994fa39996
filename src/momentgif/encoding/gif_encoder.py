"""Streaming animated GIF writer built on Pillow's GIF plugin."""

import logging
from pathlib import Path
from typing import BinaryIO

from PIL import GifImagePlugin, Image

from momentgif.models.errors import DestinationUnavailable, FinalizeFailed
from momentgif.models.frame import Frame

logger = logging.getLogger(__name__)

GIF_TRAILER = b";"


class EncoderHandle:
    """An open GIF being written frame by frame."""

    def __init__(
        self, path: Path, fp: BinaryIO, frame_count_hint: int, loop_count: int, colors: int = 256
    ):
        self.path = path
        self.fp = fp
        self.frame_count_hint = frame_count_hint
        self.loop_count = loop_count
        self.colors = colors
        self.frames_written = 0
        self.failed_appends = 0
        self.size: tuple[int, int] | None = None
        self.corrupt = False
        self.closed = False

    @property
    def header_written(self) -> bool:
        return self.size is not None


class GifEncoder:
    """Writes sampled frames into a looping GIF as they arrive.

    The loop count is global metadata (NETSCAPE2.0 extension in the file
    header); the display duration is per-frame metadata (graphic control
    extension ahead of each image).
    """

    def __init__(self, colors: int = 256):
        if not 2 <= colors <= 256:
            raise ValueError(f"colors must be in [2, 256], got {colors}")
        self.colors = colors

    def open(
        self,
        destination: Path,
        frame_count_hint: int,
        loop_count: int,
        colors: int | None = None,
    ) -> EncoderHandle:
        """Create the container file at ``destination``."""
        if frame_count_hint <= 0:
            raise DestinationUnavailable(
                f"Invalid frame count hint: {frame_count_hint}",
                details={"frame_count_hint": frame_count_hint},
            )
        if loop_count < 0:
            raise DestinationUnavailable(
                f"Invalid loop count: {loop_count}", details={"loop_count": loop_count}
            )
        try:
            fp = open(destination, "xb")
        except OSError as e:
            raise DestinationUnavailable(
                f"Cannot create GIF at {destination}: {e}",
                details={"path": str(destination), "error": str(e)},
            )
        logger.debug("Opened %s for %d frames, loop=%d", destination, frame_count_hint, loop_count)
        return EncoderHandle(
            Path(destination), fp, frame_count_hint, loop_count, colors or self.colors
        )

    def append(self, handle: EncoderHandle, frame: Frame) -> bool:
        """Write one frame. Failures are logged and reported as False."""
        if handle.closed:
            logger.warning("Append to closed encoder for %s ignored", handle.path)
            handle.failed_appends += 1
            return False

        try:
            image = self._to_palette(frame, handle.colors)
            if handle.size is not None and image.size != handle.size:
                image = image.resize(handle.size, Image.Resampling.NEAREST)
            chunks = []
            if not handle.header_written:
                header, _ = GifImagePlugin.getheader(image, info={"loop": handle.loop_count})
                chunks.extend(header)
            chunks.extend(
                GifImagePlugin.getdata(
                    image,
                    duration=self.delay_ms(frame.duration),
                    include_color_table=True,
                )
            )
            payload = b"".join(chunks)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to encode frame at {frame.timestamp:.3f}s: {e}")
            handle.failed_appends += 1
            return False

        try:
            handle.fp.write(payload)
        except (OSError, ValueError) as e:
            # Bytes may be half written; the file can no longer be finalized.
            logger.warning(f"Failed to write frame to {handle.path}: {e}")
            handle.corrupt = True
            handle.failed_appends += 1
            return False

        if handle.size is None:
            handle.size = image.size
        handle.frames_written += 1
        return True

    def finalize(self, handle: EncoderHandle) -> Path:
        """Write the trailer and check the file decodes. Removes the file on failure."""
        if handle.frames_written == 0:
            self.abort(handle)
            raise FinalizeFailed(
                "No frames were written to the GIF",
                details={"path": str(handle.path), "failed_appends": handle.failed_appends},
            )
        if handle.corrupt:
            self.abort(handle)
            raise FinalizeFailed(
                "GIF data was only partially written",
                details={"path": str(handle.path)},
            )

        try:
            handle.fp.write(GIF_TRAILER)
            handle.fp.flush()
            handle.fp.close()
            handle.closed = True
            self.verify(handle.path, handle.frames_written)
        except (OSError, EOFError, ValueError) as e:
            self.abort(handle)
            raise FinalizeFailed(
                f"Failed to finalize GIF: {e}",
                details={"path": str(handle.path), "error": str(e)},
            )

        logger.info(
            "Finalized %s: %d frames, %dx%d, loop=%d",
            handle.path,
            handle.frames_written,
            handle.size[0],
            handle.size[1],
            handle.loop_count,
        )
        return handle.path

    def abort(self, handle: EncoderHandle) -> None:
        """Close and delete a GIF that will not be finalized."""
        if not handle.closed:
            try:
                handle.fp.close()
            except OSError as e:
                logger.debug(f"Closing {handle.path} failed: {e}")
            handle.closed = True
        handle.path.unlink(missing_ok=True)

    @staticmethod
    def verify(path: Path, expected_frames: int) -> None:
        """Re-read the GIF and check every frame decodes."""
        with Image.open(path) as im:
            if im.format != "GIF":
                raise ValueError(f"Expected GIF, got {im.format}")
            n_frames = getattr(im, "n_frames", 1)
            if n_frames != expected_frames:
                raise ValueError(f"GIF has {n_frames} frames, expected {expected_frames}")
            im.seek(n_frames - 1)
            im.load()

    @staticmethod
    def delay_ms(seconds: float) -> int:
        """GIF delays are stored in centiseconds; round to the nearest one."""
        return max(1, round(seconds * 100)) * 10

    @staticmethod
    def _to_palette(frame: Frame, colors: int) -> Image.Image:
        return Image.fromarray(frame.image).quantize(colors=colors)
