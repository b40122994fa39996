"""Frame sampling at evenly spaced timestamps using OpenCV."""

import logging
import math
import threading
from collections.abc import Callable
from typing import Protocol

import cv2
import numpy as np

from momentgif.config import get_settings
from momentgif.models.errors import ConversionCancelled, EmptySource
from momentgif.models.frame import Frame
from momentgif.models.options import ConversionOptions
from momentgif.models.result import SamplingReport, SamplingSchedule

logger = logging.getLogger(__name__)


class DecodableSource(Protocol):
    """What the sampler needs from a source: a duration and frames by time."""

    @property
    def duration(self) -> float: ...

    def frame_at(self, seconds: float) -> np.ndarray | None: ...


class FrameSampler:
    """Pulls decoded frames from a source in time order and hands them on."""

    def __init__(self, base_size: int | None = None):
        self.base_size = base_size or get_settings().base_size

    @staticmethod
    def schedule(duration: float, options: ConversionOptions) -> SamplingSchedule:
        """Compute frame count and spacing for a clip of ``duration`` seconds."""
        frame_count = math.floor(duration * options.frame_rate) if duration > 0 else 0
        if frame_count <= 0:
            raise EmptySource(
                f"Clip of {duration:.3f}s yields no frames at {options.frame_rate} fps",
                details={"duration": duration, "frame_rate": options.frame_rate},
            )
        return SamplingSchedule(
            duration=duration,
            frame_count=frame_count,
            frame_duration=duration / frame_count,
        )

    def sample(
        self,
        source: DecodableSource,
        options: ConversionOptions,
        on_frame: Callable[[Frame], None],
        on_progress: Callable[[float], None] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> SamplingReport:
        """Decode every scheduled timestamp, skipping the ones that fail.

        Progress ``i / frame_count`` is reported before each decode whatever its
        outcome, followed by a final 1.0.
        """
        schedule = self.schedule(source.duration, options)
        max_dim = options.max_dimension(self.base_size)
        delay = options.frame_delay
        report = SamplingReport(frame_count=schedule.frame_count)

        for i, t in enumerate(schedule.timestamps()):
            if cancel_event is not None and cancel_event.is_set():
                raise ConversionCancelled(details={"index": i, "frame_count": schedule.frame_count})
            if on_progress:
                on_progress(i / schedule.frame_count)

            image = self._decode(source, t)
            if image is None:
                report.skipped_timestamps.append(t)
                continue

            on_frame(Frame(image=self.fit(image, max_dim), duration=delay, timestamp=t))
            report.emitted += 1

        if on_progress:
            on_progress(1.0)

        if report.skipped:
            logger.warning(
                "Skipped %d of %d frames that failed to decode",
                report.skipped,
                schedule.frame_count,
            )
        return report

    @staticmethod
    def _decode(source: DecodableSource, t: float) -> np.ndarray | None:
        try:
            image = source.frame_at(t)
        except Exception as e:
            logger.warning(f"Decode failed at {t:.3f}s: {e}")
            return None
        if image is None:
            logger.warning(f"No frame decoded at {t:.3f}s")
        return image

    @staticmethod
    def fit(image: np.ndarray, max_dim: int) -> np.ndarray:
        """Downscale a BGR frame so neither side exceeds ``max_dim``; return RGB."""
        height, width = image.shape[:2]
        longest = max(width, height)
        if longest > max_dim:
            factor = max_dim / longest
            size = (max(1, round(width * factor)), max(1, round(height * factor)))
            image = cv2.resize(image, size, interpolation=cv2.INTER_AREA)
        return np.ascontiguousarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))
