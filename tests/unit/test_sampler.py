"""Tests for FrameSampler."""

import threading

import numpy as np
import pytest

from momentgif.models.errors import ConversionCancelled, EmptySource
from momentgif.models.options import ConversionOptions
from momentgif.sampling.sampler import FrameSampler
from tests.conftest import FakeSource


class TestSchedule:
    def test_three_seconds_at_ten_fps(self):
        schedule = FrameSampler.schedule(3.0, ConversionOptions(frame_rate=10))
        assert schedule.frame_count == 30
        assert schedule.frame_duration == pytest.approx(0.1)

    def test_floor_of_fractional_count(self):
        schedule = FrameSampler.schedule(1.29, ConversionOptions(frame_rate=10))
        assert schedule.frame_count == 12
        assert schedule.frame_duration == pytest.approx(1.29 / 12)

    def test_too_short_for_one_frame(self):
        with pytest.raises(EmptySource):
            FrameSampler.schedule(0.05, ConversionOptions(frame_rate=10))

    def test_zero_duration(self):
        with pytest.raises(EmptySource):
            FrameSampler.schedule(0.0, ConversionOptions())


class TestSample:
    @pytest.fixture
    def sampler(self):
        return FrameSampler(base_size=480)

    def test_emits_every_frame_in_order(self, sampler):
        source = FakeSource(duration=3.0)
        frames = []
        report = sampler.sample(source, ConversionOptions(frame_rate=10), frames.append)
        assert report.emitted == 30
        assert report.skipped == 0
        timestamps = [f.timestamp for f in frames]
        assert timestamps == sorted(timestamps)
        assert source.requested == pytest.approx([i * 0.1 for i in range(30)])

    def test_display_duration_is_inverse_frame_rate(self, sampler):
        # 1.29s at 10fps samples every 0.1075s but each frame still shows 0.1s
        source = FakeSource(duration=1.29)
        frames = []
        sampler.sample(source, ConversionOptions(frame_rate=10), frames.append)
        assert len(frames) == 12
        assert all(f.duration == pytest.approx(0.1) for f in frames)

    def test_progress_sequence(self, sampler):
        source = FakeSource(duration=0.5)
        progress = []
        sampler.sample(source, ConversionOptions(frame_rate=10), lambda f: None, progress.append)
        assert progress == pytest.approx([0.0, 0.2, 0.4, 0.6, 0.8, 1.0])

    def test_skips_failed_decodes(self, sampler):
        failing = {0, 7, 13, 21, 29}
        source = FakeSource(duration=3.0, fail_at=failing)
        frames, progress = [], []
        report = sampler.sample(
            source, ConversionOptions(frame_rate=10), frames.append, progress.append
        )
        assert report.emitted == 25
        assert report.skipped == 5
        assert len(frames) == 25
        assert len(progress) == 31
        assert progress[-1] == 1.0
        assert progress == sorted(progress)

    def test_decoder_exception_is_skipped(self, sampler):
        source = FakeSource(duration=0.5, fail_at={2}, raise_on_fail=True)
        frames = []
        report = sampler.sample(source, ConversionOptions(frame_rate=10), frames.append)
        assert report.emitted == 4
        assert report.skipped_timestamps == pytest.approx([0.2])

    def test_all_frames_fail_still_completes_progress(self, sampler):
        source = FakeSource(duration=0.5, fail_at=set(range(5)))
        frames, progress = [], []
        report = sampler.sample(
            source, ConversionOptions(frame_rate=10), frames.append, progress.append
        )
        assert report.emitted == 0
        assert frames == []
        assert progress[-1] == 1.0

    def test_empty_source_raises_before_progress(self, sampler):
        progress = []
        with pytest.raises(EmptySource):
            sampler.sample(
                FakeSource(duration=0.05),
                ConversionOptions(frame_rate=10),
                lambda f: None,
                progress.append,
            )
        assert progress == []

    def test_resizes_to_scaled_base(self, sampler):
        source = FakeSource(duration=0.2, width=1920, height=1080)
        frames = []
        sampler.sample(source, ConversionOptions(frame_rate=10, scale=0.5), frames.append)
        assert frames
        for frame in frames:
            assert max(frame.width, frame.height) <= 240
            assert frame.width == 240

    def test_cancellation(self, sampler):
        event = threading.Event()
        frames = []

        def on_frame(frame):
            frames.append(frame)
            if len(frames) == 3:
                event.set()

        with pytest.raises(ConversionCancelled):
            sampler.sample(
                FakeSource(duration=3.0), ConversionOptions(), on_frame, cancel_event=event
            )
        assert len(frames) == 3


class TestFit:
    def test_never_upscales(self):
        image = np.zeros((120, 160, 3), dtype=np.uint8)
        out = FrameSampler.fit(image, 480)
        assert out.shape == (120, 160, 3)

    def test_keeps_aspect(self):
        image = np.zeros((1080, 1920, 3), dtype=np.uint8)
        out = FrameSampler.fit(image, 480)
        assert out.shape == (270, 480, 3)

    def test_portrait(self):
        image = np.zeros((1920, 1080, 3), dtype=np.uint8)
        out = FrameSampler.fit(image, 480)
        assert out.shape == (480, 270, 3)

    def test_converts_bgr_to_rgb(self):
        image = np.zeros((2, 2, 3), dtype=np.uint8)
        image[..., 0] = 255  # blue in BGR
        out = FrameSampler.fit(image, 480)
        assert out[0, 0].tolist() == [0, 0, 255]
