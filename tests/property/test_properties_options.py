"""Property-based tests for conversion options and progress reporting."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from momentgif.models.options import ConversionOptions
from momentgif.progress import ProgressReporter
from tests.property.conftest import generate_conversion_options, progress_values

pytestmark = pytest.mark.property


class TestOptionsProperties:
    @given(options=generate_conversion_options())
    @settings(max_examples=100)
    def test_derived_values_in_range(self, options):
        """Frame delay, palette size and frame bound are always usable."""
        assert options.frame_delay == pytest.approx(1.0 / options.frame_rate)
        assert 2 <= options.palette_size <= 256
        assert options.max_dimension() >= 1

    @given(frame_rate=st.integers(max_value=0))
    @settings(max_examples=20)
    def test_non_positive_frame_rate_rejected(self, frame_rate):
        with pytest.raises(ValidationError):
            ConversionOptions(frame_rate=frame_rate)

    @given(loop_count=st.integers(max_value=-1))
    @settings(max_examples=20)
    def test_negative_loop_count_rejected(self, loop_count):
        with pytest.raises(ValidationError):
            ConversionOptions(loop_count=loop_count)

    @given(options=generate_conversion_options())
    @settings(max_examples=50)
    def test_options_serializable(self, options):
        restored = ConversionOptions.model_validate_json(options.model_dump_json())
        assert restored == options


class TestProgressProperties:
    @given(values=progress_values())
    @settings(max_examples=100)
    def test_forwarded_values_monotonic(self, values):
        """The reporter forwards a clamped, non-decreasing sequence."""
        forwarded = []
        reporter = ProgressReporter(forwarded.append)
        for v in values:
            reporter.report(v)
        assert forwarded == sorted(forwarded)
        assert all(0.0 <= p <= 1.0 for p in forwarded)
        assert len(forwarded) == len(values)

    @given(values=progress_values())
    @settings(max_examples=50)
    def test_complete_always_reaches_one(self, values):
        reporter = ProgressReporter()
        for v in values:
            reporter.report(v)
        assert reporter.complete() == 1.0
        assert reporter.completed
