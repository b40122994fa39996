"""Hypothesis strategies for property-based testing."""

import pytest
from hypothesis import strategies as st

from momentgif.models.options import ConversionOptions


@pytest.fixture(scope="session")
def isolated_settings(tmp_path_factory):
    """Property tests build everything in memory; one shared root is enough."""
    return tmp_path_factory.mktemp("property")


@st.composite
def generate_conversion_options(draw, max_frame_rate=30):
    """Generate random valid ConversionOptions."""
    return ConversionOptions(
        frame_rate=draw(st.integers(min_value=1, max_value=max_frame_rate)),
        loop_count=draw(st.integers(min_value=0, max_value=65535)),
        quality=draw(st.floats(min_value=0.01, max_value=1.0)),
        scale=draw(st.floats(min_value=0.05, max_value=4.0)),
    )


@st.composite
def generate_clip(draw, max_duration=5.0, max_frame_rate=30):
    """Generate a (duration, frame_rate) pair that yields at least one frame."""
    frame_rate = draw(st.integers(min_value=1, max_value=max_frame_rate))
    duration = draw(st.floats(min_value=1.0 / frame_rate + 1e-6, max_value=max_duration))
    return duration, frame_rate


@st.composite
def generate_short_clip(draw, max_frame_rate=30):
    """Generate a (duration, frame_rate) pair too short for a single frame."""
    frame_rate = draw(st.integers(min_value=1, max_value=max_frame_rate))
    duration = draw(st.floats(min_value=0.0, max_value=0.99 / frame_rate))
    return duration, frame_rate


def progress_values():
    return st.lists(st.floats(min_value=-1.0, max_value=2.0, allow_nan=False), max_size=50)
