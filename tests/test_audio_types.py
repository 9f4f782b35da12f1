"""
Tests for core/audio/types.py — SampleBuffer, Beat and Cut value objects.

Covers:
    - construction from channels, mono samples and raw arrays
    - immutability: frozen attributes, read-only data, copy on construction
    - derived properties (channel_count, frame_count, duration_sec, is_empty)
    - validation of sample rate, dimensionality and ragged channels
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from core.audio.errors import InvalidConfigurationError
from core.audio.types import Beat, Cut, SampleBuffer


class TestSampleBufferConstruction:
    def test_from_channels_shape(self):
        buf = SampleBuffer.from_channels([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]], 8000)
        assert buf.channel_count == 2
        assert buf.frame_count == 3
        assert buf.sample_rate == 8000

    def test_mono_has_one_channel(self):
        buf = SampleBuffer.mono([0.0] * 10, 44100)
        assert buf.channel_count == 1
        assert buf.frame_count == 10

    def test_one_dimensional_data_becomes_single_channel(self):
        buf = SampleBuffer(sample_rate=100, data=np.ones(50))
        assert buf.data.shape == (1, 50)

    def test_data_is_float32(self):
        buf = SampleBuffer(sample_rate=100, data=np.ones((2, 5), dtype=np.float64))
        assert buf.data.dtype == np.float32

    def test_from_channels_empty_list_has_zero_channels(self):
        buf = SampleBuffer.from_channels([], 44100)
        assert buf.channel_count == 0
        assert buf.is_empty

    def test_channel_returns_row(self):
        buf = SampleBuffer.from_channels([[1.0, 2.0], [3.0, 4.0]], 10)
        np.testing.assert_array_equal(buf.channel(1), [3.0, 4.0])


class TestSampleBufferValidation:
    def test_zero_sample_rate_raises(self):
        with pytest.raises(InvalidConfigurationError, match="sample_rate must be a positive"):
            SampleBuffer.mono([0.0], 0)

    def test_negative_sample_rate_raises(self):
        with pytest.raises(InvalidConfigurationError):
            SampleBuffer.mono([0.0], -44100)

    def test_fractional_rate_below_one_raises(self):
        """0.5 would truncate to 0 and break duration_sec and detection."""
        with pytest.raises(InvalidConfigurationError, match="positive integer"):
            SampleBuffer.mono([0.0], 0.5)

    def test_non_integral_rate_raises(self):
        with pytest.raises(InvalidConfigurationError):
            SampleBuffer.mono([0.0], 44100.7)

    def test_non_numeric_rate_raises(self):
        with pytest.raises(InvalidConfigurationError):
            SampleBuffer.mono([0.0], "fast")  # type: ignore[arg-type]

    def test_integral_float_rate_accepted(self):
        buf = SampleBuffer.mono([0.0], 22050.0)
        assert buf.sample_rate == 22050
        assert isinstance(buf.sample_rate, int)

    def test_ragged_channels_raise(self):
        with pytest.raises(ValueError, match="same length"):
            SampleBuffer.from_channels([[0.0, 0.0], [0.0]], 44100)

    def test_three_dimensional_data_raises(self):
        with pytest.raises(ValueError, match="2-D"):
            SampleBuffer(sample_rate=100, data=np.zeros((1, 2, 3)))


class TestSampleBufferImmutability:
    def test_data_is_read_only(self):
        buf = SampleBuffer.mono([0.0, 0.0], 100)
        with pytest.raises(ValueError):
            buf.data[0, 0] = 1.0

    def test_attributes_are_frozen(self):
        buf = SampleBuffer.mono([0.0], 100)
        with pytest.raises(FrozenInstanceError):
            buf.sample_rate = 200  # type: ignore[misc]

    def test_source_array_mutation_does_not_leak(self):
        source = np.zeros((1, 4), dtype=np.float32)
        buf = SampleBuffer(sample_rate=100, data=source)
        source[0, 0] = 0.75
        assert buf.data[0, 0] == 0.0
        assert not np.shares_memory(source, buf.data)


class TestSampleBufferProperties:
    def test_duration_sec(self):
        buf = SampleBuffer.mono(np.zeros(88200), 44100)
        assert buf.duration_sec == pytest.approx(2.0)

    def test_zero_frames_is_empty(self):
        assert SampleBuffer.mono([], 44100).is_empty

    def test_single_frame_is_not_empty(self):
        assert not SampleBuffer.mono([0.5], 44100).is_empty


class TestRecords:
    def test_cut_time_label_two_digits(self):
        assert Cut(id=1, time_sec=1.5, color="blue").time_label == "1.50"

    def test_cut_time_label_zero(self):
        assert Cut(id=1, time_sec=0.0, color="blue").time_label == "0.00"

    def test_beat_is_frozen(self):
        beat = Beat(time_sec=0.0, sample_index=0, kind="forced")
        with pytest.raises(FrozenInstanceError):
            beat.kind = "onset"  # type: ignore[misc]
