"""
core/audio/trim.py — Extract a contiguous time range from a SampleBuffer.

Sample boundaries are floored independently for the start and the end:

    start_sample = floor(start_time × sr)
    end_sample   = floor((start_time + duration) × sr)

so a 2 s window at 44.1 kHz is always exactly 88 200 frames, no matter
where it starts.
"""

from __future__ import annotations

import math

from core.audio.errors import OutOfRangeError
from core.audio.types import SampleBuffer


def sample_range(sample_rate: int, duration: float, start_time: float = 0.0) -> tuple[int, int]:
    """Return the half-open ``[start_sample, end_sample)`` for a time window."""
    start_sample = math.floor(start_time * sample_rate)
    end_sample = math.floor((start_time + duration) * sample_rate)
    return start_sample, end_sample


def trim_buffer(
    buffer: SampleBuffer,
    duration: float,
    start_time: float = 0.0,
) -> SampleBuffer:
    """Return a new buffer holding ``duration`` seconds from ``start_time``.

    Args:
        buffer:     Source audio. Left untouched.
        duration:   Window length in seconds. Must be > 0.
        start_time: Window start in seconds. Must be >= 0.

    Returns:
        SampleBuffer with the same sample rate and channel count, each channel
        holding exactly the samples in ``[start_sample, end_sample)``.

    Raises:
        OutOfRangeError: If start_time < 0, duration <= 0, or the window ends
            past the last frame of the buffer.
    """
    if start_time < 0:
        raise OutOfRangeError(f"start_time must be >= 0, got {start_time}")
    if duration <= 0:
        raise OutOfRangeError(f"duration must be > 0, got {duration}")

    start_sample, end_sample = sample_range(buffer.sample_rate, duration, start_time)
    if end_sample > buffer.frame_count:
        raise OutOfRangeError(
            f"Trim window [{start_time}s, {start_time + duration}s) ends at sample "
            f"{end_sample}, past the buffer end ({buffer.frame_count} frames)"
        )

    # SampleBuffer copies on construction, so the slice never aliases the source.
    return SampleBuffer(
        sample_rate=buffer.sample_rate,
        data=buffer.data[:, start_sample:end_sample],
    )
