"""
core/audio/beats.py — Amplitude-window beat detection for cut placement.

This is not a tempo tracker. It walks the first channel in fixed windows of
WINDOW_SIZE samples and places a cut wherever the window's mean absolute
amplitude crosses the profile sensitivity, subject to two spacing rules:

    - onset cut:  average > sensitivity  AND  elapsed > min_spacing × sr
    - forced cut: elapsed > max_spacing × sr   (amplitude ignored)

``elapsed`` is measured in samples from the previous cut; before the first cut
it is infinite, so the first window always cuts: as an onset when it is
loud, as a forced cut at 0.0 s when it is not.

Tail window:
    The last window may hold fewer than WINDOW_SIZE samples, but its sum is
    still divided by WINDOW_SIZE. A short tail therefore reads quieter than it
    is. Existing cut lists depend on this, so it is kept as is.

Usage:
    from core.audio.beats import detect_beats
    from core.config import NORMAL_PROFILE
    times = detect_beats(buffer, 30.0, NORMAL_PROFILE)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from core.audio.errors import EmptyBufferError, InvalidConfigurationError
from core.audio.types import Beat, SampleBuffer

if TYPE_CHECKING:
    from core.config import DetectionProfile

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

WINDOW_SIZE: int = 1024
"""Samples per analysis window. Also the divisor for every window mean,
including a truncated final window."""

BEAT_KIND_ONSET: str = "onset"
BEAT_KIND_FORCED: str = "forced"


# ---------------------------------------------------------------------------
# Window statistics (pure numpy)
# ---------------------------------------------------------------------------


def _window_starts(n_samples: int, duration: float, sample_rate: int) -> np.ndarray:
    """Start indices of every window scanned: i < n_samples and i < duration × sr."""
    max_samples = duration * sample_rate
    starts = np.arange(0, n_samples, WINDOW_SIZE, dtype=np.int64)
    return starts[starts < max_samples]


def _window_averages(samples: np.ndarray, starts: np.ndarray) -> np.ndarray:
    """Mean absolute amplitude of each window, always divided by WINDOW_SIZE.

    A window may extend past the scan limit (duration × sr) up to the end of
    the channel; only the window start is bounded by the duration.
    """
    if starts.size == 0:
        return np.zeros(0, dtype=np.float64)
    end = min(samples.size, int(starts[-1]) + WINDOW_SIZE)
    magnitudes = np.abs(samples[:end].astype(np.float64))
    sums = np.add.reduceat(magnitudes, starts)
    return sums / WINDOW_SIZE


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def detect_beats_detailed(
    buffer: SampleBuffer,
    duration: float,
    profile: DetectionProfile,
) -> tuple[Beat, ...]:
    """Detect cut points and report whether each was an onset or forced.

    Args:
        buffer:   Source audio. Only channel 0 is analyzed.
        duration: Seconds of audio to scan from the start of the buffer.
                  Must be > 0. Values past the buffer end are clipped to it.
        profile:  Sensitivity and spacing rules for this run.

    Returns:
        Beats in ascending time order.

    Raises:
        EmptyBufferError: If the buffer has no channels or no frames.
        InvalidConfigurationError: If duration <= 0.
    """
    if buffer.is_empty:
        raise EmptyBufferError(
            f"Cannot detect beats in an empty buffer "
            f"({buffer.channel_count} channels, {buffer.frame_count} frames)"
        )
    if duration <= 0:
        raise InvalidConfigurationError(f"duration must be positive, got {duration}")

    sr = buffer.sample_rate
    samples = buffer.channel(0)
    starts = _window_starts(samples.size, duration, sr)
    averages = _window_averages(samples, starts)

    min_spacing_samples = profile.min_spacing_sec * sr
    max_spacing_samples = profile.max_spacing_sec * sr

    beats: list[Beat] = []
    last_beat = float("-inf")
    for start, average in zip(starts.tolist(), averages.tolist()):
        elapsed = start - last_beat
        if average > profile.sensitivity and elapsed > min_spacing_samples:
            kind = BEAT_KIND_ONSET
        elif elapsed > max_spacing_samples:
            kind = BEAT_KIND_FORCED
        else:
            continue
        beats.append(Beat(time_sec=start / sr, sample_index=start, kind=kind))
        last_beat = start

    return tuple(beats)


def detect_beats(
    buffer: SampleBuffer,
    duration: float,
    profile: DetectionProfile,
) -> tuple[float, ...]:
    """Detect cut points and return their times in seconds.

    Same rules and errors as detect_beats_detailed().

    Returns:
        Ascending tuple of non-negative cut times in seconds.
    """
    return tuple(beat.time_sec for beat in detect_beats_detailed(buffer, duration, profile))
