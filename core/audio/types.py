"""
core/audio/types.py — Frozen data types shared by the cut-point pipeline.

All types are frozen dataclasses — immutable value objects that can be
safely passed between layers and read from several threads at once.

Design principles:
    - No I/O, no state, no side effects.
    - SampleBuffer copies its array on construction and marks it read-only,
      so trimming always yields a distinct value and no holder can mutate a
      buffer another component still reads.
    - Cut and Beat are plain records; document layout lives in cutlist.py.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

from core.audio.errors import InvalidConfigurationError

_HUNDREDTHS = Decimal("0.01")


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """Multi-channel floating-point PCM audio.

    ``data`` is shaped ``(channel_count, frame_count)``: one row per channel,
    so every channel has the same length by construction.

    Invariants:
        sample_rate is a positive integer
        data.ndim == 2
        data is read-only (writes raise ValueError)
        samples are nominally in [-1.0, 1.0] (not enforced — encoders clamp)
    """

    sample_rate: int
    """Samples per second per channel."""

    data: np.ndarray
    """float32 array, shape (channel_count, frame_count)."""

    def __post_init__(self) -> None:
        try:
            rate = int(self.sample_rate)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidConfigurationError(
                f"sample_rate must be a positive integer, got {self.sample_rate!r}"
            ) from exc
        if rate <= 0 or rate != self.sample_rate:
            raise InvalidConfigurationError(
                f"sample_rate must be a positive integer, got {self.sample_rate!r}"
            )
        array = np.array(self.data, dtype=np.float32, copy=True)
        if array.ndim == 1:
            array = array[np.newaxis, :]
        if array.ndim != 2:
            raise ValueError(
                f"data must be 2-D (channels, frames), got shape {array.shape}"
            )
        array.setflags(write=False)
        object.__setattr__(self, "sample_rate", rate)
        object.__setattr__(self, "data", array)

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[Sequence[float]],
        sample_rate: int,
    ) -> SampleBuffer:
        """Build a buffer from one sample sequence per channel.

        Raises:
            ValueError: If the channels differ in length.
        """
        lengths = {len(ch) for ch in channels}
        if len(lengths) > 1:
            raise ValueError(f"All channels must have the same length, got {sorted(lengths)}")
        if not channels:
            return cls(sample_rate=sample_rate, data=np.zeros((0, 0), dtype=np.float32))
        return cls(sample_rate=sample_rate, data=np.asarray(channels, dtype=np.float32))

    @classmethod
    def mono(cls, samples: Sequence[float] | np.ndarray, sample_rate: int) -> SampleBuffer:
        """Build a single-channel buffer."""
        return cls(sample_rate=sample_rate, data=np.asarray(samples, dtype=np.float32)[np.newaxis, :])

    @property
    def channel_count(self) -> int:
        return int(self.data.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.data.shape[1])

    @property
    def duration_sec(self) -> float:
        """Length of the buffer in seconds."""
        return self.frame_count / self.sample_rate

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to analyze or encode."""
        return self.channel_count == 0 or self.frame_count == 0

    def channel(self, index: int) -> np.ndarray:
        """Read-only view of one channel's samples."""
        return self.data[index]


@dataclass(frozen=True)
class Beat:
    """A single emitted cut point.

    Invariants:
        time_sec >= 0
        sample_index >= 0
        kind in {"onset", "forced"}
    """

    time_sec: float
    """Cut time in seconds (window start / sample rate)."""

    sample_index: int
    """First sample of the window that produced the cut."""

    kind: str
    """'onset' when the window amplitude crossed the sensitivity,
    'forced' when the maximum spacing elapsed without one."""


@dataclass(frozen=True)
class Cut:
    """One record of a cut-list document.

    Invariants:
        id >= 1, sequential within a list
        time_sec rounded to two decimals
        color in {"blue", "red"}, alternating starting with "blue"
    """

    id: int
    time_sec: float
    color: str

    @property
    def time_label(self) -> str:
        """Time with exactly two fraction digits, e.g. '1.50'."""
        return format_seconds(self.time_sec)


def format_seconds(seconds: float) -> str:
    """Format seconds with two fraction digits, rounding ties away from zero.

    Rounds the exact binary value of ``seconds``, so 0.125 gives "0.13" while
    1.005 (stored as 1.00499...) gives "1.00". Negative zero gives "0.00".
    """
    if seconds == 0:
        seconds = 0.0
    return str(Decimal(seconds).quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP))
