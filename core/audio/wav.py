"""
core/audio/wav.py — Encode a SampleBuffer as a 16-bit PCM WAV byte stream.

Layout (44-byte header, all integers little-endian):

    offset  size  field
    0       4     "RIFF"
    4       4     total_length - 8
    8       4     "WAVE"
    12      4     "fmt "
    16      4     16              (fmt chunk length)
    20      2     1               (PCM)
    22      2     channel_count
    24      4     sample_rate
    28      4     byte_rate       = sample_rate × 2 × channel_count
    32      2     block_align     = channel_count × 2
    34      2     16              (bits per sample)
    36      4     "data"
    40      4     total_length - 44
    44      …     interleaved int16 frames

Quantization:
    s' = clamp(s, -1, 1)
    q  = trunc(0.5 + s' × 32767)

Clamping happens before scaling, so q is always within [-32766, 32767] and
never wraps. NaN samples encode as 0.
"""

from __future__ import annotations

import struct

import numpy as np

from core.audio.errors import EmptyBufferError, OutOfRangeError
from core.audio.types import SampleBuffer

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HEADER_SIZE: int = 44
BITS_PER_SAMPLE: int = 16
BYTES_PER_SAMPLE: int = BITS_PER_SAMPLE // 8
PCM_FORMAT: int = 1
FMT_CHUNK_SIZE: int = 16
PCM_SCALE: float = 32767.0

_MAX_RIFF_LENGTH: int = 0xFFFFFFFF

# "RIFF" <len> "WAVE" "fmt " <16> <fmt> <ch> <rate> <byte rate> <align> <bits> "data" <len>
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def wav_length(frame_count: int, channel_count: int) -> int:
    """Total byte length of the encoded stream, header included."""
    return HEADER_SIZE + frame_count * channel_count * BYTES_PER_SAMPLE


def _wav_header(channel_count: int, sample_rate: int, total_length: int) -> bytes:
    return _HEADER_STRUCT.pack(
        b"RIFF",
        total_length - 8,
        b"WAVE",
        b"fmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT,
        channel_count,
        sample_rate,
        sample_rate * BYTES_PER_SAMPLE * channel_count,
        channel_count * BYTES_PER_SAMPLE,
        BITS_PER_SAMPLE,
        b"data",
        total_length - HEADER_SIZE,
    )


def quantize(samples: np.ndarray) -> np.ndarray:
    """Map float samples to int16 with clamp-then-truncate rounding."""
    clean = np.nan_to_num(samples.astype(np.float64), nan=0.0)
    clamped = np.clip(clean, -1.0, 1.0)
    return np.trunc(0.5 + clamped * PCM_SCALE).astype("<i2")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def buffer_to_wav(buffer: SampleBuffer) -> bytes:
    """Encode a buffer as a complete 16-bit PCM WAV stream.

    Args:
        buffer: Audio to encode. Any float precision; output is always 16-bit.

    Returns:
        The WAV file contents: 44-byte header followed by interleaved
        little-endian int16 samples (frame by frame, channels in order).

    Raises:
        EmptyBufferError: If the buffer has no channels or no frames.
        OutOfRangeError: If the stream would exceed the 4 GiB RIFF limit.
    """
    if buffer.is_empty:
        raise EmptyBufferError(
            f"Cannot encode an empty buffer "
            f"({buffer.channel_count} channels, {buffer.frame_count} frames)"
        )

    total_length = wav_length(buffer.frame_count, buffer.channel_count)
    if total_length - 8 > _MAX_RIFF_LENGTH:
        raise OutOfRangeError(
            f"WAV stream of {total_length} bytes exceeds the 32-bit RIFF length field"
        )

    header = _wav_header(buffer.channel_count, buffer.sample_rate, total_length)
    # (channels, frames) → (frames, channels) so C-order ravel interleaves frames.
    body = quantize(buffer.data.T).tobytes()
    return header + body
