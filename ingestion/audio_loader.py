"""
ingestion/audio_loader.py — File I/O boundary for audio decoding.

This is the ONLY module in the cut pipeline that reads audio from disk.
Everything downstream (core/audio/trim.py, core/audio/beats.py,
core/audio/wav.py) takes a pre-decoded SampleBuffer — never file paths.

Usage:
    from ingestion.audio_loader import load_audio
    buffer = load_audio("/path/to/track.mp3")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from core.audio.types import SampleBuffer

logger = logging.getLogger(__name__)

# Supported audio file extensions (must be loadable by librosa / soundfile)
AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".wav", ".flac", ".aiff", ".aif", ".ogg", ".m4a", ".opus"}
)


def load_audio(
    path: str | Path,
    *,
    duration: float | None = None,
    offset: float = 0.0,
    librosa: Any = None,
) -> SampleBuffer:
    """Decode an audio file into a SampleBuffer at its native sample rate.

    All channels are kept (no mono mix-down): the WAV clip re-encodes every
    channel, while beat detection reads channel 0 only.

    Args:
        path:     Absolute or relative path to an audio file.
                  Supported formats: mp3, wav, flac, aiff, ogg, m4a, opus.
        duration: Maximum seconds to decode. None decodes the whole file.
        offset:   Seconds to skip before decoding starts.
        librosa:  Injected librosa module. None = import lazily.

    Returns:
        SampleBuffer shaped (channels, frames).

    Raises:
        FileNotFoundError: File does not exist at the given path.
        ValueError: File extension is not a supported audio format.
        RuntimeError: librosa/soundfile could not decode the file
                      (corrupted, truncated, DRM-protected, etc.).
    """
    if librosa is None:
        import librosa  # deferred to allow testing without audio backend

    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Audio file not found: {file_path}")

    if file_path.suffix.lower() not in AUDIO_EXTENSIONS:
        raise ValueError(
            f"Unsupported audio format {file_path.suffix!r}. "
            f"Supported: {sorted(AUDIO_EXTENSIONS)}"
        )

    try:
        y, loaded_sr = librosa.load(
            file_path,
            sr=None,
            mono=False,
            duration=duration,
            offset=offset,
        )
    except Exception as exc:
        raise RuntimeError(
            f"Failed to decode audio file {file_path.name!r}: {exc}"
        ) from exc

    data = np.atleast_2d(np.asarray(y, dtype=np.float32))
    buffer = SampleBuffer(sample_rate=int(loaded_sr), data=data)
    logger.info(
        "Decoded %s: %d channel(s), %d frames at %d Hz",
        file_path.name,
        buffer.channel_count,
        buffer.frame_count,
        buffer.sample_rate,
    )
    return buffer
