"""
core/audio — Pure audio transforms for beat-aligned cut points.

Provides the four stateless operations the cut pipeline is built from.
All functions are pure: they take a SampleBuffer (or cut times) and return
new values. No file I/O — that lives in ingestion/audio_loader.py and
ingestion/clip_export.py.

Public API:
    Types:      SampleBuffer, Beat, Cut
    Errors:     AudioCoreError, OutOfRangeError, InvalidConfigurationError,
                EmptyBufferError
    Trim:       trim_buffer
    Beats:      detect_beats, detect_beats_detailed
    Cut lists:  build_cut_list, cuts_to_xml, encode_cut_list, parse_cut_list
    WAV:        buffer_to_wav
"""

from core.audio.beats import detect_beats, detect_beats_detailed
from core.audio.cutlist import build_cut_list, cuts_to_xml, encode_cut_list, parse_cut_list
from core.audio.errors import (
    AudioCoreError,
    EmptyBufferError,
    InvalidConfigurationError,
    OutOfRangeError,
)
from core.audio.trim import trim_buffer
from core.audio.types import Beat, Cut, SampleBuffer, format_seconds
from core.audio.wav import buffer_to_wav

__all__ = [
    "SampleBuffer",
    "Beat",
    "Cut",
    "format_seconds",
    "AudioCoreError",
    "OutOfRangeError",
    "InvalidConfigurationError",
    "EmptyBufferError",
    "trim_buffer",
    "detect_beats",
    "detect_beats_detailed",
    "build_cut_list",
    "cuts_to_xml",
    "encode_cut_list",
    "parse_cut_list",
    "buffer_to_wav",
]
