"""
core/audio/errors.py — Failure kinds raised by the pure audio transforms.

All three subclass ValueError: they describe bad input, never a transient
fault, so boundary code (api/routes/cuts.py) maps them to HTTP 422 through
its existing ``except ValueError`` branch.
"""

from __future__ import annotations


class AudioCoreError(ValueError):
    """Base class for every error raised by core/audio."""


class OutOfRangeError(AudioCoreError):
    """A trim window falls outside the buffer or has a non-positive duration."""


class InvalidConfigurationError(AudioCoreError):
    """A sensitivity, spacing, duration or sample rate is not positive."""


class EmptyBufferError(AudioCoreError):
    """A buffer with zero channels or zero frames was passed for analysis or encoding."""
