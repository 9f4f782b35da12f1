"""
Detection profile configuration for the beat detector.

These immutable config objects decouple the tuning constants from the
detect_beats() signature, so the three tempo profiles the pipeline runs
are defined once and reused across every call.
"""

from dataclasses import dataclass

from core.audio.errors import InvalidConfigurationError

# Forced-cut ceiling shared by every predefined profile.
DEFAULT_MAX_SPACING_SEC: float = 3.0


@dataclass(frozen=True)
class DetectionProfile:
    """
    Tuning for one beat detection run.

    Attributes:
        name: Tempo label used for output file names and metric labels.
        sensitivity: Threshold on the windowed mean absolute amplitude.
            A window whose mean exceeds this value is an onset candidate.
        min_spacing_sec: Minimum seconds between two amplitude-triggered cuts.
        max_spacing_sec: Seconds after which a cut is forced regardless of
            amplitude. Defaults to 3.0.

    Example:
        >>> profile = DetectionProfile(name="tight", sensitivity=0.3, min_spacing_sec=0.5)
        >>> beats = detect_beats(buffer, 30.0, profile)
    """

    name: str
    sensitivity: float
    min_spacing_sec: float
    max_spacing_sec: float = DEFAULT_MAX_SPACING_SEC

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.sensitivity <= 0:
            raise InvalidConfigurationError(
                f"sensitivity must be positive, got {self.sensitivity}"
            )
        if self.min_spacing_sec <= 0:
            raise InvalidConfigurationError(
                f"min_spacing_sec must be positive, got {self.min_spacing_sec}"
            )
        if self.max_spacing_sec <= 0:
            raise InvalidConfigurationError(
                f"max_spacing_sec must be positive, got {self.max_spacing_sec}"
            )


# Pre-defined profiles, one per tempo the pipeline renders

NORMAL_PROFILE = DetectionProfile(name="normal", sensitivity=0.5, min_spacing_sec=1.5)
"""Default pacing: moderate threshold, cuts at least 1.5 s apart."""

FAST_PROFILE = DetectionProfile(name="fast", sensitivity=0.4, min_spacing_sec=1.0)
"""Busier edit: lower threshold, cuts at least 1 s apart."""

SLOW_PROFILE = DetectionProfile(name="slow", sensitivity=0.55, min_spacing_sec=2.0)
"""Calmer edit: higher threshold, cuts at least 2 s apart."""

TEMPO_PROFILES: dict[str, DetectionProfile] = {
    profile.name: profile for profile in (NORMAL_PROFILE, FAST_PROFILE, SLOW_PROFILE)
}
"""Tempo name → profile, in the order the pipeline runs them."""
