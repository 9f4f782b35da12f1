"""
FastAPI dependency providers.

Provides a singleton BeatCutEngine so runtime configuration (CUTS_* env
vars) is read once and librosa is imported at most once per process.
"""

from ingestion.clip_engine import BeatCutEngine

_cut_engine: BeatCutEngine | None = None


def get_cut_engine() -> BeatCutEngine:
    """
    Return a cached ``BeatCutEngine`` singleton.

    The engine is created on first call and reused thereafter.
    """
    global _cut_engine  # noqa: PLW0603
    if _cut_engine is None:
        _cut_engine = BeatCutEngine()
    return _cut_engine
