"""
ingestion/clip_engine.py — High-level orchestrator for the audio→cuts pipeline.

BeatCutEngine wires together the entire production pipeline:

    audio file
        │
        ├─ load_audio()          [ingestion/audio_loader.py — I/O boundary]
        │       ↓
        ├─ trim_buffer()         [core/audio/trim.py — selected window]
        │       ↓
        ├─ detect_beats() × 3    [core/audio/beats.py — normal, fast, slow]
        │       ↓
        ├─ encode_cut_list() × 3 [core/audio/cutlist.py — XML per tempo]
        │       ↓
        ├─ buffer_to_wav()       [core/audio/wav.py — clip audio]
        │       ↓
        └─ export_session()      [ingestion/clip_export.py — files on disk]

This module is in `ingestion/` because it performs file I/O (audio decoding,
file writing) and reads runtime configuration. The core logic is pure and
lives in `core/`.

Buffer ownership:
    The engine never keeps a "current buffer". Each process() call receives a
    buffer value and returns a CutSession holding the trimmed buffer; callers
    rebind to that session instead of sharing one mutable reference.

Configuration (environment, read at construction after load_dotenv()):
    CUTS_OUTPUT_DIR          Default export directory (unset = no default).
    CUTS_PARALLEL_DETECTION  "1"/"true"/"yes" runs the tempo passes in threads.
    CUTS_MAX_WORKERS         Thread pool size for parallel detection (default 3).

Usage:
    engine = BeatCutEngine()
    session = engine.process_file("/path/to/track.mp3", 30.0, start_time=12.0)
    print(session.tempos["normal"].times)
    engine.export(session, "/tmp/cuts_out")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from core.audio.beats import BEAT_KIND_FORCED, BEAT_KIND_ONSET, detect_beats_detailed
from core.audio.cutlist import encode_cut_list
from core.audio.errors import InvalidConfigurationError
from core.audio.trim import trim_buffer
from core.audio.types import Beat, SampleBuffer
from core.audio.wav import buffer_to_wav
from core.config import TEMPO_PROFILES, DetectionProfile
from infrastructure.metrics import LatencyTimer, record_cuts, record_pipeline_run
from ingestion.audio_loader import load_audio
from ingestion.clip_export import export_session

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS: int = 3
"""One worker per predefined tempo profile."""

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TempoCuts:
    """Detection result for one tempo profile.

    Attributes:
        tempo:        Profile name, e.g. "normal".
        profile:      The profile the beats were detected with.
        beats:        Detected beats in ascending time order.
        cut_list_xml: Cut-list document for ``beats``.
    """

    tempo: str
    profile: DetectionProfile
    beats: tuple[Beat, ...]
    cut_list_xml: str

    @property
    def times(self) -> tuple[float, ...]:
        """Cut times in seconds."""
        return tuple(beat.time_sec for beat in self.beats)

    @property
    def onset_count(self) -> int:
        return sum(1 for beat in self.beats if beat.kind == BEAT_KIND_ONSET)

    @property
    def forced_count(self) -> int:
        return sum(1 for beat in self.beats if beat.kind == BEAT_KIND_FORCED)


@dataclass
class CutSession:
    """Output of BeatCutEngine.process().

    Attributes:
        buffer:             The trimmed buffer every tempo was detected on.
        duration_sec:       Selected clip duration in seconds.
        start_sec:          Trim offset into the source buffer in seconds.
        tempos:             Tempo name → TempoCuts, in profile order.
        wav_bytes:          16-bit PCM WAV encoding of ``buffer``.
        processing_time_ms: Wall-clock time for trim + detect + encode.
    """

    buffer: SampleBuffer
    duration_sec: float
    start_sec: float
    tempos: dict[str, TempoCuts] = field(default_factory=dict)
    wav_bytes: bytes = b""
    processing_time_ms: float = 0.0


# ---------------------------------------------------------------------------
# BeatCutEngine
# ---------------------------------------------------------------------------


class BeatCutEngine:
    """Orchestrates decode → trim → detect × N → encode.

    All core operations are delegated to pure functions in `core/audio/`.
    librosa is imported lazily on first decode (or injected for testing).

    Example:
        engine = BeatCutEngine(parallel=True)
        session = engine.process(buffer, 30.0)
        xml = session.tempos["fast"].cut_list_xml
    """

    def __init__(
        self,
        librosa: Any = None,
        *,
        parallel: bool | None = None,
        max_workers: int | None = None,
        output_dir: str | Path | None = None,
    ) -> None:
        """Initialise the engine.

        Explicit arguments take precedence over the CUTS_* environment variables.

        Args:
            librosa:     Injected librosa module. Pass a MagicMock in tests to avoid
                         loading the audio stack. None = import lazily on first use.
            parallel:    Run the tempo passes on a thread pool.
            max_workers: Thread pool size when parallel.
            output_dir:  Default directory for export().

        Raises:
            InvalidConfigurationError: If max_workers is not positive.
        """
        load_dotenv()
        self._librosa = librosa

        if parallel is None:
            parallel = os.environ.get("CUTS_PARALLEL_DETECTION", "").strip().lower() in _TRUTHY
        self.parallel = parallel

        if max_workers is None:
            max_workers = int(os.environ.get("CUTS_MAX_WORKERS", DEFAULT_MAX_WORKERS))
        if max_workers <= 0:
            raise InvalidConfigurationError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers

        if output_dir is None:
            output_dir = os.environ.get("CUTS_OUTPUT_DIR") or None
        self.output_dir = Path(output_dir) if output_dir is not None else None

    def _get_librosa(self) -> Any:
        """Return librosa, importing it lazily if not already injected."""
        if self._librosa is None:
            import librosa as _lib  # deferred: heavy import

            self._librosa = _lib
        return self._librosa

    # ------------------------------------------------------------------
    # Stage 1 — Detection
    # ------------------------------------------------------------------

    def detect_tempos(
        self,
        buffer: SampleBuffer,
        duration: float,
        profiles: Mapping[str, DetectionProfile] | None = None,
        *,
        parallel: bool | None = None,
    ) -> dict[str, TempoCuts]:
        """Run beat detection once per profile and build each cut list.

        Every pass reads the same immutable buffer, so the parallel and
        sequential paths return identical results.

        Args:
            buffer:   Audio to analyze (usually already trimmed).
            duration: Seconds to scan from the start of the buffer.
            profiles: Tempo name → profile. Defaults to TEMPO_PROFILES.
            parallel: Overrides the engine's parallel setting for this call.

        Returns:
            Tempo name → TempoCuts, in the order of ``profiles``.
        """
        selected = dict(profiles if profiles is not None else TEMPO_PROFILES)
        use_threads = self.parallel if parallel is None else parallel

        def _run(item: tuple[str, DetectionProfile]) -> TempoCuts:
            tempo, profile = item
            beats = detect_beats_detailed(buffer, duration, profile)
            return TempoCuts(
                tempo=tempo,
                profile=profile,
                beats=beats,
                cut_list_xml=encode_cut_list(beat.time_sec for beat in beats),
            )

        if use_threads and len(selected) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(_run, selected.items()))
        else:
            results = [_run(item) for item in selected.items()]

        for result in results:
            logger.debug(
                "Tempo %s: %d cuts (%d onset, %d forced)",
                result.tempo,
                len(result.beats),
                result.onset_count,
                result.forced_count,
            )
            record_cuts(result.tempo, onset=result.onset_count, forced=result.forced_count)

        return {result.tempo: result for result in results}

    # ------------------------------------------------------------------
    # Stage 2 — Full in-memory pipeline
    # ------------------------------------------------------------------

    def process(
        self,
        buffer: SampleBuffer,
        duration: float,
        *,
        start_time: float = 0.0,
        profiles: Mapping[str, DetectionProfile] | None = None,
        parallel: bool | None = None,
    ) -> CutSession:
        """Trim, detect every tempo and encode the clip.

        Args:
            buffer:     Decoded source audio. Not modified.
            duration:   Clip length in seconds.
            start_time: Clip start offset in seconds.
            profiles:   Tempo name → profile. Defaults to TEMPO_PROFILES.
            parallel:   Overrides the engine's parallel setting for this call.

        Returns:
            CutSession with the trimmed buffer, per-tempo cuts and WAV bytes.

        Raises:
            OutOfRangeError: If the trim window does not fit the buffer.
            EmptyBufferError: If the trimmed window holds no frames.
        """
        try:
            with LatencyTimer() as timer:
                trimmed = trim_buffer(buffer, duration, start_time)
                tempos = self.detect_tempos(trimmed, duration, profiles, parallel=parallel)
                wav_bytes = buffer_to_wav(trimmed)
        except Exception:
            record_pipeline_run(status="error")
            raise

        record_pipeline_run(status="success", latency_seconds=timer.elapsed)
        elapsed_ms = timer.elapsed * 1000.0
        logger.info(
            "Processed %.2fs clip at %.2fs: %s in %.1f ms",
            duration,
            start_time,
            ", ".join(f"{name}={len(cuts.beats)}" for name, cuts in tempos.items()),
            elapsed_ms,
        )
        return CutSession(
            buffer=trimmed,
            duration_sec=duration,
            start_sec=start_time,
            tempos=tempos,
            wav_bytes=wav_bytes,
            processing_time_ms=round(elapsed_ms, 1),
        )

    # ------------------------------------------------------------------
    # Stage 3 — File pipeline
    # ------------------------------------------------------------------

    def process_file(
        self,
        path: str | Path,
        duration: float,
        *,
        start_time: float = 0.0,
        profiles: Mapping[str, DetectionProfile] | None = None,
    ) -> CutSession:
        """Decode an audio file and run process() on it.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the extension is unsupported or the trim window
                does not fit the decoded audio.
            RuntimeError: If the audio cannot be decoded.
        """
        buffer = load_audio(path, librosa=self._get_librosa())
        return self.process(buffer, duration, start_time=start_time, profiles=profiles)

    def export(
        self,
        session: CutSession,
        output_dir: str | Path | None = None,
    ) -> dict[str, str]:
        """Write the clip and every cut list of a session to disk.

        Args:
            session:    Result of process() / process_file().
            output_dir: Target directory. Defaults to the engine's output_dir.

        Returns:
            Dict of artifact → path. Keys: "clip" plus one per tempo.

        Raises:
            ValueError: If no output directory is given or configured.
        """
        target = Path(output_dir) if output_dir is not None else self.output_dir
        if target is None:
            raise ValueError("No output directory given and CUTS_OUTPUT_DIR is not set")
        return export_session(session, target)
