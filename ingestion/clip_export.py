"""
ingestion/clip_export.py — Write cut lists and WAV clips to disk.

This module is the I/O output boundary for the cut pipeline:
    trimmed buffer (core/audio/trim.py) → buffer_to_wav → clip.wav
    cut times (core/audio/beats.py)     → encode_cut_list → cuts_<tempo>.xml

Usage:
    from ingestion.clip_export import export_session
    paths = export_session(session, "/tmp/cuts_out")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from core.audio.cutlist import encode_cut_list
from core.audio.types import SampleBuffer
from core.audio.wav import buffer_to_wav

if TYPE_CHECKING:
    from ingestion.clip_engine import CutSession

logger = logging.getLogger(__name__)

CLIP_FILENAME: str = "clip.wav"
"""File name of the exported audio clip."""

CUT_LIST_TEMPLATE: str = "cuts_{tempo}.xml"
"""File name template for one tempo's cut list."""


def save_wav(buffer: SampleBuffer, output_path: str | Path) -> Path:
    """Encode a buffer as 16-bit WAV and write it to output_path.

    Parent directories are created if needed.

    Raises:
        EmptyBufferError: If the buffer has no channels or no frames.
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(buffer_to_wav(buffer))
    logger.info("Wrote WAV clip %s (%d frames)", path, buffer.frame_count)
    return path


def save_cut_list(timestamps: Sequence[float], output_path: str | Path) -> Path:
    """Encode cut times as a cut-list document and write it as UTF-8."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode_cut_list(timestamps), encoding="utf-8")
    logger.info("Wrote cut list %s (%d cuts)", path, len(timestamps))
    return path


def export_session(session: CutSession, output_dir: str | Path) -> dict[str, str]:
    """Write every artifact of a CutSession into output_dir.

    The XML documents already held by the session are written verbatim so the
    files are byte-identical to what the session reports.

    Returns:
        Dict of artifact → file path. Keys: "clip" plus one key per tempo.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    clip_path = out / CLIP_FILENAME
    clip_path.write_bytes(session.wav_bytes)
    paths: dict[str, str] = {"clip": str(clip_path)}

    for tempo, cuts in session.tempos.items():
        xml_path = out / CUT_LIST_TEMPLATE.format(tempo=tempo)
        xml_path.write_text(cuts.cut_list_xml, encoding="utf-8")
        paths[tempo] = str(xml_path)

    logger.info("Exported %d artifact(s) to %s", len(paths), out)
    return paths
