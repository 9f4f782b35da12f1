"""
Tests for ingestion/clip_export.py — writing WAV clips and cut lists to disk.

All file output goes to pytest's tmp_path.
"""

import numpy as np
import pytest

from core.audio.cutlist import encode_cut_list
from core.audio.errors import EmptyBufferError
from core.audio.types import SampleBuffer
from core.audio.wav import buffer_to_wav
from ingestion.clip_engine import BeatCutEngine
from ingestion.clip_export import (
    CLIP_FILENAME,
    export_session,
    save_cut_list,
    save_wav,
)


class TestSaveWav:
    def test_writes_encoded_bytes(self, tmp_path):
        buf = SampleBuffer.mono(np.linspace(-1, 1, 100), 8000)
        path = save_wav(buf, tmp_path / "clip.wav")
        assert path.read_bytes() == buffer_to_wav(buf)

    def test_creates_parent_directories(self, tmp_path):
        path = save_wav(SampleBuffer.mono([0.0], 8000), tmp_path / "a" / "b" / "clip.wav")
        assert path.exists()

    def test_empty_buffer_writes_nothing(self, tmp_path):
        target = tmp_path / "clip.wav"
        with pytest.raises(EmptyBufferError):
            save_wav(SampleBuffer.mono([], 8000), target)
        assert not target.exists()


class TestSaveCutList:
    def test_writes_document(self, tmp_path):
        path = save_cut_list([0.0, 1.5], tmp_path / "cuts.xml")
        assert path.read_text(encoding="utf-8") == encode_cut_list([0.0, 1.5])


class TestExportSession:
    def test_writes_clip_and_every_tempo(self, tmp_path, pulse_track):
        engine = BeatCutEngine(librosa=object(), parallel=False)
        session = engine.process(SampleBuffer(sample_rate=44100, data=pulse_track), 4.0)

        paths = export_session(session, tmp_path / "out")

        assert set(paths) == {"clip", "normal", "fast", "slow"}
        assert (tmp_path / "out" / CLIP_FILENAME).read_bytes() == session.wav_bytes
        for tempo, cuts in session.tempos.items():
            assert (tmp_path / "out" / f"cuts_{tempo}.xml").read_text(
                encoding="utf-8"
            ) == cuts.cut_list_xml
