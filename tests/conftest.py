"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat buffer construction or librosa mock boilerplate.
"""

from unittest.mock import MagicMock

import numpy as np
import pytest
from fastapi.testclient import TestClient

from api.deps import get_cut_engine
from api.main import app
from core.audio.types import SampleBuffer
from ingestion.clip_engine import BeatCutEngine

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SR: int = 44100
"""Sample rate used by every synthetic buffer."""

TRACK_SECONDS: int = 10
"""Length of the synthetic track returned by the mock librosa."""


# ---------------------------------------------------------------------------
# Buffers
# ---------------------------------------------------------------------------


@pytest.fixture()
def silent_buffer() -> SampleBuffer:
    """5 s of mono silence at 44.1 kHz."""
    return SampleBuffer.mono(np.zeros(SR * 5, dtype=np.float32), SR)


@pytest.fixture()
def pulse_track() -> np.ndarray:
    """Stereo track with a loud 4096-sample burst every 0.5 s on both channels.

    Shape (2, SR × TRACK_SECONDS). Bursts start on multiples of 0.5 s and
    everything else is silent.
    """
    y = np.zeros((2, SR * TRACK_SECONDS), dtype=np.float32)
    for start in range(0, y.shape[1], SR // 2):
        y[:, start : start + 4096] = 0.9
    return y


# ---------------------------------------------------------------------------
# Fake decoder
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_librosa(pulse_track: np.ndarray) -> MagicMock:
    """Mock librosa whose load() returns ``pulse_track`` at 44.1 kHz."""
    mock = MagicMock()
    mock.load.return_value = (pulse_track, SR)
    return mock


@pytest.fixture()
def audio_file(tmp_path):
    """An existing file with a supported extension (contents never decoded)."""
    path = tmp_path / "track.wav"
    path.write_bytes(b"not decoded - librosa is mocked")
    return path


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def api_client(mock_librosa, tmp_path):
    """FastAPI ``TestClient`` with the cut engine overridden.

    The engine uses the mock librosa and exports into ``tmp_path / "out"``.
    The engine is accessible as ``client.engine``.
    """
    engine = BeatCutEngine(librosa=mock_librosa, parallel=False, output_dir=tmp_path / "out")
    app.dependency_overrides[get_cut_engine] = lambda: engine

    with TestClient(app) as c:
        c.engine = engine  # type: ignore[attr-defined]
        yield c

    app.dependency_overrides.clear()
