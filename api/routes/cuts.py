"""
api/routes/cuts.py — Beat-aligned cut endpoints.

Endpoints:
    GET  /cuts/profiles — The fixed tempo profile table
    POST /cuts/analyze  — Trim a track, detect cuts for every tempo, optionally export
    POST /cuts/clip     — Trimmed clip as a 16-bit WAV download
    POST /cuts/xml      — Cut-list document for caller-supplied timestamps

Analyze and clip accept a file path on the server filesystem and delegate
to BeatCutEngine in ingestion/clip_engine.py.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from api.deps import get_cut_engine
from api.schemas.cuts import (
    BeatOut,
    ClipRequest,
    CutAnalyzeRequest,
    CutAnalyzeResponse,
    CutListRequest,
    ProfileOut,
    TempoCutsOut,
)
from core.audio.cutlist import encode_cut_list
from core.config import TEMPO_PROFILES, DetectionProfile
from ingestion.clip_engine import BeatCutEngine, CutSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cuts", tags=["cuts"])


def _profile_out(profile: DetectionProfile) -> ProfileOut:
    return ProfileOut(
        name=profile.name,
        sensitivity=profile.sensitivity,
        min_spacing_sec=profile.min_spacing_sec,
        max_spacing_sec=profile.max_spacing_sec,
    )


def _run_pipeline(engine: BeatCutEngine, request: ClipRequest) -> CutSession:
    """Run process_file and map failures to HTTP errors.

    Raises:
        422: file_path does not exist, extension not supported, or the clip
             window does not fit the track.
        500: Audio decoding failure.
    """
    try:
        return engine.process_file(
            request.file_path,
            request.duration,
            start_time=request.start_time,
        )
    except FileNotFoundError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        logger.error("Cut pipeline failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Cut pipeline failed: {exc}") from exc


# ---------------------------------------------------------------------------
# GET /cuts/profiles
# ---------------------------------------------------------------------------


@router.get("/profiles", response_model=list[ProfileOut])
def list_profiles() -> list[ProfileOut]:
    """Return the tempo profiles every analysis runs, in run order."""
    return [_profile_out(profile) for profile in TEMPO_PROFILES.values()]


# ---------------------------------------------------------------------------
# POST /cuts/analyze
# ---------------------------------------------------------------------------


@router.post("/analyze", response_model=CutAnalyzeResponse)
def analyze_cuts(
    request: CutAnalyzeRequest,
    engine: BeatCutEngine = Depends(get_cut_engine),
) -> CutAnalyzeResponse:
    """Detect cut points for the normal, fast and slow tempos.

    Loads the audio file at `file_path` (server-side path), trims it to
    ``[start_time, start_time + duration)``, and returns the cuts and
    cut-list document of each tempo. With ``export=true`` the clip and the
    cut lists are also written to the configured output directory.

    Raises:
        422: Bad path, unsupported format, clip window outside the track,
             or export requested with no output directory configured.
        500: Audio decoding failure or export write failure.
    """
    session = _run_pipeline(engine, request)

    export_paths: dict[str, str] = {}
    if request.export:
        try:
            export_paths = engine.export(session)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except OSError as exc:
            logger.error("Cut export failed: %s", exc)
            raise HTTPException(status_code=500, detail=f"Cut export failed: {exc}") from exc

    tempos_out = {
        name: TempoCutsOut(
            tempo=name,
            profile=_profile_out(cuts.profile),
            beats=[BeatOut(time_sec=b.time_sec, kind=b.kind) for b in cuts.beats],
            onset_count=cuts.onset_count,
            forced_count=cuts.forced_count,
            cut_list_xml=cuts.cut_list_xml,
        )
        for name, cuts in session.tempos.items()
    }

    return CutAnalyzeResponse(
        duration_sec=session.duration_sec,
        start_sec=session.start_sec,
        sample_rate=session.buffer.sample_rate,
        channel_count=session.buffer.channel_count,
        frame_count=session.buffer.frame_count,
        wav_size_bytes=len(session.wav_bytes),
        tempos=tempos_out,
        export_paths=export_paths,
        processing_time_ms=session.processing_time_ms,
    )


# ---------------------------------------------------------------------------
# POST /cuts/clip
# ---------------------------------------------------------------------------


@router.post("/clip", response_class=Response)
def download_clip(
    request: ClipRequest,
    engine: BeatCutEngine = Depends(get_cut_engine),
) -> Response:
    """Return the trimmed clip as a 16-bit PCM WAV file."""
    session = _run_pipeline(engine, request)
    return Response(
        content=session.wav_bytes,
        media_type="audio/wav",
        headers={"Content-Disposition": 'attachment; filename="clip.wav"'},
    )


# ---------------------------------------------------------------------------
# POST /cuts/xml
# ---------------------------------------------------------------------------


@router.post("/xml", response_class=Response)
def cut_list_xml(request: CutListRequest) -> Response:
    """Render caller-supplied cut times as a cut-list document."""
    return Response(content=encode_cut_list(request.timestamps), media_type="application/xml")
