"""
api/schemas/cuts.py — Pydantic request/response schemas for cut endpoints.

Covers:
    /cuts/profiles — ProfileOut
    /cuts/analyze  — CutAnalyzeRequest / CutAnalyzeResponse
    /cuts/clip     — ClipRequest (response is raw audio/wav)
    /cuts/xml      — CutListRequest (response is raw application/xml)
"""

import math

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Shared sub-schemas
# ---------------------------------------------------------------------------


class ProfileOut(BaseModel):
    """One detection profile of the fixed tempo table."""

    name: str
    sensitivity: float = Field(..., gt=0.0)
    min_spacing_sec: float = Field(..., gt=0.0)
    max_spacing_sec: float = Field(..., gt=0.0)


class BeatOut(BaseModel):
    """A single detected cut."""

    time_sec: float = Field(..., ge=0.0)
    kind: str


class TempoCutsOut(BaseModel):
    """Cuts detected for one tempo profile."""

    tempo: str
    profile: ProfileOut
    beats: list[BeatOut]
    onset_count: int = Field(..., ge=0)
    forced_count: int = Field(..., ge=0)
    cut_list_xml: str


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ClipRequest(BaseModel):
    """Source file plus the clip window to cut from it."""

    file_path: str = Field(
        ...,
        description="Absolute path to an audio file on the server filesystem.",
    )
    duration: float = Field(
        ...,
        gt=0.0,
        le=600.0,
        description="Clip length in seconds.",
    )
    start_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Clip start offset into the track in seconds.",
    )

    @field_validator("file_path")
    @classmethod
    def file_path_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("file_path must not be blank")
        return v


class CutAnalyzeRequest(ClipRequest):
    """Request body for POST /cuts/analyze."""

    export: bool = Field(
        default=False,
        description="Write clip.wav and cuts_<tempo>.xml to CUTS_OUTPUT_DIR.",
    )


class CutListRequest(BaseModel):
    """Request body for POST /cuts/xml."""

    timestamps: list[float] = Field(..., description="Cut times in seconds, in order.")

    @field_validator("timestamps")
    @classmethod
    def timestamps_non_negative(cls, v: list[float]) -> list[float]:
        if any(not math.isfinite(t) or t < 0 for t in v):
            raise ValueError("timestamps must be finite and >= 0")
        return v


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class CutAnalyzeResponse(BaseModel):
    """Response body for POST /cuts/analyze."""

    duration_sec: float
    start_sec: float
    sample_rate: int
    channel_count: int
    frame_count: int
    wav_size_bytes: int
    tempos: dict[str, TempoCutsOut]
    export_paths: dict[str, str] = Field(default_factory=dict)
    processing_time_ms: float
