"""Shared data models for biresamp.

Plain pydantic models describing audio files and conversion outcomes,
plus the overflow policy used when narrowing to 16-bit samples.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class OverflowMode(str, Enum):
    SATURATE = "saturate"
    WRAP = "wrap"


class AudioInfo(BaseModel):
    """Format metadata of an audio file, as reported by libsndfile."""

    sample_rate: int
    channels: int = 1
    frames: int = 0
    format: str = ""
    subtype: str = ""

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        if self.sample_rate <= 0:
            return 0.0
        return self.frames / self.sample_rate


class ConversionResult(BaseModel):
    """Summary of one completed file conversion."""

    input_path: str
    output_path: str
    input_rate: int
    output_rate: int
    input_frames: int
    output_frames: int
    channel: int = 0
    overflow: OverflowMode = OverflowMode.SATURATE
    out_of_range: int = 0  # samples whose truncated value exceeded int16
    elapsed: float = Field(default=0.0, ge=0.0)
