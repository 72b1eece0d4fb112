from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class GenreBundle(BaseModel):
    """Vocabulary, imagery and production cues for one genre."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    tone: str
    pace: str

    # Narrative slots, each written to sit mid-sentence.
    opening_image: str
    senses: Tuple[str, str]
    place_rule: str
    inciting: str
    ally: str
    obstacle: str
    adjective: str
    turn: str
    impact: str
    climax_action: str
    resolution: str
    moral: str
    closing_image: str

    # Scene cue pools, cycled by scene index.
    imagery: Tuple[str, ...] = Field(min_length=3)
    camera_moves: Tuple[str, ...] = Field(min_length=3)
    sound_cues: Tuple[str, ...] = Field(min_length=3)
    overlay_words: Tuple[str, ...] = Field(min_length=1, description="One headline per beat")

    # Production palette.
    color_grade: str
    transition: str
    overlay_style: str
    music_palette: str
    tempo_bpm: int = Field(gt=0)
