from __future__ import annotations

from pydantic import Field

from storycrafter.common.model import WireModel


class Scene(WireModel):
    """Fixed-length slice of the edit timeline with synchronized cues."""

    index: int = Field(ge=1)
    start: str = Field(description="mm:ss offset into the timeline")
    end: str
    duration_seconds: int = Field(gt=0)
    visual_direction: str = Field(min_length=1)
    camera_movement: str = Field(min_length=1)
    voice_over: str = Field(min_length=1)
    text_overlay: str = Field(min_length=1)
    sound_design: str = Field(min_length=1)
    beat_label: str = Field(default="", exclude=True)
