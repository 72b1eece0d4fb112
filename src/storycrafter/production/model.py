from __future__ import annotations

from typing import Tuple

from storycrafter.common.model import WireModel
from storycrafter.timeline.model import Scene


class ProductionNotes(WireModel):
    voice_over_script: str
    editing_notes: Tuple[str, ...]
    music_direction: str
    export_tips: Tuple[str, ...]


class CapCutPlan(WireModel):
    """Scene timeline plus the supporting text pasted into CapCut."""

    scenes: Tuple[Scene, ...]
    voice_over_script: str
    editing_notes: Tuple[str, ...]
    music_direction: str
    export_tips: Tuple[str, ...]

    @classmethod
    def assemble(cls, scenes: Tuple[Scene, ...], notes: ProductionNotes) -> "CapCutPlan":
        return cls(
            scenes=scenes,
            voice_over_script=notes.voice_over_script,
            editing_notes=notes.editing_notes,
            music_direction=notes.music_direction,
            export_tips=notes.export_tips,
        )
