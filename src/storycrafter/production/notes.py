from __future__ import annotations

import logging
from typing import Sequence

from storycrafter.lexicon.model import GenreBundle
from storycrafter.timeline.model import Scene

from .model import ProductionNotes

logger = logging.getLogger(__name__)

TURNING_LABEL = "Turning Point"


def join_voice_over(scenes: Sequence[Scene]) -> str:
    return " ".join(scene.voice_over.strip() for scene in sorted(scenes, key=lambda s: s.index))


def _beat_spans(scenes: Sequence[Scene]) -> list[tuple[str, int, int]]:
    """(label, first index, last index) for each run of scenes sharing a beat."""
    spans: list[tuple[str, int, int]] = []
    for scene in scenes:
        if spans and spans[-1][0] == scene.beat_label:
            label, first, _ = spans[-1]
            spans[-1] = (label, first, scene.index)
        else:
            spans.append((scene.beat_label, scene.index, scene.index))
    return spans


class ProductionNotesComposer:
    """Derive the voice-over script and edit guidance from a scene timeline."""

    def compose(self, scenes: Sequence[Scene], bundle: GenreBundle) -> ProductionNotes:
        if not scenes:
            raise ValueError("Cannot write production notes for an empty timeline")
        notes = ProductionNotes(
            voice_over_script=join_voice_over(scenes),
            editing_notes=tuple(self._editing_notes(scenes, bundle)),
            music_direction=self._music_direction(bundle),
            export_tips=tuple(self._export_tips(scenes, bundle)),
        )
        logger.debug(
            "Production notes ready: %d editing notes, %d export tips",
            len(notes.editing_notes),
            len(notes.export_tips),
        )
        return notes

    def _editing_notes(self, scenes: Sequence[Scene], bundle: GenreBundle) -> list[str]:
        spans = _beat_spans(scenes)
        seconds = scenes[0].duration_seconds
        notes = [
            f"Cut every {seconds} seconds to hold the {bundle.pace} pace; land each cut on the first word of the next voice-over line.",
            f"Grade the footage {bundle.color_grade} so the {bundle.tone} tone reads from the first frame.",
        ]
        boundaries = [f"{prev[2]}→{nxt[1]}" for prev, nxt in zip(spans, spans[1:])]
        if boundaries:
            notes.append(
                f"Use {bundle.transition} at the beat changes (scenes {', '.join(boundaries)}) and straight cuts inside each beat."
            )
        notes.append(
            f"Style on-screen text as {bundle.overlay_style}; keep each overlay on screen for at least two seconds."
        )
        turning = next((span for span in spans if span[0] == TURNING_LABEL), None)
        if turning:
            notes.append(
                f"Duck the music under the voice-over and let it swell through the {TURNING_LABEL.lower()} (scenes {turning[1]}–{turning[2]})."
            )
        notes.append(
            f"Hold the final frame of scene {scenes[-1].index} for a beat before the cut to black."
        )
        return notes

    @staticmethod
    def _music_direction(bundle: GenreBundle) -> str:
        return (
            f"{bundle.music_palette}, {bundle.tone} in feel and {bundle.pace} at around "
            f"{bundle.tempo_bpm} BPM, building through the turning point and resolving under the final line."
        )

    @staticmethod
    def _export_tips(scenes: Sequence[Scene], bundle: GenreBundle) -> list[str]:
        return [
            "Export at 1080x1920 (9:16) and 30 fps for Reels, Shorts and TikTok.",
            f"Confirm the project runs {scenes[0].start} to {scenes[-1].end} with no gaps between clips.",
            "Turn on auto captions, then correct them against the voice-over script before export.",
            f"Name the file after the story, for example {bundle.key}-one-minute-story.mp4.",
            "Preview the render once on a phone at full volume before posting.",
        ]
