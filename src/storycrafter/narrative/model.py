from __future__ import annotations

from typing import Tuple

from pydantic import Field

from storycrafter.common.model import WireModel


class GenerationRequest(WireModel):
    genre: str
    setting: str
    protagonist: str
    vibe: str


class Beat(WireModel):
    """Structural story unit; scenes are grouped by beat."""

    label: str
    description: str


class BeatSection(WireModel):
    """A beat together with the sentences of the story it owns."""

    label: str
    sentences: Tuple[str, ...] = Field(min_length=1)

    @property
    def description(self) -> str:
        return self.sentences[0]

    @property
    def text(self) -> str:
        return " ".join(self.sentences)

    def to_beat(self) -> Beat:
        return Beat(label=self.label, description=self.description)


class Narrative(WireModel):
    request: GenerationRequest
    sections: Tuple[BeatSection, ...]
    story: str
    word_count: int
    tone: str
    pace: str

    @property
    def beats(self) -> Tuple[Beat, ...]:
        return tuple(section.to_beat() for section in self.sections)
