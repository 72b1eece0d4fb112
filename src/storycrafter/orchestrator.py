from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Tuple

from storycrafter.common.model import WireModel
from storycrafter.config import CrafterConfig
from storycrafter.lexicon.tables import resolve_bundle
from storycrafter.narrative.composer import NarrativeComposer
from storycrafter.narrative.model import Beat, GenerationRequest
from storycrafter.production.model import CapCutPlan
from storycrafter.production.notes import ProductionNotesComposer
from storycrafter.timeline.mapper import SceneMapper

logger = logging.getLogger(__name__)


class StoryResult(WireModel):
    story: str
    word_count: int
    beats: Tuple[Beat, ...]
    tone: str
    pace: str
    capcut: CapCutPlan


@dataclass
class StorySynthesizer:
    composer: NarrativeComposer
    mapper: SceneMapper
    notes_composer: ProductionNotesComposer

    @classmethod
    def default(cls, config: CrafterConfig | None = None) -> "StorySynthesizer":
        config = config or CrafterConfig()
        return cls(
            composer=NarrativeComposer(target_words=config.target_words, max_words=config.max_words),
            mapper=SceneMapper(total_seconds=config.timeline_seconds, scene_count=config.scene_count),
            notes_composer=ProductionNotesComposer(),
        )

    def generate_story(self, request: GenerationRequest | Mapping[str, Any]) -> StoryResult:
        if not isinstance(request, GenerationRequest):
            request = GenerationRequest.model_validate(request)

        bundle = resolve_bundle(request.genre)
        logger.info("Composing %s narrative for %s", bundle.key, request.protagonist)
        narrative = self.composer.compose(request, bundle)

        logger.info("Mapping %d beats onto the timeline", len(narrative.sections))
        scenes = self.mapper.map(narrative, bundle)

        logger.info("Writing production notes")
        notes = self.notes_composer.compose(scenes, bundle)

        return StoryResult(
            story=narrative.story,
            word_count=narrative.word_count,
            beats=narrative.beats,
            tone=narrative.tone,
            pace=narrative.pace,
            capcut=CapCutPlan.assemble(scenes, notes),
        )


_default_synthesizer = StorySynthesizer.default()


def generate_story(request: GenerationRequest | Mapping[str, Any]) -> StoryResult:
    return _default_synthesizer.generate_story(request)
